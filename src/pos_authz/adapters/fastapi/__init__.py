"""FastAPI adapter – gatekeeper middleware, exception mapper, deps, introspection router."""
from pos_authz.adapters.fastapi.deps import (
    OptionalPrincipalDep,
    PrincipalDep,
    get_principal,
    require_principal,
)
from pos_authz.adapters.fastapi.exception_mapper import FastAPIExceptionMapper
from pos_authz.adapters.fastapi.middleware import (
    PRINCIPAL_STATE_KEY,
    Authenticator,
    GatekeeperMiddleware,
)
from pos_authz.adapters.fastapi.responses import deny_body
from pos_authz.adapters.fastapi.routers import DEFAULT_PREFIX, AuthzIntrospectionRouter

__all__ = [
    "Authenticator",
    "AuthzIntrospectionRouter",
    "DEFAULT_PREFIX",
    "FastAPIExceptionMapper",
    "GatekeeperMiddleware",
    "OptionalPrincipalDep",
    "PRINCIPAL_STATE_KEY",
    "PrincipalDep",
    "deny_body",
    "get_principal",
    "require_principal",
]
