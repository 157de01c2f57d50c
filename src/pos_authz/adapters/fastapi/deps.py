"""FastAPI adapter – principal dependencies.

Route handlers receive the principal the gatekeeper middleware attached to
the request::

    @router.post("/api/outlets/{outlet_id}/close")
    async def close(outlet_id: int, principal: PrincipalDep) -> None: ...
"""
from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from pos_authz.adapters.fastapi.middleware import PRINCIPAL_STATE_KEY
from pos_authz.kernel.errors import UnauthorizedError
from pos_authz.kernel.security.principal import Principal


def get_principal(request: Request) -> Principal | None:
    """The request's principal, or ``None`` on public routes."""
    principal = request.scope.get("state", {}).get(PRINCIPAL_STATE_KEY)
    return principal if isinstance(principal, Principal) else None


def require_principal(request: Request) -> Principal:
    """The request's principal; raises :class:`UnauthorizedError` when absent."""
    principal = get_principal(request)
    if principal is None:
        raise UnauthorizedError()
    return principal


PrincipalDep = Annotated[Principal, Depends(require_principal)]
OptionalPrincipalDep = Annotated[Principal | None, Depends(get_principal)]


__all__ = ["OptionalPrincipalDep", "PrincipalDep", "get_principal", "require_principal"]
