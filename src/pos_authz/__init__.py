"""pos-authz – role-based authorization for the POS backend services.

Layers
------
kernel          Error hierarchy, Principal/Role/Permission, registry, path
                resolution, checks and the decision engine.
application     Request gatekeeper, method guard, ownership resolver.
adapters        FastAPI middleware/deps/router and the httpx roster client.
config          ``AUTHZ_*`` settings.
observability   structlog logging and the audit trail.
resilience      Timeout and cache-aside policies for roster lookups.
"""

__version__ = "0.1.0"

from pos_authz.kernel.errors import (
    AccessDeniedError,
    ConfigurationError,
    ForbiddenError,
    UnauthorizedError,
)
from pos_authz.kernel.security import (
    AuthorizationDecision,
    Check,
    CheckKind,
    DecisionEngine,
    Permission,
    PermissionRegistry,
    Principal,
    Role,
)

__all__ = [
    "AccessDeniedError",
    "AuthorizationDecision",
    "Check",
    "CheckKind",
    "ConfigurationError",
    "DecisionEngine",
    "ForbiddenError",
    "Permission",
    "PermissionRegistry",
    "Principal",
    "Role",
    "UnauthorizedError",
    "__version__",
]
