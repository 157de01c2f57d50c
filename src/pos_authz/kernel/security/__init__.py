"""Kernel security – Principal, Role, Permission, registry, path resolution, decisions."""
from pos_authz.kernel.security.principal import Action, Permission, Principal, Role
from pos_authz.kernel.security.checks import Check, CheckKind
from pos_authz.kernel.security.paths import (
    AntPattern,
    EndpointTemplate,
    PathResolution,
    PathResolver,
    ResolutionSource,
)
from pos_authz.kernel.security.registry import PermissionRegistry, RoleDefinition
from pos_authz.kernel.security.decision import (
    AuthorizationDecision,
    DecisionEngine,
    OwnershipPolicy,
)

__all__ = [
    "Action",
    "AntPattern",
    "AuthorizationDecision",
    "Check",
    "CheckKind",
    "DecisionEngine",
    "EndpointTemplate",
    "OwnershipPolicy",
    "PathResolution",
    "PathResolver",
    "Permission",
    "PermissionRegistry",
    "Principal",
    "ResolutionSource",
    "Role",
    "RoleDefinition",
]
