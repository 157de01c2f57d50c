"""Kernel security – declarative authorization checks.

A :class:`Check` is a tagged value (kind + parameters) evaluated by
:meth:`DecisionEngine.evaluate`.  The set of kinds is fixed, so the method
guard, the gatekeeper and imperative callers all go through one dispatcher.
"""
from __future__ import annotations

import dataclasses
from enum import Enum

from pos_authz.kernel.errors import ConfigurationError


class CheckKind(str, Enum):
    PERMISSION = "permission"
    ANY_PERMISSION = "any_permission"
    ALL_PERMISSIONS = "all_permissions"
    ROLE = "role"
    ANY_ROLE = "any_role"
    ADMIN = "admin"
    MANAGER_OR_ADMIN = "manager_or_admin"
    OWNER_OR_ADMIN = "owner_or_admin"
    DEPARTMENT = "department"
    MIN_LEVEL = "min_level"
    OUTLET_ACCESS = "outlet_access"
    MODIFY_USER_DATA = "modify_user_data"


# Kinds whose answer depends on a value taken from the guarded call.
TARGETED_KINDS = frozenset({
    CheckKind.OWNER_OR_ADMIN,
    CheckKind.DEPARTMENT,
    CheckKind.OUTLET_ACCESS,
    CheckKind.MODIFY_USER_DATA,
})

# Kinds that need the ownership resolver (network) and so only run async.
ASYNC_KINDS = frozenset({CheckKind.OUTLET_ACCESS, CheckKind.MODIFY_USER_DATA})

PERMISSION_KINDS = frozenset({
    CheckKind.PERMISSION,
    CheckKind.ANY_PERMISSION,
    CheckKind.ALL_PERMISSIONS,
})

ROLE_KINDS = frozenset({CheckKind.ROLE, CheckKind.ANY_ROLE})


@dataclasses.dataclass(frozen=True)
class Check:
    """One authorization predicate with its parameters.

    ``values`` holds permission or role names, ``level`` the minimum
    hierarchy level and ``argument`` the name of the call argument that
    supplies the target (owner id, department, outlet id).
    """

    kind: CheckKind
    values: tuple[str, ...] = ()
    level: int | None = None
    argument: str | None = None

    def __post_init__(self) -> None:
        if self.kind in (CheckKind.PERMISSION, CheckKind.ROLE) and len(self.values) != 1:
            raise ConfigurationError(f"{self.kind.value} check needs exactly one value")
        if self.kind is CheckKind.MIN_LEVEL and self.level is None:
            raise ConfigurationError("min_level check needs a level")

    @property
    def is_async(self) -> bool:
        return self.kind in ASYNC_KINDS

    @property
    def is_targeted(self) -> bool:
        return self.kind in TARGETED_KINDS

    def describe(self) -> str:
        """Short label used in logs and deny reasons."""
        if self.values:
            return f"{self.kind.value}({', '.join(self.values)})"
        if self.level is not None:
            return f"{self.kind.value}({self.level})"
        if self.argument is not None:
            return f"{self.kind.value}[{self.argument}]"
        return self.kind.value

    # -- constructors --------------------------------------------------

    @classmethod
    def permission(cls, permission: str) -> "Check":
        return cls(CheckKind.PERMISSION, (str(permission),))

    @classmethod
    def any_permission(cls, *permissions: str) -> "Check":
        return cls(CheckKind.ANY_PERMISSION, tuple(str(p) for p in permissions))

    @classmethod
    def all_permissions(cls, *permissions: str) -> "Check":
        return cls(CheckKind.ALL_PERMISSIONS, tuple(str(p) for p in permissions))

    @classmethod
    def role(cls, role: str) -> "Check":
        return cls(CheckKind.ROLE, (str(role),))

    @classmethod
    def any_role(cls, *roles: str) -> "Check":
        return cls(CheckKind.ANY_ROLE, tuple(str(r) for r in roles))

    @classmethod
    def admin(cls) -> "Check":
        return cls(CheckKind.ADMIN)

    @classmethod
    def manager_or_admin(cls) -> "Check":
        return cls(CheckKind.MANAGER_OR_ADMIN)

    @classmethod
    def owner_or_admin(cls, argument: str | None = None) -> "Check":
        return cls(CheckKind.OWNER_OR_ADMIN, argument=argument)

    @classmethod
    def department(cls, argument: str | None = None) -> "Check":
        return cls(CheckKind.DEPARTMENT, argument=argument)

    @classmethod
    def minimum_level(cls, level: int) -> "Check":
        return cls(CheckKind.MIN_LEVEL, level=level)

    @classmethod
    def outlet_access(cls, argument: str | None = None) -> "Check":
        return cls(CheckKind.OUTLET_ACCESS, argument=argument)

    @classmethod
    def modify_user_data(cls, argument: str | None = None) -> "Check":
        return cls(CheckKind.MODIFY_USER_DATA, argument=argument)


__all__ = [
    "ASYNC_KINDS",
    "Check",
    "CheckKind",
    "PERMISSION_KINDS",
    "ROLE_KINDS",
    "TARGETED_KINDS",
]
