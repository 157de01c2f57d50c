"""Kernel security – Decision Engine.

Every predicate is a pure function of ``(principal, registry)`` and answers
with ``bool``.  A missing principal or a principal without roles is never
an error: each predicate simply answers ``False``.

:meth:`DecisionEngine.evaluate` / :meth:`DecisionEngine.evaluate_async`
dispatch a :class:`~pos_authz.kernel.security.checks.Check` to the matching
predicate and wrap the answer in an :class:`AuthorizationDecision`.  Any
unexpected exception during evaluation becomes a deny decision.

Ownership checks (outlet membership, modifying another user's data) are
delegated to an :class:`OwnershipPolicy`, normally
:class:`~pos_authz.application.ownership.OwnershipResolver`.  Without one
configured those checks deny.
"""

from __future__ import annotations

import dataclasses
import math
from typing import Any, Iterable, Protocol

from pos_authz.kernel.errors import ConfigurationError
from pos_authz.kernel.security import defaults
from pos_authz.kernel.security.checks import Check, CheckKind
from pos_authz.kernel.security.principal import Action, Permission, Principal, Role
from pos_authz.kernel.security.registry import PermissionRegistry
from pos_authz.observability.logging import get_logger

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# AuthorizationDecision
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class AuthorizationDecision:
    """Result of evaluating one check.

    ``reason`` is a stable machine-readable slug (``granted``,
    ``missing_permission``, ``no_principal`` ...); ``detail`` is a short
    human-readable explanation.
    """

    granted: bool
    reason: str
    check: str | None = None
    detail: str | None = None

    @classmethod
    def allow(cls, check: str | None = None) -> "AuthorizationDecision":
        return cls(granted=True, reason="granted", check=check)

    @classmethod
    def deny(
        cls, reason: str, check: str | None = None, detail: str | None = None
    ) -> "AuthorizationDecision":
        return cls(granted=False, reason=reason, check=check, detail=detail)

    def __bool__(self) -> bool:
        return self.granted


# ---------------------------------------------------------------------------
# Ownership port
# ---------------------------------------------------------------------------


class OwnershipPolicy(Protocol):
    """Port: cross-service ownership answers (see ``application.ownership``)."""

    async def can_access_outlet(self, principal: Principal, outlet_id: int) -> bool: ...

    async def can_modify_user_data(self, principal: Principal, owner_id: int) -> bool: ...


def _value(item: str | Permission | Role) -> str:
    if isinstance(item, Permission):
        return item.value
    if isinstance(item, Role):
        return item.name
    return str(item)


# ---------------------------------------------------------------------------
# DecisionEngine
# ---------------------------------------------------------------------------


class DecisionEngine:
    """Evaluates principals against a :class:`PermissionRegistry`."""

    def __init__(
        self,
        registry: PermissionRegistry,
        ownership: OwnershipPolicy | None = None,
    ) -> None:
        self._registry = registry
        self._ownership = ownership

    @property
    def registry(self) -> PermissionRegistry:
        return self._registry

    # -- permission predicates -------------------------------------------

    def has_permission(self, principal: Principal | None, permission: str | Permission) -> bool:
        if not principal or not principal.roles:
            return False
        wanted = _value(permission)
        return any(self._registry.grants(role, wanted) for role in principal.roles)

    def has_any_permission(
        self, principal: Principal | None, *permissions: str | Permission
    ) -> bool:
        return any(self.has_permission(principal, p) for p in permissions)

    def has_all_permissions(
        self, principal: Principal | None, *permissions: str | Permission
    ) -> bool:
        if not principal or not principal.roles:
            return False
        for permission in permissions:
            if not self.has_permission(principal, permission):
                return False
        return True

    def can_access_resource(
        self, principal: Principal | None, resource: str, action: str | Action
    ) -> bool:
        try:
            permission = Permission.of(resource, action)
        except ConfigurationError:
            return False
        return self.has_permission(principal, permission)

    def can_read(self, principal: Principal | None, resource: str) -> bool:
        return self.can_access_resource(principal, resource, Action.READ)

    def can_write(self, principal: Principal | None, resource: str) -> bool:
        return self.can_access_resource(principal, resource, Action.WRITE)

    def can_delete(self, principal: Principal | None, resource: str) -> bool:
        return self.can_access_resource(principal, resource, Action.DELETE)

    def can_admin(self, principal: Principal | None, resource: str) -> bool:
        return self.can_access_resource(principal, resource, Action.ADMIN)

    # -- role predicates -------------------------------------------------

    def has_role(self, principal: Principal | None, role: str | Role) -> bool:
        if not principal or not principal.roles:
            return False
        return principal.has_role(_value(role))

    def has_any_role(self, principal: Principal | None, *roles: str | Role) -> bool:
        return any(self.has_role(principal, r) for r in roles)

    def is_admin(self, principal: Principal | None) -> bool:
        return self.has_role(principal, defaults.ADMIN)

    def is_manager(self, principal: Principal | None) -> bool:
        return self.has_role(principal, defaults.MANAGER)

    def is_staff(self, principal: Principal | None) -> bool:
        return self.has_role(principal, defaults.STAFF)

    def is_cashier(self, principal: Principal | None) -> bool:
        return self.has_role(principal, defaults.CASHIER)

    def is_kitchen(self, principal: Principal | None) -> bool:
        return self.has_role(principal, defaults.KITCHEN)

    def role_level(self, principal: Principal | None) -> float:
        """Best (lowest) hierarchy level across the principal's roles; ``inf`` if none."""
        if not principal or not principal.roles:
            return math.inf
        levels = [self._registry.hierarchy_level(role) for role in principal.roles]
        return min((lvl for lvl in levels if lvl is not None), default=math.inf)

    def has_minimum_role_level(self, principal: Principal | None, level: int) -> bool:
        return self.role_level(principal) <= level

    # -- ownership / department predicates ----------------------------------

    def is_owner_or_admin(self, principal: Principal | None, resource_owner_id: Any) -> bool:
        if not principal or not principal.roles:
            return False
        if self.is_admin(principal):
            return True
        return resource_owner_id is not None and principal.id == _as_int(resource_owner_id)

    def can_access_department(
        self, principal: Principal | None, target_department: str | None
    ) -> bool:
        if not principal or not principal.roles:
            return False
        if self.has_any_role(principal, defaults.ADMIN, defaults.MANAGER):
            return True
        return principal.department is not None and principal.department == target_department

    async def can_access_outlet(self, principal: Principal | None, outlet_id: Any) -> bool:
        if not principal or not principal.roles:
            return False
        if self._ownership is None:
            logger.warning(
                "authz.ownership_unconfigured",
                principal_id=principal.id,
                outlet_id=outlet_id,
            )
            return False
        target = _as_int(outlet_id)
        if target is None:
            return False
        return await self._ownership.can_access_outlet(principal, target)

    async def can_modify_user_data(self, principal: Principal | None, owner_id: Any) -> bool:
        if not principal or not principal.roles:
            return False
        target = _as_int(owner_id)
        if target is None:
            return False
        if principal.id == target or self.is_admin(principal):
            return True
        if self._ownership is None:
            logger.warning(
                "authz.ownership_unconfigured",
                principal_id=principal.id,
                owner_id=owner_id,
            )
            return False
        return await self._ownership.can_modify_user_data(principal, target)

    # -- introspection ---------------------------------------------------

    def effective_roles(self, principal: Principal | None) -> frozenset[Role]:
        return principal.roles if principal else frozenset()

    def effective_permissions(self, principal: Principal | None) -> frozenset[Permission]:
        if not principal:
            return frozenset()
        granted: set[Permission] = set()
        for role in principal.roles:
            granted |= self._registry.permissions_of(role)
        return frozenset(granted)

    # -- dispatcher --------------------------------------------------------

    def evaluate(
        self, principal: Principal | None, check: Check, target: Any = None
    ) -> AuthorizationDecision:
        """Evaluate a synchronous *check*; ownership checks must use :meth:`evaluate_async`."""
        if check.is_async:
            raise ConfigurationError(
                f"{check.kind.value} check needs evaluate_async()"
            )
        label = check.describe()
        if principal is None:
            return AuthorizationDecision.deny("no_principal", label, "Authentication required")
        try:
            granted = self._evaluate_sync(principal, check, target)
        except ConfigurationError:
            raise
        except Exception as exc:  # noqa: BLE001 - fail closed
            logger.error(
                "authz.evaluation_error",
                principal_id=principal.id,
                check=label,
                error=repr(exc),
            )
            return AuthorizationDecision.deny("evaluation_error", label)
        return self._decide(granted, check, label)

    async def evaluate_async(
        self, principal: Principal | None, check: Check, target: Any = None
    ) -> AuthorizationDecision:
        """Evaluate any *check*, awaiting the ownership policy when needed."""
        if not check.is_async:
            return self.evaluate(principal, check, target)
        label = check.describe()
        if principal is None:
            return AuthorizationDecision.deny("no_principal", label, "Authentication required")
        try:
            if check.kind is CheckKind.OUTLET_ACCESS:
                granted = await self.can_access_outlet(principal, target)
            else:
                granted = await self.can_modify_user_data(principal, target)
        except Exception as exc:  # noqa: BLE001 - fail closed
            logger.warning(
                "authz.ownership_error",
                principal_id=principal.id,
                check=label,
                error=repr(exc),
            )
            return AuthorizationDecision.deny("ownership_unavailable", label)
        return self._decide(granted, check, label)

    def _evaluate_sync(self, principal: Principal, check: Check, target: Any) -> bool:
        kind = check.kind
        if kind is CheckKind.PERMISSION:
            return self.has_permission(principal, check.values[0])
        if kind is CheckKind.ANY_PERMISSION:
            return self.has_any_permission(principal, *check.values)
        if kind is CheckKind.ALL_PERMISSIONS:
            return self.has_all_permissions(principal, *check.values)
        if kind is CheckKind.ROLE:
            return self.has_role(principal, check.values[0])
        if kind is CheckKind.ANY_ROLE:
            return self.has_any_role(principal, *check.values)
        if kind is CheckKind.ADMIN:
            return self.is_admin(principal)
        if kind is CheckKind.MANAGER_OR_ADMIN:
            return self.has_any_role(principal, defaults.MANAGER, defaults.ADMIN)
        if kind is CheckKind.OWNER_OR_ADMIN:
            return self.is_owner_or_admin(principal, target)
        if kind is CheckKind.DEPARTMENT:
            return self.can_access_department(principal, target)
        if kind is CheckKind.MIN_LEVEL:
            assert check.level is not None
            return self.has_minimum_role_level(principal, check.level)
        raise ConfigurationError(f"Unsupported check kind {kind!r}")

    @staticmethod
    def _decide(granted: bool, check: Check, label: str) -> AuthorizationDecision:
        if granted:
            return AuthorizationDecision.allow(label)
        return AuthorizationDecision.deny(_DENY_REASONS[check.kind], label)


_DENY_REASONS: dict[CheckKind, str] = {
    CheckKind.PERMISSION: "missing_permission",
    CheckKind.ANY_PERMISSION: "missing_permission",
    CheckKind.ALL_PERMISSIONS: "missing_permission",
    CheckKind.ROLE: "missing_role",
    CheckKind.ANY_ROLE: "missing_role",
    CheckKind.ADMIN: "missing_role",
    CheckKind.MANAGER_OR_ADMIN: "missing_role",
    CheckKind.OWNER_OR_ADMIN: "not_owner",
    CheckKind.DEPARTMENT: "department_mismatch",
    CheckKind.MIN_LEVEL: "insufficient_level",
    CheckKind.OUTLET_ACCESS: "outlet_not_assigned",
    CheckKind.MODIFY_USER_DATA: "not_owner",
}


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def permission_values(items: Iterable[Permission]) -> list[str]:
    return sorted(p.value for p in items)


__all__ = [
    "AuthorizationDecision",
    "DecisionEngine",
    "OwnershipPolicy",
    "permission_values",
]
