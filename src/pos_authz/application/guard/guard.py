"""Application guard – call-boundary authorization decorators.

Usage::

    guard = MethodGuard(engine)

    @guard.require_permission("PRODUCTS_DELETE")
    async def delete_product(principal: Principal, product_id: int) -> None: ...

    @guard.require_outlet_access("outlet_id")
    async def close_till(principal: Principal, outlet_id: int) -> None: ...

The principal is an ordinary argument of the guarded callable, found by
name (``principal`` unless configured otherwise).  Checks run before the
body; on failure the body never runs and :class:`UnauthorizedError` or
:class:`AccessDeniedError` is raised.

Everything that can be validated statically is validated when the
decorator is applied: unknown permissions or roles, a missing principal or
target argument, and ownership checks on synchronous callables raise
:class:`ConfigurationError` at import time.
"""
from __future__ import annotations

import functools
import inspect
from typing import Any, Callable, TypeVar

from pos_authz.kernel.errors import AccessDeniedError, ConfigurationError, UnauthorizedError
from pos_authz.kernel.security import defaults
from pos_authz.kernel.security.checks import PERMISSION_KINDS, ROLE_KINDS, Check, CheckKind
from pos_authz.kernel.security.decision import AuthorizationDecision, DecisionEngine
from pos_authz.kernel.security.principal import Principal
from pos_authz.observability.logging import AuditLogger, AuditOutcome, get_logger

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

_DENY_MESSAGES: dict[CheckKind, str] = {
    CheckKind.ANY_PERMISSION: "Insufficient permissions",
    CheckKind.ALL_PERMISSIONS: "Insufficient permissions",
    CheckKind.ANY_ROLE: "Insufficient role",
    CheckKind.ADMIN: "Admin access required",
    CheckKind.MANAGER_OR_ADMIN: "Manager access required",
    CheckKind.OWNER_OR_ADMIN: "Only the owner or an administrator may do this",
    CheckKind.DEPARTMENT: "Department access denied",
    CheckKind.MIN_LEVEL: "Insufficient role level",
    CheckKind.OUTLET_ACCESS: "Outlet access denied",
    CheckKind.MODIFY_USER_DATA: "Not allowed to modify this user's data",
}


class MethodGuard:
    """Decorator factory sharing one :class:`DecisionEngine` with the gatekeeper.

    Parameters
    ----------
    engine:
        The decision engine; its registry validates declared names.
    principal_arg:
        Name of the argument carrying the :class:`Principal`.
    audit:
        Receives one entry per denial.
    """

    def __init__(
        self,
        engine: DecisionEngine,
        principal_arg: str = "principal",
        audit: AuditLogger | None = None,
    ) -> None:
        self._engine = engine
        self._principal_arg = principal_arg
        self._audit = audit

    @property
    def engine(self) -> DecisionEngine:
        return self._engine

    # ------------------------------------------------------------------
    # Decorators
    # ------------------------------------------------------------------

    def require(self, check: Check) -> Callable[[F], F]:
        """Guard a callable with *check*."""
        self._validate(check)

        def decorator(fn: F) -> F:
            signature = inspect.signature(fn)
            self._validate_signature(fn, signature, check)
            is_coroutine = inspect.iscoroutinefunction(fn)
            if check.is_async and not is_coroutine:
                raise ConfigurationError(
                    f"{check.describe()} on {fn.__qualname__} needs an async callable"
                )
            operation = fn.__qualname__

            if is_coroutine:
                @functools.wraps(fn)
                async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                    principal, target = self._extract(signature, check, args, kwargs)
                    decision = await self._engine.evaluate_async(principal, check, target)
                    self._enforce(decision, principal, check, operation)
                    return await fn(*args, **kwargs)

                async_wrapper.__authz_check__ = check  # type: ignore[attr-defined]
                return async_wrapper  # type: ignore[return-value]

            @functools.wraps(fn)
            def wrapper(*args: Any, **kwargs: Any) -> Any:
                principal, target = self._extract(signature, check, args, kwargs)
                decision = self._engine.evaluate(principal, check, target)
                self._enforce(decision, principal, check, operation)
                return fn(*args, **kwargs)

            wrapper.__authz_check__ = check  # type: ignore[attr-defined]
            return wrapper  # type: ignore[return-value]

        return decorator

    def require_permission(self, permission: str) -> Callable[[F], F]:
        return self.require(Check.permission(permission))

    def require_any_permission(self, *permissions: str) -> Callable[[F], F]:
        return self.require(Check.any_permission(*permissions))

    def require_all_permissions(self, *permissions: str) -> Callable[[F], F]:
        return self.require(Check.all_permissions(*permissions))

    def require_role(self, role: str) -> Callable[[F], F]:
        return self.require(Check.role(role))

    def require_any_role(self, *roles: str) -> Callable[[F], F]:
        return self.require(Check.any_role(*roles))

    def require_admin(self) -> Callable[[F], F]:
        return self.require(Check.admin())

    def require_manager(self) -> Callable[[F], F]:
        """Manager or admin."""
        return self.require(Check.manager_or_admin())

    def require_owner_or_admin(self, argument: str) -> Callable[[F], F]:
        return self.require(Check.owner_or_admin(argument))

    def require_department(self, argument: str) -> Callable[[F], F]:
        return self.require(Check.department(argument))

    def require_minimum_level(self, level: int) -> Callable[[F], F]:
        return self.require(Check.minimum_level(level))

    def require_outlet_access(self, argument: str) -> Callable[[F], F]:
        return self.require(Check.outlet_access(argument))

    def require_user_data_access(self, argument: str) -> Callable[[F], F]:
        return self.require(Check.modify_user_data(argument))

    # ------------------------------------------------------------------
    # Imperative checks
    # ------------------------------------------------------------------

    def check(self, principal: Principal | None, check: Check, target: Any = None) -> None:
        """Raise unless *principal* satisfies a synchronous *check*."""
        self._validate(check)
        decision = self._engine.evaluate(principal, check, target)
        self._enforce(decision, principal, check, check.describe())

    async def check_async(
        self, principal: Principal | None, check: Check, target: Any = None
    ) -> None:
        """Raise unless *principal* satisfies *check* (ownership checks included)."""
        self._validate(check)
        decision = await self._engine.evaluate_async(principal, check, target)
        self._enforce(decision, principal, check, check.describe())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _validate(self, check: Check) -> None:
        registry = self._engine.registry
        if check.kind in PERMISSION_KINDS:
            if not check.values:
                raise ConfigurationError(f"{check.kind.value} check names no permission")
            for value in check.values:
                registry.permission(value)
        elif check.kind in ROLE_KINDS:
            if not check.values:
                raise ConfigurationError(f"{check.kind.value} check names no role")
            for value in check.values:
                registry.role(value)
        elif check.kind is CheckKind.MIN_LEVEL:
            if check.level is None or check.level < 1:
                raise ConfigurationError(f"Invalid minimum role level {check.level!r}")

    def _validate_signature(
        self, fn: Callable[..., Any], signature: inspect.Signature, check: Check
    ) -> None:
        names = [self._principal_arg]
        if check.is_targeted:
            if not check.argument:
                raise ConfigurationError(
                    f"{check.kind.value} check on {fn.__qualname__} names no target argument"
                )
            names.append(check.argument)
        for name in names:
            if name not in signature.parameters:
                raise ConfigurationError(
                    f"{fn.__qualname__} has no argument {name!r} required by {check.describe()}"
                )

    def _extract(
        self,
        signature: inspect.Signature,
        check: Check,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> tuple[Principal | None, Any]:
        bound = signature.bind(*args, **kwargs)
        bound.apply_defaults()
        principal = bound.arguments.get(self._principal_arg)
        if not isinstance(principal, Principal):
            principal = None
        target = bound.arguments.get(check.argument) if check.argument else None
        return principal, target

    def _enforce(
        self,
        decision: AuthorizationDecision,
        principal: Principal | None,
        check: Check,
        operation: str,
    ) -> None:
        if decision.granted:
            return
        label = check.describe()
        logger.warning(
            "guard.denied",
            operation=operation,
            principal_id=principal.id if principal else None,
            check=label,
            reason=decision.reason,
        )
        if self._audit is not None:
            self._audit.log_access(
                principal,
                resource=operation,
                action=label,
                outcome=AuditOutcome.UNAUTHENTICATED if principal is None else AuditOutcome.DENIED,
                reason=decision.reason,
            )
        if principal is None:
            raise UnauthorizedError()
        raise AccessDeniedError(
            _message(check),
            permission=_missing_permission(self._engine, principal, check),
            role=_required_role(check),
            check=label,
            detail={"reason": decision.reason},
        )


def _message(check: Check) -> str:
    if check.kind is CheckKind.PERMISSION:
        return f"Insufficient permissions: {check.values[0]}"
    if check.kind is CheckKind.ROLE:
        return f"Insufficient role: {check.values[0]}"
    return _DENY_MESSAGES[check.kind]


def _missing_permission(
    engine: DecisionEngine, principal: Principal, check: Check
) -> str | None:
    if check.kind is CheckKind.ALL_PERMISSIONS:
        for value in check.values:
            if not engine.has_permission(principal, value):
                return value
        return None
    if check.kind in PERMISSION_KINDS:
        return ", ".join(check.values)
    return None


def _required_role(check: Check) -> str | None:
    if check.kind in ROLE_KINDS:
        return ", ".join(check.values)
    if check.kind is CheckKind.ADMIN:
        return defaults.ADMIN
    if check.kind is CheckKind.MANAGER_OR_ADMIN:
        return f"{defaults.MANAGER}, {defaults.ADMIN}"
    return None


__all__ = ["MethodGuard"]
