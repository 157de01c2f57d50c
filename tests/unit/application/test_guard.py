"""Unit tests for MethodGuard decorators and imperative checks."""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest

from pos_authz.application import InMemoryRosterSource, MethodGuard, OwnershipResolver
from pos_authz.kernel.errors import (
    AccessDeniedError,
    ConfigurationError,
    UnauthorizedError,
    UnknownPermissionError,
    UnknownRoleError,
)
from pos_authz.kernel.security import Check, DecisionEngine, PermissionRegistry, Principal, Role
from pos_authz.observability.logging import AuditLogger, AuditOutcome


def principal(*roles: str, id: int = 1, department: str | None = None) -> Principal:
    return Principal(id=id, roles=frozenset(Role(r) for r in roles), department=department)


@pytest.fixture()
def roster() -> InMemoryRosterSource:
    source = InMemoryRosterSource()
    source.assign(user_id=2, outlet_id=10, role="MANAGER")
    source.assign(user_id=3, outlet_id=10, role="CASHIER")
    source.assign(user_id=4, outlet_id=20, role="CASHIER")
    return source


@pytest.fixture()
def audit() -> MagicMock:
    return MagicMock(spec=AuditLogger)


@pytest.fixture()
def guard(roster: InMemoryRosterSource, audit: MagicMock) -> MethodGuard:
    engine = DecisionEngine(PermissionRegistry.default(), OwnershipResolver(roster))
    return MethodGuard(engine, audit=audit)


# ---------------------------------------------------------------------------
# Decoration-time validation
# ---------------------------------------------------------------------------


class TestDeclaration:
    def test_unknown_permission_is_rejected(self, guard: MethodGuard) -> None:
        with pytest.raises(UnknownPermissionError):
            guard.require_permission("PRODUCTS_FLY")

    def test_permission_no_role_grants_is_rejected(self, guard: MethodGuard) -> None:
        with pytest.raises(UnknownPermissionError):
            guard.require_permission("REPORTS_DELETE")

    def test_unknown_role_is_rejected(self, guard: MethodGuard) -> None:
        with pytest.raises(UnknownRoleError):
            guard.require_any_role("STAFF", "JANITOR")

    def test_empty_any_permission_is_rejected(self, guard: MethodGuard) -> None:
        with pytest.raises(ConfigurationError):
            guard.require_any_permission()

    def test_invalid_minimum_level(self, guard: MethodGuard) -> None:
        with pytest.raises(ConfigurationError):
            guard.require_minimum_level(0)

    def test_missing_principal_argument(self, guard: MethodGuard) -> None:
        with pytest.raises(ConfigurationError):

            @guard.require_admin()
            def f(user: Principal) -> None: ...

    def test_missing_target_argument(self, guard: MethodGuard) -> None:
        with pytest.raises(ConfigurationError):

            @guard.require_owner_or_admin("owner_id")
            def f(principal: Principal, user_id: int) -> None: ...

    def test_ownership_check_needs_async_callable(self, guard: MethodGuard) -> None:
        with pytest.raises(ConfigurationError):

            @guard.require_outlet_access("outlet_id")
            def f(principal: Principal, outlet_id: int) -> None: ...

    def test_wrapper_keeps_metadata(self, guard: MethodGuard) -> None:
        @guard.require_permission("PRODUCTS_READ")
        def list_products(principal: Principal) -> list[str]:
            """List products."""
            return []

        assert list_products.__name__ == "list_products"
        assert list_products.__doc__ == "List products."
        assert list_products.__authz_check__ == Check.permission("PRODUCTS_READ")


# ---------------------------------------------------------------------------
# Synchronous guarded calls
# ---------------------------------------------------------------------------


class TestSyncGuard:
    def test_allowed_call_runs_body(self, guard: MethodGuard) -> None:
        @guard.require_permission("PRODUCTS_READ")
        def read(principal: Principal, sku: str) -> str:
            return sku

        assert read(principal("KITCHEN"), "A-1") == "A-1"
        assert read(principal=principal("KITCHEN"), sku="A-2") == "A-2"

    def test_denied_call_never_runs_body(self, guard: MethodGuard, audit: MagicMock) -> None:
        body = MagicMock()

        @guard.require_permission("PRODUCTS_DELETE")
        def delete(principal: Principal, sku: str) -> None:
            body(sku)

        with pytest.raises(AccessDeniedError) as exc_info:
            delete(principal("STAFF", id=7), "A-1")
        body.assert_not_called()
        err = exc_info.value
        assert err.message == "Insufficient permissions: PRODUCTS_DELETE"
        assert err.permission == "PRODUCTS_DELETE"
        assert err.check == "permission(PRODUCTS_DELETE)"
        assert err.detail == {"reason": "missing_permission"}
        assert audit.log_access.call_args.kwargs["outcome"] is AuditOutcome.DENIED

    def test_missing_principal_raises_unauthorized(
        self, guard: MethodGuard, audit: MagicMock
    ) -> None:
        @guard.require_admin()
        def purge(principal: Principal | None = None) -> None: ...

        with pytest.raises(UnauthorizedError):
            purge()
        with pytest.raises(UnauthorizedError):
            purge("not a principal")  # type: ignore[arg-type]
        assert audit.log_access.call_args.kwargs["outcome"] is AuditOutcome.UNAUTHENTICATED

    def test_principal_without_roles_is_denied(self, guard: MethodGuard) -> None:
        @guard.require_permission("PRODUCTS_READ")
        def noop(principal: Principal) -> None: ...

        with pytest.raises(AccessDeniedError):
            noop(Principal(id=1))
        noop(principal("KITCHEN"))

    def test_all_permissions_reports_first_missing(self, guard: MethodGuard) -> None:
        @guard.require_all_permissions("PRODUCTS_READ", "PRODUCTS_WRITE", "PRODUCTS_DELETE")
        def edit(principal: Principal) -> None: ...

        with pytest.raises(AccessDeniedError) as exc_info:
            edit(principal("CASHIER"))
        assert exc_info.value.permission == "PRODUCTS_WRITE"

    def test_any_role(self, guard: MethodGuard) -> None:
        @guard.require_any_role("CASHIER", "STAFF")
        def till(principal: Principal) -> str:
            return "ok"

        assert till(principal("STAFF")) == "ok"
        with pytest.raises(AccessDeniedError) as exc_info:
            till(principal("KITCHEN"))
        assert exc_info.value.role == "CASHIER, STAFF"
        assert exc_info.value.message == "Insufficient role"

    def test_require_role(self, guard: MethodGuard) -> None:
        @guard.require_role("KITCHEN")
        def fire(principal: Principal) -> None: ...

        with pytest.raises(AccessDeniedError) as exc_info:
            fire(principal("CASHIER"))
        assert exc_info.value.message == "Insufficient role: KITCHEN"

    def test_admin_and_manager(self, guard: MethodGuard) -> None:
        @guard.require_admin()
        def wipe(principal: Principal) -> None: ...

        @guard.require_manager()
        def approve(principal: Principal) -> None: ...

        approve(principal("ADMIN"))
        approve(principal("MANAGER"))
        with pytest.raises(AccessDeniedError) as exc_info:
            wipe(principal("MANAGER"))
        assert exc_info.value.role == "ADMIN"
        assert exc_info.value.message == "Admin access required"
        with pytest.raises(AccessDeniedError) as exc_info:
            approve(principal("STAFF"))
        assert exc_info.value.role == "MANAGER, ADMIN"

    def test_owner_or_admin(self, guard: MethodGuard) -> None:
        @guard.require_owner_or_admin("user_id")
        def profile(principal: Principal, user_id: int) -> int:
            return user_id

        assert profile(principal("CASHIER", id=5), 5) == 5
        assert profile(principal("ADMIN", id=1), user_id=5) == 5
        with pytest.raises(AccessDeniedError):
            profile(principal("MANAGER", id=2), 5)

    def test_department(self, guard: MethodGuard) -> None:
        @guard.require_department("department")
        def schedule(principal: Principal, department: str) -> None: ...

        schedule(principal("STAFF", department="Deli"), "Deli")
        schedule(principal("MANAGER", department="Deli"), "Bakery")
        with pytest.raises(AccessDeniedError):
            schedule(principal("STAFF", department="Deli"), "Bakery")

    def test_minimum_level(self, guard: MethodGuard) -> None:
        @guard.require_minimum_level(3)
        def count(principal: Principal) -> None: ...

        count(principal("STAFF"))
        with pytest.raises(AccessDeniedError):
            count(principal("CASHIER"))

    def test_custom_principal_argument(self) -> None:
        guard = MethodGuard(DecisionEngine(PermissionRegistry.default()), principal_arg="actor")

        @guard.require_admin()
        def shutdown(actor: Principal) -> str:
            return "down"

        assert shutdown(principal("ADMIN")) == "down"


# ---------------------------------------------------------------------------
# Async guarded calls
# ---------------------------------------------------------------------------


class TestAsyncGuard:
    def test_async_permission(self, guard: MethodGuard) -> None:
        @guard.require_permission("TRANSACTIONS_WRITE")
        async def charge(principal: Principal, amount: int) -> int:
            return amount

        assert asyncio.run(charge(principal("CASHIER"), 5)) == 5
        with pytest.raises(AccessDeniedError):
            asyncio.run(charge(principal("KITCHEN"), 5))

    def test_outlet_access(self, guard: MethodGuard) -> None:
        @guard.require_outlet_access("outlet_id")
        async def close_till(principal: Principal, outlet_id: int) -> str:
            return f"closed {outlet_id}"

        assert asyncio.run(close_till(principal("CASHIER", id=3), 10)) == "closed 10"
        assert asyncio.run(close_till(principal("ADMIN", id=99), 20)) == "closed 20"
        with pytest.raises(AccessDeniedError) as exc_info:
            asyncio.run(close_till(principal("CASHIER", id=3), 20))
        assert exc_info.value.message == "Outlet access denied"

    def test_user_data_access(self, guard: MethodGuard) -> None:
        @guard.require_user_data_access("owner_id")
        async def edit_shift(principal: Principal, owner_id: int) -> bool:
            return True

        assert asyncio.run(edit_shift(principal("MANAGER", id=2), 3))
        with pytest.raises(AccessDeniedError):
            asyncio.run(edit_shift(principal("MANAGER", id=2), 4))
        with pytest.raises(AccessDeniedError):
            asyncio.run(edit_shift(principal("STAFF", id=3), 2))


class TestImperative:
    def test_check_raises(self, guard: MethodGuard) -> None:
        guard.check(principal("MANAGER"), Check.permission("REPORTS_READ"))
        with pytest.raises(AccessDeniedError):
            guard.check(principal("CASHIER"), Check.permission("REPORTS_READ"))
        with pytest.raises(UnauthorizedError):
            guard.check(None, Check.admin())

    def test_check_validates_names(self, guard: MethodGuard) -> None:
        with pytest.raises(UnknownPermissionError):
            guard.check(principal("ADMIN"), Check.permission("REPORTS_DELETE"))

    def test_check_async_ownership(self, guard: MethodGuard) -> None:
        asyncio.run(guard.check_async(principal("STAFF", id=4), Check.outlet_access(), 20))
        with pytest.raises(AccessDeniedError):
            asyncio.run(guard.check_async(principal("STAFF", id=4), Check.outlet_access(), 10))
