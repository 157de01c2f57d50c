"""Unit tests for PermissionRegistry."""

from __future__ import annotations

import pytest

from pos_authz.kernel.errors import ConfigurationError, UnknownPermissionError, UnknownRoleError
from pos_authz.kernel.security import Permission, PermissionRegistry, Role, RoleDefinition
from pos_authz.kernel.security import defaults


@pytest.fixture(scope="module")
def registry() -> PermissionRegistry:
    return PermissionRegistry.default()


class TestRolePermissions:
    def test_admin_holds_every_default_permission(self, registry: PermissionRegistry) -> None:
        every = set()
        for perms in defaults.DEFAULT_ROLE_PERMISSIONS.values():
            every |= perms
        assert {p.value for p in registry.permissions_of("ADMIN")} == every

    def test_cashier_permissions(self, registry: PermissionRegistry) -> None:
        assert {p.value for p in registry.permissions_of("CASHIER")} == {
            "PRODUCTS_READ",
            "TRANSACTIONS_READ",
            "TRANSACTIONS_WRITE",
            "CUSTOMERS_READ",
            "CUSTOMERS_WRITE",
        }

    @pytest.mark.parametrize("role", ["WIZARD", "", "not-a-role", Role("GHOST")])
    def test_unknown_role_has_no_permissions(self, registry: PermissionRegistry, role: object) -> None:
        assert registry.permissions_of(role) == frozenset()  # type: ignore[arg-type]

    def test_grants(self, registry: PermissionRegistry) -> None:
        assert registry.grants("STAFF", "PRODUCTS_READ")
        assert not registry.grants("STAFF", "PRODUCTS_DELETE")

    def test_hierarchy_levels(self, registry: PermissionRegistry) -> None:
        assert registry.hierarchy_level("ADMIN") == 1
        assert registry.hierarchy_level("KITCHEN") == 4
        assert registry.hierarchy_level("WIZARD") is None


class TestIntrospection:
    def test_roles(self, registry: PermissionRegistry) -> None:
        assert {r.name for r in registry.roles()} == {"ADMIN", "MANAGER", "STAFF", "CASHIER", "KITCHEN"}

    def test_is_valid_role(self, registry: PermissionRegistry) -> None:
        assert registry.is_valid_role("KITCHEN")
        assert not registry.is_valid_role("WIZARD")

    def test_is_valid_permission(self, registry: PermissionRegistry) -> None:
        assert registry.is_valid_permission("AUDIT_READ")
        assert not registry.is_valid_permission("REPORTS_DELETE")

    def test_roles_with_permission(self, registry: PermissionRegistry) -> None:
        names = {r.name for r in registry.roles_with_permission("TRANSACTIONS_WRITE")}
        assert names == {"ADMIN", "MANAGER", "STAFF", "CASHIER"}

    def test_role_permissions_is_read_only(self, registry: PermissionRegistry) -> None:
        table = registry.role_permissions()
        with pytest.raises(TypeError):
            table["HACKER"] = frozenset()  # type: ignore[index]

    def test_endpoint_permissions_keyed_by_method_and_template(self, registry: PermissionRegistry) -> None:
        table = registry.endpoint_permissions()
        assert table["DELETE /api/products/{id}"] == Permission("PRODUCTS_DELETE")


class TestValidatedFactories:
    def test_role_factory_returns_known_role(self, registry: PermissionRegistry) -> None:
        assert registry.role("MANAGER") == Role("MANAGER")

    def test_role_factory_rejects_unknown(self, registry: PermissionRegistry) -> None:
        with pytest.raises(UnknownRoleError):
            registry.role("WIZARD")

    def test_permission_factory_returns_known_permission(self, registry: PermissionRegistry) -> None:
        assert registry.permission("USERS_READ") == Permission("USERS_READ")

    def test_permission_factory_rejects_ungranted(self, registry: PermissionRegistry) -> None:
        with pytest.raises(UnknownPermissionError):
            registry.permission("REPORTS_DELETE")

    def test_permission_factory_rejects_malformed(self, registry: PermissionRegistry) -> None:
        with pytest.raises(UnknownPermissionError):
            registry.permission("fly")


class TestConstructionFailsFast:
    def test_malformed_permission_in_role(self) -> None:
        with pytest.raises(ConfigurationError):
            PermissionRegistry([RoleDefinition.of("ADMIN", ["USERS_FLY"])])

    def test_malformed_role_name(self) -> None:
        with pytest.raises(ConfigurationError):
            PermissionRegistry([RoleDefinition.of("admin", ["USERS_READ"])])

    def test_duplicate_role(self) -> None:
        with pytest.raises(ConfigurationError):
            PermissionRegistry([
                RoleDefinition.of("ADMIN", ["USERS_READ"]),
                RoleDefinition.of("ADMIN", ["USERS_WRITE"]),
            ])

    def test_malformed_endpoint_permission(self) -> None:
        with pytest.raises(ConfigurationError):
            PermissionRegistry([], [("GET", "/api/x", "X")])

    def test_malformed_method(self) -> None:
        with pytest.raises(ConfigurationError):
            PermissionRegistry([], [("G E T", "/api/x", "X_READ")])

    def test_malformed_template(self) -> None:
        with pytest.raises(ConfigurationError):
            PermissionRegistry([], [("GET", "/api/{id", "X_READ")])

    def test_relative_path_pattern(self) -> None:
        with pytest.raises(ConfigurationError):
            PermissionRegistry([], public_paths=["health"])

    def test_role_with_empty_permission_set_is_valid(self) -> None:
        registry = PermissionRegistry([RoleDefinition.of("GUEST")])
        assert registry.is_valid_role("GUEST")
        assert registry.permissions_of("GUEST") == frozenset()


class TestExtraPaths:
    def test_default_accepts_extra_public_and_admin_only_paths(self) -> None:
        registry = PermissionRegistry.default(
            extra_public_paths=["/api/menu/public/**"],
            extra_admin_only_paths=["/api/outlets/*/settings"],
        )
        assert registry.is_public("/api/menu/public/today")
        assert registry.is_admin_only("/api/outlets/3/settings")
        assert not registry.is_admin_only("/api/outlets/3")
