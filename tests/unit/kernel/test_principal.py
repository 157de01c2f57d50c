"""Unit tests for Role, Permission and Principal value types."""

from __future__ import annotations

import pytest

from pos_authz.kernel.errors import ConfigurationError, UnknownPermissionError, UnknownRoleError
from pos_authz.kernel.security import Action, Permission, Principal, Role


class TestRole:
    def test_valid_role(self) -> None:
        assert Role("ADMIN").name == "ADMIN"
        assert str(Role("STORE_LEAD")) == "STORE_LEAD"

    @pytest.mark.parametrize("bad", ["", "admin", "1ADMIN", "AD MIN", "AD-MIN"])
    def test_malformed_role_rejected(self, bad: str) -> None:
        with pytest.raises(UnknownRoleError):
            Role(bad)

    @pytest.mark.parametrize("raw", ["ADMIN", "admin", "ROLE_ADMIN", "role_admin", " Admin "])
    def test_parse_normalises(self, raw: str) -> None:
        assert Role.parse(raw) == Role("ADMIN")

    @pytest.mark.parametrize("raw", [None, 42, "", "not a role", "9LIVES"])
    def test_parse_rejects_garbage(self, raw: object) -> None:
        assert Role.parse(raw) is None

    def test_parse_passes_role_through(self) -> None:
        role = Role("KITCHEN")
        assert Role.parse(role) is role

    def test_is_frozen(self) -> None:
        role = Role("ADMIN")
        with pytest.raises((AttributeError, TypeError)):
            role.name = "STAFF"  # type: ignore[misc]


class TestPermission:
    def test_parts(self) -> None:
        p = Permission("STOCK_MOVEMENTS_WRITE")
        assert p.resource == "STOCK_MOVEMENTS"
        assert p.action is Action.WRITE

    @pytest.mark.parametrize("bad", ["USERS", "USERS_FLY", "users_read", "_READ", "USERS__READ", ""])
    def test_malformed_permission_rejected(self, bad: str) -> None:
        with pytest.raises(UnknownPermissionError):
            Permission(bad)

    def test_of_uppercases(self) -> None:
        assert Permission.of("products", "read") == Permission("PRODUCTS_READ")
        assert Permission.of("outlets", Action.ADMIN).value == "OUTLETS_ADMIN"

    def test_of_rejects_unknown_action(self) -> None:
        with pytest.raises(ConfigurationError):
            Permission.of("PRODUCTS", "FLY")

    def test_is_well_formed(self) -> None:
        assert Permission.is_well_formed("AUDIT_READ")
        assert not Permission.is_well_formed("AUDIT")
        assert not Permission.is_well_formed(None)


class TestPrincipal:
    def test_from_claims_normalises_roles(self) -> None:
        p = Principal.from_claims(identity="42", roles=["ROLE_MANAGER", "cashier"], department="Deli")
        assert p.id == 42
        assert p.role_names == frozenset({"MANAGER", "CASHIER"})
        assert p.department == "Deli"

    def test_from_claims_drops_unparsable_roles(self) -> None:
        p = Principal.from_claims(identity=1, roles=["", None, "???", "STAFF"])
        assert p.role_names == frozenset({"STAFF"})

    def test_empty_department_becomes_none(self) -> None:
        assert Principal.from_claims(identity=1, department="").department is None

    def test_has_role(self) -> None:
        p = Principal(id=1, roles=frozenset({Role("STAFF")}))
        assert p.has_role("STAFF")
        assert p.has_role(Role("STAFF"))
        assert not p.has_role("ADMIN")

    def test_is_frozen(self) -> None:
        p = Principal(id=1)
        with pytest.raises((AttributeError, TypeError)):
            p.id = 2  # type: ignore[misc]
