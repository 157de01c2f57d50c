"""Kernel security – Principal, Role, Permission value types."""
from __future__ import annotations

import dataclasses
import re
from enum import Enum
from typing import Any, Iterable

from pos_authz.kernel.errors import UnknownPermissionError, UnknownRoleError

_ROLE_RE = re.compile(r"^[A-Z][A-Z0-9_]*$")
_PERMISSION_RE = re.compile(r"^([A-Z][A-Z0-9]*(?:_[A-Z0-9]+)*)_(READ|WRITE|DELETE|ADMIN)$")

# Spring-style authorities ("ROLE_ADMIN") are accepted from upstream services.
_ROLE_PREFIX = "ROLE_"


class Action(str, Enum):
    """Fixed action vocabulary of a permission."""

    READ = "READ"
    WRITE = "WRITE"
    DELETE = "DELETE"
    ADMIN = "ADMIN"


@dataclasses.dataclass(frozen=True, order=True)
class Role:
    """Named role (e.g. ADMIN, CASHIER)."""

    name: str

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not _ROLE_RE.match(self.name):
            raise UnknownRoleError(str(self.name), f"Malformed role name {self.name!r}")

    def __str__(self) -> str:
        return self.name

    @classmethod
    def parse(cls, raw: Any) -> "Role | None":
        """Normalise an upstream role string; ``None`` when it cannot be a role.

        ``"role_admin"``, ``"ROLE_ADMIN"`` and ``"ADMIN"`` all yield ``Role("ADMIN")``.
        """
        if isinstance(raw, Role):
            return raw
        if not isinstance(raw, str):
            return None
        name = raw.strip().upper()
        if name.startswith(_ROLE_PREFIX) and len(name) > len(_ROLE_PREFIX):
            name = name[len(_ROLE_PREFIX):]
        if not _ROLE_RE.match(name):
            return None
        return cls(name)


@dataclasses.dataclass(frozen=True, order=True)
class Permission:
    """``RESOURCE_ACTION`` permission value (e.g. ``USERS_READ``)."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not _PERMISSION_RE.match(self.value):
            raise UnknownPermissionError(
                str(self.value), f"Malformed permission {self.value!r}"
            )

    def __str__(self) -> str:
        return self.value

    @property
    def resource(self) -> str:
        return self.value.rsplit("_", 1)[0]

    @property
    def action(self) -> Action:
        return Action(self.value.rsplit("_", 1)[1])

    @classmethod
    def of(cls, resource: str, action: str | Action) -> "Permission":
        """Build ``RESOURCE_ACTION`` from its parts; the action is upper-cased."""
        act = action.value if isinstance(action, Action) else str(action).upper()
        return cls(f"{resource.upper()}_{act}")

    @staticmethod
    def is_well_formed(value: Any) -> bool:
        return isinstance(value, str) and _PERMISSION_RE.match(value) is not None


@dataclasses.dataclass(frozen=True)
class Principal:
    """Authenticated caller.

    Built once per request by the authentication collaborator and never
    mutated afterwards.
    """

    id: int
    roles: frozenset[Role] = frozenset()
    department: str | None = None
    username: str | None = None

    def has_role(self, role: str | Role) -> bool:
        name = role.name if isinstance(role, Role) else role
        return any(r.name == name for r in self.roles)

    @property
    def role_names(self) -> frozenset[str]:
        return frozenset(r.name for r in self.roles)

    @classmethod
    def from_claims(
        cls,
        *,
        identity: int | str,
        roles: Iterable[Any] = (),
        department: str | None = None,
        username: str | None = None,
    ) -> "Principal":
        """Build a principal from verified token / session claims.

        Role strings that cannot be normalised into a :class:`Role` are
        dropped, so they never grant anything.
        """
        parsed = frozenset(r for r in (Role.parse(raw) for raw in roles) if r is not None)
        return cls(
            id=int(identity),
            roles=parsed,
            department=department or None,
            username=username,
        )


__all__ = ["Action", "Permission", "Principal", "Role"]
