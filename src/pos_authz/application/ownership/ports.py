"""Application ownership – roster models and port."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Protocol, runtime_checkable

from pos_authz.kernel.errors import SerializationError

__all__ = [
    "InMemoryRosterSource",
    "OutletAssignment",
    "RosterSource",
    "StaffAssignment",
]

_INACTIVE = frozenset({"INACTIVE", "REMOVED", "SUSPENDED", "TERMINATED"})


@dataclass(frozen=True)
class StaffAssignment:
    """One user assigned to one outlet, as reported by the roster service."""

    user_id: int
    outlet_id: int
    username: str | None = None
    role: str | None = None
    status: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status is None or self.status.upper() not in _INACTIVE

    @classmethod
    def from_payload(
        cls,
        item: Mapping[str, Any],
        *,
        user_id: int | None = None,
        outlet_id: int | None = None,
    ) -> "StaffAssignment":
        """Build from a roster JSON object (``userId`` / ``outletId`` keys).

        The outlet staff listing omits ``outletId`` and the user outlet
        listing may omit ``userId``; the caller supplies the one it asked for.
        """
        try:
            user_id = item.get("userId", item.get("user_id", user_id))
            outlet_id = item.get("outletId", item.get("outlet_id", outlet_id))
            if user_id is None or outlet_id is None:
                raise KeyError("userId/outletId")
            return cls(
                user_id=int(user_id),
                outlet_id=int(outlet_id),
                username=item.get("username"),
                role=item.get("role"),
                status=item.get("status"),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise SerializationError(
                f"Malformed staff assignment: {item!r}",
                payload_type="StaffAssignment",
                cause=exc,
            ) from exc


# The same record answers both "who works here" and "where does this user work".
OutletAssignment = StaffAssignment


@runtime_checkable
class RosterSource(Protocol):
    """Port: staff assignment lookups owned by the outlet service."""

    async def staff_of_outlet(self, outlet_id: int) -> list[StaffAssignment]: ...

    async def outlets_of_user(self, user_id: int) -> list[OutletAssignment]: ...


class InMemoryRosterSource:
    """RosterSource backed by a list of assignments; for tests and local runs."""

    def __init__(self, assignments: Iterable[StaffAssignment] = ()) -> None:
        self._assignments: list[StaffAssignment] = list(assignments)
        self.calls: list[tuple[str, int]] = []

    def assign(self, user_id: int, outlet_id: int, role: str | None = None) -> None:
        self._assignments.append(StaffAssignment(user_id=user_id, outlet_id=outlet_id, role=role))

    async def staff_of_outlet(self, outlet_id: int) -> list[StaffAssignment]:
        self.calls.append(("staff_of_outlet", outlet_id))
        return [a for a in self._assignments if a.outlet_id == outlet_id]

    async def outlets_of_user(self, user_id: int) -> list[OutletAssignment]:
        self.calls.append(("outlets_of_user", user_id))
        return [a for a in self._assignments if a.user_id == user_id]
