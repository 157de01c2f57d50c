"""Application ownership – roster-backed outlet and user-data ownership."""
from pos_authz.application.ownership.ports import (
    InMemoryRosterSource,
    OutletAssignment,
    RosterSource,
    StaffAssignment,
)
from pos_authz.application.ownership.resolver import OwnershipResolver

__all__ = [
    "InMemoryRosterSource",
    "OutletAssignment",
    "OwnershipResolver",
    "RosterSource",
    "StaffAssignment",
]
