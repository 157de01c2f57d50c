"""Application – gatekeeper, method guard and ownership resolution."""

from pos_authz.application.gatekeeper import GateDecision, GateOutcome, Gatekeeper
from pos_authz.application.guard import MethodGuard
from pos_authz.application.ownership import (
    InMemoryRosterSource,
    OutletAssignment,
    OwnershipResolver,
    RosterSource,
    StaffAssignment,
)

__all__ = [
    "GateDecision",
    "GateOutcome",
    "Gatekeeper",
    "InMemoryRosterSource",
    "MethodGuard",
    "OutletAssignment",
    "OwnershipResolver",
    "RosterSource",
    "StaffAssignment",
]
