"""Application gatekeeper – request-boundary authorization."""
from pos_authz.application.gatekeeper.gate import (
    FORBIDDEN_MESSAGE,
    UNAUTHENTICATED_MESSAGE,
    GateDecision,
    GateOutcome,
    Gatekeeper,
)

__all__ = [
    "FORBIDDEN_MESSAGE",
    "GateDecision",
    "GateOutcome",
    "Gatekeeper",
    "UNAUTHENTICATED_MESSAGE",
]
