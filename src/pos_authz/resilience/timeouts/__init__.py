"""Resilience – timeout policies."""
from pos_authz.resilience.timeouts.policy import TimeoutPolicy

__all__ = ["TimeoutPolicy"]
