"""Application guard – call-boundary authorization decorators."""
from pos_authz.application.guard.guard import MethodGuard

__all__ = ["MethodGuard"]
