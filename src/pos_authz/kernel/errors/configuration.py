"""Configuration errors – invalid authorization tables, fatal at start-up."""

from __future__ import annotations

from typing import Any

from pos_authz.kernel.errors.base import BaseError


class ConfigurationError(BaseError):
    """Authorization configuration is invalid.

    Raised while building the registry or declaring guarded operations;
    never raised while evaluating a request.
    """

    default_code = "configuration_error"


class UnknownRoleError(ConfigurationError):
    """A role name is malformed or absent from the registry."""

    default_code = "unknown_role"

    def __init__(self, role: str, message: str | None = None, **kwargs: Any) -> None:
        super().__init__(message or f"Unknown role {role!r}", **kwargs)
        self.role = role


class UnknownPermissionError(ConfigurationError):
    """A permission string is malformed or absent from the registry."""

    default_code = "unknown_permission"

    def __init__(self, permission: str, message: str | None = None, **kwargs: Any) -> None:
        super().__init__(message or f"Unknown permission {permission!r}", **kwargs)
        self.permission = permission


__all__ = ["ConfigurationError", "UnknownPermissionError", "UnknownRoleError"]
