"""Application-layer errors – authentication and authorization outcomes."""

from __future__ import annotations

from typing import Any

from pos_authz.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


class UnauthorizedError(ApplicationError):
    """No authenticated principal where one is required."""

    default_code = "unauthorized"

    def __init__(self, message: str = "Authentication required", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class ForbiddenError(ApplicationError):
    """Authenticated principal lacks required permission."""

    default_code = "forbidden"

    def __init__(
        self,
        message: str = "Access denied",
        *,
        permission: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.permission = permission


class AccessDeniedError(ForbiddenError):
    """Raised by the method guard when a declared check fails.

    Carries the missing ``permission`` or ``role`` (when the check names
    one) and the ``check`` label so callers can report what was required.
    """

    def __init__(
        self,
        message: str = "Access denied",
        *,
        permission: str | None = None,
        role: str | None = None,
        check: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, permission=permission, **kwargs)
        self.role = role
        self.check = check

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        if self.permission is not None:
            base["permission"] = self.permission
        if self.role is not None:
            base["role"] = self.role
        if self.check is not None:
            base["check"] = self.check
        return base


class TimeoutError(ApplicationError):  # noqa: A001
    """Operation timed out."""

    default_code = "timeout"


__all__ = [
    "AccessDeniedError",
    "ApplicationError",
    "ForbiddenError",
    "TimeoutError",
    "UnauthorizedError",
]
