"""FastAPI adapter – FastAPIExceptionMapper."""
from __future__ import annotations

from typing import Any, Callable

from fastapi.responses import JSONResponse

from pos_authz.adapters.fastapi.responses import deny_body, deny_headers
from pos_authz.kernel.errors import (
    AccessDeniedError,
    BaseError,
    ConfigurationError,
    ForbiddenError,
    InfrastructureError,
    TimeoutError,
    UnauthorizedError,
)


class FastAPIExceptionMapper:
    """Register pos-authz error → HTTP status-code mappings on a FastAPI app.

    Error body schema::

        {"success": false, "message": "...", "code": "forbidden",
         "timestamp": "...", "permission": "PRODUCTS_DELETE"}

    Mappings
    --------
    ``UnauthorizedError``   → 401 (with ``WWW-Authenticate: Bearer``)
    ``ForbiddenError``      → 403
    ``TimeoutError``        → 504
    ``InfrastructureError`` → 503
    ``ConfigurationError``  → 500
    """

    def __init__(self) -> None:
        # ORDER MATTERS: more-specific subtypes first
        self._map: list[tuple[type[Exception], int]] = [
            (UnauthorizedError, 401),
            (ForbiddenError, 403),
            (TimeoutError, 504),
            (InfrastructureError, 503),
            (ConfigurationError, 500),
        ]

    @property
    def mappings(self) -> list[tuple[type[Exception], int]]:
        return list(self._map)

    def register(self, app: Any) -> None:
        """Register all error handlers on a ``FastAPI`` or ``Starlette`` app."""
        for exc_type, status in self._map:
            app.add_exception_handler(exc_type, self._make_handler(status))

    @staticmethod
    def _make_handler(code: int) -> Callable[[Any, Any], Any]:
        def handler(request: Any, exc: Any) -> Any:  # noqa: ARG001
            if isinstance(exc, AccessDeniedError):
                body = deny_body(exc.message, exc.code, permission=exc.permission, role=exc.role)
            elif isinstance(exc, ForbiddenError):
                body = deny_body(exc.message, exc.code, permission=exc.permission)
            elif isinstance(exc, BaseError):
                body = deny_body(exc.message, exc.code)
            else:
                body = deny_body(str(exc), "error")
            return JSONResponse(status_code=code, content=body, headers=deny_headers(code))

        return handler


__all__ = ["FastAPIExceptionMapper"]
