"""Kernel – framework-agnostic errors and authorization core."""

from pos_authz.kernel.errors import (
    AccessDeniedError,
    ApplicationError,
    BaseError,
    ConfigurationError,
    ExternalServiceError,
    ForbiddenError,
    InfrastructureError,
    SerializationError,
    TimeoutError,
    UnauthorizedError,
)

__all__ = [
    "AccessDeniedError",
    "ApplicationError",
    "BaseError",
    "ConfigurationError",
    "ExternalServiceError",
    "ForbiddenError",
    "InfrastructureError",
    "SerializationError",
    "TimeoutError",
    "UnauthorizedError",
]
