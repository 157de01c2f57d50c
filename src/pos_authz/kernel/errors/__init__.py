"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── ApplicationError     (application.py)
    │   ├── UnauthorizedError
    │   ├── ForbiddenError
    │   │   └── AccessDeniedError
    │   └── TimeoutError
    ├── ConfigurationError   (configuration.py)
    │   ├── UnknownRoleError
    │   └── UnknownPermissionError
    └── InfrastructureError  (infrastructure.py)
        ├── SerializationError
        └── ExternalServiceError
"""

from pos_authz.kernel.errors.application import (
    AccessDeniedError,
    ApplicationError,
    ForbiddenError,
    TimeoutError,
    UnauthorizedError,
)
from pos_authz.kernel.errors.base import BaseError
from pos_authz.kernel.errors.configuration import (
    ConfigurationError,
    UnknownPermissionError,
    UnknownRoleError,
)
from pos_authz.kernel.errors.infrastructure import (
    ExternalServiceError,
    InfrastructureError,
    SerializationError,
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
    "UnknownPermissionError",
    "UnknownRoleError",
]
