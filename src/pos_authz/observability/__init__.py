"""Observability – logging and audit."""
from pos_authz.observability.logging import (
    AuditLogger,
    AuditOutcome,
    JsonLoggerFactory,
    SensitiveFieldsFilter,
    get_logger,
)

__all__ = [
    "AuditLogger",
    "AuditOutcome",
    "JsonLoggerFactory",
    "SensitiveFieldsFilter",
    "get_logger",
]
