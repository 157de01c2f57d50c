"""Observability – structured logging helpers."""
from pos_authz.observability.logging.filters import DEFAULT_SENSITIVE_FIELDS, SensitiveFieldsFilter
from pos_authz.observability.logging.factory import JsonLoggerFactory
from pos_authz.observability.logging.processors import PrincipalProcessor, get_logger
from pos_authz.observability.logging.audit import AuditLogger, AuditOutcome

__all__ = [
    "AuditLogger",
    "AuditOutcome",
    "DEFAULT_SENSITIVE_FIELDS",
    "JsonLoggerFactory",
    "PrincipalProcessor",
    "SensitiveFieldsFilter",
    "get_logger",
]
