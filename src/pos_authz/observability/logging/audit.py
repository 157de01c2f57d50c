"""Observability – AuditLogger.

A dedicated structured-log sink for authorization decisions.  Emitting an
audit entry is best-effort: a failing sink never changes the outcome of
the decision being recorded.
"""
from __future__ import annotations

import datetime
import logging
from enum import Enum
from typing import Any

import structlog

_fallback = logging.getLogger(__name__)


def _principal_id(principal: Any) -> Any:
    principal_id = getattr(principal, "id", None)
    return str(principal) if principal_id is None else principal_id


class AuditOutcome(str, Enum):
    """Standardised audit outcomes."""

    GRANTED = "granted"
    DENIED = "denied"
    UNAUTHENTICATED = "unauthenticated"
    BYPASSED = "bypassed"
    ERROR = "error"


class AuditLogger:
    """Structured-log sink for security-sensitive actions.

    Denials are emitted at ``WARNING`` so they pass restrictive log-level
    filters; grants and bypasses are emitted at ``INFO``.

    Parameters
    ----------
    service:
        Logical service name injected into every audit entry.
    logger:
        Underlying logger.  Defaults to the structlog logger ``audit``.
        A stdlib :class:`logging.Logger` is accepted too.
    """

    def __init__(
        self,
        service: str = "unknown",
        logger: Any = None,
    ) -> None:
        self._service = service
        self._log = logger if logger is not None else structlog.get_logger("audit")

    @property
    def service(self) -> str:
        return self._service

    def log_access(
        self,
        principal: Any,
        resource: str,
        action: str,
        outcome: AuditOutcome | str = AuditOutcome.GRANTED,
        **extra: Any,
    ) -> None:
        """Record one access decision.

        Parameters
        ----------
        principal:
            The caller.  ``principal.id`` is used when available; ``None``
            is recorded as ``anonymous``.
        resource:
            What was accessed (a request path or a guarded operation name).
        action:
            HTTP method or check description.
        outcome:
            :class:`AuditOutcome` or plain string.
        **extra:
            Additional structured fields (required permission, reason ...).
        """
        principal_id = "anonymous" if principal is None else _principal_id(principal)
        value = outcome.value if isinstance(outcome, AuditOutcome) else str(outcome)
        entry: dict[str, Any] = {
            "event": "audit.access",
            "service": self._service,
            "principal_id": principal_id,
            "resource": resource,
            "action": action,
            "outcome": value,
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            **extra,
        }
        level = logging.INFO if value in (AuditOutcome.GRANTED.value, AuditOutcome.BYPASSED.value) else logging.WARNING
        self._emit(level, entry)

    def log_security_event(
        self,
        event_type: str,
        principal: Any = None,
        description: str = "",
        **extra: Any,
    ) -> None:
        """Record a security event that is not an access decision (e.g. ``roster_unavailable``)."""
        entry: dict[str, Any] = {
            "event": f"audit.{event_type}",
            "service": self._service,
            "event_type": event_type,
            "description": description,
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            **extra,
        }
        if principal is not None:
            entry["principal_id"] = _principal_id(principal)
        self._emit(logging.WARNING, entry)

    def _emit(self, level: int, entry: dict[str, Any]) -> None:
        event = entry.pop("event", "audit")
        method = self._log.warning if level >= logging.WARNING else self._log.info
        try:
            try:
                method(event, **entry)
            except TypeError:
                # stdlib logger: format as key=value pairs
                msg = " ".join(f"{k}={v!r}" for k, v in entry.items())
                method("%s %s", event, msg)
        except Exception:  # noqa: BLE001
            _fallback.debug("audit sink failed for %s", event, exc_info=True)


__all__ = ["AuditLogger", "AuditOutcome"]
