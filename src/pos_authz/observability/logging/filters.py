"""Observability – redaction of credentials in authorization log entries.

Gatekeeper and guard log lines carry request context; bearer tokens,
cookies and roster credentials must never reach the sink.  Keys are
compared case-insensitively with ``-`` folded to ``_`` so header names
(``X-Api-Key``) and keyword names (``api_key``) redact alike.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

DEFAULT_SENSITIVE_FIELDS: frozenset[str] = frozenset({
    "password", "secret", "token", "access_token", "refresh_token",
    "id_token", "bearer", "credentials", "api_key", "x_api_key",
    "authorization", "proxy_authorization", "cookie", "set_cookie",
})


def _normalize(key: str) -> str:
    return key.lower().replace("-", "_")


class SensitiveFieldsFilter:
    """Replace values of sensitive keys with ``[REDACTED]``.

    Parameters
    ----------
    sensitive_fields:
        Replaces the default field set.
    extra_fields:
        Added on top of the (default or given) field set.
    """

    REDACTED = "[REDACTED]"

    def __init__(
        self,
        sensitive_fields: Iterable[str] | None = None,
        extra_fields: Iterable[str] = (),
    ) -> None:
        base = DEFAULT_SENSITIVE_FIELDS if sensitive_fields is None else sensitive_fields
        self._fields = frozenset(_normalize(f) for f in (*base, *extra_fields))

    @property
    def fields(self) -> frozenset[str]:
        return self._fields

    def is_sensitive(self, key: str) -> bool:
        return _normalize(key) in self._fields

    def redact(self, data: dict[str, Any]) -> dict[str, Any]:
        """Top-level keys only."""
        return {k: (self.REDACTED if self.is_sensitive(k) else v) for k, v in data.items()}

    def redact_deep(self, data: dict[str, Any]) -> dict[str, Any]:
        return {
            k: self.REDACTED if self.is_sensitive(k) else self._walk(v)
            for k, v in data.items()
        }

    def _walk(self, value: Any) -> Any:
        if isinstance(value, dict):
            return self.redact_deep(value)
        if isinstance(value, (list, tuple)):
            return type(value)(self._walk(v) for v in value)
        return value

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:  # noqa: ARG002
        return self.redact_deep(event_dict)


__all__ = ["DEFAULT_SENSITIVE_FIELDS", "SensitiveFieldsFilter"]
