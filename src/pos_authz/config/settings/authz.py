"""Config settings – AuthzSettings."""
from __future__ import annotations

import dataclasses
import logging
from typing import ClassVar

from pos_authz.config.settings.base import Settings
from pos_authz.config.validation import InvalidSettingValueError

_MAX_ROSTER_TIMEOUT = 30.0


@dataclasses.dataclass
class AuthzSettings(Settings):
    """Runtime settings, read from ``AUTHZ_*`` environment variables."""

    _prefix: ClassVar[str] = "AUTHZ"

    roster_base_url: str = "http://localhost:8082"
    roster_timeout_seconds: float = 2.0
    roster_cache_ttl_seconds: float = 0.0
    service_name: str = "pos-authz"
    log_level: str = "INFO"
    log_redact_fields: list[str] = dataclasses.field(default_factory=list)
    extra_public_paths: list[str] = dataclasses.field(default_factory=list)
    extra_admin_only_paths: list[str] = dataclasses.field(default_factory=list)

    def _validate(self) -> None:
        if not self.roster_base_url.startswith(("http://", "https://")):
            raise InvalidSettingValueError(
                "roster_base_url", self.roster_base_url, "must be an http(s) URL"
            )
        if not 0 < self.roster_timeout_seconds <= _MAX_ROSTER_TIMEOUT:
            raise InvalidSettingValueError(
                "roster_timeout_seconds",
                self.roster_timeout_seconds,
                f"must be > 0 and <= {_MAX_ROSTER_TIMEOUT:g}",
            )
        if self.roster_cache_ttl_seconds < 0:
            raise InvalidSettingValueError(
                "roster_cache_ttl_seconds", self.roster_cache_ttl_seconds, "must be >= 0"
            )
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise InvalidSettingValueError("log_level", self.log_level, "unknown log level")
        for name in ("extra_public_paths", "extra_admin_only_paths"):
            for pattern in getattr(self, name):
                if not pattern.startswith("/"):
                    raise InvalidSettingValueError(name, pattern, "path patterns must start with '/'")


__all__ = ["AuthzSettings"]
