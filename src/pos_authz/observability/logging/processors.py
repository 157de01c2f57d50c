"""Observability – structlog processors and get_logger helper."""
from __future__ import annotations

from typing import Any

import structlog


class PrincipalProcessor:
    """structlog processor that flattens a ``principal`` entry.

    Call sites may pass ``principal=<Principal>``; the processor replaces it
    with ``principal_id`` and ``roles`` so log lines stay JSON-serialisable.
    """

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        principal = event_dict.pop("principal", None)
        if principal is not None:
            event_dict.setdefault("principal_id", getattr(principal, "id", None))
            roles = getattr(principal, "roles", None)
            if roles is not None:
                event_dict.setdefault("roles", sorted(str(r) for r in roles))
        return event_dict


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = ["PrincipalProcessor", "get_logger"]
