"""FastAPI adapter – the JSON deny envelope shared by middleware and exception mapper."""
from __future__ import annotations

import datetime
import json
from typing import Any


def deny_body(message: str, code: str, **extra: Any) -> dict[str, Any]:
    """Build ``{"success": false, "message", "code", "timestamp", ...}``.

    ``None`` values in *extra* are dropped.
    """
    body: dict[str, Any] = {
        "success": False,
        "message": message,
        "code": code,
        "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
    }
    body.update({k: v for k, v in extra.items() if v is not None})
    return body


def deny_headers(status_code: int) -> dict[str, str]:
    return {"WWW-Authenticate": "Bearer"} if status_code == 401 else {}


def encode(body: dict[str, Any]) -> bytes:
    return json.dumps(body, ensure_ascii=False, default=str).encode()


__all__ = ["deny_body", "deny_headers", "encode"]
