"""Resilience – TimeoutPolicy."""
from __future__ import annotations

import asyncio
import dataclasses
from typing import Awaitable, Callable, TypeVar

from pos_authz.kernel.errors import ConfigurationError
from pos_authz.kernel.errors import TimeoutError as AppTimeoutError

T = TypeVar("T")


@dataclasses.dataclass(frozen=True)
class TimeoutPolicy:
    """Bound an awaitable by ``timeout_seconds``.

    On expiry the inner task is cancelled and :class:`AppTimeoutError` is
    raised.  Cancellation of the caller itself propagates untouched.
    """
    timeout_seconds: float

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ConfigurationError(
                f"timeout_seconds must be positive, got {self.timeout_seconds!r}"
            )

    async def execute(self, func: Callable[[], Awaitable[T]]) -> T:
        try:
            return await asyncio.wait_for(func(), timeout=self.timeout_seconds)
        except (asyncio.TimeoutError, TimeoutError) as exc:
            raise AppTimeoutError(f"Operation timed out after {self.timeout_seconds}s") from exc


__all__ = ["TimeoutPolicy"]
