"""Application ownership – OwnershipResolver.

Answers the questions that need the outlet roster: may this principal act
on outlet *N*, and may this principal change data owned by user *M*.

Every roster lookup is bounded by a :class:`TimeoutPolicy`.  Any failure
(timeout, transport error, malformed payload) is logged and answered with
``False``; nothing is retried.  Successful lookups may be cached for
``cache_ttl_seconds``.
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Iterable, TypeVar

from pos_authz.application.ownership.ports import OutletAssignment, RosterSource, StaffAssignment
from pos_authz.kernel.security import defaults
from pos_authz.kernel.security.principal import Principal
from pos_authz.observability.logging import AuditLogger, get_logger
from pos_authz.resilience import CacheAsidePolicy, InMemoryTTLCache, SimpleCache, TimeoutPolicy

logger = get_logger(__name__)

T = TypeVar("T")

# Roles whose outlet access depends on being on that outlet's roster.
_ROSTERED_ROLES = (defaults.MANAGER, defaults.STAFF, defaults.CASHIER, defaults.KITCHEN)


class OwnershipResolver:
    """Roster-backed ownership answers.

    Parameters
    ----------
    roster:
        Source of staff assignments (normally :class:`HttpRosterClient`).
    timeout_seconds:
        Upper bound on each roster lookup.
    cache_ttl_seconds:
        ``0`` disables caching.
    cache:
        Backing store for the cache; defaults to :class:`InMemoryTTLCache`.
    audit:
        When given, roster failures are also recorded as security events.
    """

    def __init__(
        self,
        roster: RosterSource,
        timeout_seconds: float = 2.0,
        cache_ttl_seconds: float = 0.0,
        cache: SimpleCache | None = None,
        audit: AuditLogger | None = None,
    ) -> None:
        self._roster = roster
        self._timeout = TimeoutPolicy(timeout_seconds)
        self._cache: CacheAsidePolicy[tuple[StaffAssignment, ...]] | None = None
        if cache_ttl_seconds > 0:
            self._cache = CacheAsidePolicy(cache or InMemoryTTLCache(), ttl=cache_ttl_seconds)
        self._audit = audit

    @property
    def roster(self) -> RosterSource:
        return self._roster

    # -- questions ---------------------------------------------------------

    async def can_access_outlet(self, principal: Principal | None, outlet_id: int) -> bool:
        if principal is None or not principal.roles:
            return False
        if principal.has_role(defaults.ADMIN):
            return True
        if not any(principal.has_role(r) for r in _ROSTERED_ROLES):
            return False
        try:
            staff = await self._staff_of_outlet(outlet_id)
        except Exception as exc:  # noqa: BLE001 - deny on any roster failure
            self._report(principal, exc, outlet_id=outlet_id)
            return False
        return _on_roster(principal.id, staff)

    async def can_modify_user_data(self, principal: Principal | None, owner_id: int) -> bool:
        if principal is None or not principal.roles:
            return False
        if principal.id == owner_id or principal.has_role(defaults.ADMIN):
            return True
        if not principal.has_role(defaults.MANAGER):
            return False
        try:
            outlets = await self._outlets_of_user(principal.id)
            outlet_ids = sorted({a.outlet_id for a in outlets if a.is_active})
            rosters = await self._gather(self._staff_of_outlet(o) for o in outlet_ids)
        except Exception as exc:  # noqa: BLE001 - deny on any roster failure
            self._report(principal, exc, owner_id=owner_id)
            return False
        return any(_on_roster(owner_id, staff) for staff in rosters)

    # -- lookups -----------------------------------------------------------

    async def _staff_of_outlet(self, outlet_id: int) -> tuple[StaffAssignment, ...]:
        return await self._lookup(
            f"staff:{outlet_id}", lambda: self._roster.staff_of_outlet(outlet_id)
        )

    async def _outlets_of_user(self, user_id: int) -> tuple[OutletAssignment, ...]:
        return await self._lookup(
            f"outlets:{user_id}", lambda: self._roster.outlets_of_user(user_id)
        )

    async def _lookup(
        self, key: str, call: Callable[[], Awaitable[list[StaffAssignment]]]
    ) -> tuple[StaffAssignment, ...]:
        async def load() -> tuple[StaffAssignment, ...]:
            return tuple(await self._timeout.execute(call))

        if self._cache is None:
            return await load()
        return await self._cache.get_or_load(key, load)

    @staticmethod
    async def _gather(calls: Iterable[Awaitable[T]]) -> list[T]:
        tasks = [asyncio.ensure_future(c) for c in calls]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            # one lookup failed or we were cancelled: stop the rest
            for t in tasks:
                t.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    def _report(self, principal: Principal, exc: Exception, **target: int) -> None:
        logger.warning(
            "ownership.roster_unavailable",
            principal_id=principal.id,
            error=repr(exc),
            **target,
        )
        if self._audit is not None:
            self._audit.log_security_event(
                "roster_unavailable",
                principal=principal,
                description=type(exc).__name__,
                **target,
            )


def _on_roster(user_id: int, staff: Iterable[StaffAssignment]) -> bool:
    return any(a.user_id == user_id and a.is_active for a in staff)


__all__ = ["OwnershipResolver"]
