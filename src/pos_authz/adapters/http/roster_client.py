"""HTTP adapter – HttpRosterClient.

:class:`~pos_authz.application.ownership.RosterSource` implementation
talking to the outlet service::

    GET /outlets/{outlet_id}/staff   -> [{"userId": 7, "username": "ana"}, ...]
    GET /outlets/user/{user_id}      -> [{"outletId": 3, ...}, ...]

Both endpoints may answer with a bare JSON list or with the service's
response envelope ``{"success": true, "data": [...]}``.
"""
from __future__ import annotations

from typing import Any

from pos_authz.adapters.http.client import HttpxHttpClient
from pos_authz.application.ownership.ports import OutletAssignment, StaffAssignment
from pos_authz.kernel.errors import ExternalServiceError, SerializationError
from pos_authz.observability.logging import get_logger

logger = get_logger(__name__)

_SERVICE = "outlet-roster"


class HttpRosterClient:
    """Roster lookups over HTTP.

    Non-2xx answers raise :class:`ExternalServiceError`, timeouts raise
    :class:`~pos_authz.kernel.errors.TimeoutError` and unreadable bodies
    raise :class:`SerializationError`.  Callers decide how to degrade.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 2.0,
        *,
        staff_path: str = "/outlets/{outlet_id}/staff",
        user_outlets_path: str = "/outlets/user/{user_id}",
        headers: dict[str, str] | None = None,
        http: HttpxHttpClient | None = None,
    ) -> None:
        self._http = http or HttpxHttpClient(base_url=base_url, timeout=timeout, headers=headers)
        self._staff_path = staff_path
        self._user_outlets_path = user_outlets_path

    async def __aenter__(self) -> "HttpRosterClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def staff_of_outlet(self, outlet_id: int) -> list[StaffAssignment]:
        items = await self._get_list(self._staff_path.format(outlet_id=outlet_id))
        return [StaffAssignment.from_payload(item, outlet_id=outlet_id) for item in items]

    async def outlets_of_user(self, user_id: int) -> list[OutletAssignment]:
        items = await self._get_list(self._user_outlets_path.format(user_id=user_id))
        return [OutletAssignment.from_payload(item, user_id=user_id) for item in items]

    async def _get_list(self, url: str) -> list[Any]:
        response = await self._http.get(url, headers={"Accept": "application/json"})
        try:
            body = response.json()
        except ValueError as exc:
            raise SerializationError(
                f"Roster response from {url} is not JSON", payload_type="list", cause=exc
            ) from exc

        if isinstance(body, dict):
            if body.get("success") is False:
                raise ExternalServiceError(
                    service=_SERVICE,
                    message=str(body.get("message") or f"Roster lookup {url} failed"),
                    status_code=response.status_code,
                )
            body = body.get("data")

        if not isinstance(body, list):
            raise SerializationError(
                f"Roster response from {url} is not a list", payload_type="list"
            )
        logger.debug("roster.fetched", url=url, count=len(body))
        return body


__all__ = ["HttpRosterClient"]
