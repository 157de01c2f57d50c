"""Unit tests – HTTP adapter (httpx client and roster client)."""
from __future__ import annotations

import asyncio

import httpx
import pytest
import respx

from pos_authz.adapters.http import HttpRosterClient, HttpxHttpClient
from pos_authz.application import RosterSource, StaffAssignment
from pos_authz.kernel.errors import ExternalServiceError, SerializationError
from pos_authz.kernel.errors import TimeoutError as AppTimeoutError

BASE = "http://roster.test"


# ---------------------------------------------------------------------------
# HttpxHttpClient
# ---------------------------------------------------------------------------


class TestHttpxHttpClient:
    @respx.mock
    def test_get_returns_response(self) -> None:
        respx.get(f"{BASE}/ok").mock(return_value=httpx.Response(200, json={"a": 1}))

        async def run() -> None:
            async with HttpxHttpClient(base_url=BASE) as client:
                resp = await client.get("/ok")
            assert resp.json() == {"a": 1}

        asyncio.run(run())

    @respx.mock
    def test_status_error_maps_to_external_service_error(self) -> None:
        respx.get(f"{BASE}/boom").mock(return_value=httpx.Response(502))

        async def run() -> None:
            async with HttpxHttpClient(base_url=BASE) as client:
                with pytest.raises(ExternalServiceError) as exc_info:
                    await client.get("/boom")
            assert exc_info.value.status_code == 502

        asyncio.run(run())

    @respx.mock
    def test_timeout_maps_to_timeout_error(self) -> None:
        respx.get(f"{BASE}/slow").mock(side_effect=httpx.ReadTimeout("slow"))

        async def run() -> None:
            async with HttpxHttpClient(base_url=BASE) as client:
                with pytest.raises(AppTimeoutError):
                    await client.get("/slow")

        asyncio.run(run())

    @respx.mock
    def test_transport_error_maps_to_external_service_error(self) -> None:
        respx.get(f"{BASE}/down").mock(side_effect=httpx.ConnectError("refused"))

        async def run() -> None:
            async with HttpxHttpClient(base_url=BASE) as client:
                with pytest.raises(ExternalServiceError):
                    await client.get("/down")

        asyncio.run(run())


# ---------------------------------------------------------------------------
# HttpRosterClient
# ---------------------------------------------------------------------------


class TestHttpRosterClient:
    def test_is_a_roster_source(self) -> None:
        client = HttpRosterClient(BASE)
        assert isinstance(client, RosterSource)
        asyncio.run(client.aclose())

    @respx.mock
    def test_staff_of_outlet_bare_list(self) -> None:
        route = respx.get(f"{BASE}/outlets/3/staff").mock(
            return_value=httpx.Response(
                200,
                json=[
                    {"userId": 7, "username": "ana", "role": "CASHIER", "status": "ACTIVE"},
                    {"userId": 8, "status": "REMOVED"},
                ],
            )
        )

        async def run() -> list[StaffAssignment]:
            async with HttpRosterClient(BASE) as client:
                return await client.staff_of_outlet(3)

        staff = asyncio.run(run())
        assert staff == [
            StaffAssignment(7, 3, "ana", "CASHIER", "ACTIVE"),
            StaffAssignment(8, 3, status="REMOVED"),
        ]
        assert route.calls.last.request.headers["accept"] == "application/json"

    @respx.mock
    def test_outlets_of_user_envelope(self) -> None:
        respx.get(f"{BASE}/outlets/user/7").mock(
            return_value=httpx.Response(
                200, json={"success": True, "message": "ok", "data": [{"outletId": 3}, {"outletId": 4}]}
            )
        )

        async def run() -> list[StaffAssignment]:
            async with HttpRosterClient(BASE) as client:
                return await client.outlets_of_user(7)

        assert [(a.user_id, a.outlet_id) for a in asyncio.run(run())] == [(7, 3), (7, 4)]

    @respx.mock
    def test_custom_paths_and_headers(self) -> None:
        route = respx.get(f"{BASE}/v2/outlet/3/members").mock(
            return_value=httpx.Response(200, json=[])
        )

        async def run() -> list[StaffAssignment]:
            async with HttpRosterClient(
                BASE,
                staff_path="/v2/outlet/{outlet_id}/members",
                headers={"X-Service": "pos-authz"},
            ) as client:
                return await client.staff_of_outlet(3)

        assert asyncio.run(run()) == []
        assert route.calls.last.request.headers["x-service"] == "pos-authz"

    @respx.mock
    def test_failed_envelope_raises(self) -> None:
        respx.get(f"{BASE}/outlets/3/staff").mock(
            return_value=httpx.Response(200, json={"success": False, "message": "Outlet not found"})
        )

        async def run() -> None:
            async with HttpRosterClient(BASE) as client:
                await client.staff_of_outlet(3)

        with pytest.raises(ExternalServiceError) as exc_info:
            asyncio.run(run())
        assert exc_info.value.service == "outlet-roster"
        assert exc_info.value.message == "Outlet not found"

    @respx.mock
    def test_server_error_raises(self) -> None:
        respx.get(f"{BASE}/outlets/3/staff").mock(return_value=httpx.Response(500))

        async def run() -> None:
            async with HttpRosterClient(BASE) as client:
                await client.staff_of_outlet(3)

        with pytest.raises(ExternalServiceError):
            asyncio.run(run())

    @respx.mock
    def test_timeout_raises(self) -> None:
        respx.get(f"{BASE}/outlets/3/staff").mock(side_effect=httpx.ConnectTimeout("slow"))

        async def run() -> None:
            async with HttpRosterClient(BASE) as client:
                await client.staff_of_outlet(3)

        with pytest.raises(AppTimeoutError):
            asyncio.run(run())

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, text="<html>oops</html>"),
            httpx.Response(200, json={"success": True, "data": {"userId": 1}}),
            httpx.Response(200, json=[{"username": "no-id"}]),
        ],
    )
    @respx.mock
    def test_unreadable_bodies_raise_serialization_error(self, response: httpx.Response) -> None:
        respx.get(f"{BASE}/outlets/3/staff").mock(return_value=response)

        async def run() -> None:
            async with HttpRosterClient(BASE) as client:
                await client.staff_of_outlet(3)

        with pytest.raises(SerializationError):
            asyncio.run(run())
