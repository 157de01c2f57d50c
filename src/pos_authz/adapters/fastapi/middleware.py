"""FastAPI adapter – GatekeeperMiddleware.

Pure ASGI middleware that runs every HTTP request through a
:class:`~pos_authz.application.gatekeeper.Gatekeeper` before the app sees
it.  The principal comes from ``scope["state"]["principal"]`` (set by an
upstream authentication middleware) or, failing that, from the configured
*authenticator* applied to the ``Authorization: Bearer`` token.  Allowed
requests carry the principal on ``request.state.principal``.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Awaitable, Callable

from pos_authz.adapters.fastapi.responses import deny_body, deny_headers, encode
from pos_authz.application.gatekeeper import GateDecision, Gatekeeper
from pos_authz.kernel.security.principal import Principal
from pos_authz.observability.logging import get_logger

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Receive, Scope, Send

logger = get_logger(__name__)

Authenticator = Callable[[str], Awaitable["Principal | None"]]

PRINCIPAL_STATE_KEY = "principal"


class GatekeeperMiddleware:
    """Allow, or answer 401/403 with the JSON deny envelope.

    Parameters
    ----------
    app:
        The inner ASGI application.
    gatekeeper:
        Decides each request.
    authenticator:
        ``async (token) -> Principal | None``.  Exceptions it raises are
        treated as "no principal".
    """

    def __init__(
        self,
        app: "ASGIApp",
        gatekeeper: Gatekeeper,
        authenticator: Authenticator | None = None,
    ) -> None:
        self.app = app
        self._gatekeeper = gatekeeper
        self._authenticator = authenticator

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "GET")
        path = scope.get("path", "") or "/"
        state: dict[str, Any] = scope.setdefault("state", {})

        principal: Principal | None = None
        if not self._gatekeeper.registry.is_static(path):
            principal = await self._principal(scope, state)

        decision = self._gatekeeper.evaluate(method, path, principal)
        if decision.allowed:
            if principal is not None:
                state[PRINCIPAL_STATE_KEY] = principal
            await self.app(scope, receive, send)
            return

        await _send_deny(send, decision)

    async def _principal(self, scope: "Scope", state: dict[str, Any]) -> Principal | None:
        existing = state.get(PRINCIPAL_STATE_KEY)
        if isinstance(existing, Principal):
            return existing
        if self._authenticator is None:
            return None

        headers = dict(scope.get("headers", []))
        auth_value = headers.get(b"authorization", b"").decode("latin-1").strip()
        if not auth_value.lower().startswith("bearer "):
            return None
        token = auth_value[7:].strip()
        if not token:
            return None
        try:
            principal = await self._authenticator(token)
        except Exception as exc:  # noqa: BLE001
            logger.info("gatekeeper.authentication_failed", error=repr(exc))
            return None
        return principal if isinstance(principal, Principal) else None


async def _send_deny(send: "Send", decision: GateDecision) -> None:
    body = encode(deny_body(decision.message or "", decision.code or "forbidden"))
    headers = [
        (b"content-type", b"application/json"),
        (b"content-length", str(len(body)).encode()),
    ]
    headers.extend(
        (name.lower().encode(), value.encode())
        for name, value in deny_headers(decision.status_code).items()
    )
    await send({"type": "http.response.start", "status": decision.status_code, "headers": headers})
    await send({"type": "http.response.body", "body": body})


__all__ = ["Authenticator", "GatekeeperMiddleware", "PRINCIPAL_STATE_KEY"]
