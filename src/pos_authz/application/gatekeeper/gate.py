"""Application gatekeeper – per-request authorization state machine.

:meth:`Gatekeeper.evaluate` classifies one ``(method, path, principal)``
triple and ends in exactly one :class:`GateOutcome`:

1. static asset path → ``BYPASSED`` (not audited)
2. public path → ``ALLOWED`` without a principal
3. no principal → ``DENIED_UNAUTHENTICATED`` (401)
4. principal without roles → ``DENIED_FORBIDDEN`` (403)
5. admin-only path and not ``ADMIN`` → ``DENIED_FORBIDDEN``
6. resolved permission not held → ``DENIED_FORBIDDEN``
7. otherwise ``ALLOWED``

The gatekeeper never raises for a "no" answer; the HTTP adapter turns a
:class:`GateDecision` into a response.
"""
from __future__ import annotations

import dataclasses
from enum import Enum

from pos_authz.kernel.security import defaults
from pos_authz.kernel.security.decision import DecisionEngine
from pos_authz.kernel.security.paths import PathResolution
from pos_authz.kernel.security.principal import Principal
from pos_authz.kernel.security.registry import PermissionRegistry
from pos_authz.observability.logging import AuditLogger, AuditOutcome, get_logger

logger = get_logger(__name__)

UNAUTHENTICATED_MESSAGE = "Authentication required"
FORBIDDEN_MESSAGE = "Insufficient permissions"


class GateOutcome(str, Enum):
    ALLOWED = "allowed"
    BYPASSED = "bypassed"
    DENIED_UNAUTHENTICATED = "denied_unauthenticated"
    DENIED_FORBIDDEN = "denied_forbidden"


@dataclasses.dataclass(frozen=True)
class GateDecision:
    """Terminal state of one gatekeeper evaluation."""

    outcome: GateOutcome
    reason: str
    status_code: int = 200
    code: str | None = None
    message: str | None = None
    required_permission: str | None = None
    required_role: str | None = None
    resolution: PathResolution | None = None

    @property
    def allowed(self) -> bool:
        return self.outcome in (GateOutcome.ALLOWED, GateOutcome.BYPASSED)

    @classmethod
    def allow(
        cls, reason: str, resolution: PathResolution | None = None
    ) -> "GateDecision":
        return cls(
            outcome=GateOutcome.ALLOWED,
            reason=reason,
            required_permission=resolution.permission.value if resolution else None,
            resolution=resolution,
        )

    @classmethod
    def bypass(cls) -> "GateDecision":
        return cls(outcome=GateOutcome.BYPASSED, reason="static")

    @classmethod
    def unauthenticated(cls) -> "GateDecision":
        return cls(
            outcome=GateOutcome.DENIED_UNAUTHENTICATED,
            reason="no_principal",
            status_code=401,
            code="unauthorized",
            message=UNAUTHENTICATED_MESSAGE,
        )

    @classmethod
    def forbidden(
        cls,
        reason: str,
        *,
        required_permission: str | None = None,
        required_role: str | None = None,
        resolution: PathResolution | None = None,
    ) -> "GateDecision":
        return cls(
            outcome=GateOutcome.DENIED_FORBIDDEN,
            reason=reason,
            status_code=403,
            code="forbidden",
            message=FORBIDDEN_MESSAGE,
            required_permission=required_permission,
            required_role=required_role,
            resolution=resolution,
        )


class Gatekeeper:
    """Request-boundary authorization.

    Parameters
    ----------
    registry:
        Source of public / admin-only / static path lists and permissions.
    engine:
        Decision engine sharing *registry*; built when omitted.
    audit:
        Receives one entry per denial.  Failures to audit never change the
        decision.
    """

    def __init__(
        self,
        registry: PermissionRegistry,
        engine: DecisionEngine | None = None,
        audit: AuditLogger | None = None,
    ) -> None:
        self._registry = registry
        self._engine = engine or DecisionEngine(registry)
        self._audit = audit

    @property
    def registry(self) -> PermissionRegistry:
        return self._registry

    @property
    def engine(self) -> DecisionEngine:
        return self._engine

    def evaluate(self, method: str, path: str, principal: Principal | None) -> GateDecision:
        if self._registry.is_static(path):
            return GateDecision.bypass()

        logger.debug("gatekeeper.check", method=method, path=path)

        if self._registry.is_public(path):
            return GateDecision.allow("public")

        if principal is None:
            return self._deny(GateDecision.unauthenticated(), method, path, None)

        resolution = self._registry.resolve(method, path)
        required = resolution.permission.value

        if not principal.roles:
            logger.warning(
                "gatekeeper.no_roles",
                principal_id=principal.id,
                path=path,
                required_permission=required,
            )
            return self._deny(
                GateDecision.forbidden(
                    "no_roles", required_permission=required, resolution=resolution
                ),
                method,
                path,
                principal,
            )

        if resolution.admin_only and not self._engine.is_admin(principal):
            return self._deny(
                GateDecision.forbidden(
                    "admin_only",
                    required_permission=required,
                    required_role=defaults.ADMIN,
                    resolution=resolution,
                ),
                method,
                path,
                principal,
            )

        if not self._engine.has_permission(principal, resolution.permission):
            return self._deny(
                GateDecision.forbidden(
                    "missing_permission",
                    required_permission=required,
                    resolution=resolution,
                ),
                method,
                path,
                principal,
            )

        return GateDecision.allow("granted", resolution)

    def _deny(
        self,
        decision: GateDecision,
        method: str,
        path: str,
        principal: Principal | None,
    ) -> GateDecision:
        logger.warning(
            "gatekeeper.denied",
            principal_id=principal.id if principal else None,
            method=method,
            path=path,
            reason=decision.reason,
            required_permission=decision.required_permission,
            required_role=decision.required_role,
        )
        if self._audit is not None:
            outcome = (
                AuditOutcome.UNAUTHENTICATED
                if decision.outcome is GateOutcome.DENIED_UNAUTHENTICATED
                else AuditOutcome.DENIED
            )
            self._audit.log_access(
                principal,
                resource=path,
                action=method,
                outcome=outcome,
                reason=decision.reason,
                required_permission=decision.required_permission,
                required_role=decision.required_role,
            )
        return decision


__all__ = [
    "FORBIDDEN_MESSAGE",
    "GateDecision",
    "GateOutcome",
    "Gatekeeper",
    "UNAUTHENTICATED_MESSAGE",
]
