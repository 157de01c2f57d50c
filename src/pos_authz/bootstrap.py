"""Start-up wiring.

Builds the registry, decision engine, ownership resolver, gatekeeper and
method guard once and hands them out by reference::

    system = AuthorizationSystem.from_settings(
        EnvSettingsLoader().load(AuthzSettings),
        authenticator=verify_token,
    )
    system.install(app)
    guard = system.guard

Any configuration problem raises :class:`ConfigurationError` here, before
the first request is served.
"""
from __future__ import annotations

import dataclasses
from typing import Any

from pos_authz.adapters.fastapi import (
    DEFAULT_PREFIX,
    Authenticator,
    AuthzIntrospectionRouter,
    FastAPIExceptionMapper,
    GatekeeperMiddleware,
)
from pos_authz.adapters.http import HttpRosterClient
from pos_authz.application.gatekeeper import Gatekeeper
from pos_authz.application.guard import MethodGuard
from pos_authz.application.ownership import OwnershipResolver, RosterSource
from pos_authz.config import AuthzSettings
from pos_authz.kernel.security.decision import DecisionEngine
from pos_authz.kernel.security.registry import PermissionRegistry
from pos_authz.observability.logging import AuditLogger, JsonLoggerFactory, get_logger

logger = get_logger(__name__)


@dataclasses.dataclass(frozen=True)
class AuthorizationSystem:
    """The wired authorization components of one process."""

    settings: AuthzSettings
    registry: PermissionRegistry
    engine: DecisionEngine
    ownership: OwnershipResolver
    gatekeeper: Gatekeeper
    guard: MethodGuard
    audit: AuditLogger
    authenticator: Authenticator | None = None
    introspection_prefix: str = DEFAULT_PREFIX

    @classmethod
    def from_settings(
        cls,
        settings: AuthzSettings | None = None,
        *,
        authenticator: Authenticator | None = None,
        roster: RosterSource | None = None,
        registry: PermissionRegistry | None = None,
        introspection_prefix: str = DEFAULT_PREFIX,
        configure_logging: bool = True,
    ) -> "AuthorizationSystem":
        """Wire everything from *settings*.

        Parameters
        ----------
        roster:
            Roster source; an :class:`HttpRosterClient` on
            ``settings.roster_base_url`` when omitted.
        registry:
            Replaces the default tables entirely; ``extra_*`` settings are
            then ignored.
        introspection_prefix:
            Mount point of the introspection router.  Its routes demand a
            principal themselves, so the prefix is public at the gate.
        configure_logging:
            Install JSON logging at ``settings.log_level`` with
            ``settings.log_redact_fields`` redacted.  Pass ``False`` when the
            host application owns the logging setup.
        """
        settings = settings or AuthzSettings()
        if configure_logging:
            JsonLoggerFactory.configure(
                settings.log_level,
                extra_sensitive_fields=settings.log_redact_fields,
            )
        audit = AuditLogger(service=settings.service_name)

        if registry is None:
            registry = PermissionRegistry.default(
                extra_public_paths=(
                    *settings.extra_public_paths,
                    f"{introspection_prefix.rstrip('/')}/**",
                ),
                extra_admin_only_paths=settings.extra_admin_only_paths,
            )

        if roster is None:
            roster = HttpRosterClient(
                settings.roster_base_url,
                timeout=settings.roster_timeout_seconds,
            )
        ownership = OwnershipResolver(
            roster,
            timeout_seconds=settings.roster_timeout_seconds,
            cache_ttl_seconds=settings.roster_cache_ttl_seconds,
            audit=audit,
        )
        engine = DecisionEngine(registry, ownership)
        system = cls(
            settings=settings,
            registry=registry,
            engine=engine,
            ownership=ownership,
            gatekeeper=Gatekeeper(registry, engine, audit),
            guard=MethodGuard(engine, audit=audit),
            audit=audit,
            authenticator=authenticator,
            introspection_prefix=introspection_prefix,
        )
        logger.info("authz.started", service=settings.service_name, registry=repr(registry))
        return system

    def install(self, app: Any, *, introspection: bool = True) -> None:
        """Add the gatekeeper middleware, error handlers and introspection routes to *app*."""
        FastAPIExceptionMapper().register(app)
        if introspection:
            app.include_router(AuthzIntrospectionRouter(self.engine, prefix=self.introspection_prefix))
        app.add_middleware(
            GatekeeperMiddleware,
            gatekeeper=self.gatekeeper,
            authenticator=self.authenticator,
        )

    async def aclose(self) -> None:
        """Release the roster client's connections."""
        close = getattr(self.ownership.roster, "aclose", None)
        if close is not None:
            await close()


__all__ = ["AuthorizationSystem"]
