"""Kernel security – Permission Registry.

The process-wide, immutable table of role → permissions plus the endpoint
permission table and the public / admin-only / static path lists.

Build it once at start-up (:meth:`PermissionRegistry.default` or the
constructor) and hand the instance to the decision engine, gatekeeper and
method guard.  Construction validates every entry and raises
:class:`~pos_authz.kernel.errors.ConfigurationError` on the first
malformed one, so a broken table stops the process before it serves a
request.

Example::

    registry = PermissionRegistry.default()
    registry.permissions_of("CASHIER")
    registry.required_permission_for("DELETE", "/api/products/7")  # PRODUCTS_DELETE
"""

from __future__ import annotations

import dataclasses
from types import MappingProxyType
from typing import Iterable, Mapping

from pos_authz.kernel.errors import (
    ConfigurationError,
    UnknownPermissionError,
    UnknownRoleError,
)
from pos_authz.kernel.security import defaults
from pos_authz.kernel.security.paths import (
    AntPattern,
    EndpointTemplate,
    PathResolution,
    PathResolver,
    matches_any,
    normalize_method,
)
from pos_authz.kernel.security.principal import Permission, Role


@dataclasses.dataclass(frozen=True)
class RoleDefinition:
    """A role, the permissions it grants and its optional hierarchy level.

    ``hierarchy_level`` follows "lower number = more authority"; ``None``
    means the role never satisfies a minimum-level check.
    """

    role: Role
    permissions: frozenset[Permission] = frozenset()
    hierarchy_level: int | None = None

    @classmethod
    def of(
        cls,
        name: str,
        permissions: Iterable[str] = (),
        hierarchy_level: int | None = None,
    ) -> "RoleDefinition":
        return cls(
            role=Role(name),
            permissions=frozenset(Permission(p) for p in permissions),
            hierarchy_level=hierarchy_level,
        )


class PermissionRegistry:
    """Immutable role / permission / endpoint tables with lookup helpers."""

    def __init__(
        self,
        roles: Iterable[RoleDefinition],
        endpoints: Iterable[tuple[str, str, str]] = (),
        *,
        public_paths: Iterable[str] = (),
        admin_only_paths: Iterable[str] = (),
        static_prefixes: Iterable[str] = (),
        category_segments: Mapping[str, str] | None = None,
        default_permission: str = defaults.DEFAULT_FALLBACK_PERMISSION,
    ) -> None:
        definitions: dict[str, RoleDefinition] = {}
        for definition in roles:
            name = definition.role.name
            if name in definitions:
                raise ConfigurationError(f"Role {name!r} is defined twice")
            definitions[name] = definition
        self._definitions = MappingProxyType(definitions)

        by_method: dict[str, list[EndpointTemplate]] = {}
        for method, template, permission in endpoints:
            entry = EndpointTemplate(
                method=normalize_method(method),
                template=template,
                permission=Permission(permission),
            )
            by_method.setdefault(entry.method, []).append(entry)
        self._templates: Mapping[str, tuple[EndpointTemplate, ...]] = MappingProxyType(
            {method: tuple(entries) for method, entries in by_method.items()}
        )

        self._public = tuple(AntPattern(p) for p in public_paths)
        self._admin_only = tuple(AntPattern(p) for p in admin_only_paths)
        self._static_prefixes = tuple(static_prefixes)

        segments: dict[str, str] = {}
        for segment, resource in (category_segments or {}).items():
            # validates the resource name by building its READ permission
            Permission.of(resource, "READ")
            segments[segment.lower()] = resource.upper()
        self._categories = MappingProxyType(segments)

        self._default_permission = Permission(default_permission)
        self._resolver = PathResolver(self)

    @classmethod
    def default(
        cls,
        *,
        extra_public_paths: Iterable[str] = (),
        extra_admin_only_paths: Iterable[str] = (),
    ) -> "PermissionRegistry":
        """Registry populated from :mod:`pos_authz.kernel.security.defaults`."""
        roles = [
            RoleDefinition.of(
                name,
                permissions,
                defaults.DEFAULT_ROLE_LEVELS.get(name),
            )
            for name, permissions in defaults.DEFAULT_ROLE_PERMISSIONS.items()
        ]
        return cls(
            roles,
            defaults.DEFAULT_ENDPOINT_PERMISSIONS,
            public_paths=(*defaults.DEFAULT_PUBLIC_PATHS, *extra_public_paths),
            admin_only_paths=(*defaults.DEFAULT_ADMIN_ONLY_PATHS, *extra_admin_only_paths),
            static_prefixes=defaults.DEFAULT_STATIC_PREFIXES,
            category_segments=defaults.DEFAULT_CATEGORY_SEGMENTS,
        )

    # ------------------------------------------------------------------
    # Role / permission lookups
    # ------------------------------------------------------------------

    def permissions_of(self, role: str | Role) -> frozenset[Permission]:
        """Permissions granted by *role*; empty for unknown or malformed roles."""
        name = role.name if isinstance(role, Role) else role
        definition = self._definitions.get(name) if isinstance(name, str) else None
        if definition is None:
            return frozenset()
        return definition.permissions

    def grants(self, role: str | Role, permission: str | Permission) -> bool:
        value = permission.value if isinstance(permission, Permission) else permission
        return any(p.value == value for p in self.permissions_of(role))

    def hierarchy_level(self, role: str | Role) -> int | None:
        name = role.name if isinstance(role, Role) else role
        definition = self._definitions.get(name)
        return definition.hierarchy_level if definition is not None else None

    def roles(self) -> frozenset[Role]:
        return frozenset(d.role for d in self._definitions.values())

    def role_permissions(self) -> Mapping[str, frozenset[Permission]]:
        return MappingProxyType(
            {name: d.permissions for name, d in self._definitions.items()}
        )

    def endpoint_permissions(self) -> Mapping[str, Permission]:
        return MappingProxyType({
            entry.key: entry.permission
            for entries in self._templates.values()
            for entry in entries
        })

    def is_valid_role(self, role: str | Role) -> bool:
        name = role.name if isinstance(role, Role) else role
        return name in self._definitions

    def is_valid_permission(self, permission: str | Permission) -> bool:
        """``True`` when at least one role grants *permission*."""
        return bool(self.roles_with_permission(permission))

    def roles_with_permission(self, permission: str | Permission) -> frozenset[Role]:
        value = permission.value if isinstance(permission, Permission) else permission
        return frozenset(
            d.role for d in self._definitions.values()
            if any(p.value == value for p in d.permissions)
        )

    def role(self, name: str) -> Role:
        """Return the validated :class:`Role` for *name* or raise."""
        if not self.is_valid_role(name):
            raise UnknownRoleError(name)
        return self._definitions[name].role

    def permission(self, value: str) -> Permission:
        """Return the validated :class:`Permission` for *value* or raise."""
        permission = Permission(value)
        if not self.is_valid_permission(permission):
            raise UnknownPermissionError(value)
        return permission

    # ------------------------------------------------------------------
    # Path lookups
    # ------------------------------------------------------------------

    @property
    def default_permission(self) -> Permission:
        return self._default_permission

    @property
    def category_segments(self) -> Mapping[str, str]:
        return self._categories

    def templates_for(self, method: str) -> tuple[EndpointTemplate, ...]:
        return self._templates.get(method.upper(), ())

    def is_public(self, path: str) -> bool:
        return matches_any(self._public, path)

    def is_admin_only(self, path: str) -> bool:
        return matches_any(self._admin_only, path)

    def is_static(self, path: str) -> bool:
        return path.startswith(self._static_prefixes) if self._static_prefixes else False

    def resolve(self, method: str, path: str) -> PathResolution:
        return self._resolver.resolve(method, path)

    def required_permission_for(self, method: str, path: str) -> Permission:
        return self._resolver.resolve(method, path).permission

    def __repr__(self) -> str:
        return (
            f"PermissionRegistry(roles={sorted(self._definitions)!r}, "
            f"endpoints={sum(len(v) for v in self._templates.values())})"
        )


__all__ = ["PermissionRegistry", "RoleDefinition"]
