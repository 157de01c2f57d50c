"""FastAPI adapter – read-only authorization introspection router."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from pos_authz.adapters.fastapi.deps import PrincipalDep
from pos_authz.kernel.security.decision import DecisionEngine, permission_values
from pos_authz.kernel.security.principal import Permission

DEFAULT_PREFIX = "/api/auth/authorization"


def _ok(message: str, data: dict[str, Any]) -> dict[str, Any]:
    return {"success": True, "message": message, "data": data}


def AuthzIntrospectionRouter(
    engine: DecisionEngine,
    prefix: str = DEFAULT_PREFIX,
    tags: list[str] | None = None,
) -> APIRouter:
    """Return a router describing the caller's own authorization.

    Routes (all ``GET``, all require a principal):

    ``{prefix}/me``
        roles, effective permissions and role flags.
    ``{prefix}/check/{permission}``
        whether the caller holds *permission* and whether any role grants it.
    ``{prefix}/check-role/{role}``
        whether the caller has *role* and whether the role exists.
    ``{prefix}/check-resource/{resource}/{action}``
        whether the caller may perform *action* on *resource*.
    """
    router = APIRouter(prefix=prefix, tags=tags or ["authorization"])
    registry = engine.registry

    @router.get("/me")
    async def me(principal: PrincipalDep) -> dict[str, Any]:
        return _ok(
            "Current user permissions",
            {
                "id": principal.id,
                "username": principal.username,
                "roles": sorted(principal.role_names),
                "permissions": permission_values(engine.effective_permissions(principal)),
                "isAdmin": engine.is_admin(principal),
                "isManager": engine.is_manager(principal),
                "isStaff": engine.is_staff(principal),
                "isCashier": engine.is_cashier(principal),
                "isKitchen": engine.is_kitchen(principal),
            },
        )

    @router.get("/check/{permission}")
    async def check_permission(permission: str, principal: PrincipalDep) -> dict[str, Any]:
        value = permission.strip().upper()
        return _ok(
            "Permission check",
            {
                "permission": value,
                "granted": engine.has_permission(principal, value),
                "valid": registry.is_valid_permission(value),
            },
        )

    @router.get("/check-role/{role}")
    async def check_role(role: str, principal: PrincipalDep) -> dict[str, Any]:
        value = role.strip().upper()
        return _ok(
            "Role check",
            {
                "role": value,
                "granted": engine.has_role(principal, value),
                "valid": registry.is_valid_role(value),
            },
        )

    @router.get("/check-resource/{resource}/{action}")
    async def check_resource(resource: str, action: str, principal: PrincipalDep) -> dict[str, Any]:
        value = f"{resource}_{action}".upper()
        return _ok(
            "Resource access check",
            {
                "resource": resource.upper(),
                "action": action.upper(),
                "permission": value if Permission.is_well_formed(value) else None,
                "granted": engine.can_access_resource(principal, resource, action),
            },
        )

    return router


__all__ = ["AuthzIntrospectionRouter", "DEFAULT_PREFIX"]
