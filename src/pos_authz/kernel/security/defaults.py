"""Kernel security – default POS authorization tables.

Plain data consumed by :meth:`PermissionRegistry.default`.  Nothing here is
mutated at runtime.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

ADMIN = "ADMIN"
MANAGER = "MANAGER"
STAFF = "STAFF"
CASHIER = "CASHIER"
KITCHEN = "KITCHEN"


def _crud(resource: str, *actions: str) -> frozenset[str]:
    return frozenset(f"{resource}_{action}" for action in actions)


DEFAULT_ROLE_PERMISSIONS: Mapping[str, frozenset[str]] = MappingProxyType({
    ADMIN: (
        _crud("USERS", "READ", "WRITE", "DELETE", "ADMIN")
        | _crud("OUTLETS", "READ", "WRITE", "DELETE", "ADMIN")
        | _crud("PRODUCTS", "READ", "WRITE", "DELETE", "ADMIN")
        | _crud("INVENTORY", "READ", "WRITE", "DELETE", "ADMIN")
        | _crud("TRANSACTIONS", "READ", "WRITE", "DELETE", "ADMIN")
        | _crud("CUSTOMERS", "READ", "WRITE", "DELETE", "ADMIN")
        | _crud("EXPENSES", "READ", "WRITE", "DELETE", "ADMIN")
        | _crud("REPORTS", "READ", "WRITE", "ADMIN")
        | _crud("AUDIT", "READ", "ADMIN")
        | _crud("SYSTEM", "READ", "WRITE", "ADMIN")
    ),
    MANAGER: (
        _crud("USERS", "READ")
        | _crud("OUTLETS", "READ", "WRITE")
        | _crud("PRODUCTS", "READ", "WRITE")
        | _crud("INVENTORY", "READ", "WRITE")
        | _crud("TRANSACTIONS", "READ", "WRITE")
        | _crud("CUSTOMERS", "READ", "WRITE")
        | _crud("EXPENSES", "READ", "WRITE")
        | _crud("REPORTS", "READ")
        | _crud("SYSTEM", "READ")
    ),
    STAFF: (
        _crud("OUTLETS", "READ")
        | _crud("PRODUCTS", "READ")
        | _crud("INVENTORY", "READ")
        | _crud("TRANSACTIONS", "READ", "WRITE")
        | _crud("CUSTOMERS", "READ", "WRITE")
        | _crud("EXPENSES", "READ")
    ),
    CASHIER: (
        _crud("PRODUCTS", "READ")
        | _crud("TRANSACTIONS", "READ", "WRITE")
        | _crud("CUSTOMERS", "READ", "WRITE")
    ),
    KITCHEN: (
        _crud("PRODUCTS", "READ")
        | _crud("INVENTORY", "READ")
        | _crud("TRANSACTIONS", "READ")
    ),
})

# Lower number = more authority.
DEFAULT_ROLE_LEVELS: Mapping[str, int] = MappingProxyType({
    ADMIN: 1,
    MANAGER: 2,
    STAFF: 3,
    CASHIER: 4,
    KITCHEN: 4,
})

DEFAULT_ENDPOINT_PERMISSIONS: tuple[tuple[str, str, str], ...] = (
    # auth
    ("POST", "/api/auth/register", "USERS_WRITE"),
    ("POST", "/api/auth/login", "USERS_READ"),
    ("POST", "/api/auth/refresh", "USERS_READ"),
    ("GET", "/api/auth/profile", "USERS_READ"),
    ("PUT", "/api/auth/profile", "USERS_WRITE"),
    ("POST", "/api/auth/change-password", "USERS_WRITE"),
    ("POST", "/api/auth/forgot-password", "USERS_READ"),
    ("POST", "/api/auth/reset-password", "USERS_WRITE"),
    ("GET", "/api/auth/users", "USERS_READ"),
    ("POST", "/api/auth/users", "USERS_WRITE"),
    ("PUT", "/api/auth/users/{id}", "USERS_WRITE"),
    ("DELETE", "/api/auth/users/{id}", "USERS_DELETE"),
    ("GET", "/api/auth/roles", "USERS_ADMIN"),
    ("POST", "/api/auth/roles", "USERS_ADMIN"),
    ("PUT", "/api/auth/roles/{id}", "USERS_ADMIN"),
    ("DELETE", "/api/auth/roles/{id}", "USERS_DELETE"),
    # outlets
    ("GET", "/api/outlets", "OUTLETS_READ"),
    ("GET", "/api/outlets/{id}", "OUTLETS_READ"),
    ("POST", "/api/outlets", "OUTLETS_WRITE"),
    ("PUT", "/api/outlets/{id}", "OUTLETS_WRITE"),
    ("DELETE", "/api/outlets/{id}", "OUTLETS_DELETE"),
    ("GET", "/api/outlets/{id}/staff", "OUTLETS_READ"),
    ("POST", "/api/outlets/{id}/staff", "OUTLETS_WRITE"),
    ("GET", "/api/outlets/{id}/performance", "OUTLETS_READ"),
    # products
    ("GET", "/api/products", "PRODUCTS_READ"),
    ("GET", "/api/products/{id}", "PRODUCTS_READ"),
    ("POST", "/api/products", "PRODUCTS_WRITE"),
    ("PUT", "/api/products/{id}", "PRODUCTS_WRITE"),
    ("DELETE", "/api/products/{id}", "PRODUCTS_DELETE"),
    ("GET", "/api/categories", "PRODUCTS_READ"),
    ("POST", "/api/categories", "PRODUCTS_WRITE"),
    ("PUT", "/api/categories/{id}", "PRODUCTS_WRITE"),
    ("DELETE", "/api/categories/{id}", "PRODUCTS_DELETE"),
    ("GET", "/api/stock-movements", "INVENTORY_READ"),
    ("POST", "/api/stock-movements", "INVENTORY_WRITE"),
    # transactions
    ("GET", "/api/transactions", "TRANSACTIONS_READ"),
    ("GET", "/api/transactions/{id}", "TRANSACTIONS_READ"),
    ("POST", "/api/transactions", "TRANSACTIONS_WRITE"),
    ("PUT", "/api/transactions/{id}", "TRANSACTIONS_WRITE"),
    ("POST", "/api/transactions/{id}/cancel", "TRANSACTIONS_WRITE"),
    ("POST", "/api/transactions/{id}/void", "TRANSACTIONS_WRITE"),
    ("POST", "/api/transactions/{id}/refund", "TRANSACTIONS_WRITE"),
    ("GET", "/api/transactions/{id}/receipt", "TRANSACTIONS_READ"),
    ("GET", "/api/transactions/outlet/{outletId}", "TRANSACTIONS_READ"),
    ("GET", "/api/transactions/cashier/{cashierId}", "TRANSACTIONS_READ"),
    ("GET", "/api/transactions/customer/{customerId}", "TRANSACTIONS_READ"),
    ("GET", "/api/transactions/outlet/{outletId}/stats", "TRANSACTIONS_READ"),
    # customers
    ("GET", "/api/customers", "CUSTOMERS_READ"),
    ("GET", "/api/customers/{id}", "CUSTOMERS_READ"),
    ("POST", "/api/customers", "CUSTOMERS_WRITE"),
    ("PUT", "/api/customers/{id}", "CUSTOMERS_WRITE"),
    ("DELETE", "/api/customers/{id}", "CUSTOMERS_DELETE"),
    # expenses
    ("GET", "/api/expenses", "EXPENSES_READ"),
    ("GET", "/api/expenses/{id}", "EXPENSES_READ"),
    ("POST", "/api/expenses", "EXPENSES_WRITE"),
    ("PUT", "/api/expenses/{id}", "EXPENSES_WRITE"),
    ("DELETE", "/api/expenses/{id}", "EXPENSES_DELETE"),
    ("GET", "/api/expenses/outlet/{outletId}", "EXPENSES_READ"),
    ("GET", "/api/expenses/category/{categoryId}", "EXPENSES_READ"),
    # reports
    ("GET", "/api/reports/sales", "REPORTS_READ"),
    ("GET", "/api/reports/inventory", "REPORTS_READ"),
    ("GET", "/api/reports/staff", "REPORTS_READ"),
    ("GET", "/api/reports/expenses", "REPORTS_READ"),
    ("POST", "/api/reports/generate", "REPORTS_WRITE"),
    ("GET", "/api/analytics/dashboard", "REPORTS_READ"),
    ("GET", "/api/analytics/forecast", "REPORTS_READ"),
    # audit / system
    ("GET", "/api/audit/logs", "AUDIT_READ"),
    ("GET", "/api/audit/backups", "AUDIT_READ"),
    ("POST", "/api/audit/backups", "AUDIT_ADMIN"),
    ("GET", "/api/system/health", "SYSTEM_READ"),
    ("GET", "/api/system/config", "SYSTEM_READ"),
    ("PUT", "/api/system/config", "SYSTEM_WRITE"),
)

DEFAULT_PUBLIC_PATHS: tuple[str, ...] = (
    "/docs",
    "/docs/**",
    "/redoc",
    "/openapi.json",
    "/swagger-ui/**",
    "/v3/api-docs/**",
    "/health",
    "/health/**",
    "/actuator/health",
    "/actuator/info",
    "/api/auth/login",
    "/api/auth/register",
    "/api/auth/forgot-password",
    "/api/auth/reset-password",
    "/error",
)

DEFAULT_ADMIN_ONLY_PATHS: tuple[str, ...] = (
    "/api/auth/users/**",
    "/api/auth/roles/**",
    "/api/system/**",
    "/api/audit/**",
    "/api/reports/admin/**",
)

DEFAULT_STATIC_PREFIXES: tuple[str, ...] = (
    "/static/",
    "/css/",
    "/js/",
    "/images/",
    "/favicon.ico",
)

# path segment -> resource, in precedence order; the first entry present in
# the path wins regardless of where it appears
DEFAULT_CATEGORY_SEGMENTS: Mapping[str, str] = MappingProxyType({
    "users": "USERS",
    "auth": "USERS",
    "outlets": "OUTLETS",
    "products": "PRODUCTS",
    "categories": "PRODUCTS",
    "transactions": "TRANSACTIONS",
    "customers": "CUSTOMERS",
    "expenses": "EXPENSES",
    "reports": "REPORTS",
    "analytics": "REPORTS",
    "audit": "AUDIT",
    "system": "SYSTEM",
})

DEFAULT_FALLBACK_PERMISSION = "SYSTEM_READ"


__all__ = [
    "ADMIN",
    "CASHIER",
    "DEFAULT_ADMIN_ONLY_PATHS",
    "DEFAULT_CATEGORY_SEGMENTS",
    "DEFAULT_ENDPOINT_PERMISSIONS",
    "DEFAULT_FALLBACK_PERMISSION",
    "DEFAULT_PUBLIC_PATHS",
    "DEFAULT_ROLE_LEVELS",
    "DEFAULT_ROLE_PERMISSIONS",
    "DEFAULT_STATIC_PREFIXES",
    "KITCHEN",
    "MANAGER",
    "STAFF",
]
