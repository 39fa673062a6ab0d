# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission

# =========================================================
# ROLE CONSTANTS
# =========================================================
ROLE_ADMIN = "admin"
ROLE_STAFF = "staff"
ROLE_CUSTOMER = "customer"

BACK_OFFICE_ROLES = {
    ROLE_ADMIN,
    ROLE_STAFF,
}


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views protect capabilities, not raw roles.
CAP_CATALOG_EDIT = "catalog.edit"
CAP_CATALOG_DELETE = "catalog.delete"

CAP_ORDERS_MANAGE = "orders.manage"  # fulfillment status transitions
CAP_ORDERS_VIEW_ALL = "orders.view_all"

CAP_PAYMENTS_RECONCILE = "payments.reconcile"  # manual payment-status flips (COD)

ALL_CAPABILITIES = {
    CAP_CATALOG_EDIT,
    CAP_CATALOG_DELETE,
    CAP_ORDERS_MANAGE,
    CAP_ORDERS_VIEW_ALL,
    CAP_PAYMENTS_RECONCILE,
}


# =========================================================
# ROLE → CAPABILITY MAP
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_STAFF: {
        CAP_CATALOG_EDIT,
        CAP_ORDERS_MANAGE,
        CAP_PAYMENTS_RECONCILE,
    },
    # customers only act on their own cart/orders (ownership checks live in services)
    ROLE_CUSTOMER: set(),
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def effective_capabilities_for(request, user) -> set[str]:
    """
    Capabilities granted by the user's role.

    `request` is accepted so per-request narrowing can be added without
    touching call sites.
    """
    role = get_user_role(user)
    return set(ROLE_CAPABILITIES.get(role, set()))


def user_has_capability(user, capability: str, *, request=None) -> bool:
    if not user or not getattr(user, "is_authenticated", False):
        return False
    return capability in effective_capabilities_for(request, user)


# =========================================================
# Base Role Permission (Internal Use)
# =========================================================
class BaseRolePermission(BasePermission):
    """
    Base permission for role-based access control.

    Subclasses must define:
    - allowed_roles (set)
    """

    allowed_roles: set[str] = set()

    def has_permission(self, request, view):
        user = request.user

        if not user or not user.is_authenticated:
            return False

        user_role = get_user_role(user)
        if not user_role:
            return False

        return user_role in self.allowed_roles


# =========================================================
# Capability Permissions
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        required_capability = CAP_ORDERS_MANAGE
    """

    message = "You do not have permission to perform this action."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_capability", None)
        if not required:
            # If not set, deny-by-default to avoid accidental open endpoints
            return False

        return required in effective_capabilities_for(request, user)


# =========================================================
# Role Permissions
# =========================================================
class IsAdmin(BaseRolePermission):
    allowed_roles = {ROLE_ADMIN}


class IsBackOffice(BaseRolePermission):
    allowed_roles = BACK_OFFICE_ROLES
