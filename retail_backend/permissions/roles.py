# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission


# =========================================================
# ROLE CONSTANTS (STAFF JOB ROLES)
# =========================================================
# Mirror users.User.Role values.
ROLE_ADMIN = "admin"
ROLE_MANAGER = "manager"
ROLE_CASHIER = "cashier"
ROLE_TECHNICIAN = "technician"

STAFF_ROLES = {
    ROLE_ADMIN,
    ROLE_MANAGER,
    ROLE_CASHIER,
    ROLE_TECHNICIAN,
}


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views protect capabilities, not raw roles.
CAP_POS_SELL = "pos.sell"
CAP_POS_REFUND = "pos.refund"
CAP_POS_VOID = "pos.void"
CAP_REPORTS_VIEW_POS = "reports.view_pos"

ALL_CAPABILITIES = {
    CAP_POS_SELL,
    CAP_POS_REFUND,
    CAP_POS_VOID,
    CAP_REPORTS_VIEW_POS,
}


# =========================================================
# ROLE → CAPABILITY MAP
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_MANAGER: {
        CAP_POS_SELL,
        CAP_POS_REFUND,
        CAP_POS_VOID,
        CAP_REPORTS_VIEW_POS,
    },
    ROLE_CASHIER: {
        CAP_POS_SELL,
        CAP_REPORTS_VIEW_POS,
    },
    ROLE_TECHNICIAN: {
        CAP_REPORTS_VIEW_POS,
    },
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def capabilities_for(user) -> set[str]:
    role = get_user_role(user)
    return set(ROLE_CAPABILITIES.get(role, set()))


# =========================================================
# Capability Permissions
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        view.required_capability = CAP_POS_REFUND
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_capability", None)
        if not required:
            # deny-by-default when a view forgets to declare one
            return False

        return required in capabilities_for(user)
