# ===============================================================================
# API PERMISSIONS CLASSES 🔐
# ===============================================================================

from typing import Any

from rest_framework import permissions
from rest_framework.request import Request


class IsCustomerOwnerOrStaff(permissions.BasePermission):
    """
    Resellers may act only on their own customers; staff and admin
    accounts may act on any customer.
    """

    def has_permission(self, request: Request, view: Any) -> bool:
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request: Request, view: Any, obj: Any) -> bool:
        user = request.user
        if user.is_staff or user.is_superuser:
            return True
        account = getattr(user, "reseller_account", None)
        if account is not None and account.is_admin:
            return True
        return bool(getattr(obj, "owner_id", None) == user.pk)
