from rest_framework import permissions

from .models import UserProfile
from .utils import get_user_role


class RolePermission(permissions.BasePermission):
    """
    Allow access based on the operator role.
    allowed_roles: list of roles allowed.
    """
    allowed_roles = []

    def has_permission(self, request, view):
        role = get_user_role(request)
        return role in self.allowed_roles


class StaffPermission(RolePermission):
    allowed_roles = [UserProfile.ROLE_ADMIN, UserProfile.ROLE_CASHIER]


class AdminPermission(RolePermission):
    message = "Admin role required."
    allowed_roles = [UserProfile.ROLE_ADMIN]
