from django.conf import settings
from django.contrib.auth import get_user_model

from accounts.models import UserProfile

ROLE_GUEST = "guest"


def normalize_email(value: str) -> str:
    return (value or "").strip().lower()


def get_role_for_user(user) -> str:
    """
    Profile role wins. A user without profile is admin only when their email
    is the configured POS_ADMIN_EMAIL, otherwise a cashier.
    """
    if not user or not getattr(user, "is_authenticated", False):
        return ROLE_GUEST

    profile = getattr(user, "profile", None)
    if profile is not None:
        role = (profile.role or "").strip().lower()
        if role in (UserProfile.ROLE_ADMIN, UserProfile.ROLE_CASHIER):
            return role

    admin_email = normalize_email(getattr(settings, "POS_ADMIN_EMAIL", ""))
    if admin_email and normalize_email(user.email) == admin_email:
        return UserProfile.ROLE_ADMIN
    return UserProfile.ROLE_CASHIER


def get_user_role(request):
    return get_role_for_user(getattr(request, "user", None))


def is_admin(request) -> bool:
    return get_user_role(request) == UserProfile.ROLE_ADMIN


def display_name_for(user) -> str:
    profile = getattr(user, "profile", None)
    if profile is not None and profile.display_name:
        return profile.display_name
    if user.email:
        return user.email
    return f"{str(user.pk)[:8]}..."


def get_cashier_display_name(user_id) -> str:
    """Profile display name, else email, else a shortened id."""
    User = get_user_model()
    user = User.objects.filter(pk=user_id).select_related("profile").first()
    if user is None:
        return f"{str(user_id)[:8]}..."
    return display_name_for(user)
