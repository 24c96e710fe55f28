import pytest
from django.contrib.auth import get_user_model
from django.test import override_settings
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from accounts.models import UserProfile
from accounts.utils import get_cashier_display_name, get_role_for_user
from .factories import AdminFactory, CashierFactory

User = get_user_model()


def _auth_client(user):
    client = APIClient()
    token = RefreshToken.for_user(user).access_token
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


@pytest.mark.django_db
def test_login_returns_tokens_and_role():
    user = AdminFactory()
    client = APIClient()

    res = client.post(
        "/api/auth/login/",
        {"username": user.username, "password": "password123"},
        format="json",
    )

    assert res.status_code == 200
    assert "access" in res.data and "refresh" in res.data
    assert res.data["user"]["role"] == "admin"


@pytest.mark.django_db
def test_login_with_email():
    user = CashierFactory()

    res = APIClient().post(
        "/api/auth/login/",
        {"username": user.email.upper(), "password": "password123"},
        format="json",
    )

    assert res.status_code == 200
    assert res.data["user"]["id"] == user.id


@pytest.mark.django_db
def test_login_with_wrong_password_fails():
    user = CashierFactory()

    res = APIClient().post("/api/auth/login/", {"username": user.username, "password": "nope"}, format="json")

    assert res.status_code == 401


@pytest.mark.django_db
def test_refresh_returns_new_access_token():
    user = CashierFactory()
    refresh = RefreshToken.for_user(user)

    res = APIClient().post("/api/auth/refresh/", {"refresh": str(refresh)}, format="json")

    assert res.status_code == 200
    assert "access" in res.data


@pytest.mark.django_db
def test_me_returns_role_and_display_name():
    user = CashierFactory()
    user.profile.display_name = "Counter 2"
    user.profile.save()

    res = _auth_client(user).get("/api/auth/me/")

    assert res.status_code == 200
    assert res.data["role"] == "cashier"
    assert res.data["display_name"] == "Counter 2"


@pytest.mark.django_db
@override_settings(POS_ADMIN_EMAIL="boss@example.com")
def test_role_falls_back_to_configured_admin_email():
    boss = User.objects.create_user(username="boss", email="Boss@Example.com", password="password123")
    clerk = User.objects.create_user(username="clerk", email="clerk@example.com", password="password123")

    assert get_role_for_user(boss) == UserProfile.ROLE_ADMIN
    assert get_role_for_user(clerk) == UserProfile.ROLE_CASHIER
    assert get_role_for_user(None) == "guest"


@pytest.mark.django_db
def test_cashier_list_is_admin_only():
    admin = AdminFactory()
    cashier = CashierFactory()

    assert _auth_client(cashier).get("/api/auth/cashiers/").status_code == 403

    res = _auth_client(admin).get("/api/auth/cashiers/")
    assert res.status_code == 200
    assert [row["id"] for row in res.data] == [cashier.id]


@pytest.mark.django_db
def test_cashier_display_name_fallbacks():
    named = CashierFactory()
    named.profile.display_name = "Front Desk"
    named.profile.save()
    unnamed = CashierFactory(email="")

    assert get_cashier_display_name(named.pk) == "Front Desk"
    assert get_cashier_display_name(CashierFactory().pk).endswith("@example.com")
    assert get_cashier_display_name(unnamed.pk) == f"{str(unnamed.pk)[:8]}..."
