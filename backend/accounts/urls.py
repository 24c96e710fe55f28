# backend/accounts/urls.py
from django.urls import path

from .views import CashierListView, LoginView, MeView, RefreshView

urlpatterns = [
    path("login/", LoginView.as_view(), name="auth-login"),
    path("refresh/", RefreshView.as_view(), name="auth-refresh"),
    path("me/", MeView.as_view(), name="auth-me"),
    path("cashiers/", CashierListView.as_view(), name="auth-cashiers"),
]
