# backend/menu/urls.py
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import DealViewSet, MenuItemViewSet

router = DefaultRouter()
router.register(r"items", MenuItemViewSet, basename="menu-items")
router.register(r"deals", DealViewSet, basename="menu-deals")

urlpatterns = [
    path("", include(router.urls)),
]
