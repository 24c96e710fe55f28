# backend/menu/views.py
from rest_framework import exceptions, permissions, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response

from accounts.permissions import AdminPermission, StaffPermission
from accounts.utils import is_admin
from utils.renderers import CSVRenderer

from .imports import export_deals_csv, export_menu_items_csv, import_deals, import_menu_items, parse_upload
from .models import Deal, MenuItem
from .serializers import DealSerializer, MenuItemSerializer


class AdminWriteMixin:
    """Staff may read; only admins create, update or delete."""

    write_denied_message = "Admin role required."

    def _require_admin(self):
        if not is_admin(self.request):
            raise exceptions.PermissionDenied(self.write_denied_message)

    def perform_create(self, serializer):
        self._require_admin()
        serializer.save()

    def perform_update(self, serializer):
        self._require_admin()
        serializer.save()

    def perform_destroy(self, instance):
        self._require_admin()
        instance.delete()


class MenuItemViewSet(AdminWriteMixin, viewsets.ModelViewSet):
    serializer_class = MenuItemSerializer
    permission_classes = [permissions.IsAuthenticated, StaffPermission]

    def get_queryset(self):
        qs = MenuItem.objects.all()
        category = self.request.query_params.get("category")
        if category:
            qs = qs.filter(category=category)
        return qs.order_by("name")

    @action(
        detail=False,
        methods=["post"],
        url_path="import",
        permission_classes=[permissions.IsAuthenticated, AdminPermission],
        parser_classes=[MultiPartParser, FormParser],
    )
    def import_file(self, request):
        rows = parse_upload(request.FILES.get("file"))
        summary = import_menu_items(rows)
        return Response(summary.as_dict())

    @action(
        detail=False,
        methods=["get"],
        url_path="export",
        permission_classes=[permissions.IsAuthenticated, AdminPermission],
        renderer_classes=[CSVRenderer],
    )
    def export(self, request):
        resp = Response(export_menu_items_csv(), content_type="text/csv; charset=utf-8")
        resp["Content-Disposition"] = 'attachment; filename="menu_items_backup.csv"'
        return resp


class DealViewSet(AdminWriteMixin, viewsets.ModelViewSet):
    serializer_class = DealSerializer
    permission_classes = [permissions.IsAuthenticated, StaffPermission]

    def get_queryset(self):
        qs = Deal.objects.all()
        if not is_admin(self.request):
            qs = qs.filter(is_active=True)
        return qs.order_by("name")

    @action(
        detail=False,
        methods=["post"],
        url_path="import",
        permission_classes=[permissions.IsAuthenticated, AdminPermission],
        parser_classes=[MultiPartParser, FormParser],
    )
    def import_file(self, request):
        rows = parse_upload(request.FILES.get("file"))
        summary = import_deals(rows)
        return Response(summary.as_dict())

    @action(
        detail=False,
        methods=["get"],
        url_path="export",
        permission_classes=[permissions.IsAuthenticated, AdminPermission],
        renderer_classes=[CSVRenderer],
    )
    def export(self, request):
        resp = Response(export_deals_csv(), content_type="text/csv; charset=utf-8")
        resp["Content-Disposition"] = 'attachment; filename="deals_backup.csv"'
        return resp
