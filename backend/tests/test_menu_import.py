import csv
import io
import json
import pytest
from decimal import Decimal

from django.core.files.uploadedfile import SimpleUploadedFile
from openpyxl import Workbook
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from menu.models import Deal, MenuItem
from .factories import AdminFactory, CashierFactory, DealFactory, MenuItemFactory


def _auth_client(user):
    client = APIClient()
    token = RefreshToken.for_user(user).access_token
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


def _menu_csv():
    content = (
        "Code,Name,Price,Category\n"
        "B01,Zinger Burger,450,Burgers\n"
        "B02,Beef Burger,520.50,\n"
        "X01,Broken,abc,Misc\n"
        ",No Code,100,Misc\n"
        "D01,Cola,-5,Drinks\n"
    )
    return SimpleUploadedFile("menu.csv", content.encode("utf-8"), content_type="text/csv")


@pytest.mark.django_db
def test_menu_items_import_is_best_effort_upsert():
    MenuItemFactory(code="B01", name="Old Zinger", price=Decimal("400.00"))
    client = _auth_client(AdminFactory())

    res = client.post("/api/menu/items/import/", {"file": _menu_csv()}, format="multipart")

    assert res.status_code == 200
    assert res.data == {"added": 1, "updated": 1, "failed": 3}
    zinger = MenuItem.objects.get(code="B01")
    assert zinger.name == "Zinger Burger"
    assert zinger.price == Decimal("450.00")
    beef = MenuItem.objects.get(code="B02")
    assert beef.category is None


@pytest.mark.django_db
def test_menu_items_import_accepts_xlsx():
    wb = Workbook()
    ws = wb.active
    ws.append(["Code", "Name", "Price", "Category"])
    ws.append(["T01", "Green Tea", 90, "Drinks"])
    bio = io.BytesIO()
    wb.save(bio)
    upload = SimpleUploadedFile(
        "menu.xlsx",
        bio.getvalue(),
        content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
    client = _auth_client(AdminFactory())

    res = client.post("/api/menu/items/import/", {"file": upload}, format="multipart")

    assert res.status_code == 200
    assert res.data["added"] == 1
    assert MenuItem.objects.get(code="T01").price == Decimal("90.00")


@pytest.mark.django_db
def test_import_rejects_unknown_format_and_cashiers():
    upload = SimpleUploadedFile("menu.txt", b"hello", content_type="text/plain")

    res = _auth_client(AdminFactory()).post("/api/menu/items/import/", {"file": upload}, format="multipart")
    assert res.status_code == 400

    res = _auth_client(CashierFactory()).post("/api/menu/items/import/", {"file": _menu_csv()}, format="multipart")
    assert res.status_code == 403


@pytest.mark.django_db
def test_deals_import_recomputes_total_and_upserts():
    DealFactory(deal_number="D1", name="Old")
    items = [
        {"menuItemId": "m-1", "name": "Zinger", "quantity": 2, "dealPricePerItem": 400, "originalPricePerItem": 450},
        {"menuItemId": "m-2", "name": "Cola", "quantity": 2, "dealPricePerItem": 80.5, "originalPricePerItem": 120},
    ]
    bad_items = [{"menuItemId": "m-1", "name": "Zinger", "quantity": "2", "dealPricePerItem": 1, "originalPricePerItem": 1}]
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(["Deal Number", "Name", "Description", "Items (JSON)", "Total Price", "Is Active"])
    writer.writerow(["D1", "Family Deal", "Two of each", json.dumps(items), "1.00", "TRUE"])
    writer.writerow(["D2", "Night Deal", "", json.dumps(items[:1]), "", "0"])
    writer.writerow(["D3", "Broken", "", "not json", "", "TRUE"])
    writer.writerow(["D4", "Wrong types", "", json.dumps(bad_items), "", "TRUE"])
    upload = SimpleUploadedFile("deals.csv", buffer.getvalue().encode("utf-8"), content_type="text/csv")

    res = _auth_client(AdminFactory()).post("/api/menu/deals/import/", {"file": upload}, format="multipart")

    assert res.status_code == 200
    assert res.data == {"added": 1, "updated": 1, "failed": 2}
    family = Deal.objects.get(deal_number="D1")
    assert family.name == "Family Deal"
    assert family.calculated_total_deal_price == Decimal("961.00")
    assert family.is_active is True
    assert Deal.objects.get(deal_number="D2").is_active is False


@pytest.mark.django_db
def test_menu_export_round_trips_through_import():
    MenuItemFactory(code="B01", name="Zinger, spicy", price=Decimal("450.00"), category="Burgers")
    client = _auth_client(AdminFactory())

    res = client.get("/api/menu/items/export/")

    assert res.status_code == 200
    assert res["Content-Disposition"].startswith("attachment;")
    content = res.content
    assert content.startswith("\ufeff".encode("utf-8"))
    assert b'"Zinger, spicy"' in content

    MenuItem.objects.all().delete()
    upload = SimpleUploadedFile("backup.csv", content, content_type="text/csv")
    res = client.post("/api/menu/items/import/", {"file": upload}, format="multipart")
    assert res.data == {"added": 1, "updated": 0, "failed": 0}
    assert MenuItem.objects.get(code="B01").name == "Zinger, spicy"


@pytest.mark.django_db
def test_deals_export_lists_items_json():
    DealFactory(deal_number="D9", name="Combo")

    res = _auth_client(AdminFactory()).get("/api/menu/deals/export/")

    assert res.status_code == 200
    lines = res.content.decode("utf-8-sig").splitlines()
    assert lines[0] == "Deal Number,Name,Description,Items (JSON),Total Price,Is Active"
    assert lines[1].startswith("D9,Combo,")
    assert lines[1].endswith(",200.00,TRUE")
