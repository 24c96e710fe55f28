import pytest
from rest_framework.test import APIClient


def test_metrics_endpoint():
    client = APIClient()
    res = client.get("/metrics/")

    assert res.status_code == 200
    content_type = res.headers.get("Content-Type", "")
    assert "text/plain" in content_type
    content = res.content.decode("utf-8", errors="ignore")
    assert "restopos_sales_finalized_total" in content
    assert "restopos_bill_lines_removed_total" in content
    assert "restopos_import_rows_total" in content
    assert "restopos_business_day_advances_total" in content


def test_health_endpoint():
    res = APIClient().get("/health/")

    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


@pytest.mark.django_db
def test_health_db_endpoint():
    res = APIClient().get("/health/db/")

    assert res.status_code == 200
    assert res.json()["db"] == "ok"
