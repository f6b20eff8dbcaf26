from datetime import datetime, timedelta

import pytest

from conftest import auth_headers


async def test_reports_are_not_stored(client, admin):
    res = await client.get("/api/admin/reports", headers=auth_headers(admin))
    assert res.status_code == 200
    assert res.json() == []


async def test_delete_report_is_acknowledged(client, admin):
    res = await client.delete("/api/admin/reports/42", headers=auth_headers(admin))
    assert res.status_code == 200
    assert res.json() == {"message": "Report deleted successfully", "reportId": "42"}


async def test_generate_bookings_report(client, admin, guest, host, make_listing, make_booking):
    listing = await make_listing(host)
    now = datetime.utcnow()
    await make_booking(guest, listing, created_at=now - timedelta(days=2))
    await make_booking(guest, listing, created_at=now - timedelta(days=20))

    res = await client.post(
        "/api/admin/reports",
        json={"type": "bookings", "format": "pdf", "timeRange": "lastWeek"},
        headers=auth_headers(admin),
    )

    assert res.status_code == 200
    report = res.json()
    assert report["type"] == "bookings"
    assert report["format"] == "pdf"
    assert report["status"] == "completed"
    assert report["title"] == "Bookings Report - Last Week"
    assert report["summary"] == 1


async def test_generate_revenue_report_skips_cancelled(
    client, admin, guest, host, make_listing, make_booking
):
    listing = await make_listing(host)
    now = datetime.utcnow()
    await make_booking(guest, listing, created_at=now - timedelta(days=1), total_price=300)
    await make_booking(
        guest, listing, created_at=now - timedelta(days=1), total_price=999, status="CANCELLED"
    )

    res = await client.post(
        "/api/admin/reports",
        json={"type": "revenue", "format": "csv", "timeRange": "lastMonth"},
        headers=auth_headers(admin),
    )

    assert res.status_code == 200
    assert res.json()["summary"] == 300


@pytest.mark.parametrize(
    "body,error",
    [
        ({"type": "bookings", "format": "pdf"}, "Missing required fields"),
        ({}, "Missing required fields"),
        ({"type": "weather", "format": "pdf", "timeRange": "lastWeek"}, "Invalid report type"),
        ({"type": "users", "format": "docx", "timeRange": "lastWeek"}, "Invalid report format"),
        ({"type": "users", "format": "pdf", "timeRange": "forever"}, "Invalid time range"),
    ],
)
async def test_generate_report_rejects_bad_input(client, admin, body, error):
    res = await client.post("/api/admin/reports", json=body, headers=auth_headers(admin))
    assert res.status_code == 400
    assert res.json() == {"error": error}


async def test_get_settings(client, admin):
    res = await client.get("/api/admin/settings", headers=auth_headers(admin))
    assert res.status_code == 200
    body = res.json()
    assert body["siteName"] == "StayNest"
    assert body["contactEmail"] == "info@staynest.com"
    assert body["maintenanceMode"] is False
    assert body["featuredListingsCount"] == 6


async def test_update_settings_echoes_payload(client, admin):
    payload = {"siteName": "StayNest TR", "contactEmail": "ops@staynest.com", "commissionRate": 7}

    res = await client.post("/api/admin/settings", json=payload, headers=auth_headers(admin))

    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Settings updated successfully"
    assert body["settings"]["siteName"] == "StayNest TR"
    assert body["settings"]["contactEmail"] == "ops@staynest.com"
    assert body["settings"]["commissionRate"] == 7


async def test_update_settings_requires_name_and_email(client, admin):
    res = await client.post(
        "/api/admin/settings", json={"siteName": "X"}, headers=auth_headers(admin)
    )
    assert res.status_code == 400
    assert "Site name and contact email" in res.json()["error"]
