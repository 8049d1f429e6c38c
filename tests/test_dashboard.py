from datetime import date, timedelta
from decimal import Decimal

import pytest

from tests.conftest import auth_headers, make_student

pytestmark = pytest.mark.anyio


async def test_empty_school_dashboard(client, admin):
    response = await client.get("/api/dashboard/stats", headers=auth_headers(admin))

    assert response.status_code == 200
    stats = response.json()["data"]
    assert stats["total_students"] == 0
    assert stats["pending_fees"] == 0
    assert Decimal(stats["pending_fee_amount"]) == Decimal("0")


async def test_dashboard_counts(client, db, school, admin, student):
    await make_student(db, school, "STU-2", "Former Student", status="graduated")

    structure = await client.post(
        "/api/financial/fee-structures",
        json={"class_name": "Class 6", "fee_type": "Tuition", "amount": "1000.00"},
        headers=auth_headers(admin),
    )
    fee = await client.post(
        "/api/financial/student-fees",
        json={
            "student_id": str(student.id),
            "fee_structure_id": structure.json()["data"]["id"],
            "due_date": (date.today() + timedelta(days=5)).isoformat(),
        },
        headers=auth_headers(admin),
    )
    await client.post(
        f"/api/financial/student-fees/{fee.json()['data']['id']}/payments",
        json={"amount": "400.00"},
        headers=auth_headers(admin),
    )
    await client.post(
        "/api/inventory/items",
        json={"name": "Chalk", "category": "Stationery", "current_quantity": 1, "minimum_threshold": 10},
        headers=auth_headers(admin),
    )
    await client.post(
        "/api/calendar/events",
        json={"title": "Annual sports", "start_date": (date.today() + timedelta(days=3)).isoformat()},
        headers=auth_headers(admin),
    )

    response = await client.get("/api/dashboard/stats", headers=auth_headers(admin))

    stats = response.json()["data"]
    assert stats["total_students"] == 2
    assert stats["active_students"] == 1
    assert stats["pending_fees"] == 1
    assert Decimal(stats["pending_fee_amount"]) == Decimal("600.00")
    assert Decimal(stats["monthly_income"]) == Decimal("400.00")
    assert stats["inventory_items"] == 1
    assert stats["low_stock_items"] == 1
    assert stats["upcoming_events"] == 1


async def test_school_admin_dashboard_alias(client, admin, student):
    response = await client.get("/api/school-admin/dashboard", headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.json()["data"]["total_students"] == 1


async def test_parent_has_no_dashboard(client, parent):
    response = await client.get("/api/dashboard/stats", headers=auth_headers(parent))

    assert response.status_code == 403
