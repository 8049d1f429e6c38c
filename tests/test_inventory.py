from decimal import Decimal

import pytest

from tests.conftest import auth_headers

pytestmark = pytest.mark.anyio


async def create_item(client, user, **overrides):
    payload = {
        "name": "Whiteboard Marker",
        "category": "Stationery",
        "current_quantity": 20,
        "minimum_threshold": 5,
        "unit_price": "25.50",
        **overrides,
    }
    response = await client.post("/api/inventory/items", json=payload, headers=auth_headers(user))
    assert response.status_code == 201
    return response.json()["data"]


async def move(client, user, item_id, type_, quantity, reason="Test"):
    return await client.post(
        "/api/inventory/movements",
        json={"item_id": item_id, "type": type_, "quantity": quantity, "reason": reason},
        headers=auth_headers(user),
    )


async def test_create_item_derives_stock_fields(client, admin):
    item = await create_item(client, admin)

    assert item["stock_status"] == "available"
    assert Decimal(item["total_value"]) == Decimal("510.00")
    assert item["condition"] == "good"


async def test_stock_in_and_out(client, admin):
    item = await create_item(client, admin)

    stock_in = await move(client, admin, item["id"], "in", 10, "Purchase")
    assert stock_in.status_code == 201
    assert stock_in.json()["message"] == "Stock updated: Whiteboard Marker now has 30 pcs"
    movement = stock_in.json()["data"]
    assert movement["item_name"] == "Whiteboard Marker"
    assert movement["created_by"] == str(admin.id)

    stock_out = await move(client, admin, item["id"], "out", 26, "Issued to classes")
    assert stock_out.status_code == 201

    current = await client.get(f"/api/inventory/items/{item['id']}", headers=auth_headers(admin))
    data = current.json()["data"]
    assert data["current_quantity"] == 4
    assert data["stock_status"] == "low_stock"


async def test_stock_out_beyond_quantity_is_rejected(client, admin):
    item = await create_item(client, admin, current_quantity=3)

    response = await move(client, admin, item["id"], "out", 4)

    assert response.status_code == 400
    assert response.json()["error"] == "Insufficient stock"

    current = await client.get(f"/api/inventory/items/{item['id']}", headers=auth_headers(admin))
    assert current.json()["data"]["current_quantity"] == 3


async def test_zero_quantity_in_is_rejected(client, admin):
    item = await create_item(client, admin)

    response = await move(client, admin, item["id"], "in", 0)

    assert response.status_code == 400


async def test_adjustment_sets_quantity(client, admin):
    item = await create_item(client, admin)

    response = await move(client, admin, item["id"], "adjustment", 0, "Stock count")
    assert response.status_code == 201

    current = await client.get(f"/api/inventory/items/{item['id']}", headers=auth_headers(admin))
    assert current.json()["data"]["stock_status"] == "out_of_stock"


async def test_unknown_movement_type(client, admin):
    item = await create_item(client, admin)

    response = await move(client, admin, item["id"], "teleport", 1)

    assert response.status_code == 400


async def test_movement_history_for_item(client, admin):
    item = await create_item(client, admin)
    other = await create_item(client, admin, name="Chalk")
    await move(client, admin, item["id"], "in", 5)
    await move(client, admin, item["id"], "out", 2)
    await move(client, admin, other["id"], "in", 1)

    response = await client.get(
        "/api/inventory/movements", params={"item_id": item["id"]}, headers=auth_headers(admin)
    )

    assert response.json()["pagination"]["total_items"] == 2
    assert {m["type"] for m in response.json()["data"]} == {"in", "out"}


async def test_inventory_stats(client, admin):
    await create_item(client, admin, name="Plenty", current_quantity=100, minimum_threshold=10, unit_price="1.00")
    await create_item(client, admin, name="Scarce", current_quantity=2, minimum_threshold=10, unit_price="10.00")
    await create_item(client, admin, name="Gone", current_quantity=0, unit_price="5.00")

    response = await client.get("/api/inventory/stats", headers=auth_headers(admin))

    stats = response.json()["data"]
    assert stats["total_items"] == 3
    assert stats["total_quantity"] == 102
    assert stats["low_stock_items"] == 1
    assert stats["out_of_stock_items"] == 1
    assert Decimal(stats["total_value"]) == Decimal("120.00")


async def test_export_csv(client, admin):
    await create_item(client, admin, name="Projector", category="Electronics", current_quantity=2)

    response = await client.get("/api/inventory/items/export", headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment; filename=inventory-" in response.headers["content-disposition"]
    lines = response.text.strip().splitlines()
    assert lines[0].startswith("name,name_bn,category")
    assert lines[1].startswith("Projector,,Electronics")


async def test_teacher_cannot_export(client, teacher):
    response = await client.get("/api/inventory/items/export", headers=auth_headers(teacher))

    assert response.status_code == 403


async def test_movement_on_other_school_item(client, admin, other_admin):
    item = await create_item(client, admin)

    response = await move(client, other_admin, item["id"], "in", 5)

    assert response.status_code == 404
