import pytest

from tests.conftest import auth_headers

pytestmark = pytest.mark.anyio


async def create_template(client, admin, name, type_="certificate", **extra):
    response = await client.post(
        "/api/document-templates",
        json={
            "name": name,
            "type": type_,
            "category": "Academic",
            "template": {"layout": "portrait", "blocks": ["header", "body", "signature"]},
            "tags": ["official"],
            **extra,
        },
        headers=auth_headers(admin),
    )
    assert response.status_code == 201
    return response.json()["data"]


async def test_create_template(client, admin):
    template = await create_template(client, admin, "Transfer Certificate")

    assert template["template"]["layout"] == "portrait"
    assert template["tags"] == ["official"]
    assert template["usage_count"] == 0
    assert template["is_favorite"] is False
    assert template["created_by"] == str(admin.id)


async def test_new_default_replaces_old_default(client, admin):
    first = await create_template(client, admin, "Old TC", is_default=True)
    await create_template(client, admin, "New TC", is_default=True)
    other_type = await create_template(client, admin, "Admit Card", type_="admit_card", is_default=True)

    old = await client.get(f"/api/document-templates/{first['id']}", headers=auth_headers(admin))
    assert old.json()["data"]["is_default"] is False

    untouched = await client.get(f"/api/document-templates/{other_type['id']}", headers=auth_headers(admin))
    assert untouched.json()["data"]["is_default"] is True


async def test_favorite_toggles(client, teacher, admin):
    template = await create_template(client, admin, "Testimonial")

    on = await client.post(f"/api/document-templates/{template['id']}/favorite", headers=auth_headers(teacher))
    assert on.json()["data"]["is_favorite"] is True

    off = await client.post(f"/api/document-templates/{template['id']}/favorite", headers=auth_headers(teacher))
    assert off.json()["data"]["is_favorite"] is False


async def test_usage_ordering_and_stats(client, admin):
    rare = await create_template(client, admin, "Rarely used")
    busy = await create_template(client, admin, "Often used")
    await create_template(client, admin, "Retired", is_active=False)

    for _ in range(10):
        await client.post(f"/api/document-templates/{busy['id']}/use", headers=auth_headers(admin))
    used = await client.post(f"/api/document-templates/{rare['id']}/use", headers=auth_headers(admin))
    assert used.json()["data"]["usage_count"] == 1
    assert used.json()["data"]["last_used_at"] is not None

    listing = await client.get("/api/document-templates", headers=auth_headers(admin))
    assert [t["name"] for t in listing.json()["data"]] == ["Often used", "Rarely used", "Retired"]

    active = await client.get(
        "/api/document-templates", params={"is_active": True}, headers=auth_headers(admin)
    )
    assert len(active.json()["data"]) == 2

    stats = await client.get("/api/document-templates/stats", headers=auth_headers(admin))
    assert stats.json()["data"] == {"total": 3, "active": 2, "popular": 1, "total_usage": 11, "favorites": 0}


async def test_teacher_cannot_create_templates(client, teacher):
    response = await client.post(
        "/api/document-templates",
        json={"name": "Sneaky", "type": "certificate", "category": "Academic"},
        headers=auth_headers(teacher),
    )

    assert response.status_code == 403


async def test_parent_cannot_see_templates(client, parent):
    response = await client.get("/api/document-templates", headers=auth_headers(parent))

    assert response.status_code == 403


async def test_delete_template(client, admin):
    template = await create_template(client, admin, "Obsolete")

    deleted = await client.delete(f"/api/document-templates/{template['id']}", headers=auth_headers(admin))
    assert deleted.status_code == 200

    missing = await client.get(f"/api/document-templates/{template['id']}", headers=auth_headers(admin))
    assert missing.status_code == 404
    assert missing.json()["error"] == "Template not found"
