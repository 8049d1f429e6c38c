import uuid

import pytest

from tests.conftest import auth_headers

pytestmark = pytest.mark.anyio


async def test_create_school_with_first_admin(client, super_admin):
    response = await client.post(
        "/api/schools",
        json={
            "name": "Lakeview High",
            "slug": "lakeview-high",
            "email": "office@lakeview.edu",
            "established_year": 1998,
            "admin": {
                "email": "head@lakeview.edu",
                "password": "lakeview-pass",
                "first_name": "Nadia",
                "last_name": "Islam",
            },
        },
        headers=auth_headers(super_admin),
    )

    assert response.status_code == 201
    school = response.json()["data"]
    assert school["slug"] == "lakeview-high"
    assert school["is_active"] is True

    login = await client.post(
        "/api/auth/login", json={"email": "head@lakeview.edu", "password": "lakeview-pass"}
    )
    assert login.status_code == 200
    user = login.json()["data"]["user"]
    assert user["role"] == "SCHOOL_ADMIN"
    assert user["school_id"] == school["id"]


async def test_duplicate_slug(client, super_admin, school):
    response = await client.post(
        "/api/schools",
        json={"name": "Copy", "slug": school.slug},
        headers=auth_headers(super_admin),
    )

    assert response.status_code == 409


async def test_invalid_slug(client, super_admin):
    response = await client.post(
        "/api/schools",
        json={"name": "Bad Slug", "slug": "Bad Slug!"},
        headers=auth_headers(super_admin),
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "slug"


async def test_school_admin_cannot_manage_schools(client, admin):
    response = await client.get("/api/schools", headers=auth_headers(admin))

    assert response.status_code == 403


async def test_list_and_update_schools(client, super_admin, school, other_school):
    listing = await client.get("/api/schools", headers=auth_headers(super_admin))
    assert listing.json()["pagination"]["total_items"] == 2

    updated = await client.patch(
        f"/api/schools/{school.id}",
        json={"principal_name": "Dr. Hasan"},
        headers=auth_headers(super_admin),
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["principal_name"] == "Dr. Hasan"


async def test_get_missing_school(client, super_admin):
    response = await client.get(f"/api/schools/{uuid.uuid4()}", headers=auth_headers(super_admin))

    assert response.status_code == 404
    assert response.json()["error"] == "School not found"


async def test_deleted_school_blocks_its_users(client, super_admin, school, admin):
    response = await client.delete(f"/api/schools/{school.id}", headers=auth_headers(super_admin))
    assert response.status_code == 200

    login = await client.post(
        "/api/auth/login", json={"email": admin.email, "password": "password123"}
    )
    assert login.status_code == 401
    assert login.json()["error"] == "Your school account is inactive"


async def test_school_stats(client, super_admin, school, admin, teacher, student):
    response = await client.get(f"/api/schools/{school.id}/stats", headers=auth_headers(super_admin))

    assert response.status_code == 200
    stats = response.json()["data"]
    assert stats["total_users"] == 2
    assert stats["total_students"] == 1
    assert stats["total_teachers"] == 1
    assert stats["total_books"] == 0
