import uuid

import pytest

from tests.conftest import auth_headers

pytestmark = pytest.mark.anyio


async def test_create_user_and_login(client, admin, teacher_record):
    response = await client.post(
        "/api/users",
        json={
            "email": "New.Teacher@GreenValley.edu",
            "password": "secret-pass",
            "first_name": "Jamal",
            "last_name": "Hossain",
            "role": "TEACHER",
            "teacher_id": str(teacher_record.id),
        },
        headers=auth_headers(admin),
    )

    assert response.status_code == 201
    user = response.json()["data"]
    assert user["email"] == "new.teacher@greenvalley.edu"
    assert user["full_name"] == "Jamal Hossain"
    assert user["school_id"] == str(admin.school_id)
    assert user["is_active"] is True

    login = await client.post(
        "/api/auth/login",
        json={"email": "new.teacher@greenvalley.edu", "password": "secret-pass"},
    )
    assert login.status_code == 200
    assert login.json()["data"]["user"]["role"] == "TEACHER"


async def test_create_user_duplicate_email(client, admin):
    response = await client.post(
        "/api/users",
        json={
            "email": admin.email,
            "password": "secret-pass",
            "first_name": "Copy",
            "last_name": "Cat",
            "role": "PARENT",
        },
        headers=auth_headers(admin),
    )

    assert response.status_code == 409
    assert response.json()["error"] == "A user with this email already exists"


async def test_create_super_admin_in_school_is_rejected(client, admin):
    response = await client.post(
        "/api/users",
        json={
            "email": "boss@greenvalley.edu",
            "password": "secret-pass",
            "first_name": "Big",
            "last_name": "Boss",
            "role": "SUPER_ADMIN",
        },
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "role"


async def test_create_user_short_password(client, admin):
    response = await client.post(
        "/api/users",
        json={
            "email": "short@greenvalley.edu",
            "password": "abc",
            "first_name": "Short",
            "last_name": "Pass",
            "role": "PARENT",
        },
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "password"


async def test_create_user_linked_to_unknown_student(client, admin):
    response = await client.post(
        "/api/users",
        json={
            "email": "ghost@greenvalley.edu",
            "password": "secret-pass",
            "first_name": "Ghost",
            "last_name": "Student",
            "role": "STUDENT",
            "student_id": str(uuid.uuid4()),
        },
        headers=auth_headers(admin),
    )

    assert response.status_code == 404


async def test_list_users_by_role(client, admin, teacher, parent):
    response = await client.get("/api/users", params={"role": "TEACHER"}, headers=auth_headers(admin))

    assert response.status_code == 200
    assert [u["email"] for u in response.json()["data"]] == [teacher.email]

    everyone = await client.get("/api/users", headers=auth_headers(admin))
    assert everyone.json()["pagination"]["total_items"] == 3


async def test_list_users_is_school_scoped(client, admin, other_admin):
    response = await client.get("/api/users", headers=auth_headers(other_admin))

    assert [u["email"] for u in response.json()["data"]] == [other_admin.email]


async def test_deactivate_user_blocks_login(client, admin, teacher):
    response = await client.patch(
        f"/api/users/{teacher.id}/status", json={"is_active": False}, headers=auth_headers(admin)
    )

    assert response.status_code == 200
    assert response.json()["data"]["is_active"] is False
    assert response.json()["message"] == "User deactivated successfully"

    login = await client.post(
        "/api/auth/login", json={"email": teacher.email, "password": "password123"}
    )
    assert login.status_code == 401


async def test_cannot_deactivate_self(client, admin):
    response = await client.patch(
        f"/api/users/{admin.id}/status", json={"is_active": False}, headers=auth_headers(admin)
    )

    assert response.status_code == 400
    assert response.json()["error"] == "You cannot deactivate your own account"


async def test_delete_user(client, admin, parent):
    response = await client.delete(f"/api/users/{parent.id}", headers=auth_headers(admin))
    assert response.status_code == 200

    missing = await client.get(f"/api/users/{parent.id}", headers=auth_headers(admin))
    assert missing.status_code == 404


async def test_cannot_delete_self(client, admin):
    response = await client.delete(f"/api/users/{admin.id}", headers=auth_headers(admin))

    assert response.status_code == 400


async def test_teacher_cannot_manage_users(client, teacher):
    response = await client.get("/api/users", headers=auth_headers(teacher))

    assert response.status_code == 403


async def test_admin_settings_defaults_and_update(client, teacher):
    current = await client.get("/api/admin/settings", headers=auth_headers(teacher))
    assert current.status_code == 200
    data = current.json()["data"]
    assert data["user_id"] == str(teacher.id)
    assert data["language"] == "bn"
    assert data["items_per_page"] == 25

    updated = await client.patch(
        "/api/admin/settings",
        json={"dark_mode": True, "language": "en", "items_per_page": 50},
        headers=auth_headers(teacher),
    )
    assert updated.status_code == 200
    data = updated.json()["data"]
    assert data["dark_mode"] is True
    assert data["language"] == "en"
    assert data["items_per_page"] == 50
    assert data["session_timeout"] == 60


async def test_admin_settings_rejects_out_of_range(client, admin):
    response = await client.patch(
        "/api/admin/settings", json={"session_timeout": 2}, headers=auth_headers(admin)
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "session_timeout"


async def test_parent_has_no_admin_settings(client, parent):
    response = await client.get("/api/admin/settings", headers=auth_headers(parent))

    assert response.status_code == 403
