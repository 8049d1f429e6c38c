import pytest

from tests.conftest import auth_headers

pytestmark = pytest.mark.anyio


async def test_create_teacher(client, admin):
    response = await client.post(
        "/api/teachers",
        json={
            "teacher_code": "TCH-20",
            "name": "Mahmudul Hasan",
            "subject": "Physics",
            "designation": "Senior Teacher",
            "email": "mahmud@greenvalley.edu",
        },
        headers=auth_headers(admin),
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["status"] == "active"
    assert data["subject"] == "Physics"


async def test_duplicate_teacher_code(client, admin, teacher_record):
    response = await client.post(
        "/api/teachers",
        json={"teacher_code": teacher_record.teacher_code, "name": "Someone"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 409
    assert response.json()["error"] == "Teacher code 'TCH-1' already exists"


async def test_invalid_status(client, admin):
    response = await client.post(
        "/api/teachers",
        json={"teacher_code": "TCH-21", "name": "Status Test", "status": "sleeping"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "status"


async def test_teacher_lists_colleagues(client, teacher, teacher_record):
    response = await client.get(
        "/api/teachers", params={"subject": "Math"}, headers=auth_headers(teacher)
    )

    assert response.status_code == 200
    assert [t["id"] for t in response.json()["data"]] == [str(teacher_record.id)]


async def test_search_by_code(client, admin, teacher_record):
    response = await client.get("/api/teachers", params={"search": "tch-1"}, headers=auth_headers(admin))

    assert response.json()["pagination"]["total_items"] == 1


async def test_update_teacher(client, admin, teacher_record):
    response = await client.patch(
        f"/api/teachers/{teacher_record.id}",
        json={"status": "on_leave", "name": None},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "on_leave"
    assert response.json()["data"]["name"] == "Selina Parvin"


async def test_teacher_cannot_edit_records(client, teacher, teacher_record):
    response = await client.patch(
        f"/api/teachers/{teacher_record.id}", json={"subject": "Art"}, headers=auth_headers(teacher)
    )

    assert response.status_code == 403


async def test_delete_teacher(client, admin, teacher_record):
    deleted = await client.delete(f"/api/teachers/{teacher_record.id}", headers=auth_headers(admin))
    assert deleted.status_code == 200

    missing = await client.get(f"/api/teachers/{teacher_record.id}", headers=auth_headers(admin))
    assert missing.status_code == 404


async def test_teachers_are_school_scoped(client, other_admin, teacher_record):
    response = await client.get(f"/api/teachers/{teacher_record.id}", headers=auth_headers(other_admin))

    assert response.status_code == 404
