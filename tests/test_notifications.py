import uuid

import pytest

from tests.conftest import auth_headers

pytestmark = pytest.mark.anyio


async def send(client, sender, **overrides):
    payload = {"title": "Exam schedule", "message": "Half-yearly exams start on Sunday.", **overrides}
    response = await client.post("/api/notifications", json=payload, headers=auth_headers(sender))
    assert response.status_code == 201
    return response.json()["data"]


async def test_send_notification_records_sender(client, admin):
    notification = await send(client, admin)

    assert notification["sender"] == "Amina Khatun"
    assert notification["type"] == "info"
    assert notification["priority"] == "medium"
    assert notification["is_read"] is False


async def test_direct_notification_is_private(client, admin, teacher, parent):
    await send(client, admin, title="For everyone")
    await send(client, admin, title="Teachers meeting", recipient_id=str(teacher.id))

    teacher_view = await client.get("/api/notifications", headers=auth_headers(teacher))
    parent_view = await client.get("/api/notifications", headers=auth_headers(parent))

    assert {n["title"] for n in teacher_view.json()["data"]} == {"For everyone", "Teachers meeting"}
    assert [n["title"] for n in parent_view.json()["data"]] == ["For everyone"]


async def test_unknown_recipient(client, admin):
    response = await client.post(
        "/api/notifications",
        json={"title": "Hello", "message": "Hi", "recipient_id": str(uuid.uuid4())},
        headers=auth_headers(admin),
    )

    assert response.status_code == 404
    assert response.json()["error"] == "Recipient not found"


async def test_parent_cannot_send(client, parent):
    response = await client.post(
        "/api/notifications", json={"title": "Hi", "message": "Hello"}, headers=auth_headers(parent)
    )

    assert response.status_code == 403


async def test_mark_read_and_stats(client, admin, teacher):
    first = await send(client, admin, recipient_id=str(teacher.id), priority="urgent")
    second = await send(client, admin, recipient_id=str(teacher.id), action_required=True)
    await send(client, admin, recipient_id=str(teacher.id))

    stats = await client.get("/api/notifications/stats", headers=auth_headers(teacher))
    assert stats.json()["data"] == {"total": 3, "unread": 3, "urgent": 1, "action_required": 1}

    marked = await client.post(
        "/api/notifications/mark-read",
        json={"notification_ids": [first["id"], second["id"], str(uuid.uuid4())]},
        headers=auth_headers(teacher),
    )
    assert marked.status_code == 200
    assert marked.json()["data"]["count"] == 2
    assert marked.json()["message"] == "2 notification(s) marked as read"

    stats = await client.get("/api/notifications/stats", headers=auth_headers(teacher))
    assert stats.json()["data"]["unread"] == 1
    assert stats.json()["data"]["action_required"] == 0

    unread = await client.get(
        "/api/notifications", params={"unread_only": True}, headers=auth_headers(teacher)
    )
    assert unread.json()["pagination"]["total_items"] == 1


async def test_mark_one_read(client, admin, teacher):
    notification = await send(client, admin, recipient_id=str(teacher.id))

    response = await client.post(
        f"/api/notifications/{notification['id']}/read", headers=auth_headers(teacher)
    )

    assert response.status_code == 200
    assert response.json()["data"]["is_read"] is True
    assert response.json()["data"]["read_at"] is not None


async def test_cannot_read_someone_elses_notification(client, admin, teacher, parent):
    notification = await send(client, admin, recipient_id=str(teacher.id))

    response = await client.post(
        f"/api/notifications/{notification['id']}/read", headers=auth_headers(parent)
    )

    assert response.status_code == 404


async def test_parent_cannot_delete_school_wide_notification(client, admin, parent):
    notification = await send(client, admin)

    response = await client.delete(
        f"/api/notifications/{notification['id']}", headers=auth_headers(parent)
    )

    assert response.status_code == 403


async def test_recipient_deletes_own_notification(client, admin, parent):
    notification = await send(client, admin, recipient_id=str(parent.id))

    response = await client.delete(
        f"/api/notifications/{notification['id']}", headers=auth_headers(parent)
    )
    assert response.status_code == 200

    listing = await client.get("/api/notifications", headers=auth_headers(parent))
    assert listing.json()["data"] == []
