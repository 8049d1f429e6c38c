import uuid

import pytest

from tests.conftest import auth_headers

pytestmark = pytest.mark.anyio


async def schedule(client, user, **overrides):
    body = {
        "title": "Class 6 revision",
        "title_bn": "৬ষ্ঠ শ্রেণির পুনরালোচনা",
        "meeting_type": "class",
        "scheduled_at": "2026-11-01T10:00:00+00:00",
        "duration": 45,
    }
    body.update(overrides)
    response = await client.post("/api/meetings", json=body, headers=auth_headers(user))
    assert response.status_code == 201
    return response.json()["data"]


async def set_status(client, user, meeting_id, **body):
    return await client.patch(
        f"/api/meetings/{meeting_id}/status", json=body, headers=auth_headers(user)
    )


async def test_schedule_meeting(client, teacher):
    meeting = await schedule(client, teacher)

    assert meeting["status"] == "scheduled"
    assert meeting["host_id"] == str(teacher.id)
    assert meeting["host_name"] == "Selina Parvin"
    assert meeting["meeting_code"].startswith("MEET-")
    assert meeting["max_participants"] == 50
    assert meeting["current_participants"] == 0
    assert meeting["ends_at"].startswith("2026-11-01T10:45")


async def test_invalid_meeting_type(client, teacher):
    response = await client.post(
        "/api/meetings",
        json={"title": "Party", "meeting_type": "party", "scheduled_at": "2026-11-01T10:00:00"},
        headers=auth_headers(teacher),
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "meeting_type"


async def test_meeting_lifecycle(client, teacher):
    meeting = await schedule(client, teacher)

    started = await set_status(
        client, teacher, meeting["id"], status="ongoing", current_participants=12, is_recording=True
    )
    assert started.status_code == 200
    data = started.json()["data"]
    assert data["status"] == "ongoing"
    assert data["started_at"] is not None
    assert data["current_participants"] == 12
    assert data["is_recording"] is True

    ended = await set_status(client, teacher, meeting["id"], status="completed")
    data = ended.json()["data"]
    assert data["status"] == "completed"
    assert data["ended_at"] is not None
    assert data["is_recording"] is False

    reopened = await set_status(client, teacher, meeting["id"], status="ongoing")
    assert reopened.status_code == 409
    assert reopened.json()["error"] == "Cannot change a completed meeting to ongoing"


async def test_cannot_complete_a_meeting_that_never_started(client, teacher):
    meeting = await schedule(client, teacher)

    response = await set_status(client, teacher, meeting["id"], status="completed")

    assert response.status_code == 409


async def test_participants_capped_by_places(client, teacher):
    meeting = await schedule(client, teacher, max_participants=10)

    response = await set_status(client, teacher, meeting["id"], status="ongoing", current_participants=11)

    assert response.status_code == 400
    assert response.json()["error"] == "Meeting is full"

    unchanged = await client.get(f"/api/meetings/{meeting['id']}", headers=auth_headers(teacher))
    assert unchanged.json()["data"]["status"] == "scheduled"


async def test_edit_only_while_scheduled(client, teacher):
    meeting = await schedule(client, teacher)

    edited = await client.patch(
        f"/api/meetings/{meeting['id']}",
        json={"title": "Class 6 revision (moved)", "duration": None},
        headers=auth_headers(teacher),
    )
    assert edited.status_code == 200
    assert edited.json()["data"]["title"] == "Class 6 revision (moved)"
    assert edited.json()["data"]["duration"] == 45

    await set_status(client, teacher, meeting["id"], status="cancelled")
    locked = await client.patch(
        f"/api/meetings/{meeting['id']}", json={"title": "Too late"}, headers=auth_headers(teacher)
    )
    assert locked.status_code == 409


async def test_stats(client, admin, teacher):
    first = await schedule(client, teacher)
    second = await schedule(client, teacher, meeting_type="staff")
    await schedule(client, admin, meeting_type="parent")
    await set_status(client, teacher, first["id"], status="ongoing", current_participants=20)
    await set_status(client, teacher, second["id"], status="cancelled")

    response = await client.get("/api/meetings/stats", headers=auth_headers(admin))

    assert response.json()["data"] == {
        "total_meetings": 3,
        "scheduled_meetings": 1,
        "ongoing_meetings": 1,
        "completed_meetings": 0,
        "cancelled_meetings": 1,
        "total_participants": 20,
    }


async def test_list_filters(client, teacher, parent):
    await schedule(client, teacher)
    await schedule(client, teacher, meeting_type="parent", title="Guardian meeting")

    response = await client.get(
        "/api/meetings", params={"meeting_type": "parent"}, headers=auth_headers(parent)
    )

    assert response.status_code == 200
    assert [m["title"] for m in response.json()["data"]] == ["Guardian meeting"]


async def test_parent_cannot_schedule(client, parent):
    response = await client.post(
        "/api/meetings",
        json={"title": "Mine", "scheduled_at": "2026-11-01T10:00:00"},
        headers=auth_headers(parent),
    )

    assert response.status_code == 403


async def test_delete_and_school_scope(client, admin, other_admin, teacher):
    meeting = await schedule(client, teacher)

    hidden = await client.get(f"/api/meetings/{meeting['id']}", headers=auth_headers(other_admin))
    assert hidden.status_code == 404

    forbidden = await client.delete(f"/api/meetings/{meeting['id']}", headers=auth_headers(teacher))
    assert forbidden.status_code == 403

    deleted = await client.delete(f"/api/meetings/{meeting['id']}", headers=auth_headers(admin))
    assert deleted.status_code == 200

    missing = await client.get(f"/api/meetings/{meeting['id']}", headers=auth_headers(admin))
    assert missing.json()["error"] == "Meeting not found"


async def test_unknown_meeting_status_change(client, teacher):
    response = await set_status(client, teacher, uuid.uuid4(), status="ongoing")

    assert response.status_code == 404
