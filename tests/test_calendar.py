from datetime import date, timedelta

import pytest

from tests.conftest import auth_headers

pytestmark = pytest.mark.anyio

TODAY = date.today()


async def create_event(client, user, title, start, end=None, **extra):
    payload = {"title": title, "start_date": start.isoformat(), **extra}
    if end:
        payload["end_date"] = end.isoformat()
    response = await client.post("/api/calendar/events", json=payload, headers=auth_headers(user))
    assert response.status_code == 201
    return response.json()["data"]


async def test_single_day_event(client, teacher):
    event = await create_event(client, teacher, "Science fair", TODAY, type="event", location="Hall")

    assert event["end_date"] == TODAY.isoformat()
    assert event["type"] == "event"
    assert event["is_public"] is True


async def test_end_before_start_is_rejected(client, admin):
    response = await client.post(
        "/api/calendar/events",
        json={"title": "Backwards", "start_date": TODAY.isoformat(), "end_date": (TODAY - timedelta(days=1)).isoformat()},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400


async def test_today_and_upcoming(client, admin):
    await create_event(client, admin, "Finished", TODAY - timedelta(days=10), TODAY - timedelta(days=8))
    await create_event(client, admin, "Exam week", TODAY - timedelta(days=1), TODAY + timedelta(days=3), type="exam")
    await create_event(client, admin, "Victory Day", TODAY + timedelta(days=20), type="holiday")

    today = await client.get("/api/calendar/events/today", headers=auth_headers(admin))
    assert [e["title"] for e in today.json()["data"]] == ["Exam week"]

    upcoming = await client.get("/api/calendar/events/upcoming", headers=auth_headers(admin))
    assert [e["title"] for e in upcoming.json()["data"]] == ["Exam week", "Victory Day"]

    limited = await client.get(
        "/api/calendar/events/upcoming", params={"limit": 1}, headers=auth_headers(admin)
    )
    assert len(limited.json()["data"]) == 1


async def test_events_in_range(client, admin):
    await create_event(client, admin, "Early", date(2026, 3, 1), date(2026, 3, 2))
    await create_event(client, admin, "Overlapping", date(2026, 3, 30), date(2026, 4, 2))
    await create_event(client, admin, "Late", date(2026, 5, 1))

    response = await client.get(
        "/api/calendar/events/range",
        params={"start_date": "2026-04-01", "end_date": "2026-04-30"},
        headers=auth_headers(admin),
    )

    assert [e["title"] for e in response.json()["data"]] == ["Overlapping"]


async def test_inverted_range_is_rejected(client, admin):
    response = await client.get(
        "/api/calendar/events/range",
        params={"start_date": "2026-04-30", "end_date": "2026-04-01"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid date range"


async def test_private_events_hidden_from_parents(client, admin, parent):
    await create_event(client, admin, "Open day", TODAY)
    private = await create_event(client, admin, "Staff meeting", TODAY, type="meeting", is_public=False)

    listing = await client.get("/api/calendar/events", headers=auth_headers(parent))
    assert [e["title"] for e in listing.json()["data"]] == ["Open day"]

    direct = await client.get(f"/api/calendar/events/{private['id']}", headers=auth_headers(parent))
    assert direct.status_code == 404


async def test_filter_by_type(client, admin):
    await create_event(client, admin, "Eid holidays", TODAY, type="holiday")
    await create_event(client, admin, "PTA", TODAY, type="meeting")

    response = await client.get(
        "/api/calendar/events", params={"type": "holiday"}, headers=auth_headers(admin)
    )

    assert [e["title"] for e in response.json()["data"]] == ["Eid holidays"]


async def test_update_and_delete_event(client, teacher, student_user):
    event = await create_event(client, teacher, "Sports day", TODAY + timedelta(days=5))

    moved = await client.patch(
        f"/api/calendar/events/{event['id']}",
        json={"end_date": (TODAY + timedelta(days=6)).isoformat()},
        headers=auth_headers(teacher),
    )
    assert moved.status_code == 200
    assert moved.json()["data"]["end_date"] == (TODAY + timedelta(days=6)).isoformat()

    invalid = await client.patch(
        f"/api/calendar/events/{event['id']}",
        json={"end_date": TODAY.isoformat()},
        headers=auth_headers(teacher),
    )
    assert invalid.status_code == 400

    forbidden = await client.delete(f"/api/calendar/events/{event['id']}", headers=auth_headers(student_user))
    assert forbidden.status_code == 403

    deleted = await client.delete(f"/api/calendar/events/{event['id']}", headers=auth_headers(teacher))
    assert deleted.status_code == 200
