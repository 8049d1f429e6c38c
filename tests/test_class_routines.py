import uuid

import pytest

from schoolbase.models import Teacher
from tests.conftest import auth_headers

pytestmark = pytest.mark.anyio


def routine_body(**overrides):
    body = {
        "class_name": "Class 6",
        "section": "A",
        "academic_year": "2026",
        "institute_name": "Green Valley School",
        "class_teacher": "Selina Parvin",
        "effective_date": "2026-01-01",
        "periods": [
            {
                "day_of_week": 0,
                "period_number": 1,
                "start_time": "08:00",
                "end_time": "08:45",
                "subject": "Bangla",
                "subject_bn": "বাংলা",
                "teacher_name": "Selina Parvin",
            },
            {
                "day_of_week": 0,
                "period_number": 2,
                "start_time": "08:45",
                "end_time": "09:30",
                "subject": "Math",
                "teacher_name": "Kamal Hossain",
                "room_number": "204",
            },
        ],
    }
    body.update(overrides)
    return body


async def create_routine(client, user, **overrides):
    response = await client.post(
        "/api/class-routines", json=routine_body(**overrides), headers=auth_headers(user)
    )
    assert response.status_code == 201
    return response.json()["data"]


async def test_create_routine_with_periods(client, admin):
    data = await create_routine(client, admin)

    assert data["status"] == "active"
    assert data["week_structure"] == "6-day"
    assert data["periods_per_day"] == 7
    assert data["period_duration"] == 45
    assert data["language_option"] == "bilingual"
    assert [p["subject"] for p in data["periods"]] == ["Bangla", "Math"]
    assert data["periods"][0]["period_type"] == "regular"


async def test_routine_limits_are_validated(client, admin):
    response = await client.post(
        "/api/class-routines",
        json=routine_body(periods_per_day=12, template="poster"),
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    fields = {e["field"] for e in response.json()["errors"]}
    assert {"periods_per_day", "template"} <= fields


async def test_period_must_end_after_it_starts(client, admin):
    periods = [{
        "day_of_week": 1,
        "period_number": 1,
        "start_time": "09:00",
        "end_time": "08:15",
        "subject": "English",
    }]

    response = await client.post(
        "/api/class-routines", json=routine_body(periods=periods), headers=auth_headers(admin)
    )

    assert response.status_code == 400


async def test_same_slot_twice_is_rejected(client, admin):
    slot = {"day_of_week": 2, "period_number": 1, "start_time": "08:00", "end_time": "08:45"}
    periods = [{**slot, "subject": "Science"}, {**slot, "subject": "History"}]

    response = await client.post(
        "/api/class-routines", json=routine_body(periods=periods), headers=auth_headers(admin)
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Duplicate periods in routine"

    listing = await client.get("/api/class-routines", headers=auth_headers(admin))
    assert listing.json()["data"] == []


async def test_teacher_name_filled_from_teacher_record(client, admin, teacher_record):
    periods = [{
        "day_of_week": 0,
        "period_number": 3,
        "start_time": "09:30",
        "end_time": "10:15",
        "subject": "English",
        "teacher_id": str(teacher_record.id),
    }]

    data = await create_routine(client, admin, periods=periods)

    assert data["periods"][0]["teacher_name"] == "Selina Parvin"


async def test_teacher_from_another_school_is_rejected(client, db, other_school, admin):
    outsider = Teacher(school_id=other_school.id, teacher_code="RS-T1", name="Outside Teacher")
    db.add(outsider)
    await db.commit()

    periods = [{
        "day_of_week": 0,
        "period_number": 1,
        "start_time": "08:00",
        "end_time": "08:45",
        "subject": "Art",
        "teacher_id": str(outsider.id),
    }]
    response = await client.post(
        "/api/class-routines", json=routine_body(periods=periods), headers=auth_headers(admin)
    )

    assert response.status_code == 404
    assert response.json()["error"] == "Teacher not found"


async def test_update_replaces_periods_only_when_sent(client, admin):
    routine = await create_routine(client, admin)

    renamed = await client.patch(
        f"/api/class-routines/{routine['id']}",
        json={"class_teacher": "Kamal Hossain", "semester": None},
        headers=auth_headers(admin),
    )
    assert renamed.status_code == 200
    assert renamed.json()["data"]["class_teacher"] == "Kamal Hossain"
    assert len(renamed.json()["data"]["periods"]) == 2

    replaced = await client.patch(
        f"/api/class-routines/{routine['id']}",
        json={"periods": [{
            "day_of_week": 5,
            "period_number": 1,
            "start_time": "08:00",
            "end_time": "08:45",
            "subject": "Religion",
        }]},
        headers=auth_headers(admin),
    )
    assert [p["subject"] for p in replaced.json()["data"]["periods"]] == ["Religion"]


async def test_null_for_required_field_is_ignored(client, admin):
    routine = await create_routine(client, admin)

    response = await client.patch(
        f"/api/class-routines/{routine['id']}",
        json={"institute_name": None},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["data"]["institute_name"] == "Green Valley School"


async def test_duplicate_makes_a_draft_copy(client, admin):
    routine = await create_routine(client, admin)

    response = await client.post(
        f"/api/class-routines/{routine['id']}/duplicate", headers=auth_headers(admin)
    )

    assert response.status_code == 201
    copy = response.json()["data"]
    assert copy["id"] != routine["id"]
    assert copy["class_name"] == "Class 6 (Copy)"
    assert copy["status"] == "draft"
    assert [p["subject"] for p in copy["periods"]] == ["Bangla", "Math"]
    assert {p["id"] for p in copy["periods"]}.isdisjoint({p["id"] for p in routine["periods"]})


async def test_stats_and_status_filter(client, admin):
    await create_routine(client, admin)
    await create_routine(client, admin, section="B", status="draft")
    archived = await create_routine(client, admin, section="C")
    await client.patch(
        f"/api/class-routines/{archived['id']}", json={"status": "archived"}, headers=auth_headers(admin)
    )

    stats = await client.get("/api/class-routines/stats", headers=auth_headers(admin))
    assert stats.json()["data"] == {"total": 3, "active": 1, "draft": 1, "archived": 1}

    drafts = await client.get(
        "/api/class-routines", params={"status": "draft"}, headers=auth_headers(admin)
    )
    assert [r["section"] for r in drafts.json()["data"]] == ["B"]


async def test_delete_routine(client, admin, teacher):
    routine = await create_routine(client, admin)

    forbidden = await client.delete(f"/api/class-routines/{routine['id']}", headers=auth_headers(teacher))
    assert forbidden.status_code == 403

    deleted = await client.delete(f"/api/class-routines/{routine['id']}", headers=auth_headers(admin))
    assert deleted.status_code == 200

    missing = await client.get(f"/api/class-routines/{routine['id']}", headers=auth_headers(admin))
    assert missing.status_code == 404
    assert missing.json()["error"] == "Class routine not found"


async def test_routine_from_another_school_is_hidden(client, admin, other_admin):
    routine = await create_routine(client, admin)

    response = await client.get(f"/api/class-routines/{routine['id']}", headers=auth_headers(other_admin))

    assert response.status_code == 404


async def test_unknown_routine(client, admin):
    response = await client.post(
        f"/api/class-routines/{uuid.uuid4()}/duplicate", headers=auth_headers(admin)
    )

    assert response.status_code == 404


async def test_time_slots_with_break(client, teacher):
    response = await client.get(
        "/api/class-routines/time-slots",
        params={"start_time": "08:00", "period_duration": 40, "periods_per_day": 5},
        headers=auth_headers(teacher),
    )

    slots = response.json()["data"]
    assert [(s["label"], s["start_time"], s["end_time"]) for s in slots] == [
        ("Period 1", "08:00", "08:40"),
        ("Period 2", "08:40", "09:20"),
        ("Period 3", "09:20", "10:00"),
        ("Break", "10:00", "10:15"),
        ("Period 4", "10:15", "10:55"),
        ("Period 5", "10:55", "11:35"),
    ]
    assert slots[3]["period"] is None
    assert slots[3]["label_bn"] == "বিরতি"
    assert slots[0]["label_bn"] == "1ম পিরিয়ড"


async def test_time_slots_without_break(client, teacher):
    response = await client.get(
        "/api/class-routines/time-slots",
        params={"include_breaks": "false"},
        headers=auth_headers(teacher),
    )

    slots = response.json()["data"]
    assert len(slots) == 7
    assert slots[-1]["end_time"] == "13:15"


async def test_time_slots_out_of_range(client, teacher):
    response = await client.get(
        "/api/class-routines/time-slots",
        params={"period_duration": 90},
        headers=auth_headers(teacher),
    )

    assert response.status_code == 400


async def test_teacher_choices(client, admin, teacher_record):
    response = await client.get("/api/class-routines/teachers", headers=auth_headers(admin))

    assert [t["name"] for t in response.json()["data"]] == ["Selina Parvin"]


async def test_student_sees_class_routine(client, admin, student_user):
    await create_routine(client, admin, status="draft", effective_date="2026-06-01")
    await create_routine(client, admin)
    await create_routine(client, admin, section="B")

    response = await client.get("/api/student-portal/routine", headers=auth_headers(student_user))

    assert response.status_code == 200
    data = response.json()["data"]
    assert (data["class_name"], data["section"], data["status"]) == ("Class 6", "A", "active")
    assert len(data["periods"]) == 2


async def test_student_without_routine(client, student_user):
    response = await client.get("/api/student-portal/routine", headers=auth_headers(student_user))

    assert response.status_code == 404


async def test_parent_cannot_manage_routines(client, parent):
    response = await client.get("/api/class-routines", headers=auth_headers(parent))

    assert response.status_code == 403
