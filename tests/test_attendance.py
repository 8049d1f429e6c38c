import uuid
from datetime import date, timedelta

import pytest

from tests.conftest import auth_headers, make_student

pytestmark = pytest.mark.anyio

TODAY = date.today()


async def save_sheet(client, user, records, subject="Math", day=None, class_name="Class 6", section="A"):
    return await client.post(
        "/api/attendance/bulk",
        json={
            "class_name": class_name,
            "section": section,
            "subject": subject,
            "date": (day or TODAY).isoformat(),
            "records": records,
        },
        headers=auth_headers(user),
    )


async def test_record_single_attendance(client, admin, student):
    response = await client.post(
        "/api/attendance",
        json={"student_id": str(student.id), "status": "late", "remarks": "Traffic delay"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["student_name"] == "Rahim Uddin"
    assert data["class_name"] == "Class 6"
    assert data["section"] == "A"
    assert data["attendance_date"] == TODAY.isoformat()
    assert data["status"] == "late"
    assert data["recorded_by"] == str(admin.id)


async def test_default_status_is_present(client, admin, student):
    response = await client.post(
        "/api/attendance", json={"student_id": str(student.id)}, headers=auth_headers(admin)
    )

    assert response.json()["data"]["status"] == "present"


async def test_same_day_and_subject_is_a_conflict(client, admin, student):
    body = {"student_id": str(student.id), "status": "present", "subject": "Math"}
    await client.post("/api/attendance", json=body, headers=auth_headers(admin))

    duplicate = await client.post("/api/attendance", json=body, headers=auth_headers(admin))
    assert duplicate.status_code == 409

    other_subject = await client.post(
        "/api/attendance", json={**body, "subject": "English"}, headers=auth_headers(admin)
    )
    assert other_subject.status_code == 201


async def test_invalid_status_rejected(client, admin, student):
    response = await client.post(
        "/api/attendance",
        json={"student_id": str(student.id), "status": "sleeping"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "status"


async def test_unknown_student(client, admin):
    response = await client.post(
        "/api/attendance", json={"student_id": str(uuid.uuid4())}, headers=auth_headers(admin)
    )

    assert response.status_code == 404
    assert response.json()["error"] == "Student not found"


async def test_bulk_save_creates_then_updates(client, db, school, teacher, student):
    second = await make_student(db, school, "STU-2", "Fatema Akter", class_name="Class 6", section="A")

    first = await save_sheet(client, teacher, [
        {"student_id": str(student.id), "status": "present"},
        {"student_id": str(second.id), "status": "absent", "remarks": "Fever"},
    ])
    assert first.status_code == 200
    assert first.json()["data"] == {"created_count": 2, "updated_count": 0}

    again = await save_sheet(client, teacher, [
        {"student_id": str(second.id), "status": "excused", "remarks": "Doctor's note"},
    ])
    assert again.json()["data"] == {"created_count": 0, "updated_count": 1}

    listing = await client.get(
        "/api/attendance", params={"class_name": "Class 6"}, headers=auth_headers(teacher)
    )
    statuses = {r["student_name"]: r["status"] for r in listing.json()["data"]}
    assert statuses == {"Rahim Uddin": "present", "Fatema Akter": "excused"}


async def test_bulk_save_rejects_duplicates(client, teacher, student):
    response = await save_sheet(client, teacher, [
        {"student_id": str(student.id), "status": "present"},
        {"student_id": str(student.id), "status": "absent"},
    ])

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "records"


async def test_bulk_save_rejects_student_from_another_class(client, db, school, teacher, student):
    outsider = await make_student(db, school, "STU-9", "Nasir Ali", class_name="Class 7", section="A")

    response = await save_sheet(client, teacher, [
        {"student_id": str(student.id), "status": "present"},
        {"student_id": str(outsider.id), "status": "present"},
    ])

    assert response.status_code == 400
    assert "Nasir Ali" in response.json()["errors"][0]["message"]


async def test_bulk_save_is_school_scoped(client, db, other_school, teacher, student):
    foreign = await make_student(db, other_school, "RS-1", "Outside Kid", class_name="Class 6", section="A")

    response = await save_sheet(client, teacher, [
        {"student_id": str(student.id), "status": "present"},
        {"student_id": str(foreign.id), "status": "present"},
    ])

    assert response.status_code == 404

    listing = await client.get("/api/attendance", headers=auth_headers(teacher))
    assert listing.json()["data"] == []


async def test_class_sheet_lists_roster_with_marks(client, db, school, teacher, student):
    await make_student(db, school, "STU-2", "Fatema Akter", class_name="Class 6", section="A", roll_number="2")
    await make_student(db, school, "STU-3", "Left School", class_name="Class 6", section="A", status="inactive")
    await save_sheet(client, teacher, [{"student_id": str(student.id), "status": "late"}])

    response = await client.get(
        "/api/attendance/class",
        params={"class_name": "Class 6", "section": "A", "subject": "Math", "date": TODAY.isoformat()},
        headers=auth_headers(teacher),
    )

    assert response.status_code == 200
    sheet = response.json()["data"]
    marks = {s["student_name"]: s["status"] for s in sheet["students"]}
    assert marks == {"Rahim Uddin": "late", "Fatema Akter": None}
    assert sheet["stats"]["total_students"] == 2
    assert sheet["stats"]["total_records"] == 1
    assert sheet["stats"]["attendance_rate"] == 100.0


async def test_stats_over_a_period(client, db, school, admin, student):
    second = await make_student(db, school, "STU-2", "Fatema Akter", class_name="Class 6", section="A")
    yesterday = TODAY - timedelta(days=1)
    await save_sheet(client, admin, [
        {"student_id": str(student.id), "status": "present"},
        {"student_id": str(second.id), "status": "absent"},
    ], day=yesterday)
    await save_sheet(client, admin, [
        {"student_id": str(student.id), "status": "late"},
        {"student_id": str(second.id), "status": "present"},
    ])

    response = await client.get(
        "/api/attendance/stats",
        params={"date_from": yesterday.isoformat(), "date_to": TODAY.isoformat()},
        headers=auth_headers(admin),
    )

    stats = response.json()["data"]
    assert stats["total_students"] == 2
    assert stats["total_records"] == 4
    assert stats["present_count"] == 2
    assert stats["absent_count"] == 1
    assert stats["late_count"] == 1
    assert stats["attendance_rate"] == 75.0


async def test_stats_inverted_range(client, admin):
    response = await client.get(
        "/api/attendance/stats",
        params={"date_from": TODAY.isoformat(), "date_to": (TODAY - timedelta(days=3)).isoformat()},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid date range"


async def test_student_history_summary(client, admin, student):
    for offset, status in ((0, "present"), (1, "absent"), (2, "late"), (40, "absent")):
        await client.post(
            "/api/attendance",
            json={
                "student_id": str(student.id),
                "status": status,
                "attendance_date": (TODAY - timedelta(days=offset)).isoformat(),
            },
            headers=auth_headers(admin),
        )

    response = await client.get(f"/api/attendance/student/{student.id}", headers=auth_headers(admin))

    data = response.json()["data"]
    assert data["summary"]["total_days"] == 3
    assert data["summary"]["absent_days"] == 1
    assert data["summary"]["attendance_rate"] == 66.7
    assert [r["status"] for r in data["records"]] == ["present", "absent", "late"]


async def test_update_and_delete_record(client, admin, teacher, student):
    created = await client.post(
        "/api/attendance", json={"student_id": str(student.id), "status": "absent"}, headers=auth_headers(admin)
    )
    record_id = created.json()["data"]["id"]

    updated = await client.patch(
        f"/api/attendance/{record_id}",
        json={"status": "excused", "remarks": "Sick leave"},
        headers=auth_headers(teacher),
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["status"] == "excused"
    assert updated.json()["data"]["recorded_by"] == str(teacher.id)

    forbidden = await client.delete(f"/api/attendance/{record_id}", headers=auth_headers(teacher))
    assert forbidden.status_code == 403

    deleted = await client.delete(f"/api/attendance/{record_id}", headers=auth_headers(admin))
    assert deleted.status_code == 200

    missing = await client.get(f"/api/attendance/{record_id}", headers=auth_headers(admin))
    assert missing.status_code == 404
    assert missing.json()["error"] == "Attendance record not found"


async def test_record_from_another_school_is_hidden(client, admin, other_admin, student):
    created = await client.post(
        "/api/attendance", json={"student_id": str(student.id)}, headers=auth_headers(admin)
    )

    response = await client.get(
        f"/api/attendance/{created.json()['data']['id']}", headers=auth_headers(other_admin)
    )

    assert response.status_code == 404


async def test_parent_cannot_use_staff_endpoints(client, parent):
    response = await client.get("/api/attendance", headers=auth_headers(parent))

    assert response.status_code == 403
