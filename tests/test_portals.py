from datetime import date, timedelta
from decimal import Decimal

import pytest

from schoolbase.models.user import Role
from tests.conftest import auth_headers, make_student, make_user

pytestmark = pytest.mark.anyio


async def give_fee(client, admin, student, amount="800.00"):
    structure = await client.post(
        "/api/financial/fee-structures",
        json={"class_name": "Class 6", "fee_type": "Exam", "amount": amount},
        headers=auth_headers(admin),
    )
    fee = await client.post(
        "/api/financial/student-fees",
        json={
            "student_id": str(student.id),
            "fee_structure_id": structure.json()["data"]["id"],
            "due_date": (date.today() + timedelta(days=7)).isoformat(),
        },
        headers=auth_headers(admin),
    )
    assert fee.status_code == 201
    return fee.json()["data"]


async def lend(client, admin, student):
    book = await client.post(
        "/api/library/books",
        json={"title": "Lalsalu", "author": "Syed Waliullah", "category": "Novel", "total_copies": 1},
        headers=auth_headers(admin),
    )
    loan = await client.post(
        "/api/library/borrow",
        json={"book_id": book.json()["data"]["id"], "student_id": str(student.id)},
        headers=auth_headers(admin),
    )
    assert loan.status_code == 201
    return loan.json()["data"]


async def test_student_sees_own_profile(client, student_user, student):
    response = await client.get("/api/student-portal/profile", headers=auth_headers(student_user))

    assert response.status_code == 200
    assert response.json()["data"]["id"] == str(student.id)


async def test_student_fees_and_library(client, admin, student_user, student):
    await give_fee(client, admin, student)
    await lend(client, admin, student)

    fees = await client.get("/api/student-portal/fees", headers=auth_headers(student_user))
    assert fees.status_code == 200
    overview = fees.json()["data"]
    assert overview["student_id"] == str(student.id)
    assert Decimal(overview["summary"]["total_balance"]) == Decimal("800.00")
    assert [f["fee_type"] for f in overview["fees"]] == ["Exam"]

    library = await client.get("/api/student-portal/library", headers=auth_headers(student_user))
    loans = library.json()["data"]
    assert loans["active"] == 1
    assert loans["overdue"] == 0
    assert loans["loans"][0]["book_title"] == "Lalsalu"


async def test_other_roles_cannot_use_student_portal(client, teacher):
    response = await client.get("/api/student-portal/profile", headers=auth_headers(teacher))

    assert response.status_code == 403


async def test_parent_lists_children(client, parent, student):
    response = await client.get("/api/parent-portal/children", headers=auth_headers(parent))

    assert response.status_code == 200
    [child] = response.json()["data"]
    assert child["student"]["id"] == str(student.id)
    assert child["relationship_type"] == "FATHER"
    assert child["is_primary"] is True


async def test_parent_views_child_fees(client, admin, parent, student):
    await give_fee(client, admin, student, amount="300.00")

    response = await client.get(
        f"/api/parent-portal/children/{student.id}/fees", headers=auth_headers(parent)
    )

    assert response.status_code == 200
    assert Decimal(response.json()["data"]["summary"]["total_due"]) == Decimal("300.00")


async def test_parent_cannot_view_unlinked_student(client, db, school, parent):
    stranger = await make_student(db, school, "STU-9", "Not Mine")

    for path in ("", "/fees", "/library", "/attendance"):
        response = await client.get(
            f"/api/parent-portal/children/{stranger.id}{path}", headers=auth_headers(parent)
        )
        assert response.status_code == 403
        assert response.json()["error"] == "You can only view your own children"


async def test_teacher_profile_and_stats(client, db, school, teacher, teacher_record, student):
    await make_student(db, school, "STU-2", "Fatema Akter", class_name="Class 6", section="A")
    await make_student(db, school, "STU-3", "Tanvir Alam", class_name="Class 7", section="B")
    await make_student(db, school, "STU-4", "Left School", class_name="Class 7", section="B", status="inactive")

    profile = await client.get("/api/teacher-portal/profile", headers=auth_headers(teacher))
    assert profile.status_code == 200
    assert profile.json()["data"]["teacher_code"] == teacher_record.teacher_code

    stats = await client.get("/api/teacher-portal/stats", headers=auth_headers(teacher))
    data = stats.json()["data"]
    assert data["total_students"] == 3
    assert {(c["class_name"], c["section"], c["count"]) for c in data["classes"]} == {
        ("Class 6", "A", 2),
        ("Class 7", "B", 1),
    }


async def test_teacher_students_by_class(client, db, school, teacher, student):
    await make_student(db, school, "STU-5", "Other Class", class_name="Class 8")

    response = await client.get(
        "/api/teacher-portal/students", params={"class_name": "Class 6"}, headers=auth_headers(teacher)
    )

    assert [s["id"] for s in response.json()["data"]] == [str(student.id)]


async def test_teacher_account_without_record(client, db, school):
    unlinked = await make_user(db, school, Role.TEACHER, "temp@greenvalley.edu", "Temp", "Teacher")

    response = await client.get("/api/teacher-portal/profile", headers=auth_headers(unlinked))

    assert response.status_code == 404
    assert response.json()["error"] == "Teacher profile not found"


async def test_teacher_takes_attendance_in_portal(client, teacher, student):
    saved = await client.post(
        "/api/teacher-portal/attendance/save",
        json={
            "class_name": "Class 6",
            "section": "A",
            "subject": "Math",
            "records": [{"student_id": str(student.id), "status": "absent", "remarks": "Sick leave"}],
        },
        headers=auth_headers(teacher),
    )
    assert saved.status_code == 200
    assert saved.json()["message"] == "Attendance saved successfully"

    sheet = await client.get(
        "/api/teacher-portal/attendance",
        params={"class_name": "Class 6", "section": "A", "subject": "Math"},
        headers=auth_headers(teacher),
    )
    [entry] = sheet.json()["data"]["students"]
    assert entry["status"] == "absent"
    assert entry["remarks"] == "Sick leave"

    stats = await client.get(
        "/api/teacher-portal/attendance/stats", params={"class_name": "Class 6"}, headers=auth_headers(teacher)
    )
    assert stats.json()["data"]["absent_count"] == 1
    assert stats.json()["data"]["attendance_rate"] == 0.0


async def test_student_and_parent_see_attendance(client, admin, student_user, parent, student):
    await client.post(
        "/api/attendance",
        json={"student_id": str(student.id), "status": "late", "remarks": "Traffic delay"},
        headers=auth_headers(admin),
    )

    own = await client.get("/api/student-portal/attendance", headers=auth_headers(student_user))
    assert own.status_code == 200
    assert own.json()["data"]["summary"]["late_days"] == 1
    assert own.json()["data"]["records"][0]["remarks"] == "Traffic delay"

    child = await client.get(
        f"/api/parent-portal/children/{student.id}/attendance", headers=auth_headers(parent)
    )
    assert child.status_code == 200
    assert child.json()["data"]["summary"]["attendance_rate"] == 100.0


async def test_student_cannot_take_attendance(client, student_user, student):
    response = await client.post(
        "/api/teacher-portal/attendance/save",
        json={"class_name": "Class 6", "records": [{"student_id": str(student.id), "status": "present"}]},
        headers=auth_headers(student_user),
    )

    assert response.status_code == 403
