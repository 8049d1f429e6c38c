import pytest

from tests.conftest import auth_headers

pytestmark = pytest.mark.anyio


async def create_year(client, admin, name="2026", start="2026-01-01", end="2026-12-31"):
    response = await client.post(
        "/api/academic/years",
        json={"name": name, "start_date": start, "end_date": end},
        headers=auth_headers(admin),
    )
    assert response.status_code == 201
    return response.json()["data"]


async def test_create_year_defaults_to_draft(client, admin):
    year = await create_year(client, admin)

    assert year["status"] == "draft"
    assert year["is_current"] is False


async def test_year_end_before_start(client, admin):
    response = await client.post(
        "/api/academic/years",
        json={"name": "Backwards", "start_date": "2026-12-31", "end_date": "2026-01-01"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400


async def test_no_current_year(client, admin):
    response = await client.get("/api/academic/years/current", headers=auth_headers(admin))

    assert response.status_code == 404
    assert response.json()["error"] == "Current academic year not found"


async def test_set_current_moves_the_flag(client, admin, student_user):
    first = await create_year(client, admin, "2025", "2025-01-01", "2025-12-31")
    second = await create_year(client, admin, "2026", "2026-01-01", "2026-12-31")

    made_current = await client.post(
        f"/api/academic/years/{first['id']}/set-current", headers=auth_headers(admin)
    )
    assert made_current.status_code == 200
    data = made_current.json()["data"]
    assert data["is_current"] is True
    assert data["is_active"] is True
    assert data["status"] == "active"

    switched = await client.post(
        f"/api/academic/years/{second['id']}/set-current", headers=auth_headers(admin)
    )
    assert switched.status_code == 200

    years = await client.get("/api/academic/years", headers=auth_headers(admin))
    flags = {y["id"]: y["is_current"] for y in years.json()["data"]}
    assert flags == {first["id"]: False, second["id"]: True}

    # Every role may read the current year
    current = await client.get("/api/academic/years/current", headers=auth_headers(student_user))
    assert current.status_code == 200
    assert current.json()["data"]["id"] == second["id"]


async def test_current_year_cannot_be_deleted_or_closed(client, admin):
    year = await create_year(client, admin)
    await client.post(f"/api/academic/years/{year['id']}/set-current", headers=auth_headers(admin))

    deleted = await client.delete(f"/api/academic/years/{year['id']}", headers=auth_headers(admin))
    assert deleted.status_code == 409

    closed = await client.patch(
        f"/api/academic/years/{year['id']}/status",
        json={"status": "completed"},
        headers=auth_headers(admin),
    )
    assert closed.status_code == 409


async def test_archived_year_cannot_become_current(client, admin):
    year = await create_year(client, admin)
    await client.patch(
        f"/api/academic/years/{year['id']}/status", json={"status": "archived"}, headers=auth_headers(admin)
    )

    response = await client.post(
        f"/api/academic/years/{year['id']}/set-current", headers=auth_headers(admin)
    )

    assert response.status_code == 400


async def test_teacher_cannot_set_current(client, admin, teacher):
    year = await create_year(client, admin)

    response = await client.post(
        f"/api/academic/years/{year['id']}/set-current", headers=auth_headers(teacher)
    )

    assert response.status_code == 403


async def test_set_current_on_other_school_year(client, admin, other_admin):
    year = await create_year(client, admin)

    response = await client.post(
        f"/api/academic/years/{year['id']}/set-current", headers=auth_headers(other_admin)
    )

    assert response.status_code == 404


async def test_terms_within_year(client, admin):
    year = await create_year(client, admin)

    term = await client.post(
        "/api/academic/terms",
        json={"academic_year_id": year["id"], "name": "Term 1", "start_date": "2026-01-01", "end_date": "2026-04-30"},
        headers=auth_headers(admin),
    )
    assert term.status_code == 201
    assert term.json()["data"]["status"] == "upcoming"

    outside = await client.post(
        "/api/academic/terms",
        json={"academic_year_id": year["id"], "name": "Term X", "start_date": "2025-12-01", "end_date": "2026-02-01"},
        headers=auth_headers(admin),
    )
    assert outside.status_code == 400

    listed = await client.get(
        "/api/academic/terms", params={"academic_year_id": year["id"]}, headers=auth_headers(admin)
    )
    assert [t["name"] for t in listed.json()["data"]] == ["Term 1"]


async def test_deleting_year_removes_its_terms(client, admin):
    year = await create_year(client, admin)
    await client.post(
        "/api/academic/terms",
        json={"academic_year_id": year["id"], "name": "Term 1", "start_date": "2026-01-01", "end_date": "2026-04-30"},
        headers=auth_headers(admin),
    )

    deleted = await client.delete(f"/api/academic/years/{year['id']}", headers=auth_headers(admin))
    assert deleted.status_code == 200

    stats = await client.get("/api/academic/years/stats", headers=auth_headers(admin))
    assert stats.json()["data"]["total_years"] == 0
    assert stats.json()["data"]["total_terms"] == 0
