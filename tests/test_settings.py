import pytest

from tests.conftest import auth_headers

pytestmark = pytest.mark.anyio


async def test_settings_created_on_first_read(client, teacher, school):
    response = await client.get("/api/school/settings", headers=auth_headers(teacher))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["school_id"] == str(school.id)
    assert data["name"] == "Green Valley School"
    assert data["school_type"] == "school"
    assert data["primary_color"] == "#3B82F6"


async def test_save_all_settings(client, admin):
    response = await client.post(
        "/api/school/settings",
        json={"name": "Green Valley High School", "motto": "Learn and Lead", "max_students": 900},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Green Valley High School"
    assert data["motto"] == "Learn and Lead"
    assert data["max_students"] == 900


async def test_update_branding_section(client, admin):
    response = await client.patch(
        "/api/school/settings/branding",
        json={"primary_color": "#112233", "use_watermark": False},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Branding settings updated successfully"
    data = response.json()["data"]
    assert data["primary_color"] == "#112233"
    assert data["use_watermark"] is False
    assert data["secondary_color"] == "#10B981"


async def test_section_rejects_fields_of_other_sections(client, admin):
    response = await client.patch(
        "/api/school/settings/branding",
        json={"timezone": "UTC"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "timezone"


async def test_section_validates_values(client, admin):
    response = await client.patch(
        "/api/school/settings/details",
        json={"school_type": "university"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400


async def test_unknown_section(client, admin):
    response = await client.patch(
        "/api/school/settings/colours", json={}, headers=auth_headers(admin)
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid settings section"


async def test_teacher_cannot_change_settings(client, teacher):
    response = await client.patch(
        "/api/school/settings/system", json={"language": "en"}, headers=auth_headers(teacher)
    )

    assert response.status_code == 403


async def test_legacy_path_serves_same_settings(client, admin):
    await client.patch(
        "/api/school/settings/system", json={"language": "both"}, headers=auth_headers(admin)
    )

    response = await client.get("/api/supabase/school/settings", headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.json()["data"]["language"] == "both"


async def test_settings_are_per_school(client, admin, other_admin):
    await client.patch(
        "/api/school/settings/basic", json={"name": "Renamed"}, headers=auth_headers(admin)
    )

    response = await client.get("/api/school/settings", headers=auth_headers(other_admin))

    assert response.json()["data"]["name"] == "River Side School"
