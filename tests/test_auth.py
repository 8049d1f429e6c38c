import pytest

from schoolbase.models.user import Role
from tests.conftest import TEST_PASSWORD, auth_headers, make_user

pytestmark = pytest.mark.anyio


async def test_login_returns_tokens_and_sets_cookie(client, admin):
    response = await client.post(
        "/api/auth/login", json={"email": admin.email, "password": TEST_PASSWORD}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["message"] == "Welcome back, Amina!"
    assert body["data"]["token_type"] == "bearer"
    assert body["data"]["user"]["email"] == admin.email
    assert body["data"]["user"]["role"] == Role.SCHOOL_ADMIN.value
    assert "access_token" in response.cookies


async def test_login_is_case_insensitive_on_email(client, admin):
    response = await client.post(
        "/api/auth/login", json={"email": admin.email.upper(), "password": TEST_PASSWORD}
    )

    assert response.status_code == 200


async def test_login_wrong_password(client, admin):
    response = await client.post(
        "/api/auth/login", json={"email": admin.email, "password": "wrong-password"}
    )

    assert response.status_code == 401
    assert response.json() == {"status": "error", "error": "Invalid email or password"}


async def test_login_unknown_email(client):
    response = await client.post(
        "/api/auth/login", json={"email": "nobody@greenvalley.edu", "password": TEST_PASSWORD}
    )

    assert response.status_code == 401


async def test_login_inactive_user(client, db, school):
    await make_user(db, school, Role.TEACHER, "gone@greenvalley.edu", is_active=False)

    response = await client.post(
        "/api/auth/login", json={"email": "gone@greenvalley.edu", "password": TEST_PASSWORD}
    )

    assert response.status_code == 401
    assert response.json()["error"] == "Your account is inactive"


async def test_login_malformed_body(client):
    response = await client.post("/api/auth/login", json={"email": "not-an-email"})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid data"
    fields = {error["field"] for error in body["errors"]}
    assert {"email", "password"} <= fields


async def test_login_same_email_at_two_schools_needs_slug(client, db, school, other_school):
    await make_user(db, school, Role.PARENT, "shared@mail.edu", "Shared", "Parent")
    await make_user(db, other_school, Role.PARENT, "shared@mail.edu", "Shared", "Parent")

    ambiguous = await client.post(
        "/api/auth/login", json={"email": "shared@mail.edu", "password": TEST_PASSWORD}
    )
    assert ambiguous.status_code == 400

    scoped = await client.post(
        "/api/auth/login",
        json={"email": "shared@mail.edu", "password": TEST_PASSWORD, "school_slug": other_school.slug},
    )
    assert scoped.status_code == 200
    assert scoped.json()["data"]["user"]["school_id"] == str(other_school.id)


async def test_refresh_issues_new_access_token(client, admin):
    login = await client.post(
        "/api/auth/login", json={"email": admin.email, "password": TEST_PASSWORD}
    )
    refresh_token = login.json()["data"]["refresh_token"]

    response = await client.post("/api/auth/refresh", json={"refresh_token": refresh_token})

    assert response.status_code == 200
    assert response.json()["data"]["user"]["id"] == str(admin.id)


async def test_refresh_rejects_access_token(client, admin):
    login = await client.post(
        "/api/auth/login", json={"email": admin.email, "password": TEST_PASSWORD}
    )
    access_token = login.json()["data"]["access_token"]

    response = await client.post("/api/auth/refresh", json={"refresh_token": access_token})

    assert response.status_code == 401


async def test_me_with_bearer_token(client, teacher):
    response = await client.get("/api/auth/me", headers=auth_headers(teacher))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["email"] == teacher.email
    assert data["full_name"] == "Selina Parvin"
    assert data["teacher_id"] == str(teacher.teacher_id)


async def test_me_with_cookie(client, admin):
    await client.post("/api/auth/login", json={"email": admin.email, "password": TEST_PASSWORD})

    response = await client.get("/api/auth/me")

    assert response.status_code == 200
    assert response.json()["data"]["id"] == str(admin.id)


async def test_me_requires_authentication(client):
    response = await client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json()["status"] == "error"


async def test_me_rejects_garbage_token(client):
    response = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


async def test_logout_clears_cookie(client, admin):
    await client.post("/api/auth/login", json={"email": admin.email, "password": TEST_PASSWORD})

    response = await client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.json()["message"] == "Logged out successfully"
    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith("access_token=")
    assert "Max-Age=0" in set_cookie


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_unknown_route_uses_error_envelope(client):
    response = await client.get("/api/does-not-exist")

    assert response.status_code == 404
    assert response.json()["status"] == "error"
