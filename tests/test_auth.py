"""Tests for authentication endpoints."""

import pytest

from tests.conftest import TEST_EMAIL, TEST_PASSWORD, TEST_USERNAME


async def _login(client, login: str = TEST_USERNAME, password: str = TEST_PASSWORD):
    return await client.post("/api/auth/login", json={"login": login, "password": password})


@pytest.mark.asyncio
async def test_register_creates_user(async_client):
    """Test registration returns the user summary and a token."""
    response = await async_client.post(
        "/api/auth/register",
        json={"username": TEST_USERNAME, "email": TEST_EMAIL, "password": TEST_PASSWORD},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["username"] == TEST_USERNAME
    assert body["data"]["email"] == TEST_EMAIL
    assert body["data"]["isAdmin"] is False
    assert body["data"]["token"]
    assert set(body["data"]) == {"id", "username", "email", "isAdmin", "token"}


@pytest.mark.asyncio
async def test_register_duplicate_rejected(async_client, user):
    response = await async_client.post(
        "/api/auth/register",
        json={"username": "someoneelse", "email": TEST_EMAIL, "password": TEST_PASSWORD},
    )
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "User already exists with this email or username",
    }


@pytest.mark.asyncio
async def test_register_short_password_rejected(async_client):
    response = await async_client.post(
        "/api/auth/register",
        json={"username": TEST_USERNAME, "email": TEST_EMAIL, "password": "abc"},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"].startswith("password:")


@pytest.mark.asyncio
async def test_register_missing_field_rejected(async_client):
    response = await async_client.post(
        "/api/auth/register",
        json={"username": TEST_USERNAME, "password": TEST_PASSWORD},
    )
    assert response.status_code == 400
    assert response.json()["message"].startswith("email:")


@pytest.mark.asyncio
async def test_register_username_with_at_sign_rejected(async_client):
    response = await async_client.post(
        "/api/auth/register",
        json={"username": TEST_EMAIL, "email": "evil@y.com", "password": "evilpass"},
    )
    assert response.status_code == 400
    assert response.json()["message"].startswith("username:")


@pytest.mark.asyncio
async def test_email_login_reaches_owner_after_rejected_squat(async_client):
    await async_client.post(
        "/api/auth/register",
        json={"username": TEST_EMAIL, "email": "evil@y.com", "password": "evilpass"},
    )
    registered = await async_client.post(
        "/api/auth/register",
        json={"username": TEST_USERNAME, "email": TEST_EMAIL, "password": TEST_PASSWORD},
    )
    assert registered.status_code == 201

    response = await _login(async_client, login=TEST_EMAIL)
    assert response.status_code == 200
    assert response.json()["data"]["username"] == TEST_USERNAME


@pytest.mark.asyncio
async def test_login_success(async_client, user):
    """Test successful login."""
    response = await _login(async_client)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Login successful"
    assert body["data"]["id"] == str(user.id)
    assert body["data"]["token"]
    assert "password_hash" not in body["data"]


@pytest.mark.asyncio
async def test_login_by_email_case_insensitive(async_client, user):
    response = await _login(async_client, login=TEST_EMAIL.upper())
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_login_responses_do_not_enumerate_users(async_client, user):
    """Unknown login and wrong password produce identical responses."""
    unknown = await _login(async_client, login="nobody")
    wrong = await _login(async_client, password="wrongpassword")

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json() == {"success": False, "message": "Invalid credentials"}


@pytest.mark.asyncio
async def test_login_missing_password(async_client):
    response = await async_client.post("/api/auth/login", json={"login": TEST_USERNAME})
    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_lockout_scenario(async_client, clock):
    """Register, five wrong passwords, locked, then unlocked after 31 minutes."""
    response = await async_client.post(
        "/api/auth/register",
        json={"username": TEST_USERNAME, "email": TEST_EMAIL, "password": TEST_PASSWORD},
    )
    assert response.status_code == 201

    for _ in range(5):
        response = await _login(async_client, password="wrongpassword")
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    response = await _login(async_client)
    assert response.status_code == 401
    assert response.json()["message"] == (
        "Account is locked due to too many failed login attempts"
    )

    clock.advance(minutes=31)
    response = await _login(async_client)
    assert response.status_code == 200
    assert response.json()["data"]["token"]


@pytest.mark.asyncio
async def test_me_returns_profile(async_client, user, user_headers):
    response = await async_client.get("/api/auth/me", headers=user_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == str(user.id)
    assert data["username"] == TEST_USERNAME
    assert data["isAdmin"] is False
    assert "password_hash" not in data
    assert "passwordHash" not in data


@pytest.mark.asyncio
async def test_me_requires_token(async_client):
    response = await async_client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
    assert response.json() == {"success": False, "message": "No token, authorization denied"}


@pytest.mark.asyncio
async def test_me_rejects_invalid_token(async_client):
    response = await async_client.get(
        "/api/auth/me", headers={"Authorization": "Bearer not-a-real-token"}
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Token is not valid"


@pytest.mark.asyncio
async def test_me_rejects_non_bearer_scheme(async_client, user, issuer):
    response = await async_client.get(
        "/api/auth/me", headers={"Authorization": f"Basic {issuer.issue(user.id)}"}
    )
    assert response.status_code == 401
    assert response.json()["message"] == "No token, authorization denied"


@pytest.mark.asyncio
async def test_logout_revokes_token(async_client, user):
    token = (await _login(async_client)).json()["data"]["token"]
    headers = {"Authorization": f"Bearer {token}"}

    response = await async_client.post("/api/auth/logout", headers=headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Logged out successfully"}

    response = await async_client.get("/api/auth/me", headers=headers)
    assert response.status_code == 401
    assert response.json()["message"] == "Token has been invalidated. Please log in again."


@pytest.mark.asyncio
async def test_logout_twice_reports_revoked(async_client, user, user_headers):
    response = await async_client.post("/api/auth/logout", headers=user_headers)
    assert response.status_code == 200

    response = await async_client.post("/api/auth/logout", headers=user_headers)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_leaves_other_sessions_alone(async_client, user, clock):
    first = (await _login(async_client)).json()["data"]["token"]
    clock.advance(seconds=1)
    second = (await _login(async_client)).json()["data"]["token"]

    await async_client.post("/api/auth/logout", headers={"Authorization": f"Bearer {first}"})

    response = await async_client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {second}"}
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_locked_account_rejected_by_session_check(async_client, user, user_headers):
    for _ in range(5):
        await _login(async_client, password="wrongpassword")

    response = await async_client.get("/api/auth/me", headers=user_headers)
    assert response.status_code == 401
    assert response.json()["message"] == (
        "Account is locked due to too many failed login attempts"
    )


@pytest.mark.asyncio
async def test_change_password(async_client, user, user_headers):
    response = await async_client.put(
        "/api/auth/change-password",
        headers=user_headers,
        json={"currentPassword": TEST_PASSWORD, "newPassword": "newsecret"},
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Password changed successfully"

    assert (await _login(async_client, password=TEST_PASSWORD)).status_code == 401
    assert (await _login(async_client, password="newsecret")).status_code == 200


@pytest.mark.asyncio
async def test_change_password_wrong_current(async_client, user, user_headers):
    response = await async_client.put(
        "/api/auth/change-password",
        headers=user_headers,
        json={"currentPassword": "wrongpassword", "newPassword": "newsecret"},
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Current password is incorrect"


@pytest.mark.asyncio
async def test_change_password_too_short(async_client, user, user_headers):
    response = await async_client.put(
        "/api/auth/change-password",
        headers=user_headers,
        json={"currentPassword": TEST_PASSWORD, "newPassword": "abc"},
    )
    assert response.status_code == 400
    assert response.json()["message"].startswith("newPassword:")


@pytest.mark.asyncio
async def test_change_password_requires_auth(async_client):
    response = await async_client.put(
        "/api/auth/change-password",
        json={"currentPassword": TEST_PASSWORD, "newPassword": "newsecret"},
    )
    assert response.status_code == 401
