"""Registration, login, token refresh, profile and user directory."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient
from jose import jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from conftest import TEST_PASSWORD
from workforce.api.v1.endpoints.auth import limiter
from workforce.core.config import settings
from workforce.core.security import create_refresh_token
from workforce.models.user import User

REGISTER = {
    "username": "jdoe",
    "password": "hunter22",
    "name": "Jane Doe",
    "email": "Jane.Doe@Example.com",
    "department": "Engineering",
}


async def _login(client: AsyncClient, username: str, password: str = TEST_PASSWORD):
    return await client.post(
        "/api/v1/auth/login",
        data={"username": username, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )


# ── Register ────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_register_creates_employee(async_client: AsyncClient):
    resp = await async_client.post("/api/v1/auth/register", json={**REGISTER, "role": "admin"})
    assert resp.status_code == 201
    data = resp.json()
    assert data["username"] == "jdoe"
    assert data["email"] == "jane.doe@example.com"
    assert data["role"] == "employee"
    assert data["is_active"] is True
    assert "hashed_password" not in data


@pytest.mark.asyncio
async def test_register_duplicate_username(async_client: AsyncClient):
    await async_client.post("/api/v1/auth/register", json=REGISTER)
    resp = await async_client.post(
        "/api/v1/auth/register", json={**REGISTER, "email": "other@example.com"}
    )
    assert resp.status_code == 400
    assert "already registered" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_register_duplicate_email(async_client: AsyncClient):
    await async_client.post("/api/v1/auth/register", json=REGISTER)
    resp = await async_client.post(
        "/api/v1/auth/register", json={**REGISTER, "username": "jdoe2"}
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email already registered"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "override",
    [{"password": "123"}, {"email": "not-an-email"}, {"username": "a b"}, {"name": "   "}],
)
async def test_register_validation(async_client: AsyncClient, override):
    resp = await async_client.post("/api/v1/auth/register", json={**REGISTER, **override})
    assert resp.status_code == 422


# ── Login ───────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_login_with_username_or_email(async_client: AsyncClient, employee: User):
    by_name = await _login(async_client, employee.username)
    by_email = await _login(async_client, employee.email)

    for resp in (by_name, by_email):
        assert resp.status_code == 200
        body = resp.json()
        assert body["token_type"] == "bearer"
        assert body["access_token"] and body["refresh_token"]

    assert "access_token" in by_name.cookies
    assert "refresh_token" in by_name.cookies


@pytest.mark.asyncio
async def test_login_wrong_password(async_client: AsyncClient, employee: User):
    resp = await _login(async_client, employee.username, "wrong-password")
    assert resp.status_code == 401
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_login_inactive_user(async_client: AsyncClient, make_user):
    user = await make_user("employee", is_active=False)
    resp = await _login(async_client, user.username)
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_login_is_rate_limited(async_client: AsyncClient, employee: User):
    limiter.reset()
    limiter.enabled = True
    try:
        codes = [(await _login(async_client, employee.username, "bad")).status_code for _ in range(6)]
    finally:
        limiter.enabled = False
        limiter.reset()
    assert codes[:5] == [401] * 5
    assert codes[5] == 429


# ── Tokens ──────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_refresh_with_body(async_client: AsyncClient, employee: User):
    resp = await async_client.post(
        "/api/v1/auth/refresh", json={"refresh_token": create_refresh_token(employee.id)}
    )
    assert resp.status_code == 200
    assert resp.json()["access_token"]


@pytest.mark.asyncio
async def test_refresh_rejects_access_token(async_client: AsyncClient, employee: User, auth_headers):
    access = auth_headers(employee)["Authorization"].removeprefix("Bearer ")
    resp = await async_client.post("/api/v1/auth/refresh", json={"refresh_token": access})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_refresh_rejects_non_numeric_subject(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/v1/auth/refresh", json={"refresh_token": create_refresh_token("not-a-number")}
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid token subject"


@pytest.mark.asyncio
async def test_refresh_rejects_token_without_subject(async_client: AsyncClient):
    token = jwt.encode(
        {"exp": datetime.now(timezone.utc) + timedelta(minutes=5), "type": "refresh"},
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )
    resp = await async_client.post("/api/v1/auth/refresh", json={"refresh_token": token})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_refresh_without_token(async_client: AsyncClient):
    resp = await async_client.post("/api/v1/auth/refresh")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_logout(async_client: AsyncClient):
    resp = await async_client.post("/api/v1/auth/logout")
    assert resp.status_code == 200
    assert resp.json()["message"] == "Logged out"


# ── Profile ─────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_me_requires_authentication(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/auth/me")
    assert resp.status_code == 401
    assert resp.json()["code"] == "AuthenticationRequired"


@pytest.mark.asyncio
async def test_me_rejects_garbage_token(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/auth/me", headers={"Authorization": "Bearer nope"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_me_returns_profile(async_client: AsyncClient, manager: User, auth_headers):
    resp = await async_client.get("/api/v1/auth/me", headers=auth_headers(manager))
    assert resp.status_code == 200
    assert resp.json()["id"] == manager.id
    assert resp.json()["role"] == "manager"


@pytest.mark.asyncio
async def test_update_profile(async_client: AsyncClient, employee: User, auth_headers):
    resp = await async_client.put(
        "/api/v1/auth/me",
        json={"name": "Renamed", "department": "Support", "password": "newpass1"},
        headers=auth_headers(employee),
    )
    assert resp.status_code == 200
    assert resp.json()["name"] == "Renamed"
    assert resp.json()["department"] == "Support"
    assert resp.json()["role"] == "employee"

    login = await _login(async_client, employee.username, "newpass1")
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_update_profile_email_clash(
    async_client: AsyncClient, employee: User, manager: User, auth_headers
):
    resp = await async_client.put(
        "/api/v1/auth/me", json={"email": manager.email}, headers=auth_headers(employee)
    )
    assert resp.status_code == 400


# ── Admin user creation ─────────────────────────────────────────────
@pytest.mark.asyncio
async def test_admin_creates_manager(
    async_client: AsyncClient, admin: User, auth_headers, db_session: AsyncSession
):
    resp = await async_client.post(
        "/api/v1/auth/users",
        json={**REGISTER, "role": "manager"},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 201
    assert resp.json()["role"] == "manager"

    stored = await db_session.execute(select(User).where(User.username == "jdoe"))
    assert stored.scalar_one().role == "manager"


@pytest.mark.asyncio
async def test_non_admin_cannot_create_users(async_client: AsyncClient, manager: User, auth_headers):
    resp = await async_client.post(
        "/api/v1/auth/users",
        json={**REGISTER, "role": "admin"},
        headers=auth_headers(manager),
    )
    assert resp.status_code == 403


# ── User directory ──────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_list_users_by_role(
    async_client: AsyncClient, employee: User, manager: User, admin: User, auth_headers
):
    denied = await async_client.get("/api/v1/users", headers=auth_headers(employee))
    assert denied.status_code == 403

    as_manager = await async_client.get("/api/v1/users", headers=auth_headers(manager))
    assert as_manager.status_code == 200
    assert {u["role"] for u in as_manager.json()} == {"employee"}

    as_admin = await async_client.get("/api/v1/users", headers=auth_headers(admin))
    assert {u["id"] for u in as_admin.json()} == {employee.id, manager.id, admin.id}
