"""
Tests for login sessions: authentication, cookies, and the current user.
"""

from datetime import datetime, timezone, timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import update

from app.models.company import Company
from app.models.session import UserSession
from app.models.user import User
from app.services import session_service

GENERIC_AUTH_ERROR = {
    "name": "UnauthorizedError",
    "message": "Dados de autenticação não conferem.",
    "action": "Verifique se os dados enviados estão corretos.",
    "status_code": 401,
}


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_login_with_email(client: AsyncClient, password, admin_user, company):
    """Valid email + password opens a session and sets the cookie."""
    response = await client.post("/api/v1/sessions", json={
        "email": admin_user.email,
        "password": password,
    })
    assert response.status_code == 201
    data = response.json()
    assert len(data["token"]) == 96
    assert data["user"]["username"] == admin_user.username
    assert data["company"]["slug"] == company.slug
    assert "password" not in data["user"]

    cookie = response.headers["set-cookie"].lower()
    assert f"session_id={data['token']}" in cookie
    assert "httponly" in cookie
    assert "samesite=strict" in cookie
    assert "max-age=2592000" in cookie
    assert "secure" not in cookie  # Only in production


@pytest.mark.asyncio
async def test_login_with_username_and_company_slug(client: AsyncClient, password, admin_user, company):
    response = await client.post("/api/v1/sessions", json={
        "username": admin_user.username.upper(),
        "company_slug": company.slug,
        "password": password,
    })
    assert response.status_code == 201
    assert response.json()["user_id"] == str(admin_user.id)


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, admin_user):
    """Wrong password returns the generic envelope."""
    response = await client.post("/api/v1/sessions", json={
        "email": admin_user.email,
        "password": "senha-errada-000",
    })
    assert response.status_code == 401
    assert response.json() == GENERIC_AUTH_ERROR


@pytest.mark.asyncio
async def test_login_unknown_email(client: AsyncClient, password):
    """An unknown account is indistinguishable from a wrong password."""
    response = await client.post("/api/v1/sessions", json={
        "email": "ninguem@example.com",
        "password": password,
    })
    assert response.status_code == 401
    assert response.json() == GENERIC_AUTH_ERROR


@pytest.mark.asyncio
async def test_login_username_in_wrong_company(client: AsyncClient, password, admin_user, other_company):
    response = await client.post("/api/v1/sessions", json={
        "username": admin_user.username,
        "company_slug": other_company.slug,
        "password": password,
    })
    assert response.status_code == 401
    assert response.json() == GENERIC_AUTH_ERROR


@pytest.mark.asyncio
async def test_login_insufficient_data(client: AsyncClient, password):
    response = await client.post("/api/v1/sessions", json={
        "username": "admin",
        "password": password,
    })
    assert response.status_code == 400
    data = response.json()
    assert data["name"] == "ValidationError"
    assert data["message"] == "Dados de login insuficientes."


@pytest.mark.asyncio
@pytest.mark.parametrize("company_values", [
    {"subscription_status": "suspended"},
    {"subscription_status": "cancelled"},
    {"is_active": False},
])
async def test_login_rejected_for_unavailable_company(
    client: AsyncClient, database, admin_user, company, company_values, password
):
    async with database.sessionmaker() as session:
        await session.execute(update(Company).where(Company.id == company.id).values(**company_values))
        await session.commit()

    response = await client.post("/api/v1/sessions", json={
        "email": admin_user.email,
        "password": password,
    })
    assert response.status_code == 401
    assert response.json() == GENERIC_AUTH_ERROR


@pytest.mark.asyncio
async def test_login_rejected_for_inactive_user(client: AsyncClient, password, database, admin_user):
    async with database.sessionmaker() as session:
        await session.execute(update(User).where(User.id == admin_user.id).values(status=False))
        await session.commit()

    response = await client.post("/api/v1/sessions", json={
        "email": admin_user.email,
        "password": password,
    })
    assert response.json() == GENERIC_AUTH_ERROR


@pytest.mark.asyncio
async def test_current_user_requires_cookie(client: AsyncClient):
    response = await client.get("/api/v1/user")
    assert response.status_code == 401
    assert response.json()["message"] == "Usuário não autenticado."
    assert response.json()["action"] == "Faça login para continuar."


@pytest.mark.asyncio
async def test_current_user_with_unknown_token(client: AsyncClient):
    response = await client.get("/api/v1/user", headers={"Cookie": "session_id=" + "ab" * 48})
    assert response.status_code == 401
    assert response.json()["message"] == "Sessão inválida ou expirada."


@pytest.mark.asyncio
async def test_current_user_returns_context(client: AsyncClient, admin_user, company, admin_headers):
    response = await client.get("/api/v1/user", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == str(admin_user.id)
    assert data["role"] == "admin"
    assert data["company"] == {
        "id": str(company.id),
        "name": company.name,
        "slug": company.slug,
        "subscription_plan": "premium",
        "subscription_status": "active",
    }
    assert response.headers["cache-control"] == "no-store, no-cache, max-age=0, must-revalidate"
    assert "session_id=" in response.headers["set-cookie"]


@pytest.mark.asyncio
async def test_current_user_renews_session(client: AsyncClient, database, admin_user, login):
    """GET /user slides the expiration window to now + 30 days."""
    headers = await login(admin_user)
    token = headers["Cookie"].split("=", 1)[1]

    almost_expired = datetime.now(timezone.utc) + timedelta(hours=1)
    async with database.sessionmaker() as session:
        await session.execute(
            update(UserSession).where(UserSession.token == token).values(expires_at=almost_expired)
        )
        await session.commit()

    response = await client.get("/api/v1/user", headers=headers)
    assert response.status_code == 200

    async with database.sessionmaker() as session:
        renewed = await session_service.find_valid_by_token(session, token)
    assert _as_utc(renewed.expires_at) > datetime.now(timezone.utc) + timedelta(days=29)


@pytest.mark.asyncio
async def test_expired_session_is_rejected(client: AsyncClient, database, admin_user, login):
    headers = await login(admin_user)
    token = headers["Cookie"].split("=", 1)[1]

    async with database.sessionmaker() as session:
        await session.execute(
            update(UserSession)
            .where(UserSession.token == token)
            .values(expires_at=datetime.now(timezone.utc) - timedelta(seconds=1))
        )
        await session.commit()

    response = await client.get("/api/v1/user", headers=headers)
    assert response.status_code == 401
    assert response.json()["message"] == "Sessão inválida ou expirada."


@pytest.mark.asyncio
async def test_session_of_deactivated_company_is_rejected(
    client: AsyncClient, database, company, admin_headers
):
    async with database.sessionmaker() as session:
        await session.execute(update(Company).where(Company.id == company.id).values(is_active=False))
        await session.commit()

    response = await client.get("/api/v1/user", headers=admin_headers)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_deletes_session(client: AsyncClient, admin_headers):
    response = await client.delete("/api/v1/sessions", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Logout realizado com sucesso."}
    assert 'session_id=""' in response.headers["set-cookie"] or "Max-Age=0" in response.headers["set-cookie"]

    response = await client.get("/api/v1/user", headers=admin_headers)
    assert response.status_code == 401
