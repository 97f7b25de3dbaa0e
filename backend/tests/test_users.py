"""
Tests for user management within a company.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_create_user(client: AsyncClient, admin_headers, company, password, login):
    response = await client.post(
        "/api/v1/users",
        json={"username": "joana", "email": "joana@example.com", "password": password, "role": "operator"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["username"] == "joana"
    assert data["role"] == "operator"
    assert data["company_slug"] == company.slug
    assert "password" not in data

    login_response = await client.post(
        "/api/v1/sessions",
        json={"email": "joana@example.com", "password": password},
    )
    assert login_response.status_code == 201


@pytest.mark.asyncio
async def test_create_user_duplicate_username(client: AsyncClient, admin_headers, admin_user, password):
    response = await client.post(
        "/api/v1/users",
        json={"username": admin_user.username.upper(), "email": "novo@example.com", "password": password},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["message"] == "O username informado já está sendo utilizado nesta empresa."


@pytest.mark.asyncio
async def test_create_user_duplicate_email_across_companies(
    client: AsyncClient, admin_headers, other_admin, password
):
    """Emails are unique across all tenants."""
    response = await client.post(
        "/api/v1/users",
        json={"username": "novo", "email": other_admin.email, "password": password},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["message"] == "O email informado já está sendo utilizado."


@pytest.mark.asyncio
async def test_same_username_in_other_company(client: AsyncClient, admin_headers, other_admin_headers, password):
    for headers, email in [(admin_headers, "a@example.com"), (other_admin_headers, "b@example.com")]:
        response = await client.post(
            "/api/v1/users",
            json={"username": "bilheteria", "email": email, "password": password},
            headers=headers,
        )
        assert response.status_code == 201


@pytest.mark.asyncio
async def test_create_user_short_password(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/v1/users",
        json={"username": "curta", "email": "curta@example.com", "password": "123"},
        headers=admin_headers,
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_users(client: AsyncClient, admin_headers, admin_user, viewer_user, other_admin):
    response = await client.get("/api/v1/users", headers=admin_headers)
    assert response.status_code == 200
    usernames = [u["username"] for u in response.json()]
    assert usernames == sorted([admin_user.username, viewer_user.username])


@pytest.mark.asyncio
async def test_get_user_of_other_company(client: AsyncClient, admin_headers, other_admin):
    response = await client.get(f"/api/v1/users/{other_admin.username}", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_user(client: AsyncClient, admin_headers, viewer_user):
    response = await client.patch(
        f"/api/v1/users/{viewer_user.username}",
        json={"role": "manager"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["role"] == "manager"
    assert response.json()["email"] == viewer_user.email


@pytest.mark.asyncio
async def test_update_user_password(client: AsyncClient, admin_headers, viewer_user):
    response = await client.patch(
        f"/api/v1/users/{viewer_user.username}",
        json={"password": "nova-senha-456"},
        headers=admin_headers,
    )
    assert response.status_code == 200

    login_response = await client.post(
        "/api/v1/sessions",
        json={"email": viewer_user.email, "password": "nova-senha-456"},
    )
    assert login_response.status_code == 201


@pytest.mark.asyncio
async def test_viewer_cannot_create_user(client: AsyncClient, viewer_headers, password):
    response = await client.post(
        "/api/v1/users",
        json={"username": "intruso", "email": "intruso@example.com", "password": password},
        headers=viewer_headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["username", "email"])
async def test_update_user_rejects_null_identity(client: AsyncClient, admin_headers, viewer_user, field):
    response = await client.patch(
        f"/api/v1/users/{viewer_user.username}",
        json={field: None},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["name"] == "ValidationError"
