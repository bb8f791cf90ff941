"""
Tests for authentication endpoints: registration, login and /me.
"""

import jwt
import pytest
from httpx import AsyncClient

from pg_finder.core.config import get_settings


@pytest.mark.asyncio
async def test_register_tenant(client: AsyncClient):
    """Successful registration returns user data without the hash."""
    response = await client.post("/api/v1/auth/register", json={
        "email": "new@example.com",
        "full_name": "New Tenant",
        "password": "securepassword123",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "new@example.com"
    assert data["role"] == "tenant"
    assert "hashed_password" not in data


@pytest.mark.asyncio
async def test_register_owner(client: AsyncClient):
    response = await client.post("/api/v1/auth/register", json={
        "email": "landlord@example.com",
        "full_name": "Lena Landlord",
        "password": "securepassword123",
        "role": "owner",
    })
    assert response.status_code == 201
    assert response.json()["role"] == "owner"


@pytest.mark.asyncio
async def test_register_unknown_role(client: AsyncClient):
    response = await client.post("/api/v1/auth/register", json={
        "email": "admin@example.com",
        "full_name": "Some Admin",
        "password": "securepassword123",
        "role": "admin",
    })
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, tenant):
    """Duplicate email returns 409."""
    response = await client.post("/api/v1/auth/register", json={
        "email": "tenant@example.com",
        "full_name": "Someone Else",
        "password": "securepassword123",
    })
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_register_weak_password(client: AsyncClient):
    """Password under 8 chars returns 422."""
    response = await client.post("/api/v1/auth/register", json={
        "email": "weak@example.com",
        "full_name": "Weak Password",
        "password": "short",
    })
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, owner):
    """Valid credentials return a JWT carrying id and role."""
    response = await client.post("/api/v1/auth/login", json={
        "email": "owner@example.com",
        "password": "testpassword123",
    })
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["role"] == "owner"

    settings = get_settings()
    claims = jwt.decode(data["access_token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert claims["sub"] == str(owner.id)
    assert claims["role"] == "owner"


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, tenant):
    """Wrong password returns 401."""
    response = await client.post("/api/v1/auth/login", json={
        "email": "tenant@example.com",
        "password": "wrongpassword",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_nonexistent_email(client: AsyncClient):
    response = await client.post("/api/v1/auth/login", json={
        "email": "nobody@example.com",
        "password": "anypassword123",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me(client: AsyncClient, tenant, tenant_headers):
    response = await client.get("/api/v1/auth/me", headers=tenant_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == tenant.id
    assert data["full_name"] == "Tara Tenant"


@pytest.mark.asyncio
async def test_me_rejects_bad_token(client: AsyncClient):
    response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401

    missing = await client.get("/api/v1/auth/me")
    assert missing.status_code == 401
