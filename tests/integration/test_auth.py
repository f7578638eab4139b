from datetime import timedelta

import jwt
import pytest
from httpx import AsyncClient

from flashdash.config.settings import settings
from flashdash.utils.security import create_access_token

from conftest import make_employee

pytestmark = pytest.mark.asyncio


async def test_login_returns_token_and_user(async_client: AsyncClient, db_session):
    await make_employee(
        db_session,
        email="opener@example.com",
        role="opener",
        agent_name="Olive",
        first_name="Olive",
        last_name="Oyl",
    )

    resp = await async_client.post(
        "/auth/login", json={"email": "opener@example.com", "password": "secret123"}
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "success"
    assert body["user"]["email"] == "opener@example.com"
    assert body["user"]["role"] == "opener"
    assert body["user"]["agentName"] == "Olive"
    assert "password_hash" not in body["user"]

    claims = jwt.decode(body["token"], settings.JWT_SECRET_KEY, algorithms=["HS256"])
    assert claims["sub"] == body["user"]["id"]
    assert claims["role"] == "opener"
    assert claims["exp"] - claims["iat"] == 8 * 60 * 60


async def test_login_failures_are_indistinguishable(async_client: AsyncClient, db_session):
    await make_employee(db_session, email="known@example.com")
    await make_employee(db_session, email="inactive@example.com", active=False)

    unknown = await async_client.post(
        "/auth/login", json={"email": "nobody@example.com", "password": "secret123"}
    )
    wrong = await async_client.post(
        "/auth/login", json={"email": "known@example.com", "password": "nope-nope"}
    )
    inactive = await async_client.post(
        "/auth/login", json={"email": "inactive@example.com", "password": "secret123"}
    )

    assert unknown.status_code == wrong.status_code == inactive.status_code == 401
    assert unknown.json() == wrong.json() == inactive.json()
    assert unknown.json()["message"] == "Invalid credentials"


async def test_login_missing_fields_is_400(async_client: AsyncClient):
    resp = await async_client.post("/auth/login", json={"email": "a@b.test"})
    assert resp.status_code == 400
    assert resp.json()["status"] == "failure"


async def test_login_without_secret_is_500(async_client: AsyncClient, db_session, monkeypatch):
    await make_employee(db_session, email="known@example.com")
    monkeypatch.setattr(settings, "JWT_SECRET_KEY", "")

    resp = await async_client.post(
        "/auth/login", json={"email": "known@example.com", "password": "secret123"}
    )
    assert resp.status_code == 500
    assert "token" not in resp.json()


async def test_expired_token_is_rejected(async_client: AsyncClient, admin):
    token = create_access_token(
        employee_id=str(admin.id),
        email=admin.email,
        role="admin",
        expires_delta=timedelta(seconds=-1),
    )
    resp = await async_client.get(
        "/admin/employees", headers={"Authorization": f"Bearer {token}"}
    )
    assert resp.status_code == 401


async def test_token_signed_with_other_key_is_rejected(async_client: AsyncClient, admin):
    forged = jwt.encode(
        {"sub": str(admin.id), "email": admin.email, "role": "admin"},
        "some-other-secret",
        algorithm="HS256",
    )
    resp = await async_client.get(
        "/admin/employees", headers={"Authorization": f"Bearer {forged}"}
    )
    assert resp.status_code == 401


async def test_seed_disabled_by_default(async_client: AsyncClient):
    resp = await async_client.post("/auth/seed")
    assert resp.status_code == 403
    assert resp.json()["message"] == "Seed disabled"


async def test_seed_disabled_in_production(async_client: AsyncClient, monkeypatch):
    monkeypatch.setattr(settings, "ENABLE_DEV_SEED", True)
    monkeypatch.setattr(settings, "ENVIRONMENT", "production")
    monkeypatch.setattr(settings, "SEED_EMAIL", "root@example.com")
    monkeypatch.setattr(settings, "SEED_PASSWORD", "rootpass")

    resp = await async_client.post("/auth/seed")
    assert resp.status_code == 403


async def test_seed_creates_admin_once_from_config(async_client: AsyncClient, monkeypatch):
    monkeypatch.setattr(settings, "ENABLE_DEV_SEED", True)
    monkeypatch.setattr(settings, "SEED_EMAIL", "root@example.com")
    monkeypatch.setattr(settings, "SEED_PASSWORD", "rootpass")

    first = await async_client.post("/auth/seed", json={"email": "ignored@x.test"})
    assert first.status_code == 200
    assert first.json()["ok"] is True
    assert first.json()["data"]["email"] == "root@example.com"
    assert first.json()["data"]["role"] == "admin"

    login = await async_client.post(
        "/auth/login", json={"email": "root@example.com", "password": "rootpass"}
    )
    assert login.status_code == 200

    second = await async_client.post("/auth/seed")
    assert second.status_code == 400
