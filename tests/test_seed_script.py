"""
Shell seed script.
"""

import pytest

from flashdash.apps.auth.models import Employee
from flashdash.config.settings import settings
from flashdash.utils.security import verify_password

from scripts import seed


@pytest.fixture
def seed_env(monkeypatch, session_factory):
    calls = []

    async def _create_tables() -> None:
        calls.append("create_tables")

    monkeypatch.setattr(seed, "async_session_factory", session_factory)
    monkeypatch.setattr(seed, "create_tables", _create_tables)
    monkeypatch.setattr(settings, "SEED_EMAIL", "root@example.com")
    monkeypatch.setattr(settings, "SEED_PASSWORD", "rootpass")
    return calls


@pytest.mark.asyncio
async def test_seed_refuses_production(seed_env, monkeypatch, db_session):
    monkeypatch.setattr(settings, "ENVIRONMENT", "production")

    with pytest.raises(SystemExit, match="production"):
        await seed.seed_admin()

    assert seed_env == []
    assert not await Employee.exists(db=db_session, email="root@example.com")


@pytest.mark.asyncio
async def test_seed_needs_credentials(seed_env, monkeypatch):
    monkeypatch.setattr(settings, "SEED_PASSWORD", "")

    with pytest.raises(SystemExit):
        await seed.seed_admin()
    assert seed_env == []


@pytest.mark.asyncio
async def test_seed_creates_admin_once(seed_env, session_factory):
    await seed.seed_admin()
    await seed.seed_admin()

    async with session_factory() as session:
        admins = await Employee.find_many(db=session, email="root@example.com")
    assert len(admins) == 1
    assert admins[0].role == "admin"
    assert verify_password("rootpass", admins[0].password_hash)
    assert seed_env == ["create_tables", "create_tables"]
