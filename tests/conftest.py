"""
Shared fixtures.

Environment is set before anything under `flashdash` is imported, since the
settings singleton and the password hasher read it at import time.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["FORTH_CRM_URL"] = "https://forth.test/lead"
os.environ["ENVIRONMENT"] = "test"

from typing import Any, AsyncIterator, Callable, List

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from flashdash.apps.auth import models as _auth_models  # noqa: F401
from flashdash.apps.submissions import models as _submission_models  # noqa: F401
from flashdash.apps.access import models as _access_models  # noqa: F401
from flashdash.apps.mapping import models as _mapping_models  # noqa: F401
from flashdash.apps.auth.models import Employee
from flashdash.core.dependencies import get_forth_client
from flashdash.core.forth_client import ForthClient
from flashdash.db.base_model import Base
from flashdash.db.session import get_session
from flashdash.utils.security import create_access_token, hash_password

from main import app


class ForthStub:
    """Programmable stand-in for the ForthCRM endpoint, behind httpx.MockTransport."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, text="Success:123456")
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def client(self, url: str = "https://forth.test/lead") -> ForthClient:
        return ForthClient(url=url, timeout=15.0, transport=httpx.MockTransport(self))


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def forth_stub() -> ForthStub:
    return ForthStub()


@pytest_asyncio.fixture
async def async_client(session_factory, forth_stub) -> AsyncIterator[AsyncClient]:
    async def _get_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_forth_client] = forth_stub.client

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


async def make_employee(session: AsyncSession, **overrides: Any) -> Employee:
    fields = {
        "email": "agent@example.com",
        "password_hash": hash_password("secret123"),
        "role": "agent",
        "active": True,
    }
    fields.update(overrides)
    return await Employee.create(db=session, **fields)


def bearer(employee: Employee) -> dict[str, str]:
    token = create_access_token(
        employee_id=str(employee.id), email=employee.email, role=employee.role
    )
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def admin(db_session) -> Employee:
    return await make_employee(db_session, email="admin@example.com", role="admin")


@pytest_asyncio.fixture
async def agent(db_session) -> Employee:
    return await make_employee(db_session, email="agent@example.com", role="agent")


@pytest.fixture
def admin_headers(admin) -> dict[str, str]:
    return bearer(admin)


@pytest.fixture
def agent_headers(agent) -> dict[str, str]:
    return bearer(agent)
