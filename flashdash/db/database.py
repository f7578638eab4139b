"""
Async engine and session factory.

Points at Supabase's Postgres in production (postgresql+asyncpg://...).
"""

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from flashdash.config.settings import settings
from flashdash.db.base_model import Base

engine = create_async_engine(settings.DATABASE_URL, echo=False, pool_pre_ping=True)

async_session_factory = async_sessionmaker(engine, expire_on_commit=False)


async def create_tables() -> None:
    """Create every mapped table. Used by local runs and the seed script."""
    # Import models so they register on Base.metadata.
    from flashdash.apps.auth import models as _auth_models  # noqa: F401
    from flashdash.apps.submissions import models as _submission_models  # noqa: F401
    from flashdash.apps.access import models as _access_models  # noqa: F401
    from flashdash.apps.mapping import models as _mapping_models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
