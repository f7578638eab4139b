"""
Request-scoped database sessions.

Routers depend on `get_session`; tests override it with a session bound to
an in-memory engine.
"""

from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

from flashdash.db.database import async_session_factory


async def get_session() -> AsyncIterator[AsyncSession]:
    """One session per request, rolled back if the handler raises."""
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
