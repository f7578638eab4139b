"""
Seed database script.

Creates the tables and the bootstrap admin from SEED_EMAIL / SEED_PASSWORD.
Unlike POST /auth/seed this runs from a shell, so it ignores ENABLE_DEV_SEED,
but it still refuses to run against a production environment.
"""

import asyncio
from flashdash.config.settings import settings
from flashdash.db.database import async_session_factory, create_tables
from flashdash.apps.auth.models import Employee
from flashdash.utils.security import hash_password
from flashdash.utils.logger import get_logger

logger = get_logger(__name__)


async def seed_admin() -> None:
    if settings.is_production:
        raise SystemExit("Seeding is disabled in production")

    if not settings.SEED_EMAIL or not settings.SEED_PASSWORD:
        raise SystemExit("SEED_EMAIL and SEED_PASSWORD must be set")

    await create_tables()

    async with async_session_factory() as session:
        try:
            logger.info("Starting database seed process...")

            if await Employee.exists(db=session, email=settings.SEED_EMAIL):
                logger.info(f"Employee {settings.SEED_EMAIL} already exists. Skipping.")
                return

            await Employee.create(
                db=session,
                email=settings.SEED_EMAIL,
                password_hash=hash_password(settings.SEED_PASSWORD),
                role="admin",
                active=True,
            )
            logger.info(f"Seeded admin {settings.SEED_EMAIL}")

        except Exception as e:
            await session.rollback()
            logger.error(f"Failed to seed database: {e}")
            raise


if __name__ == "__main__":
    asyncio.run(seed_admin())
