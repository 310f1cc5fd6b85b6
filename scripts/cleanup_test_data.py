"""Emergency cleanup script: delete leaked test profiles.

Integration tests roll back their transactions, so this is only needed if a
test run was interrupted or a manual signup test was done against a real
project.

Usage:
    python -m scripts.cleanup_test_data [--yes]

This script:
1. Finds all profiles matching the test email patterns
2. Deletes the rows from public.profiles (as the table owner)
3. Deletes the matching users from Supabase Auth
"""

from __future__ import annotations

import asyncio
import logging
import sys

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)

# Fixture users in tests/conftest.py
UNIT_TEST_EMAIL_PATTERN = "__test_%@example.com"
# Accounts created by hand against /subscriptions/signup
SIGNUP_TEST_EMAIL_PATTERN = "signup-test-%@profiles-integration-test.local"


async def emergency_cleanup() -> None:
    """Delete all test profiles and their auth users."""
    from app.config.settings import settings
    from app.models.profile import Profile
    from app.services.supabase import delete_auth_user

    engine = create_async_engine(settings.database_url_direct, echo=False)
    async_session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as db:
        result = await db.execute(
            select(Profile).where(
                Profile.email.like(UNIT_TEST_EMAIL_PATTERN)  # type: ignore[union-attr]
                | Profile.email.like(SIGNUP_TEST_EMAIL_PATTERN)  # type: ignore[union-attr]
            )
        )
        test_profiles = result.scalars().all()

        if not test_profiles:
            logger.info("No test data found. Database is clean.")
            await engine.dispose()
            return

        logger.info(f"Found {len(test_profiles)} test profiles to clean up:")
        for p in test_profiles:
            logger.info(f"  - {p.email} (user {p.user_id})")

        if "--yes" not in sys.argv:
            confirm = input(f"\nDelete {len(test_profiles)} test profiles and their accounts? [y/N] ")
            if confirm.lower() != "y":
                logger.info("Aborted.")
                await engine.dispose()
                return

        user_ids = [p.user_id for p in test_profiles]
        await db.execute(Profile.__table__.delete().where(Profile.user_id.in_(user_ids)))
        await db.commit()
        logger.info(f"Deleted {len(user_ids)} profiles from app DB")

    for profile in test_profiles:
        try:
            await delete_auth_user(profile.user_id)
            logger.info(f"Deleted from Supabase Auth: {profile.email}")
        except Exception as e:
            logger.warning(f"Failed to delete {profile.email} from Supabase: {e}")

    await engine.dispose()
    logger.info("Emergency cleanup complete.")


if __name__ == "__main__":
    asyncio.run(emergency_cleanup())
