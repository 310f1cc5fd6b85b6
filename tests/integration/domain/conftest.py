"""Profile integration test fixtures.

Rows are seeded as the connection's login role (the table owner, which
bypasses RLS). Tests then switch to a caller with app.core.rls helpers and
observe what Postgres lets that caller see.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.profile import Profile, SubscriptionPlan


async def insert_profile(db: AsyncSession, **overrides) -> Profile:
    values = {
        "user_id": uuid.uuid4(),
        "email": f"__test_{uuid.uuid4().hex[:8]}@example.com",
        "first_name": "Test",
        "last_name": "User",
        "profile_type": "buyer",
        "verified": False,
    }
    values.update(overrides)
    profile = Profile(**values)
    db.add(profile)
    await db.flush()
    await db.refresh(profile)
    return profile


@pytest.fixture
async def verified_profile(db_session: AsyncSession) -> Profile:
    """User A: verified, visible to other signed-in users through the view."""
    return await insert_profile(
        db_session,
        first_name="Alice",
        verified=True,
        primary_specialty_slug="radiology",
        subscription_plan=SubscriptionPlan.MEDICAL_PERSONNEL,
        subscription_price=10000,
    )


@pytest.fixture
async def unverified_profile(db_session: AsyncSession) -> Profile:
    """User C: not verified, visible to nobody but its owner."""
    return await insert_profile(db_session, first_name="Carol")


@pytest.fixture
async def viewer_profile(db_session: AsyncSession) -> Profile:
    """User B: the signed-in caller looking at others."""
    return await insert_profile(db_session, first_name="Bob")


@pytest.fixture
async def stale_profile(db_session: AsyncSession) -> Profile:
    """A profile whose updated_at is far in the past (INSERT does not fire the trigger)."""
    return await insert_profile(
        db_session,
        first_name="Stale",
        updated_at=datetime(2000, 1, 1, tzinfo=UTC),
    )
