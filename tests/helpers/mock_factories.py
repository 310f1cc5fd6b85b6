"""Mock object factories for unit tests.

Creates consistent mock objects that match the real model shapes.
Used in unit tests where the database is fully mocked.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from unittest.mock import MagicMock

from app.models.profile import Profile
from app.models.public_profile import PublicProfile


def make_profile(**overrides: object) -> Profile:
    """A real (unsaved) Profile instance. Real models keep policy checks honest."""
    now = datetime.now(UTC)
    values: dict[str, object] = {
        "id": uuid.uuid4(),
        "user_id": uuid.uuid4(),
        "email": "profile@example.com",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "title": "Dr.",
        "specialty": "Cardiology",
        "organization": "St. Example",
        "country": "GB",
        "profile_type": "medical_professional",
        "verified": False,
        "avatar_url": None,
        "primary_specialty_slug": "internal-medicine",
        "subspecialties": None,
        "subscription_plan": None,
        "subscription_status": "active",
        "subscription_start_date": None,
        "subscription_end_date": None,
        "subscription_price": 0,
        "subscription_currency": "usd",
        "created_at": now,
        "updated_at": now,
    }
    values.update(overrides)
    return Profile(**values)


def make_public_profile(**overrides: object) -> PublicProfile:
    values: dict[str, object] = {
        "id": uuid.uuid4(),
        "user_id": uuid.uuid4(),
        "first_name": "Grace",
        "last_name": "Hopper",
        "title": None,
        "specialty": None,
        "organization": "Navy Medical",
        "country": "US",
        "profile_type": "seller",
        "created_at": datetime.now(UTC),
        "avatar_url": None,
        "verified": True,
        "primary_specialty_slug": "radiology",
    }
    values.update(overrides)
    return PublicProfile(**values)


def mock_scalar_result(value: object) -> MagicMock:
    """Create a mock execute() result that yields a single value."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.scalar.return_value = value
    return result


def mock_mappings_result(rows: list[dict]) -> MagicMock:
    """Create a mock execute() result that yields rows via .mappings()."""
    result = MagicMock()
    result.mappings.return_value.all.return_value = rows
    result.mappings.return_value.first.return_value = rows[0] if rows else None
    return result
