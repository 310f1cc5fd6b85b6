"""API test fixtures: profile entities for the mocked domain layer.

Builds on root conftest fixtures (test_user, second_user, mock_db,
api_client, unauth_client, mock_external_services).

API tests never touch a database: domain operations are patched where the
routers import them, and the session is an AsyncMock.
"""

from __future__ import annotations

import pytest

from app.api.deps.auth import AuthenticatedUser

from tests.helpers.mock_factories import make_profile, make_public_profile


@pytest.fixture
def own_profile(test_user: AuthenticatedUser):
    """test_user's own, unverified profile."""
    return make_profile(user_id=test_user.id, email=test_user.email)


@pytest.fixture
def other_public_profile(second_user: AuthenticatedUser):
    """second_user's verified profile as seen through public_profiles."""
    return make_public_profile(user_id=second_user.id)
