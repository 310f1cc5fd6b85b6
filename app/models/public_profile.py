"""PublicProfile - read model over the public_profiles view.

The view has no storage and is created by migration, so it is declared as a
lightweight ``table()`` clause instead of a mapped table. That keeps
``SQLModel.metadata.create_all`` from ever creating a real table with the
view's name.
"""

import uuid as uuid_pkg
from datetime import datetime

from sqlalchemy.sql import column, table
from sqlmodel import SQLModel

from app.core.policies import PUBLIC_PROFILE_COLUMNS


class PublicProfile(SQLModel):
    """Safe subset of a verified profile. No email, no subscription data."""

    id: uuid_pkg.UUID
    user_id: uuid_pkg.UUID
    first_name: str
    last_name: str
    title: str | None = None
    specialty: str | None = None
    organization: str | None = None
    country: str | None = None
    profile_type: str
    created_at: datetime
    avatar_url: str | None = None
    verified: bool
    primary_specialty_slug: str | None = None


public_profiles_view = table(
    "public_profiles",
    *(column(name) for name in PUBLIC_PROFILE_COLUMNS),
    schema="public",
)
