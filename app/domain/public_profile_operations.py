import uuid as uuid_pkg

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.policies import PUBLIC_PROFILE_COLUMNS
from app.models.public_profile import PublicProfile, public_profiles_view


class PublicProfileOperations:
    """Read-only access to other users' verified profiles.

    Everything goes through the public_profiles view (or the
    get_public_profile function selecting from it), which drops email and
    subscription data and returns nothing to anonymous callers.
    """

    async def get(
        self,
        db: AsyncSession,
        user_id: uuid_pkg.UUID,
    ) -> PublicProfile | None:
        """Public profile for a user. None when unverified, missing or anonymous."""
        columns = ", ".join(PUBLIC_PROFILE_COLUMNS)
        result = await db.execute(
            text(f"SELECT {columns} FROM public.get_public_profile(:user_id)"),
            {"user_id": user_id},
        )
        row = result.mappings().first()
        return PublicProfile.model_validate(dict(row)) if row else None

    async def list(
        self,
        db: AsyncSession,
        specialty_slug: str | None = None,
        country: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[PublicProfile]:
        """List verified profiles, optionally filtered, newest first."""
        view = public_profiles_view.c
        statement = select(public_profiles_view)
        if specialty_slug:
            statement = statement.where(view.primary_specialty_slug == specialty_slug)
        if country:
            statement = statement.where(view.country == country)
        statement = statement.order_by(view.created_at.desc()).offset(skip).limit(limit)

        result = await db.execute(statement)
        return [PublicProfile.model_validate(dict(row)) for row in result.mappings().all()]


public_profile_ops = PublicProfileOperations()
