import logging
import uuid as uuid_pkg

from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import is_known_specialty
from app.core.policies import (
    PROFILE_INSERTABLE_COLUMNS,
    PROFILE_POLICIES,
    PROFILE_UPDATABLE_COLUMNS,
    Caller,
    Command,
)
from app.models.profile import Profile

logger = logging.getLogger(__name__)


class ProfileOperations:
    """Operations for the caller's own Profile row.

    Every method expects a session whose RLS context is already set (see
    app.core.rls). Postgres filters rows; the checks here only turn silent
    denials into clear errors before a statement is sent.
    """

    async def get_own(
        self,
        db: AsyncSession,
        user_id: uuid_pkg.UUID,
    ) -> Profile | None:
        """Get the caller's profile. None if missing or hidden by RLS."""
        statement = select(Profile).where(Profile.user_id == user_id)
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    async def create_own(
        self,
        db: AsyncSession,
        user_id: uuid_pkg.UUID,
        email: str,
        obj_in: dict,
    ) -> Profile:
        """
        Create the caller's profile.

        Keys outside PROFILE_INSERTABLE_COLUMNS are dropped. Subscription
        columns in particular can only be written by the table owner (see
        SubscriptionOperations.apply_plan).

        Raises:
            ValueError: If the caller already has a profile or the specialty
                slug is not in the catalogue.
        """
        obj_in = {k: v for k, v in obj_in.items() if k in PROFILE_INSERTABLE_COLUMNS}
        slug = obj_in.get("primary_specialty_slug")
        if slug is not None and not is_known_specialty(slug):
            raise ValueError(f"Unknown specialty: {slug}")

        if await self.get_own(db, user_id):
            raise ValueError("Profile already exists for this user")

        # Identity and verification are never taken from the request
        profile = Profile(**{**obj_in, "user_id": user_id, "email": email, "verified": False})
        if not PROFILE_POLICIES.allows_write(Command.INSERT, Caller(user_id), profile):
            raise ValueError("Profile does not belong to the caller")

        db.add(profile)
        try:
            await db.flush()
        except IntegrityError as e:
            # Lost a race with a concurrent insert for the same user_id
            raise ValueError("Profile already exists for this user") from e
        await db.refresh(profile)
        logger.info(f"Created profile {profile.id} for user {user_id}")
        return profile

    async def update_own(
        self,
        db: AsyncSession,
        caller: Caller,
        profile: Profile,
        obj_in: dict,
    ) -> Profile:
        """
        Update editable columns of the caller's profile.

        Keys outside PROFILE_UPDATABLE_COLUMNS are ignored; the database
        would reject them anyway since `authenticated` holds no UPDATE
        privilege on them.

        Raises:
            PermissionError: If the policy set rejects the update.
            ValueError: If the specialty slug is not in the catalogue or a
                NOT NULL column is set to null.
        """
        changes = {k: v for k, v in obj_in.items() if k in PROFILE_UPDATABLE_COLUMNS}

        slug = changes.get("primary_specialty_slug")
        if slug is not None and not is_known_specialty(slug):
            raise ValueError(f"Unknown specialty: {slug}")

        new_row = {"user_id": profile.user_id, "verified": profile.verified, **changes}
        if not PROFILE_POLICIES.allows_write(Command.UPDATE, caller, new_row, old_row=profile):
            raise PermissionError("Not allowed to update this profile")

        if not changes:
            return profile

        for field, value in changes.items():
            setattr(profile, field, value)
        db.add(profile)
        try:
            await db.flush()
        except IntegrityError as e:
            raise ValueError("Profile update violates a column constraint") from e
        await db.refresh(profile)
        return profile

    async def can_see_email(
        self,
        db: AsyncSession,
        target_user_id: uuid_pkg.UUID,
    ) -> bool:
        """Ask the database whether the caller may see the target's email."""
        result = await db.execute(
            text("SELECT public.can_see_user_email(:target)"),
            {"target": target_user_id},
        )
        return bool(result.scalar())

    async def validate_specialty_slug(
        self,
        db: AsyncSession,
        slug: str | None,
    ) -> bool:
        """Database-side slug check: non-NULL and non-empty only."""
        result = await db.execute(
            text("SELECT public.validate_specialty_slug(:slug)"),
            {"slug": slug},
        )
        return bool(result.scalar())


profile_ops = ProfileOperations()
