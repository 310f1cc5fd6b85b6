"""Profile endpoints.

Every handler runs on a session bound to the caller's RLS context, so the
database decides visibility. A profile that is hidden and one that does not
exist both come back as 404.
"""

import logging
import uuid as uuid_pkg

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import AuthenticatedUser, get_current_user, get_db_with_rls
from app.config import settings
from app.core.exceptions import DuplicateError, ForbiddenError, NotFoundError, ValidationError
from app.domain.profile_operations import profile_ops
from app.domain.public_profile_operations import public_profile_ops
from app.models.profile import ProfileCreate, ProfileRead, ProfileUpdate
from app.models.public_profile import PublicProfile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profiles", tags=["profiles"])


class EmailVisibility(BaseModel):
    can_see_email: bool


@router.get("/me", response_model=ProfileRead)
async def get_my_profile(
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_with_rls),
):
    """Get the caller's full profile, email and subscription included."""
    profile = await profile_ops.get_own(db, current_user.id)
    if not profile:
        raise NotFoundError("Profile")
    return profile


@router.post("/me", response_model=ProfileRead, status_code=status.HTTP_201_CREATED)
async def create_my_profile(
    data: ProfileCreate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_with_rls),
):
    """Create the caller's profile. New profiles always start unverified."""
    if not current_user.email:
        raise ValidationError("Access token carries no email address")

    try:
        profile = await profile_ops.create_own(
            db,
            user_id=current_user.id,
            email=current_user.email,
            obj_in=data.model_dump(exclude_unset=True),
        )
    except ValueError as e:
        if "already exists" in str(e):
            raise DuplicateError("Profile", "user_id") from e
        raise ValidationError(str(e)) from e
    return profile


@router.patch("/me", response_model=ProfileRead)
async def update_my_profile(
    data: ProfileUpdate,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_with_rls),
):
    """Update the caller's editable profile fields."""
    profile = await profile_ops.get_own(db, current_user.id)
    if not profile:
        raise NotFoundError("Profile")

    try:
        return await profile_ops.update_own(
            db, current_user.caller, profile, data.model_dump(exclude_unset=True)
        )
    except PermissionError as e:
        raise ForbiddenError(str(e)) from e
    except ValueError as e:
        raise ValidationError(str(e)) from e


@router.get("/public", response_model=list[PublicProfile])
async def list_public_profiles(
    specialty: str | None = Query(default=None, description="Primary specialty slug"),
    country: str | None = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1),
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_with_rls),
):
    """List verified profiles visible to any signed-in user."""
    limit = min(limit, settings.public_profiles_max_page_size)
    return await public_profile_ops.list(
        db, specialty_slug=specialty, country=country, skip=skip, limit=limit
    )


@router.get("/{user_id}/public", response_model=PublicProfile)
async def get_public_profile(
    user_id: uuid_pkg.UUID,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_with_rls),
):
    """Get one user's public profile. 404 unless the profile is verified."""
    profile = await public_profile_ops.get(db, user_id)
    if not profile:
        raise NotFoundError("Profile")
    return profile


@router.get("/{user_id}/email-visibility", response_model=EmailVisibility)
async def get_email_visibility(
    user_id: uuid_pkg.UUID,
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_with_rls),
):
    """Whether the caller may see this user's email address."""
    return EmailVisibility(can_see_email=await profile_ops.can_see_email(db, user_id))
