"""Subscription signup orchestration.

A signup spans two systems:
1. Supabase Auth creates the identity (credentials never touch our tables).
2. In one database transaction the profile row is inserted as the new user,
   public.handle_subscription_signup is called, and then, back on the table
   owner role, the plan's subscription columns are written. Users hold no
   privilege on those columns, so they cannot pick their own plan or price.

The transaction is committed here rather than by the request, so a failed
commit is also covered: if anything in step 2 fails the auth user is deleted
and no account is left without a profile.
"""

import logging
import uuid as uuid_pkg
from dataclasses import dataclass

from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.plans import get_plan
from app.core.rls import clear_rls_context, set_rls_user_context
from app.domain.profile_operations import profile_ops
from app.domain.subscription_operations import subscription_ops
from app.models.profile import SubscriptionPlan
from app.services.supabase import create_auth_user, delete_auth_user

logger = logging.getLogger(__name__)


class SignupRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(min_length=8)
    full_name: str = Field(min_length=1, max_length=200)
    plan: SubscriptionPlan


@dataclass
class SignupResult:
    user_id: uuid_pkg.UUID
    profile_id: uuid_pkg.UUID
    plan: SubscriptionPlan
    message: str


def split_full_name(full_name: str) -> tuple[str, str]:
    """Split "Jane Q. Doe" into ("Jane", "Q. Doe"). A single word has no last name."""
    parts = full_name.strip().split(maxsplit=1)
    if not parts:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[1]


class SignupService:
    async def signup(self, db: AsyncSession, request: SignupRequest) -> SignupResult:
        """
        Create the account, profile and subscription for a new user.

        Raises:
            ValueError: Unknown plan.
            SupabaseNotConfiguredError: No service role key is set.
            SupabaseAuthError: Supabase refused to create the account.
        """
        try:
            plan_config = get_plan(request.plan.value)
        except KeyError as e:
            raise ValueError(str(e)) from e

        first_name, last_name = split_full_name(request.full_name)

        user_id = await create_auth_user(request.email, request.password, request.full_name)
        logger.info(f"Created auth user {user_id} for plan {request.plan.value}")

        try:
            await set_rls_user_context(db, user_id)
            profile = await profile_ops.create_own(
                db,
                user_id=user_id,
                email=request.email,
                obj_in={
                    "first_name": first_name,
                    "last_name": last_name,
                    "profile_type": plan_config.profile_type,
                },
            )
            # Credentials stay with Supabase Auth, so no password is forwarded
            ack = await subscription_ops.handle_signup(
                db,
                email=request.email,
                password="",
                name=request.full_name,
                plan=request.plan,
                price=plan_config.price,
            )
            await clear_rls_context(db)
            profile = await subscription_ops.apply_plan(db, profile, request.plan)
            await db.commit()
        except Exception:
            logger.error(f"Signup transaction failed for auth user {user_id}, removing account")
            try:
                await delete_auth_user(user_id)
            except Exception as cleanup_error:
                logger.error(f"Failed to delete orphaned auth user {user_id}: {cleanup_error}")
            raise

        return SignupResult(
            user_id=user_id,
            profile_id=profile.id,
            plan=request.plan,
            message=ack.get("message", "Subscription signup initialized"),
        )


signup_service = SignupService()
