"""Subscription plans and signup. Neither endpoint requires a token."""

import logging

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import PLANS
from app.core.database import get_db
from app.core.exceptions import DuplicateError, ServiceUnavailableError, SignupError, ValidationError
from app.services.signup_service import SignupRequest, signup_service
from app.services.supabase import SupabaseAuthError, SupabaseNotConfiguredError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


class PlanRead(BaseModel):
    plan: str
    display_name: str
    price: int
    currency: str
    billing_period: str | None
    profile_type: str
    features: list[str]


class SignupResponse(BaseModel):
    success: bool
    user_id: str
    profile_id: str
    plan: str
    message: str


@router.get("/plans", response_model=list[PlanRead])
async def list_plans():
    """All subscription plans with pricing."""
    return [
        PlanRead(
            plan=p.plan,
            display_name=p.display_name,
            price=p.price,
            currency=p.currency,
            billing_period=p.billing_period,
            profile_type=p.profile_type,
            features=list(p.features),
        )
        for p in PLANS.values()
    ]


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    data: SignupRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Create an account on a subscription plan.

    The account is created in Supabase Auth; the profile and subscription
    fields are written and committed by the signup service, the plan
    columns as the table owner.
    """
    try:
        result = await signup_service.signup(db, data)
    except SupabaseNotConfiguredError as e:
        logger.error(f"Signup unavailable: {e}")
        raise ServiceUnavailableError("Signup is temporarily unavailable") from e
    except SupabaseAuthError as e:
        raise SignupError(str(e)) from e
    except ValueError as e:
        if "already exists" in str(e):
            raise DuplicateError("Profile", "user_id") from e
        raise ValidationError(str(e)) from e

    logger.info(f"Signup completed for user {result.user_id} on plan {result.plan.value}")
    return SignupResponse(
        success=True,
        user_id=str(result.user_id),
        profile_id=str(result.profile_id),
        plan=result.plan.value,
        message=result.message,
    )
