"""Domain operations for profile subscriptions."""

import json
import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.plans import get_plan
from app.models.profile import Profile, SubscriptionPlan, SubscriptionStatus

logger = logging.getLogger(__name__)


class SubscriptionOperations:
    """Subscription fields live on the profile row; there is no separate table."""

    def subscription_fields(
        self,
        plan: SubscriptionPlan,
        start: datetime | None = None,
    ) -> dict[str, Any]:
        """
        Subscription column values for a new subscription on ``plan``.

        Raises:
            KeyError: If the plan is not in the catalogue.
        """
        config = get_plan(plan.value)
        start = start or datetime.now(UTC)
        return {
            "subscription_plan": plan,
            "subscription_status": SubscriptionStatus.ACTIVE.value,
            "subscription_start_date": start,
            "subscription_end_date": config.period_end(start),
            "subscription_price": config.price,
            "subscription_currency": config.currency,
        }

    async def apply_plan(
        self,
        db: AsyncSession,
        profile: Profile,
        plan: SubscriptionPlan,
        start: datetime | None = None,
    ) -> Profile:
        """
        Write the plan's subscription columns onto an existing profile.

        `authenticated` holds no privilege on these columns, so the session
        must be running as the table owner (call clear_rls_context first).

        Raises:
            KeyError: If the plan is not in the catalogue.
        """
        for field, value in self.subscription_fields(plan, start).items():
            setattr(profile, field, value)
        db.add(profile)
        await db.flush()
        await db.refresh(profile)
        logger.info(f"Applied plan {plan.value} to profile {profile.id}")
        return profile

    async def handle_signup(
        self,
        db: AsyncSession,
        email: str,
        password: str,
        name: str,
        plan: SubscriptionPlan,
        price: int = 0,
    ) -> dict[str, Any]:
        """
        Call public.handle_subscription_signup in the current transaction.

        The function only acknowledges the request; the account and profile
        are created by the caller (see SignupService).
        """
        result = await db.execute(
            text(
                "SELECT public.handle_subscription_signup("
                ":email, :password, :name, CAST(:plan AS public.subscription_plan), :price)"
            ),
            {
                "email": email,
                "password": password,
                "name": name,
                "plan": plan.value,
                "price": price,
            },
        )
        payload = result.scalar()
        # asyncpg hands json back as text
        if isinstance(payload, str):
            payload = json.loads(payload)
        logger.info(f"Subscription signup acknowledged for plan {plan.value}")
        return payload or {}


subscription_ops = SubscriptionOperations()
