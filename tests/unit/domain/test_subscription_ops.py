"""Unit tests for SubscriptionOperations."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core.policies import SUBSCRIPTION_COLUMNS
from app.domain.subscription_operations import SubscriptionOperations
from app.models.profile import SubscriptionPlan

from tests.helpers.mock_factories import make_profile, mock_scalar_result


class TestSubscriptionFields:
    def setup_method(self):
        self.ops = SubscriptionOperations()
        self.start = datetime(2026, 3, 1, tzinfo=UTC)

    def test_paid_monthly_plan(self):
        fields = self.ops.subscription_fields(SubscriptionPlan.MEDICAL_SELLERS_MONTHLY, self.start)
        assert fields == {
            "subscription_plan": SubscriptionPlan.MEDICAL_SELLERS_MONTHLY,
            "subscription_status": "active",
            "subscription_start_date": self.start,
            "subscription_end_date": self.start + timedelta(days=30),
            "subscription_price": 10000,
            "subscription_currency": "usd",
        }

    def test_free_plan_has_no_end_date(self):
        fields = self.ops.subscription_fields(SubscriptionPlan.MEDICAL_INSTITUTE_BUYERS, self.start)
        assert fields["subscription_end_date"] is None
        assert fields["subscription_price"] == 0

    def test_defaults_start_to_now(self):
        before = datetime.now(UTC)
        fields = self.ops.subscription_fields(SubscriptionPlan.MEDICAL_PERSONNEL)
        assert fields["subscription_start_date"] >= before

    def test_profile_type_is_not_a_subscription_column(self):
        fields = self.ops.subscription_fields(SubscriptionPlan.MEDICAL_PERSONNEL, self.start)
        assert set(fields) == SUBSCRIPTION_COLUMNS


class TestApplyPlan:
    @pytest.mark.asyncio
    async def test_writes_plan_columns_onto_profile(self):
        db = AsyncMock()
        db.add = MagicMock()
        profile = make_profile(profile_type="seller", subscription_price=None, subscription_currency=None)
        start = datetime(2026, 3, 1, tzinfo=UTC)

        result = await SubscriptionOperations().apply_plan(
            db, profile, SubscriptionPlan.MEDICAL_SELLERS_YEARLY, start
        )

        assert result is profile
        assert profile.subscription_plan == SubscriptionPlan.MEDICAL_SELLERS_YEARLY
        assert profile.subscription_status == "active"
        assert profile.subscription_price == 100000
        assert profile.subscription_end_date == start + timedelta(days=365)
        db.add.assert_called_once_with(profile)
        db.flush.assert_awaited_once()
        db.refresh.assert_awaited_once_with(profile)


class TestHandleSignup:
    @pytest.mark.asyncio
    async def test_parses_json_text(self):
        db = AsyncMock()
        db.execute = AsyncMock(
            return_value=mock_scalar_result('{"success": true, "message": "Subscription signup initialized"}')
        )

        result = await SubscriptionOperations().handle_signup(
            db, "a@example.com", "", "Ada Lovelace", SubscriptionPlan.MEDICAL_PERSONNEL, 10000
        )

        assert result == {"success": True, "message": "Subscription signup initialized"}

    @pytest.mark.asyncio
    async def test_passes_plan_as_enum_value(self):
        db = AsyncMock()
        db.execute = AsyncMock(return_value=mock_scalar_result({"success": True}))

        await SubscriptionOperations().handle_signup(
            db, "a@example.com", "", "Ada", SubscriptionPlan.MEDICAL_SELLERS_YEARLY, 100000
        )

        statement, params = db.execute.await_args.args
        assert "public.handle_subscription_signup(" in str(statement)
        assert "CAST(:plan AS public.subscription_plan)" in str(statement)
        assert params["plan"] == "medical_sellers_yearly"
        assert params["price"] == 100000
