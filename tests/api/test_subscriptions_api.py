"""Subscription and specialty API tests."""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from app.models.profile import SubscriptionPlan
from app.services.signup_service import SignupResult
from app.services.supabase import SupabaseAuthError, SupabaseNotConfiguredError

SIGNUP_BODY = {
    "email": "ada@example.com",
    "password": "correct-horse",
    "full_name": "Ada Lovelace",
    "plan": "medical_personnel",
}


class TestListPlans:
    @pytest.mark.asyncio
    async def test_lists_all_four_plans(self, unauth_client: AsyncClient):
        resp = await unauth_client.get("/api/v1/subscriptions/plans")

        assert resp.status_code == 200
        plans = {p["plan"]: p for p in resp.json()}
        assert set(plans) == {p.value for p in SubscriptionPlan}
        assert plans["medical_sellers_yearly"]["price"] == 100000
        assert plans["medical_institute_buyers"]["billing_period"] is None


class TestSignup:
    @pytest.mark.asyncio
    async def test_successful_signup(self, unauth_client: AsyncClient):
        user_id, profile_id = uuid.uuid4(), uuid.uuid4()
        result = SignupResult(
            user_id=user_id,
            profile_id=profile_id,
            plan=SubscriptionPlan.MEDICAL_PERSONNEL,
            message="Subscription signup initialized",
        )

        with patch("app.api.v1.subscriptions.signup_service") as mock_service:
            mock_service.signup = AsyncMock(return_value=result)

            resp = await unauth_client.post("/api/v1/subscriptions/signup", json=SIGNUP_BODY)

        assert resp.status_code == 201
        assert resp.json() == {
            "success": True,
            "user_id": str(user_id),
            "profile_id": str(profile_id),
            "plan": "medical_personnel",
            "message": "Subscription signup initialized",
        }

    @pytest.mark.asyncio
    async def test_supabase_rejection_is_400(self, unauth_client: AsyncClient):
        with patch("app.api.v1.subscriptions.signup_service") as mock_service:
            mock_service.signup = AsyncMock(
                side_effect=SupabaseAuthError("An account with this email already exists")
            )

            resp = await unauth_client.post("/api/v1/subscriptions/signup", json=SIGNUP_BODY)

        assert resp.status_code == 400
        assert resp.json()["detail"] == "Signup failed: An account with this email already exists"

    @pytest.mark.asyncio
    async def test_missing_service_key_is_503_without_config_detail(self, unauth_client: AsyncClient):
        with patch("app.api.v1.subscriptions.signup_service") as mock_service:
            mock_service.signup = AsyncMock(
                side_effect=SupabaseNotConfiguredError(
                    "SUPABASE_SERVICE_ROLE_KEY not configured. Set it in .env for subscription signup."
                )
            )

            resp = await unauth_client.post("/api/v1/subscriptions/signup", json=SIGNUP_BODY)

        assert resp.status_code == 503
        assert resp.json() == {"detail": "Signup is temporarily unavailable"}
        assert "SUPABASE" not in resp.text
        assert ".env" not in resp.text

    @pytest.mark.asyncio
    async def test_unknown_plan_is_422(self, unauth_client: AsyncClient):
        resp = await unauth_client.post(
            "/api/v1/subscriptions/signup", json={**SIGNUP_BODY, "plan": "platinum"}
        )
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_short_password_is_422(self, unauth_client: AsyncClient):
        resp = await unauth_client.post(
            "/api/v1/subscriptions/signup", json={**SIGNUP_BODY, "password": "short"}
        )
        assert resp.status_code == 422


class TestSpecialties:
    @pytest.mark.asyncio
    async def test_lists_catalogue(self, unauth_client: AsyncClient):
        resp = await unauth_client.get("/api/v1/specialties")

        assert resp.status_code == 200
        slugs = [s["slug"] for s in resp.json()]
        assert "radiology" in slugs
        assert len(slugs) == 25

    @pytest.mark.asyncio
    async def test_validate_combines_database_and_catalogue(self, unauth_client: AsyncClient, mock_db):
        with patch("app.api.v1.specialties.profile_ops") as mock_ops:
            mock_ops.validate_specialty_slug = AsyncMock(return_value=True)

            resp = await unauth_client.get("/api/v1/specialties/made-up/validate")

        assert resp.status_code == 200
        assert resp.json() == {"slug": "made-up", "valid": True, "known": False}
        # Runs as anon: set_config, then SET LOCAL ROLE
        assert mock_db.execute.await_count == 2


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, unauth_client: AsyncClient):
        resp = await unauth_client.get("/health")
        assert resp.json() == {"status": "healthy"}
