"""Add subscription fields to profiles

Revision ID: e8d14c6a9f02
Revises: 0b6f3a9d2c71
Create Date: 2026-03-02 16:20:00.000000

Adds the subscription_plan enum and the subscription_* columns, plus the
handle_subscription_signup() entry point called during signup.

The new columns get no INSERT or UPDATE grant (`authenticated` holds
column-level INSERT and UPDATE only), so a row owner cannot pick their own
plan, price or end date. Signup writes them as the table owner after the
profile row exists. The view does not project them.

handle_subscription_signup() only acknowledges the request. Account
creation goes through Supabase Auth and the profile row is inserted by the
backend in the same transaction as this call.
"""

from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "e8d14c6a9f02"
down_revision: Union[str, None] = "0b6f3a9d2c71"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add the plan enum, subscription columns and signup function."""
    op.execute("""
        DO $$
        BEGIN
            IF NOT EXISTS (SELECT 1 FROM pg_type WHERE typname = 'subscription_plan') THEN
                CREATE TYPE public.subscription_plan AS ENUM (
                    'medical_institute_buyers',
                    'medical_sellers_monthly',
                    'medical_sellers_yearly',
                    'medical_personnel'
                );
            END IF;
        END $$
    """)

    op.execute("ALTER TABLE public.profiles ADD COLUMN subscription_plan public.subscription_plan")
    op.execute("ALTER TABLE public.profiles ADD COLUMN subscription_status text DEFAULT 'active'")
    op.execute("ALTER TABLE public.profiles ADD COLUMN subscription_start_date timestamptz DEFAULT now()")
    op.execute("ALTER TABLE public.profiles ADD COLUMN subscription_end_date timestamptz")
    op.execute("ALTER TABLE public.profiles ADD COLUMN subscription_price integer DEFAULT 0")
    op.execute("ALTER TABLE public.profiles ADD COLUMN subscription_currency text DEFAULT 'usd'")

    op.execute("""
        CREATE OR REPLACE FUNCTION public.handle_subscription_signup(
            user_email text,
            user_password text,
            user_name text,
            plan_type public.subscription_plan,
            plan_price integer DEFAULT 0
        )
        RETURNS json
        LANGUAGE plpgsql
        SECURITY DEFINER
        SET search_path = ''
        AS $$
        BEGIN
            RETURN json_build_object(
                'success', true,
                'message', 'Subscription signup initialized'
            );
        END;
        $$
    """)

    op.execute("""
        GRANT EXECUTE ON FUNCTION public.handle_subscription_signup(
            text, text, text, public.subscription_plan, integer
        ) TO anon, authenticated
    """)

    print("Subscription fields added:")
    print("  - subscription_plan enum + 6 subscription_* columns (not user-writable)")
    print("  - handle_subscription_signup(...)")


def downgrade() -> None:
    """Remove subscription columns, function and enum."""
    op.execute("""
        DROP FUNCTION IF EXISTS public.handle_subscription_signup(
            text, text, text, public.subscription_plan, integer
        )
    """)
    for column in (
        "subscription_currency",
        "subscription_price",
        "subscription_end_date",
        "subscription_start_date",
        "subscription_status",
        "subscription_plan",
    ):
        op.execute(f"ALTER TABLE public.profiles DROP COLUMN IF EXISTS {column}")
    op.execute("DROP TYPE IF EXISTS public.subscription_plan")

    print("Subscription fields removed")
