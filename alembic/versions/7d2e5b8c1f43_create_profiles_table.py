"""Create profiles table with owner-only RLS

Revision ID: 7d2e5b8c1f43
Revises: 4a7c1e9b2d30
Create Date: 2026-02-02 11:00:00.000000

Creates public.profiles (one row per Supabase auth user) and its first set
of policies:

1. "Users can view own profile"   - SELECT where user_id = app_user_id()
2. "Users can insert own profile" - own row only, and never pre-verified
3. "Users can update own profile" - own row only, before and after

A fourth policy, "Public profiles are viewable by authenticated users",
lets any authenticated caller SELECT verified rows so the directory page
works. RLS filters rows, not columns, so this exposes email and
subscription data of every verified user. It is replaced by the
public_profiles view in 0b6f3a9d2c71.

Column privileges do the rest. `authenticated` may INSERT only the
identity, email and descriptive columns (verified too, but the insert
policy pins it to false) and may UPDATE only the descriptive ones. Email is
written once at insert; created_at and the later subscription columns are
never written by the row owner.

`anon` holds SELECT but no policy applies to it, so an anonymous read
returns zero rows instead of failing.

updated_at is maintained by a BEFORE UPDATE trigger.
"""

from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "7d2e5b8c1f43"
down_revision: Union[str, None] = "4a7c1e9b2d30"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profiles, its trigger, privileges and policies."""
    # =========================================================================
    # 1. TABLE
    # =========================================================================
    # No FK to auth.users: that schema only exists on Supabase.
    # =========================================================================
    op.execute("""
        CREATE TABLE public.profiles (
            id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id uuid NOT NULL,
            email text NOT NULL,
            first_name text NOT NULL,
            last_name text NOT NULL,
            title text,
            specialty text,
            organization text,
            country text,
            profile_type text NOT NULL,
            verified boolean NOT NULL DEFAULT false,
            avatar_url text,
            created_at timestamptz NOT NULL DEFAULT now(),
            updated_at timestamptz NOT NULL DEFAULT now(),
            CONSTRAINT profiles_user_id_key UNIQUE (user_id)
        )
    """)

    # =========================================================================
    # 2. updated_at TRIGGER
    # =========================================================================
    op.execute("""
        CREATE OR REPLACE FUNCTION public.update_updated_at_column()
        RETURNS trigger
        LANGUAGE plpgsql
        SET search_path = ''
        AS $$
        BEGIN
            NEW.updated_at = now();
            RETURN NEW;
        END;
        $$
    """)

    # Only ever invoked by the trigger
    op.execute("REVOKE EXECUTE ON FUNCTION public.update_updated_at_column() FROM PUBLIC, anon, authenticated")

    op.execute("""
        CREATE TRIGGER update_profiles_updated_at
            BEFORE UPDATE ON public.profiles
            FOR EACH ROW
            EXECUTE FUNCTION public.update_updated_at_column()
    """)

    # =========================================================================
    # 3. PRIVILEGES
    # =========================================================================
    op.execute("REVOKE ALL ON public.profiles FROM PUBLIC, anon, authenticated")
    # No policy targets anon, so its SELECT always comes back empty
    op.execute("GRANT SELECT ON public.profiles TO anon, authenticated")
    op.execute("""
        GRANT INSERT (
            id, user_id, email, first_name, last_name, title, specialty,
            organization, country, profile_type, verified, avatar_url
        ) ON public.profiles TO authenticated
    """)
    op.execute("""
        GRANT UPDATE (
            first_name, last_name, title, specialty,
            organization, country, avatar_url
        ) ON public.profiles TO authenticated
    """)

    # =========================================================================
    # 4. ROW LEVEL SECURITY
    # =========================================================================
    # ENABLE, not FORCE: the table owner (and views running with its
    # privileges) still read every row.
    # =========================================================================
    op.execute("ALTER TABLE public.profiles ENABLE ROW LEVEL SECURITY")

    op.execute("""
        CREATE POLICY "Users can view own profile" ON public.profiles
            FOR SELECT
            TO authenticated
            USING (user_id = public.app_user_id())
    """)

    op.execute("""
        CREATE POLICY "Users can insert own profile" ON public.profiles
            FOR INSERT
            TO authenticated
            WITH CHECK (user_id = public.app_user_id() AND verified = false)
    """)

    op.execute("""
        CREATE POLICY "Users can update own profile" ON public.profiles
            FOR UPDATE
            TO authenticated
            USING (user_id = public.app_user_id())
            WITH CHECK (user_id = public.app_user_id())
    """)

    op.execute("""
        CREATE POLICY "Public profiles are viewable by authenticated users" ON public.profiles
            FOR SELECT
            TO authenticated
            USING (verified = true AND public.app_user_id() IS NOT NULL)
    """)

    print("Profiles table created:")
    print("  - UNIQUE(user_id), updated_at trigger")
    print("  - anon: SELECT (no policy, zero rows)")
    print("  - authenticated: SELECT, INSERT on identity + descriptive columns, UPDATE on descriptive columns")
    print("  - RLS: own-row SELECT/INSERT/UPDATE + verified-row SELECT")


def downgrade() -> None:
    """Drop profiles and its trigger function."""
    op.execute("DROP TABLE IF EXISTS public.profiles")
    op.execute("DROP FUNCTION IF EXISTS public.update_updated_at_column()")

    print("Profiles table dropped")
