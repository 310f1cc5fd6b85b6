"""Replace cross-user profile policy with the public_profiles view

Revision ID: 0b6f3a9d2c71
Revises: a3c9e1f47b25
Create Date: 2026-02-16 14:00:00.000000

"Public profiles are viewable by authenticated users" exposed whole rows,
including email and subscription columns, because RLS cannot hide columns.
This migration drops it and moves cross-user reads to a view:

1. public_profiles projects only the safe columns and keeps only rows with
   verified = true, and only when a caller identity is present. It runs
   with the owner's privileges (not security_invoker), so it can see rows
   the owner-only SELECT policy hides. security_barrier keeps caller
   supplied predicates from being pushed below the view's own filter.
   anon may select from it too and always gets zero rows, since it has no
   caller identity.

2. get_public_profile(uuid) returns at most one row of the view. It is
   SECURITY DEFINER but selects through the view, so the verified and
   caller-present filters still apply. Anonymous callers get no row.

3. can_see_user_email(uuid) is true only for the caller's own id. It is the
   single place future admin or business-connection rules go.

A broader "Limited profile data for authenticated users" policy was
considered and not added: with the view in place no cross-user SELECT
policy on profiles is needed.

All functions pin search_path to '' and schema-qualify every identifier.
"""

from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0b6f3a9d2c71"
down_revision: Union[str, None] = "a3c9e1f47b25"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Swap the verified-rows policy for a column-restricted view."""
    op.execute('DROP POLICY IF EXISTS "Public profiles are viewable by authenticated users" ON public.profiles')

    # =========================================================================
    # 1. VIEW
    # =========================================================================
    op.execute("""
        CREATE VIEW public.public_profiles
        WITH (security_barrier = true)
        AS
        SELECT
            id,
            user_id,
            first_name,
            last_name,
            title,
            specialty,
            organization,
            country,
            profile_type,
            created_at,
            avatar_url,
            verified,
            primary_specialty_slug
        FROM public.profiles
        WHERE verified = true
          AND public.app_user_id() IS NOT NULL
    """)

    op.execute("REVOKE ALL ON public.public_profiles FROM PUBLIC")
    op.execute("GRANT SELECT ON public.public_profiles TO anon, authenticated")

    # =========================================================================
    # 2. FUNCTIONS
    # =========================================================================
    op.execute("""
        CREATE OR REPLACE FUNCTION public.get_public_profile(profile_user_id uuid)
        RETURNS SETOF public.public_profiles
        LANGUAGE sql
        STABLE
        SECURITY DEFINER
        SET search_path = ''
        AS $$
            SELECT *
            FROM public.public_profiles
            WHERE user_id = profile_user_id
            LIMIT 1
        $$
    """)

    # Never NULL: a missing caller or target is simply false
    op.execute("""
        CREATE OR REPLACE FUNCTION public.can_see_user_email(profile_user_id uuid)
        RETURNS boolean
        LANGUAGE sql
        STABLE
        SECURITY DEFINER
        SET search_path = ''
        AS $$
            SELECT COALESCE(
                public.app_user_id() IS NOT NULL
                AND public.app_user_id() = profile_user_id,
                false
            )
        $$
    """)

    # Denial stays silent for anon: no row, or false
    op.execute("REVOKE EXECUTE ON FUNCTION public.get_public_profile(uuid) FROM PUBLIC")
    op.execute("REVOKE EXECUTE ON FUNCTION public.can_see_user_email(uuid) FROM PUBLIC")
    op.execute("GRANT EXECUTE ON FUNCTION public.get_public_profile(uuid) TO anon, authenticated")
    op.execute("GRANT EXECUTE ON FUNCTION public.can_see_user_email(uuid) TO anon, authenticated")

    print("Public profiles view created:")
    print("  - Dropped verified-rows SELECT policy on profiles")
    print("  - public_profiles: safe columns, verified rows, empty without a caller identity")
    print("  - get_public_profile(uuid), can_see_user_email(uuid)")


def downgrade() -> None:
    """Restore the verified-rows policy and remove the view."""
    op.execute("DROP FUNCTION IF EXISTS public.can_see_user_email(uuid)")
    op.execute("DROP FUNCTION IF EXISTS public.get_public_profile(uuid)")
    op.execute("DROP VIEW IF EXISTS public.public_profiles")

    op.execute("""
        CREATE POLICY "Public profiles are viewable by authenticated users" ON public.profiles
            FOR SELECT
            TO authenticated
            USING (verified = true AND public.app_user_id() IS NOT NULL)
    """)

    print("Public profiles view removed, verified-rows policy restored")
