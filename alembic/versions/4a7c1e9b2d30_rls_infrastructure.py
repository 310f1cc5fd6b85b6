"""RLS infrastructure setup

Revision ID: 4a7c1e9b2d30
Revises:
Create Date: 2026-02-02 10:00:00.000000

This migration sets up what the profile policies rely on:

1. The Supabase request roles `anon` and `authenticated`. They already exist
   on Supabase; on plain Postgres (CI, local) they are created here, and the
   migrating role is made a member so the backend can SET ROLE into them.

2. The public.app_user_id() helper. It returns the caller's UUID from the
   transaction-scoped app.current_user_id setting (set by the backend, see
   app/core/rls.py), falling back to request.jwt.claim.sub as set by
   PostgREST. It returns NULL when neither is set, which every policy
   treats as "deny".
"""

from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4a7c1e9b2d30"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create request roles and the app_user_id() helper."""
    # Note: Each statement must be in a separate op.execute() for asyncpg compatibility
    op.execute("""
        DO $$
        DECLARE
            r text;
        BEGIN
            FOREACH r IN ARRAY ARRAY['anon', 'authenticated'] LOOP
                IF NOT EXISTS (SELECT 1 FROM pg_roles WHERE rolname = r) THEN
                    EXECUTE format('CREATE ROLE %I NOLOGIN NOINHERIT', r);
                    RAISE NOTICE 'Created role %', r;
                END IF;
                IF NOT pg_has_role(current_user, r, 'MEMBER') THEN
                    EXECUTE format('GRANT %I TO %I', r, current_user);
                END IF;
            END LOOP;
        END $$
    """)

    op.execute("GRANT USAGE ON SCHEMA public TO anon, authenticated")

    # STABLE lets Postgres evaluate it once per statement inside policies.
    # current_setting(..., true) returns NULL instead of raising when unset.
    op.execute("""
        CREATE OR REPLACE FUNCTION public.app_user_id()
        RETURNS uuid
        LANGUAGE sql
        STABLE
        SET search_path = ''
        AS $$
            SELECT COALESCE(
                NULLIF(current_setting('app.current_user_id', true), ''),
                NULLIF(current_setting('request.jwt.claim.sub', true), '')
            )::uuid
        $$
    """)

    op.execute("""
        COMMENT ON FUNCTION public.app_user_id() IS
            'Returns the current caller UUID from app.current_user_id '
            '(or request.jwt.claim.sub). NULL for anonymous callers.'
    """)

    print("RLS infrastructure setup complete:")
    print("  - Ensured roles anon, authenticated")
    print("  - Created public.app_user_id()")


def downgrade() -> None:
    """Remove the helper. Roles are left in place since Supabase owns them."""
    op.execute("DROP FUNCTION IF EXISTS public.app_user_id()")
    op.execute("REVOKE USAGE ON SCHEMA public FROM anon, authenticated")

    print("RLS infrastructure removed")
