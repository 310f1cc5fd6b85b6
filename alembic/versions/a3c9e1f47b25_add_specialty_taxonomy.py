"""Add specialty taxonomy columns

Revision ID: a3c9e1f47b25
Revises: 7d2e5b8c1f43
Create Date: 2026-02-09 09:30:00.000000

Adds primary_specialty_slug (btree) and subspecialties (GIN) to profiles,
both editable by the row owner, and validate_specialty_slug(text).

The SQL check is deliberately minimal (non-NULL, non-empty). The slug
catalogue lives in app/config/specialties.py and is enforced by the API.
"""

from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a3c9e1f47b25"
down_revision: Union[str, None] = "7d2e5b8c1f43"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add specialty columns, indexes and the slug check function."""
    op.execute("ALTER TABLE public.profiles ADD COLUMN primary_specialty_slug text")
    op.execute("ALTER TABLE public.profiles ADD COLUMN subspecialties text[]")

    op.execute("""
        CREATE INDEX idx_profiles_primary_specialty_slug
            ON public.profiles (primary_specialty_slug)
    """)
    op.execute("""
        CREATE INDEX idx_profiles_subspecialties
            ON public.profiles USING gin (subspecialties)
    """)

    op.execute("""
        GRANT INSERT (primary_specialty_slug, subspecialties),
              UPDATE (primary_specialty_slug, subspecialties)
            ON public.profiles TO authenticated
    """)

    op.execute("""
        CREATE OR REPLACE FUNCTION public.validate_specialty_slug(slug text)
        RETURNS boolean
        LANGUAGE plpgsql
        IMMUTABLE
        SET search_path = ''
        AS $$
        BEGIN
            RETURN slug IS NOT NULL AND slug <> '';
        END;
        $$
    """)

    op.execute("""
        GRANT EXECUTE ON FUNCTION public.validate_specialty_slug(text)
            TO anon, authenticated
    """)

    print("Specialty taxonomy added:")
    print("  - profiles.primary_specialty_slug (btree), profiles.subspecialties (gin)")
    print("  - validate_specialty_slug(text)")


def downgrade() -> None:
    """Remove specialty columns and the slug check."""
    op.execute("DROP FUNCTION IF EXISTS public.validate_specialty_slug(text)")
    op.execute("DROP INDEX IF EXISTS public.idx_profiles_subspecialties")
    op.execute("DROP INDEX IF EXISTS public.idx_profiles_primary_specialty_slug")
    op.execute("ALTER TABLE public.profiles DROP COLUMN IF EXISTS subspecialties")
    op.execute("ALTER TABLE public.profiles DROP COLUMN IF EXISTS primary_specialty_slug")

    print("Specialty taxonomy removed")
