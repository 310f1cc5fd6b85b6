"""Row-Level Security (RLS) context management.

This module sets the PostgreSQL session context that the profile RLS
policies, the public_profiles view and the security-definer functions read
to identify the caller.

Key concepts:
- Uses SET LOCAL / set_config(..., true) so settings are transaction-scoped
  (works with PgBouncer transaction pooling)
- The app.current_user_id setting is read via the app_user_id() SQL function
- The backend connects as the table owner, which bypasses RLS. Every request
  therefore switches to the Supabase ``authenticated`` or ``anon`` role,
  both of which are always subject to RLS and to the column grants.

Usage:
    await set_rls_user_context(session, caller_id)
    # All subsequent queries in this transaction run as `authenticated`
"""

from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

AUTHENTICATED_ROLE = "authenticated"
ANON_ROLE = "anon"


async def set_rls_user_context(session: AsyncSession, user_id: UUID) -> None:
    """
    Run the rest of the transaction as the given authenticated user.

    Args:
        session: The async database session
        user_id: The authenticated caller's UUID (Supabase auth.users.id)
    """
    # set_config(..., true) is the parameterizable form of SET LOCAL
    await session.execute(
        text("SELECT set_config('app.current_user_id', :user_id, true)"),
        {"user_id": str(user_id)},
    )
    await session.execute(text(f"SET LOCAL ROLE {AUTHENTICATED_ROLE}"))


async def set_anon_context(session: AsyncSession) -> None:
    """
    Run the rest of the transaction as an unauthenticated caller.

    app_user_id() returns NULL, so every profile predicate denies.
    """
    await session.execute(text("SELECT set_config('app.current_user_id', '', true)"))
    await session.execute(text(f"SET LOCAL ROLE {ANON_ROLE}"))


async def clear_rls_context(session: AsyncSession) -> None:
    """
    Clear the RLS context and return to the connection's login role.

    Optional since SET LOCAL resets at transaction end, but useful in tests
    that need to seed data as the owner after acting as a user.
    """
    await session.execute(text("RESET ROLE"))
    await session.execute(text("SELECT set_config('app.current_user_id', '', true)"))


async def get_current_rls_user_id(session: AsyncSession) -> UUID | None:
    """
    Get the caller identity the database currently sees.

    Useful for debugging and testing to verify RLS context is correctly set.
    """
    result = await session.execute(text("SELECT public.app_user_id()"))
    return result.scalar_one_or_none()
