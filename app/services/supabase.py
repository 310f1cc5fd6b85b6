"""Supabase admin client for server-side operations."""

import asyncio
import logging
import uuid as uuid_pkg

from supabase import Client, create_client

from app.config.settings import settings

logger = logging.getLogger(__name__)


class SupabaseAuthError(Exception):
    """Raised when the Supabase Auth admin API rejects a request."""


class SupabaseNotConfiguredError(Exception):
    """Raised when the service role key is missing. A deployment problem, not a client one."""


def get_supabase_admin_client() -> Client:
    """
    Get Supabase client with service role key for admin operations.

    This client bypasses RLS and should only be used for creating accounts
    via the admin API. Never expose it to the frontend.
    """
    if not settings.supabase_service_role_key:
        raise SupabaseNotConfiguredError(
            "SUPABASE_SERVICE_ROLE_KEY not configured. "
            "Set it in .env for subscription signup."
        )

    return create_client(
        settings.supabase_url,
        settings.supabase_service_role_key,
    )


async def create_auth_user(email: str, password: str, full_name: str) -> uuid_pkg.UUID:
    """
    Create a confirmed Supabase Auth user and return its id.

    Raises:
        SupabaseNotConfiguredError: If the service role key is not set.
        SupabaseAuthError: If Supabase refuses the account (e.g. email taken,
            weak password) or cannot be reached.
    """
    supabase = get_supabase_admin_client()
    try:
        attributes = {
            "email": email,
            "password": password,
            "email_confirm": True,
            "user_metadata": {"full_name": full_name},
        }
        # supabase-py is synchronous; keep it off the event loop
        response = await asyncio.to_thread(supabase.auth.admin.create_user, attributes)
        return uuid_pkg.UUID(response.user.id)
    except Exception as e:
        error_msg = str(e)
        if "already been registered" in error_msg.lower() or "already exists" in error_msg.lower():
            raise SupabaseAuthError("An account with this email already exists") from e
        logger.error(f"Supabase create_user failed for {email}: {e}")
        raise SupabaseAuthError(error_msg or "Failed to create account") from e


async def delete_auth_user(user_id: uuid_pkg.UUID) -> None:
    """Delete a Supabase Auth user. Used to undo a signup whose profile insert failed."""
    supabase = get_supabase_admin_client()
    await asyncio.to_thread(supabase.auth.admin.delete_user, str(user_id))
