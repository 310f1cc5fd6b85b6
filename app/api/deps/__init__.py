"""API dependencies - re-exports from submodules."""

from .auth import (
    AnonSession,
    AuthenticatedUser,
    CurrentUser,
    DbSession,
    RlsSession,
    decode_token,
    get_current_user,
    get_current_user_optional,
    get_db_as_anon,
    get_db_with_rls,
    get_jwks,
    get_signing_key,
    security,
)

__all__ = [
    "security",
    "get_jwks",
    "get_signing_key",
    "decode_token",
    "get_current_user",
    "get_current_user_optional",
    "get_db_with_rls",
    "get_db_as_anon",
    "AuthenticatedUser",
    "DbSession",
    "CurrentUser",
    "RlsSession",
    "AnonSession",
]
