"""JWT validation and caller identity dependencies.

This module provides:
- JWT validation against Supabase JWKS
- The authenticated caller (no local users table: the JWT is the identity)
- RLS-aware database session dependencies for authenticated and anonymous callers
"""

import logging
import time
import uuid as uuid_pkg
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from typing import Annotated, Any

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from jose.backends import ECKey
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.database import get_db
from app.core.policies import Caller
from app.core.rls import set_anon_context, set_rls_user_context

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

# Cache for JWKS with TTL to handle key rotation
_jwks_cache: dict[str, Any] = {}
_jwks_cache_timestamp: float = 0.0
_JWKS_CACHE_TTL_SECONDS: float = 3600.0  # 1 hour


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity taken from a validated Supabase access token."""

    id: uuid_pkg.UUID
    email: str | None = None
    full_name: str | None = None

    @property
    def caller(self) -> Caller:
        return Caller(user_id=self.id)


async def _fetch_jwks() -> dict[str, Any]:
    """Fetch JWKS from Supabase and update the cache."""
    global _jwks_cache_timestamp
    async with httpx.AsyncClient() as client:
        response = await client.get(settings.supabase_jwks_url)
        response.raise_for_status()
        jwks = response.json()
        _jwks_cache.clear()
        _jwks_cache.update(jwks)
        _jwks_cache_timestamp = time.monotonic()
        return jwks


async def get_jwks(force_refresh: bool = False) -> dict[str, Any]:
    """Fetch and cache JWKS from Supabase with a 1-hour TTL."""
    cache_age = time.monotonic() - _jwks_cache_timestamp
    if _jwks_cache and not force_refresh and cache_age < _JWKS_CACHE_TTL_SECONDS:
        return _jwks_cache

    return await _fetch_jwks()


def get_signing_key(jwks: dict[str, Any], token: str) -> ECKey:
    """Get the signing key from JWKS that matches the token's kid."""
    unverified_header = jwt.get_unverified_header(token)
    kid = unverified_header.get("kid")

    for key in jwks.get("keys", []):
        if key.get("kid") == kid:
            return ECKey(key, algorithm="ES256")

    raise ValueError("Unable to find matching key in JWKS")


def decode_token(jwks: dict[str, Any], token: str) -> AuthenticatedUser:
    """
    Verify a token against ``jwks`` and build the caller identity.

    Raises:
        JWTError: Signature, expiry or audience check failed.
        ValueError: No matching key, or ``sub`` is missing or not a UUID.
    """
    signing_key = get_signing_key(jwks, token)
    payload = jwt.decode(
        token,
        signing_key,
        algorithms=["ES256"],
        audience="authenticated",
    )
    user_id_str: str | None = payload.get("sub")
    if user_id_str is None:
        raise ValueError("Token has no subject")

    user_metadata = payload.get("user_metadata") or {}
    return AuthenticatedUser(
        id=uuid_pkg.UUID(user_id_str),
        email=payload.get("email"),
        full_name=user_metadata.get("full_name"),
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> AuthenticatedUser:
    """Validate the Supabase JWT and return the caller."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    token = credentials.credentials

    try:
        jwks = await get_jwks()
        return decode_token(jwks, token)
    except (JWTError, ValueError) as first_error:
        # Key rotation may have occurred, so force a JWKS refresh and retry once
        try:
            logger.info("JWT validation failed with cached JWKS, forcing refresh")
            jwks = await get_jwks(force_refresh=True)
            return decode_token(jwks, token)
        except (JWTError, ValueError, httpx.HTTPError):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Could not validate credentials",
            ) from first_error
    except httpx.HTTPError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from None


async def get_current_user_optional(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> AuthenticatedUser | None:
    """Get current user if authenticated, None otherwise."""
    if not credentials:
        return None
    try:
        return await get_current_user(credentials)
    except HTTPException:
        return None


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db)]
CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]


async def get_db_with_rls(
    db: DbSession,
    current_user: CurrentUser,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Database session running as the authenticated caller.

    Switches to the `authenticated` role and sets app.current_user_id, so
    every profile policy, the public_profiles view and the security-definer
    functions see the caller. Both settings are SET LOCAL and vanish when the
    request's transaction ends, which keeps them safe under PgBouncer.

    Usage:
        @router.get("/profiles/me")
        async def endpoint(db: AsyncSession = Depends(get_db_with_rls)):
            # Only the caller's own profile row is visible
            ...
    """
    await set_rls_user_context(db, current_user.id)
    yield db


async def get_db_as_anon(db: DbSession) -> AsyncGenerator[AsyncSession, None]:
    """
    Database session running as `anon`.

    Used by public endpoints that call anon-granted functions. anon holds
    no privileges on profiles or public_profiles, so any stray read fails
    closed.
    """
    await set_anon_context(db)
    yield db


RlsSession = Annotated[AsyncSession, Depends(get_db_with_rls)]
AnonSession = Annotated[AsyncSession, Depends(get_db_as_anon)]
