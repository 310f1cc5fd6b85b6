"""Shared assertion helpers for authorization boundary tests.

Usage:
    await assert_requires_auth(unauth_client, "get", "/api/v1/profiles/me")
    await assert_hidden(api_client, "get", f"/api/v1/profiles/{other_id}/public")
"""

from __future__ import annotations

from httpx import AsyncClient


async def assert_requires_auth(
    client: AsyncClient, method: str, url: str, **kwargs
) -> None:
    """Verify endpoint returns 401 without auth."""
    resp = await getattr(client, method)(url, **kwargs)
    assert resp.status_code == 401, (
        f"{method.upper()} {url} expected 401, got {resp.status_code}: {resp.text}"
    )


async def assert_hidden(
    client: AsyncClient, method: str, url: str, **kwargs
) -> None:
    """Verify an inaccessible row is reported exactly like a missing one."""
    resp = await getattr(client, method)(url, **kwargs)
    assert resp.status_code == 404, (
        f"{method.upper()} {url} expected 404, got {resp.status_code}: {resp.text}"
    )
    assert resp.json() == {"detail": "Profile not found"}
