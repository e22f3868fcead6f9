"""Shared utilities and dependencies for API routes."""

from __future__ import annotations

from fastapi import Depends, Header, HTTPException
from supabase import Client, create_client

from taskboard.auth import get_user
from taskboard.settings import settings
from taskboard.types import CurrentUser


def get_supabase() -> Client:
    """Get Supabase client instance."""
    if not settings.supabase_url or not settings.supabase_anon_key:
        raise ValueError("Supabase not configured")
    return create_client(settings.supabase_url, settings.supabase_anon_key)


async def get_bearer_token(authorization: str | None = Header(None)) -> str | None:
    """Access token from the Authorization header; None when the header is absent."""
    if authorization is None:
        return None
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing or invalid Authorization header")
    return authorization[7:]


async def get_current_user(
    jwt: str | None = Depends(get_bearer_token),
    client: Client = Depends(get_supabase),
) -> CurrentUser | None:
    """Resolve the requester from a Bearer token; None for anonymous requests.

    Table queries on `client` run with the user's token afterwards, so row
    level security applies to them.
    """
    if jwt is None:
        return None
    user = get_user(client, jwt)
    client.postgrest.auth(jwt)
    return user


async def require_user(user: CurrentUser | None = Depends(get_current_user)) -> CurrentUser:
    """Like get_current_user, but anonymous requests are rejected."""
    if user is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user


async def require_username(user: CurrentUser = Depends(require_user)) -> CurrentUser:
    """Authenticated user who can own tasks: an account without a username cannot."""
    if not user.username:
        raise HTTPException(status_code=403, detail="Your account has no username")
    return user


def viewer_of(user: CurrentUser | None) -> str | None:
    """Username used for visibility checks."""
    return user.username or None if user else None
