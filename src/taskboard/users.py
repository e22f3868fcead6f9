"""Users table access and username resolution."""

from __future__ import annotations

import logging

from supabase import Client

from taskboard.cache import CacheKeys, cache, with_cache
from taskboard.exceptions import DatabaseError, with_error_handling
from taskboard.logging import format_component
from taskboard.settings import settings
from taskboard.types import User

logger = logging.getLogger(__name__)

USERS_TABLE = "users"


def _load_users(client: Client) -> list[User]:
    try:
        response = client.table(USERS_TABLE).select("*").order("username").execute()
    except Exception as e:
        raise DatabaseError(f"Error loading users: {getattr(e, 'message', None) or e}") from e
    return [User.from_row(row) for row in response.data or []]


def fetch_users(client: Client) -> list[User]:
    """All users ordered by username, cached for `users_cache_ttl_seconds`."""
    return with_cache(CacheKeys.USERS, lambda: _load_users(client), settings.users_cache_ttl_seconds)


def refetch_users(client: Client) -> list[User]:
    cache.invalidate(CacheKeys.USERS)
    return fetch_users(client)


def _lookup_username(client: Client, email: str) -> str:
    response = client.table(USERS_TABLE).select("username").eq("email", email).limit(1).execute()
    return response.data[0]["username"] if response.data else ""


def resolve_username(client: Client, email: str | None) -> str:
    """Username for an authenticated email.

    Falls back to `settings.username_fallbacks` when the users table has no
    row for the email or cannot be queried; returns "" if neither knows it.
    """
    if not email:
        return ""

    result = with_error_handling(lambda: with_cache(CacheKeys.user_profile(email), lambda: _lookup_username(client, email)))
    if not result.ok:
        logger.warning(f"{format_component('USERS')} Username lookup failed for {email}, using fallback mapping")
    return result.data or settings.username_fallbacks.get(email, "")
