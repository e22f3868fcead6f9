"""Authentication through Supabase Auth."""

from __future__ import annotations

import logging
from typing import Any

from supabase import Client

from taskboard.cache import CacheKeys, cache, invalidate_user_cache
from taskboard.exceptions import AuthenticationError, raising_app_errors
from taskboard.logging import format_component
from taskboard.types import AuthResponse, CurrentUser
from taskboard.users import USERS_TABLE, resolve_username

logger = logging.getLogger(__name__)


def _to_auth_response(response: Any, username: str | None = None) -> AuthResponse:
    user = response.user
    session = response.session
    return AuthResponse(
        user_id=user.id if user else None,
        email=user.email if user else None,
        username=username,
        access_token=session.access_token if session else None,
        refresh_token=session.refresh_token if session else None,
        expires_at=session.expires_at if session else None,
    )


def sign_in(client: Client, email: str, password: str) -> AuthResponse:
    with raising_app_errors():
        response = client.auth.sign_in_with_password({"email": email, "password": password})
    logger.info(f"{format_component('AUTH')} Signed in {email}")
    return _to_auth_response(response, resolve_username(client, email) or None)


def sign_up(
    client: Client,
    email: str,
    password: str,
    username: str | None = None,
    metadata: dict | None = None,
) -> AuthResponse:
    """Create an account; a given username is stored in metadata and the users table."""
    data = dict(metadata or {})
    if username:
        data["username"] = username
    options = {"data": data} if data else None

    with raising_app_errors():
        response = client.auth.sign_up({"email": email, "password": password, "options": options})
        if username and response.user:
            client.table(USERS_TABLE).insert(
                {"id": response.user.id, "email": email, "username": username}
            ).execute()
            cache.invalidate(CacheKeys.USERS)

    logger.info(f"{format_component('AUTH')} Signed up {email}")
    return _to_auth_response(response, username)


def sign_out(client: Client, jwt: str, user: CurrentUser | None = None) -> None:
    """Revoke the session behind `jwt` and drop its user's cached data.

    The per-request client holds no session, so the token is revoked through
    the GoTrue logout endpoint with the token itself as authorization.
    """
    with raising_app_errors():
        client.auth.admin.sign_out(jwt)

    if user is not None:
        # Task lists are keyed by username, profiles by email
        for key in (user.username, user.email):
            if key:
                invalidate_user_cache(key)
    logger.info(f"{format_component('AUTH')} Signed out {user.email if user else 'session'}")



def get_user(client: Client, jwt: str) -> CurrentUser:
    """Resolve the user owning an access token."""
    with raising_app_errors():
        response = client.auth.get_user(jwt)
    user = response.user if response else None
    if user is None:
        raise AuthenticationError("Your session has expired, please sign in again")

    username = resolve_username(client, user.email)
    if not username:
        metadata = user.user_metadata or {}
        username = metadata.get("username", "")
    return CurrentUser(id=user.id, email=user.email, username=username)
