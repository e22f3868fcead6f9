"""Authentication API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from supabase import Client

from api.utils import get_bearer_token, get_supabase, require_user
from taskboard import auth
from taskboard.types import AuthResponse, AuthSignInRequest, AuthSignUpRequest, CurrentUser

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/signup")
async def api_auth_signup(body: AuthSignUpRequest, client: Client = Depends(get_supabase)) -> AuthResponse:
    """Sign up a new user via Supabase Auth."""
    return auth.sign_up(client, body.email, body.password, username=body.username, metadata=body.metadata)


@router.post("/signin")
async def api_auth_signin(body: AuthSignInRequest, client: Client = Depends(get_supabase)) -> AuthResponse:
    """Sign in a user via Supabase Auth."""
    return auth.sign_in(client, body.email, body.password)


@router.post("/signout")
async def api_auth_signout(
    jwt: str = Depends(get_bearer_token),
    user: CurrentUser = Depends(require_user),
    client: Client = Depends(get_supabase),
) -> dict[str, str]:
    """Sign out the current user, revoking the access token sent with the request."""
    auth.sign_out(client, jwt, user)
    return {"status": "signed_out"}


@router.get("/user")
async def api_auth_get_user(user: CurrentUser = Depends(require_user)) -> CurrentUser:
    """Get the current user from the JWT in the Authorization header."""
    return user
