"""User directory API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from supabase import Client

from api.utils import get_supabase, require_user
from taskboard.types import User
from taskboard.users import fetch_users, refetch_users

router = APIRouter(prefix="/api/users", tags=["Users"], dependencies=[Depends(require_user)])


@router.get("")
async def api_list_users(client: Client = Depends(get_supabase)) -> list[User]:
    """List users ordered by username (cached)."""
    return fetch_users(client)


@router.post("/refresh")
async def api_refresh_users(client: Client = Depends(get_supabase)) -> list[User]:
    """Drop the cached user list and load it again."""
    return refetch_users(client)
