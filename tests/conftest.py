"""
Shared pytest fixtures.

This module provides fixtures for:
- A seeded in-memory Supabase client
- Cache isolation between tests
- HTTP clients bound to the FastAPI app, with and without row level security
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio

from taskboard.cache import cache
from .fakes import FakeSupabase, RLSFakeSupabase, seeded_supabase


@pytest.fixture(autouse=True)
def clear_cache():
    """Every test starts and ends with an empty global cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def supabase() -> FakeSupabase:
    """Fake Supabase client seeded with three users, three tasks and two comments."""
    return seeded_supabase()


@pytest_asyncio.fixture
async def api_client(supabase: FakeSupabase) -> AsyncIterator[httpx.AsyncClient]:
    """HTTP client for the app with get_supabase overridden by the fake."""
    from api.server import app
    from api.utils import get_supabase

    app.dependency_overrides[get_supabase] = lambda: supabase
    transport = httpx.ASGITransport(app=app)
    try:
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def rls_api_client(supabase: FakeSupabase) -> AsyncIterator[httpx.AsyncClient]:
    """HTTP client where every request gets a fresh client scoped by row level security."""
    from api.server import app
    from api.utils import get_supabase

    app.dependency_overrides[get_supabase] = lambda: RLSFakeSupabase(supabase)
    transport = httpx.ASGITransport(app=app)
    try:
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()
