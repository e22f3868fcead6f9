"""Tests for the TTL cache."""

from __future__ import annotations

import importlib

import pytest

# `taskboard` re-exports the `cache` instance, which shadows the submodule attribute.
cache_module = importlib.import_module("taskboard.cache")
from taskboard.cache import CacheKeys, TTLCache, cache, invalidate_task_cache, invalidate_user_cache, with_cache


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ttl_cache(clock: FakeClock) -> TTLCache:
    return TTLCache(default_ttl=10, clock=clock)


class TestTTLCache:
    def test_get_missing_returns_none(self, ttl_cache: TTLCache) -> None:
        assert ttl_cache.get("nope") is None

    def test_get_before_expiry(self, ttl_cache: TTLCache, clock: FakeClock) -> None:
        ttl_cache.set("k", [1, 2])
        clock.advance(10)  # exactly ttl is still fresh
        assert ttl_cache.get("k") == [1, 2]

    def test_get_after_expiry_returns_none_and_evicts(self, ttl_cache: TTLCache, clock: FakeClock) -> None:
        ttl_cache.set("k", "v")
        clock.advance(10.5)
        assert ttl_cache.get("k") is None
        assert "k" not in ttl_cache

    def test_custom_ttl(self, ttl_cache: TTLCache, clock: FakeClock) -> None:
        ttl_cache.set("short", 1, ttl=2)
        ttl_cache.set("long", 2, ttl=60)
        clock.advance(5)
        assert ttl_cache.get("short") is None
        assert ttl_cache.get("long") == 2

    def test_zero_ttl_uses_default(self, ttl_cache: TTLCache, clock: FakeClock) -> None:
        ttl_cache.set("k", "v", ttl=0)
        clock.advance(5)
        assert ttl_cache.get("k") == "v"

    def test_set_overwrites_and_restarts_ttl(self, ttl_cache: TTLCache, clock: FakeClock) -> None:
        ttl_cache.set("k", "old")
        clock.advance(8)
        ttl_cache.set("k", "new")
        clock.advance(8)
        assert ttl_cache.get("k") == "new"

    def test_invalidate(self, ttl_cache: TTLCache) -> None:
        ttl_cache.set("k", "v")
        ttl_cache.invalidate("k")
        ttl_cache.invalidate("missing")
        assert ttl_cache.get("k") is None

    def test_invalidate_pattern_searches_anywhere(self, ttl_cache: TTLCache) -> None:
        for key in ("user_1_tasks", "user_2_tasks", "user_1_profile", "tasks"):
            ttl_cache.set(key, key)
        ttl_cache.invalidate_pattern("user_.*_tasks")
        assert ttl_cache.stats()["keys"] == ["user_1_profile", "tasks"]

    def test_clear(self, ttl_cache: TTLCache) -> None:
        ttl_cache.set("a", 1)
        ttl_cache.set("b", 2)
        ttl_cache.clear()
        assert ttl_cache.stats() == {"size": 0, "keys": []}

    def test_cleanup_removes_only_expired(self, ttl_cache: TTLCache, clock: FakeClock) -> None:
        ttl_cache.set("old", 1, ttl=1)
        ttl_cache.set("fresh", 2, ttl=100)
        clock.advance(2)
        assert ttl_cache.cleanup() == 1
        assert ttl_cache.stats() == {"size": 1, "keys": ["fresh"]}


class TestCacheHelpers:
    def test_keys(self) -> None:
        assert CacheKeys.user_tasks("42") == "user_42_tasks"
        assert CacheKeys.user_profile("42") == "user_42_profile"
        assert CacheKeys.task_comments("t1") == "task_t1_comments"
        assert CacheKeys.viewer_tasks("Ivo") == "user_Ivo_tasks"
        assert CacheKeys.viewer_tasks(None) == CacheKeys.ANONYMOUS_TASKS

    def test_invalidate_task_cache(self) -> None:
        cache.set(CacheKeys.ANONYMOUS_TASKS, [])
        cache.set(CacheKeys.task_comments("t1"), [])
        cache.set(CacheKeys.task_comments("t2"), [])
        cache.set(CacheKeys.user_tasks("u1"), [])
        cache.set(CacheKeys.USERS, [])

        invalidate_task_cache("t1")

        assert sorted(cache.stats()["keys"]) == ["task_t2_comments", "users"]

    def test_invalidate_user_cache(self) -> None:
        cache.set(CacheKeys.user_profile("u1"), "Ivo")
        cache.set(CacheKeys.user_tasks("u1"), [])
        cache.set(CacheKeys.user_tasks("u10"), [])
        invalidate_user_cache("u1")
        assert cache.stats()["keys"] == ["user_u10_tasks"]

    def test_with_cache_computes_once(self) -> None:
        calls = []

        def load():
            calls.append(1)
            return ["value"]

        assert with_cache("key", load) == ["value"]
        assert with_cache("key", load) == ["value"]
        assert len(calls) == 1

    def test_with_cache_does_not_store_failures(self) -> None:
        def fail():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            with_cache("key", fail)
        assert "key" not in cache

    def test_with_cache_honours_ttl(self, monkeypatch, clock: FakeClock) -> None:
        monkeypatch.setattr(cache_module, "cache", TTLCache(default_ttl=10, clock=clock))
        calls = []
        with_cache("key", lambda: calls.append(1) or "v", ttl=1)
        clock.advance(2)
        with_cache("key", lambda: calls.append(1) or "v", ttl=1)
        assert len(calls) == 2
