"""In-memory TTL cache for reads from Supabase.

Access happens on a single event loop, so entries are not locked.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from taskboard.logging import format_component
from taskboard.settings import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CacheEntry:
    data: Any
    timestamp: float
    ttl: float

    def expired(self, now: float) -> bool:
        return now - self.timestamp > self.ttl


class TTLCache:
    """Key/value store whose entries expire `ttl` seconds after insertion."""

    def __init__(self, default_ttl: float = 300.0, clock: Callable[[], float] = time.monotonic) -> None:
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def set(self, key: str, data: Any, ttl: float | None = None) -> None:
        # A ttl of 0 falls back to the default as well
        self._entries[key] = CacheEntry(data=data, timestamp=self._clock(), ttl=ttl or self.default_ttl)

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if missing or expired (expired entries are evicted)."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expired(self._clock()):
            del self._entries[key]
            return None
        return entry.data

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def invalidate_pattern(self, pattern: str) -> None:
        """Drop every key in which the regular expression `pattern` matches."""
        regex = re.compile(pattern)
        for key in [k for k in self._entries if regex.search(k)]:
            del self._entries[key]

    def clear(self) -> None:
        self._entries.clear()

    def cleanup(self) -> int:
        """Evict expired entries and return how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.expired(now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def stats(self) -> dict[str, Any]:
        return {"size": len(self._entries), "keys": list(self._entries)}

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class CacheKeys:
    """Well-known cache keys."""

    USERS = "users"
    ANONYMOUS_TASKS = "anonymous_tasks"

    @staticmethod
    def user_tasks(user_id: str) -> str:
        return f"user_{user_id}_tasks"

    @staticmethod
    def viewer_tasks(viewer: str | None) -> str:
        """Task list as loaded for `viewer`; row level security scopes it per requester."""
        return CacheKeys.user_tasks(viewer) if viewer else CacheKeys.ANONYMOUS_TASKS

    @staticmethod
    def user_profile(user_id: str) -> str:
        return f"user_{user_id}_profile"

    @staticmethod
    def task_comments(task_id: str) -> str:
        return f"task_{task_id}_comments"


# Global cache instance
cache = TTLCache(default_ttl=settings.cache_default_ttl_seconds)


def invalidate_user_cache(user_id: str) -> None:
    cache.invalidate(CacheKeys.user_profile(user_id))
    cache.invalidate_pattern(f"user_{re.escape(user_id)}_")


def invalidate_task_cache(task_id: str | None = None) -> None:
    """Drop every viewer's task list and, if given, one task's comments."""
    cache.invalidate(CacheKeys.ANONYMOUS_TASKS)
    if task_id:
        cache.invalidate(CacheKeys.task_comments(task_id))
    cache.invalidate_pattern(r"^user_.*_tasks$")
    logger.debug(f"{format_component('CACHE')} Invalidated task cache (task_id={task_id})")


def with_cache(key: str, fn: Callable[[], T], ttl: float | None = None) -> T:
    """Return the cached value for `key`, computing and storing it with `fn` on a miss.

    If `fn` raises, nothing is cached and the exception propagates.
    """
    cached = cache.get(key)
    if cached is not None:
        return cached

    result = fn()
    cache.set(key, result, ttl)
    return result
