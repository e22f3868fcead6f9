"""Taskboard - multi-user task tracking over Supabase."""

from taskboard.cache import (
    CacheKeys,
    TTLCache,
    cache,
    invalidate_task_cache,
    invalidate_user_cache,
    with_cache,
)
from taskboard.exceptions import (
    AppError,
    AuthenticationError,
    DatabaseError,
    DataValidationError,
    NetworkError,
    NotFoundError,
    PermissionDeniedError,
    classify_error,
    handle_error,
    with_error_handling,
)
from taskboard.filters import active_filter_count, compute_stats, filter_tasks, list_projects
from taskboard.settings import Settings, settings
from taskboard.types import (
    Comment,
    CommentCreate,
    Task,
    TaskCreate,
    TaskFilters,
    TaskPriority,
    TaskPrivacy,
    TaskStatus,
    TaskUpdate,
    User,
)
from taskboard.visibility import can_user_see_task, get_task_audience, visible_tasks
from taskboard.workflow import STATUS_CYCLE, next_status

__all__ = [
    "AppError",
    "AuthenticationError",
    "CacheKeys",
    "Comment",
    "CommentCreate",
    "DataValidationError",
    "DatabaseError",
    "NetworkError",
    "NotFoundError",
    "PermissionDeniedError",
    "STATUS_CYCLE",
    "Settings",
    "TTLCache",
    "Task",
    "TaskCreate",
    "TaskFilters",
    "TaskPriority",
    "TaskPrivacy",
    "TaskStatus",
    "TaskUpdate",
    "User",
    "active_filter_count",
    "cache",
    "can_user_see_task",
    "classify_error",
    "compute_stats",
    "filter_tasks",
    "get_task_audience",
    "handle_error",
    "invalidate_task_cache",
    "invalidate_user_cache",
    "list_projects",
    "next_status",
    "settings",
    "visible_tasks",
    "with_cache",
    "with_error_handling",
]
