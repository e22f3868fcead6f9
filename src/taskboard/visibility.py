"""Privacy rules deciding which tasks a user may see."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from taskboard.types import Task, TaskPrivacy

TaskLike = Task | Mapping[str, Any]


def _field(task: TaskLike, *names: str) -> Any:
    # Rows from the tasks table use snake_case; payloads from older clients use camelCase
    for name in names:
        value = getattr(task, name, None) if isinstance(task, Task) else task.get(name)
        if value is not None:
            return value
    return None


def _shared_with(task: TaskLike) -> list[str]:
    shared = _field(task, "shared_with", "sharedWith")
    return list(shared) if isinstance(shared, list) else []


def _is_general(task: TaskLike) -> bool:
    return _field(task, "privacy") == TaskPrivacy.GENERAL


def can_user_see_task(task: TaskLike, username: str | None) -> bool:
    """Return True if `username` may see `task`.

    General tasks are visible to everyone. Private tasks are visible to the
    responsible user, the creator and the users they are shared with; an
    anonymous requester never sees a private task.
    """
    if _is_general(task):
        return True
    if not username:
        return False
    return (
        username == _field(task, "responsible")
        or username == _field(task, "created_by", "createdBy")
        or username in _shared_with(task)
    )


def get_task_audience(task: TaskLike) -> list[str]:
    """Users a private task is restricted to; empty for general tasks."""
    if _is_general(task):
        return []
    audience = [_field(task, "responsible"), _field(task, "created_by", "createdBy"), *_shared_with(task)]
    return list(dict.fromkeys(u for u in audience if u))


def visible_tasks(tasks: Iterable[Task], username: str | None) -> list[Task]:
    return [task for task in tasks if can_user_see_task(task, username)]
