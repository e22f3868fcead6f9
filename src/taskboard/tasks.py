"""Task and comment persistence over the Supabase table API.

Every mutation invalidates the cached task list and refetches it, so the
returned task always reflects what the backend stored.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime, timezone

from supabase import Client

from taskboard.cache import CacheKeys, invalidate_task_cache, with_cache
from taskboard.exceptions import NotFoundError, PermissionDeniedError, raising_app_errors
from taskboard.logging import format_component
from taskboard.types import Comment, CommentCreate, Task, TaskCreate, TaskStatus, TaskUpdate
from taskboard.visibility import can_user_see_task, visible_tasks
from taskboard.workflow import next_status

logger = logging.getLogger(__name__)

TASKS_TABLE = "tasks"
COMMENTS_TABLE = "task_comments"


def _load_tasks(client: Client) -> list[Task]:
    with raising_app_errors():
        task_rows = client.table(TASKS_TABLE).select("*").order("created_at", desc=True).execute().data
        comment_rows = client.table(COMMENTS_TABLE).select("*").order("date").execute().data

    comments_by_task: dict[str, list[Comment]] = defaultdict(list)
    for row in comment_rows or []:
        comments_by_task[str(row["task_id"])].append(Comment.from_row(row))
    return [Task.from_row(row, comments_by_task.get(str(row["id"]), [])) for row in task_rows or []]


def _all_tasks(client: Client, viewer: str | None) -> list[Task]:
    # Rows come back scoped by the requester's token, so each viewer gets its own entry
    return with_cache(CacheKeys.viewer_tasks(viewer), lambda: _load_tasks(client))


def _find(tasks: list[Task], task_id: str) -> Task | None:
    return next((t for t in tasks if t.id == str(task_id)), None)


def _require_visible(client: Client, task_id: str, viewer: str | None) -> Task:
    task = _find(_all_tasks(client, viewer), task_id)
    if task is None:
        raise NotFoundError(f"Task {task_id} not found")
    if not can_user_see_task(task, viewer):
        raise PermissionDeniedError()
    return task


def _refetch(client: Client, task_id: str, viewer: str | None) -> Task | None:
    """Reload after a mutation and return the task as `viewer` now sees it."""
    invalidate_task_cache(task_id)
    return get_task(client, task_id, viewer)


def _refetch_required(client: Client, task_id: str, viewer: str | None) -> Task:
    task = _refetch(client, task_id, viewer)
    if task is None:
        raise NotFoundError(f"Task {task_id} not found")
    return task


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def fetch_tasks(client: Client, viewer: str | None = None) -> list[Task]:
    """Tasks visible to `viewer`, newest first, with their comments attached."""
    return visible_tasks(_all_tasks(client, viewer), viewer)


def get_task(client: Client, task_id: str, viewer: str | None = None) -> Task | None:
    """Get a task by ID, or None if it does not exist or `viewer` may not see it."""
    task = _find(_all_tasks(client, viewer), task_id)
    if task is None or not can_user_see_task(task, viewer):
        return None
    return task


def create_task(client: Client, data: TaskCreate, created_by: str) -> Task:
    """Insert a task and its initial comments."""
    with raising_app_errors():
        response = client.table(TASKS_TABLE).insert(data.to_row(created_by)).execute()
        task_id = str(response.data[0]["id"])
        if data.comments:
            client.table(COMMENTS_TABLE).insert([c.to_row(task_id) for c in data.comments]).execute()

    logger.info(f"{format_component('TASK')} Created task {task_id} ({data.name!r}) by {created_by}")
    return _refetch_required(client, task_id, created_by)


def update_task(client: Client, task_id: str, data: TaskUpdate, viewer: str | None) -> Task | None:
    """Update the fields sent in `data`; a sent comment list replaces the thread.

    Returns None when the edit leaves the task hidden from `viewer`, e.g. after
    removing themselves from `shared_with`.
    """
    _require_visible(client, task_id, viewer)
    row = {**data.to_row(), "updated_at": _now()}

    with raising_app_errors():
        client.table(TASKS_TABLE).update(row).eq("id", task_id).execute()
        if data.comments is not None:
            client.table(COMMENTS_TABLE).delete().eq("task_id", task_id).execute()
            if data.comments:
                client.table(COMMENTS_TABLE).insert([c.to_row(task_id) for c in data.comments]).execute()

    logger.info(f"{format_component('TASK')} Updated task {task_id}: {sorted(row)}")
    return _refetch(client, task_id, viewer)


def delete_task(client: Client, task_id: str, viewer: str | None) -> None:
    _require_visible(client, task_id, viewer)
    with raising_app_errors():
        client.table(TASKS_TABLE).delete().eq("id", task_id).execute()

    logger.info(f"{format_component('TASK')} Deleted task {task_id}")
    invalidate_task_cache(task_id)


def update_task_status(client: Client, task_id: str, status: TaskStatus, viewer: str | None) -> Task:
    _require_visible(client, task_id, viewer)
    with raising_app_errors():
        client.table(TASKS_TABLE).update({"status": TaskStatus(status).value, "updated_at": _now()}).eq(
            "id", task_id
        ).execute()

    logger.info(f"{format_component('TASK')} Task {task_id} -> {TaskStatus(status).value}")
    return _refetch_required(client, task_id, viewer)


def advance_task_status(client: Client, task_id: str, viewer: str | None) -> Task:
    """Move a task to the next status of the workflow cycle."""
    task = _require_visible(client, task_id, viewer)
    return update_task_status(client, task_id, next_status(task.status), viewer)


def add_comment(client: Client, task_id: str, comment: CommentCreate, viewer: str | None) -> Comment:
    _require_visible(client, task_id, viewer)
    with raising_app_errors():
        response = client.table(COMMENTS_TABLE).insert(comment.to_row(task_id)).execute()

    created = Comment.from_row(response.data[0])
    logger.info(f"{format_component('COMMENT')} Added comment {created.id} to task {task_id}")
    invalidate_task_cache(task_id)
    return created


def delete_comment(client: Client, task_id: str, comment_id: str, viewer: str | None) -> None:
    _require_visible(client, task_id, viewer)
    with raising_app_errors():
        response = client.table(COMMENTS_TABLE).delete().eq("id", comment_id).eq("task_id", task_id).execute()

    if not response.data:
        raise NotFoundError(f"Comment {comment_id} not found on task {task_id}")
    logger.info(f"{format_component('COMMENT')} Deleted comment {comment_id} from task {task_id}")
    invalidate_task_cache(task_id)
