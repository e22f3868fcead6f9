"""Task management API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from supabase import Client

from api.utils import get_current_user, get_supabase, require_username, viewer_of
from taskboard import tasks as task_store
from taskboard.filters import active_filter_count, compute_stats, filter_tasks, list_projects
from taskboard.types import (
    CommentCreate,
    CurrentUser,
    Notification,
    StatusUpdate,
    Task,
    TaskCreate,
    TaskFilters,
    TaskListResponse,
    TaskMutationResponse,
    TaskPriority,
    TaskPrivacy,
    TaskStatus,
    TaskUpdate,
)
from taskboard.workflow import STATUS_LABELS


router = APIRouter(prefix="/api/tasks", tags=["Tasks"])


def _status_changed(task: Task) -> Notification:
    return Notification(title="Status updated", description=f"Task moved to {STATUS_LABELS[task.status]}.")


@router.get("")
async def api_list_tasks(
    search: str = "",
    status: list[TaskStatus] | None = Query(None),
    responsible: list[str] | None = Query(None),
    priority: list[TaskPriority] | None = Query(None),
    project: list[str] | None = Query(None),
    privacy: list[TaskPrivacy] | None = Query(None),
    month: str | None = Query(None, pattern=r"^\d{4}-\d{2}$", description="Due month as YYYY-MM"),
    client: Client = Depends(get_supabase),
    user: CurrentUser | None = Depends(get_current_user),
) -> TaskListResponse:
    """
    List the tasks visible to the requester, filtered.

    General tasks are visible to everyone; private tasks only to their
    responsible user, creator and the users they are shared with. Stats and
    the project list are computed over all visible tasks, before filtering.

    **Query parameters** (all optional, combined with AND):
    - `search`: case-insensitive text in name, description or project
    - `status`, `responsible`, `priority`, `project`, `privacy`: repeatable
    - `month`: due month, `YYYY-MM`
    """
    filters = TaskFilters(
        search=search,
        status=status,
        responsible=responsible,
        priority=priority,
        project=project,
        privacy=privacy,
        month=month,
    )
    tasks = task_store.fetch_tasks(client, viewer_of(user))
    return TaskListResponse(
        tasks=filter_tasks(tasks, filters),
        total=len(tasks),
        stats=compute_stats(tasks),
        projects=list_projects(tasks),
        active_filters=active_filter_count(filters),
    )


@router.get("/{task_id}")
async def api_get_task(
    task_id: str,
    client: Client = Depends(get_supabase),
    user: CurrentUser | None = Depends(get_current_user),
) -> Task:
    """Get a task by ID."""
    task = task_store.get_task(client, task_id, viewer_of(user))
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return task


@router.post("", status_code=201)
async def api_create_task(
    body: TaskCreate,
    client: Client = Depends(get_supabase),
    user: CurrentUser = Depends(require_username),
) -> TaskMutationResponse:
    """Create a task owned by the current user."""
    task = task_store.create_task(client, body, created_by=user.username)
    return TaskMutationResponse(
        task=task,
        notification=Notification(title="Task created", description="The new task has been added."),
    )


@router.patch("/{task_id}")
async def api_update_task(
    task_id: str,
    body: TaskUpdate,
    client: Client = Depends(get_supabase),
    user: CurrentUser = Depends(require_username),
) -> TaskMutationResponse:
    """
    Update a task. Sending `comments` replaces the task's comment thread.

    `task` is null in the response when the edit hid the task from the
    requester.
    """
    task = task_store.update_task(client, task_id, body, viewer_of(user))
    description = "Your changes have been saved."
    if task is None:
        description += " The task is no longer visible to you."
    return TaskMutationResponse(
        task=task,
        notification=Notification(title="Task updated", description=description),
    )


@router.delete("/{task_id}")
async def api_delete_task(
    task_id: str,
    client: Client = Depends(get_supabase),
    user: CurrentUser = Depends(require_username),
) -> TaskMutationResponse:
    """Delete a task."""
    task_store.delete_task(client, task_id, viewer_of(user))
    return TaskMutationResponse(
        notification=Notification(title="Task deleted", description="The task has been removed."),
    )


@router.patch("/{task_id}/status")
async def api_update_task_status(
    task_id: str,
    body: StatusUpdate,
    client: Client = Depends(get_supabase),
    user: CurrentUser = Depends(require_username),
) -> TaskMutationResponse:
    """Set a task's status directly."""
    task = task_store.update_task_status(client, task_id, body.status, viewer_of(user))
    return TaskMutationResponse(task=task, notification=_status_changed(task))


@router.post("/{task_id}/advance")
async def api_advance_task(
    task_id: str,
    client: Client = Depends(get_supabase),
    user: CurrentUser = Depends(require_username),
) -> TaskMutationResponse:
    """Move a task to the next status: pending → in-progress → review → completed → pending."""
    task = task_store.advance_task_status(client, task_id, viewer_of(user))
    return TaskMutationResponse(task=task, notification=_status_changed(task))


@router.post("/{task_id}/comments", status_code=201)
async def api_add_comment(
    task_id: str,
    body: CommentCreate,
    client: Client = Depends(get_supabase),
    user: CurrentUser = Depends(require_username),
) -> TaskMutationResponse:
    """Add a comment to a task."""
    viewer = viewer_of(user)
    task_store.add_comment(client, task_id, body, viewer)
    return TaskMutationResponse(
        task=task_store.get_task(client, task_id, viewer),
        notification=Notification(title="Comment added", description="Your comment has been posted."),
    )


@router.delete("/{task_id}/comments/{comment_id}")
async def api_delete_comment(
    task_id: str,
    comment_id: str,
    client: Client = Depends(get_supabase),
    user: CurrentUser = Depends(require_username),
) -> TaskMutationResponse:
    """Delete a comment from a task."""
    viewer = viewer_of(user)
    task_store.delete_comment(client, task_id, comment_id, viewer)
    return TaskMutationResponse(
        task=task_store.get_task(client, task_id, viewer),
        notification=Notification(title="Comment deleted", description="The comment has been removed."),
    )
