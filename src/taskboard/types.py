"""Pydantic models shared by the Taskboard library and API."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskStatus(str, Enum):
    """Workflow status of a task."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    REVIEW = "review"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskPrivacy(str, Enum):
    """Who may see a task: everybody, or only its audience."""

    PRIVATE = "private"
    GENERAL = "general"


def _require_text(value: str, field: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{field} must not be blank")
    return value


def _unique_usernames(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(v.strip() for v in values if v and v.strip()))


class Comment(BaseModel):
    """A comment on a task (row of task_comments)."""

    id: str
    text: str
    date: datetime

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Comment:
        return cls(id=str(row["id"]), text=row["text"], date=row["date"])


class CommentCreate(BaseModel):
    """Request model for adding a comment."""

    text: str
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        return _require_text(v, "text")

    def to_row(self, task_id: str) -> dict[str, Any]:
        return {"task_id": task_id, "text": self.text, "date": self.date.isoformat()}


class Task(BaseModel):
    """A task with its comment thread attached."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    responsible: str = ""
    due_date: date | None = None
    project: str = ""
    privacy: TaskPrivacy = TaskPrivacy.GENERAL
    shared_with: list[str] = Field(default_factory=list)
    created_by: str = ""
    comments: list[Comment] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any], comments: Iterable[Comment] = ()) -> Task:
        """Build a task from a `tasks` row; nullable text columns become empty strings."""
        shared = row.get("shared_with")
        return cls(
            id=str(row["id"]),
            name=row["name"],
            description=row.get("description") or "",
            status=row.get("status") or TaskStatus.PENDING,
            priority=row.get("priority") or TaskPriority.MEDIUM,
            responsible=row.get("responsible") or "",
            due_date=row.get("due_date"),
            project=row.get("project") or "",
            privacy=row.get("privacy") or TaskPrivacy.GENERAL,
            shared_with=shared if isinstance(shared, list) else [],
            created_by=row.get("created_by") or "",
            comments=list(comments),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


class TaskCreate(BaseModel):
    """Request model for creating a task."""

    name: str
    description: str
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    responsible: str
    due_date: date | None = None
    project: str = ""
    privacy: TaskPrivacy = TaskPrivacy.GENERAL
    shared_with: list[str] = Field(default_factory=list)
    comments: list[CommentCreate] = Field(default_factory=list)

    @field_validator("name", "description")
    @classmethod
    def validate_required_text(cls, v: str, info) -> str:
        return _require_text(v, info.field_name)

    @field_validator("shared_with")
    @classmethod
    def validate_shared_with(cls, v: list[str]) -> list[str]:
        return _unique_usernames(v)

    def to_row(self, created_by: str) -> dict[str, Any]:
        row = self.model_dump(mode="json", exclude={"comments"})
        row["project"] = self.project.strip()
        row["created_by"] = created_by
        return row


class TaskUpdate(BaseModel):
    """Request model for editing a task. Only fields that are sent are written.

    `comments`, when sent, replaces the whole comment thread.
    """

    name: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    responsible: str | None = None
    due_date: date | None = None
    project: str | None = None
    privacy: TaskPrivacy | None = None
    shared_with: list[str] | None = None
    comments: list[CommentCreate] | None = None

    @field_validator("name", "description")
    @classmethod
    def validate_required_text(cls, v: str | None, info) -> str | None:
        return None if v is None else _require_text(v, info.field_name)

    @field_validator("shared_with")
    @classmethod
    def validate_shared_with(cls, v: list[str] | None) -> list[str] | None:
        return None if v is None else _unique_usernames(v)

    def to_row(self) -> dict[str, Any]:
        row = self.model_dump(mode="json", exclude_unset=True, exclude={"comments"})
        # due_date is the only nullable column; an explicit null clears it
        return {k: v for k, v in row.items() if v is not None or k == "due_date"}


class StatusUpdate(BaseModel):
    status: TaskStatus


class TaskFilters(BaseModel):
    """Filter criteria for the task list. Unset criteria match everything."""

    search: str = ""
    status: list[TaskStatus] | None = None
    responsible: list[str] | None = None
    priority: list[TaskPriority] | None = None
    project: list[str] | None = None
    privacy: list[TaskPrivacy] | None = None
    month: str | None = Field(default=None, pattern=r"^\d{4}-\d{2}$", description="Due month as YYYY-MM")

    @field_validator("status", "responsible", "priority", "project", "privacy", mode="before")
    @classmethod
    def empty_list_is_unset(cls, v: Any) -> Any:
        return v or None

    @field_validator("month", mode="before")
    @classmethod
    def empty_month_is_unset(cls, v: Any) -> Any:
        return v or None


class TaskStats(BaseModel):
    total: int = 0
    pending: int = 0
    in_progress: int = 0
    review: int = 0
    completed: int = 0


class Notification(BaseModel):
    """Short message for the user about the outcome of an action."""

    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"


class TaskListResponse(BaseModel):
    """Response model for the filtered task list."""

    tasks: list[Task]
    total: int
    stats: TaskStats
    projects: list[str]
    active_filters: int


class TaskMutationResponse(BaseModel):
    """Response model for create/update/status/comment operations."""

    task: Task | None = None
    notification: Notification


class User(BaseModel):
    """A row of the users table."""

    id: str
    email: str
    username: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> User:
        return cls(
            id=str(row["id"]),
            email=row["email"],
            username=row["username"],
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


class CurrentUser(BaseModel):
    """The authenticated requester."""

    id: str
    email: str | None = None
    username: str = ""


class AuthSignUpRequest(BaseModel):
    """Request model for sign up."""

    email: str
    password: str
    username: str | None = None
    metadata: dict = Field(default_factory=dict)


class AuthSignInRequest(BaseModel):
    """Request model for sign in."""

    email: str
    password: str


class AuthResponse(BaseModel):
    """Response model for auth operations."""

    user_id: str | None = None
    email: str | None = None
    username: str | None = None
    access_token: str | None = None
    refresh_token: str | None = None
    expires_at: int | None = None
