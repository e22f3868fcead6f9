"""Status workflow: the fixed cycle tasks move through with the "next" action."""

from __future__ import annotations

from taskboard.types import TaskStatus

STATUS_CYCLE: tuple[TaskStatus, ...] = (
    TaskStatus.PENDING,
    TaskStatus.IN_PROGRESS,
    TaskStatus.REVIEW,
    TaskStatus.COMPLETED,
)

STATUS_LABELS: dict[TaskStatus, str] = {
    TaskStatus.PENDING: "Pending",
    TaskStatus.IN_PROGRESS: "In progress",
    TaskStatus.REVIEW: "In review",
    TaskStatus.COMPLETED: "Completed",
}


def next_status(status: TaskStatus | str) -> TaskStatus:
    """Return the status after `status`; completed wraps back to pending."""
    current = TaskStatus(status)
    return STATUS_CYCLE[(STATUS_CYCLE.index(current) + 1) % len(STATUS_CYCLE)]
