"""Filter pipeline and derived views over a list of tasks.

All functions are pure: they never touch the network or the cache.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from taskboard.types import Task, TaskFilters, TaskStats, TaskStatus

_SET_CRITERIA = ("status", "responsible", "priority", "project", "privacy")


def _matches_search(task: Task, search: str) -> bool:
    needle = search.lower()
    return needle in task.name.lower() or needle in task.description.lower() or needle in task.project.lower()


def _matches_month(task: Task, month: str) -> bool:
    # Tasks without a due date never match a month filter
    return task.due_date is not None and task.due_date.isoformat().startswith(month)


def matches_filters(task: Task, filters: TaskFilters) -> bool:
    """Return True if `task` satisfies every criterion set in `filters`."""
    if filters.search and not _matches_search(task, filters.search):
        return False
    for criterion in _SET_CRITERIA:
        allowed = getattr(filters, criterion)
        if allowed is not None and getattr(task, criterion) not in allowed:
            return False
    if filters.month and not _matches_month(task, filters.month):
        return False
    return True


def filter_tasks(tasks: Sequence[Task], filters: TaskFilters | None = None) -> list[Task]:
    """Return the tasks matching all criteria, in their original order."""
    if filters is None:
        return list(tasks)
    return [task for task in tasks if matches_filters(task, filters)]


def active_filter_count(filters: TaskFilters) -> int:
    """Number of criteria set, not counting the free-text search."""
    count = sum(1 for criterion in _SET_CRITERIA if getattr(filters, criterion) is not None)
    return count + (1 if filters.month else 0)


def list_projects(tasks: Iterable[Task]) -> list[str]:
    """Distinct non-empty project names in first-seen order."""
    return list(dict.fromkeys(task.project for task in tasks if task.project))


def compute_stats(tasks: Sequence[Task]) -> TaskStats:
    counts = {status: 0 for status in TaskStatus}
    for task in tasks:
        counts[task.status] += 1
    return TaskStats(
        total=len(tasks),
        pending=counts[TaskStatus.PENDING],
        in_progress=counts[TaskStatus.IN_PROGRESS],
        review=counts[TaskStatus.REVIEW],
        completed=counts[TaskStatus.COMPLETED],
    )
