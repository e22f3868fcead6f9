"""Tests for the task filter pipeline."""

from __future__ import annotations

from datetime import date

import pytest

from taskboard.filters import active_filter_count, compute_stats, filter_tasks, list_projects
from taskboard.types import Task, TaskFilters, TaskPriority, TaskPrivacy, TaskStats, TaskStatus


@pytest.fixture
def tasks() -> list[Task]:
    return [
        Task(
            id="1",
            name="Landing page",
            description="Hero section copy",
            status=TaskStatus.PENDING,
            priority=TaskPriority.HIGH,
            responsible="Ivo",
            due_date=date(2025, 3, 10),
            project="Website",
        ),
        Task(
            id="2",
            name="Quarterly budget",
            description="Collect figures from the bank",
            status=TaskStatus.IN_PROGRESS,
            priority=TaskPriority.MEDIUM,
            responsible="Enzo",
            due_date=date(2025, 4, 2),
            project="Finance",
            privacy=TaskPrivacy.PRIVATE,
        ),
        Task(
            id="3",
            name="Fix footer links",
            description="",
            status=TaskStatus.COMPLETED,
            priority=TaskPriority.LOW,
            responsible="Mirella",
            project="Website",
        ),
        Task(
            id="4",
            name="Call the accountant",
            description="About the website invoice",
            status=TaskStatus.REVIEW,
            priority=TaskPriority.HIGH,
            responsible="Ivo",
            due_date=date(2025, 3, 28),
        ),
    ]


def ids(tasks: list[Task]) -> list[str]:
    return [t.id for t in tasks]


class TestFilterTasks:
    def test_no_criteria_returns_input_unchanged(self, tasks: list[Task]) -> None:
        assert filter_tasks(tasks, TaskFilters()) == tasks
        assert filter_tasks(tasks) == tasks

    def test_contradictory_criteria_return_empty(self, tasks: list[Task]) -> None:
        filters = TaskFilters(status=[TaskStatus.COMPLETED], responsible=["Enzo"])
        assert filter_tasks(tasks, filters) == []

    def test_search_is_case_insensitive_over_name_description_project(self, tasks: list[Task]) -> None:
        assert ids(filter_tasks(tasks, TaskFilters(search="WEBSITE"))) == ["1", "3", "4"]
        assert ids(filter_tasks(tasks, TaskFilters(search="bank"))) == ["2"]
        assert ids(filter_tasks(tasks, TaskFilters(search="footer"))) == ["3"]

    def test_status_membership(self, tasks: list[Task]) -> None:
        filters = TaskFilters(status=[TaskStatus.PENDING, TaskStatus.IN_PROGRESS])
        assert ids(filter_tasks(tasks, filters)) == ["1", "2"]

    def test_responsible_priority_project_privacy(self, tasks: list[Task]) -> None:
        assert ids(filter_tasks(tasks, TaskFilters(responsible=["Ivo"]))) == ["1", "4"]
        assert ids(filter_tasks(tasks, TaskFilters(priority=[TaskPriority.HIGH]))) == ["1", "4"]
        assert ids(filter_tasks(tasks, TaskFilters(project=["Website"]))) == ["1", "3"]
        assert ids(filter_tasks(tasks, TaskFilters(privacy=[TaskPrivacy.PRIVATE]))) == ["2"]

    def test_month_prefix_skips_tasks_without_due_date(self, tasks: list[Task]) -> None:
        assert ids(filter_tasks(tasks, TaskFilters(month="2025-03"))) == ["1", "4"]
        assert filter_tasks(tasks, TaskFilters(month="2024-03")) == []

    def test_criteria_are_combined_with_and(self, tasks: list[Task]) -> None:
        filters = TaskFilters(search="website", responsible=["Ivo"], month="2025-03", priority=[TaskPriority.HIGH])
        assert ids(filter_tasks(tasks, filters)) == ["1", "4"]
        filters = TaskFilters(search="invoice", status=[TaskStatus.PENDING])
        assert filter_tasks(tasks, filters) == []

    def test_empty_lists_mean_no_criterion(self, tasks: list[Task]) -> None:
        filters = TaskFilters(status=[], responsible=[], month="")
        assert filters.status is None and filters.responsible is None and filters.month is None
        assert filter_tasks(tasks, filters) == tasks


class TestDerivedViews:
    def test_active_filter_count_ignores_search(self) -> None:
        assert active_filter_count(TaskFilters(search="x")) == 0
        assert active_filter_count(TaskFilters(status=[TaskStatus.PENDING], month="2025-01")) == 2

    def test_list_projects_distinct_in_first_seen_order(self, tasks: list[Task]) -> None:
        assert list_projects(tasks) == ["Website", "Finance"]

    def test_compute_stats(self, tasks: list[Task]) -> None:
        assert compute_stats(tasks) == TaskStats(total=4, pending=1, in_progress=1, review=1, completed=1)
        assert compute_stats([]) == TaskStats()
