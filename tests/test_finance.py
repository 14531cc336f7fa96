"""Tests for the financial summaries."""

from datetime import date

import pytest

from hometrack.finance import (
    HomeSummary,
    actual_value_added,
    average_value_per_improvement,
    format_currency,
    history_value_added,
    project_progress,
    projected_home_value,
    projected_value_increase,
    total_spent,
    total_value_gain,
)
from hometrack.models import (
    Home,
    HomeHistoryEntry,
    Project,
    ProjectStatus,
    Receipt,
    Task,
    TaskStatus,
)
from hometrack.services.storage.sample_data import (
    sample_home,
    sample_home_history,
    sample_projects,
)


def _tasks(completed: int, total: int) -> list[Task]:
    return [
        Task(name=f"Task {i}", status=TaskStatus.COMPLETED if i < completed else TaskStatus.PENDING)
        for i in range(total)
    ]


class TestProgress:

    def test_two_of_five_is_forty_percent(self):
        project = Project(name="Kitchen", budget=45000, tasks=_tasks(2, 5))
        assert project_progress(project) == 40.0

    def test_no_tasks_is_zero(self):
        assert project_progress(Project(name="Empty", budget=0)) == 0.0

    def test_sample_kitchen(self):
        assert project_progress(sample_projects()[0]) == 40.0


class TestValueSummaries:

    def test_projected_increase_counts_active_only(self):
        projects = [
            Project(name="a", budget=0, status=ProjectStatus.PLANNING, projected_value=1000),
            Project(name="b", budget=0, status=ProjectStatus.IN_PROGRESS, projected_value=2000),
            Project(name="c", budget=0, status=ProjectStatus.ON_HOLD, projected_value=4000),
            Project(name="d", budget=0, status=ProjectStatus.COMPLETED, projected_value=8000),
            Project(name="e", budget=0, status=ProjectStatus.PLANNING),
        ]
        assert projected_value_increase(projects) == 3000

    def test_actual_value_prefers_actual_then_projected(self):
        projects = [
            Project(name="a", budget=0, status=ProjectStatus.COMPLETED,
                    projected_value=1000, actual_value=1500),
            Project(name="b", budget=0, status=ProjectStatus.COMPLETED, projected_value=700),
            Project(name="c", budget=0, status=ProjectStatus.COMPLETED),
            Project(name="d", budget=0, status=ProjectStatus.IN_PROGRESS, actual_value=9999),
        ]
        history = [HomeHistoryEntry(project_name="h", completion_date=date(2023, 1, 1))]
        assert actual_value_added(projects, history) == 2200

    def test_sample_value_gain(self):
        """625000 + (18000 + 7500) - 485000 = 165500."""
        gain = total_value_gain(sample_home(), sample_projects(), sample_home_history())
        assert gain == 165500

    def test_projected_home_value(self):
        assert projected_home_value(sample_home(), sample_projects()) == 715000

    def test_history_totals(self):
        history = sample_home_history()
        assert history_value_added(history) == 25500
        assert average_value_per_improvement(history) == 12750

    def test_average_of_empty_history_is_zero(self):
        assert average_value_per_improvement([]) == 0

    def test_total_spent(self):
        project = Project(
            name="x", budget=0,
            receipts=[Receipt(vendor="a", amount=450), Receipt(vendor="b", amount=2800)],
        )
        assert total_spent(project) == 3250

    def test_home_summary(self):
        summary = HomeSummary.build(sample_home(), sample_projects(), sample_home_history())
        assert summary.total_value_gain == 165500
        assert summary.active_project_count == 2
        assert summary.completed_improvement_count == 2

    def test_loss_is_negative(self):
        home = Home(address="1 Main", purchase_price=500000, current_value=450000)
        assert total_value_gain(home, [], []) == -50000


class TestFormatCurrency:

    @pytest.mark.parametrize("amount,expected", [
        (45000, "$45,000"),
        (0, "$0"),
        (-1200, "-$1,200"),
        (1234567, "$1,234,567"),
        (12750.4, "$12,750"),
    ])
    def test_format(self, amount, expected):
        assert format_currency(amount) == expected
