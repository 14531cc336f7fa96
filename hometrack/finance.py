"""
Financial summaries for the dashboard and history screens.

Missing monetary values always count as 0. All amounts are whole dollars.
"""

from typing import Optional

from pydantic import BaseModel, Field

from hometrack.models.home import Home, HomeHistoryEntry
from hometrack.models.project import Project, ProjectStatus


def project_progress(project: Project) -> float:
    """Completed tasks as a percentage of all tasks; 0 when there are none."""
    if not project.tasks:
        return 0.0
    return project.completed_task_count / len(project.tasks) * 100


def projected_value_increase(projects: list[Project]) -> int:
    """Expected value from work that is planned or under way."""
    return sum(p.projected_value or 0 for p in projects if p.is_active)


def _realized(actual: Optional[int], projected: Optional[int]) -> int:
    return actual or projected or 0


def actual_value_added(
    projects: list[Project],
    history: list[HomeHistoryEntry],
) -> int:
    """Value from finished work: completed projects plus every history entry."""
    from_projects = sum(
        _realized(p.actual_value, p.projected_value)
        for p in projects
        if p.status == ProjectStatus.COMPLETED
    )
    return from_projects + history_value_added(history)


def projected_home_value(home: Home, projects: list[Project]) -> int:
    return home.current_value + projected_value_increase(projects)


def total_value_gain(
    home: Home,
    projects: list[Project],
    history: list[HomeHistoryEntry],
) -> int:
    """Current value plus value added by improvements, less what was paid."""
    return home.current_value + actual_value_added(projects, history) - home.purchase_price


def history_value_added(history: list[HomeHistoryEntry]) -> int:
    return sum(_realized(e.actual_value, e.projected_value) for e in history)


def average_value_per_improvement(history: list[HomeHistoryEntry]) -> float:
    if not history:
        return 0.0
    return history_value_added(history) / len(history)


def total_spent(project: Project) -> int:
    return sum(r.amount for r in project.receipts)


def format_currency(amount: float) -> str:
    """US dollars with thousands separators and no cents: 45000 -> "$45,000"."""
    rounded = round(amount)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,}"


class HomeSummary(BaseModel):
    """Numbers shown on the home dashboard."""

    current_value: int
    purchase_price: int
    projected_value_increase: int
    projected_home_value: int
    actual_value_added: int
    total_value_gain: int
    active_project_count: int = Field(default=0, ge=0)
    completed_improvement_count: int = Field(default=0, ge=0)

    @classmethod
    def build(
        cls,
        home: Home,
        projects: list[Project],
        history: list[HomeHistoryEntry],
    ) -> "HomeSummary":
        return cls(
            current_value=home.current_value,
            purchase_price=home.purchase_price,
            projected_value_increase=projected_value_increase(projects),
            projected_home_value=projected_home_value(home, projects),
            actual_value_added=actual_value_added(projects, history),
            total_value_gain=total_value_gain(home, projects, history),
            active_project_count=sum(1 for p in projects if p.is_active),
            completed_improvement_count=len(history),
        )
