"""
Project Models for Home Tracker

A Project is a renovation effort attached to one Home. It exclusively owns
six child collections (tasks, photos, notes, estimates, receipts,
contractors); deleting a project deletes all of them.

Monetary values are whole currency units (int). Optional monetary fields
stay None in memory; aggregations treat None as 0 (see hometrack.finance).
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================

class ProjectStatus(str, Enum):
    """Lifecycle of a renovation project."""
    PLANNING = "planning"
    IN_PROGRESS = "in-progress"
    ON_HOLD = "on-hold"
    COMPLETED = "completed"


class TaskStatus(str, Enum):
    """Status of a single task within a project."""
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class PhotoType(str, Enum):
    """What a project photo documents."""
    INSPIRATIONAL = "inspirational"
    DOCUMENTARY = "documentary"
    BEFORE = "before"
    AFTER = "after"

    @property
    def label(self) -> str:
        """Short label used by the gallery tabs."""
        return {
            PhotoType.INSPIRATIONAL: "Ideas",
            PhotoType.DOCUMENTARY: "Progress",
            PhotoType.BEFORE: "Before",
            PhotoType.AFTER: "After",
        }[self]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# CHILD ENTITIES
# =============================================================================

class Task(BaseModel):
    """
    A unit of work inside a project.

    completed_date is set exactly when the status becomes COMPLETED and
    cleared for any other status. Use with_status() to change status so
    the rule is applied.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[str] = None
    name: str = Field(
        ...,
        min_length=1,
        description="Task name"
    )
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    assigned_to: Optional[str] = Field(
        default=None,
        description="Person or company doing the work"
    )
    due_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None

    def with_status(
        self,
        status: TaskStatus,
        now: Optional[datetime] = None,
    ) -> "Task":
        """Return a copy with the new status and completed_date rule applied."""
        completed_date = None
        if status == TaskStatus.COMPLETED:
            completed_date = now or utc_now()
        return self.model_copy(
            update={"status": status, "completed_date": completed_date}
        )


class Photo(BaseModel):
    """A project photo. Storage is just the URL."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[str] = None
    url: str = Field(..., min_length=1)
    type: PhotoType = PhotoType.DOCUMENTARY
    caption: Optional[str] = None
    uploaded_date: datetime = Field(default_factory=utc_now)


class Estimate(BaseModel):
    """
    A contractor's quote for (part of) a project.

    `selected` is a plain flag. Several estimates on one project may be
    selected at the same time; nothing enforces single selection.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[str] = None
    contractor: str = Field(..., min_length=1)
    amount: int = Field(..., ge=0)
    description: str = ""
    date: Optional[datetime] = None
    selected: Optional[bool] = None


class Receipt(BaseModel):
    """Money actually spent on a project."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[str] = None
    vendor: str = Field(..., min_length=1)
    amount: int = Field(..., ge=0)
    category: str = ""
    date: Optional[datetime] = None
    image_url: Optional[str] = None


class Contractor(BaseModel):
    """
    A contractor working on a project.

    rating is intended to be 1-5 but is only checked by the database.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[str] = None
    name: str = Field(..., min_length=1)
    company: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    specialty: str = ""
    rating: Optional[int] = None


# =============================================================================
# PROJECT
# =============================================================================

class Project(BaseModel):
    """
    A renovation or improvement project with its child collections.

    id is None for a project that has not been stored yet.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[str] = None
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Project name"
    )
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.PLANNING

    # Schedule
    target_start_date: Optional[datetime] = None
    estimated_completion_date: Optional[datetime] = None
    actual_completion_date: Optional[datetime] = None

    # Money
    budget: int = Field(
        ...,
        ge=0,
        description="Planned spend"
    )
    actual_cost: Optional[int] = None
    projected_value: Optional[int] = Field(
        default=None,
        description="Estimated increase in home value"
    )
    actual_value: Optional[int] = Field(
        default=None,
        description="Realized increase in home value"
    )

    created_date: datetime = Field(default_factory=utc_now)
    updated_date: datetime = Field(default_factory=utc_now)

    # Owned child collections
    tasks: list[Task] = Field(default_factory=list)
    photos: list[Photo] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)
    estimates: list[Estimate] = Field(default_factory=list)
    receipts: list[Receipt] = Field(default_factory=list)
    contractors: list[Contractor] = Field(default_factory=list)

    @property
    def is_active(self) -> bool:
        """Planning or in progress; these count toward projected value."""
        return self.status in (ProjectStatus.PLANNING, ProjectStatus.IN_PROGRESS)

    @property
    def completed_task_count(self) -> int:
        return sum(1 for task in self.tasks if task.status == TaskStatus.COMPLETED)

    def tasks_by_status(self) -> dict[TaskStatus, list[Task]]:
        """Group tasks into pending / in-progress / completed columns."""
        grouped = {status: [] for status in TaskStatus}
        for task in self.tasks:
            grouped[task.status].append(task)
        return grouped

    def photos_of_type(self, photo_type: PhotoType) -> list[Photo]:
        return [photo for photo in self.photos if photo.type == photo_type]

    def selected_estimates(self) -> list[Estimate]:
        return [estimate for estimate in self.estimates if estimate.selected]

    def find_task(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    # The helpers below return a modified copy; save it to persist the change.

    def with_task_status(
        self,
        task_id: str,
        status: TaskStatus,
        now: Optional[datetime] = None,
    ) -> "Project":
        tasks = [
            task.with_status(status, now) if task.id == task_id else task
            for task in self.tasks
        ]
        return self.model_copy(update={"tasks": tasks})

    def without_task(self, task_id: str) -> "Project":
        return self.model_copy(
            update={"tasks": [task for task in self.tasks if task.id != task_id]}
        )

    def with_photo(self, photo: Photo) -> "Project":
        return self.model_copy(update={"photos": self.photos + [photo]})

    def without_photo(self, photo_id: str) -> "Project":
        return self.model_copy(
            update={"photos": [photo for photo in self.photos if photo.id != photo_id]}
        )
