"""
Home Models for Home Tracker

One Home per user. HomeHistoryEntry records a finished improvement and is
attached to the Home, not to a Project, so it survives project deletion.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from hometrack.models.project import PhotoType, Project, utc_now


class PropertyType(str, Enum):
    """Kind of property being tracked."""
    SINGLE_FAMILY = "single-family"
    CONDO = "condo"
    TOWNHOUSE = "townhouse"
    MULTI_FAMILY = "multi-family"


class Home(BaseModel):
    """
    The single tracked property of a user.

    Created once on first setup, updated in place, never deleted.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[str] = None
    address: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Street address"
    )
    purchase_date: Optional[datetime] = None
    purchase_price: int = Field(
        ...,
        ge=0,
        description="What the home was bought for"
    )
    current_value: int = Field(
        ...,
        ge=0,
        description="Current estimated market value"
    )
    last_updated: datetime = Field(default_factory=utc_now)

    # Optional descriptors
    bedrooms: Optional[int] = Field(default=None, ge=0)
    bathrooms: Optional[int] = Field(default=None, ge=0)
    square_footage: Optional[int] = Field(default=None, ge=0)
    year_built: Optional[int] = None
    property_type: PropertyType = PropertyType.SINGLE_FAMILY

    photos: list[str] = Field(
        default_factory=list,
        description="Ordered list of photo URLs"
    )


class HomeHistoryEntry(BaseModel):
    """
    A completed improvement.

    Either mirrored from a tracked project (was_tracked_project=True,
    original_project_id set) or entered manually. original_project_id is a
    lookup reference only; the entry does not belong to the project.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[str] = None
    project_name: str = Field(
        ...,
        min_length=1,
        max_length=200,
    )
    completion_date: date
    description: Optional[str] = None
    before_photo: Optional[str] = None
    after_photo: Optional[str] = None
    projected_value: Optional[int] = None
    actual_value: Optional[int] = None
    was_tracked_project: bool = False
    original_project_id: Optional[str] = None

    @property
    def realized_value(self) -> int:
        """Actual value if known, else projected, else 0."""
        return self.actual_value or self.projected_value or 0

    @classmethod
    def from_project(cls, project: Project) -> "HomeHistoryEntry":
        """Mirror a completed tracked project into the home history."""
        completed_at = project.actual_completion_date or project.updated_date
        before = project.photos_of_type(PhotoType.BEFORE)
        after = project.photos_of_type(PhotoType.AFTER)
        return cls(
            project_name=project.name,
            completion_date=completed_at.date(),
            description=project.description,
            before_photo=before[0].url if before else None,
            after_photo=after[0].url if after else None,
            projected_value=project.projected_value,
            actual_value=project.actual_value,
            was_tracked_project=True,
            original_project_id=project.id,
        )
