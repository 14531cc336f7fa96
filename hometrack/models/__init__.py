"""
Data Models Package

This package contains all Pydantic models used in Home Tracker.
All data flowing through the system must conform to these schemas.
"""

from hometrack.models.project import (
    Contractor,
    Estimate,
    Photo,
    PhotoType,
    Project,
    ProjectStatus,
    Receipt,
    Task,
    TaskStatus,
)
from hometrack.models.home import (
    Home,
    HomeHistoryEntry,
    PropertyType,
)
from hometrack.models.result import (
    ResultStatus,
    StorageResult,
)
from hometrack.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Project models
    "Contractor",
    "Estimate",
    "Photo",
    "PhotoType",
    "Project",
    "ProjectStatus",
    "Receipt",
    "Task",
    "TaskStatus",
    # Home models
    "Home",
    "HomeHistoryEntry",
    "PropertyType",
    # Storage results
    "ResultStatus",
    "StorageResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
