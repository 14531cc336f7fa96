"""
Activity Models for Home Tracker

Significant actions (data loads, saves, failures, sign-out) are recorded as
structured events. They are written to the local structured log; they are
not persisted to the user's storage.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we record."""
    # Session
    SESSION_STARTED = "session_started"
    SESSION_SIGNED_OUT = "session_signed_out"
    DATA_LOADED = "data_loaded"
    DATA_LOAD_FAILED = "data_load_failed"
    STALE_RESULT_DISCARDED = "stale_result_discarded"

    # Home
    HOME_CREATED = "home_created"
    HOME_UPDATED = "home_updated"

    # Projects
    PROJECT_CREATED = "project_created"
    PROJECT_UPDATED = "project_updated"
    PROJECT_DELETED = "project_deleted"

    # History
    HISTORY_ENTRY_CREATED = "history_entry_created"
    HISTORY_ENTRY_UPDATED = "history_entry_updated"

    # Failures
    SAVE_FAILED = "save_failed"


class AuditSeverity(str, Enum):
    """Severity level for events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single recorded event."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What entity is this about? Ids are opaque strings.
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'home', 'project', 'history_entry')"
    )
    entity_id: Optional[str] = None

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Ties together events from one user action"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    is_guest: bool = Field(
        default=False,
        description="Event happened in a demo session"
    )

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_guest": self.is_guest,
        }


# Maps (entity_type, action) to the event type for successful saves.
_SAVE_EVENTS = {
    ("home", "create"): AuditEventType.HOME_CREATED,
    ("home", "update"): AuditEventType.HOME_UPDATED,
    ("project", "create"): AuditEventType.PROJECT_CREATED,
    ("project", "update"): AuditEventType.PROJECT_UPDATED,
    ("project", "delete"): AuditEventType.PROJECT_DELETED,
    ("history_entry", "create"): AuditEventType.HISTORY_ENTRY_CREATED,
    ("history_entry", "update"): AuditEventType.HISTORY_ENTRY_UPDATED,
}


class AuditEventBuilder:
    """
    Helper class to build events with common patterns.

    Usage:
        event = AuditEventBuilder.entity_saved("project", "create", project.id)
        event = AuditEventBuilder.save_failed("project", "update", error)
    """

    @staticmethod
    def session_started(
        user_id: Optional[str],
        is_guest: bool,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_STARTED,
            entity_type="user",
            entity_id=user_id,
            description="Guest session started" if is_guest else "Session started",
            is_guest=is_guest,
        )

    @staticmethod
    def session_signed_out(
        user_id: Optional[str],
        is_guest: bool,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_SIGNED_OUT,
            entity_type="user",
            entity_id=user_id,
            description="Session signed out",
            is_guest=is_guest,
        )

    @staticmethod
    def data_loaded(
        home_id: Optional[str],
        project_count: int,
        history_count: int,
        is_guest: bool,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_LOADED,
            entity_type="home",
            entity_id=home_id,
            correlation_id=correlation_id,
            description=(
                f"Loaded {project_count} projects and {history_count} history entries"
                if home_id else "No home found for user"
            ),
            details={
                "project_count": project_count,
                "history_count": history_count,
            },
            is_guest=is_guest,
        )

    @staticmethod
    def data_load_failed(
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description="Failed to load user data",
            error_message=error_message,
        )

    @staticmethod
    def stale_result_discarded(
        operation: str,
        started_generation: int,
        current_generation: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STALE_RESULT_DISCARDED,
            severity=AuditSeverity.DEBUG,
            description=f"Discarded result of {operation} from an older session state",
            details={
                "operation": operation,
                "started_generation": started_generation,
                "current_generation": current_generation,
            },
        )

    @staticmethod
    def entity_saved(
        entity_type: str,
        action: str,
        entity_id: Optional[str],
        is_guest: bool = False,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=_SAVE_EVENTS[(entity_type, action)],
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"{entity_type.replace('_', ' ').capitalize()} {action}d",
            is_guest=is_guest,
        )

    @staticmethod
    def save_failed(
        entity_type: str,
        action: str,
        error_message: Optional[str],
        entity_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"Failed to {action} {entity_type.replace('_', ' ')}",
            details={"action": action},
            error_message=error_message,
        )

