"""
Activity Logger

DESIGN DECISION: Every data load, save and failure is logged as a
structured event. This provides:
1. Traceability of what the user changed and when
2. Debugging capability for storage failures
3. Correlation ids to tie the events of one user action together

The logger never raises; a logging problem must not break a save.
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from hometrack.config import get_settings
from hometrack.models.audit import AuditEvent, AuditEventBuilder


def configure_logging(log_level: Optional[str] = None) -> None:
    """Configure structlog (JSON lines on stdout) and the stdlib root level."""
    level = log_level or get_settings().app.log_level
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


class AuditLogger:
    """
    Central activity logging service.

    Events go to the structured local log only.
    """

    def __init__(self, is_guest: bool = False):
        self._is_guest = is_guest
        self._logger = structlog.get_logger("hometrack.audit")
        self.events: list[AuditEvent] = []

    def log(self, event: AuditEvent) -> None:
        """Log an event at the level matching its severity."""
        if self._is_guest:
            event.is_guest = True
        self.events.append(event)

        log_dict = event.to_log_dict()
        try:
            if event.severity.value == "error":
                self._logger.error("audit_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("audit_event", **log_dict)
            elif event.severity.value == "debug":
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Don't raise - logging should not break the main flow
            sys.stderr.write(f"WARNING: Failed to write audit event: {e}\n")

    def log_session_started(self, user_id: Optional[str]) -> None:
        self.log(AuditEventBuilder.session_started(user_id, self._is_guest))

    def log_session_signed_out(self, user_id: Optional[str]) -> None:
        self.log(AuditEventBuilder.session_signed_out(user_id, self._is_guest))

    def log_data_loaded(
        self,
        home_id: Optional[str],
        project_count: int,
        history_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.data_loaded(
            home_id=home_id,
            project_count=project_count,
            history_count=history_count,
            is_guest=self._is_guest,
            correlation_id=correlation_id,
        ))

    def log_data_load_failed(
        self,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.data_load_failed(error_message, correlation_id))

    def log_stale_result(
        self,
        operation: str,
        started_generation: int,
        current_generation: int,
    ) -> None:
        self.log(AuditEventBuilder.stale_result_discarded(
            operation, started_generation, current_generation
        ))

    def log_saved(
        self,
        entity_type: str,
        action: str,
        entity_id: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.entity_saved(
            entity_type=entity_type,
            action=action,
            entity_id=entity_id,
            is_guest=self._is_guest,
            correlation_id=correlation_id,
        ))

    def log_save_failed(
        self,
        entity_type: str,
        action: str,
        error_message: Optional[str],
        entity_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.save_failed(
            entity_type=entity_type,
            action=action,
            error_message=error_message,
            entity_id=entity_id,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g. saving a project form).
    """
    return uuid4()
