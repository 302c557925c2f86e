"""
Session Event Logger

DESIGN DECISION: Every action that touches the records or an AI service
is logged. This provides:
1. Traceability of one upload from request to appended records
2. Debugging capability when the AI service misbehaves
3. A session trail the UI can show

The logger:
- Writes structured JSON lines through structlog
- Keeps the session's events in memory (nothing is persisted)
- Supports correlation IDs to trace related events
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from smartspend.models.audit import SessionEvent, SessionEventBuilder


_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
    structlog.processors.JSONRenderer(),
]


def configure_logging(level: str = "INFO") -> None:
    """
    Route structlog through stdlib logging at the given level.

    Called once by each entry point (Streamlit app, API).
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )
    structlog.configure(
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Configure structlog for local logging
structlog.configure(
    processors=_PROCESSORS,
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class SessionEventLogger:
    """
    Central session event log.

    Logs events both to:
    1. Structured local log (for debugging)
    2. The in-memory session trail (for the UI)
    """

    def __init__(self, max_events: int = 500):
        """
        Args:
            max_events: Oldest events are dropped past this many.
        """
        self._events: list[SessionEvent] = []
        self._max_events = max_events
        self._logger = structlog.get_logger("smartspend.session")

    @property
    def events(self) -> list[SessionEvent]:
        """Recorded events, oldest first."""
        return list(self._events)

    def log(self, event: SessionEvent) -> None:
        """Log an event locally and append it to the session trail."""
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("session_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("session_event", **log_dict)
        else:
            self._logger.info("session_event", **log_dict)

        self._events.append(event)
        if len(self._events) > self._max_events:
            del self._events[: len(self._events) - self._max_events]

    def events_for(self, correlation_id: UUID) -> list[SessionEvent]:
        """All events of one user action, oldest first."""
        return [e for e in self._events if e.correlation_id == correlation_id]

    def log_extraction_requested(self, image_count: int, correlation_id: UUID) -> None:
        self.log(SessionEventBuilder.extraction_requested(image_count, correlation_id))

    def log_extraction_completed(self, record_count: int, correlation_id: UUID) -> None:
        self.log(SessionEventBuilder.extraction_completed(record_count, correlation_id))

    def log_extraction_failed(self, error_message: str, correlation_id: UUID) -> None:
        self.log(SessionEventBuilder.extraction_failed(error_message, correlation_id))

    def log_upload_rejected(self, reason: str, correlation_id: UUID) -> None:
        self.log(SessionEventBuilder.upload_rejected(reason, correlation_id))

    def log_records_appended(
        self,
        added: int,
        store_size: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(SessionEventBuilder.records_appended(added, store_size, correlation_id))

    def log_store_cleared(self, discarded: int) -> None:
        self.log(SessionEventBuilder.store_cleared(discarded))

    def log_csv_exported(self, record_count: int, filename: str) -> None:
        self.log(SessionEventBuilder.csv_exported(record_count, filename))

    def log_advisory_completed(
        self,
        operation: str,
        record_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(SessionEventBuilder.advisory_completed(operation, record_count, correlation_id))

    def log_advisory_failed(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(SessionEventBuilder.advisory_failed(operation, error_message, correlation_id))

    def log_configuration_error(
        self,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(SessionEventBuilder.configuration_error(error_message, correlation_id))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., one upload).
    """
    return uuid4()
