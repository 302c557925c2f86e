"""
Session Event Models for SmartSpend

Every user action that touches the record store or an AI service is
logged as a SessionEvent. This provides:
1. A readable trail of what happened in the session
2. Debugging information when an AI call fails
3. Correlation between the steps of one upload

DESIGN DECISION: Events live only for the session, like the records.
They are written to the structured log and kept in memory; nothing is
persisted.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class SessionEventType(str, Enum):
    """Types of events we record."""
    # Extraction
    EXTRACTION_REQUESTED = "extraction_requested"
    EXTRACTION_COMPLETED = "extraction_completed"
    EXTRACTION_FAILED = "extraction_failed"
    UPLOAD_REJECTED = "upload_rejected"

    # Record store
    RECORDS_APPENDED = "records_appended"
    STORE_CLEARED = "store_cleared"
    CSV_EXPORTED = "csv_exported"

    # Advisory
    INSIGHTS_GENERATED = "insights_generated"
    CHAT_ANSWERED = "chat_answered"
    ADVISORY_FAILED = "advisory_failed"

    # System events
    CONFIGURATION_ERROR = "configuration_error"


class EventSeverity(str, Enum):
    """Severity level for session events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class SessionEvent(BaseModel):
    """A single session event."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    event_type: SessionEventType
    severity: EventSeverity = EventSeverity.INFO

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Links the events of one user action (e.g. one upload)"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered directly by the user?"
    )

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class SessionEventBuilder:
    """
    Helper class to build session events with common patterns.

    Usage:
        event = SessionEventBuilder.extraction_requested(3, correlation_id)
        event = SessionEventBuilder.store_cleared(12)
    """

    @staticmethod
    def extraction_requested(
        image_count: int,
        correlation_id: UUID
    ) -> SessionEvent:
        return SessionEvent(
            event_type=SessionEventType.EXTRACTION_REQUESTED,
            correlation_id=correlation_id,
            description=f"Extraction requested for {image_count} image(s)",
            details={"image_count": image_count},
            is_user_action=True,
        )

    @staticmethod
    def extraction_completed(
        record_count: int,
        correlation_id: UUID
    ) -> SessionEvent:
        return SessionEvent(
            event_type=SessionEventType.EXTRACTION_COMPLETED,
            correlation_id=correlation_id,
            description=f"Extraction returned {record_count} record(s)",
            details={"record_count": record_count},
        )

    @staticmethod
    def extraction_failed(
        error_message: str,
        correlation_id: UUID
    ) -> SessionEvent:
        return SessionEvent(
            event_type=SessionEventType.EXTRACTION_FAILED,
            severity=EventSeverity.ERROR,
            correlation_id=correlation_id,
            description="Extraction failed",
            error_message=error_message,
        )

    @staticmethod
    def upload_rejected(
        reason: str,
        correlation_id: UUID
    ) -> SessionEvent:
        return SessionEvent(
            event_type=SessionEventType.UPLOAD_REJECTED,
            severity=EventSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Upload rejected: {reason}",
            details={"reason": reason},
            is_user_action=True,
        )

    @staticmethod
    def records_appended(
        added: int,
        store_size: int,
        correlation_id: Optional[UUID] = None
    ) -> SessionEvent:
        return SessionEvent(
            event_type=SessionEventType.RECORDS_APPENDED,
            correlation_id=correlation_id,
            description=f"{added} record(s) appended, store now holds {store_size}",
            details={"added": added, "store_size": store_size},
        )

    @staticmethod
    def store_cleared(discarded: int) -> SessionEvent:
        return SessionEvent(
            event_type=SessionEventType.STORE_CLEARED,
            severity=EventSeverity.WARNING,
            description=f"Record store cleared ({discarded} record(s) discarded)",
            details={"discarded": discarded},
            is_user_action=True,
        )

    @staticmethod
    def csv_exported(
        record_count: int,
        filename: str
    ) -> SessionEvent:
        return SessionEvent(
            event_type=SessionEventType.CSV_EXPORTED,
            description=f"Exported {record_count} record(s) to {filename}",
            details={"record_count": record_count, "filename": filename},
            is_user_action=True,
        )

    @staticmethod
    def advisory_completed(
        operation: str,
        record_count: int,
        correlation_id: Optional[UUID] = None
    ) -> SessionEvent:
        event_type = (
            SessionEventType.INSIGHTS_GENERATED
            if operation == "insights"
            else SessionEventType.CHAT_ANSWERED
        )
        return SessionEvent(
            event_type=event_type,
            correlation_id=correlation_id,
            description=f"Advisory {operation} completed over {record_count} record(s)",
            details={"operation": operation, "record_count": record_count},
        )

    @staticmethod
    def advisory_failed(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> SessionEvent:
        return SessionEvent(
            event_type=SessionEventType.ADVISORY_FAILED,
            severity=EventSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"Advisory {operation} failed, fallback message shown",
            error_message=error_message,
            details={"operation": operation},
        )

    @staticmethod
    def configuration_error(
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> SessionEvent:
        return SessionEvent(
            event_type=SessionEventType.CONFIGURATION_ERROR,
            severity=EventSeverity.ERROR,
            correlation_id=correlation_id,
            description="Configuration error",
            error_message=error_message,
        )
