"""Session event logging package."""

from smartspend.audit.logger import (
    SessionEventLogger,
    configure_logging,
    create_correlation_id,
)

__all__ = ["SessionEventLogger", "configure_logging", "create_correlation_id"]
