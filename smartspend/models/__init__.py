"""
Data Models Package

This package contains all Pydantic models used in SmartSpend.
All data flowing through the system must conform to these schemas.
"""

from smartspend.models.receipt import (
    CHART_CATALOG,
    DEFAULT_CHARTS,
    ChartInfo,
    ChartSelection,
    ChartType,
    DashboardData,
    GroupCount,
    GroupTotal,
    ImagePayload,
    ReceiptRecord,
)
from smartspend.models.assistant import (
    QUICK_ACTION_PROMPTS,
    AssistantMode,
    ChatMessage,
    ChatRole,
    Conversation,
    QuickAction,
)
from smartspend.models.reminder import (
    Reminder,
    ReminderList,
    ReminderPriority,
)
from smartspend.models.audit import (
    EventSeverity,
    SessionEvent,
    SessionEventBuilder,
    SessionEventType,
)

__all__ = [
    # Receipt models
    "CHART_CATALOG",
    "DEFAULT_CHARTS",
    "ChartInfo",
    "ChartSelection",
    "ChartType",
    "DashboardData",
    "GroupCount",
    "GroupTotal",
    "ImagePayload",
    "ReceiptRecord",
    # Assistant models
    "QUICK_ACTION_PROMPTS",
    "AssistantMode",
    "ChatMessage",
    "ChatRole",
    "Conversation",
    "QuickAction",
    # Reminder models
    "Reminder",
    "ReminderList",
    "ReminderPriority",
    # Session event models
    "EventSeverity",
    "SessionEvent",
    "SessionEventBuilder",
    "SessionEventType",
]
