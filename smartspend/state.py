"""
Application State

Everything the UI needs to remember for a session, held in one frozen
struct owned by the top-level view. Components receive it, and changes
are expressed as the transition functions below, each returning a new
AppState.
"""

from enum import Enum
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field

from smartspend.models.assistant import Conversation
from smartspend.models.receipt import ChartSelection, ChartType, ReceiptRecord
from smartspend.models.reminder import ReminderList
from smartspend.store import RecordStore


class ViewState(str, Enum):
    """Which screen is showing."""
    UPLOAD = "UPLOAD"
    DASHBOARD = "DASHBOARD"
    REMINDERS = "REMINDERS"


class Theme(str, Enum):
    """Visual theme."""
    LIGHT = "light"
    SPACE = "space"


class AppState(BaseModel):
    """Session state for one user."""
    model_config = ConfigDict(frozen=True)

    view: ViewState = ViewState.UPLOAD
    theme: Theme = Theme.LIGHT
    store: RecordStore = Field(default_factory=RecordStore)
    charts: ChartSelection = Field(default_factory=ChartSelection)
    conversation: Conversation = Field(default_factory=Conversation)
    reminders: ReminderList = Field(default_factory=ReminderList)

    @property
    def has_records(self) -> bool:
        return not self.store.is_empty


def records_loaded(state: AppState, batch: Iterable[ReceiptRecord]) -> AppState:
    """A new extraction batch arrived: keep the old records, add the new, show the dashboard."""
    return state.model_copy(update={
        "store": state.store.append(batch),
        "view": ViewState.DASHBOARD,
    })


def records_cleared(state: AppState) -> AppState:
    """User confirmed wiping the history."""
    return state.model_copy(update={
        "store": state.store.clear(),
        "view": ViewState.UPLOAD,
        "conversation": state.conversation.reset(),
    })


def view_changed(state: AppState, view: ViewState) -> AppState:
    return state.model_copy(update={"view": ViewState(view)})


def theme_toggled(state: AppState) -> AppState:
    theme = Theme.SPACE if state.theme == Theme.LIGHT else Theme.LIGHT
    return state.model_copy(update={"theme": theme})


def chart_toggled(state: AppState, chart: ChartType) -> AppState:
    return state.model_copy(update={"charts": state.charts.toggle(chart)})


def conversation_changed(state: AppState, conversation: Conversation) -> AppState:
    return state.model_copy(update={"conversation": conversation})


def reminders_changed(state: AppState, reminders: ReminderList) -> AppState:
    return state.model_copy(update={"reminders": reminders})
