"""Tests for application state transitions."""

import pytest

from smartspend.models.assistant import AssistantMode
from smartspend.models.receipt import ChartType
from smartspend.state import (
    AppState,
    Theme,
    ViewState,
    chart_toggled,
    conversation_changed,
    records_cleared,
    records_loaded,
    reminders_changed,
    theme_toggled,
    view_changed,
)


class TestAppState:
    """Every transition returns a new state and leaves the old one alone."""

    def test_initial_state(self):
        state = AppState()
        assert state.view == ViewState.UPLOAD
        assert state.theme == Theme.LIGHT
        assert not state.has_records
        assert state.conversation.mode == AssistantMode.MENU

    def test_records_loaded_appends_and_shows_dashboard(self, sample_records):
        state = records_loaded(AppState(), sample_records[:2])
        state = records_loaded(state, sample_records[2:])

        assert state.view == ViewState.DASHBOARD
        assert state.store.snapshot() == sample_records

    def test_records_loaded_does_not_mutate_previous(self, sample_records):
        before = AppState()
        records_loaded(before, sample_records)
        assert not before.has_records

    def test_records_cleared(self, sample_records):
        state = records_loaded(AppState(), sample_records)
        state = conversation_changed(state, state.conversation.open_chat("Hola"))

        cleared = records_cleared(state)

        assert not cleared.has_records
        assert cleared.view == ViewState.UPLOAD
        assert cleared.conversation.messages == ()

    def test_records_cleared_keeps_charts_and_theme(self, sample_records):
        state = theme_toggled(chart_toggled(
            records_loaded(AppState(), sample_records), ChartType.DAILY_TREND
        ))
        cleared = records_cleared(state)
        assert cleared.theme == Theme.SPACE
        assert cleared.charts.is_visible(ChartType.DAILY_TREND)

    def test_view_changed(self):
        assert view_changed(AppState(), ViewState.REMINDERS).view == ViewState.REMINDERS

    def test_view_changed_rejects_unknown_view(self):
        with pytest.raises(ValueError):
            view_changed(AppState(), "SETTINGS_PAGE")

    def test_theme_toggle_round_trip(self):
        state = AppState()
        assert theme_toggled(state).theme == Theme.SPACE
        assert theme_toggled(theme_toggled(state)).theme == Theme.LIGHT

    def test_chart_toggle_is_its_own_inverse(self):
        state = AppState()
        assert chart_toggled(chart_toggled(state, ChartType.CATEGORY_PIE), ChartType.CATEGORY_PIE) == state

    def test_chart_selection_independent_of_data(self):
        state = chart_toggled(AppState(), ChartType.CATEGORY_COUNT)
        assert not state.has_records
        assert state.charts.is_visible(ChartType.CATEGORY_COUNT)

    def test_reminders_changed(self):
        state = AppState()
        reminders = state.reminders.add("Pagar la luz")
        assert len(reminders_changed(state, reminders).reminders.items) == 3


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
