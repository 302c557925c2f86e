"""Shared fixtures for SmartSpend tests. No test talks to a real AI service."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from smartspend.audit import SessionEventLogger
from smartspend.config import GeminiSettings, get_settings
from smartspend.models.receipt import ReceiptRecord


def _record(merchant="Jumbo", date="2024-01-01", total="10", category="Comida", description=None):
    return ReceiptRecord(
        merchant=merchant,
        date=date,
        total=Decimal(total),
        category=category,
        description=description,
    )


@pytest.fixture
def make_record():
    """Factory for receipt records with sensible defaults."""
    return _record


@pytest.fixture
def sample_records():
    """Three receipts over two days and two categories."""
    return (
        _record("Jumbo", "2024-01-02", "25.50", "Comida"),
        _record("Uber", "2024-01-01", "12.00", "Transporte"),
        _record("Lider", "2024-01-02", "30.00", "Comida", "Supermercado"),
    )


@pytest.fixture
def gemini_settings():
    return GeminiSettings(api_key="test-key", model_name="gemini-test", temperature=0.3)


@pytest.fixture
def event_logger():
    return SessionEventLogger()


@pytest.fixture
def fake_model():
    """A stand-in for genai.GenerativeModel with async methods mocked."""
    model = MagicMock()
    model.generate_content_async = AsyncMock()
    session = MagicMock()
    session.send_message_async = AsyncMock()
    model.start_chat.return_value = session
    return model


@pytest.fixture
def make_response():
    """Factory for fake Gemini responses carrying `text`."""
    def _response(text):
        response = MagicMock()
        response.text = text
        return response
    return _response


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
