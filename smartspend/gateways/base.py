"""
Shared Gemini plumbing for the extraction and advisory gateways.

The API key is read the first time a model is needed, not at import or
construction time, so the app can start and render without it.
"""

import json
from typing import Any, Optional, Sequence

import google.generativeai as genai

from smartspend.config import GeminiSettings, get_settings
from smartspend.models.receipt import ReceiptRecord


def records_to_json(records: Sequence[ReceiptRecord]) -> str:
    """Serialize records for embedding in a prompt."""
    return json.dumps(
        [record.model_dump(mode="json") for record in records],
        ensure_ascii=False,
    )


class GeminiGateway:
    """
    Base class for gateways backed by a Gemini model.

    Subclasses call `_build_model()` per request. Raises
    ConfigurationError when no API key is configured.
    """

    def __init__(self, settings: Optional[GeminiSettings] = None):
        self._settings = settings

    def _get_settings(self) -> GeminiSettings:
        if self._settings is None:
            self._settings = get_settings().gemini
        return self._settings

    def _build_model(
        self,
        generation_config: Optional[dict[str, Any]] = None,
        system_instruction: Optional[str] = None,
    ) -> genai.GenerativeModel:
        """Configure Google Generative AI and return a model handle."""
        settings = self._get_settings()
        genai.configure(api_key=settings.api_key)
        return genai.GenerativeModel(
            model_name=settings.model_name,
            generation_config=generation_config,
            system_instruction=system_instruction,
        )

    @property
    def model_name(self) -> str:
        return self._get_settings().model_name
