"""AI service gateways package."""

from smartspend.gateways.advisory import (
    CHAT_EMPTY_FALLBACK,
    CHAT_ERROR_FALLBACK,
    INSIGHTS_EMPTY_FALLBACK,
    INSIGHTS_ERROR_FALLBACK,
    AdvisoryReply,
    FinancialAdvisor,
)
from smartspend.gateways.base import GeminiGateway, records_to_json
from smartspend.gateways.extraction import (
    EmptySelectionError,
    ExtractionError,
    ReceiptExtractor,
    parse_extraction_response,
)

__all__ = [
    # Advisory
    "CHAT_EMPTY_FALLBACK",
    "CHAT_ERROR_FALLBACK",
    "INSIGHTS_EMPTY_FALLBACK",
    "INSIGHTS_ERROR_FALLBACK",
    "AdvisoryReply",
    "FinancialAdvisor",
    # Shared
    "GeminiGateway",
    "records_to_json",
    # Extraction
    "EmptySelectionError",
    "ExtractionError",
    "ReceiptExtractor",
    "parse_extraction_response",
]
