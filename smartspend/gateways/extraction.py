"""
Receipt Extraction Gateway

Sends a batch of receipt photos to Gemini in one request and gets back
one structured record per receipt.

CRITICAL BOUNDARIES:
- One attempt per submission. No retry, no timeout.
- Every failure (network, quota, auth, malformed JSON, records that do
  not fit the schema) is surfaced as a single ExtractionError. Callers
  do not branch on the cause.
- A missing API key is a ConfigurationError and is NOT folded into
  ExtractionError.
"""

import json
from typing import Optional, Sequence

import structlog
from pydantic import TypeAdapter, ValidationError

from smartspend.gateways.base import GeminiGateway
from smartspend.models.receipt import ImagePayload, ReceiptRecord


logger = structlog.get_logger(__name__)


EXTRACTION_PROMPT = (
    "Analiza estas imágenes de boletas o recibos y devuelve un registro por "
    "cada boleta. Para cada una identifica el comercio, la fecha en formato "
    "YYYY-MM-DD, el total pagado como número y una categoría general "
    "(por ejemplo: Comida, Transporte, Servicios, Ropa, Varios). "
    "Si hay un detalle relevante, inclúyelo como descripción breve."
)

RECEIPT_RESPONSE_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "merchant": {"type": "STRING"},
            "date": {"type": "STRING"},
            "total": {"type": "NUMBER"},
            "category": {"type": "STRING"},
            "description": {"type": "STRING"},
        },
        "required": ["merchant", "date", "total", "category"],
    },
}

_records_adapter = TypeAdapter(list[ReceiptRecord])


class ExtractionError(Exception):
    """The receipts could not be extracted. The user may retry."""
    pass


class EmptySelectionError(ValueError):
    """No images were selected; nothing is sent."""
    pass


def parse_extraction_response(text: Optional[str]) -> list[ReceiptRecord]:
    """
    Turn the model's JSON text into validated records.

    An empty response means no receipts were found.
    """
    if not text or not text.strip():
        return []

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise ExtractionError(f"Malformed response from extraction service: {e}") from e

    if not isinstance(payload, list):
        raise ExtractionError("Extraction service did not return a list of receipts")

    try:
        return _records_adapter.validate_python(payload)
    except ValidationError as e:
        raise ExtractionError(
            f"Extraction service returned {e.error_count()} invalid field(s)"
        ) from e


class ReceiptExtractor(GeminiGateway):
    """
    Gemini-backed receipt extractor.

    Usage:
        extractor = ReceiptExtractor()
        records = await extractor.analyze_receipts([ImagePayload(...), ...])
    """

    def _build_contents(self, images: Sequence[ImagePayload]) -> list:
        contents: list = [
            {"mime_type": image.mime_type, "data": image.data}
            for image in images
        ]
        contents.append(EXTRACTION_PROMPT)
        return contents

    async def analyze_receipts(
        self,
        images: Sequence[ImagePayload],
    ) -> list[ReceiptRecord]:
        """
        Extract one record per receipt from the given images.

        Raises:
            EmptySelectionError: no images given (no request is made)
            ConfigurationError: API key missing
            ExtractionError: anything else went wrong
        """
        if not images:
            raise EmptySelectionError("Por favor sube al menos una imagen.")

        model = self._build_model(
            generation_config={
                "response_mime_type": "application/json",
                "response_schema": RECEIPT_RESPONSE_SCHEMA,
            },
        )

        logger.info(
            "extraction_request",
            image_count=len(images),
            model=self.model_name,
        )

        try:
            response = await model.generate_content_async(self._build_contents(images))
            text = response.text
        except Exception as e:
            logger.error("extraction_upstream_failed", error=str(e))
            raise ExtractionError(f"Extraction service call failed: {e}") from e

        records = parse_extraction_response(text)
        logger.info("extraction_response", record_count=len(records))
        return records
