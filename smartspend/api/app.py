"""
Batch Extraction API

A single serverless-style endpoint for clients that upload receipts
themselves (e.g. a static front-end):

    POST /api/analyzeReceipts
    {"files": [{"data": "<base64>", "mimeType": "image/jpeg"}, ...]}

200 → JSON array of receipt records
500 → {"error": "<message>"} for any failure
405 → any method other than POST
"""

import base64
import binascii

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from smartspend import __version__
from smartspend.audit import configure_logging
from smartspend.config import get_settings
from smartspend.gateways import ReceiptExtractor
from smartspend.models.receipt import ImagePayload


logger = structlog.get_logger(__name__)


class UploadedFile(BaseModel):
    """One base64-encoded image as sent by the browser."""
    model_config = ConfigDict(populate_by_name=True)

    data: str = Field(..., description="Base64 image data, without the data: URL prefix")
    mime_type: str = Field(..., alias="mimeType")

    def to_payload(self) -> ImagePayload:
        try:
            raw = base64.b64decode(self.data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Invalid base64 image data: {e}") from e
        return ImagePayload(data=raw, mime_type=self.mime_type)


class AnalyzeRequest(BaseModel):
    files: list[UploadedFile]


def get_extractor() -> ReceiptExtractor:
    return ReceiptExtractor()


configure_logging(get_settings().app.log_level)

app = FastAPI(title="SmartSpend API", version=__version__)


@app.exception_handler(RequestValidationError)
async def invalid_body_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.error("analyze_receipts_bad_request", errors=len(exc.errors()))
    return JSONResponse(status_code=500, content={"error": "Invalid request body"})


@app.post("/api/analyzeReceipts")
async def analyze_receipts(
    body: AnalyzeRequest,
    extractor: ReceiptExtractor = Depends(get_extractor),
) -> JSONResponse:
    """Extract receipt records from a batch of base64 images."""
    logger.info("analyze_receipts_received", file_count=len(body.files))

    try:
        images = [f.to_payload() for f in body.files]
        records = await extractor.analyze_receipts(images)
    except Exception as e:
        logger.error("analyze_receipts_failed", error=str(e))
        return JSONResponse(status_code=500, content={"error": str(e)})

    logger.info("analyze_receipts_succeeded", record_count=len(records))
    return JSONResponse(
        status_code=200,
        content=[record.model_dump(mode="json") for record in records],
    )
