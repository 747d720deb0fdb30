"""
Screenshot text extraction endpoint.

POST /api/v1/ocr takes an uploaded image and returns the trimmed text,
ready to be sent to the analysis endpoint.
"""

import logging
import time

from fastapi import APIRouter, File, UploadFile

from overthinkr.core.dependencies import MetricsCollectorDep, TextExtractorDep
from overthinkr.core.exceptions import UnreadableImageError
from overthinkr.models.api import ErrorResponse, OCRResponse


logger = logging.getLogger(__name__)

router = APIRouter(tags=["ocr"])


@router.post(
    "/ocr",
    response_model=OCRResponse,
    responses={
        422: {"model": ErrorResponse, "description": "Image could not be read"},
    },
    summary="Extract message text from a screenshot",
)
async def extract_text(
    extractor: TextExtractorDep,
    metrics: MetricsCollectorDep,
    image: UploadFile = File(..., description="Screenshot image (PNG, JPEG, WebP, GIF, BMP)"),
) -> OCRResponse:
    """Read the uploaded screenshot and return its text."""
    start_time = time.time()
    image_bytes = await image.read()
    logger.info(
        f"OCR request: filename={image.filename}, content_type={image.content_type}, "
        f"bytes={len(image_bytes)}"
    )

    try:
        text = await extractor.extract_text(image_bytes)
    except UnreadableImageError as e:
        metrics.record_failure(e.kind)
        metrics.record_request("ocr", e.status_code, (time.time() - start_time) * 1000)
        raise

    metrics.record_request("ocr", 200, (time.time() - start_time) * 1000)
    return OCRResponse(text=text)
