"""
Health check endpoint.

Reports liveness and whether the collaborators are configured. The model
key itself is never returned, only whether one is set.
"""

import logging
import time
from datetime import datetime

from fastapi import APIRouter

from overthinkr.core.dependencies import (
    GeminiProxyDep,
    MetricsCollectorDep,
    SettingsDep,
    TextExtractorDep,
)
from overthinkr.models.api import HealthResponse


logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse, summary="Check service health")
async def health_check(
    app_settings: SettingsDep,
    proxy: GeminiProxyDep,
    extractor: TextExtractorDep,
    metrics: MetricsCollectorDep,
) -> HealthResponse:
    """
    Check service health.

    Status is "healthy" when the model key is configured and "degraded"
    otherwise. OCR availability is reported but does not affect the status,
    since typed messages work without it.
    """
    start_time = time.time()

    checks = {
        "model_key_configured": proxy.is_configured,
        "ocr_available": extractor.is_available(),
    }
    status = "healthy" if checks["model_key_configured"] else "degraded"
    logger.info(f"Health check: status={status}, checks={checks}")

    metrics.record_request("health", 200, (time.time() - start_time) * 1000)
    return HealthResponse(
        status=status,
        timestamp=datetime.now(),
        version=app_settings.app_version,
        checks=checks,
    )
