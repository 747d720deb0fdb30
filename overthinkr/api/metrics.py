"""
Metrics endpoint exposing counters in Prometheus text format.
"""

import logging
import time

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from overthinkr.core.dependencies import MetricsCollectorDep


logger = logging.getLogger(__name__)

router = APIRouter(tags=["metrics"])


@router.get(
    "/metrics",
    response_class=PlainTextResponse,
    summary="Get performance metrics",
)
async def get_metrics(
    metrics_collector: MetricsCollectorDep,
) -> str:
    """
    Return Prometheus format metrics: request counts, failures by kind and
    analysis, inference and OCR latencies.
    """
    start_time = time.time()

    prometheus_metrics = metrics_collector.get_prometheus_metrics()

    duration_ms = int((time.time() - start_time) * 1000)
    metrics_collector.record_request("metrics", 200, duration_ms)

    logger.debug(f"Returning {len(prometheus_metrics)} bytes of metrics")
    return prometheus_metrics
