"""
Tone analysis endpoint.

POST /api/v1/analysis runs the full pipeline for one message and returns
the validated analysis. Failures are raised as AnalysisError and rendered by
the application's exception handlers as ``{"error": kind, "message": ...}``.
"""

import logging
import time

from fastapi import APIRouter

from overthinkr.core.dependencies import AnalysisPipelineDep, MetricsCollectorDep
from overthinkr.core.exceptions import AnalysisError, ValidationError
from overthinkr.models.api import AnalyzeRequest, AnalyzeResponse, ErrorResponse
from overthinkr.services.pipeline import PipelineRun


logger = logging.getLogger(__name__)

router = APIRouter(tags=["analysis"])


@router.post(
    "/analysis",
    response_model=AnalyzeResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Empty message"},
        502: {"model": ErrorResponse, "description": "Analysis failed upstream or in validation"},
    },
    summary="Analyze the tone of a message",
    description="""
    Decode the subtext of a short message. Returns a tone label, a 1-10
    tension score, a short explanation, a 1-100 confidence and exactly three
    suggested replies (Confident, Calm, Witty), each with a presentation hint.
    """,
)
async def analyze_message(
    request: AnalyzeRequest,
    pipeline: AnalysisPipelineDep,
    metrics: MetricsCollectorDep,
) -> AnalyzeResponse:
    """
    Run the analysis pipeline for one message.

    Args:
        request: Message text and optional request ID
        pipeline: AnalysisPipeline dependency
        metrics: MetricsCollector dependency

    Returns:
        AnalyzeResponse holding the AnalysisResult

    Raises:
        ValidationError: If the message is empty
        AnalysisError: If any pipeline stage fails
    """
    start_time = time.time()

    message = request.text.strip()
    if not message:
        metrics.record_request("analysis", 400, 0)
        raise ValidationError("Message text must not be empty")

    logger.info(
        f"Analysis request: request_id={request.request_id}, message_chars={len(message)}"
    )

    run = PipelineRun()
    try:
        result = await pipeline.analyze(message, run)
    except AnalysisError as e:
        metrics.record_failure(e.kind)
        metrics.record_request("analysis", e.status_code, (time.time() - start_time) * 1000)
        raise
    finally:
        if run.inference_ms is not None:
            metrics.record_inference(run.inference_ms)

    metrics.record_request("analysis", 200, (time.time() - start_time) * 1000)
    return AnalyzeResponse(request_id=request.request_id, analysis=result)
