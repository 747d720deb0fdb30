"""Proxy boundary route.

POST /api/analyze accepts ``{"text": prompt}``, attaches the server-held
model key and returns the model's JSON envelope verbatim. Every failure is
answered with ``{"error": "<short message>"}`` and no internal detail.
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from overthinkr.core.dependencies import GeminiProxyDep, MetricsCollectorDep
from overthinkr.core.exceptions import ProxyError, log_exception
from overthinkr.models.api import ProxyErrorResponse, ProxyRequest


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["proxy"])

REJECTED_METHODS = ["GET", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post(
    "/analyze",
    responses={
        200: {"description": "Model envelope, verbatim"},
        400: {"model": ProxyErrorResponse, "description": "Body is not {\"text\": string}"},
        500: {"model": ProxyErrorResponse, "description": "Internal failure"},
        502: {"model": ProxyErrorResponse, "description": "Upstream application failure"},
    },
    summary="Forward a prompt to the model",
)
async def proxy_analyze(
    request: Request,
    proxy: GeminiProxyDep,
    metrics: MetricsCollectorDep,
) -> JSONResponse:
    """Forward one prompt to the model and relay its envelope."""
    start_time = time.time()
    status_code = 200
    try:
        try:
            body = ProxyRequest.model_validate(await request.json())
        except (ValueError, PydanticValidationError) as e:
            logger.warning(f"Rejected proxy request body: {type(e).__name__}")
            status_code = 400
            return _error(400, "Bad request")

        envelope = await proxy.forward(body.text)
        return JSONResponse(status_code=200, content=envelope)

    except ProxyError as e:
        log_exception(e, "Proxy error")
        status_code = e.status_code
        return _error(e.status_code, e.public_message)
    except Exception as e:
        logger.exception(f"Unexpected proxy error: {type(e).__name__}")
        status_code = 500
        return _error(500, "Server error")
    finally:
        duration_ms = (time.time() - start_time) * 1000
        metrics.record_request("proxy", status_code, duration_ms)


@router.api_route("/analyze", methods=REJECTED_METHODS, include_in_schema=False)
async def proxy_method_not_allowed() -> JSONResponse:
    return _error(405, "Method not allowed")
