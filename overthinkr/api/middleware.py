"""
Request logging middleware and log formatting.

Only request metadata is logged. Bodies carry user messages and prompts and
never reach the log.
"""

import json
import logging
import time
import uuid
from typing import Any, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# LogRecord attributes copied into JSON output when present
STRUCTURED_FIELDS = (
    "request_id",
    "method",
    "path",
    "status_code",
    "duration_ms",
    "client_host",
    "error_type",
    "error_code",
    "details",
)

TEXT_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"


def _new_request_id() -> str:
    return f"req-{uuid.uuid4().hex[:12]}"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs one line per request with its outcome and latency.

    A caller-supplied X-Request-ID is reused, otherwise one is generated; the
    id is echoed on the response so clients can quote it.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or _new_request_id()
        fields: dict[str, Any] = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "client_host": request.client.host if request.client else None,
        }
        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception as e:
            fields["duration_ms"] = round((time.time() - start_time) * 1000, 2)
            fields["error_type"] = type(e).__name__
            logger.error(
                f"{request.method} {request.url.path} raised {type(e).__name__}",
                extra=fields,
                exc_info=True,
            )
            raise

        fields["status_code"] = response.status_code
        fields["duration_ms"] = round((time.time() - start_time) * 1000, 2)
        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            f"{request.method} {request.url.path} {response.status_code} "
            f"{fields['duration_ms']}ms",
            extra=fields,
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class StructuredLogFormatter(logging.Formatter):
    """Formats each record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (name, getattr(record, name))
            for name in STRUCTURED_FIELDS
            if hasattr(record, name)
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_structured_logging(level: int = logging.INFO, use_json: bool = False) -> None:
    """
    Install a single stderr handler on the root logger.

    Args:
        level: Root logging level.
        use_json: Emit JSON lines instead of plain text.
    """
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(StructuredLogFormatter() if use_json else logging.Formatter(TEXT_FORMAT))

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
