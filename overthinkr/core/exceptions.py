"""
Custom exceptions for the application.

This module defines a hierarchy of custom exceptions for error handling:
- AppException: Base exception for all application errors
- ValidationError: Request validation failures (400)
- AnalysisError: Base for every classified failure of the analysis pipeline
    - UnreadableImageError: OCR input could not be turned into text (422)
    - TransportError: Network/HTTP failure reaching the proxy (502)
    - UpstreamError: Proxy or model reported an application failure (502)
    - MalformedEnvelopeError: Envelope has no generated text (502)
    - InvalidJsonError: Generated text is not a JSON document (502)
    - SchemaViolationError: JSON document breaks the analysis contract (502)
- ProxyError: Failure at the proxy boundary, rendered as {"error": ...}

Every AnalysisError carries a short, non-technical ``user_message``. The
``message`` and ``details`` are for server logs only and never reach clients.
"""

import logging
from enum import Enum
from typing import Any


logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base exception for application errors.

    All custom exceptions should inherit from this class.
    Provides consistent error structure with error_code, message, and details.
    """

    def __init__(
        self,
        message: str,
        error_code: str = "internal_error",
        details: Any = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert exception to dictionary for JSON response."""
        result = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details is not None:
            result["details"] = self.details
        return result


class ValidationError(AppException):
    """Raised when request validation fails.

    HTTP Status: 400 Bad Request
    """

    def __init__(self, message: str, details: Any = None):
        super().__init__(
            message=message,
            error_code="validation_error",
            details=details,
        )


class FailureKind(str, Enum):
    """Closed set of ways one analysis request can fail."""

    UNREADABLE_IMAGE = "unreadable_image"
    TRANSPORT = "transport_error"
    UPSTREAM = "upstream_error"
    MALFORMED_ENVELOPE = "malformed_envelope"
    INVALID_JSON = "invalid_json"
    SCHEMA_VIOLATION = "schema_violation"


class AnalysisError(AppException):
    """Base class for classified pipeline failures.

    Subclasses fix ``kind``, ``status_code`` and ``user_message``; callers
    only supply the internal message.
    """

    kind: FailureKind
    status_code: int = 502
    user_message: str = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None, details: Any = None):
        super().__init__(
            message=message or self.user_message,
            error_code=self.kind.value,
            details=details,
        )

    def to_public_dict(self) -> dict:
        """Client-safe body: the failure kind and the short user message."""
        return {
            "error": self.error_code,
            "message": self.user_message,
        }


class UnreadableImageError(AnalysisError):
    """Raised when an uploaded image cannot be read or holds no text."""

    kind = FailureKind.UNREADABLE_IMAGE
    status_code = 422
    user_message = "Failed to read image."


class TransportError(AnalysisError):
    """Raised when the proxy cannot be reached or answers with a non-2xx status."""

    kind = FailureKind.TRANSPORT
    user_message = "Couldn't reach the analysis service. Check your connection and try again."

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
    ):
        details = {"status_code": status_code} if status_code is not None else None
        super().__init__(message=message, details=details)
        self.upstream_status = status_code


class UpstreamError(AnalysisError):
    """Raised when the proxy or the model reports an application-level failure."""

    kind = FailureKind.UPSTREAM
    user_message = "The analysis service is unavailable right now. Check the API key or backend."


class MalformedEnvelopeError(AnalysisError):
    """Raised when the model envelope has no generated text."""

    kind = FailureKind.MALFORMED_ENVELOPE
    user_message = "The model returned an empty answer. Please try again."


class InvalidJsonError(AnalysisError):
    """Raised when the generated text is not a JSON document."""

    kind = FailureKind.INVALID_JSON
    user_message = "The model answered in an unexpected format. Please try again."


class SchemaViolationError(AnalysisError):
    """Raised when the JSON document is missing fields or has out-of-range values."""

    kind = FailureKind.SCHEMA_VIOLATION
    user_message = "The model's analysis was incomplete. Please try again."

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            details={"field": field} if field else None,
        )
        self.field = field


class ProxyError(AppException):
    """Raised inside the proxy boundary.

    Rendered as ``{"error": public_message}`` with ``status_code``; the
    internal ``message`` is logged and never returned.
    """

    def __init__(
        self,
        public_message: str,
        status_code: int = 500,
        message: str | None = None,
    ):
        super().__init__(
            message=message or public_message,
            error_code="proxy_error",
        )
        self.public_message = public_message
        self.status_code = status_code


def log_exception(exc: Exception, context: str | None = None) -> None:
    """Log an exception with context information.

    Args:
        exc: The exception to log.
        context: Optional context string for the log message.
    """
    if isinstance(exc, AppException):
        logger.error(
            f"{context or 'Error'}: [{exc.error_code}] {exc.message}",
            extra={"error_code": exc.error_code, "details": exc.details},
        )
    else:
        logger.exception(f"{context or 'Unexpected error'}: {exc}")
