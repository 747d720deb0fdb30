# Data Models

from overthinkr.models.analysis import (
    REQUESTED_CATEGORIES,
    AnalysisResult,
    PipelineState,
    PresentationHint,
    ReplyCategory,
    ReplySuggestion,
)
from overthinkr.models.api import (
    AnalyzeRequest,
    AnalyzeResponse,
    ErrorResponse,
    HealthResponse,
    OCRResponse,
    ProxyErrorResponse,
    ProxyRequest,
)

__all__ = [
    # API models
    "AnalyzeRequest",
    "AnalyzeResponse",
    "ErrorResponse",
    "HealthResponse",
    "OCRResponse",
    "ProxyErrorResponse",
    "ProxyRequest",
    # Core schemas
    "AnalysisResult",
    "PipelineState",
    "PresentationHint",
    "REQUESTED_CATEGORIES",
    "ReplyCategory",
    "ReplySuggestion",
]
