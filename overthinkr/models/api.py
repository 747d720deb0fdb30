"""API request and response models.

The proxy boundary speaks the browser-facing wire shape (``{"text": ...}`` in,
verbatim model envelope or ``{"error": ...}`` out). The analysis endpoint
returns the validated AnalysisResult.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from overthinkr.models.analysis import AnalysisResult


# Upper bound on message length accepted over HTTP; the pipeline itself has none
MAX_MESSAGE_CHARS = 20000


class ProxyRequest(BaseModel):
    """Body accepted by the proxy boundary: one prompt string."""

    text: str = Field(..., description="Compiled prompt to forward to the model")


class ProxyErrorResponse(BaseModel):
    """Error body returned by the proxy boundary."""

    error: str


class AnalyzeRequest(BaseModel):
    """Request model for the POST /api/v1/analysis endpoint."""

    text: str = Field(
        ...,
        max_length=MAX_MESSAGE_CHARS,
        description="The message to analyze, typed or extracted from a screenshot",
    )
    request_id: Optional[str] = Field(
        None,
        description="Optional client request ID, echoed back",
    )


class AnalyzeResponse(BaseModel):
    """Response model for the POST /api/v1/analysis endpoint."""

    request_id: Optional[str] = None
    analysis: AnalysisResult


class OCRResponse(BaseModel):
    """Text extracted from an uploaded screenshot."""

    text: str


class HealthResponse(BaseModel):
    """Service health status."""

    status: str
    timestamp: datetime
    version: str
    checks: dict[str, bool] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
