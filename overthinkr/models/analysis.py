"""Core analysis models.

This module defines:
- ReplyCategory: The closed set of reply styles plus an explicit UNKNOWN
- PresentationHint: Icon hint a renderer shows next to a reply
- ReplySuggestion: One suggested reply
- AnalysisResult: The validated tone analysis
- PipelineState: Per-request lifecycle of one analysis
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PresentationHint(str, Enum):
    """Icon names understood by the rendering layer."""

    SHIELD_CHECK = "shield-check"
    ZAP = "zap"
    SPARKLES = "sparkles"
    MESSAGE_SQUARE = "message-square"


class ReplyCategory(str, Enum):
    """Reply style requested from the model.

    UNKNOWN stands for any label outside the closed set so that the mapping
    to a presentation hint stays total.
    """

    CONFIDENT = "Confident"
    CALM = "Calm"
    WITTY = "Witty"
    UNKNOWN = "Unknown"

    @classmethod
    def from_label(cls, label: str) -> "ReplyCategory":
        """Map a model-supplied label to a category, UNKNOWN when unrecognized."""
        for category in cls:
            if category is not cls.UNKNOWN and category.value == label:
                return category
        return cls.UNKNOWN

    @property
    def hint(self) -> PresentationHint:
        if self is ReplyCategory.CONFIDENT:
            return PresentationHint.SHIELD_CHECK
        if self is ReplyCategory.CALM:
            return PresentationHint.ZAP
        if self is ReplyCategory.WITTY:
            return PresentationHint.SPARKLES
        return PresentationHint.MESSAGE_SQUARE


# Categories the prompt asks for, in reply order.
REQUESTED_CATEGORIES: tuple[ReplyCategory, ...] = (
    ReplyCategory.CONFIDENT,
    ReplyCategory.CALM,
    ReplyCategory.WITTY,
)


class ReplySuggestion(BaseModel):
    """A suggested reply in one of the reply styles."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(..., min_length=1, description="Category label as returned by the model")
    msg: str = Field(..., min_length=1, description="Suggested reply text")
    category: ReplyCategory
    hint: PresentationHint


class AnalysisResult(BaseModel):
    """Validated tone analysis of one message."""

    model_config = ConfigDict(frozen=True)

    tone: str = Field(..., min_length=1, description="Short tone label, e.g. 'Passive-Aggressive'")
    score: int = Field(..., ge=1, le=10, description="Emotional tension, 10 is a red flag")
    explanation: str = Field(..., min_length=1)
    confidence: int = Field(..., ge=1, le=100)
    replies: tuple[ReplySuggestion, ReplySuggestion, ReplySuggestion]


class PipelineState(str, Enum):
    """Lifecycle of one analysis request."""

    IDLE = "idle"
    COMPILING = "compiling"
    AWAITING_INFERENCE = "awaiting_inference"
    VALIDATING = "validating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
