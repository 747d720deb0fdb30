"""Response parser for validating and standardizing model output.

This module provides the ResponseParser class that turns a raw model
envelope into an AnalysisResult:

1. Extract the generated text from the envelope
2. Parse the text as one self-contained JSON document
3. Check every required field field-by-field
4. Map reply labels to categories and presentation hints

A failure at any step raises the matching AnalysisError; nothing partially
valid is ever returned.
"""

import json
import logging
from typing import Any

from overthinkr.core.exceptions import (
    InvalidJsonError,
    MalformedEnvelopeError,
    SchemaViolationError,
)
from overthinkr.models.analysis import (
    AnalysisResult,
    ReplyCategory,
    ReplySuggestion,
    REQUESTED_CATEGORIES,
)


logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("tone", "score", "explanation", "confidence", "replies")
SCORE_RANGE = (1, 10)
CONFIDENCE_RANGE = (1, 100)
REPLY_COUNT = len(REQUESTED_CATEGORIES)
REPLY_TEXT_KEYS = ("msg", "message")


class ResponseParser:
    """Component for validating and normalizing model output.

    Unknown reply labels are accepted and mapped to ReplyCategory.UNKNOWN
    unless ``strict_categories`` is set, in which case they are a schema
    violation.
    """

    def __init__(self, strict_categories: bool = False):
        self.strict_categories = strict_categories

    def parse(self, envelope: Any) -> AnalysisResult:
        """Validate and normalize a model envelope.

        Args:
            envelope: The raw envelope returned by the inference client.

        Returns:
            A fully populated AnalysisResult.

        Raises:
            MalformedEnvelopeError: No generated text in the envelope.
            InvalidJsonError: The generated text is not a JSON document.
            SchemaViolationError: The document breaks the analysis contract.
        """
        # Step 1: Extract generated text
        text = self.extract_text(envelope)

        # Step 2: Parse JSON
        document = self._parse_document(text)

        # Step 3: Validate required fields
        self._validate_required_fields(document)

        # Step 4: Build result
        return AnalysisResult(
            tone=document["tone"],
            score=document["score"],
            explanation=document["explanation"],
            confidence=document["confidence"],
            replies=tuple(self._normalize_replies(document["replies"])),
        )

    def extract_text(self, envelope: Any) -> str:
        """Navigate ``candidates[0].content.parts[*].text``.

        Text from every part of the first candidate is joined in order; the
        model may split one answer across parts.
        """
        try:
            parts = envelope["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as e:
            raise MalformedEnvelopeError(
                f"Envelope is missing candidates[0].content.parts: {e!r}"
            ) from e

        if not isinstance(parts, list):
            raise MalformedEnvelopeError("Envelope content.parts is not a list")

        texts = [
            part["text"]
            for part in parts
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        ]
        text = "".join(texts)
        if not text.strip():
            finish_reason = None
            try:
                finish_reason = envelope["candidates"][0].get("finishReason")
            except (AttributeError, KeyError, IndexError, TypeError):
                pass
            raise MalformedEnvelopeError(
                f"Envelope has no generated text (finishReason={finish_reason})"
            )
        return text

    def _parse_document(self, text: str) -> Any:
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning(
                f"Generated text is not valid JSON: {e.msg} at line {e.lineno} "
                f"column {e.colno} (length={len(text)})"
            )
            raise InvalidJsonError(f"Generated text is not valid JSON: {e.msg}") from e
        except RecursionError as e:
            logger.warning(f"Generated text nests too deeply to parse (length={len(text)})")
            raise InvalidJsonError("Generated text nests too deeply to parse") from e

    def _validate_required_fields(self, data: Any) -> None:
        """Check all required fields are present and well-formed.

        Raises:
            SchemaViolationError: On the first field that fails.
        """
        if not isinstance(data, dict):
            raise SchemaViolationError(
                f"Analysis must be a JSON object, got {type(data).__name__}"
            )

        missing = [field for field in REQUIRED_FIELDS if field not in data]
        if missing:
            raise SchemaViolationError(
                f"Missing required fields: {', '.join(missing)}",
                field=missing[0],
            )

        for field in ("tone", "explanation"):
            self._require_text(data[field], field)

        self._require_int_in_range(data["score"], "score", *SCORE_RANGE)
        self._require_int_in_range(data["confidence"], "confidence", *CONFIDENCE_RANGE)

        replies = data["replies"]
        if not isinstance(replies, list):
            raise SchemaViolationError("replies must be a list", field="replies")
        if len(replies) != REPLY_COUNT:
            raise SchemaViolationError(
                f"replies must contain exactly {REPLY_COUNT} entries, got {len(replies)}",
                field="replies",
            )

        seen_labels: set[str] = set()
        for i, reply in enumerate(replies):
            if not isinstance(reply, dict):
                raise SchemaViolationError(
                    f"replies[{i}] must be an object", field=f"replies[{i}]"
                )
            label = self._require_text(reply.get("type"), f"replies[{i}].type").strip()
            self._require_text(self._reply_text(reply), f"replies[{i}].msg")

            if label in seen_labels:
                raise SchemaViolationError(
                    f"replies[{i}].type '{label}' is duplicated",
                    field=f"replies[{i}].type",
                )
            seen_labels.add(label)

            if self.strict_categories and ReplyCategory.from_label(label) is ReplyCategory.UNKNOWN:
                raise SchemaViolationError(
                    f"replies[{i}].type '{label}' is not a known category",
                    field=f"replies[{i}].type",
                )

    def _normalize_replies(self, replies: list[dict]) -> list[ReplySuggestion]:
        normalized = []
        for reply in replies:
            label = reply["type"]
            category = ReplyCategory.from_label(label.strip())
            if category is ReplyCategory.UNKNOWN:
                logger.info(f"Unrecognized reply category '{label}', using generic hint")
            normalized.append(
                ReplySuggestion(
                    type=label,
                    msg=self._reply_text(reply),
                    category=category,
                    hint=category.hint,
                )
            )
        return normalized

    @staticmethod
    def _reply_text(reply: dict) -> Any:
        for key in REPLY_TEXT_KEYS:
            if key in reply:
                return reply[key]
        return None

    @staticmethod
    def _require_text(value: Any, field: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise SchemaViolationError(f"{field} must be a non-empty string", field=field)
        return value

    @staticmethod
    def _require_int_in_range(value: Any, field: str, low: int, high: int) -> None:
        # bool is an int subclass; JSON true/false is not a score
        if isinstance(value, bool) or not isinstance(value, int):
            raise SchemaViolationError(
                f"{field} must be an integer, got {type(value).__name__}", field=field
            )
        if not low <= value <= high:
            raise SchemaViolationError(
                f"{field} must be between {low} and {high}, got {value}", field=field
            )
