"""Caller-owned analysis state.

AnalysisSession keeps only the latest AnalysisResult and the latest error.
When requests overlap, the last submitted one wins: a result or error that
arrives for a superseded request is dropped instead of overwriting fresher
state. A failed request leaves the previous result in place.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from overthinkr.core.exceptions import AnalysisError, ValidationError
from overthinkr.models.analysis import AnalysisResult
from overthinkr.services.pipeline import AnalysisPipeline, PipelineRun


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Submission:
    """Outcome of one submit() call."""

    ticket: int
    applied: bool
    result: Optional[AnalysisResult] = None
    error: Optional[AnalysisError] = None


class AnalysisSession:
    """Holds the most recent analysis for one user.

    Intended to be driven from a single event loop; the only coordination
    needed is the submission counter, which is read and written between
    awaits.
    """

    def __init__(self, pipeline: AnalysisPipeline):
        self.pipeline = pipeline
        self.result: Optional[AnalysisResult] = None
        self.error: Optional[AnalysisError] = None
        self._latest_ticket = 0
        self._in_flight = 0

    @property
    def is_processing(self) -> bool:
        return self._in_flight > 0

    @property
    def latest_ticket(self) -> int:
        return self._latest_ticket

    async def submit(self, text: str) -> Submission:
        """Run one analysis and apply it if no newer request was submitted.

        Args:
            text: Message text; surrounding whitespace is ignored.

        Returns:
            Submission describing whether the outcome was applied.

        Raises:
            ValidationError: If the text is empty.
        """
        message = text.strip()
        if not message:
            raise ValidationError("Message text must not be empty")

        self._latest_ticket += 1
        ticket = self._latest_ticket
        self._in_flight += 1
        try:
            result = await self.pipeline.analyze(message, PipelineRun())
        except AnalysisError as e:
            applied = self._is_current(ticket)
            if applied:
                self.error = e
            return Submission(ticket=ticket, applied=applied, error=e)
        finally:
            self._in_flight -= 1

        applied = self._is_current(ticket)
        if applied:
            self.result = result
            self.error = None
        return Submission(ticket=ticket, applied=applied, result=result)

    def _is_current(self, ticket: int) -> bool:
        if ticket != self._latest_ticket:
            logger.info(
                f"Discarding outcome of superseded request {ticket} "
                f"(latest is {self._latest_ticket})"
            )
            return False
        return True
