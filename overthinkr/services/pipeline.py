"""Analysis pipeline: message -> prompt -> envelope -> AnalysisResult.

The pipeline holds no state between requests. Each call walks
Idle -> Compiling -> AwaitingInference -> Validating -> Succeeded, or stops
in Failed with the failure kind. Only classified AnalysisErrors leave it.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Protocol

from overthinkr.core.exceptions import AnalysisError, FailureKind
from overthinkr.models.analysis import AnalysisResult, PipelineState
from overthinkr.services.inference_client import RawEnvelope
from overthinkr.services.prompt_compiler import PromptCompiler
from overthinkr.services.response_parser import ResponseParser


logger = logging.getLogger(__name__)


class Inferrer(Protocol):
    async def infer(self, prompt: str) -> RawEnvelope: ...


@dataclass
class PipelineRun:
    """Trace of one request through the pipeline."""

    states: list[PipelineState] = field(default_factory=lambda: [PipelineState.IDLE])
    failure: FailureKind | None = None
    inference_ms: float | None = None

    @property
    def state(self) -> PipelineState:
        return self.states[-1]

    def advance(self, state: PipelineState) -> None:
        logger.debug(f"Pipeline state: {self.state.value} -> {state.value}")
        self.states.append(state)


class AnalysisPipeline:
    """Runs the three analysis stages strictly in order."""

    def __init__(
        self,
        client: Inferrer,
        compiler: PromptCompiler | None = None,
        parser: ResponseParser | None = None,
    ):
        self.client = client
        self.compiler = compiler or PromptCompiler()
        self.parser = parser or ResponseParser()

    async def analyze(self, message: str, run: PipelineRun | None = None) -> AnalysisResult:
        """Analyze one message.

        Args:
            message: Text to analyze. Callers reject empty input beforehand.
            run: Optional trace to record state transitions into.

        Returns:
            The validated AnalysisResult.

        Raises:
            AnalysisError: The classified failure; no partial result exists.
        """
        run = run or PipelineRun()
        try:
            run.advance(PipelineState.COMPILING)
            prompt = self.compiler.compile(message)

            run.advance(PipelineState.AWAITING_INFERENCE)
            start_time = time.time()
            envelope = await self.client.infer(prompt)
            run.inference_ms = (time.time() - start_time) * 1000

            run.advance(PipelineState.VALIDATING)
            result = self.parser.parse(envelope)
        except AnalysisError as e:
            run.failure = e.kind
            run.advance(PipelineState.FAILED)
            logger.warning(
                f"Analysis failed at {run.states[-2].value}: [{e.error_code}] {e.message}"
            )
            raise

        run.advance(PipelineState.SUCCEEDED)
        logger.info(
            f"Analysis succeeded: tone={result.tone!r}, score={result.score}, "
            f"confidence={result.confidence}, message_chars={len(message)}"
        )
        return result
