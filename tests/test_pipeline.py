"""Tests for the analysis pipeline state machine."""

import json

import httpx
import pytest
from unittest.mock import AsyncMock

from overthinkr.core.exceptions import (
    FailureKind,
    InvalidJsonError,
    SchemaViolationError,
    TransportError,
)
from overthinkr.models.analysis import PipelineState
from overthinkr.services.inference_client import InferenceClient
from overthinkr.services.pipeline import AnalysisPipeline, PipelineRun
from overthinkr.services.prompt_compiler import compile_prompt


@pytest.fixture
def client(valid_envelope):
    mock = AsyncMock()
    mock.infer.return_value = valid_envelope
    return mock


@pytest.mark.asyncio
async def test_successful_run_walks_every_state(client):
    run = PipelineRun()

    result = await AnalysisPipeline(client).analyze("k.", run)

    assert result.tone == "Passive-Aggressive"
    assert run.states == [
        PipelineState.IDLE,
        PipelineState.COMPILING,
        PipelineState.AWAITING_INFERENCE,
        PipelineState.VALIDATING,
        PipelineState.SUCCEEDED,
    ]
    assert run.failure is None
    assert run.inference_ms is not None


@pytest.mark.asyncio
async def test_client_receives_compiled_prompt(client):
    await AnalysisPipeline(client).analyze("k.")

    client.infer.assert_awaited_once_with(compile_prompt("k."))


@pytest.mark.asyncio
async def test_transport_failure_stops_before_validation(client):
    client.infer.side_effect = TransportError("connection refused")
    run = PipelineRun()

    with pytest.raises(TransportError):
        await AnalysisPipeline(client).analyze("k.", run)

    assert run.state is PipelineState.FAILED
    assert run.failure is FailureKind.TRANSPORT
    assert PipelineState.VALIDATING not in run.states
    assert run.states[-2] is PipelineState.AWAITING_INFERENCE


@pytest.mark.asyncio
async def test_invalid_json_fails_in_validation(client, make_envelope):
    client.infer.return_value = make_envelope("Sure thing")
    run = PipelineRun()

    with pytest.raises(InvalidJsonError):
        await AnalysisPipeline(client).analyze("k.", run)

    assert run.states[-2:] == [PipelineState.VALIDATING, PipelineState.FAILED]
    assert run.failure is FailureKind.INVALID_JSON


@pytest.mark.asyncio
async def test_schema_violation_yields_no_result(client, make_envelope, make_document):
    client.infer.return_value = make_envelope(json.dumps(make_document(score=42)))
    run = PipelineRun()

    with pytest.raises(SchemaViolationError):
        await AnalysisPipeline(client).analyze("k.", run)

    assert run.failure is FailureKind.SCHEMA_VIOLATION


@pytest.mark.asyncio
async def test_pipeline_keeps_no_state_between_runs(client):
    pipeline = AnalysisPipeline(client)
    first, second = PipelineRun(), PipelineRun()

    await pipeline.analyze("k.", first)
    await pipeline.analyze("fine.", second)

    assert first.states == second.states
    assert client.infer.await_count == 2


@pytest.mark.asyncio
async def test_message_with_lone_surrogate_reaches_proxy(valid_envelope):
    sent = []

    def handler(request: httpx.Request) -> httpx.Response:
        sent.append(json.loads(request.content)["text"])
        return httpx.Response(200, json=valid_envelope)

    client = InferenceClient(
        "http://proxy.test/api/analyze", transport=httpx.MockTransport(handler)
    )
    run = PipelineRun()

    result = await AnalysisPipeline(client).analyze("hi \ud83d", run)

    assert result.score == 7
    assert run.state is PipelineState.SUCCEEDED
    assert sent == [compile_prompt("hi \ud83d")]
