"""Tests for the health and metrics endpoints."""

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr
from unittest.mock import Mock

from overthinkr.core.config import GeminiConfig
from overthinkr.core.dependencies import (
    get_gemini_proxy,
    get_metrics_collector,
    get_text_extractor,
    reset_dependencies,
)
from overthinkr.core.exceptions import FailureKind
from overthinkr.main import app
from overthinkr.services.gemini_proxy import GeminiProxy
from overthinkr.services.metrics_collector import MetricsCollector


@pytest.fixture
def collector():
    return MetricsCollector()


@pytest.fixture
def client(collector):
    reset_dependencies()
    extractor = Mock()
    extractor.is_available.return_value = True
    app.dependency_overrides[get_text_extractor] = lambda: extractor
    app.dependency_overrides[get_metrics_collector] = lambda: collector
    yield TestClient(app)
    app.dependency_overrides.clear()
    reset_dependencies()


def _use_key(key: str) -> None:
    proxy = GeminiProxy(GeminiConfig(key=SecretStr(key)))
    app.dependency_overrides[get_gemini_proxy] = lambda: proxy


class TestHealth:
    def test_healthy_with_key(self, client):
        _use_key("secret-key")

        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["checks"] == {"model_key_configured": True, "ocr_available": True}
        assert "secret-key" not in response.text

    def test_degraded_without_key(self, client):
        _use_key("")

        data = client.get("/health").json()

        assert data["status"] == "degraded"
        assert data["checks"]["model_key_configured"] is False


class TestMetrics:
    def test_prometheus_format(self, client, collector):
        collector.record_request("analysis", 200, 120.0)
        collector.record_request("analysis", 502, 80.0)
        collector.record_failure(FailureKind.INVALID_JSON)
        collector.record_inference(95.0)

        response = client.get("/api/v1/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        body = response.text
        assert 'overthinkr_requests_total{endpoint="analysis"} 2' in body
        assert 'overthinkr_analysis_failures_total{kind="invalid_json"} 1' in body
        assert 'overthinkr_analysis_failures_total{kind="transport_error"} 0' in body
        assert "overthinkr_success_total 1" in body
        assert "overthinkr_error_total 1" in body

    def test_metrics_request_is_counted(self, client, collector):
        client.get("/api/v1/metrics")

        assert collector.requests_total["metrics"] == 1


class TestMetricsCollector:
    def test_error_rate(self, collector):
        collector.record_request("proxy", 200, 10.0)
        collector.record_request("proxy", 502, 10.0)
        collector.record_request("proxy", 500, 10.0)
        collector.record_request("proxy", 200, 10.0)

        assert "overthinkr_error_rate 0.500000" in collector.get_prometheus_metrics()

    def test_latency_percentile(self, collector):
        for ms in range(1, 101):
            collector.record_request("ocr", 200, float(ms))

        assert collector._percentile(collector.ocr_latencies, 0.95) == pytest.approx(0.096)
        assert collector._avg(collector.ocr_latencies) == pytest.approx(0.0505)

    def test_empty_collector(self, collector):
        output = collector.get_prometheus_metrics()

        assert "overthinkr_error_rate 0.000000" in output
        assert 'overthinkr_inference_duration_seconds{stat="avg"} 0.000000' in output
