"""Service performance metrics for the tone analysis API"""
import threading
from collections import Counter, deque
from dataclasses import dataclass, field

from overthinkr.core.exceptions import FailureKind


ENDPOINTS = ("analysis", "proxy", "ocr", "health", "metrics")


@dataclass
class MetricsCollector:
    """
    Metrics collector for tracking API performance.

    Tracks:
    - Request counts by endpoint
    - Success/error counts
    - Analysis failures by kind
    - Inference and OCR latencies

    Thread-safe for concurrent access.
    """

    requests_total: Counter = field(default_factory=Counter)
    success_total: int = 0
    error_total: int = 0
    failures_by_kind: Counter = field(default_factory=Counter)

    # Latency tracking (keep last 1000 samples, in seconds)
    analysis_latencies: deque = field(default_factory=lambda: deque(maxlen=1000))
    inference_latencies: deque = field(default_factory=lambda: deque(maxlen=1000))
    ocr_latencies: deque = field(default_factory=lambda: deque(maxlen=1000))

    _lock: threading.Lock = field(default_factory=threading.Lock)

    def record_request(
        self,
        endpoint: str,
        status_code: int,
        duration_ms: float
    ) -> None:
        """
        Record a request with its outcome and duration.

        Args:
            endpoint: Endpoint name, one of ENDPOINTS
            status_code: HTTP status code
            duration_ms: Request duration in milliseconds
        """
        with self._lock:
            self.requests_total[endpoint] += 1
            if endpoint == "analysis":
                self.analysis_latencies.append(duration_ms / 1000.0)
            elif endpoint == "ocr":
                self.ocr_latencies.append(duration_ms / 1000.0)

            if 200 <= status_code < 400:
                self.success_total += 1
            else:
                self.error_total += 1

    def record_failure(self, kind: FailureKind) -> None:
        with self._lock:
            self.failures_by_kind[kind.value] += 1

    def record_inference(self, duration_ms: float) -> None:
        with self._lock:
            self.inference_latencies.append(duration_ms / 1000.0)

    def _avg(self, times: deque) -> float:
        """Calculate average of time samples."""
        if not times:
            return 0.0
        return sum(times) / len(times)

    def _percentile(self, times: deque, percentile: float) -> float:
        """Calculate percentile of time samples."""
        if not times:
            return 0.0
        sorted_times = sorted(times)
        index = int(len(sorted_times) * percentile)
        return sorted_times[min(index, len(sorted_times) - 1)]

    def get_prometheus_metrics(self) -> str:
        """
        Format metrics as Prometheus text format.

        Returns:
            Prometheus-formatted metrics string
        """
        with self._lock:
            lines = [
                "# HELP overthinkr_requests_total Total number of requests by endpoint",
                "# TYPE overthinkr_requests_total counter",
            ]
            lines.extend(
                f'overthinkr_requests_total{{endpoint="{endpoint}"}} {self.requests_total[endpoint]}'
                for endpoint in ENDPOINTS
            )
            lines.extend([
                "",
                "# HELP overthinkr_success_total Total successful requests",
                "# TYPE overthinkr_success_total counter",
                f"overthinkr_success_total {self.success_total}",
                "",
                "# HELP overthinkr_error_total Total failed requests",
                "# TYPE overthinkr_error_total counter",
                f"overthinkr_error_total {self.error_total}",
                "",
                "# HELP overthinkr_analysis_failures_total Analysis failures by kind",
                "# TYPE overthinkr_analysis_failures_total counter",
            ])
            lines.extend(
                f'overthinkr_analysis_failures_total{{kind="{kind.value}"}} {self.failures_by_kind[kind.value]}'
                for kind in FailureKind
            )
            for name, samples in (
                ("analysis", self.analysis_latencies),
                ("inference", self.inference_latencies),
                ("ocr", self.ocr_latencies),
            ):
                lines.extend([
                    "",
                    f"# HELP overthinkr_{name}_duration_seconds {name.capitalize()} duration",
                    f"# TYPE overthinkr_{name}_duration_seconds gauge",
                    f'overthinkr_{name}_duration_seconds{{stat="avg"}} {self._avg(samples):.6f}',
                    f'overthinkr_{name}_duration_seconds{{stat="p95"}} {self._percentile(samples, 0.95):.6f}',
                ])

            total_requests = self.success_total + self.error_total
            error_rate = self.error_total / total_requests if total_requests > 0 else 0.0
            lines.extend([
                "",
                "# HELP overthinkr_error_rate Error rate (errors/total)",
                "# TYPE overthinkr_error_rate gauge",
                f"overthinkr_error_rate {error_rate:.6f}",
            ])

            return "\n".join(lines)


# Global metrics instance
metrics = MetricsCollector()
