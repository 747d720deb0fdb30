"""FastAPI dependency injection.

Provides singleton service instances for the routes. The proxy and the
inference client are built from separate config sections so the client
never holds the model credential.
"""

import logging
from typing import Annotated

from fastapi import Depends

from overthinkr.core.config import AppConfig, settings
from overthinkr.services.gemini_proxy import GeminiProxy
from overthinkr.services.inference_client import InferenceClient
from overthinkr.services.metrics_collector import MetricsCollector, metrics
from overthinkr.services.pipeline import AnalysisPipeline
from overthinkr.services.response_parser import ResponseParser
from overthinkr.services.text_extractor import TextExtractor


logger = logging.getLogger(__name__)


# Global service instances (singleton pattern)
_gemini_proxy: GeminiProxy | None = None
_pipeline: AnalysisPipeline | None = None
_text_extractor: TextExtractor | None = None


def get_settings() -> AppConfig:
    return settings


def get_gemini_proxy() -> GeminiProxy:
    """Get the proxy boundary, the only holder of the model key."""
    global _gemini_proxy

    if _gemini_proxy is None:
        _gemini_proxy = GeminiProxy(settings.gemini)
        logger.info(
            f"GeminiProxy initialized: model={settings.gemini.model}, "
            f"key_configured={_gemini_proxy.is_configured}"
        )

    return _gemini_proxy


def get_analysis_pipeline() -> AnalysisPipeline:
    """Get the analysis pipeline wired to the proxy URL."""
    global _pipeline

    if _pipeline is None:
        client = InferenceClient(
            proxy_url=settings.inference.proxy_url,
            timeout=settings.inference.timeout_seconds,
        )
        _pipeline = AnalysisPipeline(client=client, parser=ResponseParser())
        logger.info(f"AnalysisPipeline initialized: proxy_url={settings.inference.proxy_url}")

    return _pipeline


def get_text_extractor() -> TextExtractor:
    global _text_extractor

    if _text_extractor is None:
        _text_extractor = TextExtractor(settings.ocr)
        logger.info(f"TextExtractor initialized: language={settings.ocr.language}")

    return _text_extractor


def get_metrics_collector() -> MetricsCollector:
    return metrics


# Type aliases for cleaner route signatures
SettingsDep = Annotated[AppConfig, Depends(get_settings)]
GeminiProxyDep = Annotated[GeminiProxy, Depends(get_gemini_proxy)]
AnalysisPipelineDep = Annotated[AnalysisPipeline, Depends(get_analysis_pipeline)]
TextExtractorDep = Annotated[TextExtractor, Depends(get_text_extractor)]
MetricsCollectorDep = Annotated[MetricsCollector, Depends(get_metrics_collector)]


def reset_dependencies() -> None:
    """Reset all service instances.

    Used by tests to get a clean state between runs.
    """
    global _gemini_proxy, _pipeline, _text_extractor

    logger.info("Resetting dependencies")
    _gemini_proxy = None
    _pipeline = None
    _text_extractor = None
