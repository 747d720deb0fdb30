# Service Layer

from overthinkr.services.gemini_proxy import GeminiProxy
from overthinkr.services.inference_client import InferenceClient, RawEnvelope
from overthinkr.services.metrics_collector import MetricsCollector, metrics
from overthinkr.services.pipeline import AnalysisPipeline, PipelineRun
from overthinkr.services.prompt_compiler import PromptCompiler, compile_prompt
from overthinkr.services.response_parser import ResponseParser
from overthinkr.services.session import AnalysisSession, Submission
from overthinkr.services.text_extractor import TextExtractor

__all__ = [
    # Analysis pipeline
    "AnalysisPipeline",
    "PipelineRun",
    "PromptCompiler",
    "compile_prompt",
    "InferenceClient",
    "RawEnvelope",
    "ResponseParser",
    # Caller state
    "AnalysisSession",
    "Submission",
    # Collaborators
    "GeminiProxy",
    "TextExtractor",
    # Observability
    "MetricsCollector",
    "metrics",
]
