"""Tests for configuration loading from the environment."""

import logging

from overthinkr.core.config import (
    AppConfig,
    GeminiConfig,
    InferenceConfig,
    LoggingConfig,
    OCRConfig,
)


def test_gemini_defaults(monkeypatch):
    monkeypatch.delenv("GEMINI_KEY", raising=False)
    monkeypatch.delenv("GEMINI_MODEL", raising=False)

    config = GeminiConfig()

    assert config.model == "gemini-3-flash-preview"
    assert config.base_url == "https://generativelanguage.googleapis.com/v1beta"
    assert config.has_key is False


def test_gemini_key_from_env(monkeypatch):
    monkeypatch.setenv("GEMINI_KEY", "abc123")
    monkeypatch.setenv("GEMINI_MODEL", "gemini-other")

    config = GeminiConfig()

    assert config.has_key is True
    assert config.key.get_secret_value() == "abc123"
    assert config.model == "gemini-other"
    assert "abc123" not in repr(config)


def test_inference_config_from_env(monkeypatch):
    monkeypatch.setenv("INFERENCE_PROXY_URL", "http://proxy.internal/api/analyze")
    monkeypatch.setenv("INFERENCE_TIMEOUT_SECONDS", "12.5")

    config = InferenceConfig()

    assert config.proxy_url == "http://proxy.internal/api/analyze"
    assert config.timeout_seconds == 12.5


def test_inference_config_has_no_credential():
    assert "key" not in InferenceConfig.model_fields


def test_ocr_defaults(monkeypatch):
    monkeypatch.delenv("OCR_LANGUAGE", raising=False)

    config = OCRConfig()

    assert config.language == "eng"
    assert config.tesseract_cmd is None


def test_logging_levels(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_SUBMODULE_LEVEL", "nonsense")

    config = LoggingConfig()

    assert config.get_level() == logging.DEBUG
    assert config.get_submodule_level() == logging.WARNING


def test_app_config_sections(monkeypatch):
    monkeypatch.setenv("GEMINI_KEY", "k")

    config = AppConfig(_env_file=None)

    assert config.api_prefix == "/api/v1"
    assert config.gemini.has_key is True
    assert config.inference.timeout_seconds == 30.0
