"""
Application configuration using Pydantic Settings.
Supports loading from environment variables and .env files.
"""

import logging
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiConfig(BaseSettings):
    """Upstream model settings.

    Only the proxy boundary reads this section. The credential is kept as a
    SecretStr so it never shows up in reprs or logs.
    """

    model_config = SettingsConfigDict(env_prefix="GEMINI_", extra="ignore")

    key: SecretStr = SecretStr("")
    model: str = "gemini-3-flash-preview"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout_seconds: float = Field(default=60.0, gt=0.0)

    @property
    def has_key(self) -> bool:
        return bool(self.key.get_secret_value().strip())


class InferenceConfig(BaseSettings):
    """Where the inference client sends prompts."""

    model_config = SettingsConfigDict(env_prefix="INFERENCE_", extra="ignore")

    proxy_url: str = "http://127.0.0.1:8000/api/analyze"
    timeout_seconds: float = Field(default=30.0, gt=0.0)


class OCRConfig(BaseSettings):
    """Tesseract settings for screenshot text extraction."""

    model_config = SettingsConfigDict(env_prefix="OCR_", extra="ignore")

    language: str = "eng"
    tesseract_cmd: Optional[str] = None
    max_image_bytes: int = Field(default=10 * 1024 * 1024, gt=0)


class LoggingConfig(BaseSettings):
    """Logging configuration for the service and noisy libraries."""

    model_config = SettingsConfigDict(env_prefix="LOG_", extra="ignore")

    level: str = Field(
        default="INFO",
        description="Main logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    submodule_level: str = Field(
        default="WARNING",
        description="Logging level for httpx/httpcore",
    )
    use_json: bool = Field(
        default=False,
        description="Use JSON structured logging format",
    )
    enable_request_logging: bool = Field(
        default=True,
        description="Enable request/response logging middleware",
    )

    def get_level(self) -> int:
        """Convert string level to logging constant."""
        return getattr(logging, self.level.upper(), logging.INFO)

    def get_submodule_level(self) -> int:
        """Convert string submodule level to logging constant."""
        return getattr(logging, self.submodule_level.upper(), logging.WARNING)


class AppConfig(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application settings
    app_name: str = "Overthinkr Tone Analysis Service"
    app_version: str = "0.1.0"
    debug: bool = False

    # API settings
    api_prefix: str = "/api/v1"

    # CORS settings
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = False
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Sub-configurations
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    inference: InferenceConfig = Field(default_factory=InferenceConfig)
    ocr: OCRConfig = Field(default_factory=OCRConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def setup_logging(self) -> None:
        """Configure the root logger and quiet the HTTP client libraries."""
        from overthinkr.api.middleware import setup_structured_logging

        setup_structured_logging(
            level=self.logging.get_level(),
            use_json=self.logging.use_json,
        )

        submodule_level = self.logging.get_submodule_level()
        for module_name in ["httpx", "httpcore", "PIL"]:
            logging.getLogger(module_name).setLevel(submodule_level)

        logging.getLogger(__name__).info(
            f"Logging configured: level={self.logging.level}, "
            f"submodule_level={self.logging.submodule_level}, "
            f"json={self.logging.use_json}, "
            f"request_logging={self.logging.enable_request_logging}"
        )


# Global configuration instance
settings = AppConfig()
