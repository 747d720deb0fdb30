"""
Overthinkr service entry point.

Builds the FastAPI app: CORS, request logging, the error contract and the
three route groups (health, the model proxy, and /api/v1).

Run with: uvicorn overthinkr.main:app
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from overthinkr.api.middleware import RequestLoggingMiddleware
from overthinkr.core.config import settings
from overthinkr.core.exceptions import (
    AnalysisError,
    AppException,
    ValidationError,
    log_exception,
)


logger = logging.getLogger(__name__)

GENERIC_ERROR = {
    "error": "internal_error",
    "message": "An unexpected error occurred",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings.setup_logging()
    log_configuration()
    yield
    logger.info(f"{settings.app_name} shutting down")


def log_configuration() -> None:
    """Log the effective configuration on startup, without secrets."""
    logger.info(
        f"Model: {settings.gemini.model} at {settings.gemini.base_url} "
        f"(key configured: {settings.gemini.has_key})"
    )
    logger.info(
        f"Inference proxy: {settings.inference.proxy_url} "
        f"(timeout {settings.inference.timeout_seconds}s)"
    )
    logger.info(f"OCR language: {settings.ocr.language}")


def create_app() -> FastAPI:
    """Build the application from the global settings."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Decodes the subtext of short messages and suggests replies.",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Browsers reject credentialed requests to a wildcard origin
    allow_credentials = settings.cors_allow_credentials and "*" not in settings.cors_origins
    if settings.cors_allow_credentials and not allow_credentials:
        logger.warning("Ignoring cors_allow_credentials because cors_origins contains '*'")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    if settings.logging.enable_request_logging:
        app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)
    register_routes(app)
    return app


def _error_response(status_code: int, content: dict) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """Map exceptions to the ``{"error", "message"}`` body.

    Handlers resolve by exception class, most specific first. Internal
    messages and details go to the log only.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        log_exception(exc, f"Rejected {request.url.path}")
        return _error_response(400, {"error": exc.error_code, "message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning(f"Invalid request body for {request.url.path}: {len(exc.errors())} error(s)")
        return _error_response(
            422, {"error": "validation_error", "message": "Request body is invalid"}
        )

    @app.exception_handler(AnalysisError)
    async def handle_analysis_error(request: Request, exc: AnalysisError) -> JSONResponse:
        log_exception(exc, f"Analysis failed ({exc.kind.value})")
        return _error_response(exc.status_code, exc.to_public_dict())

    @app.exception_handler(AppException)
    async def handle_app_exception(request: Request, exc: AppException) -> JSONResponse:
        log_exception(exc, "Application error")
        return _error_response(500, GENERIC_ERROR)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled {type(exc).__name__} on {request.url.path}")
        return _error_response(500, GENERIC_ERROR)


def register_routes(app: FastAPI) -> None:
    from overthinkr.api.health import router as health_router
    from overthinkr.api.proxy import router as proxy_router
    from overthinkr.api.router import api_router

    app.include_router(health_router)
    app.include_router(proxy_router)
    app.include_router(api_router)


app = create_app()
