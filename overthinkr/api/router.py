"""
API v1 router.

Aggregates the analysis, OCR and metrics endpoints under /api/v1. The
proxy boundary and health routes are mounted separately in main.py.
"""

from fastapi import APIRouter

from overthinkr.api import analysis, metrics, ocr
from overthinkr.core.config import settings


api_router = APIRouter(prefix=settings.api_prefix)

api_router.include_router(analysis.router)
api_router.include_router(ocr.router)
api_router.include_router(metrics.router)
