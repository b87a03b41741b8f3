"""Health check and monitoring routes"""
import time
from datetime import datetime
from typing import Callable, Optional

from fastapi import APIRouter, Request
from fastapi.responses import Response
from prometheus_client import generate_latest

from app.api.schemas import HealthResponse
from app.core.ports.export import ExportPort


def create_health_router(
    start_time: float,
    export_adapter: Optional[ExportPort] = None,
    ocr_configured: Optional[Callable[[], bool]] = None,
    llm_provider: str = "openrouter",
) -> APIRouter:
    """Create health check router.

    Args:
        start_time: Server start time for uptime calculation
        export_adapter: PDF rendering service to check
        ocr_configured: Callable that reports whether OCR mode is available
        llm_provider: Name of the configured LLM provider

    Returns:
        FastAPI router with health endpoints
    """
    router = APIRouter()

    @router.get("/api/v1/health", response_model=HealthResponse)
    async def health_check(request: Request):
        """Health check endpoint"""
        pdf_available = await export_adapter.health_check() if export_adapter else False

        return HealthResponse(
            status="healthy",
            timestamp=datetime.now(),
            version="1.0.0",
            uptime=time.time() - start_time,
            system_info={
                "llm_provider": llm_provider,
                "ocr_configured": ocr_configured() if ocr_configured else False,
            },
            pipeline_status={
                "pdf_export": "available" if pdf_available else "unavailable",
                "status": "running",
            },
        )

    @router.get("/metrics")
    async def get_metrics():
        """Prometheus metrics endpoint"""
        return Response(generate_latest(), media_type="text/plain")

    return router
