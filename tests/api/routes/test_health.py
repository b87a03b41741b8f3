"""Tests for health check routes"""
import time
from unittest.mock import AsyncMock, MagicMock

from fastapi import FastAPI
from fastapi.testclient import TestClient
from app.api.routes.health import create_health_router


def make_client(**kwargs):
    app = FastAPI()
    app.include_router(create_health_router(start_time=time.time(), **kwargs))
    return TestClient(app)


class TestHealthRoutes:
    """Test health check and metrics endpoints"""

    def test_health_check_returns_healthy(self):
        """Should return healthy status"""
        response = make_client().get("/api/v1/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "uptime" in data
        assert "version" in data
        assert data["pipeline_status"]["pdf_export"] == "unavailable"

    def test_health_reports_pdf_service(self):
        """Should check the export service"""
        export_adapter = MagicMock()
        export_adapter.health_check = AsyncMock(return_value=True)

        data = make_client(
            export_adapter=export_adapter,
            ocr_configured=lambda: True,
            llm_provider="bedrock",
        ).get("/api/v1/health").json()

        assert data["pipeline_status"]["pdf_export"] == "available"
        assert data["system_info"] == {"llm_provider": "bedrock", "ocr_configured": True}

    def test_metrics_endpoint(self):
        """Should return Prometheus metrics"""
        response = make_client().get("/metrics")
        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]
