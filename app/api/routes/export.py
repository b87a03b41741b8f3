"""Single report export and raw HTML-to-PDF routes"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from slowapi import Limiter

from app.adapters.export.html_renderer import render_report_html
from app.api.downloads import dated_filename, download_response, ensure_extension, render_pdf
from app.api.metrics import EXPORTS
from app.api.schemas import ExportPdfRequest, ReportExportRequest
from app.core.builders.report_exporter import report_to_csv, report_to_json
from app.core.ports.export import ExportPort

logger = logging.getLogger(__name__)

REPORT_FORMATS = ("csv", "json", "html", "pdf")
REPORT_PREFIX = "blood-test-results"


def create_export_router(export_adapter: Optional[ExportPort], limiter: Limiter) -> APIRouter:
    """Create export router.

    Args:
        export_adapter: HTML-to-PDF service
        limiter: slowapi limiter owned by the application

    Returns:
        FastAPI router with export endpoints
    """
    router = APIRouter()

    @router.post("/api/v1/export-pdf")
    @limiter.limit("10/minute")
    async def export_pdf(request: Request, body: ExportPdfRequest):
        """Render a self-contained HTML document to an A4 PDF"""
        filename = ensure_extension(body.filename, "pdf", "report.pdf")
        pdf = await render_pdf(export_adapter, body.html, "html")
        EXPORTS.labels(kind="html", format="pdf", outcome="ok").inc()
        return download_response(pdf, "pdf", filename)

    @router.post("/api/v1/reports/export/{fmt}")
    @limiter.limit("20/minute")
    async def export_report(request: Request, fmt: str, body: ReportExportRequest):
        """Download one analyzed report as CSV, JSON, HTML or PDF"""
        fmt = fmt.lower()
        if fmt not in REPORT_FORMATS:
            raise HTTPException(
                status_code=400,
                detail=f"Unsupported export format: {fmt}. Use one of {', '.join(REPORT_FORMATS)}",
            )

        report = body.report.to_snapshot()
        filename = ensure_extension(body.filename, fmt, dated_filename(REPORT_PREFIX, fmt))

        if fmt == "csv":
            content = report_to_csv(report)
        elif fmt == "json":
            content = report_to_json(report)
        else:
            content = render_report_html(report)
            if fmt == "pdf":
                content = await render_pdf(export_adapter, content, "report")

        EXPORTS.labels(kind="report", format=fmt, outcome="ok").inc()
        logger.info(f"Exported report with {len(report.tests)} tests as {fmt}")
        return download_response(content, fmt, filename)

    return router
