"""Test name normalization, comparison and comparison export routes"""
import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Request
from slowapi import Limiter

from app.adapters.export.html_renderer import render_comparison_html
from app.api.downloads import dated_filename, download_response, render_pdf
from app.api.metrics import EXPORTS, NORMALIZER_FALLBACKS
from app.api.schemas import CompareRequest, NormalizeRequest, NormalizeResponse
from app.core.builders.comparison_exporter import to_csv, to_json, to_table
from app.core.extraction.name_normalizer import NameNormalizer
from app.core.models.comparison import ComparisonMatrix
from app.core.ports.export import ExportPort
from app.core.reconciliation.engine import ReconciliationEngine, resolve_mapping

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("csv", "json", "html", "pdf")
EXPORT_PREFIX = "сравнение-анализов"


def create_comparison_router(
    engine: ReconciliationEngine,
    normalizer: Optional[NameNormalizer],
    export_adapter: Optional[ExportPort],
    limiter: Limiter,
) -> APIRouter:
    """Create comparison router.

    Args:
        engine: Reconciliation engine (owns the normalizer call for /compare)
        normalizer: Name normalizer exposed directly by /normalize-tests
        export_adapter: HTML-to-PDF service for PDF exports
        limiter: slowapi limiter owned by the application

    Returns:
        FastAPI router with normalize, compare and export endpoints
    """
    router = APIRouter()

    async def build_matrix(body: CompareRequest) -> ComparisonMatrix:
        reports = [r.to_snapshot() for r in body.reports]
        if body.mappings is not None:
            return engine.build_matrix(reports, body.mappings)

        matrix = await engine.reconcile(reports)
        if matrix.normalization_error is not None:
            NORMALIZER_FALLBACKS.inc()
        return matrix

    @router.post("/api/v1/normalize-tests", response_model=NormalizeResponse)
    @limiter.limit("30/minute")
    async def normalize_tests(request: Request, body: NormalizeRequest):
        """Map raw test names to canonical names (identity on failure)"""
        names: List[str] = list(dict.fromkeys(body.test_names))
        result = await normalizer.normalize(names) if normalizer is not None else None

        if result is not None and not result.ok:
            NORMALIZER_FALLBACKS.inc()

        return NormalizeResponse(
            mappings=resolve_mapping(names, result),
            normalized=result is not None and result.ok,
            error=str(result.error) if result is not None and result.error else None,
        )

    @router.post("/api/v1/compare")
    @limiter.limit("30/minute")
    async def compare_reports(request: Request, body: CompareRequest):
        """Reconcile reports into the comparison table payload"""
        matrix = await build_matrix(body)
        return to_table(matrix, body.categories)

    @router.post("/api/v1/compare/export/{fmt}")
    @limiter.limit("20/minute")
    async def export_comparison(request: Request, fmt: str, body: CompareRequest):
        """Download the comparison as CSV, JSON, HTML or PDF"""
        fmt = fmt.lower()
        if fmt not in EXPORT_FORMATS:
            raise HTTPException(
                status_code=400,
                detail=f"Unsupported export format: {fmt}. Use one of {', '.join(EXPORT_FORMATS)}",
            )

        matrix = await build_matrix(body)
        filename = dated_filename(EXPORT_PREFIX, fmt)

        if fmt == "csv":
            content = to_csv(matrix, body.categories)
        elif fmt == "json":
            content = to_json(matrix, body.categories)
        else:
            content = render_comparison_html(matrix, categories=body.categories)
            if fmt == "pdf":
                content = await render_pdf(export_adapter, content, "comparison")

        EXPORTS.labels(kind="comparison", format=fmt, outcome="ok").inc()
        logger.info(f"Exported comparison of {len(matrix.reports)} reports as {fmt}")
        return download_response(content, fmt, filename)

    return router

