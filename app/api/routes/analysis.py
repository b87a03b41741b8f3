"""Report analysis, OCR passphrase and chat routes"""
import logging
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse
from slowapi import Limiter

from app.api.metrics import ANALYSES
from app.api.middleware.authentication import (
    PassphraseGuard,
    client_ip,
    get_ocr_passphrase,
    require_ocr_passphrase,
    verify_passphrase,
)
from app.api.schemas import (
    AnalyzeResponse,
    ChatRequest,
    ChatResponse,
    VerifyOcrRequest,
    VerifyOcrResponse,
)
from app.config.limits import MAX_UPLOAD_BYTES
from app.core.exceptions import ExtractionError, LLMError, OCRError
from app.core.extraction.chat_assistant import ChatAssistant, build_context
from app.core.extraction.report_analyzer import ReportAnalyzer

logger = logging.getLogger(__name__)

SUPPORTED_UPLOAD_TYPES = ("application/pdf", "image/")


def _is_supported(content_type: str) -> bool:
    return any(content_type.startswith(prefix) for prefix in SUPPORTED_UPLOAD_TYPES)


def create_analysis_router(
    analyzer: ReportAnalyzer,
    chat_assistant: ChatAssistant,
    guard: PassphraseGuard,
    limiter: Limiter,
) -> APIRouter:
    """Create report analysis router.

    Args:
        analyzer: Extraction pipeline for uploaded reports
        chat_assistant: Q&A over test results
        guard: Per-IP lockout for failed passphrase attempts
        limiter: slowapi limiter owned by the application

    Returns:
        FastAPI router with analyze, verify-ocr and chat endpoints
    """
    router = APIRouter()

    @router.post("/api/v1/analyze", response_model=AnalyzeResponse)
    @limiter.limit("10/minute")
    async def analyze_report(
        request: Request,
        file: UploadFile = File(...),
        ocr_enabled: bool = Form(False),
        passphrase: Optional[str] = Form(None),
    ):
        """Extract test results from an uploaded report image or PDF"""
        content_type = (file.content_type or "").lower()
        if not _is_supported(content_type):
            raise HTTPException(
                status_code=400,
                detail="Only PDF files and images are supported",
            )

        content = await file.read()
        if not content:
            raise HTTPException(status_code=400, detail="Uploaded file is empty")
        if len(content) > MAX_UPLOAD_BYTES:
            raise HTTPException(
                status_code=413,
                detail=f"File too large. Maximum size is {MAX_UPLOAD_BYTES // (1024 * 1024)} MB",
            )

        if ocr_enabled:
            require_ocr_passphrase(passphrase)

        pipeline = "ocr" if ocr_enabled else "vision"
        logger.info(f"Analyzing {file.filename} ({content_type}, {len(content)} bytes) via {pipeline}")

        try:
            report = await analyzer.analyze(
                content,
                content_type,
                file_name=file.filename,
                use_ocr=ocr_enabled,
            )
        except ExtractionError as e:
            ANALYSES.labels(pipeline=pipeline, outcome="no_results").inc()
            raise HTTPException(status_code=422, detail=str(e))
        except (OCRError, LLMError) as e:
            ANALYSES.labels(pipeline=pipeline, outcome="failed").inc()
            logger.error(f"Analysis of {file.filename} failed: {e}")
            raise HTTPException(status_code=502, detail=str(e))

        ANALYSES.labels(pipeline=pipeline, outcome="ok").inc()
        return AnalyzeResponse(**report.to_dict())

    @router.post("/api/v1/verify-ocr", response_model=VerifyOcrResponse)
    async def verify_ocr(request: Request, body: VerifyOcrRequest):
        """Check the OCR passphrase, locking the client out after a failure"""
        ip = client_ip(request)

        retry_after = guard.retry_after(ip)
        if retry_after is not None:
            return JSONResponse(
                status_code=429,
                content={"valid": False, "retryAfter": retry_after},
            )

        if not body.passphrase:
            raise HTTPException(status_code=400, detail="Passphrase is required")

        if get_ocr_passphrase() is None:
            raise HTTPException(status_code=500, detail="OCR mode is not configured on the server.")

        if not verify_passphrase(body.passphrase):
            guard.record_failure(ip)
            logger.warning(f"Failed OCR passphrase attempt from {ip}")
            return JSONResponse(
                status_code=401,
                content={"valid": False, "retryAfter": int(guard.cooldown_seconds)},
            )

        guard.reset(ip)
        return VerifyOcrResponse(valid=True)

    @router.post("/api/v1/chat", response_model=ChatResponse)
    @limiter.limit("30/minute")
    async def chat(request: Request, body: ChatRequest):
        """Answer a question about the supplied test results"""
        context = body.context or ""
        if not context and body.reports:
            context = build_context(r.to_snapshot() for r in body.reports)

        try:
            answer = await chat_assistant.answer(body.message, context)
        except LLMError as e:
            logger.error(f"Chat failed: {e}")
            raise HTTPException(status_code=502, detail="Failed to get response from the assistant")

        return ChatResponse(response=answer)

    return router
