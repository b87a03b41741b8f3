#!/usr/bin/env python3
"""
BloodParser REST API
Blood test report analysis and cross-report comparison
"""
import logging
import time
from datetime import datetime
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from app.config.settings import Settings, get_settings
from app.core.exceptions import (
    CoreError,
    ExtractionError,
    PDFError,
    ValidationError,
)
from app.core.extraction import ChatAssistant, NameNormalizer, ReportAnalyzer
from app.core.ports.export import ExportPort
from app.core.ports.llm import LLMPort
from app.core.ports.ocr import OCRPort
from app.core.ports.pdf import PDFPort
from app.core.reconciliation import ReconciliationEngine
from app.adapters.export.gotenberg import GotenbergAdapter
from app.adapters.llm.factory import create_llm_adapter
from app.adapters.ocr.glm_ocr import GlmOcrAdapter
from app.adapters.pdf.pymupdf import PyMuPDFAdapter

from app.api.metrics import REQUEST_COUNT, REQUEST_DURATION
from app.api.middleware.authentication import PassphraseGuard, get_ocr_passphrase
from app.api.routes.analysis import create_analysis_router
from app.api.routes.comparison import create_comparison_router
from app.api.routes.export import create_export_router
from app.api.routes.health import create_health_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

# CoreError subclasses not listed here map to 502 (upstream service failed)
CORE_ERROR_STATUS = {
    ExtractionError: 422,
    PDFError: 422,
    ValidationError: 400,
}


def core_error_status(exc: CoreError) -> int:
    for error_type, status_code in CORE_ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return 502


class BloodParserAPI:
    """BloodParser API wired from ports with dependency injection"""

    def __init__(
        self,
        llm_adapter: Optional[LLMPort] = None,
        ocr_adapter: Optional[OCRPort] = None,
        pdf_adapter: Optional[PDFPort] = None,
        export_adapter: Optional[ExportPort] = None,
        settings: Optional[Settings] = None,
        rate_limit_enabled: bool = True,
    ):
        """Initialize API with dependency injection.

        Args:
            llm_adapter: LLM adapter (default: from settings.llm_provider)
            ocr_adapter: OCR adapter (default: GlmOcrAdapter)
            pdf_adapter: PDF renderer (default: PyMuPDFAdapter)
            export_adapter: HTML-to-PDF service (default: GotenbergAdapter)
            settings: Runtime settings (default: from environment)
            rate_limit_enabled: Apply per-IP request limits
        """
        self.settings = settings or get_settings()

        # Use dependency injection with sensible defaults
        self.llm_adapter = llm_adapter or create_llm_adapter(self.settings)
        self.ocr_adapter = ocr_adapter or GlmOcrAdapter(
            api_key=self.settings.zai_api_key,
            url=self.settings.ocr_url,
            model=self.settings.ocr_model,
        )
        self.pdf_adapter = pdf_adapter or PyMuPDFAdapter()
        self.export_adapter = export_adapter or GotenbergAdapter(self.settings.gotenberg_url)

        self.analyzer = ReportAnalyzer(
            llm=self.llm_adapter,
            vision_model=self.settings.vision_model,
            text_model=self.settings.text_model,
            ocr=self.ocr_adapter,
            pdf=self.pdf_adapter,
        )
        self.normalizer = NameNormalizer(
            llm=self.llm_adapter,
            model=self.settings.normalize_model,
            timeout=self.settings.normalize_timeout,
        )
        self.engine = ReconciliationEngine(
            normalizer=self.normalizer,
            merge_same_day=self.settings.merge_same_day_reports,
        )
        self.chat_assistant = ChatAssistant(llm=self.llm_adapter, model=self.settings.chat_model)
        self.passphrase_guard = PassphraseGuard()

        self.limiter = Limiter(key_func=get_remote_address, enabled=rate_limit_enabled)

        # Start time for uptime
        self.start_time = time.time()

        # Create FastAPI app
        self.app = FastAPI(
            title="BloodParser API",
            description="Blood test report analysis and comparison",
            version="1.0.0",
            docs_url="/docs",
            redoc_url="/redoc",
        )

        # Setup
        self._setup_middleware()
        self._setup_routes()
        self._setup_error_handlers()

    def _setup_middleware(self):
        """Setup API middleware"""
        # CORS
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=self.settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        # Rate limiting
        self.app.state.limiter = self.limiter
        self.app.add_exception_handler(
            RateLimitExceeded, _rate_limit_exceeded_handler)
        self.app.add_middleware(SlowAPIMiddleware)

        # Request logging middleware
        @self.app.middleware("http")
        async def log_requests(request, call_next):
            start_time = time.time()
            response = await call_next(request)
            process_time = time.time() - start_time

            REQUEST_COUNT.labels(
                method=request.method,
                endpoint=request.url.path,
                status=response.status_code,
            ).inc()

            REQUEST_DURATION.observe(process_time)

            logger.info(
                f"{request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s"
            )

            return response

    def _setup_routes(self):
        """Setup API routes from the router factories"""
        @self.app.get("/")
        async def root():
            return {
                "service": "BloodParser API",
                "version": "1.0.0",
                "status": "operational",
                "docs": "/docs",
            }

        self.app.include_router(create_health_router(
            start_time=self.start_time,
            export_adapter=self.export_adapter,
            ocr_configured=lambda: self.ocr_adapter.is_configured() and get_ocr_passphrase() is not None,
            llm_provider=self.settings.llm_provider,
        ))
        self.app.include_router(create_analysis_router(
            analyzer=self.analyzer,
            chat_assistant=self.chat_assistant,
            guard=self.passphrase_guard,
            limiter=self.limiter,
        ))
        self.app.include_router(create_comparison_router(
            engine=self.engine,
            normalizer=self.normalizer,
            export_adapter=self.export_adapter,
            limiter=self.limiter,
        ))
        self.app.include_router(create_export_router(
            export_adapter=self.export_adapter,
            limiter=self.limiter,
        ))

    def _setup_error_handlers(self):
        """Setup error handlers"""
        @self.app.exception_handler(HTTPException)
        async def http_exception_handler(request, exc):
            return JSONResponse(
                status_code=exc.status_code,
                content={
                    "error": f"HTTP_{exc.status_code}",
                    "message": exc.detail,
                    "timestamp": datetime.now().isoformat(),
                },
            )

        @self.app.exception_handler(CoreError)
        async def core_error_handler(request, exc):
            status_code = core_error_status(exc)
            logger.error(f"{type(exc).__name__} on {request.url.path}: {exc}")
            return JSONResponse(
                status_code=status_code,
                content={
                    "error": type(exc).__name__,
                    "message": str(exc),
                    "timestamp": datetime.now().isoformat(),
                },
            )

        @self.app.exception_handler(Exception)
        async def global_exception_handler(request, exc):
            logger.error(f"Unhandled exception: {exc}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content={
                    "error": "INTERNAL_SERVER_ERROR",
                    "message": "An internal server error occurred",
                    "details": {"exception": str(exc)},
                    "timestamp": datetime.now().isoformat(),
                },
            )


# FastAPI app factory
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create FastAPI application"""
    api = BloodParserAPI(settings=settings)
    return api.app


# CLI entry point
if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="BloodParser API")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--workers", type=int, default=1, help="Number of worker processes")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    args = parser.parse_args()
    if args.workers > 1 or args.reload:
        uvicorn.run(
            "app.api.bloodparser_api:create_app",
            factory=True,
            host=args.host,
            port=args.port,
            workers=args.workers,
            reload=args.reload,
        )
    else:
        uvicorn.run(create_app(), host=args.host, port=args.port)
