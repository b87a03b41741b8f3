"""
ReportAnalyzer - Extract structured test results from an uploaded report.

Two pipelines:
- vision: the report image (or rendered PDF pages) goes straight to a
  vision model together with the extraction prompt
- OCR: a layout-parsing service turns the document into markdown first,
  then a text model extracts the JSON from it
"""
import asyncio
import functools
import logging
from typing import List, Optional

from app.config.limits import MAX_PDF_PAGES, PDF_RENDER_DPI
from app.core.builders.date_utils import extract_date_from_text
from app.core.exceptions import ExtractionError, OCRError, PDFError
from app.core.models.report import PatientInfo, ReportSnapshot
from app.core.ports.llm import LLMPort
from app.core.ports.ocr import OCRPort
from app.core.ports.pdf import PDFPort
from .prompts import EXTRACTION_PROMPT, build_ocr_extraction_prompt
from .response_parser import ResponseParser
from .retry_utils import RetryConfig, retry_with_backoff

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"


class ReportAnalyzer:
    """Turn one uploaded document into a ReportSnapshot."""

    def __init__(
        self,
        llm: LLMPort,
        vision_model: str,
        text_model: str,
        ocr: Optional[OCRPort] = None,
        pdf: Optional[PDFPort] = None,
        max_pages: int = MAX_PDF_PAGES,
    ):
        """
        Args:
            llm: LLM provider
            vision_model: Model used for the vision pipeline
            text_model: Model used to read OCR output
            ocr: OCR provider (required for use_ocr=True)
            pdf: PDF renderer (required for PDF uploads on the vision pipeline)
            max_pages: Maximum PDF pages sent to the vision model
        """
        self._llm = llm
        self._ocr = ocr
        self._pdf = pdf
        self.vision_model = vision_model
        self.text_model = text_model
        self.max_pages = max_pages
        self._parser = ResponseParser()
        self._retry_config = RetryConfig.for_llm()

    async def analyze(
        self,
        content: bytes,
        mime_type: str,
        file_name: Optional[str] = None,
        use_ocr: bool = False,
    ) -> ReportSnapshot:
        """
        Extract tests and patient info from a report.

        Args:
            content: Raw file bytes
            mime_type: MIME type of the upload
            file_name: Original file name (kept for display)
            use_ocr: Run the OCR pipeline instead of the vision pipeline

        Returns:
            ReportSnapshot with at least one test

        Raises:
            ExtractionError: No JSON in the model reply or no tests found
            OCRError: OCR pipeline requested but the OCR call failed
            LLMError: Model call failed after retries
        """
        logger.info(
            f"Analyzing {file_name or 'upload'} ({mime_type}, {len(content)} bytes, "
            f"{'ocr' if use_ocr else 'vision'} pipeline)"
        )

        ocr_text = None
        if use_ocr:
            ocr_text = await self._run_ocr(content, mime_type)
            response = await self._call(
                self._llm.generate,
                prompt=build_ocr_extraction_prompt(ocr_text),
                model=self.text_model,
            )
        else:
            images = await self._prepare_images(content, mime_type)
            response = await self._call(
                self._llm.generate_with_vision,
                prompt=EXTRACTION_PROMPT,
                images=images,
                model=self.vision_model,
            )

        report = self._build_snapshot(response, file_name, ocr_text)
        logger.info(f"Extracted {len(report.tests)} tests from {file_name or 'upload'}")
        return report

    async def _call(self, func, **kwargs) -> str:
        return await retry_with_backoff(
            func,
            delays=self._retry_config.delays,
            jitter=self._retry_config.jitter,
            **kwargs,
        )

    async def _run_ocr(self, content: bytes, mime_type: str) -> str:
        if self._ocr is None or not self._ocr.is_configured():
            raise OCRError("OCR provider is not configured")
        markdown = await self._ocr.run(content, mime_type)
        logger.info(f"OCR completed, {len(markdown)} characters")
        return markdown

    async def _prepare_images(self, content: bytes, mime_type: str) -> List[bytes]:
        """Images for the vision model: the upload itself, or rendered PDF pages."""
        if mime_type != PDF_MIME_TYPE:
            return [content]

        if self._pdf is None:
            raise ExtractionError("PDF uploads require a PDF renderer")

        # PyMuPDF is sync, run in executor
        loop = asyncio.get_running_loop()
        try:
            pages = await loop.run_in_executor(
                None,
                functools.partial(self._pdf.render_pages, content, self.max_pages, dpi=PDF_RENDER_DPI),
            )
        except PDFError as e:
            raise ExtractionError(f"Could not read PDF: {e}") from e

        if not pages:
            raise ExtractionError("PDF has no pages")
        return pages

    def _build_snapshot(
        self,
        response: str,
        file_name: Optional[str],
        ocr_text: Optional[str],
    ) -> ReportSnapshot:
        data = self._parser.parse_object(response)
        if data is None:
            logger.error(f"Could not parse JSON from response: {(response or '')[:200]}")
            raise ExtractionError(
                "Could not parse blood test data from the report. "
                "Please ensure the report is clear and contains blood test results."
            )

        report = ReportSnapshot.from_dict(data)
        report.source_file_name = file_name

        if not report.tests:
            raise ExtractionError(
                "No blood test results found in the uploaded file. "
                "Please upload a clear image of a blood test report."
            )

        if ocr_text and not report.date:
            found = extract_date_from_text(ocr_text)
            if found:
                logger.info(f"Using date from OCR text: {found}")
                if report.patient_info is None:
                    report.patient_info = PatientInfo()
                report.patient_info.date = found

        return report
