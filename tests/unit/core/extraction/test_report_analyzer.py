"""Tests for report analysis pipelines."""
import asyncio
import json
import time
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from app.adapters.llm.openrouter import OpenRouterAdapter
from app.core.exceptions import ExtractionError, LLMError, OCRError, PDFError
from app.core.extraction.report_analyzer import ReportAnalyzer
from app.core.extraction.retry_utils import RetryConfig

EXTRACTION_REPLY = json.dumps({
    "patient_info": {"name": "Иванов И.И.", "age": "45", "gender": "male", "date": "15.01.2024"},
    "tests": [
        {"test_name": "Гемоглобин", "value": 135, "unit": "г/л", "normal_range": "130-160",
         "status": "Normal", "category": "Общий анализ крови"},
        {"test_name": "АЛТ", "value": 52, "unit": "Ед/л", "normal_range": "0-41",
         "status": "High", "category": "Функция печени"},
    ],
})


def make_llm(text_reply=EXTRACTION_REPLY, vision_reply=EXTRACTION_REPLY):
    llm = MagicMock()
    llm.generate = AsyncMock(return_value=text_reply)
    llm.generate_with_vision = AsyncMock(return_value=vision_reply)
    return llm


def make_analyzer(llm, ocr=None, pdf=None):
    analyzer = ReportAnalyzer(llm, vision_model="vision", text_model="text", ocr=ocr, pdf=pdf)
    analyzer._retry_config = RetryConfig(delays=(0.0,))
    return analyzer


class TestVisionPipeline:
    """Image and PDF uploads sent to the vision model."""

    @pytest.mark.asyncio
    async def test_image_sent_as_is(self):
        llm = make_llm()
        report = await make_analyzer(llm).analyze(b"\xff\xd8jpeg", "image/jpeg", file_name="scan.jpg")

        call = llm.generate_with_vision.call_args
        assert call.kwargs["images"] == [b"\xff\xd8jpeg"]
        assert call.kwargs["model"] == "vision"
        assert [t.name for t in report.tests] == ["Гемоглобин", "АЛТ"]
        assert report.date == "15.01.2024"
        assert report.source_file_name == "scan.jpg"
        assert report.summary() == {"total": 2, "normal": 1, "abnormal": 1}

    @pytest.mark.asyncio
    async def test_pdf_rendered_to_pages(self):
        llm = make_llm()
        pdf = MagicMock()
        pdf.render_pages.return_value = [b"page1", b"page2"]

        await make_analyzer(llm, pdf=pdf).analyze(b"%PDF", "application/pdf")

        assert pdf.render_pages.call_args.args[:2] == (b"%PDF", 5)
        assert llm.generate_with_vision.call_args.kwargs["images"] == [b"page1", b"page2"]

    @pytest.mark.asyncio
    async def test_pdf_rendering_does_not_block_loop(self):
        """Slow rasterization runs in the executor while other tasks proceed."""
        def slow_render(content, max_pages, dpi=150):
            time.sleep(0.3)
            return [b"page1"]

        pdf = MagicMock()
        pdf.render_pages.side_effect = slow_render
        analyzer = make_analyzer(make_llm(), pdf=pdf)

        ticks = []

        async def ticker():
            for _ in range(10):
                ticks.append(time.monotonic())
                await asyncio.sleep(0.02)

        await asyncio.gather(analyzer.analyze(b"%PDF", "application/pdf"), ticker())

        gaps = [b - a for a, b in zip(ticks, ticks[1:])]
        assert max(gaps) < 0.2

    @pytest.mark.asyncio
    async def test_pdf_without_renderer(self):
        with pytest.raises(ExtractionError):
            await make_analyzer(make_llm()).analyze(b"%PDF", "application/pdf")

    @pytest.mark.asyncio
    async def test_pdf_render_failure(self):
        pdf = MagicMock()
        pdf.render_pages.side_effect = PDFError("corrupt")
        with pytest.raises(ExtractionError, match="Could not read PDF"):
            await make_analyzer(make_llm(), pdf=pdf).analyze(b"%PDF", "application/pdf")

    @pytest.mark.asyncio
    async def test_empty_pdf(self):
        pdf = MagicMock()
        pdf.render_pages.return_value = []
        with pytest.raises(ExtractionError, match="no pages"):
            await make_analyzer(make_llm(), pdf=pdf).analyze(b"%PDF", "application/pdf")


class TestExtractionFailures:
    """Unusable model replies."""

    @pytest.mark.asyncio
    async def test_unparseable_reply(self):
        llm = make_llm(vision_reply="Sorry, I can't read this image.")
        with pytest.raises(ExtractionError, match="Could not parse"):
            await make_analyzer(llm).analyze(b"img", "image/png")

    @pytest.mark.asyncio
    async def test_no_tests(self):
        llm = make_llm(vision_reply='{"patient_info": null, "tests": []}')
        with pytest.raises(ExtractionError, match="No blood test results"):
            await make_analyzer(llm).analyze(b"img", "image/png")

    @pytest.mark.asyncio
    async def test_llm_error_propagates(self):
        llm = make_llm()
        llm.generate_with_vision = AsyncMock(side_effect=LLMError("bad key"))
        with pytest.raises(LLMError):
            await make_analyzer(llm).analyze(b"img", "image/png")

    @pytest.mark.asyncio
    async def test_throttled_call_retried(self):
        llm = make_llm()
        llm.generate_with_vision = AsyncMock(side_effect=[LLMError("429 Too Many Requests"), EXTRACTION_REPLY])
        report = await make_analyzer(llm).analyze(b"img", "image/png")
        assert len(report.tests) == 2
        assert llm.generate_with_vision.await_count == 2


class TestOcrPipeline:
    """OCR markdown read by the text model."""

    def make_ocr(self, markdown="| Гемоглобин | 135 |\nДата: 03.02.2025", configured=True):
        ocr = MagicMock()
        ocr.is_configured.return_value = configured
        ocr.run = AsyncMock(return_value=markdown)
        return ocr

    @pytest.mark.asyncio
    async def test_ocr_then_text_model(self):
        llm = make_llm()
        ocr = self.make_ocr()

        await make_analyzer(llm, ocr=ocr).analyze(b"img", "image/png", use_ocr=True)

        ocr.run.assert_awaited_once_with(b"img", "image/png")
        call = llm.generate.call_args
        assert call.kwargs["model"] == "text"
        assert "| Гемоглобин | 135 |" in call.kwargs["prompt"]
        llm.generate_with_vision.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_date_filled_from_ocr_text(self):
        reply = json.dumps({"tests": [{"test_name": "Глюкоза", "value": 5.2}]})
        llm = make_llm(text_reply=reply)

        report = await make_analyzer(llm, ocr=self.make_ocr()).analyze(b"img", "image/png", use_ocr=True)

        assert report.date == "03.02.2025"

    @pytest.mark.asyncio
    async def test_model_date_wins(self):
        llm = make_llm()
        report = await make_analyzer(llm, ocr=self.make_ocr()).analyze(b"img", "image/png", use_ocr=True)
        assert report.date == "15.01.2024"

    @pytest.mark.asyncio
    async def test_unconfigured_ocr(self):
        analyzer = make_analyzer(make_llm(), ocr=self.make_ocr(configured=False))
        with pytest.raises(OCRError):
            await analyzer.analyze(b"img", "image/png", use_ocr=True)

    @pytest.mark.asyncio
    async def test_no_ocr_provider(self):
        with pytest.raises(OCRError):
            await make_analyzer(make_llm()).analyze(b"img", "image/png", use_ocr=True)


class TestTransientProviderErrors:
    """Wrapped SDK failures are retried through the adapter."""

    @staticmethod
    def failing_client(*outcomes):
        client = MagicMock()
        client.chat.completions.create = MagicMock(side_effect=list(outcomes))
        return client

    @staticmethod
    def connection_error():
        request = httpx.Request("POST", "https://openrouter.ai/api/v1/chat/completions")
        return openai.APIConnectionError(request=request)

    @pytest.mark.asyncio
    async def test_connection_error_retried(self):
        reply = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=EXTRACTION_REPLY))],
            usage=SimpleNamespace(prompt_tokens=10, completion_tokens=5),
        )
        client = self.failing_client(self.connection_error(), reply)
        analyzer = make_analyzer(OpenRouterAdapter(api_key="key", client=client))

        report = await analyzer.analyze(b"\x89PNG\r\n\x1a\nimg", "image/png")

        assert client.chat.completions.create.call_count == 2
        assert len(report.tests) == 2

    @pytest.mark.asyncio
    async def test_connection_error_exhausts_retries(self):
        client = self.failing_client(self.connection_error(), self.connection_error())
        analyzer = make_analyzer(OpenRouterAdapter(api_key="key", client=client))

        with pytest.raises(LLMError, match="Connection error"):
            await analyzer.analyze(b"\x89PNG\r\n\x1a\nimg", "image/png")
        assert client.chat.completions.create.call_count == 2
