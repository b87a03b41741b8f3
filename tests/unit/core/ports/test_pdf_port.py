"""Tests for PDF, OCR and export port interfaces."""
import pytest
from app.core.ports.export import ExportPort
from app.core.ports.ocr import OCRPort
from app.core.ports.pdf import PDFPort


class TestPDFPortInterface:
    def test_cannot_instantiate_abstract_port(self):
        with pytest.raises(TypeError):
            PDFPort()

    def test_concrete_implementation_works(self):
        class MockPDF(PDFPort):
            def render_pages(self, content, max_pages, dpi=150):
                return [b"page"] * min(max_pages, 3)

        mock = MockPDF()
        assert mock.render_pages(b"%PDF", 2) == [b"page", b"page"]


class TestOtherPorts:
    def test_cannot_instantiate_ocr_port(self):
        with pytest.raises(TypeError):
            OCRPort()

    def test_cannot_instantiate_export_port(self):
        with pytest.raises(TypeError):
            ExportPort()

    def test_partial_implementation_rejected(self):
        class HalfOCR(OCRPort):
            def is_configured(self) -> bool:
                return True

        with pytest.raises(TypeError):
            HalfOCR()
