"""Tests for core exceptions."""
import pytest
from app.core.exceptions import (
    CoreError,
    ExportError,
    ExtractionError,
    LLMError,
    NormalizationError,
    OCRError,
    PDFError,
    ValidationError,
)


class TestExceptionHierarchy:
    @pytest.mark.parametrize("error_type", [
        LLMError, OCRError, PDFError, ExtractionError,
        NormalizationError, ExportError, ValidationError,
    ])
    def test_is_core_error(self, error_type):
        assert isinstance(error_type("test"), CoreError)

    def test_error_message_preserved(self):
        error = LLMError("specific message")
        assert str(error) == "specific message"
