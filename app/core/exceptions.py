"""Core domain exceptions.

All exceptions raised by core logic inherit from CoreError.
Adapters catch provider-specific errors and re-raise as these.
"""


class CoreError(Exception):
    """Base for all core domain errors."""
    pass


class LLMError(CoreError):
    """LLM operation failed after retries."""
    pass


class OCRError(CoreError):
    """OCR layout parsing failed."""
    pass


class PDFError(CoreError):
    """PDF operation failed."""
    pass


class ExtractionError(CoreError):
    """Structured test results could not be extracted from a report."""
    pass


class NormalizationError(CoreError):
    """Test name normalization failed; callers fall back to identity."""
    pass


class ExportError(CoreError):
    """Export document generation failed."""
    pass


class ValidationError(CoreError):
    """Data validation failed."""
    pass
