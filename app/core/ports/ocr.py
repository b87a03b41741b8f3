"""OCR port interface.

Defines the contract for layout-parsing OCR services that turn a report
image or PDF into markdown text.
"""
from abc import ABC, abstractmethod


class OCRPort(ABC):
    """Abstract interface for OCR providers.

    Implementations: GlmOcrAdapter
    """

    @abstractmethod
    def is_configured(self) -> bool:
        """True if the provider has the credentials it needs."""
        pass

    @abstractmethod
    async def run(self, content: bytes, mime_type: str) -> str:
        """Run OCR on a document.

        Args:
            content: Raw file bytes
            mime_type: MIME type of the file (image/* or application/pdf)

        Returns:
            Recognized text as markdown (may contain HTML tables)
        """
        pass
