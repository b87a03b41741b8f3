"""PDF port interface.

Defines the contract for PDF operations. Core code depends only on this
abstraction, not on specific implementations like PyMuPDF.
"""
from abc import ABC, abstractmethod
from typing import List


class PDFPort(ABC):
    """Abstract interface for PDF operations.

    Implementations: PyMuPDFAdapter
    """

    @abstractmethod
    def render_pages(self, content: bytes, max_pages: int, dpi: int = 150) -> List[bytes]:
        """Render the first pages as PNG images.

        Args:
            content: PDF file bytes
            max_pages: Maximum number of pages to render
            dpi: Resolution for rendering

        Returns:
            PNG image bytes, one entry per page
        """
        pass
