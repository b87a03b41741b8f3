"""PyMuPDF adapter.

Implements PDFPort interface using fitz (PyMuPDF). Uploads are never written
to disk; documents are opened straight from the request bytes.
"""
import logging
from typing import List

import fitz

from app.core.ports.pdf import PDFPort
from app.core.exceptions import PDFError

logger = logging.getLogger(__name__)


def _open(content: bytes) -> fitz.Document:
    return fitz.open(stream=content, filetype="pdf")


class PyMuPDFAdapter(PDFPort):
    """PyMuPDF implementation of PDFPort."""

    def render_pages(self, content: bytes, max_pages: int, dpi: int = 150) -> List[bytes]:
        """Render the first pages as PNG images.

        Args:
            content: PDF file bytes
            max_pages: Maximum number of pages to render
            dpi: Resolution for rendering

        Returns:
            PNG image bytes, one entry per page
        """
        try:
            with _open(content) as doc:
                total = len(doc)
                mat = fitz.Matrix(dpi / 72, dpi / 72)
                images = [
                    doc[i].get_pixmap(matrix=mat).tobytes("png")
                    for i in range(min(total, max_pages))
                ]
        except Exception as e:
            raise PDFError(f"Failed to render PDF pages: {e}") from e

        if total > max_pages:
            logger.info(f"PDF has {total} pages, rendered the first {max_pages}")
        return images
