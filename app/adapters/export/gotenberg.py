"""
Gotenberg adapter for PDF generation.

Implements ExportPort using the Gotenberg Docker API (headless Chromium)
for HTML to PDF conversion.
"""
import asyncio
import logging
from typing import Any, Dict, Optional

import requests

from app.core.exceptions import ExportError
from app.core.ports.export import ExportPort

logger = logging.getLogger(__name__)

# A4 in inches with 10 mm margins
A4_WIDTH = "8.27"
A4_HEIGHT = "11.7"
MARGIN_10MM = "0.39"


class GotenbergAdapter(ExportPort):
    """
    Gotenberg implementation of ExportPort.

    Uses Gotenberg Docker API for PDF generation via Chromium.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: int = 120):
        """
        Initialize the Gotenberg adapter.

        Args:
            base_url: Gotenberg API URL (default: http://localhost:3030)
            timeout: Request timeout in seconds
        """
        self.base_url = (base_url or "http://localhost:3030").rstrip("/")
        self.timeout = timeout
        logger.info(f"Initialized GotenbergAdapter: {self.base_url}")

    async def health_check(self) -> bool:
        """Check if Gotenberg is available."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._health_check_sync)

    def _health_check_sync(self) -> bool:
        try:
            response = requests.get(f"{self.base_url}/health", timeout=5)
            return response.status_code == 200
        except requests.RequestException:
            return False

    async def html_to_pdf(
        self,
        html: str,
        options: Optional[Dict[str, Any]] = None
    ) -> bytes:
        """Convert HTML to PDF bytes (A4, 10 mm margins, backgrounds printed)."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._html_to_pdf_sync, html, options)

    def _html_to_pdf_sync(self, html: str, options: Optional[Dict[str, Any]] = None) -> bytes:
        options = options or {}

        files = {
            "index.html": ("index.html", html.encode("utf-8"), "text/html; charset=utf-8")
        }

        data = {
            "marginTop": options.get("margin_top", MARGIN_10MM),
            "marginBottom": options.get("margin_bottom", MARGIN_10MM),
            "marginLeft": options.get("margin_left", MARGIN_10MM),
            "marginRight": options.get("margin_right", MARGIN_10MM),
            "paperWidth": options.get("paper_width", A4_WIDTH),
            "paperHeight": options.get("paper_height", A4_HEIGHT),
            "printBackground": options.get("print_background", "true"),
            "landscape": options.get("landscape", "false"),
        }

        try:
            response = requests.post(
                f"{self.base_url}/forms/chromium/convert/html",
                files=files,
                data=data,
                timeout=self.timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Gotenberg HTML to PDF failed: {e}")
            raise ExportError(f"PDF rendering failed: {e}") from e

        logger.info(f"Generated PDF ({len(response.content)} bytes)")
        return response.content

