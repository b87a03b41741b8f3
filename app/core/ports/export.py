"""Export port interface.

Defines the contract for HTML-to-PDF rendering. Core code depends only
on this abstraction, not on specific implementations like Gotenberg.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class ExportPort(ABC):
    """Abstract interface for document export operations.

    Implementations: GotenbergAdapter
    """

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if export service is available.

        Returns:
            True if service is ready
        """
        pass

    @abstractmethod
    async def html_to_pdf(
        self,
        html: str,
        options: Optional[Dict[str, Any]] = None
    ) -> bytes:
        """Convert HTML to PDF.

        Args:
            html: Self-contained HTML document
            options: Optional conversion options (margins, page size, etc.)

        Returns:
            PDF bytes
        """
        pass
