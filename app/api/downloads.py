"""Download responses for exported files."""
import logging
import os
from datetime import date
from typing import Optional, Union
from urllib.parse import quote

from fastapi import HTTPException
from fastapi.responses import Response

from app.api.metrics import EXPORTS
from app.core.exceptions import ExportError
from app.core.ports.export import ExportPort

logger = logging.getLogger(__name__)

MEDIA_TYPES = {
    "csv": "text/csv; charset=utf-8",
    "json": "application/json; charset=utf-8",
    "html": "text/html; charset=utf-8",
    "pdf": "application/pdf",
}


def content_disposition(filename: str) -> str:
    """Attachment header with an RFC 5987 UTF-8 filename.

    The plain `filename` parameter is an ASCII fallback (`report.<ext>`) for
    clients that ignore `filename*`.
    """
    extension = os.path.splitext(filename)[1]
    if not extension or not extension.isascii() or '"' in extension:
        extension = ".pdf"
    fallback = f"report{extension}"
    encoded = quote(filename, safe="!#$&+-.^_`|~")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{encoded}"


def dated_filename(prefix: str, fmt: str, day: Optional[date] = None) -> str:
    """`<prefix>-YYYY-MM-DD.<fmt>`."""
    day = day or date.today()
    return f"{prefix}-{day.isoformat()}.{fmt}"


def ensure_extension(filename: Optional[str], fmt: str, default: str) -> str:
    if not filename or not filename.strip():
        return default
    filename = filename.strip()
    if not filename.lower().endswith(f".{fmt}"):
        filename += f".{fmt}"
    return filename


def download_response(content: Union[str, bytes], fmt: str, filename: str) -> Response:
    """Wrap exported content as an attachment."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return Response(
        content=content,
        media_type=MEDIA_TYPES[fmt],
        headers={"Content-Disposition": content_disposition(filename)},
    )


async def render_pdf(export_adapter: Optional[ExportPort], html: str, kind: str) -> bytes:
    """Render HTML through the export service.

    Raises:
        HTTPException: 502 if the service is missing or the render fails
    """
    if export_adapter is None:
        EXPORTS.labels(kind=kind, format="pdf", outcome="failed").inc()
        raise HTTPException(status_code=502, detail="PDF export service is not configured")
    try:
        return await export_adapter.html_to_pdf(html)
    except ExportError as e:
        EXPORTS.labels(kind=kind, format="pdf", outcome="failed").inc()
        logger.error(f"PDF generation failed: {e}")
        raise HTTPException(status_code=502, detail="Failed to generate PDF")
