"""GLM-OCR adapter.

Implements OCRPort over the Z.ai layout parsing endpoint. The document is
posted as a base64 data URL; the service answers with markdown in
`md_results`. Server errors, rate limiting and network failures are retried
on a fixed backoff schedule.
"""
import base64
import logging
from typing import Optional

import requests

from app.config.limits import OCR_RETRYABLE_STATUS
from app.core.exceptions import OCRError
from app.core.extraction.retry_utils import RetryConfig, retry_with_backoff
from app.core.ports.ocr import OCRPort

logger = logging.getLogger(__name__)

DEFAULT_OCR_URL = "https://api.z.ai/api/paas/v4/layout_parsing"
DEFAULT_OCR_MODEL = "glm-ocr"


class RetryableOCRStatus(OCRError):
    """OCR service answered with a status worth retrying."""

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(f"OCR service returned {status_code}")
        self.status_code = status_code
        self.body = body


def _is_retryable(error: Exception) -> bool:
    return isinstance(error, (RetryableOCRStatus, requests.ConnectionError, requests.Timeout))


def _error_message(response: requests.Response) -> str:
    """Service error message from a JSON error body, or a generic one."""
    try:
        data = response.json()
    except ValueError:
        data = None
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return f"OCR service error: {error['message']}"
    return "Failed to run OCR on the document."


class GlmOcrAdapter(OCRPort):
    """Z.ai GLM-OCR implementation of OCRPort."""

    def __init__(
        self,
        api_key: Optional[str],
        url: str = DEFAULT_OCR_URL,
        model: str = DEFAULT_OCR_MODEL,
        timeout: int = 120,
        retry_config: Optional[RetryConfig] = None,
    ):
        """
        Args:
            api_key: Z.ai API key (None leaves the adapter unconfigured)
            url: Layout parsing endpoint
            model: OCR model name
            timeout: Request timeout in seconds
            retry_config: Retry schedule (default: RetryConfig.for_ocr())
        """
        self.api_key = api_key
        self.url = url
        self.model = model
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig.for_ocr()
        if not api_key:
            logger.warning("ZAI_API_KEY not set; OCR pipeline is disabled")

    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def run(self, content: bytes, mime_type: str) -> str:
        """Run layout parsing and return the recognized markdown.

        Raises:
            OCRError: Not configured, failed after retries, or empty result
        """
        if not self.is_configured():
            raise OCRError("GLM-OCR is not configured. Please set ZAI_API_KEY on the server.")

        payload = {
            "model": self.model,
            "file": f"data:{mime_type};base64,{base64.b64encode(content).decode('ascii')}",
        }

        try:
            data = await retry_with_backoff(
                self._post,
                payload,
                delays=self.retry_config.delays,
                retryable_check=_is_retryable,
            )
        except RetryableOCRStatus as e:
            logger.error(f"OCR request failed after retries: {e.status_code} {e.body[:300]}")
            message = "Failed to run OCR on the document."
            if e.status_code == 500:
                message += " This appears to be a temporary server issue. Please try again in a moment."
            raise OCRError(message) from e
        except requests.RequestException as e:
            logger.error(f"OCR request failed: {e}")
            raise OCRError(f"Failed to reach OCR service: {e}") from e

        markdown = (data.get("md_results") or "").strip()
        if not markdown:
            logger.error(f"Missing md_results in OCR response: {str(data)[:300]}")
            raise OCRError("OCR did not return any text. Please ensure the report is clear and readable.")
        return markdown

    def _post(self, payload: dict) -> dict:
        """One synchronous request; raises RetryableOCRStatus on 429/500."""
        response = requests.post(
            self.url,
            json=payload,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=self.timeout,
        )

        if response.status_code in OCR_RETRYABLE_STATUS:
            raise RetryableOCRStatus(response.status_code, response.text)

        if not response.ok:
            message = _error_message(response)
            logger.error(f"OCR service returned {response.status_code}: {response.text[:300]}")
            raise OCRError(message)

        try:
            return response.json()
        except ValueError as e:
            raise OCRError("OCR service returned invalid JSON") from e
