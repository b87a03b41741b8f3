"""OCR passphrase verification.

The OCR pipeline costs money per page, so it is unlocked with a shared
passphrase. Failed attempts lock the client IP out for a cooldown period.
"""
import math
import os
import secrets
import time
from typing import Dict, Optional

from fastapi import HTTPException, Request

from app.config.limits import PASSPHRASE_COOLDOWN_SECONDS


def get_ocr_passphrase() -> Optional[str]:
    """Get the OCR passphrase from the environment.

    Returns:
        Passphrase, or None if OCR mode is not configured
    """
    return os.environ.get("OCR_PASSPHRASE") or None


def verify_passphrase(candidate: Optional[str]) -> bool:
    """Constant-time comparison against the configured passphrase.

    Always False when no passphrase is configured.
    """
    expected = get_ocr_passphrase()
    if not expected or not candidate:
        return False
    return secrets.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def require_ocr_passphrase(candidate: Optional[str]) -> None:
    """Gate for OCR-mode analysis.

    Raises:
        HTTPException: 500 if OCR mode is not configured, 403 if the
            passphrase does not match
    """
    if get_ocr_passphrase() is None:
        raise HTTPException(status_code=500, detail="OCR mode is not configured on the server.")
    if not verify_passphrase(candidate):
        raise HTTPException(status_code=403, detail="Invalid OCR passphrase")


def client_ip(request: Request) -> str:
    """Client address, honoring reverse proxy headers."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip() or "unknown"
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip
    if request.client:
        return request.client.host
    return "unknown"


class PassphraseGuard:
    """Per-IP lockout after a failed passphrase attempt."""

    def __init__(self, cooldown_seconds: float = PASSPHRASE_COOLDOWN_SECONDS):
        self.cooldown_seconds = cooldown_seconds
        self._failures: Dict[str, float] = {}

    def retry_after(self, ip: str, now: Optional[float] = None) -> Optional[int]:
        """Seconds left in the lockout, or None if the IP may try again."""
        last_failed = self._failures.get(ip)
        if last_failed is None:
            return None
        now = time.monotonic() if now is None else now
        remaining = self.cooldown_seconds - (now - last_failed)
        if remaining <= 0:
            self._failures.pop(ip, None)
            return None
        return max(1, math.ceil(remaining))

    def record_failure(self, ip: str, now: Optional[float] = None) -> None:
        now = time.monotonic() if now is None else now
        # Drop expired lockouts of clients that never came back
        expired = [k for k, t in self._failures.items() if now - t >= self.cooldown_seconds]
        for k in expired:
            del self._failures[k]
        self._failures[ip] = now

    def reset(self, ip: str) -> None:
        self._failures.pop(ip, None)
