"""API middleware components"""
from app.api.middleware.authentication import (
    PassphraseGuard,
    client_ip,
    get_ocr_passphrase,
    require_ocr_passphrase,
    verify_passphrase,
)

__all__ = [
    "PassphraseGuard",
    "client_ip",
    "get_ocr_passphrase",
    "require_ocr_passphrase",
    "verify_passphrase",
]
