"""
Centralized service settings.

All provider keys, model names and external service URLs are read from the
environment here.

Usage:
    from app.config.settings import get_settings

    model = get_settings().text_model
"""
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

DEFAULT_MODEL = "google/gemini-2.5-flash"

# Default model key per provider when no *_MODEL variable is set
DEFAULT_MODELS = {
    "openrouter": DEFAULT_MODEL,
    "bedrock": "haiku",
}


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Runtime settings loaded from environment variables."""

    # LLM provider: "openrouter" or "bedrock"
    llm_provider: str = "openrouter"
    openrouter_api_key: Optional[str] = None
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    aws_region: str = "us-east-1"

    # Per-role model keys
    text_model: str = DEFAULT_MODEL
    vision_model: str = DEFAULT_MODEL
    chat_model: str = DEFAULT_MODEL
    normalize_model: str = DEFAULT_MODEL

    # Seconds before a normalization call is abandoned
    normalize_timeout: float = 60.0

    # OCR
    zai_api_key: Optional[str] = None
    ocr_url: str = "https://api.z.ai/api/paas/v4/layout_parsing"
    ocr_model: str = "glm-ocr"

    # PDF rendering service
    gotenberg_url: str = "http://localhost:3030"

    # Comparison
    merge_same_day_reports: bool = False

    cors_origins: list = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current environment."""
        provider = os.getenv("LLM_PROVIDER", "openrouter").strip().lower()
        default_model = DEFAULT_MODELS.get(provider, DEFAULT_MODEL)
        return cls(
            llm_provider=provider,
            openrouter_api_key=os.getenv("OPENROUTER_API_KEY") or os.getenv("GEMINI_API_KEY"),
            openrouter_base_url=os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1"),
            aws_region=os.getenv("AWS_REGION", "us-east-1"),
            text_model=os.getenv("TEXT_MODEL", default_model),
            vision_model=os.getenv("VISION_MODEL", default_model),
            chat_model=os.getenv("CHAT_MODEL", default_model),
            normalize_model=os.getenv("NORMALIZE_MODEL", default_model),
            normalize_timeout=float(os.getenv("NORMALIZE_TIMEOUT", "60")),
            zai_api_key=os.getenv("ZAI_API_KEY"),
            ocr_url=os.getenv("OCR_URL", "https://api.z.ai/api/paas/v4/layout_parsing"),
            ocr_model=os.getenv("OCR_MODEL", "glm-ocr"),
            gotenberg_url=os.getenv("GOTENBERG_URL", "http://localhost:3030"),
            merge_same_day_reports=_env_flag("MERGE_SAME_DAY_REPORTS"),
            cors_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()],
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the process-wide settings singleton."""
    return Settings.from_env()
