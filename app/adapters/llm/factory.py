"""Build the configured LLM adapter."""
import logging

from app.config.settings import Settings
from app.core.ports.llm import LLMPort

logger = logging.getLogger(__name__)


def create_llm_adapter(settings: Settings) -> LLMPort:
    """Instantiate the adapter named by settings.llm_provider.

    Raises:
        ValueError: Unknown provider
    """
    provider = settings.llm_provider
    if provider == "openrouter":
        from app.adapters.llm.openrouter import OpenRouterAdapter
        logger.info(f"Using OpenRouter at {settings.openrouter_base_url}")
        return OpenRouterAdapter(
            api_key=settings.openrouter_api_key,
            base_url=settings.openrouter_base_url,
        )
    if provider == "bedrock":
        from app.adapters.llm.bedrock import BedrockAdapter
        logger.info(f"Using Bedrock in {settings.aws_region}")
        return BedrockAdapter(region=settings.aws_region)
    raise ValueError(f"Unknown LLM provider: {provider}. Use 'openrouter' or 'bedrock'")
