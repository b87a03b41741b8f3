"""OpenRouter LLM adapter.

Implements LLMPort over the OpenAI-compatible chat completions API using
the openai SDK. Includes rate limiting and usage tracking.
"""
import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

from openai import OpenAI

from app.core.ports.llm import LLMPort, ModelConfig
from app.core.exceptions import LLMError
from app.adapters.llm.images import to_data_url
from app.adapters.llm.rate_limiter import RateLimiter
from app.adapters.llm.usage_tracker import CostTracker

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class OpenRouterAdapter(LLMPort):
    """OpenRouter implementation of LLMPort.

    Any OpenRouter model ID is accepted; known IDs get tuned defaults.
    """

    _MODEL_CONFIGS = {
        "google/gemini-2.5-flash": ModelConfig(
            name="google/gemini-2.5-flash",
            role="report_extraction",
            max_tokens=16384,
            temperature=0.1,
            timeout=60.0,
        ),
        "google/gemini-2.5-pro": ModelConfig(
            name="google/gemini-2.5-pro",
            role="complex_reasoning",
            max_tokens=16384,
            temperature=0.1,
            timeout=120.0,
        ),
    }

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = OPENROUTER_BASE_URL,
        requests_per_minute: int = 60,
        app_title: str = "BloodParser",
        client: Optional[OpenAI] = None,
    ):
        """Initialize adapter with an OpenAI SDK client.

        Args:
            api_key: OpenRouter API key
            base_url: OpenAI-compatible endpoint
            requests_per_minute: Rate limit for API calls
            app_title: Sent as X-Title for OpenRouter attribution
            client: Preconfigured client (tests)
        """
        if client is None and not api_key:
            logger.warning("OpenRouter API key is not configured; LLM calls will fail")
        self._api_key = api_key
        self._base_url = base_url
        self._app_title = app_title
        self._client = client
        self._rate_limiter = RateLimiter(requests_per_minute=requests_per_minute)
        self._cost_tracker = CostTracker()

    def _get_client(self) -> OpenAI:
        if self._client is None:
            if not self._api_key:
                raise LLMError("OpenRouter API key is not configured")
            self._client = OpenAI(
                base_url=self._base_url,
                api_key=self._api_key,
                default_headers={"X-Title": self._app_title},
            )
        return self._client

    @property
    def cost_tracker(self) -> CostTracker:
        return self._cost_tracker

    def get_model_config(self, model: str) -> ModelConfig:
        if model in self._MODEL_CONFIGS:
            return self._MODEL_CONFIGS[model]
        if not model:
            raise LLMError("Model name is empty")
        return ModelConfig(
            name=model,
            role="general",
            max_tokens=8192,
            temperature=0.1,
            timeout=60.0,
        )

    async def generate(
        self,
        prompt: str,
        model: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        system: Optional[str] = None,
    ) -> str:
        """Generate text completion via OpenRouter."""
        return await self._complete(model, prompt, max_tokens, temperature, system)

    async def generate_with_vision(
        self,
        prompt: str,
        images: List[bytes],
        model: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        system: Optional[str] = None,
    ) -> str:
        """Generate completion from text and images via OpenRouter."""
        content: List[Dict[str, Any]] = [{"type": "text", "text": prompt}]
        for img_bytes in images:
            content.append({"type": "image_url", "image_url": {"url": to_data_url(img_bytes)}})
        return await self._complete(model, content, max_tokens, temperature, system)

    async def _complete(
        self,
        model: str,
        content: Any,
        max_tokens: Optional[int],
        temperature: Optional[float],
        system: Optional[str],
    ) -> str:
        client = self._get_client()
        await self._rate_limiter.acquire()

        config = self.get_model_config(model)
        start_time = time.time()

        messages = []
        if system or config.system_prompt:
            messages.append({"role": "system", "content": system or config.system_prompt})
        messages.append({"role": "user", "content": content})

        try:
            # SDK client is sync, run in executor for async compatibility
            loop = asyncio.get_running_loop()
            completion = await loop.run_in_executor(
                None,
                lambda: client.chat.completions.create(
                    model=config.name,
                    messages=messages,
                    max_tokens=max_tokens or config.max_tokens,
                    temperature=temperature if temperature is not None else config.temperature,
                    timeout=config.timeout,
                ),
            )
        except Exception as e:
            logger.error(f"OpenRouter call failed: {e}")
            raise LLMError(f"OpenRouter call failed: {e}") from e

        if not completion.choices:
            raise LLMError(f"OpenRouter returned no choices for {config.name}")

        text = completion.choices[0].message.content or ""

        usage = getattr(completion, "usage", None)
        self._cost_tracker.record(
            config.name,
            getattr(usage, "prompt_tokens", 0) or 0,
            getattr(usage, "completion_tokens", 0) or 0,
            start_time,
        )
        return text
