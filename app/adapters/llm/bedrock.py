"""Bedrock LLM adapter.

Implements LLMPort interface by directly using boto3.
Includes rate limiting and usage tracking.
"""
import asyncio
import base64
import json
import logging
import time
from typing import Any, Dict, List, Optional

import boto3
from botocore.config import Config

from app.core.ports.llm import LLMPort, ModelConfig
from app.core.exceptions import LLMError
from app.adapters.llm.images import detect_image_type
from app.adapters.llm.rate_limiter import RateLimiter
from app.adapters.llm.usage_tracker import CostTracker

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a medical laboratory data assistant. Follow the output format exactly."


class BedrockAdapter(LLMPort):
    """AWS Bedrock implementation of LLMPort.

    Uses the Anthropic messages format over bedrock-runtime invoke_model.
    """

    _MODEL_CONFIGS = {
        "haiku": ModelConfig(
            name="us.anthropic.claude-haiku-4-5-20251001-v1:0",
            role="report_extraction",
            max_tokens=8192,
            temperature=0.1,
            timeout=120.0,
            system_prompt=SYSTEM_PROMPT,
        ),
        "sonnet": ModelConfig(
            name="us.anthropic.claude-sonnet-4-5-20250929-v1:0",
            role="complex_reasoning",
            max_tokens=8192,
            temperature=0.1,
            timeout=180.0,
            system_prompt=SYSTEM_PROMPT,
        ),
    }

    def __init__(self, region: str = "us-east-1", requests_per_minute: int = 50):
        """Initialize adapter with boto3 client.

        Args:
            region: AWS region for Bedrock service
            requests_per_minute: Rate limit for API calls
        """
        session = boto3.Session()
        boto_config = Config(read_timeout=180, connect_timeout=10)
        self._client = session.client("bedrock-runtime", region_name=region, config=boto_config)
        self._rate_limiter = RateLimiter(requests_per_minute=requests_per_minute)
        self._cost_tracker = CostTracker()

    @property
    def cost_tracker(self) -> CostTracker:
        """Access the cost tracker for usage statistics."""
        return self._cost_tracker

    def get_model_config(self, model: str) -> ModelConfig:
        """Get configuration for a model key or a full Bedrock model ID."""
        if model in self._MODEL_CONFIGS:
            return self._MODEL_CONFIGS[model]
        if "anthropic." in model:
            base = self._MODEL_CONFIGS["haiku"]
            return ModelConfig(
                name=model,
                role=base.role,
                max_tokens=base.max_tokens,
                temperature=base.temperature,
                timeout=base.timeout,
                system_prompt=base.system_prompt,
            )
        raise LLMError(f"Unknown model: {model}. Available: {list(self._MODEL_CONFIGS.keys())}")

    async def generate(
        self,
        prompt: str,
        model: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        system: Optional[str] = None,
    ) -> str:
        """Generate text completion via Bedrock."""
        return await self._invoke(model, prompt, max_tokens, temperature, system)

    async def generate_with_vision(
        self,
        prompt: str,
        images: List[bytes],
        model: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        system: Optional[str] = None,
    ) -> str:
        """Generate completion from text and images via Bedrock."""
        content: List[Dict[str, Any]] = []
        for img_bytes in images:
            content.append({
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": detect_image_type(img_bytes),
                    "data": base64.b64encode(img_bytes).decode("utf-8"),
                },
            })
        content.append({"type": "text", "text": prompt})
        return await self._invoke(model, content, max_tokens, temperature, system)

    async def _invoke(
        self,
        model: str,
        content: Any,
        max_tokens: Optional[int],
        temperature: Optional[float],
        system: Optional[str],
    ) -> str:
        await self._rate_limiter.acquire()

        config = self.get_model_config(model)
        start_time = time.time()

        request_body = {
            "anthropic_version": "bedrock-2023-05-31",
            "max_tokens": max_tokens or config.max_tokens,
            "temperature": temperature if temperature is not None else config.temperature,
            "messages": [{"role": "user", "content": content}],
        }
        if system or config.system_prompt:
            request_body["system"] = system or config.system_prompt

        try:
            # Bedrock is sync, run in executor for async compatibility
            loop = asyncio.get_running_loop()
            response = await loop.run_in_executor(
                None,
                lambda: self._client.invoke_model(
                    modelId=config.name,
                    body=json.dumps(request_body),
                ),
            )

            response_body = json.loads(response["body"].read())
            text = response_body["content"][0]["text"]

            usage = response_body.get("usage", {})
            self._cost_tracker.record(
                config.name,
                usage.get("input_tokens", 0),
                usage.get("output_tokens", 0),
                start_time,
            )
            return text

        except Exception as e:
            logger.error(f"Bedrock call failed: {e}")
            raise LLMError(f"Bedrock call failed: {e}") from e
