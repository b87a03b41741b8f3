"""LLM port interface.

Defines the contract for LLM providers. Core code depends only on this
abstraction, not on specific implementations like OpenRouter or Bedrock.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class ModelConfig:
    """Configuration for a specific model."""
    name: str           # provider model ID, e.g. "google/gemini-2.5-flash"
    role: str           # e.g. "report_extraction"
    max_tokens: int
    temperature: float
    timeout: float
    system_prompt: Optional[str] = None


class LLMPort(ABC):
    """Abstract interface for LLM providers.

    Implementations: OpenRouterAdapter, BedrockAdapter
    """

    @abstractmethod
    def get_model_config(self, model: str) -> ModelConfig:
        """Get configuration for a model.

        Args:
            model: Model key or provider model ID

        Returns:
            ModelConfig with all settings
        """
        pass

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        model: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        system: Optional[str] = None,
    ) -> str:
        """Generate text completion.

        Args:
            prompt: User prompt
            model: Model key or provider model ID
            max_tokens: Override config max_tokens
            temperature: Override config temperature
            system: Override config system_prompt

        Returns:
            Generated text response
        """
        pass

    @abstractmethod
    async def generate_with_vision(
        self,
        prompt: str,
        images: List[bytes],
        model: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        system: Optional[str] = None,
    ) -> str:
        """Generate completion from text and images.

        Args:
            prompt: User prompt
            images: List of image bytes (PNG, JPEG, WebP or GIF)
            model: Model key or provider model ID
            max_tokens: Override config max_tokens
            temperature: Override config temperature
            system: Override config system_prompt

        Returns:
            Generated text response
        """
        pass
