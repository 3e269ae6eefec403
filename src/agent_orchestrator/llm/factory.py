"""
LLM factory for creating provider instances.

Supports: OpenAI, Anthropic Claude, OpenRouter, Ollama.
"""

from ..config import LLMConfig
from ..errors import LLMError
from .anthropic import AnthropicLLM
from .base import BaseLLM
from .ollama import OllamaLLM
from .openai import OpenAILLM

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


def create_llm(config: LLMConfig) -> BaseLLM:
    """Create an LLM instance based on configuration.

    Provider routing:
    - openai -> OpenAILLM (native OpenAI SDK)
    - anthropic -> AnthropicLLM (native Anthropic SDK)
    - openrouter -> OpenAILLM (OpenAI-compatible endpoint)
    - ollama -> OllamaLLM (local HTTP API)
    """
    provider = config.provider

    if provider == "openai":
        return OpenAILLM(
            api_key=config.api_key,
            model=config.model,
            base_url=config.base_url,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )
    elif provider == "anthropic":
        return AnthropicLLM(
            api_key=config.api_key,
            model=config.model,
            base_url=config.base_url,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )
    elif provider == "openrouter":
        return OpenAILLM(
            api_key=config.api_key,
            model=config.model,
            base_url=config.base_url or OPENROUTER_BASE_URL,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            provider="openrouter",
        )
    elif provider == "ollama":
        return OllamaLLM(
            model=config.model,
            base_url=config.base_url,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )
    else:
        raise LLMError(f"Unsupported LLM provider: {provider}", provider)
