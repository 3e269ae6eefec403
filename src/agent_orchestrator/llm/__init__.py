"""
LLM module for multi-provider model support.

Providers:
- OpenAI GPT (native SDK)
- Anthropic Claude (native SDK)
- OpenRouter (via OpenAI-compatible endpoint)
- Ollama (local HTTP API)
"""

from .base import BaseLLM, FunctionCall, LLMMessage, LLMResponse, ToolDefinition, Usage
from .anthropic import AnthropicLLM
from .openai import OpenAILLM
from .ollama import OllamaLLM
from .factory import create_llm

__all__ = [
    "BaseLLM",
    "FunctionCall",
    "LLMMessage",
    "LLMResponse",
    "ToolDefinition",
    "Usage",
    "AnthropicLLM",
    "OpenAILLM",
    "OllamaLLM",
    "create_llm",
]
