"""
Ollama provider for locally hosted models.
"""

import json
from typing import Any

import httpx
import structlog

from ..errors import LLMError
from ..utils import parse_json_object
from .base import BaseLLM, FunctionCall, LLMMessage, LLMResponse, ToolDefinition, Usage

logger = structlog.get_logger()

DEFAULT_OLLAMA_URL = "http://localhost:11434"


class OllamaLLM(BaseLLM):
    """Ollama /api/chat provider. No API key required."""

    def __init__(
        self,
        api_key: str = "",
        model: str = "llama3.2",
        base_url: str | None = None,
        max_tokens: int = 2000,
        temperature: float = 0.7,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(api_key, model, base_url or DEFAULT_OLLAMA_URL, max_tokens, temperature)
        self.timeout = timeout
        self._transport = transport

    @property
    def provider_name(self) -> str:
        return "ollama"

    def _convert_messages(self, messages: list[LLMMessage]) -> list[dict[str, Any]]:
        converted = []
        for msg in messages:
            if msg.role == "function":
                converted.append({"role": "tool", "content": msg.content})
            elif msg.role == "assistant" and msg.function_call:
                converted.append({
                    "role": "assistant",
                    "content": msg.content,
                    "tool_calls": [
                        {
                            "function": {
                                "name": msg.function_call.name,
                                "arguments": parse_json_object(msg.function_call.arguments),
                            }
                        }
                    ],
                })
            else:
                converted.append({"role": msg.role, "content": msg.content})
        return converted

    def _convert_tools(self, tools: list[ToolDefinition]) -> list[dict[str, Any]]:
        return [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.parameters,
                },
            }
            for tool in tools
        ]

    async def generate(
        self,
        messages: list[LLMMessage],
        tools: list[ToolDefinition] | None = None,
        *,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Generate a response from a local Ollama model."""
        options = self._request_options(model, temperature, max_tokens)
        payload: dict[str, Any] = {
            "model": options["model"],
            "messages": self._convert_messages(messages),
            "stream": False,
            "options": {
                "temperature": options["temperature"],
                "num_predict": options["max_tokens"],
            },
        }
        if tools:
            payload["tools"] = self._convert_tools(tools)

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post("/api/chat", json=payload)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Ollama API error", error=str(e))
            raise LLMError(f"ollama API error: {e}", self.provider_name) from e

        message = data.get("message") or {}
        function_call = None
        tool_calls = message.get("tool_calls") or []
        if tool_calls:
            fn = tool_calls[0].get("function", {})
            arguments = fn.get("arguments", {})
            function_call = FunctionCall(
                name=fn.get("name", ""),
                arguments=arguments if isinstance(arguments, str) else json.dumps(arguments),
            )

        return LLMResponse(
            content=message.get("content") or "",
            function_call=function_call,
            usage=Usage(
                prompt_tokens=data.get("prompt_eval_count", 0),
                completion_tokens=data.get("eval_count", 0),
            ),
            model=data.get("model", options["model"]),
            stop_reason=data.get("done_reason"),
            raw_response=data,
        )
