"""
Anthropic Claude LLM provider.
"""

import json
from typing import Any

import anthropic
import structlog

from ..errors import LLMError
from ..utils import parse_json_object
from .base import BaseLLM, FunctionCall, LLMMessage, LLMResponse, ToolDefinition, Usage

logger = structlog.get_logger()


class AnthropicLLM(BaseLLM):
    """Anthropic Claude LLM provider."""

    def __init__(
        self,
        api_key: str,
        model: str = "claude-3-opus-20240229",
        base_url: str | None = None,
        max_tokens: int = 2000,
        temperature: float = 0.7,
    ):
        super().__init__(api_key, model, base_url, max_tokens, temperature)
        self.client = anthropic.AsyncAnthropic(
            api_key=api_key,
            base_url=base_url,
        )

    @property
    def provider_name(self) -> str:
        return "anthropic"

    def _convert_messages(self, messages: list[LLMMessage]) -> list[dict[str, Any]]:
        """Convert LLMMessages to Anthropic format (system messages excluded)."""
        converted = []
        call_id = None

        for index, msg in enumerate(messages):
            if msg.role == "system":
                continue

            if msg.role == "function":
                converted.append({
                    "role": "user",
                    "content": [
                        {
                            "type": "tool_result",
                            "tool_use_id": call_id or f"call_{index}",
                            "content": msg.content,
                        }
                    ],
                })
                call_id = None
            elif msg.role == "assistant" and msg.function_call:
                call_id = f"call_{index}"
                content: list[dict[str, Any]] = []
                if msg.content:
                    content.append({"type": "text", "text": msg.content})
                content.append({
                    "type": "tool_use",
                    "id": call_id,
                    "name": msg.function_call.name,
                    "input": parse_json_object(msg.function_call.arguments),
                })
                converted.append({"role": "assistant", "content": content})
            else:
                converted.append({
                    "role": msg.role,
                    "content": msg.content,
                })

        return converted

    def _convert_tools(self, tools: list[ToolDefinition]) -> list[dict[str, Any]]:
        """Convert ToolDefinitions to Anthropic format."""
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "input_schema": tool.parameters,
            }
            for tool in tools
        ]

    def _extract_system_prompt(self, messages: list[LLMMessage]) -> str | None:
        """Join all system messages into one system prompt."""
        parts = [msg.content for msg in messages if msg.role == "system"]
        return "\n\n".join(parts) if parts else None

    async def generate(
        self,
        messages: list[LLMMessage],
        tools: list[ToolDefinition] | None = None,
        *,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Generate a response from Claude."""
        kwargs: dict[str, Any] = {
            **self._request_options(model, temperature, max_tokens),
            "messages": self._convert_messages(messages),
        }

        system = self._extract_system_prompt(messages)
        if system:
            kwargs["system"] = system

        if tools:
            kwargs["tools"] = self._convert_tools(tools)

        try:
            response = await self.client.messages.create(**kwargs)
        except anthropic.APIError as e:
            logger.error("Anthropic API error", error=str(e))
            raise LLMError(f"anthropic API error: {e}", self.provider_name) from e

        content = ""
        function_call = None

        for block in response.content:
            if block.type == "text":
                content += block.text
            elif block.type == "tool_use" and function_call is None:
                function_call = FunctionCall(
                    name=block.name,
                    arguments=json.dumps(block.input if isinstance(block.input, dict) else {}),
                )

        return LLMResponse(
            content=content,
            function_call=function_call,
            usage=Usage(
                prompt_tokens=response.usage.input_tokens,
                completion_tokens=response.usage.output_tokens,
            ),
            model=response.model,
            stop_reason=response.stop_reason,
            raw_response=response,
        )
