"""
OpenAI GPT LLM provider (also works with OpenRouter and compatible APIs).
"""

from typing import Any

import openai
import structlog

from ..errors import LLMError
from .base import BaseLLM, FunctionCall, LLMMessage, LLMResponse, ToolDefinition, Usage

logger = structlog.get_logger()


class OpenAILLM(BaseLLM):
    """OpenAI chat completions provider."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4",
        base_url: str | None = None,
        max_tokens: int = 2000,
        temperature: float = 0.7,
        provider: str = "openai",
    ):
        super().__init__(api_key, model, base_url, max_tokens, temperature)
        self._provider = provider
        self.client = openai.AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
        )

    @property
    def provider_name(self) -> str:
        return self._provider

    def _convert_messages(self, messages: list[LLMMessage]) -> list[dict[str, Any]]:
        """Convert LLMMessages to OpenAI format.

        Function calls become tool calls with synthetic ids; each function
        message answers the most recent call.
        """
        converted = []
        call_id = None

        for index, msg in enumerate(messages):
            if msg.role == "function":
                converted.append({
                    "role": "tool",
                    "tool_call_id": call_id or f"call_{index}",
                    "content": msg.content,
                })
                call_id = None
            elif msg.role == "assistant" and msg.function_call:
                call_id = f"call_{index}"
                converted.append({
                    "role": "assistant",
                    "content": msg.content or None,
                    "tool_calls": [
                        {
                            "id": call_id,
                            "type": "function",
                            "function": {
                                "name": msg.function_call.name,
                                "arguments": msg.function_call.arguments,
                            },
                        }
                    ],
                })
            else:
                converted.append({
                    "role": msg.role,
                    "content": msg.content,
                })

        return converted

    def _convert_tools(self, tools: list[ToolDefinition]) -> list[dict[str, Any]]:
        """Convert ToolDefinitions to OpenAI format."""
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
        """Generate a response from GPT."""
        kwargs: dict[str, Any] = {
            **self._request_options(model, temperature, max_tokens),
            "messages": self._convert_messages(messages),
        }

        if tools:
            kwargs["tools"] = self._convert_tools(tools)
            kwargs["tool_choice"] = "auto"

        try:
            response = await self.client.chat.completions.create(**kwargs)
        except openai.APIError as e:
            logger.error("OpenAI API error", provider=self.provider_name, error=str(e))
            raise LLMError(f"{self.provider_name} API error: {e}", self.provider_name) from e

        choice = response.choices[0]
        message = choice.message

        function_call = None
        if message.tool_calls:
            # Only the first call is honoured per turn
            tc = message.tool_calls[0]
            function_call = FunctionCall(
                name=tc.function.name,
                arguments=tc.function.arguments or "{}",
            )

        usage = None
        if response.usage:
            usage = Usage(
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
            )

        return LLMResponse(
            content=message.content or "",
            function_call=function_call,
            usage=usage,
            model=response.model,
            stop_reason=choice.finish_reason,
            raw_response=response,
        )
