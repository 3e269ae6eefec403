"""
Tests for LLM providers and the provider factory.
"""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock

import anthropic
import httpx
import openai
import pytest

from agent_orchestrator.config import LLMConfig
from agent_orchestrator.errors import LLMError
from agent_orchestrator.llm import (
    AnthropicLLM,
    FunctionCall,
    LLMMessage,
    OllamaLLM,
    OpenAILLM,
    ToolDefinition,
    create_llm,
)

CONVERSATION = [
    LLMMessage(role="system", content="You are helpful."),
    LLMMessage(role="user", content="What is 2+2?"),
    LLMMessage(
        role="assistant",
        content="",
        function_call=FunctionCall(name="calculator", arguments='{"operation": "add", "a": 2, "b": 2}'),
    ),
    LLMMessage(role="function", content='{"success": true, "result": 4}', name="calculator"),
]

CALCULATOR = ToolDefinition(
    name="calculator",
    description="Performs basic arithmetic operations",
    parameters={"type": "object", "properties": {}},
)


def test_factory_routes_providers():
    """Test provider selection."""
    assert isinstance(create_llm(LLMConfig(provider="openai", api_key="sk")), OpenAILLM)
    assert isinstance(create_llm(LLMConfig(provider="anthropic", api_key="sk")), AnthropicLLM)
    assert isinstance(create_llm(LLMConfig(provider="ollama")), OllamaLLM)

    router = create_llm(LLMConfig(provider="openrouter", api_key="sk"))
    assert isinstance(router, OpenAILLM)
    assert router.provider_name == "openrouter"
    assert router.base_url == "https://openrouter.ai/api/v1"


def test_factory_unknown_provider():
    """Test that unknown providers raise LLMError."""
    with pytest.raises(LLMError) as exc_info:
        create_llm(LLMConfig(provider="skynet"))

    assert exc_info.value.provider == "skynet"


def test_openai_message_conversion_pairs_tool_calls():
    """Test function messages answer the preceding call id."""
    converted = OpenAILLM(api_key="sk")._convert_messages(CONVERSATION)

    assert converted[0] == {"role": "system", "content": "You are helpful."}
    call_id = converted[2]["tool_calls"][0]["id"]
    assert converted[2]["tool_calls"][0]["function"]["name"] == "calculator"
    assert converted[3] == {
        "role": "tool",
        "tool_call_id": call_id,
        "content": '{"success": true, "result": 4}',
    }


@pytest.mark.asyncio
async def test_openai_generate_parses_tool_call():
    """Test OpenAI response mapping."""
    llm = OpenAILLM(api_key="sk", model="gpt-4")
    response = SimpleNamespace(
        choices=[SimpleNamespace(
            message=SimpleNamespace(
                content=None,
                tool_calls=[SimpleNamespace(
                    function=SimpleNamespace(name="calculator", arguments='{"a": 1}'),
                )],
            ),
            finish_reason="tool_calls",
        )],
        usage=SimpleNamespace(prompt_tokens=10, completion_tokens=5),
        model="gpt-4",
    )
    llm.client.chat.completions.create = AsyncMock(return_value=response)

    result = await llm.generate(CONVERSATION[:2], tools=[CALCULATOR], temperature=0.1)

    assert result.content == ""
    assert result.function_call == FunctionCall(name="calculator", arguments='{"a": 1}')
    assert result.usage.total_tokens == 15

    kwargs = llm.client.chat.completions.create.call_args.kwargs
    assert kwargs["temperature"] == 0.1
    assert kwargs["tools"][0]["function"]["name"] == "calculator"


@pytest.mark.asyncio
async def test_openai_errors_are_wrapped():
    """Test that SDK errors become LLMError."""
    llm = OpenAILLM(api_key="sk")
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    llm.client.chat.completions.create = AsyncMock(
        side_effect=openai.APIError("rate limited", request, body=None)
    )

    with pytest.raises(LLMError) as exc_info:
        await llm.generate(CONVERSATION[:2])

    assert exc_info.value.provider == "openai"


def test_anthropic_message_conversion():
    """Test system extraction and tool_use/tool_result pairing."""
    llm = AnthropicLLM(api_key="sk")

    assert llm._extract_system_prompt(CONVERSATION) == "You are helpful."

    converted = llm._convert_messages(CONVERSATION)
    assert converted[0] == {"role": "user", "content": "What is 2+2?"}

    tool_use = converted[1]["content"][0]
    assert tool_use["type"] == "tool_use"
    assert tool_use["input"] == {"operation": "add", "a": 2, "b": 2}

    tool_result = converted[2]["content"][0]
    assert converted[2]["role"] == "user"
    assert tool_result["tool_use_id"] == tool_use["id"]


@pytest.mark.asyncio
async def test_anthropic_generate_parses_blocks():
    """Test Anthropic response mapping."""
    llm = AnthropicLLM(api_key="sk")
    response = SimpleNamespace(
        content=[
            SimpleNamespace(type="text", text="Let me calculate."),
            SimpleNamespace(type="tool_use", name="calculator", input={"a": 2}),
        ],
        usage=SimpleNamespace(input_tokens=7, output_tokens=3),
        model="claude-3-opus-20240229",
        stop_reason="tool_use",
    )
    llm.client.messages.create = AsyncMock(return_value=response)

    result = await llm.generate(CONVERSATION[:2], tools=[CALCULATOR])

    assert result.content == "Let me calculate."
    assert result.function_call.name == "calculator"
    assert json.loads(result.function_call.arguments) == {"a": 2}

    kwargs = llm.client.messages.create.call_args.kwargs
    assert kwargs["system"] == "You are helpful."
    assert kwargs["tools"][0]["input_schema"] == {"type": "object", "properties": {}}


@pytest.mark.asyncio
async def test_anthropic_errors_are_wrapped():
    """Test that SDK errors become LLMError."""
    llm = AnthropicLLM(api_key="sk")
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    llm.client.messages.create = AsyncMock(
        side_effect=anthropic.APIError("overloaded", request, body=None)
    )

    with pytest.raises(LLMError) as exc_info:
        await llm.generate(CONVERSATION[:2])

    assert exc_info.value.provider == "anthropic"


@pytest.mark.asyncio
async def test_ollama_generate():
    """Test the Ollama chat request and tool call parsing."""
    payloads = []

    def handler(request: httpx.Request) -> httpx.Response:
        payloads.append(json.loads(request.content))
        return httpx.Response(200, json={
            "model": "llama3.2",
            "message": {
                "role": "assistant",
                "content": "",
                "tool_calls": [{"function": {"name": "calculator", "arguments": {"a": 2}}}],
            },
            "done_reason": "stop",
            "prompt_eval_count": 12,
            "eval_count": 4,
        })

    llm = OllamaLLM(transport=httpx.MockTransport(handler))
    result = await llm.generate(CONVERSATION, tools=[CALCULATOR])

    assert result.function_call.name == "calculator"
    assert json.loads(result.function_call.arguments) == {"a": 2}
    assert result.usage.total_tokens == 16

    payload = payloads[0]
    assert payload["stream"] is False
    assert payload["messages"][3] == {"role": "tool", "content": '{"success": true, "result": 4}'}
    assert payload["messages"][2]["tool_calls"][0]["function"]["arguments"] == {
        "operation": "add", "a": 2, "b": 2,
    }


@pytest.mark.asyncio
async def test_ollama_http_error():
    """Test that HTTP failures become LLMError."""
    llm = OllamaLLM(transport=httpx.MockTransport(lambda request: httpx.Response(503)))

    with pytest.raises(LLMError):
        await llm.generate(CONVERSATION[:2])
