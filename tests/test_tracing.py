"""
Tests for LangSmith run tracing.
"""

import os

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from agent_orchestrator.agent import Agent
from agent_orchestrator.config import AgentConfig, Settings
from agent_orchestrator.errors import AgentExecutionError, LLMError
from agent_orchestrator.events import EventBus, EventTypes
from agent_orchestrator.llm import LLMResponse
from agent_orchestrator.tracing import LangSmithTracer


@pytest.fixture
def settings():
    with patch.dict(os.environ, {}, clear=True):
        yield Settings(_env_file=None)


def make_agent(settings, bus, *responses):
    llm = MagicMock()
    llm.generate = AsyncMock(side_effect=list(responses))
    return Agent(AgentConfig(name="helper"), llm=llm, settings=settings, event_bus=bus)


def test_from_settings_disabled_without_flag():
    """Test that an API key alone does not enable tracing."""
    with patch.dict(os.environ, {"LANGCHAIN_API_KEY": "ls-key"}, clear=True):
        settings = Settings(_env_file=None)

    with patch("agent_orchestrator.tracing.Client") as client_cls:
        assert LangSmithTracer.from_settings(settings) is None

    client_cls.assert_not_called()


def test_from_settings_disabled_without_key():
    """Test that the tracing flag alone does not enable tracing."""
    with patch.dict(os.environ, {"LANGCHAIN_TRACING_V2": "true"}, clear=True):
        settings = Settings(_env_file=None)

    assert LangSmithTracer.from_settings(settings) is None


def test_from_settings_enabled():
    """Test client construction from the LangSmith environment variables."""
    env = {
        "LANGSMITH_API_KEY": "ls-key",
        "LANGCHAIN_TRACING_V2": "true",
        "LANGCHAIN_PROJECT": "demo",
    }
    with patch.dict(os.environ, env, clear=True):
        settings = Settings(_env_file=None)

    with patch("agent_orchestrator.tracing.Client") as client_cls:
        tracer = LangSmithTracer.from_settings(settings)

    client_cls.assert_called_once_with(api_key="ls-key", api_url="https://api.smith.langchain.com")
    assert tracer.client is client_cls.return_value
    assert tracer.project_name == "demo"


@pytest.mark.asyncio
async def test_run_is_traced_start_to_finish(settings):
    """Test one run opened on start and closed with the response."""
    bus = EventBus()
    client = MagicMock()
    tracer = LangSmithTracer(client, project_name="demo")
    tracer.attach(bus)

    agent = make_agent(settings, bus, LLMResponse(content="Hi there"))
    await agent.run("Hello")
    await bus.flush()

    client.create_run.assert_called_once()
    create_kwargs = client.create_run.call_args.kwargs
    assert create_kwargs["name"] == "helper"
    assert create_kwargs["inputs"] == {"input": "Hello"}
    assert create_kwargs["run_type"] == "chain"
    assert create_kwargs["project_name"] == "demo"
    assert create_kwargs["extra"] == {"metadata": {"agent_id": agent.id}}

    client.update_run.assert_called_once()
    run_id = client.update_run.call_args.args[0]
    update_kwargs = client.update_run.call_args.kwargs
    assert run_id == create_kwargs["id"]
    assert update_kwargs["outputs"] == {"response": "Hi there", "iterations": 1}
    assert update_kwargs["error"] is None
    assert tracer.open_runs == 0


@pytest.mark.asyncio
async def test_failed_run_is_closed_with_error(settings):
    """Test that an agent error ends the run with the message."""
    bus = EventBus()
    client = MagicMock()
    LangSmithTracer(client).attach(bus)

    agent = make_agent(settings, bus, LLMError("rate limited", provider="openai"))
    with pytest.raises(AgentExecutionError):
        await agent.run("Hello")
    await bus.flush()

    client.create_run.assert_called_once()
    update_kwargs = client.update_run.call_args.kwargs
    assert update_kwargs["outputs"] is None
    assert "rate limited" in update_kwargs["error"]


@pytest.mark.asyncio
async def test_client_failure_does_not_reach_agent(settings):
    """Test that LangSmith errors are logged and the turn still succeeds."""
    bus = EventBus()
    client = MagicMock()
    client.create_run.side_effect = RuntimeError("network down")
    tracer = LangSmithTracer(client)
    tracer.attach(bus)

    agent = make_agent(settings, bus, LLMResponse(content="ok"))
    assert await agent.run("Hello") == "ok"
    await bus.flush()

    client.update_run.assert_not_called()
    assert tracer.open_runs == 0


def test_detach_removes_handlers():
    """Test that detach unsubscribes every lifecycle handler."""
    bus = EventBus()
    tracer = LangSmithTracer(MagicMock())
    tracer.attach(bus)
    tracer.detach(bus)

    for event_type in (EventTypes.AGENT_STARTED, EventTypes.AGENT_STOPPED, EventTypes.AGENT_ERROR):
        assert bus.listener_count(event_type) == 0
