"""
Agent Orchestrator - LLM agents with tools, memory and task planning.

An agent runs a bounded model/tool conversation loop, keeps short-term and
long-term memory, and executes multi-step tasks planned from a description.
"""

__version__ = "0.1.0"

from .agent import Agent, AgentLoader
from .config import AgentConfig, LLMConfig, MemoryConfig, Settings
from .errors import (
    AgentError,
    AgentExecutionError,
    ConfigurationError,
    LLMError,
    MemoryStoreError,
    TaskExecutionError,
    ToolExecutionError,
    ToolNotFoundError,
)
from .events import AgentEvent, EventBus, EventTypes
from .logging_config import configure_logging
from .tracing import LangSmithTracer

__all__ = [
    "__version__",
    "Agent",
    "AgentLoader",
    "AgentConfig",
    "LLMConfig",
    "MemoryConfig",
    "Settings",
    "AgentError",
    "AgentExecutionError",
    "ConfigurationError",
    "LLMError",
    "MemoryStoreError",
    "TaskExecutionError",
    "ToolExecutionError",
    "ToolNotFoundError",
    "AgentEvent",
    "EventBus",
    "EventTypes",
    "configure_logging",
    "LangSmithTracer",
]
