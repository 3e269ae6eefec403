"""Agent orchestration and YAML configuration loading."""

from .core import MAX_ITERATIONS_MESSAGE, Agent, Conversation
from .loader import AgentInfo, AgentLoader, expand_env_vars

__all__ = [
    "Agent",
    "AgentInfo",
    "AgentLoader",
    "Conversation",
    "MAX_ITERATIONS_MESSAGE",
    "expand_env_vars",
]
