"""
Error types for the agent orchestrator.

Failures inside a single tool execution or task step are reported as data
(ToolResult / TaskResult). Everything here is raised.
"""


class AgentError(Exception):
    """Base class for all orchestrator errors."""


class AgentExecutionError(AgentError):
    """A conversation turn could not be completed."""


class LLMError(AgentError):
    """A model-call provider failed."""

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(message)
        self.provider = provider


class ToolExecutionError(AgentError):
    """A tool could not be dispatched."""

    def __init__(self, message: str, tool_name: str | None = None):
        super().__init__(message)
        self.tool_name = tool_name


class ToolNotFoundError(ToolExecutionError):
    """The requested tool is not registered."""


class TaskExecutionError(AgentError):
    """Invalid task transition or task planning failure."""

    def __init__(self, message: str, task_id: str | None = None):
        super().__init__(message)
        self.task_id = task_id


class MemoryStoreError(AgentError):
    """Invalid memory operation."""


class ConfigurationError(AgentError):
    """Missing or invalid agent setup."""
