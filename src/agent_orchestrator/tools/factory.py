"""
Tool factory keyed by tool identifier.
"""

from typing import Any, Callable

from ..errors import ToolNotFoundError
from .base import BaseTool
from .builtin import CalculatorTool, NoteTool
from .web_search import WebSearchTool

_BUILDERS: dict[str, Callable[..., BaseTool]] = {
    "calculator": CalculatorTool,
    "note": NoteTool,
    "web_search": WebSearchTool,
}


def available_tools() -> list[str]:
    """Identifiers accepted by create_tool."""
    return list(_BUILDERS.keys())


def create_tool(name: str, **kwargs: Any) -> BaseTool:
    """Create a built-in tool by identifier.

    Messaging and memory tools need live collaborators and are created with
    create_messaging_tools / create_memory_tools instead.
    """
    builder = _BUILDERS.get(name)
    if builder is None:
        raise ToolNotFoundError(f"Unknown tool: {name}", name)
    return builder(**kwargs)
