"""
Tools module for agent capabilities.
"""

from .base import BaseTool, Tool, ToolParameter, ToolResult
from .registry import ToolRegistry
from .builtin import CalculatorTool, NoteTool
from .web_search import WebSearchTool
from .messaging import (
    MessagingClient,
    MessagingGetChatsTool,
    MessagingGetContactsTool,
    MessagingGetMessagesTool,
    MessagingSendMediaTool,
    MessagingSendTool,
    create_messaging_tools,
)
from .memory_tools import create_memory_tools
from .factory import available_tools, create_tool

__all__ = [
    "BaseTool",
    "Tool",
    "ToolParameter",
    "ToolResult",
    "ToolRegistry",
    "CalculatorTool",
    "NoteTool",
    "WebSearchTool",
    "MessagingClient",
    "MessagingGetChatsTool",
    "MessagingGetContactsTool",
    "MessagingGetMessagesTool",
    "MessagingSendMediaTool",
    "MessagingSendTool",
    "create_messaging_tools",
    "create_memory_tools",
    "available_tools",
    "create_tool",
]
