"""
remember / recall tools over an agent's memories.
"""

from ..errors import MemoryStoreError
from ..memory import LongTermMemory, ShortTermMemory
from .base import Tool, ToolParameter, ToolResult


def create_memory_tools(
    short_term: ShortTermMemory,
    long_term: LongTermMemory,
) -> list[Tool]:
    """Create remember/recall tools bound to one agent's memories."""

    async def remember_tool(memory: str, importance: float = 0.8) -> ToolResult:
        """Save information to long-term memory."""
        try:
            entry = long_term.add(memory, {"type": "remembered"}, importance=float(importance))
        except (TypeError, ValueError, MemoryStoreError) as e:
            return ToolResult(success=False, error=str(e))
        return ToolResult(success=True, result=f"Saved to memory: {entry.content}")

    async def recall_tool(query: str, limit: int = 5) -> ToolResult:
        """Search long-term memory, then short-term memory."""
        matches = long_term.search(query, limit) or short_term.search(query, limit)
        if matches:
            return ToolResult(success=True, result=[m.content for m in matches])

        recent = short_term.get_recent(limit)
        return ToolResult(
            success=True,
            result={
                "message": f"No match for '{query}'",
                "recent": [m.content for m in recent],
            },
        )

    remember = Tool(
        name="remember",
        description=(
            "Save important information to long-term memory. Use this when the user "
            "shares something worth remembering."
        ),
        parameters=[
            ToolParameter(
                name="memory",
                param_type="string",
                description="The information to remember",
            ),
            ToolParameter(
                name="importance",
                param_type="number",
                description="Importance between 0 and 1 (default 0.8)",
                required=False,
                default=0.8,
            ),
        ],
        handler=remember_tool,
    )

    recall = Tool(
        name="recall",
        description="Search and retrieve previously saved information from memory.",
        parameters=[
            ToolParameter(
                name="query",
                param_type="string",
                description="What to search for in memory",
            ),
            ToolParameter(
                name="limit",
                param_type="integer",
                description="Maximum number of results",
                required=False,
                default=5,
            ),
        ],
        handler=recall_tool,
    )

    return [remember, recall]
