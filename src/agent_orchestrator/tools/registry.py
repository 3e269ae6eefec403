"""
Tool registry: name-keyed dispatch for every action the agent can request.
"""

from typing import Any

import structlog

from ..errors import ToolNotFoundError
from ..events import AgentEvent, EventBus, EventTypes
from ..llm.base import ToolDefinition
from .base import BaseTool, ToolResult

logger = structlog.get_logger()


class ToolRegistry:
    """Registry for managing tools.

    Tool failures are returned as ToolResult. Asking for a tool that was never
    registered raises ToolNotFoundError.
    """

    def __init__(self, event_bus: EventBus | None = None):
        self._tools: dict[str, BaseTool] = {}
        self.event_bus = event_bus

    def register(self, tool: BaseTool) -> None:
        """Register a tool, replacing any tool with the same name."""
        self._tools[tool.name] = tool
        logger.debug("Tool registered", tool_name=tool.name)

    def unregister(self, name: str) -> bool:
        """Unregister a tool."""
        if name in self._tools:
            del self._tools[name]
            logger.debug("Tool unregistered", tool_name=name)
            return True
        return False

    def get(self, name: str) -> BaseTool | None:
        """Get a tool by name."""
        return self._tools.get(name)

    def list_tools(self) -> list[str]:
        """List all registered tool names."""
        return list(self._tools.keys())

    def get_definitions(self) -> list[ToolDefinition]:
        """Get all tool definitions for the LLM."""
        return [tool.to_definition() for tool in self._tools.values()]

    def clear(self) -> None:
        self._tools.clear()
        logger.debug("All tools cleared from registry")

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    async def execute(
        self,
        name: str,
        arguments: dict[str, Any],
        agent_id: str | None = None,
    ) -> ToolResult:
        """Execute a tool by name."""
        tool = self.get(name)
        if tool is None:
            logger.error("Tool not found", tool_name=name)
            raise ToolNotFoundError(f"Tool not found: {name}", name)

        self._publish(EventTypes.TOOL_EXECUTION_STARTED, agent_id, {"tool": name, "args": arguments})

        try:
            logger.debug("Executing tool", tool_name=name, arguments=arguments)
            result = await tool.execute(**arguments)
            if not isinstance(result, ToolResult):
                raise TypeError(
                    f"Tool {name} returned {type(result).__name__}, expected ToolResult"
                )
        except Exception as e:
            logger.error("Tool execution error", tool_name=name, error=str(e))
            self._publish(EventTypes.TOOL_EXECUTION_FAILED, agent_id, {"tool": name, "error": str(e)})
            return ToolResult(success=False, result=None, error=str(e))

        self._publish(EventTypes.TOOL_EXECUTION_COMPLETED, agent_id, {"tool": name, "result": result})
        logger.debug("Tool executed", tool_name=name, success=result.success)
        return result

    def _publish(self, event_type: str, agent_id: str | None, data: dict[str, Any]) -> None:
        if self.event_bus is not None:
            self.event_bus.publish(AgentEvent(type=event_type, agent_id=agent_id, data=data))
