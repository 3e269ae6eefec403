"""
Built-in computational tools: arithmetic and note storage.
"""

from typing import Any

from .base import BaseTool, ToolResult


class CalculatorTool(BaseTool):
    """Basic arithmetic on two numbers."""

    OPERATIONS = ("add", "subtract", "multiply", "divide")

    @property
    def name(self) -> str:
        return "calculator"

    @property
    def description(self) -> str:
        return "Performs basic arithmetic operations"

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "operation": {
                    "type": "string",
                    "enum": list(self.OPERATIONS),
                    "description": "The arithmetic operation to perform",
                },
                "a": {"type": "number", "description": "The first number"},
                "b": {"type": "number", "description": "The second number"},
            },
            "required": ["operation", "a", "b"],
        }

    async def execute(
        self,
        operation: str = "",
        a: Any = None,
        b: Any = None,
        **kwargs: Any,
    ) -> ToolResult:
        if not _is_number(a) or not _is_number(b):
            return ToolResult(success=False, error="Both a and b must be numbers")

        if operation == "add":
            value = a + b
        elif operation == "subtract":
            value = a - b
        elif operation == "multiply":
            value = a * b
        elif operation == "divide":
            if b == 0:
                return ToolResult(success=False, error="Cannot divide by zero")
            value = a / b
        else:
            return ToolResult(success=False, error=f"Unknown operation: {operation}")

        return ToolResult(success=True, result=value)


class NoteTool(BaseTool):
    """Key/value notes kept for the lifetime of the tool instance."""

    def __init__(self):
        self._notes: dict[str, str] = {}

    @property
    def name(self) -> str:
        return "note"

    @property
    def description(self) -> str:
        return "Saves and retrieves notes"

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "enum": ["save", "get", "list"],
                    "description": "The action to perform",
                },
                "key": {
                    "type": "string",
                    "description": "The note key (required for save and get)",
                },
                "content": {
                    "type": "string",
                    "description": "The note content (required for save)",
                },
            },
            "required": ["action"],
        }

    async def execute(
        self,
        action: str = "",
        key: str | None = None,
        content: str | None = None,
        **kwargs: Any,
    ) -> ToolResult:
        if action == "save":
            if not key or not content:
                return ToolResult(
                    success=False,
                    error="Both key and content are required for save action",
                )
            self._notes[str(key)] = str(content)
            return ToolResult(success=True, result=f"Note saved with key: {key}")

        if action == "get":
            if not key:
                return ToolResult(success=False, error="Key is required for get action")
            note = self._notes.get(str(key))
            if note is None:
                return ToolResult(success=False, error=f"Note not found with key: {key}")
            return ToolResult(success=True, result=note)

        if action == "list":
            return ToolResult(success=True, result=list(self._notes.keys()))

        return ToolResult(success=False, error=f"Unknown action: {action}")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
