"""
Web search tool backed by Tavily.

Without an API key the tool answers with placeholder results, which keeps
agents runnable offline.
"""

from typing import Any

import httpx
import structlog

from .base import BaseTool, ToolResult

logger = structlog.get_logger()

TAVILY_URL = "https://api.tavily.com/search"


class WebSearchTool(BaseTool):
    """Tool for searching the web."""

    def __init__(
        self,
        tavily_api_key: str = "",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.tavily_api_key = tavily_api_key
        self.timeout = timeout
        self._transport = transport

    @property
    def name(self) -> str:
        return "web_search"

    @property
    def description(self) -> str:
        return (
            "Searches the web for information. Use this when you need current "
            "facts or news. Returns results with titles, URLs, and snippets."
        )

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "The search query",
                },
                "max_results": {
                    "type": "integer",
                    "description": "Number of results to return (default: 5)",
                    "default": 5,
                },
            },
            "required": ["query"],
        }

    async def execute(self, query: str = "", max_results: Any = 5, **kwargs: Any) -> ToolResult:
        """Execute web search."""
        if not query:
            return ToolResult(success=False, error="Query is required")

        try:
            count = int(max_results)
        except (TypeError, ValueError):
            return ToolResult(success=False, error=f"Invalid max_results: {max_results}")

        if not self.tavily_api_key:
            return self._placeholder_search(query, count)

        try:
            return await self._tavily_search(query, count)
        except httpx.HTTPError as e:
            logger.error("Web search error", error=str(e))
            return ToolResult(success=False, error=f"Search failed: {e}")

    async def _tavily_search(self, query: str, max_results: int) -> ToolResult:
        """Search using Tavily API."""
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(
                TAVILY_URL,
                json={
                    "api_key": self.tavily_api_key,
                    "query": query,
                    "max_results": max_results,
                    "include_answer": True,
                },
            )
            response.raise_for_status()
            data = response.json()

        results = [
            {
                "title": item.get("title", ""),
                "url": item.get("url", ""),
                "snippet": item.get("content", "")[:500],
            }
            for item in data.get("results", [])[:max_results]
        ]
        return ToolResult(success=True, result=results)

    def _placeholder_search(self, query: str, max_results: int) -> ToolResult:
        results = [
            {
                "title": f'Result {i + 1} for "{query}"',
                "url": f"https://example.com/result{i + 1}",
                "snippet": f'This is a placeholder search result for the query "{query}".',
            }
            for i in range(max_results)
        ]
        return ToolResult(success=True, result=results)
