"""
Short-term memory: a bounded recency buffer per agent.
"""

from typing import Any

import structlog

from ..events import AgentEvent, EventBus, EventTypes
from .storage import InMemoryStorage, MemoryEntry, MemoryStorage

logger = structlog.get_logger()

DEFAULT_MAX_ITEMS = 50


class ShortTermMemory:
    """Keeps the newest `max_items` entries, evicting the oldest on overflow."""

    def __init__(
        self,
        agent_id: str,
        max_items: int = DEFAULT_MAX_ITEMS,
        storage: MemoryStorage | None = None,
        event_bus: EventBus | None = None,
    ):
        if max_items < 1:
            raise ValueError("max_items must be at least 1")
        self.agent_id = agent_id
        self.max_items = max_items
        self.storage = storage or InMemoryStorage()
        self.event_bus = event_bus

    def add(self, content: str, metadata: dict[str, Any] | None = None) -> MemoryEntry:
        """Store an entry, then trim the buffer back to max_items."""
        entry = self.storage.add(content, {**(metadata or {}), "agent_id": self.agent_id})

        evicted = self.storage.get_all()[self.max_items:]
        for old in evicted:
            self.storage.delete(old.id)

        self._publish(EventTypes.MEMORY_ADDED, {"memory": entry, "type": "short-term"})
        logger.debug(
            "Short-term memory added",
            agent_id=self.agent_id,
            memory_id=entry.id,
            evicted=len(evicted),
        )
        return entry

    def get(self, entry_id: str) -> MemoryEntry | None:
        return self.storage.get(entry_id)

    def get_recent(self, limit: int = 10) -> list[MemoryEntry]:
        """Most recently added entries first."""
        return self.storage.get_all()[:limit]

    def search(self, query: str, limit: int = 5) -> list[MemoryEntry]:
        results = self.storage.search(query, limit)
        self._publish(
            EventTypes.MEMORY_RETRIEVED,
            {"query": query, "results": results, "type": "short-term"},
        )
        return results

    def get_all(self) -> list[MemoryEntry]:
        return self.storage.get_all()

    def clear(self) -> None:
        self.storage.clear()
        self._publish(EventTypes.MEMORY_CLEARED, {"type": "short-term"})
        logger.debug("Short-term memory cleared", agent_id=self.agent_id)

    def __len__(self) -> int:
        return len(self.storage)

    def _publish(self, event_type: str, data: dict[str, Any]) -> None:
        if self.event_bus is not None:
            self.event_bus.publish(AgentEvent(type=event_type, agent_id=self.agent_id, data=data))
