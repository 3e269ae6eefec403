"""
Long-term memory with importance scoring and consolidation.

Consolidation copies short-term entries whose heuristic importance is above
CONSOLIDATION_THRESHOLD. Short-term entries are left in place.
"""

from typing import Any

import structlog

from ..errors import MemoryStoreError
from ..events import AgentEvent, EventBus, EventTypes
from .storage import InMemoryStorage, MemoryEntry, MemoryStorage

logger = structlog.get_logger()

DEFAULT_IMPORTANCE = 0.5
CONSOLIDATION_THRESHOLD = 0.6
LONG_CONTENT_CHARS = 200


class LongTermMemory:
    """Importance-scored archive for one agent."""

    def __init__(
        self,
        agent_id: str,
        storage: MemoryStorage | None = None,
        event_bus: EventBus | None = None,
    ):
        self.agent_id = agent_id
        self.storage = storage or InMemoryStorage()
        self.event_bus = event_bus

    def add(
        self,
        content: str,
        metadata: dict[str, Any] | None = None,
        importance: float = DEFAULT_IMPORTANCE,
    ) -> MemoryEntry:
        """Store content with an explicit importance in [0, 1]."""
        if not 0.0 <= importance <= 1.0:
            raise MemoryStoreError(f"Importance must be between 0 and 1, got {importance}")

        entry = self.storage.add(
            content,
            {**(metadata or {}), "agent_id": self.agent_id, "importance": importance},
        )
        self._publish(EventTypes.MEMORY_ADDED, {"memory": entry, "type": "long-term"})
        logger.debug(
            "Long-term memory added",
            agent_id=self.agent_id,
            memory_id=entry.id,
            importance=importance,
        )
        return entry

    def get(self, entry_id: str) -> MemoryEntry | None:
        return self.storage.get(entry_id)

    def search(self, query: str, limit: int = 5) -> list[MemoryEntry]:
        results = self.storage.search(query, limit)
        self._publish(
            EventTypes.MEMORY_RETRIEVED,
            {"query": query, "results": results, "type": "long-term"},
        )
        return results

    def get_important(self, min_importance: float = 0.7, limit: int = 10) -> list[MemoryEntry]:
        """Entries at or above min_importance, most important first."""
        important = [
            entry for entry in self.storage.get_all()
            if _importance_of(entry) >= min_importance
        ]
        important.sort(key=_importance_of, reverse=True)
        return important[:limit]

    def consolidate(self, entries: list[MemoryEntry]) -> list[MemoryEntry]:
        """Copy sufficiently important entries into long-term storage.

        Returns the newly created long-term entries.
        """
        promoted = []
        for entry in entries:
            importance = self.calculate_importance(entry)
            if importance > CONSOLIDATION_THRESHOLD:
                promoted.append(self.add(entry.content, entry.metadata, importance))

        logger.debug(
            "Memories consolidated",
            agent_id=self.agent_id,
            considered=len(entries),
            promoted=len(promoted),
        )
        return promoted

    @staticmethod
    def calculate_importance(entry: MemoryEntry) -> float:
        importance = DEFAULT_IMPORTANCE

        if len(entry.content) > LONG_CONTENT_CHARS:
            importance += 0.1
        if entry.metadata.get("task_success") is True:
            importance += 0.2
        if entry.metadata.get("tool_used"):
            importance += 0.1

        # Rounded to absorb float drift from the increments
        return round(min(importance, 1.0), 6)

    def get_all(self) -> list[MemoryEntry]:
        return self.storage.get_all()

    def clear(self) -> None:
        self.storage.clear()
        self._publish(EventTypes.MEMORY_CLEARED, {"type": "long-term"})
        logger.debug("Long-term memory cleared", agent_id=self.agent_id)

    def __len__(self) -> int:
        return len(self.storage)

    def _publish(self, event_type: str, data: dict[str, Any]) -> None:
        if self.event_bus is not None:
            self.event_bus.publish(AgentEvent(type=event_type, agent_id=self.agent_id, data=data))


def _importance_of(entry: MemoryEntry) -> float:
    importance = entry.metadata.get("importance")
    return float(importance) if isinstance(importance, (int, float)) else 0.0
