"""
Memory store contract and the in-process implementation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from ..utils import generate_id


@dataclass(frozen=True)
class MemoryEntry:
    """A stored piece of content. Never modified after creation."""

    id: str
    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class MemoryStorage(ABC):
    """Base class for memory stores.

    Listing methods return entries most recent first.
    """

    @abstractmethod
    def add(self, content: str, metadata: dict[str, Any] | None = None) -> MemoryEntry:
        pass

    @abstractmethod
    def get(self, entry_id: str) -> MemoryEntry | None:
        pass

    @abstractmethod
    def get_all(self) -> list[MemoryEntry]:
        pass

    @abstractmethod
    def search(self, query: str, limit: int = 10) -> list[MemoryEntry]:
        pass

    @abstractmethod
    def delete(self, entry_id: str) -> bool:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

    def __len__(self) -> int:
        return len(self.get_all())


class InMemoryStorage(MemoryStorage):
    """Dict-backed store; recency follows insertion order."""

    def __init__(self):
        self._entries: dict[str, MemoryEntry] = {}

    def add(self, content: str, metadata: dict[str, Any] | None = None) -> MemoryEntry:
        entry = MemoryEntry(
            id=generate_id(),
            content=content,
            metadata=dict(metadata or {}),
        )
        self._entries[entry.id] = entry
        return entry

    def get(self, entry_id: str) -> MemoryEntry | None:
        return self._entries.get(entry_id)

    def get_all(self) -> list[MemoryEntry]:
        return list(reversed(self._entries.values()))

    def search(self, query: str, limit: int = 10) -> list[MemoryEntry]:
        query_lower = query.lower()
        matches = [e for e in self.get_all() if query_lower in e.content.lower()]
        return matches[:limit]

    def delete(self, entry_id: str) -> bool:
        return self._entries.pop(entry_id, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
