"""Short-term and long-term memory for agents."""

from .long_term import LongTermMemory
from .short_term import ShortTermMemory
from .storage import InMemoryStorage, MemoryEntry, MemoryStorage

__all__ = [
    "InMemoryStorage",
    "LongTermMemory",
    "MemoryEntry",
    "MemoryStorage",
    "ShortTermMemory",
]
