"""
Tests for short-term and long-term memory.
"""

import pytest

from agent_orchestrator.errors import MemoryStoreError
from agent_orchestrator.events import EventBus, EventTypes
from agent_orchestrator.memory import InMemoryStorage, LongTermMemory, MemoryEntry, ShortTermMemory


def _entry(content: str, **metadata) -> MemoryEntry:
    return MemoryEntry(id="m1", content=content, metadata=metadata)


def test_storage_lists_newest_first():
    """Test that get_all returns the most recent entry first."""
    storage = InMemoryStorage()
    storage.add("first")
    storage.add("second")

    assert [e.content for e in storage.get_all()] == ["second", "first"]


def test_storage_search_is_case_insensitive():
    """Test substring search."""
    storage = InMemoryStorage()
    storage.add("The Quick brown fox")
    storage.add("lazy dog")

    results = storage.search("quick")

    assert len(results) == 1
    assert results[0].content == "The Quick brown fox"


def test_storage_delete_and_clear():
    """Test removing entries."""
    storage = InMemoryStorage()
    entry = storage.add("hello")

    assert storage.delete(entry.id) is True
    assert storage.delete(entry.id) is False

    storage.add("again")
    storage.clear()
    assert len(storage) == 0


def test_short_term_evicts_oldest():
    """Test that the buffer never exceeds max_items."""
    memory = ShortTermMemory("agent-1", max_items=3)

    for i in range(5):
        memory.add(f"item {i}")

    assert len(memory) == 3
    assert [e.content for e in memory.get_all()] == ["item 4", "item 3", "item 2"]


def test_short_term_default_cap_keeps_newest():
    """Test 55 inserts into a 50 item buffer."""
    memory = ShortTermMemory("agent-1", max_items=50)

    for i in range(55):
        memory.add(f"entry {i}")

    assert len(memory) == 50
    assert [e.content for e in memory.get_recent(5)] == [
        "entry 54", "entry 53", "entry 52", "entry 51", "entry 50",
    ]
    assert "entry 4" not in [e.content for e in memory.get_all()]
    assert "entry 5" in [e.content for e in memory.get_all()]


def test_short_term_tags_agent_id():
    """Test that entries carry the owning agent id."""
    memory = ShortTermMemory("agent-1")
    entry = memory.add("hello", {"type": "user_input"})

    assert entry.metadata == {"type": "user_input", "agent_id": "agent-1"}


def test_short_term_get_recent_and_search():
    """Test recency listing and search limits."""
    memory = ShortTermMemory("agent-1")
    for i in range(8):
        memory.add(f"note {i}")

    assert [e.content for e in memory.get_recent(2)] == ["note 7", "note 6"]
    assert len(memory.search("note")) == 5
    assert memory.search("missing") == []


def test_short_term_rejects_zero_capacity():
    """Test that a zero-size buffer is refused."""
    with pytest.raises(ValueError):
        ShortTermMemory("agent-1", max_items=0)


@pytest.mark.asyncio
async def test_short_term_publishes_events():
    """Test memory events on the bus."""
    bus = EventBus()
    seen = []
    bus.on(EventTypes.MEMORY_ADDED, lambda e: seen.append(e.type))
    bus.on(EventTypes.MEMORY_CLEARED, lambda e: seen.append(e.type))

    memory = ShortTermMemory("agent-1", event_bus=bus)
    memory.add("hello")
    memory.clear()
    await bus.flush()

    assert sorted(seen) == sorted([EventTypes.MEMORY_ADDED, EventTypes.MEMORY_CLEARED])


def test_long_term_add_records_importance():
    """Test explicit importance in metadata."""
    memory = LongTermMemory("agent-1")
    entry = memory.add("fact", importance=0.9)

    assert entry.metadata["importance"] == 0.9
    assert entry.metadata["agent_id"] == "agent-1"


@pytest.mark.parametrize("importance", [-0.1, 1.5])
def test_long_term_rejects_out_of_range_importance(importance):
    """Test the importance bounds."""
    memory = LongTermMemory("agent-1")
    with pytest.raises(MemoryStoreError):
        memory.add("fact", importance=importance)


def test_long_term_get_important_sorted():
    """Test that important memories come back highest first."""
    memory = LongTermMemory("agent-1")
    memory.add("low", importance=0.2)
    memory.add("high", importance=0.95)
    memory.add("mid", importance=0.75)

    assert [e.content for e in memory.get_important()] == ["high", "mid"]
    assert [e.content for e in memory.get_important(0.0, limit=1)] == ["high"]


def test_calculate_importance_baseline():
    """Test the default score for plain content."""
    assert LongTermMemory.calculate_importance(_entry("short")) == 0.5


def test_calculate_importance_increments():
    """Test the long content, task success and tool use bonuses."""
    long_text = "x" * 201

    assert LongTermMemory.calculate_importance(_entry(long_text)) == 0.6
    assert LongTermMemory.calculate_importance(_entry("done", task_success=True)) == 0.7
    assert LongTermMemory.calculate_importance(_entry("used", tool_used=True)) == 0.6
    assert LongTermMemory.calculate_importance(
        _entry(long_text, task_success=True, tool_used=True)
    ) == 0.9


def test_calculate_importance_requires_true_task_success():
    """Test that a failed task gets no bonus."""
    assert LongTermMemory.calculate_importance(_entry("failed", task_success=False)) == 0.5


def test_consolidate_promotes_only_above_threshold():
    """Test that exactly 0.6 is not promoted."""
    long_term = LongTermMemory("agent-1")
    short_term = ShortTermMemory("agent-1")

    short_term.add("plain")
    short_term.add("used a tool", {"tool_used": True})
    short_term.add("task finished", {"task_success": True})

    promoted = long_term.consolidate(short_term.get_all())

    assert [e.content for e in promoted] == ["task finished"]
    assert promoted[0].metadata["importance"] == 0.7
    assert len(short_term) == 3
    assert len(long_term) == 1
