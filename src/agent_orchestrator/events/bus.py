"""
Publish/subscribe channel for observability hooks.

The bus carries no domain state. One instance is created by the embedding
application and handed to every component that publishes; its lifetime is the
lifetime of that application.
"""

import asyncio
import inspect
from collections import deque

import structlog

from .types import AgentEvent, EventHandler

logger = structlog.get_logger()

MAX_BACKLOG = 1000


class EventBus:
    """Event-type keyed handler table with concurrent fan-out."""

    def __init__(self):
        self._handlers: dict[str, list[EventHandler]] = {}
        self._pending: set[asyncio.Task] = set()
        self._backlog: deque[AgentEvent] = deque(maxlen=MAX_BACKLOG)

    def on(self, event_type: str, handler: EventHandler) -> None:
        """Register a handler. Duplicates are kept, in insertion order."""
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug("Event handler registered", event_type=event_type)

    def off(self, event_type: str, handler: EventHandler) -> None:
        """Remove the first registration of a handler."""
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)
            logger.debug("Event handler removed", event_type=event_type)

    def once(self, event_type: str, handler: EventHandler) -> None:
        """Register a handler that runs for the next event only."""

        async def once_handler(event: AgentEvent) -> None:
            self.off(event_type, once_handler)
            result = handler(event)
            if inspect.isawaitable(result):
                await result

        self.on(event_type, once_handler)

    def remove_all_listeners(self, event_type: str | None = None) -> None:
        if event_type is None:
            self._handlers.clear()
        else:
            self._handlers.pop(event_type, None)

    def listener_count(self, event_type: str) -> int:
        return len(self._handlers.get(event_type, []))

    def event_types(self) -> list[str]:
        return list(self._handlers.keys())

    async def emit(self, event: AgentEvent) -> None:
        """Run every handler for the event concurrently and wait for them.

        A failing handler is logged and never affects its siblings or the caller.
        """
        handlers = list(self._handlers.get(event.type, []))
        if not handlers:
            return

        logger.debug("Emitting event", event_type=event.type, agent_id=event.agent_id)
        await asyncio.gather(*(self._run_handler(h, event) for h in handlers))

    async def _run_handler(self, handler: EventHandler, event: AgentEvent) -> None:
        try:
            result = handler(event)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(
                "Error in event handler",
                event_type=event.type,
                handler=getattr(handler, "__name__", repr(handler)),
                error=str(e),
            )

    def publish(self, event: AgentEvent) -> None:
        """Schedule delivery of an event without waiting for it.

        Outside a running event loop the event is held until the next publish
        or flush that happens inside one. Events nobody handles are dropped and
        at most MAX_BACKLOG events are held, oldest discarded first.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if self._handlers.get(event.type):
                self._backlog.append(event)
            return

        if self._backlog:
            backlog = list(self._backlog)
            self._backlog.clear()
            for held in backlog:
                self._schedule(loop, held)
        self._schedule(loop, event)

    def _schedule(self, loop: asyncio.AbstractEventLoop, event: AgentEvent) -> None:
        if not self._handlers.get(event.type):
            return
        task = loop.create_task(self.emit(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def flush(self) -> None:
        """Wait until every published event has been delivered."""
        if self._backlog:
            backlog = list(self._backlog)
            self._backlog.clear()
            for held in backlog:
                await self.emit(held)
        while self._pending:
            await asyncio.gather(*list(self._pending))
