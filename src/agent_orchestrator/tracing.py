"""
LangSmith run tracing as an event bus subscriber.

One chain run is opened per Agent.run on agent.started and closed on
agent.stopped with the response, or on agent.error with the message.
Tracing failures are logged and never reach the agent.
"""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

import structlog
from langsmith import Client

from .config import Settings
from .events import AgentEvent, EventBus, EventTypes

logger = structlog.get_logger()


class LangSmithTracer:
    """Records agent turns as LangSmith runs."""

    def __init__(self, client: Any, project_name: str = "AgentFramework"):
        self.client = client
        self.project_name = project_name
        self._runs: dict[str | None, str] = {}

    @classmethod
    def from_settings(cls, settings: Settings) -> "LangSmithTracer | None":
        """Build a tracer, or None unless an API key is set and tracing is switched on."""
        if not settings.langchain_api_key or not settings.langchain_tracing_v2:
            logger.debug("LangSmith tracing disabled")
            return None

        client = Client(api_key=settings.langchain_api_key, api_url=settings.langchain_endpoint)
        logger.info("LangSmith tracing enabled", project=settings.langchain_project)
        return cls(client, project_name=settings.langchain_project)

    def attach(self, event_bus: EventBus) -> None:
        event_bus.on(EventTypes.AGENT_STARTED, self.on_started)
        event_bus.on(EventTypes.AGENT_STOPPED, self.on_stopped)
        event_bus.on(EventTypes.AGENT_ERROR, self.on_error)

    def detach(self, event_bus: EventBus) -> None:
        event_bus.off(EventTypes.AGENT_STARTED, self.on_started)
        event_bus.off(EventTypes.AGENT_STOPPED, self.on_stopped)
        event_bus.off(EventTypes.AGENT_ERROR, self.on_error)

    @property
    def open_runs(self) -> int:
        return len(self._runs)

    def on_started(self, event: AgentEvent) -> None:
        run_id = str(uuid4())
        try:
            self.client.create_run(
                name=event.data.get("name") or "agent",
                inputs={"input": event.data.get("input")},
                run_type="chain",
                project_name=self.project_name,
                id=run_id,
                start_time=event.timestamp,
                extra={"metadata": {"agent_id": event.agent_id}},
            )
        except Exception as e:
            logger.error("Failed to create LangSmith run", agent_id=event.agent_id, error=str(e))
            return
        self._runs[event.agent_id] = run_id

    def on_stopped(self, event: AgentEvent) -> None:
        self._end_run(
            event,
            outputs={
                "response": event.data.get("response"),
                "iterations": event.data.get("iterations"),
            },
        )

    def on_error(self, event: AgentEvent) -> None:
        self._end_run(event, error=event.data.get("error"))

    def _end_run(
        self,
        event: AgentEvent,
        outputs: dict[str, Any] | None = None,
        error: str | None = None,
    ) -> None:
        run_id = self._runs.pop(event.agent_id, None)
        if run_id is None:
            return

        try:
            self.client.update_run(
                run_id,
                outputs=outputs,
                error=error,
                end_time=datetime.now(timezone.utc),
            )
        except Exception as e:
            logger.error("Failed to end LangSmith run", agent_id=event.agent_id, error=str(e))
