"""
Core agent implementation.

This is the orchestrator. It:
1. Runs one bounded model/tool loop per user turn
2. Dispatches requested function calls through the tool registry
3. Records turns and tool use in short-term memory
4. Executes multi-step tasks by running each planned step as a turn
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog
from pydantic import ValidationError

from ..config import AgentConfig, Settings
from ..errors import AgentError, AgentExecutionError, ConfigurationError, TaskExecutionError, ToolNotFoundError
from ..events import AgentEvent, EventBus, EventTypes
from ..llm import BaseLLM, FunctionCall, LLMMessage, LLMResponse, create_llm
from ..memory import LongTermMemory, MemoryEntry, ShortTermMemory
from ..tasks import Task, TaskPlanner, TaskQueue, TaskResult, TaskSpec, TaskStatus
from ..tools import BaseTool, ToolRegistry, create_memory_tools, create_tool
from ..utils import generate_id, parse_json_object, truncate
from .loader import AgentInfo, AgentLoader

logger = structlog.get_logger()

MAX_ITERATIONS_MESSAGE = (
    "I apologize, but I reached the maximum number of iterations without completing the task."
)

DEFAULT_SYSTEM_PROMPT = """You are {name}, {description}.
You are a helpful and intelligent agent that can use tools to accomplish tasks.
When you need to use a tool, respond with a function call.
Always think step by step and explain your reasoning."""


@dataclass
class Conversation:
    """Append-only message history owned by one agent."""

    messages: list[LLMMessage] = field(default_factory=list)

    def add_system_message(self, content: str) -> None:
        self.messages.append(LLMMessage(role="system", content=content))

    def add_user_message(self, content: str) -> None:
        self.messages.append(LLMMessage(role="user", content=content))

    def add_assistant_message(self, content: str, function_call: FunctionCall | None = None) -> None:
        self.messages.append(LLMMessage(
            role="assistant",
            content=content,
            function_call=function_call,
        ))

    def add_function_result(self, name: str, content: str) -> None:
        self.messages.append(LLMMessage(role="function", content=content, name=name))

    @property
    def is_empty(self) -> bool:
        return not self.messages

    @property
    def message_count(self) -> int:
        return len(self.messages)


class Agent:
    """An LLM agent with tools, memory and task execution.

    Calls into one agent must be serialized by the caller; there is no
    internal locking.
    """

    def __init__(
        self,
        config: AgentConfig | Mapping[str, Any],
        llm: BaseLLM | None = None,
        settings: Settings | None = None,
        event_bus: EventBus | None = None,
        tool_registry: ToolRegistry | None = None,
        task_planner: TaskPlanner | None = None,
    ):
        if not isinstance(config, AgentConfig):
            try:
                config = AgentConfig.model_validate(config)
            except ValidationError as e:
                raise ConfigurationError(f"Invalid agent configuration: {e}") from e

        self.config = config
        self.settings = settings or Settings()
        self.event_bus = event_bus or EventBus()

        self.id = generate_id()
        self.name = config.name
        self.description = config.description
        self.system_prompt = config.system_prompt or DEFAULT_SYSTEM_PROMPT.format(
            name=self.name,
            description=self.description or "an AI assistant",
        )
        self.max_iterations = self._configured("max_iterations")

        self.llm = llm or self._create_llm()

        self.short_term_memory = ShortTermMemory(
            self.id,
            max_items=self._configured_memory_cap(),
            event_bus=self.event_bus,
        )
        self.long_term_memory = LongTermMemory(self.id, event_bus=self.event_bus)

        self.tool_registry = tool_registry or ToolRegistry(event_bus=self.event_bus)
        self._register_configured_tools()

        self.task_queue = TaskQueue()
        self.task_planner = task_planner or TaskPlanner()

        self.conversation = Conversation()

        logger.info("Agent created", agent=self.name, agent_id=self.id)
        self._publish(EventTypes.AGENT_CREATED, {"name": self.name, "description": self.description})

    @classmethod
    def from_config(
        cls,
        name_or_path: str,
        loader: AgentLoader | None = None,
        settings: Settings | None = None,
        **kwargs: Any,
    ) -> "Agent":
        """Create an agent from a YAML configuration file or agent name."""
        settings = settings or Settings()
        loader = loader or AgentLoader(settings.agents_dir)
        logger.info("Loading agent from config", source=name_or_path)
        return cls(loader.load(name_or_path), settings=settings, **kwargs)

    @classmethod
    def list_available(cls, agents_dir: str | None = None) -> list[AgentInfo]:
        """List agent configurations available on disk."""
        return AgentLoader(agents_dir or Settings().agents_dir).list_agents()

    def _configured(self, field_name: str) -> Any:
        """Agent config value if set explicitly, else the process setting."""
        if field_name in self.config.model_fields_set:
            return getattr(self.config, field_name)
        return getattr(self.settings, field_name)

    def _configured_memory_cap(self) -> int:
        if "short_term_max_items" in self.config.memory.model_fields_set:
            return self.config.memory.short_term_max_items
        return self.settings.short_term_max_items

    def _create_llm(self) -> BaseLLM:
        llm_config = self.config.llm
        if not llm_config.api_key:
            provider = llm_config.provider if "provider" in llm_config.model_fields_set else None
            defaults = self.settings.get_llm_config(provider)
            overrides = llm_config.model_dump(exclude_unset=True, exclude={"api_key"})
            llm_config = defaults.model_copy(update=overrides)

        try:
            return create_llm(llm_config)
        except AgentError as e:
            raise ConfigurationError(str(e)) from e

    def _register_configured_tools(self) -> None:
        for tool_name in self.config.tools:
            kwargs: dict[str, Any] = {}
            if tool_name == "web_search":
                kwargs["tavily_api_key"] = self.settings.tavily_api_key
            try:
                self.tool_registry.register(create_tool(tool_name, **kwargs))
            except ToolNotFoundError as e:
                raise ConfigurationError(str(e)) from e

        if self.config.memory.enabled:
            for tool in create_memory_tools(self.short_term_memory, self.long_term_memory):
                self.tool_registry.register(tool)

    def _publish(self, event_type: str, data: dict[str, Any]) -> None:
        self.event_bus.publish(AgentEvent(type=event_type, agent_id=self.id, data=data))

    async def run(self, user_input: str) -> str:
        """Process one user turn and return the final response.

        Raises AgentExecutionError if the model call or tool dispatch fails.
        History appended before the failure is kept.
        """
        self._publish(EventTypes.AGENT_STARTED, {"name": self.name, "input": user_input})

        try:
            if self.conversation.is_empty:
                self.conversation.add_system_message(self.system_prompt)

            self.conversation.add_user_message(user_input)
            self.short_term_memory.add(user_input, {"type": "user_input"})

            tools = self.tool_registry.get_definitions() or None

            iterations = 0
            final_response: str | None = None

            while iterations < self.max_iterations:
                iterations += 1

                response = await self._generate(tools, iterations)

                if response.function_call:
                    await self._handle_function_call(response)
                    continue

                final_response = response.content
                self.conversation.add_assistant_message(final_response)
                self.short_term_memory.add(final_response, {"type": "agent_response"})
                break

            if final_response is None:
                logger.warning(
                    "Agent reached max iterations",
                    agent=self.name,
                    max_iterations=self.max_iterations,
                )
                final_response = MAX_ITERATIONS_MESSAGE

        except Exception as e:
            logger.error("Agent execution failed", agent=self.name, error=str(e))
            self._publish(EventTypes.AGENT_ERROR, {"error": str(e)})
            raise AgentExecutionError(f"Agent execution failed: {e}") from e

        logger.info(
            "Agent responded",
            agent=self.name,
            iterations=iterations,
            preview=truncate(final_response, 100),
        )
        self._publish(EventTypes.AGENT_STOPPED, {"response": final_response, "iterations": iterations})
        return final_response

    async def _generate(self, tools: list | None, iteration: int) -> LLMResponse:
        self._publish(EventTypes.LLM_REQUEST, {"iteration": iteration})
        try:
            response = await self.llm.generate(list(self.conversation.messages), tools=tools)
        except Exception as e:
            self._publish(EventTypes.LLM_ERROR, {"iteration": iteration, "error": str(e)})
            raise
        self._publish(EventTypes.LLM_RESPONSE, {"response": response, "iteration": iteration})
        return response

    async def _handle_function_call(self, response: LLMResponse) -> None:
        call = response.function_call
        arguments = parse_json_object(call.arguments)

        logger.debug("Executing tool", tool=call.name, arguments=arguments)
        result = await self.tool_registry.execute(call.name, arguments, self.id)

        serialized = json.dumps(result.to_dict(), default=str)
        self.conversation.add_assistant_message(response.content or "", call)
        self.conversation.add_function_result(call.name, serialized)

        self.short_term_memory.add(
            f"Used tool {call.name}: {serialized}",
            {"type": "tool_execution", "tool_name": call.name, "tool_used": True},
        )

    async def chat(self, message: str) -> str:
        return await self.run(message)

    async def execute_task(self, spec: TaskSpec | Mapping[str, Any] | str) -> TaskResult:
        """Plan a task and run its steps in order, one turn per step.

        A failing step fails the task and skips the remaining steps; the failed
        TaskResult is returned. A planner failure is raised as TaskExecutionError.
        """
        task = self.task_queue.add(spec)
        self._publish(EventTypes.TASK_CREATED, {"task_id": task.id, "description": task.description})

        task.start()
        self._publish(EventTypes.TASK_STARTED, {"task_id": task.id})

        try:
            planned = self.task_planner.plan(task.description)
        except Exception as e:
            task.fail(f"Task planning failed: {e}")
            self._publish(EventTypes.TASK_FAILED, {"task_id": task.id, "error": str(e)})
            raise TaskExecutionError(f"Task planning failed: {e}", task.id) from e

        for description in planned:
            task.add_step(description)

        for index, step in enumerate(task.steps):
            task.update_step_status(index, TaskStatus.IN_PROGRESS)
            self._publish(
                EventTypes.TASK_STEP_STARTED,
                {"task_id": task.id, "step_index": index, "step": step.description},
            )

            try:
                step_result = await self.run(step.description)
            except AgentError as e:
                task.update_step_status(index, TaskStatus.FAILED, error=str(e))
                return self._fail_task(task, str(e))

            task.update_step_status(index, TaskStatus.COMPLETED, step_result)
            self._publish(
                EventTypes.TASK_STEP_COMPLETED,
                {"task_id": task.id, "step_index": index, "result": step_result},
            )

        result = task.complete("\n".join(str(step.result) for step in task.steps))
        self.task_queue.mark_completed(task.id)

        self._publish(EventTypes.TASK_COMPLETED, {"task_id": task.id, "result": result})
        logger.info("Task completed", task_id=task.id, duration=result.duration)
        self._remember_task_outcome(task)
        return result

    def _fail_task(self, task: Task, error: str) -> TaskResult:
        result = task.fail(error)
        self._publish(EventTypes.TASK_FAILED, {"task_id": task.id, "error": error})
        logger.error("Task failed", task_id=task.id, error=error)
        self._remember_task_outcome(task)
        return result

    def _remember_task_outcome(self, task: Task) -> None:
        success = task.status == TaskStatus.COMPLETED
        self.short_term_memory.add(
            f"Task {task.status.value}: {task.description}",
            {"type": "task_result", "task_id": task.id, "task_success": success},
        )

    def clear_conversation(self) -> None:
        self.conversation = Conversation()
        logger.debug("Conversation cleared", agent=self.name)

    def get_conversation_history(self) -> list[LLMMessage]:
        return list(self.conversation.messages)

    def register_tool(self, tool: BaseTool) -> None:
        self.tool_registry.register(tool)

    def get_recent_memories(self, limit: int = 5) -> list[MemoryEntry]:
        return self.short_term_memory.get_recent(limit)

    def search_memories(self, query: str, limit: int = 5) -> list[MemoryEntry]:
        """Search long-term memory first, then short-term, without duplicates."""
        results: list[MemoryEntry] = []
        seen: set[str] = set()
        for entry in self.long_term_memory.search(query, limit) + self.short_term_memory.search(query, limit):
            if entry.content not in seen:
                seen.add(entry.content)
                results.append(entry)
        return results[:limit]

    def consolidate_memories(self) -> list[MemoryEntry]:
        """Promote important short-term memories into long-term memory."""
        promoted = self.long_term_memory.consolidate(self.short_term_memory.get_all())
        logger.info("Memories consolidated", agent=self.name, promoted=len(promoted))
        return promoted
