"""
Task and step lifecycle.

    pending -> in_progress -> completed | failed

Terminal states are final; retrying means creating a new task. complete()
and fail() are also accepted straight from pending.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from ..errors import TaskExecutionError
from ..utils import generate_id


class TaskPriority(str, Enum):
    """Scheduling priority."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return {"low": 1, "medium": 2, "high": 3}[self.value]


class TaskStatus(str, Enum):
    """Lifecycle state shared by tasks and steps."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.FAILED)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class TaskSpec:
    """Input for creating a task."""

    description: str
    priority: TaskPriority | str = TaskPriority.MEDIUM
    dependencies: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    deadline: datetime | None = None
    id: str | None = None

    def __post_init__(self):
        self.priority = TaskPriority(self.priority)
        self.dependencies = list(self.dependencies)


@dataclass
class TaskStep:
    """One ordered unit of work inside a task."""

    description: str
    status: TaskStatus = TaskStatus.PENDING
    result: Any = None
    error: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None


@dataclass
class TaskResult:
    """Outcome of a finished task. duration is in seconds."""

    success: bool
    result: Any = None
    error: str | None = None
    steps: list[TaskStep] = field(default_factory=list)
    duration: float = 0.0


class Task:
    """A unit of multi-step work tracked through its lifecycle."""

    def __init__(self, spec: TaskSpec):
        self.id = spec.id or generate_id()
        self.description = spec.description
        self.priority = TaskPriority(spec.priority)
        self.status = TaskStatus.PENDING
        self.deadline = spec.deadline
        self.dependencies = list(spec.dependencies)
        self.metadata = dict(spec.metadata)
        self.steps: list[TaskStep] = []
        self.result: TaskResult | None = None
        self.created_at = _now()
        self.started_at: datetime | None = None
        self.completed_at: datetime | None = None

    def __repr__(self) -> str:
        return f"Task(id={self.id!r}, status={self.status.value}, priority={self.priority.value})"

    def add_step(self, description: str) -> TaskStep:
        step = TaskStep(description=description)
        self.steps.append(step)
        return step

    def update_step_status(
        self,
        index: int,
        status: TaskStatus | str,
        result: Any = None,
        error: str | None = None,
    ) -> TaskStep:
        """Move a step to a new status, stamping its start and end times."""
        if not 0 <= index < len(self.steps):
            raise IndexError(f"Task {self.id} has no step {index}")

        step = self.steps[index]
        status = TaskStatus(status)
        if step.status.is_terminal:
            raise TaskExecutionError(
                f"Step {index} is already {step.status.value}", self.id
            )

        step.status = status
        if status == TaskStatus.IN_PROGRESS:
            step.start_time = _now()
        elif status.is_terminal:
            step.end_time = _now()
            if result is not None:
                step.result = result
            if error:
                step.error = error
        return step

    def start(self) -> None:
        if self.status != TaskStatus.PENDING:
            raise TaskExecutionError(
                f"Cannot start task in status {self.status.value}", self.id
            )
        self.status = TaskStatus.IN_PROGRESS
        self.started_at = _now()

    def complete(self, result: Any) -> TaskResult:
        self._finish(TaskStatus.COMPLETED)
        self.result = TaskResult(
            success=True,
            result=result,
            steps=self.steps,
            duration=self._elapsed(),
        )
        return self.result

    def fail(self, error: str) -> TaskResult:
        self._finish(TaskStatus.FAILED)
        self.result = TaskResult(
            success=False,
            result=None,
            error=error,
            steps=self.steps,
            duration=self._elapsed(),
        )
        return self.result

    def is_ready(self, completed_ids: set[str]) -> bool:
        """True once every dependency id is in completed_ids."""
        return all(dep in completed_ids for dep in self.dependencies)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def duration(self) -> float | None:
        """Seconds between start and completion, if both happened."""
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def _finish(self, status: TaskStatus) -> None:
        if self.status.is_terminal:
            raise TaskExecutionError(
                f"Task already {self.status.value}; create a new task to retry", self.id
            )
        self.status = status
        self.completed_at = _now()

    def _elapsed(self) -> float:
        start = self.started_at or self.created_at
        return (self.completed_at - start).total_seconds()
