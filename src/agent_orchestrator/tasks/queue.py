"""
Priority and dependency aware task queue.
"""

from collections.abc import Mapping
from typing import Any

import structlog

from ..errors import TaskExecutionError
from .task import Task, TaskSpec, TaskStatus

logger = structlog.get_logger()


class TaskQueue:
    """Holds an agent's tasks and picks the next runnable one.

    A task is ready when every dependency id is in the completed-set. A
    dependency on an id that never enters the queue blocks forever;
    get_blocked() lists such tasks.
    """

    def __init__(self):
        self._tasks: dict[str, Task] = {}
        self._completed: set[str] = set()

    def add(self, spec: TaskSpec | Mapping[str, Any] | str) -> Task:
        """Create a pending task from a spec, a mapping or a bare description."""
        if isinstance(spec, str):
            spec = TaskSpec(description=spec)
        elif isinstance(spec, Mapping):
            spec = TaskSpec(**spec)

        if spec.id is not None and spec.id in self._tasks:
            raise TaskExecutionError(f"Duplicate task id: {spec.id}", spec.id)

        task = Task(spec)
        self._tasks[task.id] = task
        logger.debug("Task added to queue", task_id=task.id, description=task.description)
        return task

    def get(self, task_id: str) -> Task | None:
        return self._tasks.get(task_id)

    def get_all(self) -> list[Task]:
        return list(self._tasks.values())

    def get_pending(self) -> list[Task]:
        return self._with_status(TaskStatus.PENDING)

    def get_in_progress(self) -> list[Task]:
        return self._with_status(TaskStatus.IN_PROGRESS)

    def get_completed(self) -> list[Task]:
        return self._with_status(TaskStatus.COMPLETED)

    def get_failed(self) -> list[Task]:
        return self._with_status(TaskStatus.FAILED)

    def get_next(self) -> Task | None:
        """Highest-priority ready task; FIFO within a priority."""
        ready = [task for task in self.get_pending() if task.is_ready(self._completed)]
        if not ready:
            return None

        # Stable sort keeps insertion order for equal timestamps
        ready.sort(key=lambda task: (-task.priority.rank, task.created_at))
        return ready[0]

    def mark_completed(self, task_id: str) -> None:
        """Record a completed task as satisfying dependencies.

        Ignored unless the task exists and its status is completed.
        """
        task = self._tasks.get(task_id)
        if task is not None and task.status == TaskStatus.COMPLETED:
            self._completed.add(task_id)
            logger.debug("Task marked as completed", task_id=task_id)

    def is_marked_completed(self, task_id: str) -> bool:
        return task_id in self._completed

    def get_blocked(self) -> list[Task]:
        """Pending tasks depending on ids this queue has never seen."""
        return [
            task for task in self.get_pending()
            if any(dep not in self._tasks and dep not in self._completed for dep in task.dependencies)
        ]

    def remove(self, task_id: str) -> bool:
        removed = self._tasks.pop(task_id, None) is not None
        self._completed.discard(task_id)
        if removed:
            logger.debug("Task removed from queue", task_id=task_id)
        return removed

    def clear(self) -> None:
        self._tasks.clear()
        self._completed.clear()
        logger.debug("Task queue cleared")

    def size(self) -> int:
        return len(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def is_empty(self) -> bool:
        return not self._tasks

    def has_ready_tasks(self) -> bool:
        return self.get_next() is not None

    def _with_status(self, status: TaskStatus) -> list[Task]:
        return [task for task in self._tasks.values() if task.status == status]
