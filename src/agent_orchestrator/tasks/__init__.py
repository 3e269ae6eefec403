"""Task model, scheduling queue and planner."""

from .task import Task, TaskPriority, TaskResult, TaskSpec, TaskStatus, TaskStep
from .queue import TaskQueue
from .planner import TaskPlanner

__all__ = [
    "Task",
    "TaskPlanner",
    "TaskPriority",
    "TaskQueue",
    "TaskResult",
    "TaskSpec",
    "TaskStatus",
    "TaskStep",
]
