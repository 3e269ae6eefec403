"""
Keyword-driven task planner.

Deterministic placeholder for a model-backed planner: subclass TaskPlanner and
override plan() to change the strategy.
"""

from typing import Literal

import structlog

from ..utils import generate_id
from .task import Task, TaskPriority, TaskSpec

logger = structlog.get_logger()

Complexity = Literal["low", "medium", "high"]

# Checked in order; first keyword found in the description wins
STEP_TEMPLATES: list[tuple[str, list[str]]] = [
    ("research", [
        "Identify key topics and questions",
        "Search for relevant information",
        "Analyze and synthesize findings",
        "Summarize results",
    ]),
    ("write", [
        "Outline the content structure",
        "Draft the main content",
        "Review and edit",
        "Finalize the document",
    ]),
    ("analyze", [
        "Collect data",
        "Process and clean data",
        "Perform analysis",
        "Generate report",
    ]),
]

DEFAULT_STEPS = [
    "Understand the requirements",
    "Execute the task",
    "Verify the results",
]


class TaskPlanner:
    """Breaks task descriptions into ordered steps."""

    def plan(self, description: str) -> list[str]:
        lowered = description.lower()
        steps = next(
            (list(template) for keyword, template in STEP_TEMPLATES if keyword in lowered),
            list(DEFAULT_STEPS),
        )
        logger.debug("Task plan generated", description=description, steps=steps)
        return steps

    def decompose(self, description: str, prefix: str | None = None) -> list[TaskSpec]:
        """Turn a description into chained sub-task specs.

        Sub-task i depends on sub-task i-1, using the ids assigned here.
        """
        prefix = prefix or generate_id()
        specs = []
        for index, step in enumerate(self.plan(description)):
            specs.append(TaskSpec(
                id=f"{prefix}-step-{index}",
                description=step,
                priority=TaskPriority.MEDIUM,
                dependencies=[f"{prefix}-step-{index - 1}"] if index > 0 else [],
                metadata={"parent_task": description, "step_index": index},
            ))

        logger.debug("Task decomposed", description=description, subtask_count=len(specs))
        return specs

    def estimate_complexity(self, task: Task | TaskSpec) -> Complexity:
        word_count = len(task.description.split())
        dependency_count = len(task.dependencies)

        if word_count > 20 or dependency_count > 2:
            return "high"
        if word_count > 10 or dependency_count > 0:
            return "medium"
        return "low"
