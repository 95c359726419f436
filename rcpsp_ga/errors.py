"""Typed failures raised while building or evaluating chromosomes.

All of them derive from ``ValueError`` so callers that already guard problem
loading with ``except ValueError`` keep working.
"""


class SchedulingError(ValueError):
    """Base class for problem conditions that make evaluation impossible."""


class InvalidProblemSize(SchedulingError):
    """Problem has no tasks or no elements."""


class CyclicPrecedence(SchedulingError):
    """Precedence graph has a cycle, or no remaining task can ever start."""


class NoQualifiedResource(SchedulingError):
    """No element in the whole problem can perform a task's skill."""

    def __init__(self, task: int, skill: str) -> None:
        super().__init__(f"No element qualified for skill {skill!r} required by task {task}")
        self.task = task
        self.skill = skill
