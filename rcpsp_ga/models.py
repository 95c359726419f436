"""Core data structures for RCPSP instances and decoded schedules.

This module defines:
    Task          -- one activity (duration, required skill, predecessors).
    Element       -- a resource/worker with per-skill performance factors.
    Problem       -- immutable container with all tasks and elements.
    ScheduledTask -- one simulated task with timing and assigned elements.
    Schedule      -- full simulated schedule plus makespan.

Indices into ``Problem.tasks`` and ``Problem.elements`` are the canonical
identifiers used by the encoder, decoder and simulator.
"""

from dataclasses import dataclass, field
from typing import Mapping


@dataclass(frozen=True)
class Task:
    """Single project activity.

    Attributes:
        name: Human readable identifier.
        duration: Amount of work (positive). Divided by the total performance
            of assigned elements to obtain the simulated duration.
        skill: Skill identifier an element must have to work on the task.
        precedences: Indices of tasks that must complete before this one.
    """

    name: str
    duration: float
    skill: str
    precedences: tuple[int, ...] = ()


@dataclass(frozen=True, eq=False)
class Element:
    """Resource able to work on tasks; performance <= 0 means unqualified.

    Compared and hashed by identity (``eq=False``) since ``performances`` is
    a plain dict; this keeps ``Element`` and ``Problem`` hashable.
    """

    name: str
    performances: Mapping[str, float] = field(default_factory=dict)

    def skill_performance(self, skill: str) -> float:
        return float(self.performances.get(skill, 0.0))


@dataclass(frozen=True)
class Problem:
    """Immutable RCPSP instance shared by reference between chromosomes.

    Attributes:
        tasks: Ordered tasks; position is the task id.
        elements: Ordered elements; position is the element id.
    """

    tasks: tuple[Task, ...]
    elements: tuple[Element, ...]

    def __post_init__(self) -> None:
        # tuples so that accidental mutation through the shared reference fails
        object.__setattr__(self, "tasks", tuple(self.tasks))
        object.__setattr__(self, "elements", tuple(self.elements))
        n = len(self.tasks)
        for idx, task in enumerate(self.tasks):
            for p in task.precedences:
                if not (0 <= p < n):
                    raise ValueError(f"Task {task.name!r} has precedence out of range: {p}")
                if p == idx:
                    raise ValueError(f"Task {task.name!r} lists itself as a precedence")

    @property
    def num_tasks(self) -> int:
        return len(self.tasks)

    @property
    def num_elements(self) -> int:
        return len(self.elements)

    def qualified_elements(self, skill: str) -> list[int]:
        """Return indices of elements with positive performance for ``skill``."""
        return [e for e, element in enumerate(self.elements) if element.skill_performance(skill) > 0]


@dataclass(frozen=True)
class ScheduledTask:
    """Single simulated task with timing and identification data.

    Fields:
        task: Task index.
        start: Start time.
        end: Completion time (start + simulated duration).
        elements: Indices of elements working on the task.
    """

    task: int
    start: int
    end: int
    elements: tuple[int, ...]

    @property
    def duration(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class Schedule:
    """Full schedule plus objective value (makespan).

    Fields:
        tasks: Scheduled tasks in assignment order (one row per task).
        makespan: Maximum completion time across all tasks.
    """

    tasks: list[ScheduledTask]
    makespan: int

    def row_for(self, task: int) -> ScheduledTask:
        for row in self.tasks:
            if row.task == task:
                return row
        raise KeyError(task)
