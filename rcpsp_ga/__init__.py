"""Bit-string chromosome encoding and schedule simulation for the RCPSP.

Exports base data structures, the chromosome and problem loading.
"""

from rcpsp_ga.chromosome import Chromosome  # noqa: F401
from rcpsp_ga.errors import (  # noqa: F401
    CyclicPrecedence,
    InvalidProblemSize,
    NoQualifiedResource,
    SchedulingError,
)
from rcpsp_ga.models import Element, Problem, Schedule, ScheduledTask, Task  # noqa: F401
from rcpsp_ga.parser import load_problem  # noqa: F401

__all__ = [
    "Chromosome",
    "CyclicPrecedence",
    "Element",
    "InvalidProblemSize",
    "NoQualifiedResource",
    "Problem",
    "Schedule",
    "ScheduledTask",
    "SchedulingError",
    "Task",
    "load_problem",
]
