"""Greedy discrete-event simulation of a decoded chromosome.

Index spaces
------------
Every piece of simulation state is a list indexed by a stable identifier:
``completion[task_id]``, ``ready[element_id]`` and ``candidates[task_id]``.
Decoded candidate lists (parallel to the decoded order) are re-keyed by task
identity before the simulation starts, so the scan order and the candidate
lookup never mix positions with identities.
"""

import logging
import math
from typing import Optional

from rcpsp_ga.decoder import DecodedGenes
from rcpsp_ga.errors import CyclicPrecedence, NoQualifiedResource
from rcpsp_ga.models import Problem, Schedule, ScheduledTask

logger = logging.getLogger("rcpsp.simulator")

SCAN_ORDERS = ("index", "decoded")


def check_qualified_resources(problem: Problem) -> list[list[int]]:
    """Return qualified element indices per task.

    Raises:
        NoQualifiedResource: If some task's skill has no qualified element.
    """
    qualified: list[list[int]] = []
    for t, task in enumerate(problem.tasks):
        elements = problem.qualified_elements(task.skill)
        if not elements:
            raise NoQualifiedResource(t, task.skill)
        qualified.append(elements)
    return qualified


def _start_time(
    problem: Problem,
    task_id: int,
    qualified: list[int],
    completion: list[float],
    ready: list[int],
) -> float:
    prec_ready: float = 0
    for p in problem.tasks[task_id].precedences:
        prec_ready = max(prec_ready, completion[p])
    if prec_ready == math.inf:
        return math.inf
    return max(prec_ready, min(ready[e] for e in qualified))


def _assign_elements(
    problem: Problem,
    task_id: int,
    candidates: list[int],
    qualified: list[int],
    start: int,
    ready: list[int],
) -> tuple[list[int], float]:
    """Walk candidates in preference order and pick the working crew.

    The walk stops at the first candidate that is busy at ``start`` or lacks
    the skill. With no usable candidate the first qualified element in index
    order is taken, whether or not it is free at ``start``.
    """
    skill = problem.tasks[task_id].skill
    assigned: list[int] = []
    total = 0.0
    for e in candidates:
        if ready[e] > start:
            break
        performance = problem.elements[e].skill_performance(skill)
        if performance <= 0:
            break
        total += performance
        assigned.append(e)
    if total <= 0:
        fallback = qualified[0]
        assigned = [fallback]
        total = problem.elements[fallback].skill_performance(skill)
    return assigned, total


def simulate_schedule(
    problem: Problem,
    decoded: DecodedGenes,
    scan_order: str = "index",
    qualified: Optional[list[list[int]]] = None,
) -> Schedule:
    """Simulate execution of a decoded chromosome.

    Each pass scans the uncompleted tasks (by task index, or by decoded
    position when ``scan_order="decoded"``) and schedules the first one whose
    precedences are all complete, at the later of its precedences' completion
    and the earliest time a qualified element is free. Its duration is the
    task's work divided by the summed performance of assigned elements
    (rounded down). After one assignment the scan restarts.

    Args:
        problem: Problem data.
        decoded: Output of ``decode_genes`` for this problem.
        scan_order: ``"index"`` or ``"decoded"``.
        qualified: Precomputed result of ``check_qualified_resources``.

    Returns:
        Schedule with one row per task in assignment order and the makespan.

    Raises:
        NoQualifiedResource: A task's skill has no qualified element.
        CyclicPrecedence: A pass finds no startable task (cycle in the
            precedence graph).
        ValueError: Unknown ``scan_order``.
    """
    if scan_order == "index":
        scan = list(range(problem.num_tasks))
    elif scan_order == "decoded":
        scan = list(decoded.task_order)
    else:
        raise ValueError(f"Unknown scan_order: {scan_order}")
    if qualified is None:
        qualified = check_qualified_resources(problem)

    candidates = decoded.candidates_by_task()
    completion: list[float] = [math.inf] * problem.num_tasks
    ready: list[int] = [0] * problem.num_elements
    rows: list[ScheduledTask] = []

    # one task is completed per pass
    for _ in range(problem.num_tasks):
        for t in scan:
            if completion[t] != math.inf:
                continue
            start = _start_time(problem, t, qualified[t], completion, ready)
            if start == math.inf:
                continue
            start = int(start)
            assigned, total = _assign_elements(problem, t, candidates[t], qualified[t], start, ready)
            end = start + math.floor(problem.tasks[t].duration / total)
            completion[t] = end
            for e in assigned:
                ready[e] = end
            rows.append(ScheduledTask(task=t, start=start, end=end, elements=tuple(assigned)))
            break
        else:
            pending = [t for t in range(problem.num_tasks) if completion[t] == math.inf]
            raise CyclicPrecedence(f"No task can start; pending tasks {pending}")

    makespan = max((row.end for row in rows), default=0)
    logger.debug("simulated %d tasks, makespan=%d", len(rows), makespan)
    return Schedule(tasks=rows, makespan=makespan)


def check_no_resource_overlap(schedule: Schedule) -> bool:
    """Ensure no element works on two tasks at the same time.

    A busy fallback element is double-booked, so this can fail on valid
    simulator output.

    Raises:
        AssertionError: On the first detected overlap for an element.
    """
    by_element: dict[int, list[ScheduledTask]] = {}
    for row in schedule.tasks:
        for e in row.elements:
            by_element.setdefault(e, []).append(row)
    for element, rows in by_element.items():
        rows.sort(key=lambda r: r.start)
        prev_end = -1
        for r in rows:
            if r.start < prev_end:
                raise AssertionError(
                    f"Overlap on element {element} between end {prev_end} and start {r.start}"
                )
            prev_end = r.end
    return True


def check_precedences(problem: Problem, schedule: Schedule) -> bool:
    """Ensure every task starts no earlier than all its precedences end.

    Raises:
        AssertionError: On the first violated precedence.
    """
    end = {row.task: row.end for row in schedule.tasks}
    for row in schedule.tasks:
        for p in problem.tasks[row.task].precedences:
            if row.start < end[p]:
                raise AssertionError(f"Task {row.task} starts at {row.start} before task {p} ends at {end[p]}")
    return True
