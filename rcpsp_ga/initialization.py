"""Feasible random genes: randomized topological order plus random masks."""

import random
from typing import Optional

from rcpsp_ga.encoding import chromosome_length, int_to_bits, min_bits, slot_width
from rcpsp_ga.errors import CyclicPrecedence
from rcpsp_ga.models import Problem


def successors(problem: Problem) -> list[list[int]]:
    """Adjacency list: ``succ[p]`` holds every task listing ``p`` as precedence."""
    succ: list[list[int]] = [[] for _ in range(problem.num_tasks)]
    for idx, task in enumerate(problem.tasks):
        for p in set(task.precedences):
            succ[p].append(idx)
    return succ


def random_topological_order(
    problem: Problem,
    *,
    rng: Optional[random.Random] = None,
) -> list[int]:
    """Sample a random linear extension of the precedence DAG (Kahn).

    At each step the set of ready tasks is shuffled and one task is taken,
    then its successors with no remaining unmet precedences become ready.

    Args:
        problem: Problem data.
        rng: Optional random.Random instance (for reproducibility). If
            None uses module-level random.

    Returns:
        Task indices in an order respecting every precedence.

    Raises:
        CyclicPrecedence: If the precedence graph contains a cycle.
    """
    if rng is None:
        rng = random
    succ = successors(problem)
    in_degree = [len(set(task.precedences)) for task in problem.tasks]
    sources = [i for i, d in enumerate(in_degree) if d == 0]
    order: list[int] = []
    while sources:
        rng.shuffle(sources)
        n = sources.pop(0)
        order.append(n)
        for s in succ[n]:
            in_degree[s] -= 1
            if in_degree[s] == 0:
                sources.append(s)
    if len(order) != problem.num_tasks:
        stuck = sorted(i for i, d in enumerate(in_degree) if d > 0)
        raise CyclicPrecedence(f"Precedence graph has a cycle among tasks {stuck}")
    return order


def create_feasible_genes(
    problem: Problem,
    *,
    rng: Optional[random.Random] = None,
) -> bytearray:
    """Build a gene buffer whose decoded order is a random topological sort.

    Slot ``i`` receives the id of the ``i``-th task of the sampled order and
    an independent uniform random resource-preference mask.
    """
    if rng is None:
        rng = random
    order = random_topological_order(problem, rng=rng)
    id_bits = min_bits(problem.num_tasks)
    width = slot_width(problem.num_tasks, problem.num_elements)
    genes = bytearray(chromosome_length(problem.num_tasks, problem.num_elements))
    for i, n in enumerate(order):
        offset = i * width
        genes[offset : offset + id_bits] = bytes(int_to_bits(n, id_bits))
        for j in range(offset + id_bits, offset + width):
            genes[j] = rng.getrandbits(1)
    return genes
