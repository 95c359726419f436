"""Bit-string chromosome for the RCPSP.

Ordering convention
-------------------
``compare(a, b)`` returns ``b.fitness - a.fitness``: a chromosome with a
*higher* fitness (longer makespan) sorts first, and ``sorted()`` over
chromosomes yields the largest makespan first. Fitness is minimised, so a
driver looking for the best chromosome must rank by ``fitness`` explicitly
(e.g. ``min(population, key=lambda c: c.fitness)``) instead of relying on the
natural ordering.
"""

from __future__ import annotations

import random
from typing import Iterable, Optional

from rcpsp_ga.decoder import DecodedGenes, decode_genes
from rcpsp_ga.encoding import chromosome_length, min_bits
from rcpsp_ga.errors import InvalidProblemSize
from rcpsp_ga.initialization import create_feasible_genes
from rcpsp_ga.models import Problem, Schedule
from rcpsp_ga.simulator import simulate_schedule


class Chromosome:
    """Fixed-length gene buffer bound to a shared problem, with cached fitness.

    ``Chromosome(problem)`` samples feasible random genes and evaluates them.
    ``Chromosome.from_genes(problem, bits)`` wraps a supplied bit string
    (e.g. after crossover) and evaluates it. Flipping a gene leaves the cached
    fitness stale until ``evaluate()`` is called again.
    """

    __slots__ = ("problem", "bits_per_task_id", "scan_order", "_genes", "_fitness")

    def __init__(
        self,
        problem: Problem,
        genes: Optional[Iterable[int]] = None,
        *,
        rng: Optional[random.Random] = None,
        scan_order: str = "index",
    ) -> None:
        if problem.num_tasks == 0 or problem.num_elements == 0:
            raise InvalidProblemSize(
                f"Problem needs at least one task and one element "
                f"(tasks={problem.num_tasks}, elements={problem.num_elements})"
            )
        self.problem = problem
        self.bits_per_task_id = min_bits(problem.num_tasks)
        self.scan_order = scan_order
        if genes is None:
            self._genes = create_feasible_genes(problem, rng=rng)
        else:
            self._genes = bytearray(1 if b else 0 for b in genes)
            expected = chromosome_length(problem.num_tasks, problem.num_elements)
            if len(self._genes) != expected:
                raise ValueError(f"Gene buffer has length {len(self._genes)}, expected {expected}")
        self._fitness = 0
        self.evaluate()

    @classmethod
    def from_genes(cls, problem: Problem, genes: Iterable[int], scan_order: str = "index") -> Chromosome:
        return cls(problem, genes, scan_order=scan_order)

    @property
    def fitness(self) -> int:
        """Cached makespan from the last ``evaluate()``."""
        return self._fitness

    @property
    def genes(self) -> bytes:
        """Immutable snapshot of the gene buffer (one 0/1 byte per gene)."""
        return bytes(self._genes)

    def __len__(self) -> int:
        return len(self._genes)

    def decode(self) -> DecodedGenes:
        return decode_genes(
            self._genes,
            self.problem.num_tasks,
            self.bits_per_task_id,
            self.problem.num_elements,
        )

    def schedule(self) -> Schedule:
        """Decode and simulate the current genes without touching the cache."""
        return simulate_schedule(self.problem, self.decode(), scan_order=self.scan_order)

    def evaluate(self) -> int:
        self._fitness = self.schedule().makespan
        return self._fitness

    def flip_gene(self, index: int) -> None:
        self._genes[index] ^= 1

    def compare(self, other: Chromosome) -> int:
        """Negative when ``self`` sorts first, i.e. has the higher fitness."""
        return other._fitness - self._fitness

    def __lt__(self, other: Chromosome) -> bool:
        return self.compare(other) < 0

    def copy(self) -> Chromosome:
        """Independent gene buffer, same problem reference, same cached fitness."""
        clone = Chromosome.__new__(Chromosome)
        clone.problem = self.problem
        clone.bits_per_task_id = self.bits_per_task_id
        clone.scan_order = self.scan_order
        clone._genes = bytearray(self._genes)
        clone._fitness = self._fitness
        return clone

    __copy__ = copy

    def __deepcopy__(self, memo: dict) -> Chromosome:
        # the problem is shared, never owned
        return self.copy()

    def __repr__(self) -> str:
        return f"Chromosome(len={len(self._genes)}, fitness={self._fitness})"
