"""Minimal genetic algorithm driving bit-string chromosomes.

The driver only uses the public chromosome API: random construction,
``from_genes`` after crossover, ``flip_gene`` followed by ``evaluate``, and
``copy`` for elites. Selection ranks by ``fitness`` directly (smaller
makespan wins); the natural ordering of chromosomes puts larger makespans
first and is not used here.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Optional

from rcpsp_ga.chromosome import Chromosome
from rcpsp_ga.models import Problem

logger = logging.getLogger("rcpsp.ga")


@dataclass(slots=True)
class GAParams:
    """Hyper-parameters of the genetic algorithm."""

    population_size: int = 30
    generations: int = 50
    crossover_rate: float = 0.9
    mutation_rate: float = 0.01
    tournament_size: int = 3
    elite_size: int = 1
    scan_order: str = "index"


def tournament_select(
    population: list[Chromosome],
    size: int,
    rng: random.Random,
) -> Chromosome:
    contenders = rng.sample(population, min(size, len(population)))
    return min(contenders, key=lambda c: c.fitness)


def one_point_crossover(
    a: Chromosome,
    b: Chromosome,
    rng: random.Random,
) -> tuple[Chromosome, Chromosome]:
    """Exchange gene tails after a random cut point; children are evaluated."""
    genes_a, genes_b = a.genes, b.genes
    if len(genes_a) < 2:
        return a.copy(), b.copy()
    cut = rng.randrange(1, len(genes_a))
    child_a = Chromosome.from_genes(a.problem, genes_a[:cut] + genes_b[cut:], scan_order=a.scan_order)
    child_b = Chromosome.from_genes(a.problem, genes_b[:cut] + genes_a[cut:], scan_order=a.scan_order)
    return child_a, child_b


def mutate(chromosome: Chromosome, rate: float, rng: random.Random) -> int:
    """Flip each gene with probability ``rate``; re-evaluate if any flipped.

    Returns:
        Number of flipped genes.
    """
    flipped = 0
    for i in range(len(chromosome)):
        if rng.random() < rate:
            chromosome.flip_gene(i)
            flipped += 1
    if flipped:
        chromosome.evaluate()
    return flipped


def run_genetic_algorithm(
    problem: Problem,
    params: GAParams,
    rng: Optional[random.Random] = None,
    progress: Optional[list[int]] = None,
) -> tuple[Chromosome, float]:
    """Evolve a population and return the best chromosome found.

    Args:
        problem: Shared problem instance.
        params: Hyper-parameters.
        rng: Random generator for initialization and operators.
        progress: Optional list mutated in-place with the best makespan after
            each generation (index 0 is the initial population).

    Returns:
        Tuple ``(best, elapsed_seconds)``.
    """
    if rng is None:
        rng = random.Random()
    if progress is None:
        progress = []
    t0 = time.perf_counter()
    population = [
        Chromosome(problem, rng=rng, scan_order=params.scan_order)
        for _ in range(max(2, params.population_size))
    ]
    best = min(population, key=lambda c: c.fitness).copy()
    progress.append(best.fitness)
    logger.info("[ga] initial population=%d best=%d", len(population), best.fitness)

    for gen in range(1, params.generations + 1):
        ranked = sorted(population, key=lambda c: c.fitness)
        next_population = [c.copy() for c in ranked[: params.elite_size]]
        while len(next_population) < len(population):
            parent_a = tournament_select(population, params.tournament_size, rng)
            parent_b = tournament_select(population, params.tournament_size, rng)
            if rng.random() < params.crossover_rate:
                children = one_point_crossover(parent_a, parent_b, rng)
            else:
                children = (parent_a.copy(), parent_b.copy())
            for child in children:
                mutate(child, params.mutation_rate, rng)
                if len(next_population) < len(population):
                    next_population.append(child)
        population = next_population
        generation_best = min(population, key=lambda c: c.fitness)
        if generation_best.fitness < best.fitness:
            best = generation_best.copy()
            logger.info("[ga] gen=%d improved best=%d", gen, best.fitness)
        progress.append(best.fitness)

    elapsed = time.perf_counter() - t0
    logger.info("[ga] done generations=%d best=%d time=%.3fs", params.generations, best.fitness, elapsed)
    return best, elapsed
