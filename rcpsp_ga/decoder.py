import logging
from dataclasses import dataclass
from typing import Sequence

from rcpsp_ga.encoding import bits_to_int, set_bit_positions

logger = logging.getLogger("rcpsp.decoder")


@dataclass(frozen=True)
class DecodedGenes:
    """Result of decoding a gene buffer.

    Fields:
        task_order: Permutation of ``range(num_tasks)``.
        candidates: Parallel to ``task_order``; ``candidates[k]`` is the
            ascending list of candidate element indices for task
            ``task_order[k]``.
    """

    task_order: list[int]
    candidates: list[list[int]]

    def candidates_by_task(self) -> list[list[int]]:
        """Re-key candidate lists by task identity instead of decode position."""
        by_task: list[list[int]] = [[] for _ in self.task_order]
        for task, cands in zip(self.task_order, self.candidates):
            by_task[task] = cands
        return by_task


def decode_genes(
    genes: Sequence[int],
    num_tasks: int,
    bits_per_task_id: int,
    num_elements: int,
) -> DecodedGenes:
    """Decode a raw bit string into a task order and candidate lists.

    Slots are read in physical order. A slot whose task-ID field is out of
    range (``>= num_tasks``) or repeats an id seen earlier is skipped. Tasks
    never placed are then appended in ascending index order, each taking its
    candidate mask from the slot at its own index. Every bit string of the
    right length therefore decodes to a full permutation.

    Args:
        genes: Bit sequence (0/1 or bools).
        num_tasks: Number of tasks in the problem.
        bits_per_task_id: Width of the task-ID field.
        num_elements: Width of the resource-preference mask.

    Returns:
        DecodedGenes with the repaired order and per-task candidates.

    Raises:
        ValueError: If ``genes`` length differs from the layout length.
    """
    width = bits_per_task_id + num_elements
    expected = num_tasks * width
    if len(genes) != expected:
        raise ValueError(f"Gene buffer has length {len(genes)}, expected {expected}")

    def read_elements(offset: int) -> list[int]:
        start = offset + bits_per_task_id
        return set_bit_positions(genes[start : start + num_elements])

    task_order: list[int] = []
    candidates: list[list[int]] = []
    placed = [False] * num_tasks
    skipped = 0
    for i in range(num_tasks):
        offset = i * width
        task_id = bits_to_int(genes[offset : offset + bits_per_task_id])
        if task_id >= num_tasks or placed[task_id]:
            skipped += 1
            continue
        placed[task_id] = True
        task_order.append(task_id)
        candidates.append(read_elements(offset))

    # missing tasks by ascending id
    for t in range(num_tasks):
        if not placed[t]:
            task_order.append(t)
            candidates.append(read_elements(t * width))

    if skipped:
        logger.debug("repaired %d invalid or duplicate task slots", skipped)
    return DecodedGenes(task_order=task_order, candidates=candidates)
