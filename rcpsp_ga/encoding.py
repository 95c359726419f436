"""Bit layout of a chromosome.

Layout
------
A chromosome is ``num_tasks`` equal slots. Each slot holds a task-ID field
of ``min_bits(num_tasks)`` bits (big-endian unsigned integer) followed by a
resource-preference mask of ``num_elements`` bits, where bit ``i`` set means
element ``i`` is a candidate for the task placed by this slot.
"""

from typing import Sequence


def min_bits(n: int) -> int:
    """Number of bits used for a task-ID field when there are ``n`` tasks.

    For ``n <= 1`` returns ``n`` itself (0 or 1). Otherwise returns
    ``floor(log2(n - 1) + 1)``, computed exactly as ``(n - 1).bit_length()``.
    """
    if n <= 1:
        return n
    return (n - 1).bit_length()


def slot_width(num_tasks: int, num_elements: int) -> int:
    return min_bits(num_tasks) + num_elements


def chromosome_length(num_tasks: int, num_elements: int) -> int:
    return num_tasks * slot_width(num_tasks, num_elements)


def int_to_bits(value: int, width: int) -> list[int]:
    """Encode ``value`` as ``width`` bits, most significant first.

    Raises:
        ValueError: If ``value`` is negative or does not fit in ``width`` bits.
    """
    if value < 0 or value >= (1 << width):
        raise ValueError(f"Value {value} does not fit in {width} bits")
    return [(value >> shift) & 1 for shift in range(width - 1, -1, -1)]


def bits_to_int(bits: Sequence[int]) -> int:
    n = 0
    for b in bits:
        n = (n << 1) | (1 if b else 0)
    return n


def set_bit_positions(bits: Sequence[int]) -> list[int]:
    """Ascending positions of set bits (resource-preference mask -> candidates)."""
    return [i for i, b in enumerate(bits) if b]
