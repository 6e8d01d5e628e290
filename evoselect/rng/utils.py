from __future__ import annotations

from typing import Sequence, TypeVar

from evoselect.exceptions import ContractViolation
from evoselect.rng.random import Random

T = TypeVar("T")


def get_permutation(rng: Random, size: int) -> list[int]:
    """Uniformly random ordering of ``range(size)`` (inside-out Fisher-Yates)."""
    if size < 0:
        raise ContractViolation(f"size must be non-negative, got {size}")
    seq: list[int] = []
    for i in range(size):
        pos = rng.get_uint(i + 1)
        if pos == i:
            seq.append(i)
        else:
            seq.append(seq[pos])
            seq[pos] = i
    return seq


def sample_with_replacement(rng: Random, items: Sequence[T], k: int) -> list[T]:
    if k > 0 and not items:
        raise ContractViolation("Cannot sample from an empty sequence")
    return [items[rng.get_uint(len(items))] for _ in range(k)]
