from __future__ import annotations

import math
from typing import Iterable

import numpy as np

from evoselect.exceptions import ContractViolation, EmptyWeightError


def _capacity_for(size: int) -> int:
    capacity = 1
    while capacity < size:
        capacity <<= 1
    return capacity


class WeightedIndex:
    """Proportional sampling over a dense id space.

    Weights live in a Fenwick (binary-indexed) tree whose capacity is kept at
    a power of two, so the root node always holds the total weight.  Both
    ``adjust`` and ``index`` are O(log N).

    Each id owns the half-open interval ``[prefix(id), prefix(id) + weight)``;
    ``index(position)`` returns the id whose interval contains ``position``.
    Instances are mutated in place and are not safe for concurrent use.
    """

    def __init__(self, size: int = 0):
        if size < 0:
            raise ContractViolation(f"size must be non-negative, got {size}")
        self._size = size
        self._build([0.0] * size)

    @classmethod
    def from_weights(cls, weights: Iterable[float]) -> "WeightedIndex":
        """Build an index from initial weights in O(N)."""
        values = [float(w) for w in weights]
        for item_id, weight in enumerate(values):
            _check_weight(item_id, weight)
        index = cls.__new__(cls)
        index._size = len(values)
        index._build(values)
        return index

    # ------------------------------------------------------------------
    # Internal tree management
    # ------------------------------------------------------------------

    def _build(self, weights: list[float]) -> None:
        capacity = _capacity_for(max(len(weights), 1))
        padded = np.zeros(capacity, dtype=np.float64)
        padded[: len(weights)] = weights

        prefix = np.concatenate(([0.0], np.cumsum(padded)))
        nodes = np.arange(1, capacity + 1)
        tree = prefix[nodes] - prefix[nodes - (nodes & -nodes)]

        self._capacity = capacity
        self._weights: list[float] = padded.tolist()
        self._tree: list[float] = [0.0] + tree.tolist()
        self._positive = int(np.count_nonzero(padded))

    def _grow(self, min_size: int) -> None:
        self._build(self._weights[: self._size] + [0.0] * (min_size - self._size))

    def rebuild(self) -> None:
        """Recompute every node from the stored weights, dropping float drift."""
        self._build(self._weights[: self._size])

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def adjust(self, item_id: int, weight: float) -> None:
        """Set the weight of ``item_id``, creating it if needed."""
        if item_id < 0:
            raise ContractViolation(f"id must be non-negative, got {item_id}")
        weight = float(weight)
        _check_weight(item_id, weight)

        if item_id >= self._capacity:
            self._grow(item_id + 1)
        self._size = max(self._size, item_id + 1)

        old = self._weights[item_id]
        if weight == old:
            return
        self._weights[item_id] = weight
        self._positive += (weight > 0.0) - (old > 0.0)
        if not self._positive:
            # Every weight is zero again; drop the rounding residue left in the tree.
            self._build(self._weights[: self._size])
            return

        delta = weight - old
        node = item_id + 1
        while node <= self._capacity:
            self._tree[node] += delta
            node += node & -node

    def index(self, position: float) -> int:
        """Id whose cumulative-weight interval contains ``position``."""
        total = self.total_weight
        if not self._positive or total <= 0.0:
            raise EmptyWeightError("Cannot sample from a weighted index with zero total weight")
        if not 0.0 <= position < total:
            raise ContractViolation(
                f"Position {position} outside of [0, {total})"
            )

        item_id = 0
        remaining = position
        step = self._capacity
        while step:
            node = item_id + step
            if node <= self._capacity and self._tree[node] <= remaining:
                item_id = node
                remaining -= self._tree[node]
            step >>= 1

        if self._weights[item_id] == 0.0:
            # Rounding residue in the tree steered the descent onto an empty id.
            item_id = self._nearest_positive(item_id)
        return item_id

    def _nearest_positive(self, item_id: int) -> int:
        for candidate in range(item_id - 1, -1, -1):
            if self._weights[candidate] > 0.0:
                return candidate
        for candidate in range(item_id + 1, self._size):
            if self._weights[candidate] > 0.0:
                return candidate
        raise EmptyWeightError("Weighted index holds no positive weight")

    @property
    def total_weight(self) -> float:
        return self._tree[self._capacity]

    def get_weight(self, item_id: int | None = None) -> float:
        """Total weight, or the weight of a single id."""
        if item_id is None:
            return self.total_weight
        if item_id < 0:
            raise ContractViolation(f"id must be non-negative, got {item_id}")
        if item_id >= self._size:
            return 0.0
        return self._weights[item_id]

    def clear(self) -> None:
        self._build([0.0] * self._size)

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return f"WeightedIndex(size={self._size}, total_weight={self.total_weight})"


def _check_weight(item_id: int, weight: float) -> None:
    if math.isnan(weight) or weight < 0.0:
        raise ContractViolation(f"Weight for id {item_id} must be >= 0, got {weight}")
