# -*- coding: utf-8 -*-
"""In-memory population used by the test-suite and by small experiments that
do not need an external engine.  Implements the ``Population`` protocol.

Synchronous populations collect births in a next-generation buffer that
``update()`` swaps in; asynchronous ones place offspring directly among their
parents, replacing a random slot once ``max_size`` is reached.

NOT thread-safe: one population, one owner.
"""

from __future__ import annotations

from typing import Callable, Iterator

from loguru import logger

from evoselect.exceptions import ContractViolation
from evoselect.population.protocol import Genotype
from evoselect.rng.random import Random


class MemoryPopulation:
    """Simple list-backed population."""

    def __init__(
        self,
        fitness_fun: Callable[[Genotype], float],
        rng: Random | None = None,
        synchronous: bool = False,
        cache_fitness: bool = True,
        max_size: int | None = None,
    ) -> None:
        if max_size is not None and max_size <= 0:
            raise ContractViolation(f"max_size must be positive, got {max_size}")
        self.fitness_fun = fitness_fun
        self._rng = rng or Random()
        self._synchronous = synchronous
        self._cache_enabled = cache_fitness
        self.max_size = max_size

        self._slots: list[Genotype | None] = []
        self._next_gen: list[Genotype] = []
        # Occupied ids, plus each id's position in that list for O(1) removal
        self._occupied: list[int] = []
        self._position: dict[int, int] = {}
        self._fitness_cache: dict[int, float] = {}

    # ------------------------------------------------------------------
    # Population protocol
    # ------------------------------------------------------------------

    def size(self) -> int:
        return len(self._slots)

    def is_occupied(self, slot_id: int) -> bool:
        return 0 <= slot_id < len(self._slots) and self._slots[slot_id] is not None

    def fitness_of(self, slot_id: int) -> float:
        if self._cache_enabled and slot_id in self._fitness_cache:
            return self._fitness_cache[slot_id]
        fitness = self.fitness_fun(self.genotype_of(slot_id))
        if self._cache_enabled:
            self._fitness_cache[slot_id] = fitness
        return fitness

    def genotype_of(self, slot_id: int) -> Genotype:
        if not self.is_occupied(slot_id):
            raise ContractViolation(f"Slot {slot_id} is not occupied")
        return self._slots[slot_id]

    def random_occupied_id(self) -> int:
        if not self._occupied:
            raise ContractViolation("Population has no occupied slots")
        return self._occupied[self._rng.get_uint(len(self._occupied))]

    def rng(self) -> Random:
        return self._rng

    def birth(self, genotype: Genotype, parent_id: int, count: int = 1) -> list[int]:
        if count <= 0:
            raise ContractViolation(f"count must be positive, got {count}")

        if self._synchronous:
            start = len(self._next_gen)
            self._next_gen.extend([genotype] * count)
            return list(range(start, start + count))

        ids = [self._place(genotype) for _ in range(count)]
        logger.trace("MemoryPopulation: parent {} -> offspring {}", parent_id, ids)
        return ids

    def is_synchronous(self) -> bool:
        return self._synchronous

    def is_caching_enabled(self) -> bool:
        return self._cache_enabled

    def clear_cache(self) -> None:
        self._fitness_cache.clear()

    # ------------------------------------------------------------------
    # Population management
    # ------------------------------------------------------------------

    def set_cache(self, enabled: bool) -> None:
        self._cache_enabled = enabled
        if not enabled:
            self._fitness_cache.clear()

    def inject(self, genotype: Genotype) -> int:
        """Add an organism to the current generation and return its slot id."""
        if self.max_size is not None and len(self._slots) >= self.max_size:
            raise ContractViolation(f"Population is full (max_size={self.max_size})")
        self._slots.append(None)
        slot_id = len(self._slots) - 1
        self._set_slot(slot_id, genotype)
        return slot_id

    def remove(self, slot_id: int) -> None:
        """Empty a slot, keeping the ids of every other organism stable."""
        if not self.is_occupied(slot_id):
            return
        self._slots[slot_id] = None
        self._fitness_cache.pop(slot_id, None)

        pos = self._position.pop(slot_id)
        last = self._occupied.pop()
        if last != slot_id:
            self._occupied[pos] = last
            self._position[last] = pos

    def update(self) -> None:
        """Replace the current generation with the next one (synchronous only)."""
        if not self._synchronous:
            return
        next_gen = self._next_gen
        self._slots = []
        self._next_gen = []
        self._occupied = []
        self._position = {}
        self._fitness_cache.clear()
        for genotype in next_gen:
            self.inject(genotype)
        logger.debug("MemoryPopulation: new generation of {} organisms", len(next_gen))

    def num_orgs(self) -> int:
        return len(self._occupied)

    @property
    def next_generation(self) -> list[Genotype]:
        return list(self._next_gen)

    def genotypes(self) -> Iterator[Genotype]:
        return (g for g in self._slots if g is not None)

    # ------------------------------------------------------------------

    def _place(self, genotype: Genotype) -> int:
        if self.max_size is None or len(self._slots) < self.max_size:
            self._slots.append(None)
            slot_id = len(self._slots) - 1
        else:
            slot_id = self._rng.get_uint(self.max_size)
        self._set_slot(slot_id, genotype)
        return slot_id

    def _set_slot(self, slot_id: int, genotype: Genotype) -> None:
        if genotype is None:
            raise ContractViolation("None cannot be used as a genotype")
        if self._slots[slot_id] is None:
            self._position[slot_id] = len(self._occupied)
            self._occupied.append(slot_id)
        self._slots[slot_id] = genotype
        self._fitness_cache.pop(slot_id, None)

    def __len__(self) -> int:
        return self.num_orgs()

    def __repr__(self) -> str:
        mode = "sync" if self._synchronous else "async"
        return f"MemoryPopulation(orgs={self.num_orgs()}, size={self.size()}, {mode})"
