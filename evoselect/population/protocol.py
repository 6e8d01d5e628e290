from __future__ import annotations

from typing import Any, Callable, Hashable, Protocol, Sequence, runtime_checkable

from evoselect.rng.random import Random

Genotype = Hashable
FitnessFunction = Callable[[Any], float]


class Population(Protocol):
    """Operations the selection procedures need from a population.

    Slot ids are integers in ``[0, size())``; only occupied slots hold an
    organism.  ``fitness_of`` uses the population's default fitness function
    and is deterministic within a generation unless caching is disabled.
    """

    def size(self) -> int: ...

    def is_occupied(self, slot_id: int) -> bool: ...

    def fitness_of(self, slot_id: int) -> float: ...

    def genotype_of(self, slot_id: int) -> Genotype: ...

    def random_occupied_id(self) -> int: ...

    def rng(self) -> Random: ...

    def birth(self, genotype: Genotype, parent_id: int, count: int = 1) -> list[int]:
        """Insert ``count`` copies of ``genotype`` and return their ids.

        Synchronous populations place offspring in a next-generation buffer;
        asynchronous ones place them directly among their parents.
        """
        ...

    def is_synchronous(self) -> bool: ...

    def is_caching_enabled(self) -> bool: ...

    def clear_cache(self) -> None: ...


@runtime_checkable
class LexicaseObserver(Protocol):
    """Optional capability notified after every lexicase pick."""

    def on_lexicase_select(self, used: Sequence[int], winner_id: int) -> None: ...


def occupied_ids(population: Population) -> list[int]:
    return [i for i in range(population.size()) if population.is_occupied(i)]
