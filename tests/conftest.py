"""Shared fixtures for the evoselect test-suite."""

from typing import Any, Callable, Iterable

import pytest

from evoselect.population import MemoryPopulation
from evoselect.rng import Random


class ScriptedPopulation(MemoryPopulation):
    """MemoryPopulation whose random draws of organisms follow a script.

    Every birth is also recorded as ``(genotype, parent_id, count)``, and
    ``placements`` forces the slots that asynchronous births replace.
    """

    def __init__(
        self, *args, script: Iterable[int] = (), placements: Iterable[int] = (), **kwargs
    ):
        super().__init__(*args, **kwargs)
        self.script = list(script)
        self.placements = list(placements)
        self.births: list[tuple[Any, int, int]] = []
        self.cache_clears = 0

    def random_occupied_id(self) -> int:
        if self.script:
            return self.script.pop(0)
        return super().random_occupied_id()

    def _place(self, genotype) -> int:
        if self.placements:
            slot_id = self.placements.pop(0)
            self._set_slot(slot_id, genotype)
            return slot_id
        return super()._place(genotype)

    def birth(self, genotype, parent_id, count=1):
        self.births.append((genotype, parent_id, count))
        return super().birth(genotype, parent_id, count)

    def clear_cache(self) -> None:
        self.cache_clears += 1
        super().clear_cache()


def _fill(population: MemoryPopulation, genotypes: Iterable[Any]) -> MemoryPopulation:
    for genotype in genotypes:
        population.inject(genotype)
    return population


@pytest.fixture
def rng() -> Random:
    return Random(42)


@pytest.fixture
def make_population(rng) -> Callable[..., MemoryPopulation]:
    """Factory: population of ``genotypes`` scored by ``fitness`` (default: float(g))."""

    def _make(genotypes, fitness=None, **kwargs) -> MemoryPopulation:
        kwargs.setdefault("rng", rng)
        population = MemoryPopulation(fitness or (lambda g: float(g)), **kwargs)
        return _fill(population, genotypes)

    return _make


@pytest.fixture
def make_scripted(rng) -> Callable[..., ScriptedPopulation]:
    """Factory for populations with scripted organism draws and recorded births."""

    def _make(genotypes, fitness=None, script=(), **kwargs) -> ScriptedPopulation:
        kwargs.setdefault("rng", rng)
        population = ScriptedPopulation(
            fitness or (lambda g: float(g)), script=script, **kwargs
        )
        return _fill(population, genotypes)

    return _make
