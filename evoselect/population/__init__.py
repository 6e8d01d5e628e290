from evoselect.population.memory_population import MemoryPopulation
from evoselect.population.protocol import (
    FitnessFunction,
    Genotype,
    LexicaseObserver,
    Population,
    occupied_ids,
)

__all__ = [
    "FitnessFunction",
    "Genotype",
    "LexicaseObserver",
    "MemoryPopulation",
    "Population",
    "occupied_ids",
]
