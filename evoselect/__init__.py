"""
evoselect - selection procedures for evolutionary computation.

Elite, tournament, roulette, lexicase, ecological (EcoSelect) and MAP-Elites
selection over any population implementing the ``Population`` protocol,
driven by a seedable middle-square Weyl-sequence generator.
"""

from evoselect.exceptions import (
    ContractViolation,
    EmptyWeightError,
    EvoSelectError,
    ProbabilityError,
    SelectionError,
)
from evoselect.index import WeightedIndex
from evoselect.population import LexicaseObserver, MemoryPopulation, Population
from evoselect.rng import Prob, Random
from evoselect.selection import (
    EcoSelector,
    EliteSelector,
    LexicaseSelector,
    MapElitesArchive,
    MapElitesConfig,
    MapElitesPhenotype,
    RouletteSelector,
    Selector,
    TournamentSelector,
    eco_select,
    elite_select,
    lexicase_select,
    map_elites_grow,
    map_elites_seed,
    roulette_select,
    tournament_select,
)

__version__ = "0.1.0"

__all__ = [
    # Errors
    "ContractViolation",
    "EmptyWeightError",
    "EvoSelectError",
    "ProbabilityError",
    "SelectionError",
    # Core structures
    "Prob",
    "Random",
    "WeightedIndex",
    # Population
    "LexicaseObserver",
    "MemoryPopulation",
    "Population",
    # Selection
    "EcoSelector",
    "EliteSelector",
    "LexicaseSelector",
    "MapElitesArchive",
    "MapElitesConfig",
    "MapElitesPhenotype",
    "RouletteSelector",
    "Selector",
    "TournamentSelector",
    "eco_select",
    "elite_select",
    "lexicase_select",
    "map_elites_grow",
    "map_elites_seed",
    "roulette_select",
    "tournament_select",
]
