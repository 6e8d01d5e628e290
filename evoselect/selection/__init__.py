from evoselect.selection.base import Selector
from evoselect.selection.eco import EcoSelector, eco_select, resource_bonuses
from evoselect.selection.elite import EliteSelector, elite_select
from evoselect.selection.lexicase import (
    LexicaseSelector,
    draw_order,
    filter_survivors,
    group_by_genotype,
    lexicase_select,
)
from evoselect.selection.map_elites import (
    ArchiveEntry,
    ArchivePolicy,
    FitnessArchivePolicy,
    MapElitesArchive,
    MapElitesConfig,
    MapElitesPhenotype,
    MapElitesSelector,
    map_elites_grow,
    map_elites_seed,
)
from evoselect.selection.roulette import RouletteSelector, roulette_select
from evoselect.selection.tournament import TournamentSelector, tournament_select

__all__ = [
    "Selector",
    # Elite
    "EliteSelector",
    "elite_select",
    # Tournament
    "TournamentSelector",
    "tournament_select",
    # Roulette
    "RouletteSelector",
    "roulette_select",
    # Lexicase
    "LexicaseSelector",
    "lexicase_select",
    "draw_order",
    "filter_survivors",
    "group_by_genotype",
    # EcoSelect
    "EcoSelector",
    "eco_select",
    "resource_bonuses",
    # MAP-Elites
    "ArchiveEntry",
    "ArchivePolicy",
    "FitnessArchivePolicy",
    "MapElitesArchive",
    "MapElitesConfig",
    "MapElitesPhenotype",
    "MapElitesSelector",
    "map_elites_grow",
    "map_elites_seed",
]
