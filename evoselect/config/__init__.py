from evoselect.config.helpers import (
    build_rng,
    build_selector,
    instantiate_selector,
    load_settings,
)
from evoselect.config.models import (
    EcoConfig,
    EliteConfig,
    LexicaseConfig,
    RouletteConfig,
    SelectionMethod,
    SelectionSettings,
    TournamentConfig,
)
from evoselect.config.resolvers import register_resolvers

__all__ = [
    "EcoConfig",
    "EliteConfig",
    "LexicaseConfig",
    "RouletteConfig",
    "SelectionMethod",
    "SelectionSettings",
    "TournamentConfig",
    "build_rng",
    "build_selector",
    "instantiate_selector",
    "load_settings",
    "register_resolvers",
]
