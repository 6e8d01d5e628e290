from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

from hydra.utils import instantiate
from loguru import logger
from omegaconf import DictConfig, OmegaConf

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
from evoselect.exceptions import ContractViolation
from evoselect.population.protocol import FitnessFunction
from evoselect.rng.random import Random
from evoselect.selection.base import Selector
from evoselect.selection.eco import EcoSelector
from evoselect.selection.elite import EliteSelector
from evoselect.selection.lexicase import LexicaseSelector
from evoselect.selection.roulette import RouletteSelector
from evoselect.selection.tournament import TournamentSelector


def load_settings(source: str | Path | dict[str, Any] | DictConfig) -> SelectionSettings:
    """Read and validate selection settings from YAML, a dict or a DictConfig."""
    register_resolvers()
    if isinstance(source, (str, Path)):
        cfg = OmegaConf.load(source)
    elif isinstance(source, DictConfig):
        cfg = source
    else:
        cfg = OmegaConf.create(source)

    data = OmegaConf.to_container(cfg, resolve=True)
    settings = SelectionSettings.model_validate(data)
    logger.debug(
        "Loaded selection settings: method={}, seed={}",
        settings.selection.method,
        settings.seed,
    )
    return settings


def build_rng(settings: SelectionSettings) -> Random:
    return Random(settings.seed)


def build_selector(
    config: EliteConfig | TournamentConfig | RouletteConfig | LexicaseConfig | EcoConfig,
    fit_funs: Sequence[FitnessFunction] | None = None,
    extra_funs: Sequence[FitnessFunction] | None = None,
) -> Selector:
    """Turn a validated method config into a callable selector.

    Lexicase needs ``fit_funs``; EcoSelect takes its supplemental functions
    from ``extra_funs``.
    """
    method = SelectionMethod(config.method)

    if method == SelectionMethod.ELITE:
        return EliteSelector(config.e_count, config.copy_count)
    if method == SelectionMethod.TOURNAMENT:
        return TournamentSelector(config.t_size, config.tourny_count)
    if method == SelectionMethod.ROULETTE:
        return RouletteSelector(config.count)
    if method == SelectionMethod.LEXICASE:
        if not fit_funs:
            raise ContractViolation("Lexicase selection needs fitness functions")
        return LexicaseSelector(fit_funs, config.repro_count, config.max_funs)
    if method == SelectionMethod.ECO:
        return EcoSelector(
            extra_funs or [], config.pool_sizes, config.t_size, config.tourny_count
        )

    raise ContractViolation(f"Unknown selection method: {method}")


def instantiate_selector(cfg: DictConfig | dict[str, Any]) -> Selector:
    """Build a selector from a hydra ``_target_`` config."""
    register_resolvers()
    if not isinstance(cfg, DictConfig):
        cfg = OmegaConf.create(cfg)
    selector = instantiate(cfg, _recursive_=True)
    if not isinstance(selector, Selector):
        raise ContractViolation(
            f"Config target built {type(selector).__name__}, expected a Selector"
        )
    return selector
