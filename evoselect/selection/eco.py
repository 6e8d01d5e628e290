from __future__ import annotations

import numbers
from typing import Sequence

from loguru import logger
import numpy as np

from evoselect.exceptions import ContractViolation
from evoselect.population.protocol import FitnessFunction, Population, occupied_ids
from evoselect.selection.base import Selector
from evoselect.selection.tournament import check_tournament_args, run_tournaments


def _expand_pools(
    extra_funs: Sequence[FitnessFunction], pool_sizes: Sequence[float] | float
) -> list[float]:
    if isinstance(pool_sizes, numbers.Real):
        return [float(pool_sizes)] * len(extra_funs)
    pools = [float(p) for p in pool_sizes]
    if len(pools) != len(extra_funs):
        raise ContractViolation(
            f"Got {len(pools)} pool sizes for {len(extra_funs)} supplemental functions"
        )
    return pools


def resource_bonuses(
    extra_fitness: np.ndarray, pools: Sequence[float]
) -> np.ndarray:
    """Bonus per organism from sharing each resource pool among its best.

    ``extra_fitness`` has one row per supplemental function and one column per
    organism.  The organisms tied for the maximum of a row split that row's
    pool evenly; the maximum never drops below zero, so a function on which
    every organism scores negative pays out nothing.
    """
    bonus = np.zeros(extra_fitness.shape[1], dtype=np.float64)
    for values, pool in zip(extra_fitness, pools):
        max_fit = max(0.0, float(values.max()))
        winners = values == max_fit
        tie_count = int(winners.sum())
        if tie_count == 0:
            continue
        bonus[winners] += pool / tie_count
    return bonus


def eco_select(
    population: Population,
    extra_funs: Sequence[FitnessFunction],
    pool_sizes: Sequence[float] | float,
    t_size: int,
    tourny_count: int = 1,
) -> list[int]:
    """Tournament selection on base fitness plus shared resource bonuses.

    Effective fitness is specific to this call, so any fitness cache on the
    population is cleared first.
    """
    pools = _expand_pools(extra_funs, pool_sizes)
    check_tournament_args(t_size, tourny_count)
    if t_size > population.size():
        raise ContractViolation(
            f"t_size ({t_size}) exceeds population size ({population.size()})"
        )

    ids = occupied_ids(population)
    if not ids:
        raise ContractViolation("EcoSelect needs at least one organism")

    if population.is_caching_enabled():
        logger.warning(
            "EcoSelect: clearing fitness cache; effective fitness changes every call"
        )
        population.clear_cache()

    base = np.array([population.fitness_of(i) for i in ids], dtype=np.float64)
    if extra_funs:
        genotypes = [population.genotype_of(i) for i in ids]
        extra = np.array(
            [[fun(g) for g in genotypes] for fun in extra_funs], dtype=np.float64
        )
        base += resource_bonuses(extra, pools)

    effective = dict(zip(ids, base.tolist()))

    logger.debug(
        "EcoSelect: {} tournaments of size {}, {} resources, max effective fitness {:.3f}",
        tourny_count,
        t_size,
        len(extra_funs),
        float(base.max()),
    )

    def fitness_of(slot_id: int) -> float:
        if slot_id in effective:
            return effective[slot_id]
        return population.fitness_of(slot_id)

    def forget(new_ids: list[int]) -> None:
        # Organisms born into an asynchronous population during this call took
        # no part in the resource accounting, including those that replaced a
        # slot.  Synchronous ids index the next generation, not current slots.
        for slot_id in new_ids:
            effective.pop(slot_id, None)

    on_birth = None if population.is_synchronous() else forget
    return run_tournaments(population, fitness_of, t_size, tourny_count, on_birth)


class EcoSelector(Selector):
    def __init__(
        self,
        extra_funs: Sequence[FitnessFunction],
        pool_sizes: Sequence[float] | float,
        t_size: int,
        tourny_count: int = 1,
    ):
        self.extra_funs = list(extra_funs)
        self.pool_sizes = _expand_pools(self.extra_funs, pool_sizes)
        check_tournament_args(t_size, tourny_count)
        self.t_size = t_size
        self.tourny_count = tourny_count

    def __call__(self, population: Population) -> list[int]:
        return eco_select(
            population, self.extra_funs, self.pool_sizes, self.t_size, self.tourny_count
        )
