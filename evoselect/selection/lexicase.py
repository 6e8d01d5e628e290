"""
Lexicase selection.

For every offspring the fitness functions are applied in a fresh random
order, and only the candidates tied for the best value on each function
survive to the next one.  Fitness functions are evaluated once per distinct
genotype, since a population usually holds far fewer genotypes than
organisms.
"""

from __future__ import annotations

from typing import Sequence

from loguru import logger

from evoselect.exceptions import ContractViolation
from evoselect.population.protocol import (
    FitnessFunction,
    Genotype,
    LexicaseObserver,
    Population,
)
from evoselect.rng.random import Random
from evoselect.rng.utils import get_permutation
from evoselect.selection.base import Selector


def group_by_genotype(population: Population) -> list[list[int]]:
    """Occupied slot ids grouped by genotype, in order of first appearance."""
    group_of: dict[Genotype, int] = {}
    groups: list[list[int]] = []
    for slot_id in range(population.size()):
        if not population.is_occupied(slot_id):
            continue
        genotype = population.genotype_of(slot_id)
        group = group_of.get(genotype)
        if group is None:
            group_of[genotype] = len(groups)
            groups.append([slot_id])
        else:
            groups[group].append(slot_id)
    return groups


def draw_order(rng: Random, num_funs: int, max_funs: int) -> list[int]:
    """Order in which fitness functions are applied for one offspring.

    Using every function yields a permutation; a smaller cap draws each
    position independently, so a function may repeat.
    """
    if max_funs == num_funs:
        return get_permutation(rng, num_funs)
    return [rng.get_uint(num_funs) for _ in range(max_funs)]


def filter_survivors(
    fitnesses: Sequence[Sequence[float]], order: Sequence[int], candidates: list[int]
) -> tuple[list[int], int]:
    """Apply functions in ``order`` keeping only exact ties for the best value.

    Returns the surviving genotype indices and how many functions were used.
    """
    survivors = candidates
    used = 0
    for fit_id in order:
        used += 1
        values = fitnesses[fit_id]
        max_fit = values[survivors[0]]
        best = [survivors[0]]
        for gen_id in survivors[1:]:
            cur_fit = values[gen_id]
            if cur_fit > max_fit:
                max_fit = cur_fit
                best = [gen_id]
            elif cur_fit == max_fit:
                best.append(gen_id)
        survivors = best
        if len(survivors) == 1:
            break
    return survivors, used


def lexicase_select(
    population: Population,
    fit_funs: Sequence[FitnessFunction],
    repro_count: int = 1,
    max_funs: int = 0,
) -> list[int]:
    """Run ``repro_count`` independent lexicase picks and birth each winner.

    ``max_funs`` caps how many functions are tried per offspring; 0 means all.
    If the population implements ``LexicaseObserver`` it is told which
    functions were used and which organism won.
    """
    if not fit_funs:
        raise ContractViolation("Lexicase selection needs at least one fitness function")
    if repro_count <= 0:
        raise ContractViolation(f"repro_count must be positive, got {repro_count}")
    if max_funs < 0:
        raise ContractViolation(f"max_funs must be non-negative, got {max_funs}")

    groups = group_by_genotype(population)
    if not groups:
        raise ContractViolation("Lexicase selection needs at least one organism")

    num_funs = len(fit_funs)
    if not max_funs:
        max_funs = num_funs

    representatives = [population.genotype_of(group[0]) for group in groups]
    fitnesses = [[fun(genotype) for genotype in representatives] for fun in fit_funs]

    logger.debug(
        "LexicaseSelect: {} offspring, {} genotypes / {} organisms, {} of {} functions",
        repro_count,
        len(groups),
        sum(len(g) for g in groups),
        max_funs,
        num_funs,
    )

    rng = population.rng()
    all_genotypes = list(range(len(groups)))
    notify = isinstance(population, LexicaseObserver)

    offspring: list[int] = []
    for _ in range(repro_count):
        order = draw_order(rng, num_funs, max_funs)
        survivors, depth = filter_survivors(fitnesses, order, all_genotypes)

        # Pick uniformly among organisms, not genotypes.
        winner = rng.get_uint(sum(len(groups[g]) for g in survivors))
        for gen_id in survivors:
            if winner < len(groups[gen_id]):
                repro_id = groups[gen_id][winner]
                break
            winner -= len(groups[gen_id])

        if notify:
            population.on_lexicase_select(order[:depth], repro_id)
        offspring.extend(
            population.birth(population.genotype_of(repro_id), repro_id, 1)
        )
    return offspring


class LexicaseSelector(Selector):
    def __init__(
        self,
        fit_funs: Sequence[FitnessFunction],
        repro_count: int = 1,
        max_funs: int = 0,
    ):
        if not fit_funs:
            raise ContractViolation("Lexicase selection needs at least one fitness function")
        if repro_count <= 0:
            raise ContractViolation(f"repro_count must be positive, got {repro_count}")
        if max_funs < 0:
            raise ContractViolation(f"max_funs must be non-negative, got {max_funs}")
        self.fit_funs = list(fit_funs)
        self.repro_count = repro_count
        self.max_funs = max_funs

    def __call__(self, population: Population) -> list[int]:
        return lexicase_select(
            population, self.fit_funs, self.repro_count, self.max_funs
        )
