from typing import Callable

from loguru import logger

from evoselect.exceptions import ContractViolation
from evoselect.population.protocol import Population
from evoselect.selection.base import Selector


def check_tournament_args(t_size: int, tourny_count: int) -> None:
    if t_size <= 0:
        raise ContractViolation(f"t_size must be positive, got {t_size}")
    if tourny_count <= 0:
        raise ContractViolation(f"tourny_count must be positive, got {tourny_count}")


def run_tournaments(
    population: Population,
    fitness_of: Callable[[int], float],
    t_size: int,
    tourny_count: int,
    on_birth: Callable[[list[int]], None] | None = None,
) -> list[int]:
    """Play ``tourny_count`` tournaments and birth one copy of each winner.

    Entrants are drawn with replacement; the first entrant seen with the
    maximum fitness wins.  ``on_birth`` receives the ids of each birth
    before the next tournament is drawn.
    """
    offspring: list[int] = []
    for _ in range(tourny_count):
        entries = [population.random_occupied_id() for _ in range(t_size)]

        best_id = entries[0]
        best_fit = fitness_of(best_id)
        for slot_id in entries[1:]:
            cur_fit = fitness_of(slot_id)
            if cur_fit > best_fit:
                best_fit = cur_fit
                best_id = slot_id

        new_ids = population.birth(population.genotype_of(best_id), best_id, 1)
        if on_birth is not None:
            on_birth(new_ids)
        offspring.extend(new_ids)
    return offspring


def tournament_select(
    population: Population, t_size: int, tourny_count: int = 1
) -> list[int]:
    """Tournament selection using the population's default fitness."""
    check_tournament_args(t_size, tourny_count)
    logger.debug(
        "TournamentSelect: {} tournaments of size {}", tourny_count, t_size
    )
    return run_tournaments(population, population.fitness_of, t_size, tourny_count)


class TournamentSelector(Selector):
    def __init__(self, t_size: int, tourny_count: int = 1):
        check_tournament_args(t_size, tourny_count)
        self.t_size = t_size
        self.tourny_count = tourny_count

    def __call__(self, population: Population) -> list[int]:
        return tournament_select(population, self.t_size, self.tourny_count)
