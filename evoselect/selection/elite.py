from loguru import logger

from evoselect.exceptions import ContractViolation
from evoselect.population.protocol import Population, occupied_ids
from evoselect.selection.base import Selector


def elite_select(
    population: Population, e_count: int = 1, copy_count: int = 1
) -> list[int]:
    """Reproduce the ``e_count`` fittest organisms ``copy_count`` times each.

    Organisms with equal fitness are ranked by ascending slot id.  That order
    is deterministic within a run but callers should not rely on it.
    """
    if copy_count <= 0:
        raise ContractViolation(f"copy_count must be positive, got {copy_count}")

    ids = occupied_ids(population)
    if not 0 < e_count <= len(ids):
        raise ContractViolation(
            f"e_count must be in [1, {len(ids)}] (occupied slots), got {e_count}"
        )

    fitness = {slot_id: population.fitness_of(slot_id) for slot_id in ids}
    ranked = sorted(ids, key=fitness.__getitem__, reverse=True)
    elites = ranked[:e_count]

    logger.debug(
        "EliteSelect: {} elites x {} copies from {} organisms (best fitness={})",
        e_count,
        copy_count,
        len(ids),
        fitness[elites[0]],
    )

    offspring: list[int] = []
    for slot_id in elites:
        offspring.extend(
            population.birth(population.genotype_of(slot_id), slot_id, copy_count)
        )
    return offspring


class EliteSelector(Selector):
    def __init__(self, e_count: int = 1, copy_count: int = 1):
        if e_count <= 0:
            raise ContractViolation(f"e_count must be positive, got {e_count}")
        if copy_count <= 0:
            raise ContractViolation(f"copy_count must be positive, got {copy_count}")
        self.e_count = e_count
        self.copy_count = copy_count

    def __call__(self, population: Population) -> list[int]:
        return elite_select(population, self.e_count, self.copy_count)
