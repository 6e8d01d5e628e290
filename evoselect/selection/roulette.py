from loguru import logger

from evoselect.exceptions import ContractViolation, EmptyWeightError
from evoselect.index.weighted_index import WeightedIndex
from evoselect.population.protocol import Population
from evoselect.selection.base import Selector


def roulette_select(population: Population, count: int = 1) -> list[int]:
    """Fitness-proportional selection with replacement.

    In an asynchronous population every offspring's fitness is registered
    as soon as it is born, so later draws in the same pass can pick it.
    """
    if count <= 0:
        raise ContractViolation(f"count must be positive, got {count}")

    fitness_index = WeightedIndex(population.size())
    for slot_id in range(population.size()):
        if not population.is_occupied(slot_id):
            continue
        fitness = population.fitness_of(slot_id)
        if fitness < 0:
            raise ContractViolation(
                f"Roulette selection needs non-negative fitness; slot {slot_id} has {fitness}"
            )
        fitness_index.adjust(slot_id, fitness)

    if fitness_index.total_weight <= 0.0:
        raise EmptyWeightError("Roulette selection over a population with zero total fitness")

    logger.debug(
        "RouletteSelect: {} draws over total fitness {:.3f}",
        count,
        fitness_index.total_weight,
    )

    rng = population.rng()
    synchronous = population.is_synchronous()
    offspring: list[int] = []
    for _ in range(count):
        position = rng.get_double(fitness_index.total_weight)
        parent_id = fitness_index.index(position)
        new_ids = population.birth(population.genotype_of(parent_id), parent_id, 1)
        if not synchronous:
            for offspring_id in new_ids:
                fitness_index.adjust(offspring_id, population.fitness_of(offspring_id))
        offspring.extend(new_ids)
    return offspring


class RouletteSelector(Selector):
    def __init__(self, count: int = 1):
        if count <= 0:
            raise ContractViolation(f"count must be positive, got {count}")
        self.count = count

    def __call__(self, population: Population) -> list[int]:
        return roulette_select(population, self.count)
