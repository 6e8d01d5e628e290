"""
MAP-Elites archive.

Organisms are bucketed by a composite phenotype id built from independent
classifiers; the archive keeps at most one organism per id.  Whether a
newcomer displaces the current occupant is decided by an ``ArchivePolicy``
chosen by the caller; the archive never falls back on a default.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, computed_field

from evoselect.exceptions import ContractViolation
from evoselect.population.protocol import Genotype, Population
from evoselect.rng.utils import sample_with_replacement
from evoselect.selection.base import Selector


class MapElitesPhenotype(BaseModel):
    """One classifier mapping a genotype to a category in ``[0, id_count)``."""

    classifier: Callable[[Genotype], int] | None = Field(
        default=None, description="Function categorising a genotype"
    )
    id_count: int = Field(default=0, ge=0, description="Number of categories")
    model_config = ConfigDict(arbitrary_types_allowed=True)

    def ok(self) -> bool:
        return self.classifier is not None and self.id_count > 0

    def get_id(self, genotype: Genotype) -> int:
        category = self.classifier(genotype)
        if not 0 <= category < self.id_count:
            raise ContractViolation(
                f"Classifier returned {category}, expected a value in [0, {self.id_count})"
            )
        return category


class MapElitesConfig(BaseModel):
    """Phenotype classifiers combined into one mixed-radix cell id."""

    phenotypes: list[MapElitesPhenotype] = Field(default_factory=list)

    def ok(self) -> bool:
        return all(p.ok() for p in self.phenotypes)

    def get_id(self, genotype: Genotype) -> int:
        cell_id, scale = 0, 1
        for phenotype in self.phenotypes:
            cell_id += phenotype.get_id(genotype) * scale
            scale *= phenotype.id_count
        return cell_id

    @computed_field
    @property
    def id_count(self) -> int:
        total = 1
        for phenotype in self.phenotypes:
            total *= phenotype.id_count
        return total

    def get_id_count(self) -> int:
        return self.id_count


@dataclass(frozen=True)
class ArchiveEntry:
    cell_id: int
    slot_id: int
    genotype: Genotype
    fitness: float


class ArchivePolicy(ABC):
    """Decides whether a newcomer replaces the occupant of its cell."""

    @abstractmethod
    def __call__(self, new: ArchiveEntry, current: ArchiveEntry) -> bool: ...


class FitnessArchivePolicy(ArchivePolicy):
    """Newcomer wins only with strictly higher fitness."""

    def __call__(self, new: ArchiveEntry, current: ArchiveEntry) -> bool:
        return new.fitness > current.fitness


class MapElitesArchive:
    def __init__(self, config: MapElitesConfig, policy: ArchivePolicy):
        if not config.ok():
            raise ContractViolation("MapElitesConfig has an incomplete phenotype")
        self.config = config
        self.policy = policy
        self._cells: dict[int, ArchiveEntry] = {}

    def offer(self, genotype: Genotype, fitness: float, slot_id: int = -1) -> bool:
        """Place ``genotype`` in its cell if empty or if the policy prefers it."""
        cell_id = self.config.get_id(genotype)
        new = ArchiveEntry(cell_id, slot_id, genotype, fitness)
        current = self._cells.get(cell_id)

        if current is not None and not self.policy(new, current):
            logger.debug(
                "MapElites: slot {} rejected (cell {} fitness {} vs {})",
                slot_id,
                cell_id,
                fitness,
                current.fitness,
            )
            return False

        self._cells[cell_id] = new
        logger.debug(
            "MapElites: slot {} -> cell {} ({})",
            slot_id,
            cell_id,
            "filled" if current is None else "replaced",
        )
        return True

    def get(self, cell_id: int) -> ArchiveEntry | None:
        return self._cells.get(cell_id)

    def elites(self) -> list[ArchiveEntry]:
        return [self._cells[c] for c in sorted(self._cells)]

    @property
    def coverage(self) -> float:
        """Fraction of cells holding an elite."""
        return len(self._cells) / self.config.id_count

    def clear(self) -> None:
        self._cells.clear()

    def __len__(self) -> int:
        return len(self._cells)


def _check_preconditions(
    population: Population, config: MapElitesConfig, archive: MapElitesArchive
) -> None:
    if population.size() <= 0:
        raise ContractViolation("MAP-Elites needs a non-empty population")
    if not config.ok():
        raise ContractViolation("MapElitesConfig has an incomplete phenotype")
    if archive.config is not config:
        raise ContractViolation("Archive was built for a different MapElitesConfig")


def map_elites_seed(
    population: Population,
    config: MapElitesConfig,
    archive: MapElitesArchive,
    slot_id: int,
) -> bool:
    """Offer the organism in ``slot_id`` to the archive."""
    _check_preconditions(population, config, archive)
    if not population.is_occupied(slot_id):
        raise ContractViolation(f"Slot {slot_id} is not occupied")
    return archive.offer(
        population.genotype_of(slot_id), population.fitness_of(slot_id), slot_id
    )


def map_elites_grow(
    population: Population,
    config: MapElitesConfig,
    archive: MapElitesArchive,
    repro_count: int = 1,
) -> list[int]:
    """Reproduce ``repro_count`` elites drawn uniformly from the archive."""
    _check_preconditions(population, config, archive)
    if repro_count <= 0:
        raise ContractViolation(f"repro_count must be positive, got {repro_count}")
    elites = archive.elites()
    if not elites:
        raise ContractViolation("MAP-Elites archive is empty; seed it first")

    offspring: list[int] = []
    for entry in sample_with_replacement(population.rng(), elites, repro_count):
        offspring.extend(population.birth(entry.genotype, entry.slot_id, 1))

    logger.debug(
        "MapElitesGrow: {} offspring from {} elites (coverage {:.1%})",
        repro_count,
        len(elites),
        archive.coverage,
    )
    return offspring


class MapElitesSelector(Selector):
    """Seeds every occupied organism into the archive, then grows from it."""

    def __init__(self, archive: MapElitesArchive, repro_count: int = 1):
        if repro_count <= 0:
            raise ContractViolation(f"repro_count must be positive, got {repro_count}")
        self.archive = archive
        self.repro_count = repro_count

    def __call__(self, population: Population) -> list[int]:
        for slot_id in range(population.size()):
            if population.is_occupied(slot_id):
                map_elites_seed(population, self.archive.config, self.archive, slot_id)
        return map_elites_grow(
            population, self.archive.config, self.archive, self.repro_count
        )
