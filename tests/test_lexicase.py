"""
Tests for lexicase selection.

Tests cover:
- Survivor filtering over a fixed function order
- Winner distribution for symmetric and dominated cases
- Genotype de-duplication and multiplicity weighting
- max_funs handling and the selection observer
"""

import pytest

from evoselect.exceptions import ContractViolation
from evoselect.population import MemoryPopulation
from evoselect.rng import Random
from evoselect.selection import (
    LexicaseSelector,
    draw_order,
    filter_survivors,
    group_by_genotype,
    lexicase_select,
)


def first_trait(genotype):
    return {"A": 1.0, "B": 0.0}[genotype]


def second_trait(genotype):
    return {"A": 0.0, "B": 1.0}[genotype]


class RecordingPopulation(MemoryPopulation):
    """Population that records every lexicase decision."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.decisions = []

    def on_lexicase_select(self, used, winner_id):
        self.decisions.append((list(used), winner_id))


class TestFilterSurvivors:
    """Survivor filtering over a fixed order."""

    def test_keeps_exact_ties(self):
        fitnesses = [[1.0, 1.0, 0.0], [0.0, 2.0, 2.0]]
        assert filter_survivors(fitnesses, [0, 1], [0, 1, 2]) == ([1], 2)
        assert filter_survivors(fitnesses, [1, 0], [0, 1, 2]) == ([1], 2)

    def test_stops_at_single_survivor(self):
        fitnesses = [[3.0, 1.0], [0.0, 5.0]]
        assert filter_survivors(fitnesses, [0, 1], [0, 1]) == ([0], 1)

    def test_full_tie_keeps_everyone(self):
        fitnesses = [[2.0, 2.0, 2.0]]
        assert filter_survivors(fitnesses, [0], [0, 1, 2]) == ([0, 1, 2], 1)

    def test_no_epsilon(self):
        fitnesses = [[0.1 + 0.2, 0.3]]
        assert filter_survivors(fitnesses, [0], [0, 1]) == ([0], 1)


class TestDrawOrder:
    """Function order per offspring."""

    def test_permutation_when_all_functions_used(self, rng):
        for _ in range(20):
            assert sorted(draw_order(rng, 4, 4)) == [0, 1, 2, 3]

    def test_with_replacement_when_capped(self, rng):
        order = draw_order(rng, 3, 2)
        assert len(order) == 2
        assert all(0 <= f < 3 for f in order)


class TestLexicaseSelect:
    """End-to-end lexicase selection."""

    def test_symmetric_case_is_even(self, make_population):
        population = make_population(["A", "B"], fitness=first_trait, synchronous=True)
        lexicase_select(population, [first_trait, second_trait], repro_count=2000)
        assert population.next_generation.count("A") == pytest.approx(1000, abs=100)

    def test_dominant_genotype_always_wins(self, make_population):
        scores = {"best": (5.0, 5.0), "mid": (5.0, 1.0), "low": (0.0, 4.0)}
        funs = [lambda g: scores[g][0], lambda g: scores[g][1]]
        population = make_population(
            ["low", "mid", "best", "mid"], fitness=funs[0], synchronous=True
        )
        lexicase_select(population, funs, repro_count=200)
        assert set(population.next_generation) == {"best"}

    def test_winner_weighted_by_multiplicity(self, make_population):
        population = make_population(
            ["x", "x", "x", "y"], fitness=lambda g: 0.0, synchronous=True
        )
        lexicase_select(population, [lambda g: 0.0], repro_count=4000)
        assert population.next_generation.count("x") == pytest.approx(3000, abs=150)

    def test_fitness_evaluated_once_per_genotype(self, make_population):
        calls = []

        def counted(genotype):
            calls.append(genotype)
            return len(genotype)

        population = make_population(["x", "x", "yy", "x", "yy"], fitness=len)
        lexicase_select(population, [counted], repro_count=10)
        assert sorted(calls) == ["x", "yy"]

    def test_group_by_genotype(self, make_population):
        population = make_population(["x", "y", "x", "z", "y"], fitness=len)
        population.remove(3)
        assert group_by_genotype(population) == [[0, 2], [1, 4]]

    def test_observer_is_notified(self):
        population = RecordingPopulation(first_trait, rng=Random(7), synchronous=True)
        population.inject("A")
        population.inject("B")
        lexicase_select(population, [first_trait, second_trait], repro_count=50)
        assert len(population.decisions) == 50
        for used, winner_id in population.decisions:
            assert len(used) == 1
            assert winner_id == (0 if used[0] == 0 else 1)

    def test_max_funs_caps_functions(self):
        population = RecordingPopulation(lambda g: 0.0, rng=Random(9), synchronous=True)
        for genotype in ("p", "q", "r"):
            population.inject(genotype)
        funs = [lambda g: 0.0] * 5
        lexicase_select(population, funs, repro_count=30, max_funs=2)
        assert all(len(used) == 2 for used, _ in population.decisions)

    @pytest.mark.parametrize(
        "funs, repro_count, max_funs",
        [([], 1, 0), ([first_trait], 0, 0), ([first_trait], 1, -1)],
    )
    def test_invalid_arguments(self, make_population, funs, repro_count, max_funs):
        population = make_population(["A"], fitness=first_trait)
        with pytest.raises(ContractViolation):
            lexicase_select(population, funs, repro_count, max_funs)

    def test_empty_population(self, make_population):
        with pytest.raises(ContractViolation):
            lexicase_select(make_population([]), [first_trait])

    def test_selector(self, make_population):
        population = make_population(["A", "B"], fitness=first_trait)
        selector = LexicaseSelector([first_trait, second_trait], repro_count=3)
        assert len(selector(population)) == 3
        with pytest.raises(ContractViolation):
            LexicaseSelector([])
