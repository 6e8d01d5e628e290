"""
Tests for elite and tournament selection.

Tests cover:
- Elite: ranking, copy counts, tie order, argument validation
- Tournament: winner is the fittest entrant, first-seen tie rule, counts
"""

import pytest

from evoselect.exceptions import ContractViolation
from evoselect.selection import (
    EliteSelector,
    TournamentSelector,
    elite_select,
    tournament_select,
)

SCORES = {"a": 1.0, "b": 1.0, "c": 0.0, "d": 5.0}


class TestEliteSelect:
    """Elite selection."""

    def test_single_best(self, make_population):
        population = make_population([1, 5, 3])
        new_ids = elite_select(population, e_count=1, copy_count=1)
        assert new_ids == [3]
        assert population.genotype_of(3) == 5

    def test_multiple_elites_and_copies(self, make_population):
        population = make_population([1, 5, 3], synchronous=True)
        new_ids = elite_select(population, e_count=2, copy_count=3)
        assert new_ids == [0, 1, 2, 3, 4, 5]
        assert population.next_generation == [5, 5, 5, 3, 3, 3]

    def test_ties_ranked_by_slot(self, make_scripted):
        population = make_scripted(["c", "a", "b"], fitness=SCORES.get, synchronous=True)
        elite_select(population, e_count=1)
        assert population.births == [("a", 1, 1)]

    def test_all_organisms(self, make_population):
        population = make_population([2, 4, 1, 3], synchronous=True)
        elite_select(population, e_count=4)
        assert population.next_generation == [4, 3, 2, 1]

    def test_skips_empty_slots(self, make_population):
        population = make_population([9, 1, 2], synchronous=True)
        population.remove(0)
        elite_select(population, e_count=1)
        assert population.next_generation == [2]

    @pytest.mark.parametrize("e_count, copy_count", [(0, 1), (4, 1), (1, 0), (-1, 1)])
    def test_invalid_arguments(self, make_population, e_count, copy_count):
        population = make_population([1, 2, 3], synchronous=True)
        with pytest.raises(ContractViolation):
            elite_select(population, e_count, copy_count)
        assert population.next_generation == []

    def test_selector(self, make_population):
        population = make_population([1, 5, 3], synchronous=True)
        assert len(EliteSelector(2, 2)(population)) == 4
        with pytest.raises(ContractViolation):
            EliteSelector(0)


class TestTournamentSelect:
    """Tournament selection with replacement."""

    def test_winner_is_fittest_entrant(self, make_scripted):
        population = make_scripted(
            ["a", "b", "c", "d"], fitness=SCORES.get, script=[2, 0, 3, 1], synchronous=True
        )
        tournament_select(population, t_size=4)
        assert population.births == [("d", 3, 1)]

    def test_first_seen_wins_ties(self, make_scripted):
        population = make_scripted(
            ["a", "b", "c"], fitness=SCORES.get, script=[2, 1, 0], synchronous=True
        )
        tournament_select(population, t_size=3)
        assert population.births == [("b", 1, 1)]

    def test_winner_always_beats_its_entrants(self, make_scripted):
        population = make_scripted(list(range(5)), synchronous=True)
        drawn = []
        draw = population.random_occupied_id

        def recording_draw():
            slot_id = draw()
            drawn.append(slot_id)
            return slot_id

        population.random_occupied_id = recording_draw
        for _ in range(200):
            drawn.clear()
            population.births.clear()
            tournament_select(population, t_size=5)
            assert population.births[0][1] == max(drawn)

    def test_full_size_tournament_favours_global_best(self, make_population):
        population = make_population(list(range(5)), synchronous=True)
        tournament_select(population, t_size=5, tourny_count=1000)
        winners = population.next_generation
        # The best organism is absent from a 5-entrant draw with prob (4/5)^5
        assert winners.count(4) > 600

    def test_single_entrant_is_uniform(self, make_population):
        population = make_population([0, 1], synchronous=True)
        tournament_select(population, t_size=1, tourny_count=2000)
        assert population.next_generation.count(0) == pytest.approx(1000, abs=150)

    def test_offspring_count(self, make_population):
        population = make_population([1, 2, 3])
        assert len(tournament_select(population, t_size=2, tourny_count=7)) == 7
        assert population.num_orgs() == 10

    @pytest.mark.parametrize("t_size, tourny_count", [(0, 1), (2, 0)])
    def test_invalid_arguments(self, make_population, t_size, tourny_count):
        with pytest.raises(ContractViolation):
            tournament_select(make_population([1, 2]), t_size, tourny_count)
        with pytest.raises(ContractViolation):
            TournamentSelector(t_size, tourny_count)

    def test_selector_repr(self):
        assert repr(TournamentSelector(3, 2)) == "TournamentSelector(t_size=3, tourny_count=2)"
