"""
Test suite for the batch runner and reports.

Tests cover:
- Seed families
- BatchResult statistics
- Sequential and parallel runs agreeing in seed order
- Text reports
"""
import pytest

from goldfish.engine.game import GameConfig, GameResult
from goldfish.engine.match import (
    MAX_SEED,
    BatchResult,
    BatchRunner,
    print_comparison,
    print_results,
    random_seeds,
    seed_range,
)
from goldfish.engine.types import ManaColor


@pytest.fixture
def batch() -> BatchResult:
    """
    Four hand-made results: wins on turns 4, 4 and 6, and one loss.

    Returns:
        BatchResult: Named "Test Deck".
    """
    return BatchResult(deck_name="Test Deck", results=[
        GameResult(seed=1, win_turn=4, combo_damage=20, turn_with_u=1,
                   turn_with_b=2, turn_with_g=1, turn_with_ubg=2),
        GameResult(seed=2, win_turn=4, combo_damage=14, combat_damage=6,
                   turn_with_u=2, turn_with_b=2, turn_with_g=3, turn_with_ubg=3),
        GameResult(seed=3, win_turn=6, combat_damage=22, turn_with_u=1),
        GameResult(seed=4),
    ])


# =============================================================================
# SEED TESTS
# =============================================================================

class TestSeeds:
    """Tests for seed families."""

    def test_seed_range_consecutive(self):
        assert seed_range(10, 3) == [10, 11, 12]

    def test_seed_range_wraps(self):
        assert seed_range(MAX_SEED - 1, 3) == [MAX_SEED - 1, 0, 1]

    def test_random_seeds_consecutive(self):
        seeds = random_seeds(5)
        assert len(seeds) == 5
        assert all(0 <= s < MAX_SEED for s in seeds)
        assert seeds[1] == (seeds[0] + 1) % MAX_SEED


# =============================================================================
# BATCH RESULT TESTS
# =============================================================================

class TestBatchResult:
    """Tests for the aggregate statistics."""

    def test_win_rate(self, batch):
        assert batch.games == 4
        assert batch.wins == 3
        assert batch.no_wins == 1
        assert batch.win_rate == pytest.approx(0.75)

    def test_average_win_turn(self, batch):
        assert batch.average_win_turn == pytest.approx(14 / 3)

    def test_distribution(self, batch):
        assert batch.win_turn_distribution == {4: 2, 6: 1}
        assert list(batch.win_turn_distribution) == [4, 6]

    def test_cumulative(self, batch):
        assert batch.cumulative_win_rate(3) == 0.0
        assert batch.cumulative_win_rate(4) == pytest.approx(0.5)
        assert batch.cumulative_win_rate(20) == pytest.approx(0.75)

    def test_color_turns(self, batch):
        assert batch.average_color_turn(ManaColor.BLUE) == pytest.approx(4 / 3)
        assert batch.average_color_turn(ManaColor.GREEN) == pytest.approx(2.0)
        assert batch.average_color_turn() == pytest.approx(2.5)

    def test_untracked_color(self, batch):
        with pytest.raises(ValueError):
            batch.average_color_turn(ManaColor.RED)

    def test_damage_averages(self, batch):
        assert batch.average_combo_damage == pytest.approx(34 / 4)
        assert batch.average_combat_damage == pytest.approx(28 / 4)

    def test_empty(self):
        empty = BatchResult()
        assert empty.win_rate == 0.0
        assert empty.average_win_turn == 0.0
        assert empty.average_color_turn() == 0.0
        assert empty.win_turn_distribution == {}

    def test_str(self, batch):
        assert str(batch) == "Test Deck: 3/4 wins (75.0%), average turn 4.67"


# =============================================================================
# BATCH RUNNER TESTS
# =============================================================================

class TestBatchRunner:
    """Tests for running many games."""

    def test_results_in_seed_order(self, deck_cards):
        runner = BatchRunner(deck_cards, config=GameConfig(max_turns=8))
        result = runner.run([5, 3, 9])
        assert [r.seed for r in result.results] == [5, 3, 9]

    def test_parallel_matches_sequential(self, deck_cards):
        runner = BatchRunner(deck_cards, config=GameConfig(max_turns=8), deck_name="Reanimator")
        seeds = seed_range(100, 6)
        sequential = runner.run(seeds)
        parallel = runner.run_parallel(seeds, num_workers=2)
        assert parallel.results == sequential.results
        assert parallel.deck_name == "Reanimator"

    def test_parallel_repeated_seed_is_identical(self, deck_cards):
        runner = BatchRunner(deck_cards, config=GameConfig(max_turns=8))
        parallel = runner.run_parallel([4242] * 6, num_workers=3)
        assert len(parallel.results) == 6
        first = parallel.results[0]
        assert all(result == first for result in parallel.results)
        assert first == runner.run([4242]).results[0]

    def test_names_need_catalog(self, catalog):
        runner = BatchRunner(["Island"] * 60, catalog=catalog)
        assert all(c.name == "Island" for c in runner.deck)
        with pytest.raises(ValueError):
            BatchRunner(["Island"] * 60)


# =============================================================================
# REPORT TESTS
# =============================================================================

class TestReports:
    """Tests for the text reports."""

    def test_print_results(self, batch, capsys):
        print_results(batch, elapsed=2.0)
        out = capsys.readouterr().out
        assert "GOLDFISH RESULTS" in out
        assert "Win rate: 75.0% (3/4)" in out
        assert "Turn  4:  50.0%" in out
        assert "No win:  25.0% (1)" in out
        assert "(2 games/sec)" in out

    def test_print_comparison(self, batch, capsys):
        other = BatchResult(deck_name="Other", results=[GameResult(seed=1, win_turn=5), GameResult(seed=2)])
        print_comparison(batch, other)
        out = capsys.readouterr().out
        assert "Test Deck has 25.0% higher win rate" in out
        assert "Test Deck wins 0.33 turns faster on average" in out
