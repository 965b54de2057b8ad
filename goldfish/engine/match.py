"""Goldfish Engine - Batch Runner

Runs the game driver over many seeds and aggregates the results:
- BatchResult: per-game results plus win-rate and curve statistics
- BatchRunner: sequential or process-parallel execution
- print_results / print_comparison: text reports

Every game is independent, so the parallel runner farms single games out
to worker processes. Results are always reported in seed order, whatever
order the workers finish in.
"""
import logging
import secrets
from collections import Counter
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Sequence

from .game import DeckEntry, GameConfig, GameResult, expand_deck, run_game
from .types import ManaColor

logger = logging.getLogger(__name__)

# Seeds are 32-bit
MAX_SEED = 2 ** 32


# =============================================================================
# SEEDS
# =============================================================================

def seed_range(start: int, count: int) -> List[int]:
    """count consecutive seeds from start (a reproducible seed family)."""
    return [(start + i) % MAX_SEED for i in range(count)]


def random_seeds(count: int) -> List[int]:
    """count consecutive seeds from a random base."""
    return seed_range(secrets.randbits(32), count)


# =============================================================================
# BATCH RESULT
# =============================================================================

@dataclass
class BatchResult:
    """
    Results of a batch of goldfish games.

    Attributes:
        deck_name: Name of the deck that was played
        results: One GameResult per seed, in seed order
    """
    deck_name: str = ""
    results: List[GameResult] = field(default_factory=list)

    @property
    def games(self) -> int:
        return len(self.results)

    @property
    def wins(self) -> int:
        return sum(1 for r in self.results if r.won)

    @property
    def win_rate(self) -> float:
        """
        Fraction of games won within the turn ceiling.

        Returns:
            Win rate as a float (0.0 to 1.0)
        """
        if not self.results:
            return 0.0
        return self.wins / self.games

    @property
    def average_win_turn(self) -> float:
        """Mean win turn over the games that were won (0.0 if none)."""
        turns = [r.win_turn for r in self.results if r.won]
        if not turns:
            return 0.0
        return sum(turns) / len(turns)

    @property
    def win_turn_distribution(self) -> Dict[int, int]:
        """Number of wins per turn, ordered by turn."""
        counts = Counter(r.win_turn for r in self.results if r.won)
        return dict(sorted(counts.items()))

    @property
    def no_wins(self) -> int:
        return self.games - self.wins

    def cumulative_win_rate(self, turn: int) -> float:
        """Fraction of all games won on or before turn."""
        if not self.results:
            return 0.0
        won = sum(1 for r in self.results if r.won and r.win_turn <= turn)
        return won / self.games

    def average_color_turn(self, color: Optional[ManaColor] = None) -> float:
        """Mean first turn a color was available, over games where it was.

        Args:
            color: BLUE, BLACK or GREEN; None for all three together
        """
        attr = {
            None: "turn_with_ubg",
            ManaColor.BLUE: "turn_with_u",
            ManaColor.BLACK: "turn_with_b",
            ManaColor.GREEN: "turn_with_g",
        }.get(color)
        if attr is None:
            raise ValueError(f"Color is not tracked: {color}")

        turns = [getattr(r, attr) for r in self.results]
        turns = [t for t in turns if t is not None]
        if not turns:
            return 0.0
        return sum(turns) / len(turns)

    @property
    def average_combo_damage(self) -> float:
        if not self.results:
            return 0.0
        return sum(r.combo_damage for r in self.results) / self.games

    @property
    def average_combat_damage(self) -> float:
        if not self.results:
            return 0.0
        return sum(r.combat_damage for r in self.results) / self.games

    def __str__(self) -> str:
        return (f"{self.deck_name or 'Deck'}: {self.wins}/{self.games} wins "
                f"({self.win_rate:.1%}), average turn {self.average_win_turn:.2f}")


# =============================================================================
# BATCH RUNNER
# =============================================================================

class BatchRunner:
    """
    Runs one deck over many seeds.

    Supports both sequential and parallel execution. Both return identical
    results for identical seeds.

    Attributes:
        deck: The deck, as Card values
        config: GameConfig for every game
        deck_name: Name used in reports
    """

    def __init__(
        self,
        deck: Iterable[DeckEntry],
        catalog=None,
        config: Optional[GameConfig] = None,
        deck_name: str = ""
    ):
        """
        Initialize the batch runner.

        Args:
            deck: Cards, or names looked up in catalog
            catalog: Card catalog for name lookups
            config: Optional game configuration
            deck_name: Name used in reports
        """
        self.deck = expand_deck(deck, catalog)
        self.config = config or GameConfig()
        self.deck_name = deck_name

    def run(self, seeds: Sequence[int], verbose_first: bool = False) -> BatchResult:
        """
        Run one game per seed in the calling process.

        Args:
            seeds: Seeds to play
            verbose_first: Print the trace of the first game only

        Returns:
            BatchResult in seed order
        """
        results: List[GameResult] = []
        for i, seed in enumerate(seeds):
            verbose = self.config.verbose or (verbose_first and i == 0)
            results.append(run_game(self.deck, seed, verbose=verbose, config=self.config))
            logger.debug("Game %d/%d done (seed %d)", i + 1, len(seeds), seed)
        return BatchResult(deck_name=self.deck_name, results=results)

    def run_parallel(self, seeds: Sequence[int], num_workers: int = 4) -> BatchResult:
        """
        Run games in parallel using multiple processes.

        Each game runs in a worker process with its own copy of the deck;
        nothing is shared. Traces are never printed from workers.

        Args:
            seeds: Seeds to play
            num_workers: Number of parallel worker processes

        Returns:
            BatchResult in seed order
        """
        by_index: Dict[int, GameResult] = {}

        with ProcessPoolExecutor(max_workers=num_workers) as executor:
            futures = {
                executor.submit(_run_single_game, self.deck, seed, self.config): i
                for i, seed in enumerate(seeds)
            }

            for done, future in enumerate(as_completed(futures), start=1):
                by_index[futures[future]] = future.result()
                logger.debug("Completed game %d/%d", done, len(seeds))

        results = [by_index[i] for i in range(len(seeds))]
        return BatchResult(deck_name=self.deck_name, results=results)


def _run_single_game(deck: List, seed: int, config: GameConfig) -> GameResult:
    """
    Helper function for parallel game execution.

    This function runs in a separate process when using run_parallel.
    """
    return run_game(deck, seed, config=replace(config, verbose=False))


# =============================================================================
# REPORTS
# =============================================================================

def _bar(pct: float) -> str:
    return "#" * int(pct / 2.0)


def print_results(result: BatchResult, elapsed: Optional[float] = None) -> None:
    """
    Pretty print batch results.

    Example output:
        ==================================================
                       GOLDFISH RESULTS
        ==================================================
        Reanimator: 60 cards
        Win rate: 87.4% (874/1000)
        Average win turn: 5.12
        ...
    """
    width = 50
    separator = "=" * width
    games = result.games or 1

    print(separator)
    print("GOLDFISH RESULTS".center(width))
    print(separator)
    print()
    if result.deck_name:
        print(result.deck_name)
    print(f"Win rate: {result.win_rate * 100:.1f}% ({result.wins}/{result.games})")
    print(f"Average win turn: {result.average_win_turn:.2f}")
    print(f"Average UBG available: turn {result.average_color_turn():.2f}")
    print(f"Average damage: {result.average_combo_damage:.1f} combo, "
          f"{result.average_combat_damage:.1f} combat")
    print()

    print("Turn distribution:")
    for turn, count in result.win_turn_distribution.items():
        pct = count / games * 100.0
        cumulative = result.cumulative_win_rate(turn) * 100.0
        print(f"  Turn {turn:2d}: {pct:5.1f}% {_bar(pct)} ({count}) [by turn: {cumulative:.1f}%]")
    if result.no_wins:
        print(f"  No win: {result.no_wins / games * 100.0:5.1f}% ({result.no_wins})")

    if elapsed is not None:
        print()
        rate = result.games / elapsed if elapsed > 0 else 0
        print(f"Simulation completed in {elapsed:.2f}s ({rate:.0f} games/sec)")
    print(separator)


def print_comparison(first: BatchResult, second: BatchResult) -> None:
    """Side-by-side win rate and speed of two decks."""
    name1 = first.deck_name or "Deck 1"
    name2 = second.deck_name or "Deck 2"

    print(f"{'Metric':<20} {name1:>12} {name2:>12}")
    print("-" * 50)
    print(f"{'Win rate':<20} {first.win_rate * 100:11.1f}% {second.win_rate * 100:11.1f}%")
    print(f"{'Avg win turn':<20} {first.average_win_turn:12.2f} {second.average_win_turn:12.2f}")
    print()

    if first.win_rate > second.win_rate:
        print(f"{name1} has {(first.win_rate - second.win_rate) * 100:.1f}% higher win rate")
    elif second.win_rate > first.win_rate:
        print(f"{name2} has {(second.win_rate - first.win_rate) * 100:.1f}% higher win rate")
    else:
        print("Both decks have the same win rate")

    turn1, turn2 = first.average_win_turn, second.average_win_turn
    if 0.0 < turn1 < turn2:
        print(f"{name1} wins {turn2 - turn1:.2f} turns faster on average")
    elif 0.0 < turn2 < turn1:
        print(f"{name2} wins {turn1 - turn2:.2f} turns faster on average")


__all__ = [
    'MAX_SEED',
    'seed_range',
    'random_seeds',
    'BatchResult',
    'BatchRunner',
    'print_results',
    'print_comparison',
]
