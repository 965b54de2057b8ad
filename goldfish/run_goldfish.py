#!/usr/bin/env python3
"""
Goldfish - Reanimator Simulation Runner

Point to a deck file and goldfish it over many seeds.

Usage:
    python -m goldfish.run_goldfish [--deck deck.txt] [--games 1000] [--seed 1]

Example:
    python -m goldfish.run_goldfish --games 10000 --parallel --workers 8
    python -m goldfish.run_goldfish --games 1 --seed 12345 --verbose
    python -m goldfish.run_goldfish --analyze --games 1000
    python -m goldfish.run_goldfish --compare other_deck.txt
"""

import argparse
import logging
import sys
import time
from typing import List, Optional

from .cards.database import DEFAULT_CARDS_PATH, DATA_DIR, CardDatabase, CardDatabaseError
from .cards.parser import Deck, DeckParseError, load_deck
from .engine.analysis import aggregate_analyses, analyze_turn4, format_analysis
from .engine.game import GameConfig
from .engine.match import BatchResult, BatchRunner, print_comparison, print_results, random_seeds, seed_range

logger = logging.getLogger(__name__)

DEFAULT_DECK_PATH = DATA_DIR / "reanimator.txt"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Goldfish a reanimator combo deck')
    parser.add_argument('--deck', default=str(DEFAULT_DECK_PATH),
                        help='Path to the deck list (default: bundled reanimator list)')
    parser.add_argument('--cards', default=str(DEFAULT_CARDS_PATH),
                        help='Path to the card catalog JSON (default: bundled catalog)')
    parser.add_argument('--games', type=int, default=1000, help='Number of games (default: 1000)')
    parser.add_argument('--seed', type=int, default=None,
                        help='First seed; games use consecutive seeds (default: random)')
    parser.add_argument('--parallel', action='store_true', help='Run games in worker processes')
    parser.add_argument('--workers', type=int, default=4, help='Worker processes (default: 4)')
    parser.add_argument('--max-turns', type=int, default=20, help='Turn ceiling (default: 20)')
    parser.add_argument('--verbose', action='store_true', help='Print the trace of the first game')
    parser.add_argument('--analyze', action='store_true',
                        help='Report why the combo is not ready on turn 4')
    parser.add_argument('--compare', metavar='DECK2', default=None,
                        help='Second deck list to run over the same seeds')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level (default: WARNING)')
    return parser


def make_seeds(start: Optional[int], count: int) -> List[int]:
    if start is None:
        return random_seeds(count)
    return seed_range(start, count)


def run_batch(deck: Deck, seeds: List[int], config: GameConfig, parallel: bool,
              workers: int, verbose: bool = False) -> BatchResult:
    """Run one deck over seeds, sequentially or across worker processes."""
    runner = BatchRunner(deck.cards, config=config, deck_name=deck.name)
    if parallel and not verbose:
        return runner.run_parallel(seeds, num_workers=workers)
    return runner.run(seeds, verbose_first=verbose)


def run_analysis(deck: Deck, seeds: List[int], config: GameConfig) -> None:
    print(f"Analyzing {len(seeds)} games of {deck.name}...")
    print()
    analyses = [analyze_turn4(deck.cards, seed, config=config) for seed in seeds]
    print(format_analysis(aggregate_analyses(analyses)))


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s %(name)s %(levelname)s: %(message)s',
    )

    if args.games < 1:
        print("Error: --games must be at least 1", file=sys.stderr)
        return 1

    try:
        db = CardDatabase.from_file(args.cards)
        deck = load_deck(args.deck, db)
        other = load_deck(args.compare, db) if args.compare else None
    except (CardDatabaseError, DeckParseError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    problems = db.validate()
    for problem in problems:
        logger.warning("Catalog: %s", problem)

    config = GameConfig(max_turns=args.max_turns)
    seeds = make_seeds(args.seed, args.games)
    logger.info("Running %d games from seed %d", len(seeds), seeds[0])

    if args.analyze:
        run_analysis(deck, seeds, config)
        return 0

    start = time.time()
    result = run_batch(deck, seeds, config, args.parallel, args.workers, args.verbose)
    print_results(result, elapsed=time.time() - start)

    if other is not None:
        start = time.time()
        other_result = run_batch(other, seeds, config, args.parallel, args.workers)
        print()
        print_results(other_result, elapsed=time.time() - start)
        print()
        print_comparison(result, other_result)

    return 0


if __name__ == "__main__":
    sys.exit(main())
