"""Goldfish Engine - Game Driver

run_game is the engine's single entry point: one deck, one seed, one
result. A game is a pure function of (deck, seed), so any number of games
may run side by side without sharing anything but the read-only catalog.

RNG consumption order:
1. Play/draw coin flip
2. Deck shuffle
3. Opening hand: hand comparison tie-break, mulligan shuffles
4. In-game shuffles (tutors) as they happen
"""
import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Union

from .mana import available_colors
from .mulligan import resolve_mulligans
from .objects import Card
from .rng import GameRng
from .state import GameState
from .turns import DEFAULT_MAX_HAND_SIZE, TurnManager
from .types import ManaColor

logger = logging.getLogger(__name__)

DeckEntry = Union[Card, str]


@dataclass
class GameConfig:
    """
    Configuration settings for a goldfish game.

    Attributes:
        max_turns: Turn ceiling; the game stops after this turn (default 20)
        starting_life: Own starting life total (default 20)
        opponent_life: The goldfish's starting life total (default 20)
        max_hand_size: Hand size enforced in the end step (default 7)
        verbose: Print the game trace (default False)
    """
    max_turns: int = 20
    starting_life: int = 20
    opponent_life: int = 20
    max_hand_size: int = DEFAULT_MAX_HAND_SIZE
    verbose: bool = False


@dataclass(frozen=True)
class GameResult:
    """
    Result of one goldfish game.

    Attributes:
        seed: Seed the game was played with
        win_turn: Turn the opponent reached 0 life, or None
        on_the_play: Whether this player went first
        combat_damage: Damage dealt by attacking creatures
        combo_damage: All other damage (Terror triggers)
        turn_with_u/b/g: First turn blue/black/green was available at end of turn
        turn_with_ubg: First turn all three were
        opening_hand_size: Size of the kept opening hand
    """
    seed: int
    win_turn: Optional[int] = None
    on_the_play: bool = False
    combat_damage: int = 0
    combo_damage: int = 0
    turn_with_u: Optional[int] = None
    turn_with_b: Optional[int] = None
    turn_with_g: Optional[int] = None
    turn_with_ubg: Optional[int] = None
    opening_hand_size: int = 7

    @property
    def won(self) -> bool:
        return self.win_turn is not None

    @property
    def total_damage(self) -> int:
        return self.combat_damage + self.combo_damage


def expand_deck(deck: Iterable[DeckEntry], catalog=None) -> List[Card]:
    """Copy of the deck as Card values, looking up plain names in catalog.

    Raises:
        ValueError: If the deck holds a name and there is no catalog.
    """
    cards: List[Card] = []
    for entry in deck:
        if isinstance(entry, Card):
            cards.append(entry)
        elif catalog is None:
            raise ValueError(f"Deck entry {entry!r} needs a card catalog")
        else:
            cards.append(catalog.get_card(entry))
    return cards


def setup_game(deck: Iterable[DeckEntry], seed: int, catalog=None,
               config: Optional[GameConfig] = None) -> GameState:
    """Build the state of a game about to start turn 1.

    Flips for play/draw, shuffles a copy of the deck and resolves the
    opening hand. The caller's deck is never modified.
    """
    config = config or GameConfig()
    rng = GameRng(seed)
    state = GameState(rng=rng, life=config.starting_life,
                      opponent_life=config.opponent_life)

    state.on_the_play = rng.random() < 0.5

    library = expand_deck(deck, catalog)
    rng.shuffle(library)
    hand = resolve_mulligans(library, rng)

    state.library.replace_with(library)
    state.hand.extend(hand)

    if config.verbose:
        print(f"=== Game Start (seed: {seed}) ===")
        print("On the play" if state.on_the_play else "On the draw")
        print(f"Opening hand ({len(hand)} cards):")
        for card in hand:
            print(f"  - {card.name}")
    return state


class _ColorTracker:
    """First turn each tracked color was available at the end of a turn."""

    def __init__(self):
        self.first = {ManaColor.BLUE: None, ManaColor.BLACK: None, ManaColor.GREEN: None}
        self.all_three: Optional[int] = None

    def update(self, state: GameState):
        colors = available_colors(state)
        for color, turn in self.first.items():
            if turn is None and color in colors:
                self.first[color] = state.turn
        if self.all_three is None and all(c in colors for c in self.first):
            self.all_three = state.turn


def run_game(deck: Iterable[DeckEntry], seed: int, catalog=None,
             verbose: bool = False, config: Optional[GameConfig] = None) -> GameResult:
    """Play one goldfish game.

    Args:
        deck: Cards (or names, with a catalog) in any order
        seed: Seed for the game's RNG
        catalog: Card catalog used to look up names in deck
        verbose: Print the game trace
        config: Turn ceiling, life totals and hand size

    Returns:
        The GameResult. Same deck and seed always give the same result.
    """
    config = config or GameConfig()
    if verbose and not config.verbose:
        config = replace(config, verbose=True)

    state = setup_game(deck, seed, catalog, config)
    opening_hand_size = len(state.hand)
    turns = TurnManager(state, config.verbose, config.max_hand_size)
    tracker = _ColorTracker()

    combat_damage = 0
    while state.turn < config.max_turns and not state.opponent_dead:
        combat_damage += turns.execute_turn()
        tracker.update(state)

    win_turn = state.turn if state.opponent_dead else None
    total_damage = config.opponent_life - state.opponent_life
    logger.debug("Seed %d: win turn %s", seed, win_turn)

    return GameResult(
        seed=seed,
        win_turn=win_turn,
        on_the_play=state.on_the_play,
        combat_damage=combat_damage,
        combo_damage=total_damage - combat_damage,
        turn_with_u=tracker.first[ManaColor.BLUE],
        turn_with_b=tracker.first[ManaColor.BLACK],
        turn_with_g=tracker.first[ManaColor.GREEN],
        turn_with_ubg=tracker.all_three,
        opening_hand_size=opening_hand_size,
    )


__all__ = [
    'GameConfig',
    'GameResult',
    'expand_deck',
    'setup_game',
    'run_game',
]
