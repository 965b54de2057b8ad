"""Goldfish Engine - Turn 4 Analysis

Plays a game up to the start of turn 4's main phase and names the first
thing standing between the deck and a turn 4 kill: lands, colors,
Spider-Man, the graveyard targets, or damage.
"""
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from . import names
from .decisions import calculate_combo_damage
from .game import DeckEntry, GameConfig, setup_game
from .mana import producible_colors
from .objects import LandCard
from .state import GameState
from .turns import TurnManager
from .types import LandSubtype, ManaColor

COMBO_TURN = 4


class FailureReason(Enum):
    """Why the combo is not available on turn 4, checked in this order."""
    INSUFFICIENT_LANDS = "Insufficient lands (<4)"
    MISSING_BLUE = "Missing blue mana"
    MISSING_BLACK = "Missing black mana"
    MISSING_GREEN = "Missing green mana"
    SPIDER_MAN_NOT_IN_HAND = "Spider-Man not in hand"
    NO_BRINGER_IN_GRAVEYARD = "No Bringer in graveyard"
    NO_TERROR_IN_GRAVEYARD = "No Terror in graveyard"
    INSUFFICIENT_DAMAGE = "Insufficient damage (<20)"
    COMBO_AVAILABLE = "Combo available"

    @property
    def description(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Turn4Analysis:
    """
    State of one game at the start of turn 4's main phase.

    Attributes:
        seed: Seed of the game
        primary_failure: First blocker found, or COMBO_AVAILABLE
        lands_count: Lands available, counting an untapped land drop
        has_blue, has_black, has_green: Colors available, same counting
    """
    seed: int
    primary_failure: FailureReason
    lands_count: int
    has_blue: bool
    has_black: bool
    has_green: bool


@dataclass
class AnalysisResults:
    """Aggregate of many Turn4Analysis records."""
    games: int = 0
    failure_counts: Dict[FailureReason, int] = field(default_factory=dict)
    average_lands: float = 0.0
    blue_availability: float = 0.0
    black_availability: float = 0.0
    green_availability: float = 0.0

    @property
    def combo_ready(self) -> int:
        return self.failure_counts.get(FailureReason.COMBO_AVAILABLE, 0)


# =============================================================================
# Single Game
# =============================================================================

def land_drop_untapped(land: LandCard, state: GameState) -> bool:
    """Whether land would come in untapped as this turn's drop.

    Unlike the land play rules, a shock is only counted as tapped when
    paying 2 life is out of reach.
    """
    subtype = land.subtype
    if subtype is LandSubtype.FASTLAND:
        return state.land_count() < 3
    if subtype is LandSubtype.TOWN:
        return state.turn <= 3
    if subtype is LandSubtype.SHOCK:
        return state.life > 2
    if subtype is LandSubtype.UTILITY and land.name.endswith("Verge"):
        return True
    return not land.enters_tapped


def _terror_available(state: GameState) -> bool:
    return (names.TERROR in state.graveyard
            or any(p.name == names.TERROR for p in state.battlefield))


def analyze_state(state: GameState, seed: int = 0) -> Turn4Analysis:
    """Classify the combo blocker for the current state."""
    colors = set()
    for permanent in state.battlefield:
        if permanent.is_land:
            colors |= producible_colors(permanent, state)

    lands = state.land_count()
    drop_colors = set()
    has_drop = False
    for card in state.hand:
        if isinstance(card, LandCard) and land_drop_untapped(card, state):
            has_drop = True
            drop_colors.update(card.colors)
    if has_drop:
        lands += 1
        colors |= drop_colors

    has_blue = ManaColor.BLUE in colors
    has_black = ManaColor.BLACK in colors
    has_green = ManaColor.GREEN in colors

    if lands < 4:
        failure = FailureReason.INSUFFICIENT_LANDS
    elif not has_blue:
        failure = FailureReason.MISSING_BLUE
    elif not has_black:
        failure = FailureReason.MISSING_BLACK
    elif not has_green:
        failure = FailureReason.MISSING_GREEN
    elif names.SPIDER_MAN not in state.hand:
        failure = FailureReason.SPIDER_MAN_NOT_IN_HAND
    elif names.BRINGER not in state.graveyard:
        failure = FailureReason.NO_BRINGER_IN_GRAVEYARD
    elif not _terror_available(state):
        failure = FailureReason.NO_TERROR_IN_GRAVEYARD
    elif calculate_combo_damage(state) < state.opponent_life:
        failure = FailureReason.INSUFFICIENT_DAMAGE
    else:
        failure = FailureReason.COMBO_AVAILABLE

    return Turn4Analysis(
        seed=seed,
        primary_failure=failure,
        lands_count=lands,
        has_blue=has_blue,
        has_black=has_black,
        has_green=has_green,
    )


def analyze_turn4(deck: Iterable[DeckEntry], seed: int, catalog=None,
                  config: Optional[GameConfig] = None) -> Turn4Analysis:
    """Play turns 1-3, then turn 4 through the draw step, and analyze."""
    config = config or GameConfig()
    state = setup_game(deck, seed, catalog, config)
    turns = TurnManager(state, verbose=False, max_hand_size=config.max_hand_size)

    for _ in range(COMBO_TURN - 1):
        turns.execute_turn()

    turns.untap_step()
    turns.draw_step()
    return analyze_state(state, seed)


# =============================================================================
# Aggregation
# =============================================================================

def aggregate_analyses(analyses: Sequence[Turn4Analysis]) -> AnalysisResults:
    if not analyses:
        return AnalysisResults()

    n = len(analyses)
    counts = Counter(a.primary_failure for a in analyses)
    return AnalysisResults(
        games=n,
        failure_counts=dict(counts),
        average_lands=sum(a.lands_count for a in analyses) / n,
        blue_availability=sum(1 for a in analyses if a.has_blue) / n * 100.0,
        black_availability=sum(1 for a in analyses if a.has_black) / n * 100.0,
        green_availability=sum(1 for a in analyses if a.has_green) / n * 100.0,
    )


def format_analysis(results: AnalysisResults) -> str:
    """Text report, failure reasons from most to least common."""
    total = results.games or 1
    lines: List[str] = [
        "=== Turn 4 Analysis Results ===",
        f"Total games analyzed: {results.games}",
        f"Average lands at turn 4: {results.average_lands:.2f}",
        f"Color availability: U={results.blue_availability:.1f}% "
        f"B={results.black_availability:.1f}% G={results.green_availability:.1f}%",
        "",
        "Failure breakdown:",
    ]
    ranked = sorted(results.failure_counts.items(), key=lambda item: item[1], reverse=True)
    for reason, count in ranked:
        pct = count / total * 100.0
        lines.append(f"  {reason.description:<30} {pct:5.1f}% {'#' * int(pct / 2.0)} ({count})")
    lines.append("")
    lines.append(f"Turn 4 combo ready: {results.combo_ready / total * 100.0:.1f}% "
                 f"({results.combo_ready}/{results.games})")
    return "\n".join(lines)


__all__ = [
    'COMBO_TURN',
    'FailureReason',
    'Turn4Analysis',
    'AnalysisResults',
    'land_drop_untapped',
    'analyze_state',
    'analyze_turn4',
    'aggregate_analyses',
    'format_analysis',
]
