"""Goldfish Engine - Opening Hand

Best-of-one opening hand protocol:
1. Draw two 7-card hands and keep the better one (hand smoothing)
2. If neither has 2 lands, shuffle both back and mulligan down from 6
3. Re-check the kept hand and mulligan further while it is unkeepable

Mulligans are London-style: draw the smaller hand, then scry 7 - size.
The library is a plain list here (index 0 is the top); the game driver
moves it into the Library zone afterwards. Every shuffle and tie-break
draws from the game's RNG in a fixed order.
"""
import logging
from typing import List, Sequence, Tuple

from . import names
from .objects import Card
from .rng import GameRng

logger = logging.getLogger(__name__)

OPENING_HAND_SIZE = 7
MIN_HAND_SIZE = 4
MIN_KEEP_LANDS = 2

# Land-count penalties for comparing two candidate hands
FEW_LANDS_PENALTY = 10
MANY_LANDS_PENALTY = 1
MAX_IDEAL_LANDS = 4


# =============================================================================
# Hand Evaluation
# =============================================================================

def count_lands(hand: Sequence[Card]) -> int:
    return sum(1 for card in hand if card.is_land)


def is_mill_enabler(card: Card) -> bool:
    return card.name in names.MILL_ENABLERS


def is_playable_early_spell(card: Card) -> bool:
    return not card.is_land and card.mana_value <= 3


def hand_score(hand: Sequence[Card]) -> Tuple[int, int]:
    """Sort key for a candidate hand, lower is better.

    A heavy penalty per land short of 2, a light one per land past 4, then
    the total mana value of the hand.
    """
    lands = count_lands(hand)
    penalty = 0
    if lands < MIN_KEEP_LANDS:
        penalty = FEW_LANDS_PENALTY * (MIN_KEEP_LANDS - lands)
    elif lands > MAX_IDEAL_LANDS:
        penalty = MANY_LANDS_PENALTY * (lands - MAX_IDEAL_LANDS)
    return penalty, sum(card.mana_value for card in hand)


def should_mulligan(hand: Sequence[Card]) -> bool:
    """Whether a kept hand should still be sent back.

    At 4 cards or with a graveyard enabler, only a hand with fewer than 2
    lands goes back. Otherwise 2-5 lands with a spell of mana value 3 or
    less is a keep.
    """
    lands = count_lands(hand)

    if len(hand) <= MIN_HAND_SIZE:
        return lands < MIN_KEEP_LANDS

    if any(is_mill_enabler(card) for card in hand):
        return lands < MIN_KEEP_LANDS

    has_early_spell = any(is_playable_early_spell(card) for card in hand)
    if MIN_KEEP_LANDS <= lands <= 5 and has_early_spell:
        return False
    return lands < MIN_KEEP_LANDS or not has_early_spell


# =============================================================================
# Mulligan Down
# =============================================================================

def _draw(library: List[Card], count: int) -> List[Card]:
    hand = library[:count]
    del library[:len(hand)]
    return hand


def scry(library: List[Card], hand: Sequence[Card], count: int):
    """Scry count cards from the top of library after a mulligan.

    Bringer and Terror always go to the bottom so they can be milled or
    discarded later instead of drawn. Lands go to the bottom when the hand
    already has 3, expensive spells when the hand is short on lands.
    Relative order inside each group is kept.
    """
    if count <= 0 or not library:
        return

    hand_lands = count_lands(hand)
    looked = _draw(library, count)
    top: List[Card] = []
    bottom: List[Card] = []

    for card in looked:
        if card.name in names.COMBO_PIECES:
            bottom.append(card)
        elif card.is_land and hand_lands >= 3:
            bottom.append(card)
        elif card.mana_value >= 4 and hand_lands < MIN_KEEP_LANDS:
            bottom.append(card)
        else:
            top.append(card)

    library[:] = top + library + bottom


def mulligan_down(library: List[Card], hand_size: int, rng: GameRng) -> List[Card]:
    """Draw smaller hands until one has 2 lands or the floor is reached, then scry."""
    while True:
        hand = _draw(library, hand_size)
        if count_lands(hand) < MIN_KEEP_LANDS and hand_size > MIN_HAND_SIZE:
            library.extend(hand)
            rng.shuffle(library)
            hand_size -= 1
            continue

        scry(library, hand, OPENING_HAND_SIZE - hand_size)
        logger.debug("Mulligan to %d (%d lands)", hand_size, count_lands(hand))
        return hand


# =============================================================================
# Opening Hand
# =============================================================================

def choose_hand(hand1: List[Card], hand2: List[Card], rng: GameRng) -> Tuple[List[Card], List[Card]]:
    """(kept, rejected) between two hands that both have 2+ lands."""
    score1 = hand_score(hand1)
    score2 = hand_score(hand2)
    if score1 < score2:
        return hand1, hand2
    if score2 < score1:
        return hand2, hand1
    if rng.random() < 0.5:
        return hand1, hand2
    return hand2, hand1


def resolve_mulligans(library: List[Card], rng: GameRng) -> List[Card]:
    """Draw the opening hand from library, which is modified in place.

    Returns:
        The kept hand, 4 to 7 cards.
    """
    hand1 = _draw(library, OPENING_HAND_SIZE)
    hand2 = _draw(library, OPENING_HAND_SIZE)
    ok1 = count_lands(hand1) >= MIN_KEEP_LANDS
    ok2 = count_lands(hand2) >= MIN_KEEP_LANDS

    if ok1 and ok2:
        kept, rejected = choose_hand(hand1, hand2, rng)
    elif ok1:
        kept, rejected = hand1, hand2
    elif ok2:
        kept, rejected = hand2, hand1
    else:
        library.extend(hand1)
        library.extend(hand2)
        rng.shuffle(library)
        return mulligan_down(library, OPENING_HAND_SIZE - 1, rng)

    library.extend(rejected)
    rng.shuffle(library)

    while should_mulligan(kept) and len(kept) > MIN_HAND_SIZE:
        next_size = len(kept) - 1
        library.extend(kept)
        rng.shuffle(library)
        kept = mulligan_down(library, next_size, rng)

    return kept


__all__ = [
    'OPENING_HAND_SIZE',
    'MIN_HAND_SIZE',
    'count_lands',
    'is_mill_enabler',
    'is_playable_early_spell',
    'hand_score',
    'should_mulligan',
    'scry',
    'mulligan_down',
    'choose_hand',
    'resolve_mulligans',
]
