"""Goldfish Engine - Land Play

Playing a land from hand: the enters-tapped rule for each land family, the
on-entry choices for Cavern of Souls and Multiversal Passage, and surveil.
"""
import logging
from typing import List, Optional

from . import names
from .objects import Card, LandCard, Permanent
from .state import GameState
from .types import LandSubtype, ManaColor

logger = logging.getLogger(__name__)


# =============================================================================
# Enters-Tapped Rules
# =============================================================================

def land_enters_tapped(land: LandCard, state: GameState) -> bool:
    """Whether land would enter tapped if played now.

    Shocks always pay the life and enter untapped. Fastlands enter tapped
    once three lands are already out. Starting Town enters tapped from turn
    4 on. Verge lands enter untapped.
    """
    subtype = land.subtype
    if subtype is LandSubtype.SHOCK:
        return False
    if subtype is LandSubtype.FASTLAND:
        return state.land_count() >= 3
    if subtype is LandSubtype.TOWN:
        return state.turn > 3
    if subtype is LandSubtype.UTILITY and land.name.endswith("Verge"):
        return False
    return land.enters_tapped


# =============================================================================
# On-Entry Choices
# =============================================================================

def choose_cavern_type(state: GameState) -> str:
    """Creature type named by a Cavern of Souls entering now.

    The first Cavern names Human (Spider-Man and Town Greeter). A Cavern
    played while Kiora and a reanimation target wait in hand, with another
    Cavern to follow, names Noble so Kiora can be cast first.
    """
    hand_creatures = [c.name for c in state.hand if c.is_creature]
    has_human_cavern = any(
        p.name == names.CAVERN_OF_SOULS and p.chosen_type == "Human"
        for p in state.battlefield
    )
    caverns_in_hand = state.hand.count(names.CAVERN_OF_SOULS)
    has_kiora = names.KIORA in hand_creatures
    has_payload = names.BRINGER in hand_creatures or names.TERROR in hand_creatures

    if not has_human_cavern and has_kiora and has_payload and caverns_in_hand >= 1:
        return "Noble"

    if has_human_cavern:
        if names.BRINGER in hand_creatures:
            return "Demon"
        if names.KIORA in hand_creatures:
            return "Noble"
        if names.OVERLORD in hand_creatures:
            return "Avatar"
        if names.TERROR in hand_creatures:
            return "Dragon"
        return "Demon"

    return "Human"


def choose_passage_color(state: GameState) -> ManaColor:
    """Color named by a Multiversal Passage entering now.

    Fills a color the hand needs and the untapped lands lack, checking
    green, blue, then black; otherwise the first of blue, black, green that
    is missing; otherwise blue.
    """
    have = set()
    for permanent in state.battlefield:
        if permanent.tapped or not isinstance(permanent.card, LandCard):
            continue
        have.update(permanent.card.colors)

    need = set()
    for card in state.hand:
        need.update(card.mana_cost.colors_required())

    for color in (ManaColor.GREEN, ManaColor.BLUE, ManaColor.BLACK):
        if color in need and color not in have:
            return color
    for color in (ManaColor.BLUE, ManaColor.BLACK, ManaColor.GREEN):
        if color not in have:
            return color
    return ManaColor.BLUE


# =============================================================================
# Surveil
# =============================================================================

def _surveil_to_graveyard(card: Card, state: GameState) -> bool:
    name = card.name
    if name in (names.BRINGER, names.TERROR, names.OVERLORD, names.TOWN_GREETER):
        return True
    return name == names.KIORA and names.KIORA in state.hand


def resolve_surveil(state: GameState, count: int, verbose: bool = False) -> List[Card]:
    """Surveil count cards.

    Reanimation targets and cheap mill creatures go to the graveyard. The
    first card worth keeping stays on top and ends the surveil, since every
    card below it stays below it.

    Returns:
        The cards put into the graveyard.
    """
    binned: List[Card] = []
    kept: Optional[Card] = None

    for _ in range(count):
        top = state.library.peek()
        if top is None:
            break
        if _surveil_to_graveyard(top, state):
            state.graveyard.add(state.library.draw())
            binned.append(top)
        else:
            kept = top
            break

    if verbose:
        if binned:
            print(f"    Surveil -> graveyard: {', '.join(c.name for c in binned)}")
        if kept is not None:
            print(f"    Surveil -> kept on top: {kept.name}")
    return binned


# =============================================================================
# Playing a Land
# =============================================================================

def play_land(state: GameState, card: Card, verbose: bool = False) -> Permanent:
    """Put a land (already removed from hand) onto the battlefield.

    Raises:
        ValueError: If card is not a land.
    """
    if not isinstance(card, LandCard):
        raise ValueError(f"Not a land card: {card.name}")

    permanent = Permanent(
        card=card,
        turn_entered=state.turn,
        tapped=land_enters_tapped(card, state),
    )

    if card.name == names.CAVERN_OF_SOULS:
        permanent.chosen_type = choose_cavern_type(state)
        if verbose:
            print(f"    (Cavern set to: {permanent.chosen_type})")

    if card.name == names.MULTIVERSAL_PASSAGE:
        permanent.chosen_color = choose_passage_color(state)
        if verbose:
            print(f"    (Passage set to: {permanent.chosen_color.symbol})")

    if card.has_surveil and card.surveil_amount > 0:
        resolve_surveil(state, card.surveil_amount, verbose)

    state.battlefield.add(permanent)
    state.land_played = True
    logger.debug("Turn %d: played %s%s", state.turn, card.name,
                 " (tapped)" if permanent.tapped else "")
    return permanent


def play_land_from_hand(state: GameState, index: int, verbose: bool = False) -> Optional[Permanent]:
    """Remove the hand card at index and play it as the turn's land."""
    card = state.hand.remove_at(index)
    if card is None:
        return None
    return play_land(state, card, verbose)


__all__ = [
    'land_enters_tapped',
    'choose_cavern_type',
    'choose_passage_color',
    'resolve_surveil',
    'play_land',
    'play_land_from_hand',
]
