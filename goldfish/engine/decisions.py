"""Goldfish Engine - Decision Heuristics

The choices a pilot makes that are not forced by the rules:
- which land to play
- which milled card to return to hand
- which spell to cast next
- how much damage the reanimation combo would deal right now
"""
from functools import cmp_to_key
from typing import List, Optional, Sequence, Set

from . import names
from .lands import land_enters_tapped
from .objects import Card, CreatureCard, LandCard, Permanent
from .state import GameState
from .types import LandSubtype, ManaColor

# Power of the Bringer that Spider-Man becomes when it copies one
BRINGER_POWER = 6


# =============================================================================
# Board Queries
# =============================================================================

def has_ardyn(state: GameState) -> bool:
    """Ardyn, or something copying Ardyn, is on the battlefield."""
    return any(p.is_named(names.ARDYN) for p in state.battlefield)


def is_demon_card(card: Card) -> bool:
    return isinstance(card, CreatureCard) and "Demon" in card.creature_types


def is_demon(permanent: Permanent) -> bool:
    """A Demon creature, or a copy of a known Demon."""
    return is_demon_card(permanent.card) or permanent.is_copy_of == names.BRINGER


def count_terrors(state: GameState) -> int:
    return state.battlefield.count_named(names.TERROR)


def has_ardyn_combo(graveyard: Sequence[Card]) -> bool:
    """Ardyn plus at least one other creature to feed Starscourge."""
    has_ardyn_card = any(c.name == names.ARDYN for c in graveyard)
    others = sum(1 for c in graveyard if c.is_creature and c.name != names.ARDYN)
    return has_ardyn_card and others >= 1


# =============================================================================
# Combo Damage
# =============================================================================

def calculate_combo_damage(state: GameState) -> int:
    """Damage the combo would deal if Spider-Man copied Bringer right now.

    Counts Terror triggers from the copy (power 6) and every reanimated
    creature, Terrors triggering off each other, creatures already able to
    attack, and with Ardyn out the hasty Demons coming back.
    """
    ardyn = has_ardyn(state)

    gy_power = 0
    gy_terrors = 0
    gy_demon_power = 0
    for card in state.graveyard:
        if not isinstance(card, CreatureCard):
            continue
        gy_power += card.power
        if card.name == names.TERROR:
            gy_terrors += 1
        if ardyn and is_demon_card(card):
            gy_demon_power += card.power

    bf_terrors = 0
    combat_power = 0
    for permanent in state.battlefield:
        if permanent.is_named(names.TERROR):
            bf_terrors += 1
        if not isinstance(permanent.card, CreatureCard):
            continue
        if permanent.is_impending:
            continue
        if state.turn <= permanent.turn_entered:
            if ardyn and is_demon_card(permanent.card):
                combat_power += permanent.card.power
        else:
            combat_power += permanent.card.power

    terrors = bf_terrors + gy_terrors
    damage = BRINGER_POWER * terrors + gy_power * terrors
    if gy_terrors > 1:
        damage += 3 * gy_terrors * (gy_terrors - 1)
    return damage + combat_power + gy_demon_power


def is_combo_lethal(state: GameState) -> bool:
    return calculate_combo_damage(state) >= state.opponent_life


# =============================================================================
# Land Choice
# =============================================================================

def _has_colors_for(card: Card, colors: Set[ManaColor]) -> bool:
    return all(c in colors for c in card.mana_cost.colors_required())


def choose_land_to_play(state: GameState) -> Optional[int]:
    """Index of the hand land to play this turn, or None without lands.

    Ranking: a land that lets a spell be cast this turn, then one that adds
    a color the hand is missing, then surveil lands, then tapped lands
    (keeping untapped ones for later). Among lands that enable a cast,
    surveil first, then more colors.
    """
    lands = [(i, c) for i, c in enumerate(state.hand) if isinstance(c, LandCard)]
    if not lands:
        return None

    colors_available: Set[ManaColor] = set()
    mana_available = 0
    for permanent in state.battlefield.untapped_lands():
        mana_available += 1
        colors_available.update(permanent.card.colors)
    mana_after_drop = mana_available + 1

    spells = [c for c in state.hand if not c.is_land]
    missing: Set[ManaColor] = set()
    for spell in spells:
        missing.update(c for c in spell.mana_cost.colors_required()
                       if c not in colors_available)

    def enables_cast(land: LandCard, tapped: bool) -> bool:
        if tapped:
            return False
        colors_after = colors_available | set(land.colors)
        return any(s.mana_value <= mana_after_drop and _has_colors_for(s, colors_after)
                   for s in spells)

    def compare(a, b) -> int:
        land_a, land_b = a[1], b[1]
        tapped_a = land_enters_tapped(land_a, state)
        tapped_b = land_enters_tapped(land_b, state)
        cast_a = enables_cast(land_a, tapped_a)
        cast_b = enables_cast(land_b, tapped_b)

        if cast_a != cast_b:
            return -1 if cast_a else 1

        if not cast_a:
            fills_a = any(c in missing for c in land_a.colors)
            fills_b = any(c in missing for c in land_b.colors)
            if fills_a != fills_b:
                return -1 if fills_a else 1
            if land_a.has_surveil != land_b.has_surveil:
                return -1 if land_a.has_surveil else 1
            if tapped_a != tapped_b:
                return -1 if tapped_a else 1
            return 0

        if land_a.has_surveil != land_b.has_surveil:
            return -1 if land_a.has_surveil else 1
        return len(land_b.colors) - len(land_a.colors)

    lands.sort(key=cmp_to_key(compare))
    return lands[0][0]


# =============================================================================
# Mill Returns
# =============================================================================

def _first(cards: Sequence[Card], predicate) -> Optional[int]:
    for i, card in enumerate(cards):
        if predicate(card):
            return i
    return None


def _not_payload(card: Card) -> bool:
    return card.name not in names.COMBO_PIECES


def select_permanent_from_mill(milled: Sequence[Card]) -> Optional[int]:
    """Index of the milled card Cache Grab returns, or None.

    Spider-Man, then Kiora, then a land, then a creature, then any
    permanent. Bringer and Terror are never returned.
    """
    rules = (
        lambda c: c.name == names.SPIDER_MAN,
        lambda c: c.name == names.KIORA,
        lambda c: c.is_land,
        lambda c: c.is_creature and _not_payload(c),
        lambda c: not c.is_instant_or_sorcery and _not_payload(c),
    )
    for rule in rules:
        index = _first(milled, rule)
        if index is not None:
            return index
    return None


def choose_mill_return(milled: Sequence[Card]) -> Optional[int]:
    """Index of the milled card Dredger's Insight returns, or None.

    Spider-Man, then Kiora, then a blue land, then any land, then a
    creature other than Bringer or Terror.
    """
    rules = (
        lambda c: c.name == names.SPIDER_MAN,
        lambda c: c.name == names.KIORA,
        lambda c: c.is_land and c.name in names.BLUE_LANDS,
        lambda c: c.is_land,
        lambda c: c.is_creature and _not_payload(c),
    )
    for rule in rules:
        index = _first(milled, rule)
        if index is not None:
            return index
    return None


def town_greeter_land_score(land: LandCard) -> int:
    score = 0
    if not land.enters_tapped:
        score += 100
    if len(land.colors) > 1:
        score += 50
    if land.has_surveil:
        score += 25
    if land.subtype is LandSubtype.UTILITY:
        score += 75
    return score


# =============================================================================
# Kiora Discards
# =============================================================================

def discard_priority(card: Card, lands_on_battlefield: int,
                     bringer_in_graveyard: bool, hand: Sequence[Card]) -> int:
    """How much Kiora wants to discard card (higher goes first)."""
    name = card.name
    if name == names.BRINGER:
        return 500
    if name == names.TERROR:
        return 490
    if name == names.ARDYN:
        return 480
    if name == names.OVERLORD and bringer_in_graveyard:
        return 470

    if card.is_land:
        lands_in_hand = sum(1 for c in hand if c.is_land)
        if lands_on_battlefield >= 4 and lands_in_hand > 1:
            return 300
        if lands_on_battlefield >= 3 and lands_in_hand > 2:
            return 250

    if card.is_creature and name != names.SPIDER_MAN:
        if sum(1 for c in hand if c.name == name) > 1:
            return 200

    if card.is_instant_or_sorcery:
        return 100
    if name == names.SPIDER_MAN:
        return -100
    if name == names.KIORA:
        return -50
    return 0


def select_discards(state: GameState, count: int) -> List[Card]:
    """Pick count cards from hand for Kiora to discard, one at a time."""
    hand = list(state.hand)
    lands = state.land_count()
    bringer_in_gy = names.BRINGER in state.graveyard
    chosen: List[Card] = []

    while len(chosen) < count and hand:
        best_idx = -1
        best = -1
        for i, card in enumerate(hand):
            priority = discard_priority(card, lands, bringer_in_gy, hand)
            if priority > best:
                best = priority
                best_idx = i
        if best_idx < 0:
            break
        card = hand.pop(best_idx)
        chosen.append(card)
        if card.name == names.BRINGER:
            bringer_in_gy = True
    return chosen


# =============================================================================
# Spell Choice
# =============================================================================

MILL_SPELLS = frozenset({
    names.CACHE_GRAB, names.DREDGERS_INSIGHT, names.TOWN_GREETER, names.OVERLORD,
})

MILL_CREATURES = frozenset({names.OVERLORD, names.KIORA, names.TOWN_GREETER})


def should_hold_spider_man(state: GameState, combo_lethal: bool) -> bool:
    """Spider-Man waits until the copy wins, or until it has a job to do."""
    graveyard = list(state.graveyard)
    if names.BRINGER in state.graveyard:
        return not combo_lethal
    if has_ardyn_combo(graveyard):
        return False
    spider_men = state.hand.count(names.SPIDER_MAN)
    mill_creature_in_gy = any(c.name in MILL_CREATURES for c in graveyard)
    return spider_men < 2 or not mill_creature_in_gy


def spell_priority(card: Card, state: GameState, combo_lethal: bool) -> int:
    """Casting order for the main phase loop (lower is cast first)."""
    name = card.name
    bringer_in_gy = names.BRINGER in state.graveyard
    payload_in_hand = names.BRINGER in state.hand or names.TERROR in state.hand

    if combo_lethal and name == names.SPIDER_MAN:
        return 1
    if bringer_in_gy and names.SPIDER_MAN not in state.hand and name == names.SPEAKER:
        return 15
    if payload_in_hand and name == names.SPEAKER:
        return 20
    if payload_in_hand and name == names.KIORA:
        return 21
    if name in MILL_SPELLS:
        return 30 + card.mana_value
    if name == names.AWAKEN_THE_HONORED_DEAD:
        return 40
    return 100 + card.mana_value


__all__ = [
    'BRINGER_POWER',
    'has_ardyn',
    'is_demon_card',
    'is_demon',
    'count_terrors',
    'has_ardyn_combo',
    'calculate_combo_damage',
    'is_combo_lethal',
    'choose_land_to_play',
    'select_permanent_from_mill',
    'choose_mill_return',
    'town_greeter_land_score',
    'discard_priority',
    'select_discards',
    'MILL_SPELLS',
    'MILL_CREATURES',
    'should_hold_spider_man',
    'spell_priority',
]
