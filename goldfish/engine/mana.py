"""Goldfish Engine - Mana System

This module covers everything between a land on the battlefield and a paid
cost:
- ManaPool: six-color accumulator with can_pay/pay/clear
- producible_colors: what an untapped land can produce right now
- find_payment: exact backtracking assignment of cost pips to lands
- can_afford_cost / tap_lands_for_cost: the feasibility oracle and its
  executor, both driven by find_payment so they can never disagree

Land colors depend on the board (Verge lands, Cavern of Souls, Starting
Town), so they are recomputed on every call.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, FrozenSet, List, Optional, Tuple

from . import names
from .objects import CreatureCard, LandCard, ManaCost, Permanent
from .types import GENERIC_PAYMENT_ORDER, ManaColor

if TYPE_CHECKING:
    from .state import GameState


ALL_MANA = frozenset(ManaColor)
NO_MANA: FrozenSet[ManaColor] = frozenset()

# A payment plan: (battlefield index, color that land is tapped for)
Payment = List[Tuple[int, ManaColor]]


# =============================================================================
# Mana Pool
# =============================================================================

@dataclass
class ManaPool:
    """
    Floating mana, one counter per color plus colorless.

    Invariant: counters never go negative; pay() only mutates after
    can_pay() has succeeded.
    """
    amounts: Dict[ManaColor, int] = field(
        default_factory=lambda: {color: 0 for color in ManaColor}
    )

    def add(self, color: ManaColor, amount: int = 1):
        """Add mana of a specific color."""
        if amount < 0:
            raise ValueError("Cannot add a negative amount of mana")
        self.amounts[color] += amount

    def get_amount(self, color: ManaColor) -> int:
        return self.amounts[color]

    def total(self) -> int:
        return sum(self.amounts.values())

    def is_empty(self) -> bool:
        return self.total() == 0

    def can_pay(self, cost: ManaCost) -> bool:
        """Check if this pool can pay a cost.

        Every colored (and {C}) pip needs its own color; generic pips take
        whatever is left over.
        """
        for color in ManaColor:
            if cost.amount(color) > self.amounts[color]:
                return False
        remaining = sum(self.amounts[c] - cost.amount(c) for c in ManaColor)
        return remaining >= cost.generic

    def pay(self, cost: ManaCost) -> bool:
        """Pay a cost from the pool.

        Colored pips are paid first, then generic from colorless, then
        W, U, B, R, G.

        Returns:
            True if the cost was paid, False (pool untouched) otherwise.
        """
        if not self.can_pay(cost):
            return False

        for color in ManaColor:
            self.amounts[color] -= cost.amount(color)

        generic = cost.generic
        for color in GENERIC_PAYMENT_ORDER:
            if generic == 0:
                break
            spent = min(self.amounts[color], generic)
            self.amounts[color] -= spent
            generic -= spent
        return True

    def clear(self):
        """Empty the pool."""
        for color in ManaColor:
            self.amounts[color] = 0

    def __str__(self) -> str:
        parts = [f"{c.symbol}:{n}" for c, n in self.amounts.items() if n]
        return "{" + ", ".join(parts) + "}"


# =============================================================================
# Land Color Resolution
# =============================================================================

def _has_land_named(state: GameState, land_names: FrozenSet[str]) -> bool:
    return any(p.is_land and p.name in land_names for p in state.battlefield)


def producible_colors(permanent: Permanent, state: GameState,
                      for_creature: Optional[CreatureCard] = None) -> FrozenSet[ManaColor]:
    """Colors an untapped land can produce on the current board.

    Args:
        permanent: The land permanent
        state: The game (battlefield and life total are consulted)
        for_creature: The creature being paid for, if any (Cavern of Souls)

    Returns:
        The producible colors; empty for tapped lands and non-lands.
    """
    if permanent.tapped or not isinstance(permanent.card, LandCard):
        return NO_MANA

    land = permanent.card
    name = land.name

    if name == names.CAVERN_OF_SOULS:
        chosen = permanent.chosen_type
        if for_creature is not None and chosen and for_creature.has_creature_type(chosen):
            return ALL_MANA
        return frozenset({ManaColor.COLORLESS})

    if name == names.WASTEWOOD_VERGE:
        if _has_land_named(state, names.WASTEWOOD_ENABLERS):
            return frozenset({ManaColor.GREEN, ManaColor.BLACK})
        return frozenset({ManaColor.GREEN})

    if name == names.GLOOMLAKE_VERGE:
        if _has_land_named(state, names.GLOOMLAKE_ENABLERS):
            return frozenset({ManaColor.BLUE, ManaColor.BLACK})
        return frozenset({ManaColor.BLUE})

    if name == names.MULTIVERSAL_PASSAGE:
        if permanent.chosen_color is None:
            return NO_MANA
        return frozenset({permanent.chosen_color})

    if name == names.STARTING_TOWN:
        # Colored mana costs 1 life, so it needs life to spare
        if state.life > 1:
            return ALL_MANA
        return frozenset({ManaColor.COLORLESS})

    return frozenset(land.colors)


def available_colors(state: GameState) -> FrozenSet[ManaColor]:
    """Union of what every land on the battlefield can produce, tapped or not."""
    colors = set()
    for permanent in state.battlefield:
        if permanent.is_land:
            colors |= producible_colors(permanent, state)
    return frozenset(colors)


def mana_sources(state: GameState,
                 for_creature: Optional[CreatureCard] = None
                 ) -> List[Tuple[int, FrozenSet[ManaColor]]]:
    """Untapped lands that produce something, least flexible first.

    Returns:
        (battlefield index, producible colors) pairs sorted by color count;
        ties keep battlefield order.
    """
    sources = []
    for index, permanent in enumerate(state.battlefield):
        if permanent.tapped or not permanent.is_land:
            continue
        colors = producible_colors(permanent, state, for_creature)
        if colors:
            sources.append((index, colors))
    sources.sort(key=lambda source: len(source[1]))
    return sources


# =============================================================================
# Feasibility and Payment
# =============================================================================

def _generic_color(colors: FrozenSet[ManaColor]) -> ManaColor:
    """Color a land is tapped for when it pays a generic pip."""
    if ManaColor.COLORLESS in colors:
        return ManaColor.COLORLESS
    for color in ManaColor:
        if color in colors:
            return color
    raise ValueError("Land produces no mana")


def find_payment(cost: ManaCost, state: GameState,
                 for_creature: Optional[CreatureCard] = None) -> Optional[Payment]:
    """Assign every pip of cost to a distinct untapped land.

    Colored pips are assigned by backtracking over the candidate lands,
    least flexible lands first so multi-color lands stay free. Generic pips
    then take the least flexible lands that are left.

    Each colored pip from Starting Town costs 1 life, so at most life - 1 of
    them are assigned; past that a Starting Town only pays colorless.

    Returns:
        The payment plan, or None if the cost cannot be paid.
    """
    sources = mana_sources(state, for_creature)
    if len(sources) < cost.total():
        return None

    units = cost.colored_units()
    used = [False] * len(sources)
    towns = [state.battlefield[index].name == names.STARTING_TOWN for index, _ in sources]
    life_budget = max(0, state.life - 1)
    assignment: List[Tuple[int, ManaColor]] = []

    def backtrack(unit_idx: int) -> bool:
        """Assign units[unit_idx:] to unused sources."""
        nonlocal life_budget
        if unit_idx == len(units):
            return True

        color = units[unit_idx]
        for source_idx, (_, colors) in enumerate(sources):
            if used[source_idx] or color not in colors:
                continue
            pays_life = towns[source_idx] and color.is_colored
            if pays_life and life_budget == 0:
                continue
            used[source_idx] = True
            life_budget -= int(pays_life)
            assignment.append((source_idx, color))
            if backtrack(unit_idx + 1):
                return True
            assignment.pop()
            life_budget += int(pays_life)
            used[source_idx] = False
        return False

    if not backtrack(0):
        return None

    plan = [(sources[i][0], color) for i, color in assignment]

    generic = cost.generic
    for source_idx, (index, colors) in enumerate(sources):
        if generic == 0:
            break
        if used[source_idx]:
            continue
        plan.append((index, _generic_color(colors)))
        generic -= 1

    if generic > 0:
        return None
    return plan


def can_afford_cost(cost: ManaCost, state: GameState,
                    for_creature: Optional[CreatureCard] = None) -> bool:
    """Whether the untapped lands can pay cost right now (nothing is tapped)."""
    return find_payment(cost, state, for_creature) is not None


def tap_lands_for_cost(cost: ManaCost, state: GameState,
                       for_creature: Optional[CreatureCard] = None) -> bool:
    """Tap lands for cost, add their mana to the pool, then pay from the pool.

    Colored mana taken from Starting Town costs 1 life each.

    Returns:
        True if the cost was paid. On False nothing was tapped.
    """
    plan = find_payment(cost, state, for_creature)
    if plan is None:
        return False

    for index, color in plan:
        permanent = state.battlefield[index]
        permanent.tap()
        state.mana_pool.add(color)
        if permanent.name == names.STARTING_TOWN and color.is_colored:
            state.life -= 1

    return state.mana_pool.pay(cost)


def casting_cost(card, state: GameState) -> Tuple[ManaCost, bool]:
    """Cost a card will be cast for, and whether that is its impending cost.

    Impending is used whenever the impending cost is affordable.
    """
    if isinstance(card, CreatureCard) and card.has_impending:
        if can_afford_cost(card.impending_cost, state, card):
            return card.impending_cost, True
    return card.mana_cost, False


def can_cast(card, state: GameState) -> bool:
    """Whether a non-land card can be paid for right now."""
    if card.is_land:
        return False
    for_creature = card if isinstance(card, CreatureCard) else None
    cost, _ = casting_cost(card, state)
    return can_afford_cost(cost, state, for_creature)


__all__ = [
    'ManaPool',
    'Payment',
    'producible_colors',
    'available_colors',
    'mana_sources',
    'find_payment',
    'can_afford_cost',
    'tap_lands_for_cost',
    'casting_cost',
    'can_cast',
]
