"""Goldfish Engine - Game Objects

This module implements the object model the engine moves between zones:
- ManaCost: per-color pip counts plus a generic count
- Card variants: Land, Creature, Instant, Sorcery, Enchantment, Saga
- Permanent: a card on the battlefield plus its board state

Cards are immutable values. They are freely copied between zones and
compared by value; only Permanents carry mutable state.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import ClassVar, Dict, List, Optional, Tuple

from .types import CardType, CounterType, LandSubtype, ManaColor


# =============================================================================
# Mana Cost
# =============================================================================

_COST_FIELDS = {
    ManaColor.WHITE: 'white',
    ManaColor.BLUE: 'blue',
    ManaColor.BLACK: 'black',
    ManaColor.RED: 'red',
    ManaColor.GREEN: 'green',
    ManaColor.COLORLESS: 'colorless',
}

_BRACE_PATTERN = re.compile(r'\{([^}]+)\}')


@dataclass(frozen=True)
class ManaCost:
    """
    A mana cost as six colored counters plus a generic counter.

    Colorless pips ({C}) must be paid with colorless mana; generic pips
    can be paid with any mana.

    Attributes:
        white, blue, black, red, green: Colored pip counts
        colorless: Pips that require colorless mana
        generic: Pips payable by any mana
    """
    white: int = 0
    blue: int = 0
    black: int = 0
    red: int = 0
    green: int = 0
    colorless: int = 0
    generic: int = 0

    def __post_init__(self):
        for name in ('white', 'blue', 'black', 'red', 'green', 'colorless', 'generic'):
            if getattr(self, name) < 0:
                raise ValueError(f"Mana cost field '{name}' cannot be negative")

    def amount(self, color: ManaColor) -> int:
        """Number of pips of a specific color (or {C})."""
        return getattr(self, _COST_FIELDS[color])

    def total(self) -> int:
        """Total mana needed: all seven fields summed."""
        return (self.white + self.blue + self.black + self.red + self.green
                + self.colorless + self.generic)

    def colored_units(self) -> List[ManaColor]:
        """Expand the non-generic pips into one entry per pip, in WUBRGC order."""
        units: List[ManaColor] = []
        for color in ManaColor:
            units.extend([color] * self.amount(color))
        return units

    def colors_required(self) -> List[ManaColor]:
        """Distinct colors (not colorless) that appear in this cost."""
        return [c for c in ManaColor if c.is_colored and self.amount(c) > 0]

    @classmethod
    def parse(cls, cost_str: str) -> 'ManaCost':
        """Parse a cost string such as "{1}{U}{B}" or "1UB".

        Args:
            cost_str: The cost string; empty means a zero cost.

        Returns:
            The parsed ManaCost.
        """
        if not cost_str:
            return cls()

        symbols = _BRACE_PATTERN.findall(cost_str)
        if not symbols:
            symbols = re.findall(r'\d+|[A-Za-z]', cost_str)

        counts = {name: 0 for name in _COST_FIELDS.values()}
        generic = 0
        for symbol in symbols:
            symbol = symbol.strip().upper()
            if symbol.isdigit():
                generic += int(symbol)
                continue
            try:
                color = ManaColor.from_symbol(symbol)
            except ValueError:
                raise ValueError(f"Unknown mana symbol: {symbol!r}") from None
            counts[_COST_FIELDS[color]] += 1
        return cls(generic=generic, **counts)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, int]]) -> 'ManaCost':
        """Build a cost from the catalog's JSON object (missing keys are 0)."""
        if not data:
            return cls()
        return cls(
            white=int(data.get('white', 0)),
            blue=int(data.get('blue', 0)),
            black=int(data.get('black', 0)),
            red=int(data.get('red', 0)),
            green=int(data.get('green', 0)),
            colorless=int(data.get('colorless', 0)),
            generic=int(data.get('generic', 0)),
        )

    def to_dict(self) -> Dict[str, int]:
        """Serialize to the catalog's JSON object, omitting zero fields."""
        data = {name: self.amount(color) for color, name in _COST_FIELDS.items()}
        data['generic'] = self.generic
        return {k: v for k, v in data.items() if v}

    def __str__(self) -> str:
        parts = [f"{{{self.generic}}}"] if self.generic else []
        parts.extend(f"{{{c.symbol}}}" for c in self.colored_units())
        return ''.join(parts) or "{0}"


# =============================================================================
# Cards
# =============================================================================

@dataclass(frozen=True)
class Card:
    """
    Base card value shared by every variant.

    Attributes:
        name: Card name (unique in the catalog)
        mana_cost: Cost to cast (zero for lands)
        mana_value: Converted mana value printed on the card
    """
    name: str
    mana_cost: ManaCost = field(default_factory=ManaCost)
    mana_value: int = 0

    card_type: ClassVar[CardType]

    @property
    def is_land(self) -> bool:
        return self.card_type is CardType.LAND

    @property
    def is_creature(self) -> bool:
        return self.card_type is CardType.CREATURE

    @property
    def is_instant_or_sorcery(self) -> bool:
        return self.card_type in (CardType.INSTANT, CardType.SORCERY)

    @property
    def is_permanent(self) -> bool:
        return self.card_type.is_permanent_type()

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class LandCard(Card):
    """
    A land.

    Attributes:
        subtype: Land family deciding the enters-tapped rule
        enters_tapped: Printed enters-tapped flag (used by basic/surveil/utility)
        colors: Colors listed on the card
        has_surveil: Whether the land surveils on entry
        surveil_amount: How many cards it surveils
    """
    subtype: LandSubtype = LandSubtype.BASIC
    enters_tapped: bool = False
    colors: Tuple[ManaColor, ...] = ()
    has_surveil: bool = False
    surveil_amount: int = 0

    card_type: ClassVar[CardType] = CardType.LAND


@dataclass(frozen=True)
class CreatureCard(Card):
    """
    A creature, optionally castable for its impending cost.

    Attributes:
        power: Printed power
        toughness: Printed toughness
        is_legendary: Legendary supertype
        creature_types: Creature subtypes (e.g. "Human", "Demon")
        abilities: Ability tags resolved by the engine
        impending_cost: Alternative cost that makes it enter with TIME counters
        impending_counters: TIME counters placed when cast for impending
    """
    power: int = 0
    toughness: int = 0
    is_legendary: bool = False
    creature_types: Tuple[str, ...] = ()
    abilities: Tuple[str, ...] = ()
    impending_cost: Optional[ManaCost] = None
    impending_counters: Optional[int] = None

    card_type: ClassVar[CardType] = CardType.CREATURE

    @property
    def has_impending(self) -> bool:
        return self.impending_cost is not None

    def has_creature_type(self, creature_type: str) -> bool:
        """Case-insensitive creature type check."""
        wanted = creature_type.lower()
        return any(t.lower() == wanted for t in self.creature_types)


@dataclass(frozen=True)
class SpellCard(Card):
    """Base for non-creature spells that carry ability tags."""
    abilities: Tuple[str, ...] = ()

    card_type: ClassVar[CardType] = CardType.SORCERY


@dataclass(frozen=True)
class InstantCard(SpellCard):
    card_type: ClassVar[CardType] = CardType.INSTANT


@dataclass(frozen=True)
class SorceryCard(SpellCard):
    card_type: ClassVar[CardType] = CardType.SORCERY


@dataclass(frozen=True)
class EnchantmentCard(SpellCard):
    card_type: ClassVar[CardType] = CardType.ENCHANTMENT


@dataclass(frozen=True)
class SagaCard(Card):
    """
    A Saga. Its chapter count is the length of `chapters`.

    Attributes:
        chapters: One tag per chapter, in order
    """
    chapters: Tuple[str, ...] = ()

    card_type: ClassVar[CardType] = CardType.SAGA


CARD_CLASSES = {
    CardType.LAND: LandCard,
    CardType.CREATURE: CreatureCard,
    CardType.INSTANT: InstantCard,
    CardType.SORCERY: SorceryCard,
    CardType.ENCHANTMENT: EnchantmentCard,
    CardType.SAGA: SagaCard,
}


def card_abilities(card: Card) -> Tuple[str, ...]:
    """Ability tags of any card variant (empty for lands and sagas)."""
    return getattr(card, 'abilities', ())


# =============================================================================
# Permanent
# =============================================================================

@dataclass
class Permanent:
    """
    A card on the battlefield plus its battlefield-only state.

    Attributes:
        card: The card this permanent represents
        turn_entered: Turn number it entered (drives summoning sickness)
        tapped: Tap status
        counters: Counter counts keyed by CounterType
        chosen_type: Creature type chosen for Cavern of Souls
        chosen_color: Color chosen for Multiversal Passage
        is_copy_of: Name of the card this permanent is copying, if any
    """
    card: Card
    turn_entered: int = 0
    tapped: bool = False
    counters: Dict[CounterType, int] = field(default_factory=dict)
    chosen_type: Optional[str] = None
    chosen_color: Optional[ManaColor] = None
    is_copy_of: Optional[str] = None

    # --- Identity ---

    @property
    def name(self) -> str:
        return self.card.name

    @property
    def is_land(self) -> bool:
        return self.card.is_land

    @property
    def is_creature(self) -> bool:
        return self.card.is_creature

    @property
    def is_saga(self) -> bool:
        return self.card.card_type is CardType.SAGA

    @property
    def power(self) -> int:
        return self.card.power if isinstance(self.card, CreatureCard) else 0

    def is_named(self, name: str) -> bool:
        """True if this permanent is the named card or a copy of it."""
        return self.card.name == name or self.is_copy_of == name

    # --- Tap/Untap ---

    def tap(self) -> bool:
        """Tap this permanent.

        Returns:
            True if the permanent was tapped, False if already tapped.
        """
        if self.tapped:
            return False
        self.tapped = True
        return True

    def untap(self) -> bool:
        """Untap this permanent.

        Returns:
            True if the permanent was untapped, False if already untapped.
        """
        if not self.tapped:
            return False
        self.tapped = False
        return True

    # --- Counters ---

    def add_counter(self, counter_type: CounterType, amount: int = 1):
        """Add counters of the specified type."""
        if amount <= 0:
            return
        self.counters[counter_type] = self.counters.get(counter_type, 0) + amount

    def remove_counter(self, counter_type: CounterType, amount: int = 1):
        """Remove counters of the specified type, never going below zero."""
        if amount <= 0:
            return
        new_amount = max(0, self.counters.get(counter_type, 0) - amount)
        if new_amount == 0:
            self.counters.pop(counter_type, None)
        else:
            self.counters[counter_type] = new_amount

    def get_counter(self, counter_type: CounterType) -> int:
        """Get the number of counters of a specific type."""
        return self.counters.get(counter_type, 0)

    @property
    def is_impending(self) -> bool:
        """A creature still counting down TIME counters is not yet a creature."""
        return self.is_creature and self.get_counter(CounterType.TIME) > 0

    def describe(self) -> str:
        """Short label used by the verbose game trace."""
        label = self.name
        if self.is_copy_of:
            label += f" (copy of {self.is_copy_of})"
        time_counters = self.get_counter(CounterType.TIME)
        if time_counters:
            label += f" ({time_counters} time counters)"
        return label


__all__ = [
    'ManaCost',
    'Card',
    'LandCard',
    'CreatureCard',
    'SpellCard',
    'InstantCard',
    'SorceryCard',
    'EnchantmentCard',
    'SagaCard',
    'CARD_CLASSES',
    'card_abilities',
    'Permanent',
]
