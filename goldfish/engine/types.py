"""Goldfish Engine - Core Types and Enumerations

This module defines the fundamental enumerations shared by the simulation
engine: mana colors, card variants, land subtypes, counter kinds and the
turn phases visited by the turn controller.
"""
from enum import Enum, auto


# =============================================================================
# Color and Mana Types
# =============================================================================

class ManaColor(Enum):
    """
    The five colors of Magic plus colorless, keyed by their mana symbol.

    Declaration order (WUBRG, then C) is the canonical iteration order used
    by cost requirements and by pool payment.
    """
    WHITE = 'W'
    BLUE = 'U'
    BLACK = 'B'
    RED = 'R'
    GREEN = 'G'
    COLORLESS = 'C'

    @property
    def symbol(self) -> str:
        """Returns the single-character mana symbol."""
        return self.value

    @property
    def is_colored(self) -> bool:
        """Returns True for the five colors, False for colorless."""
        return self is not ManaColor.COLORLESS

    @classmethod
    def from_symbol(cls, symbol: str) -> "ManaColor":
        """Parse a mana symbol such as 'U' (case-insensitive)."""
        return cls(symbol.strip().upper())


# Order in which generic mana is taken out of a pool
GENERIC_PAYMENT_ORDER = (
    ManaColor.COLORLESS,
    ManaColor.WHITE,
    ManaColor.BLUE,
    ManaColor.BLACK,
    ManaColor.RED,
    ManaColor.GREEN,
)


# =============================================================================
# Card Types
# =============================================================================

class CardType(Enum):
    """
    Card variants known to the catalog.

    Each card has exactly one variant; the value is the JSON tag used in
    the card catalog.
    """
    LAND = 'land'
    CREATURE = 'creature'
    INSTANT = 'instant'
    SORCERY = 'sorcery'
    ENCHANTMENT = 'enchantment'
    SAGA = 'saga'

    def is_permanent_type(self) -> bool:
        """Returns True if cards of this variant stay on the battlefield."""
        return self in {
            CardType.LAND,
            CardType.CREATURE,
            CardType.ENCHANTMENT,
            CardType.SAGA,
        }


class LandSubtype(Enum):
    """Land families that decide whether a land enters tapped."""
    BASIC = 'basic'
    SHOCK = 'shock'
    SURVEIL = 'surveil'
    UTILITY = 'utility'
    FASTLAND = 'fastland'
    TOWN = 'town'


# =============================================================================
# Counters
# =============================================================================

class CounterType(Enum):
    """
    Counter kinds placed on permanents.

    TIME counters count down on impending creatures; LORE counters count up
    on Sagas. They are kept apart so the end-step countdown can never touch
    a Saga's chapter count.
    """
    TIME = 'time'
    LORE = 'lore'


# =============================================================================
# Turn Structure
# =============================================================================

class Phase(Enum):
    """Phases visited by the turn controller, in order."""
    UNTAP = auto()
    DRAW = auto()
    MAIN1 = auto()
    COMBAT = auto()
    MAIN2 = auto()
    END = auto()


__all__ = [
    'ManaColor',
    'GENERIC_PAYMENT_ORDER',
    'CardType',
    'LandSubtype',
    'CounterType',
    'Phase',
]
