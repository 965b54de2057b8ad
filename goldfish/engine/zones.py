"""Goldfish Engine - Zones

Card containers for a single player's game:
- Library: ordered, the front of the list is the top of the library
- Hand: index-addressable
- Graveyard: ordered, with creature queries for reanimation
- Exile: append-only
- Battlefield: index-addressable sequence of Permanents

Every removal-by-index returns None when the index is out of range.
Batch removals from the battlefield go through remove_indices, which
removes in descending order so earlier indices stay valid.
"""
from typing import Callable, Iterable, Iterator, List, Optional

from .objects import Card, CreatureCard, Permanent
from .rng import GameRng


# =============================================================================
# Card Zones
# =============================================================================

class CardZone:
    """Base class for zones that hold Card values."""

    zone_name = "zone"

    def __init__(self, cards: Optional[Iterable[Card]] = None):
        self.cards: List[Card] = list(cards) if cards else []

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __contains__(self, name: object) -> bool:
        return any(card.name == name for card in self.cards)

    def __getitem__(self, index: int) -> Card:
        return self.cards[index]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self.cards)} cards)"

    def is_empty(self) -> bool:
        return not self.cards

    def clear(self):
        self.cards.clear()

    def add(self, card: Card):
        self.cards.append(card)

    def extend(self, cards: Iterable[Card]):
        self.cards.extend(cards)

    def remove_at(self, index: int) -> Optional[Card]:
        """Remove and return the card at index, or None if out of range."""
        if 0 <= index < len(self.cards):
            return self.cards.pop(index)
        return None

    def remove_card(self, card: Card) -> bool:
        """Remove the first card equal to `card`. Returns False if absent."""
        try:
            self.cards.remove(card)
        except ValueError:
            return False
        return True

    def find_index(self, name: str) -> Optional[int]:
        """Index of the first card with this name, or None."""
        for i, card in enumerate(self.cards):
            if card.name == name:
                return i
        return None

    def find(self, name: str) -> Optional[Card]:
        index = self.find_index(name)
        return None if index is None else self.cards[index]

    def find_first(self, predicate: Callable[[Card], bool]) -> Optional[int]:
        """Index of the first card matching predicate, or None."""
        for i, card in enumerate(self.cards):
            if predicate(card):
                return i
        return None

    def take(self, name: str) -> Optional[Card]:
        """Remove and return the first card with this name, or None."""
        index = self.find_index(name)
        return None if index is None else self.cards.pop(index)

    def count(self, name: str) -> int:
        return sum(1 for card in self.cards if card.name == name)

    def count_lands(self) -> int:
        return sum(1 for card in self.cards if card.is_land)

    def names(self) -> List[str]:
        return [card.name for card in self.cards]


class Library(CardZone):
    """
    The player's library. Index 0 is the top card.
    """

    zone_name = "library"

    def draw(self) -> Optional[Card]:
        """Remove and return the top card, or None if the library is empty."""
        if not self.cards:
            return None
        return self.cards.pop(0)

    def draw_n(self, n: int) -> List[Card]:
        """Draw up to n cards from the top."""
        drawn = self.cards[:max(0, n)]
        del self.cards[:len(drawn)]
        return drawn

    def mill(self, n: int) -> List[Card]:
        """Take up to n cards from the top (fewer if the library runs out).

        The caller decides where the milled cards go.
        """
        return self.draw_n(n)

    def peek(self) -> Optional[Card]:
        return self.cards[0] if self.cards else None

    def put_on_top(self, card: Card):
        self.cards.insert(0, card)

    def put_on_bottom(self, card: Card):
        self.cards.append(card)

    def shuffle(self, rng: GameRng):
        rng.shuffle(self.cards)

    def replace_with(self, cards: Iterable[Card]):
        """Replace the library contents with a new ordering."""
        self.cards = list(cards)


class Hand(CardZone):
    zone_name = "hand"


class Graveyard(CardZone):
    """The graveyard, in the order cards were put there."""

    zone_name = "graveyard"

    def creatures(self) -> List[Card]:
        return [card for card in self.cards if card.is_creature]

    def count_creatures(self) -> int:
        return sum(1 for card in self.cards if card.is_creature)

    def total_creature_power(self) -> int:
        return sum(card.power for card in self.cards if isinstance(card, CreatureCard))

    def find_first_creature(self) -> Optional[int]:
        return self.find_first(lambda card: card.is_creature)

    def remove_creatures(self) -> List[Card]:
        """Remove every creature card, returning them in graveyard order."""
        creatures = [card for card in self.cards if card.is_creature]
        self.cards = [card for card in self.cards if not card.is_creature]
        return creatures


class Exile(CardZone):
    zone_name = "exile"


# =============================================================================
# Battlefield
# =============================================================================

class Battlefield:
    """Permanents in the order they entered."""

    def __init__(self):
        self.permanents: List[Permanent] = []

    def __len__(self) -> int:
        return len(self.permanents)

    def __iter__(self) -> Iterator[Permanent]:
        return iter(self.permanents)

    def __getitem__(self, index: int) -> Permanent:
        return self.permanents[index]

    def __contains__(self, name: object) -> bool:
        return any(p.name == name for p in self.permanents)

    def __repr__(self) -> str:
        return f"Battlefield({len(self.permanents)} permanents)"

    def clear(self):
        self.permanents.clear()

    def add(self, permanent: Permanent) -> int:
        """Add a permanent and return its index."""
        self.permanents.append(permanent)
        return len(self.permanents) - 1

    def remove_at(self, index: int) -> Optional[Permanent]:
        """Remove and return the permanent at index, or None if out of range."""
        if 0 <= index < len(self.permanents):
            return self.permanents.pop(index)
        return None

    def remove_indices(self, indices: Iterable[int]) -> List[Permanent]:
        """Remove a batch of permanents, highest index first.

        Returns:
            The removed permanents in the order they were removed.
        """
        removed = []
        for index in sorted(set(indices), reverse=True):
            permanent = self.remove_at(index)
            if permanent is not None:
                removed.append(permanent)
        return removed

    # --- Queries ---

    def lands(self) -> List[Permanent]:
        return [p for p in self.permanents if p.is_land]

    def untapped_lands(self) -> List[Permanent]:
        return [p for p in self.permanents if p.is_land and not p.tapped]

    def creatures(self) -> List[Permanent]:
        return [p for p in self.permanents if p.is_creature]

    def land_names(self) -> List[str]:
        return [p.name for p in self.permanents if p.is_land]

    def count_lands(self) -> int:
        return sum(1 for p in self.permanents if p.is_land)

    def count_named(self, name: str) -> int:
        """Permanents that are the named card or a copy of it."""
        return sum(1 for p in self.permanents if p.is_named(name))

    def find(self, name: str) -> Optional[Permanent]:
        for permanent in self.permanents:
            if permanent.name == name:
                return permanent
        return None

    def untap_all(self):
        for permanent in self.permanents:
            permanent.untap()


__all__ = [
    'CardZone',
    'Library',
    'Hand',
    'Graveyard',
    'Exile',
    'Battlefield',
]
