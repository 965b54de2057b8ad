"""Goldfish Cards - Card Catalog

Loads the JSON card catalog into engine Card values:
- Each record is tagged by "card_type" and built into the matching Card class
- Lookups are by exact name; unknown names raise CardNotFoundError
- A process-wide catalog loaded from the bundled data/cards.json is
  available through get_database()

The catalog is read-only once loaded, so it can be shared by every game
in a process. Worker processes load their own copy.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from ..engine.objects import (
    CARD_CLASSES,
    Card,
    CreatureCard,
    LandCard,
    ManaCost,
    SagaCard,
    SpellCard,
)
from ..engine.errors import InvalidAbilityError
from ..engine.resolution import check_ability
from ..engine.types import CardType, LandSubtype, ManaColor

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
DEFAULT_CARDS_PATH = DATA_DIR / "cards.json"


# =============================================================================
# Errors
# =============================================================================

class CardDatabaseError(Exception):
    """Base class for card catalog errors."""
    pass


class CardNotFoundError(CardDatabaseError, KeyError):
    """Raised when a card name is not in the catalog."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Card not found: {name}")

    def __str__(self) -> str:
        return self.args[0]


class CardDataError(CardDatabaseError):
    """Raised for malformed JSON or an invalid card record."""
    pass


# =============================================================================
# Record Parsing
# =============================================================================

def _colors(symbols: Iterable[str]) -> tuple:
    return tuple(ManaColor.from_symbol(s) for s in symbols)


def card_from_dict(data: Dict[str, Any]) -> Card:
    """
    Build a Card from one catalog record.

    Args:
        data: The JSON object for the card

    Returns:
        The Card variant named by data["card_type"]

    Raises:
        CardDataError: If the record is missing fields or has bad values
    """
    if not isinstance(data, dict):
        raise CardDataError(f"Card record must be an object, got {type(data).__name__}")

    name = data.get('name')
    if not name:
        raise CardDataError("Card record has no name")

    try:
        card_type = CardType(data['card_type'])
        common = {
            'name': name,
            'mana_cost': ManaCost.from_dict(data.get('mana_cost')),
            'mana_value': int(data.get('mana_value', 0)),
        }

        if card_type is CardType.LAND:
            return LandCard(
                subtype=LandSubtype(data.get('subtype', 'basic')),
                enters_tapped=bool(data.get('enters_tapped', False)),
                colors=_colors(data.get('colors', ())),
                has_surveil=bool(data.get('has_surveil', False)),
                surveil_amount=int(data.get('surveil_amount', 0)),
                **common,
            )

        if card_type is CardType.CREATURE:
            impending = data.get('impending_cost')
            counters = data.get('impending_counters')
            return CreatureCard(
                power=int(data.get('power', 0)),
                toughness=int(data.get('toughness', 0)),
                is_legendary=bool(data.get('is_legendary', False)),
                creature_types=tuple(data.get('creature_types', ())),
                abilities=tuple(data.get('abilities', ())),
                impending_cost=ManaCost.from_dict(impending) if impending else None,
                impending_counters=int(counters) if counters is not None else None,
                **common,
            )

        if card_type is CardType.SAGA:
            return SagaCard(chapters=tuple(data.get('chapters', ())), **common)

        return CARD_CLASSES[card_type](abilities=tuple(data.get('abilities', ())), **common)

    except KeyError as e:
        raise CardDataError(f"{name}: missing field {e}") from e
    except (TypeError, ValueError) as e:
        raise CardDataError(f"{name}: {e}") from e


def card_to_dict(card: Card) -> Dict[str, Any]:
    """Serialize a Card back to its catalog record."""
    data: Dict[str, Any] = {
        'name': card.name,
        'card_type': card.card_type.value,
        'mana_cost': card.mana_cost.to_dict(),
        'mana_value': card.mana_value,
    }
    if isinstance(card, LandCard):
        data.update(
            subtype=card.subtype.value,
            enters_tapped=card.enters_tapped,
            colors=[c.symbol for c in card.colors],
            has_surveil=card.has_surveil,
            surveil_amount=card.surveil_amount,
        )
    elif isinstance(card, CreatureCard):
        data.update(
            power=card.power,
            toughness=card.toughness,
            is_legendary=card.is_legendary,
            creature_types=list(card.creature_types),
            abilities=list(card.abilities),
        )
        if card.impending_cost is not None:
            data['impending_cost'] = card.impending_cost.to_dict()
            data['impending_counters'] = card.impending_counters
    elif isinstance(card, SagaCard):
        data['chapters'] = list(card.chapters)
    elif isinstance(card, SpellCard):
        data['abilities'] = list(card.abilities)
    return data


# =============================================================================
# Card Database
# =============================================================================

class CardDatabase:
    """
    Read-only catalog of Card values keyed by name.

    Attributes:
        cards: Mapping of card name to Card
        source: Where the catalog was loaded from, if a file
    """

    def __init__(self, cards: Optional[Dict[str, Card]] = None,
                 source: Optional[Path] = None):
        self.cards: Dict[str, Card] = dict(cards or {})
        self.source = source

    # --- Construction ---

    @classmethod
    def from_cards(cls, cards: Iterable[Card]) -> 'CardDatabase':
        """Build a catalog from Card values. Later duplicates win."""
        return cls({card.name: card for card in cards})

    @classmethod
    def from_json(cls, text: str, source: Optional[Path] = None) -> 'CardDatabase':
        """
        Parse a catalog from JSON text.

        The text is either a list of card records or an object keyed by card
        name.

        Raises:
            CardDataError: If the JSON or a record is malformed
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CardDataError(f"Malformed card JSON: {e}") from e

        if isinstance(data, dict):
            records = []
            for name, record in data.items():
                if isinstance(record, dict):
                    record = {'name': name, **record}
                records.append(record)
        elif isinstance(data, list):
            records = data
        else:
            raise CardDataError("Card JSON must be a list or an object")

        return cls.from_cards(card_from_dict(record) for record in records)._with_source(source)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'CardDatabase':
        """
        Load a catalog from a JSON file.

        Raises:
            CardDatabaseError: If the file cannot be read
            CardDataError: If its contents are malformed
        """
        path = Path(path)
        try:
            text = path.read_text(encoding='utf-8')
        except OSError as e:
            raise CardDatabaseError(f"Cannot read card file {path}: {e}") from e

        db = cls.from_json(text, source=path)
        logger.info("Loaded %d cards from %s", len(db), path)
        return db

    def _with_source(self, source: Optional[Path]) -> 'CardDatabase':
        self.source = source
        return self

    # --- Lookup ---

    def get_card(self, name: str) -> Card:
        """
        Get a card by exact name.

        Raises:
            CardNotFoundError: If the name is not in the catalog
        """
        try:
            return self.cards[name]
        except KeyError:
            raise CardNotFoundError(name) from None

    def has_card(self, name: str) -> bool:
        return name in self.cards

    def card_names(self) -> List[str]:
        return sorted(self.cards)

    def by_type(self, card_type: CardType) -> List[Card]:
        return [c for c in self.cards.values() if c.card_type is card_type]

    def __len__(self) -> int:
        return len(self.cards)

    def __contains__(self, name: object) -> bool:
        return name in self.cards

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards.values())

    # --- Validation ---

    def validate(self) -> List[str]:
        """
        Check every card for data the engine cannot use.

        Returns:
            One message per problem; empty if the catalog is clean
        """
        problems: List[str] = []
        for card in self.cards.values():
            if card.mana_value < 0:
                problems.append(f"{card.name}: negative mana value")
            if not card.is_land and card.mana_value != card.mana_cost.total():
                problems.append(
                    f"{card.name}: mana value {card.mana_value} does not match "
                    f"cost {card.mana_cost}")
            if isinstance(card, LandCard) and not card.colors:
                problems.append(f"{card.name}: land produces no colors")
            if isinstance(card, CreatureCard):
                if card.impending_cost is not None and not card.impending_counters:
                    problems.append(f"{card.name}: impending cost without counters")
            if isinstance(card, SagaCard) and not card.chapters:
                problems.append(f"{card.name}: saga has no chapters")

            tags = getattr(card, 'abilities', ()) or getattr(card, 'chapters', ())
            for tag in tags:
                try:
                    check_ability(tag)
                except InvalidAbilityError as e:
                    problems.append(f"{card.name}: {e}")
        return problems

    def to_json(self, indent: int = 2) -> str:
        records = [card_to_dict(card) for card in self.cards.values()]
        return json.dumps(records, indent=indent, ensure_ascii=False)

    def __repr__(self) -> str:
        return f"CardDatabase({len(self.cards)} cards)"


# =============================================================================
# Global Database Instance
# =============================================================================

_default_database: Optional[CardDatabase] = None


def get_database(path: Optional[Union[str, Path]] = None) -> CardDatabase:
    """
    Get a catalog.

    Args:
        path: A catalog file to load. When None, the bundled catalog is
              loaded once and the same instance is returned afterwards.
    """
    global _default_database
    if path is not None:
        return CardDatabase.from_file(path)
    if _default_database is None:
        _default_database = CardDatabase.from_file(DEFAULT_CARDS_PATH)
    return _default_database


__all__ = [
    'DATA_DIR',
    'DEFAULT_CARDS_PATH',
    'CardDatabaseError',
    'CardNotFoundError',
    'CardDataError',
    'card_from_dict',
    'card_to_dict',
    'CardDatabase',
    'get_database',
]
