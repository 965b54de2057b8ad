"""Goldfish Cards - Deck List Parser

Parses plain-text deck lists into expanded card sequences for the engine.

Format:
    # Deck Name
    4 Card Name
    3 Another Card
    // Comment

    Sideboard
    2 Sideboard Card

Blank lines and comment lines are skipped. Everything after the sideboard
marker is ignored, since goldfish games only use the mainboard.
"""
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..engine.objects import Card
from .database import CardDatabase, CardNotFoundError, get_database

logger = logging.getLogger(__name__)


class DeckParseError(ValueError):
    """
    Raised for a deck list line that cannot be parsed or resolved.

    Attributes:
        line_number: 1-based line of the offending entry, if known
    """

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class DeckEntry:
    """
    A single deck list entry.

    Attributes:
        count: Number of copies
        name: Card name
        line_number: Source line, for error messages
    """
    count: int
    name: str
    line_number: Optional[int] = None

    def __post_init__(self):
        if self.count < 1:
            raise ValueError(f"Card count must be at least 1, got {self.count}")
        if not self.name or not self.name.strip():
            raise ValueError("Card name cannot be empty")
        self.name = self.name.strip()

    def __repr__(self) -> str:
        return f"DeckEntry({self.count}x {self.name})"


@dataclass
class Decklist:
    """A parsed deck list: mainboard entries in file order."""
    name: str
    entries: List[DeckEntry] = field(default_factory=list)

    @property
    def card_count(self) -> int:
        return sum(e.count for e in self.entries)

    def get_card_counts(self) -> Dict[str, int]:
        """Total copies per card name, merging repeated entries."""
        counts: Dict[str, int] = {}
        for entry in self.entries:
            counts[entry.name] = counts.get(entry.name, 0) + entry.count
        return counts

    def expand(self, db: CardDatabase) -> List[Card]:
        """
        Expand the entries into one Card per copy, in list order.

        Raises:
            DeckParseError: If a name is not in the catalog
        """
        cards: List[Card] = []
        for entry in self.entries:
            try:
                card = db.get_card(entry.name)
            except CardNotFoundError as e:
                logger.warning("Unknown card %r in deck %s", entry.name, self.name)
                raise DeckParseError(str(e), entry.line_number) from e
            cards.extend([card] * entry.count)
        return cards

    def __repr__(self) -> str:
        return f"Decklist({self.name}: {self.card_count} cards)"


# =============================================================================
# Parser
# =============================================================================

class DecklistParser:
    """
    Parser for "COUNT CARD NAME" deck lists.

    Rules:
        - Lines starting with // or # are comments
        - Empty lines are ignored
        - A line starting with "Sideboard" (or "SB:") ends the mainboard
        - Any other line must be a card entry
    """

    CARD_PATTERN = re.compile(r'^(\d+)x?\s+(.+)$')
    SIDEBOARD_MARKERS = {'sideboard', 'sb:', 'side:', 'side board'}
    COMMENT_PREFIXES = ('//', '#')

    def parse(self, text: str, deck_name: Optional[str] = None) -> Decklist:
        """
        Parse a deck list from text.

        Args:
            text: The deck list
            deck_name: Name to give the deck; defaults to the first comment
                       line, or a generic name

        Returns:
            Parsed Decklist

        Raises:
            DeckParseError: For a line that is not a card entry
        """
        entries: List[DeckEntry] = []
        detected_name = deck_name

        for line_number, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line:
                continue

            if line.startswith(self.COMMENT_PREFIXES):
                if detected_name is None and line.startswith('#'):
                    detected_name = line.lstrip('#').strip() or None
                continue

            if self._is_sideboard_marker(line):
                break

            match = self.CARD_PATTERN.match(line)
            if not match:
                logger.warning("Malformed deck line %d: %r", line_number, line)
                raise DeckParseError(f"expected 'COUNT CARD NAME', got {line!r}", line_number)

            try:
                entries.append(DeckEntry(int(match.group(1)), match.group(2), line_number))
            except ValueError as e:
                logger.warning("Invalid deck entry on line %d: %s", line_number, e)
                raise DeckParseError(str(e), line_number) from e

        if detected_name is None:
            detected_name = f"Unnamed Deck ({sum(e.count for e in entries)} cards)"

        return Decklist(name=detected_name, entries=entries)

    def parse_file(self, path: Union[str, Path]) -> Decklist:
        """
        Parse a deck list file. The deck is named after the file.

        Raises:
            DeckParseError: If the file cannot be read or parsed
        """
        filepath = Path(path)
        try:
            text = filepath.read_text(encoding='utf-8')
        except OSError as e:
            raise DeckParseError(f"cannot read deck file {filepath}: {e}") from e

        name = filepath.stem.replace('_', ' ')
        return self.parse(text, deck_name=name)

    def _is_sideboard_marker(self, line: str) -> bool:
        lowered = line.lower()
        return lowered in self.SIDEBOARD_MARKERS or lowered.startswith(('sideboard', 'sb:'))


# =============================================================================
# Game-Ready Deck
# =============================================================================

@dataclass
class Deck:
    """
    A deck ready for the engine.

    Attributes:
        name: Deck name used in reports
        cards: One Card per copy, in list order
    """
    name: str
    cards: List[Card] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.cards)

    def count_lands(self) -> int:
        return sum(1 for c in self.cards if c.is_land)

    def __repr__(self) -> str:
        return f"Deck({self.name}: {len(self.cards)} cards, {self.count_lands()} lands)"


def load_deck(path: Union[str, Path], db: Optional[CardDatabase] = None) -> Deck:
    """
    Load and expand a deck list file.

    Args:
        path: Deck list file
        db: Catalog to resolve names against (the bundled one if None)

    Returns:
        Deck with one Card per copy
    """
    db = db if db is not None else get_database()
    decklist = DecklistParser().parse_file(path)
    deck = Deck(name=decklist.name, cards=decklist.expand(db))
    logger.info("Loaded deck %s: %d cards", deck.name, len(deck))
    return deck


__all__ = [
    'DeckParseError',
    'DeckEntry',
    'Decklist',
    'DecklistParser',
    'Deck',
    'load_deck',
]
