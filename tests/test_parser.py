"""
Test suite for the deck list parser.

Tests cover:
- Entry lines, comments and the sideboard marker
- Line-numbered errors for malformed lines and unknown cards
- Loading the bundled reference list
"""
import pytest

from goldfish.cards.parser import (
    Deck,
    DeckEntry,
    DeckParseError,
    DecklistParser,
    load_deck,
)

SAMPLE = """\
# Test Reanimator
// Creatures
4 Superior Spider-Man
3x Bringer of the Last Gift

2 Island
2 Island

Sideboard
3 Terror of the Peaks
"""


@pytest.fixture
def parser() -> DecklistParser:
    return DecklistParser()


# =============================================================================
# PARSING TESTS
# =============================================================================

class TestParse:
    """Tests for DecklistParser.parse."""

    def test_entries_and_name(self, parser):
        decklist = parser.parse(SAMPLE)
        assert decklist.name == "Test Reanimator"
        assert [(e.count, e.name) for e in decklist.entries] == [
            (4, "Superior Spider-Man"),
            (3, "Bringer of the Last Gift"),
            (2, "Island"),
            (2, "Island"),
        ]

    def test_sideboard_ignored(self, parser):
        assert "Terror of the Peaks" not in parser.parse(SAMPLE).get_card_counts()

    def test_repeated_entries_merge(self, parser):
        decklist = parser.parse(SAMPLE)
        assert decklist.get_card_counts()["Island"] == 4
        assert decklist.card_count == 11

    def test_explicit_name_wins(self, parser):
        assert parser.parse(SAMPLE, deck_name="Mine").name == "Mine"

    def test_unnamed_deck(self, parser):
        assert parser.parse("4 Island").name == "Unnamed Deck (4 cards)"

    def test_malformed_line_has_line_number(self, parser):
        with pytest.raises(DeckParseError) as exc_info:
            parser.parse("4 Island\nFour Swamps\n")
        assert exc_info.value.line_number == 2
        assert str(exc_info.value).startswith("line 2:")

    def test_zero_count_rejected(self, parser):
        with pytest.raises(DeckParseError) as exc_info:
            parser.parse("0 Island")
        assert exc_info.value.line_number == 1

    def test_parse_error_is_value_error(self, parser):
        with pytest.raises(ValueError):
            parser.parse("Island")

    def test_entry_validation(self):
        with pytest.raises(ValueError):
            DeckEntry(1, "   ")
        assert DeckEntry(2, " Island ").name == "Island"


# =============================================================================
# EXPANSION AND LOADING TESTS
# =============================================================================

class TestLoad:
    """Tests for expanding and loading deck lists."""

    def test_expand(self, parser, catalog):
        cards = parser.parse(SAMPLE).expand(catalog)
        assert len(cards) == 11
        assert [c.name for c in cards[:4]] == ["Superior Spider-Man"] * 4

    def test_unknown_card(self, parser, catalog):
        decklist = parser.parse("4 Island\n1 Black Lotus\n")
        with pytest.raises(DeckParseError) as exc_info:
            decklist.expand(catalog)
        assert exc_info.value.line_number == 2
        assert "Black Lotus" in str(exc_info.value)

    def test_parse_file_names_deck(self, parser, tmp_path):
        path = tmp_path / "my_deck.txt"
        path.write_text(SAMPLE, encoding="utf-8")
        assert parser.parse_file(path).name == "my deck"

    def test_missing_file(self, parser, tmp_path):
        with pytest.raises(DeckParseError):
            parser.parse_file(tmp_path / "missing.txt")

    def test_reference_deck(self, reference_deck):
        assert isinstance(reference_deck, Deck)
        assert len(reference_deck) == 60
        assert reference_deck.count_lands() == 24

    def test_load_deck_with_catalog(self, catalog, tmp_path):
        path = tmp_path / "small.txt"
        path.write_text("2 Island\n1 Forest\n", encoding="utf-8")
        deck = load_deck(path, catalog)
        assert deck.name == "small"
        assert [c.name for c in deck.cards] == ["Island", "Island", "Forest"]
