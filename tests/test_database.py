"""
Test suite for the card catalog.

Tests cover:
- The bundled catalog loads and validates cleanly
- JSON in list and name-keyed forms
- Error types for missing files, bad JSON and unknown names
- Record serialization
"""
import json

import pytest

from goldfish.cards.database import (
    CardDataError,
    CardDatabase,
    CardDatabaseError,
    CardNotFoundError,
    card_from_dict,
    card_to_dict,
    get_database,
)
from goldfish.engine.objects import CreatureCard, LandCard, SagaCard
from goldfish.engine.types import CardType, LandSubtype, ManaColor

ISLAND = {"name": "Island", "card_type": "land", "colors": ["U"]}
GREETER = {
    "name": "Town Greeter", "card_type": "creature",
    "mana_cost": {"green": 1, "generic": 1}, "mana_value": 2,
    "power": 1, "toughness": 1, "creature_types": ["Human", "Citizen"],
    "abilities": ["etb_mill_4_return_land"],
}


# =============================================================================
# BUNDLED CATALOG TESTS
# =============================================================================

class TestBundledCatalog:
    """Tests for data/cards.json."""

    def test_validates_cleanly(self, catalog):
        assert catalog.validate() == []

    def test_lookup(self, catalog):
        overlord = catalog.get_card("Overlord of the Balemurk")
        assert isinstance(overlord, CreatureCard)
        assert overlord.has_impending
        assert overlord.impending_counters == 5
        assert overlord.impending_cost.total() == 2

    def test_land_fields(self, catalog):
        sewers = catalog.get_card("Undercity Sewers")
        assert isinstance(sewers, LandCard)
        assert sewers.subtype is LandSubtype.SURVEIL
        assert sewers.enters_tapped
        assert set(sewers.colors) == {ManaColor.BLUE, ManaColor.BLACK}

    def test_saga_chapters(self, catalog):
        saga = catalog.get_card("Awaken the Honored Dead")
        assert isinstance(saga, SagaCard)
        assert len(saga.chapters) == 3

    def test_by_type_and_names(self, catalog):
        lands = catalog.by_type(CardType.LAND)
        assert all(c.is_land for c in lands)
        assert catalog.card_names() == sorted(catalog.card_names())
        assert "Forest" in catalog
        assert len(catalog) == len(list(catalog))

    def test_default_database_cached(self):
        assert get_database() is get_database()


# =============================================================================
# JSON LOADING TESTS
# =============================================================================

class TestJsonLoading:
    """Tests for parsing catalog JSON."""

    def test_list_form(self):
        db = CardDatabase.from_json(json.dumps([ISLAND, GREETER]))
        assert db.card_names() == ["Island", "Town Greeter"]

    def test_keyed_form(self):
        keyed = {"Island": {k: v for k, v in ISLAND.items() if k != "name"}}
        db = CardDatabase.from_json(json.dumps(keyed))
        assert db.get_card("Island").colors == (ManaColor.BLUE,)

    def test_malformed_json(self):
        with pytest.raises(CardDataError):
            CardDatabase.from_json("[{")

    def test_scalar_json(self):
        with pytest.raises(CardDataError):
            CardDatabase.from_json("42")

    def test_unknown_card_type(self):
        with pytest.raises(CardDataError):
            card_from_dict({"name": "Mox", "card_type": "artifact"})

    def test_missing_name(self):
        with pytest.raises(CardDataError):
            card_from_dict({"card_type": "land"})

    def test_bad_color_symbol(self):
        with pytest.raises(CardDataError):
            card_from_dict({"name": "Odd Land", "card_type": "land", "colors": ["Q"]})

    def test_missing_file(self, tmp_path):
        with pytest.raises(CardDatabaseError):
            CardDatabase.from_file(tmp_path / "nope.json")

    def test_from_file_records_source(self, tmp_path):
        path = tmp_path / "cards.json"
        path.write_text(json.dumps([ISLAND]), encoding="utf-8")
        db = CardDatabase.from_file(path)
        assert db.source == path
        assert get_database(path).card_names() == ["Island"]


# =============================================================================
# LOOKUP AND VALIDATION TESTS
# =============================================================================

class TestLookup:
    """Tests for lookups and validation."""

    def test_not_found_is_key_error(self, catalog):
        with pytest.raises(KeyError):
            catalog.get_card("Black Lotus")

    def test_not_found_message(self, catalog):
        with pytest.raises(CardNotFoundError) as exc_info:
            catalog.get_card("Black Lotus")
        assert str(exc_info.value) == "Card not found: Black Lotus"
        assert exc_info.value.name == "Black Lotus"

    def test_validate_reports_problems(self):
        bogus = dict(GREETER, mana_value=3, abilities=["teleport"])
        db = CardDatabase.from_cards([card_from_dict(bogus), card_from_dict(
            {"name": "Colorless Rock", "card_type": "land"})])
        problems = db.validate()
        assert "Town Greeter: Invalid ability: teleport" in problems
        assert any("does not match" in p for p in problems)
        assert "Colorless Rock: land produces no colors" in problems

    def test_round_trip(self, catalog):
        for card in catalog:
            assert card_from_dict(card_to_dict(card)) == card

    def test_to_json_reloads(self, catalog):
        reloaded = CardDatabase.from_json(catalog.to_json())
        assert reloaded.card_names() == catalog.card_names()
