"""
Test suite for the opening hand resolver.

Tests cover:
- Hand scoring (land penalty, then mana value)
- The keep-worthiness check
- Scry buckets after a mulligan
- The two-hand protocol and the mulligan floor
"""
import pytest

from goldfish.engine.mulligan import (
    MIN_HAND_SIZE,
    OPENING_HAND_SIZE,
    choose_hand,
    count_lands,
    hand_score,
    mulligan_down,
    resolve_mulligans,
    scry,
    should_mulligan,
)
from goldfish.engine.rng import GameRng


@pytest.fixture
def cards(catalog):
    """Look up a list of names in the catalog."""
    def lookup(*names):
        return [catalog.get_card(n) for n in names]
    return lookup


# =============================================================================
# HAND EVALUATION TESTS
# =============================================================================

class TestHandScore:
    """Tests for hand_score and should_mulligan."""

    def test_ideal_lands_no_penalty(self, cards):
        hand = cards("Island", "Swamp", "Forest", "Cache Grab", "Town Greeter",
                     "Kiora, the Rising Tide", "Superior Spider-Man")
        assert hand_score(hand) == (0, 2 + 2 + 3 + 4)

    def test_few_lands_heavy_penalty(self, cards):
        hand = cards("Island", "Cache Grab")
        assert hand_score(hand)[0] == 10

    def test_many_lands_light_penalty(self, cards):
        hand = cards("Island", "Island", "Swamp", "Swamp", "Forest", "Forest")
        assert hand_score(hand)[0] == 2

    def test_keep_two_lands_with_early_spell(self, cards):
        hand = cards("Island", "Swamp", "Cache Grab", "Superior Spider-Man",
                     "Bringer of the Last Gift", "Terror of the Peaks", "Ardyn, the Usurper")
        assert not should_mulligan(hand)

    def test_mulligan_one_lander(self, cards):
        hand = cards("Island", "Cache Grab", "Town Greeter", "Kiora, the Rising Tide",
                     "Superior Spider-Man", "Bringer of the Last Gift", "Terror of the Peaks")
        assert should_mulligan(hand)

    def test_mulligan_no_early_spell(self, cards):
        hand = cards("Island", "Swamp", "Forest", "Superior Spider-Man",
                     "Bringer of the Last Gift", "Terror of the Peaks", "Ardyn, the Usurper")
        assert should_mulligan(hand)

    def test_enabler_keeps_land_light_hand_with_two_lands(self, cards):
        hand = cards("Island", "Swamp", "Overlord of the Balemurk", "Superior Spider-Man",
                     "Bringer of the Last Gift", "Terror of the Peaks", "Ardyn, the Usurper")
        assert not should_mulligan(hand)

    def test_four_cards_only_needs_lands(self, cards):
        hand = cards("Island", "Swamp", "Bringer of the Last Gift", "Ardyn, the Usurper")
        assert len(hand) == MIN_HAND_SIZE
        assert not should_mulligan(hand)


# =============================================================================
# SCRY TESTS
# =============================================================================

class TestScry:
    """Tests for post-mulligan scry."""

    def test_combo_pieces_always_bottomed(self, cards):
        library = cards("Bringer of the Last Gift", "Cache Grab", "Island", "Forest")
        hand = cards("Island", "Swamp")
        scry(library, hand, 2)
        assert [c.name for c in library] == [
            "Cache Grab", "Island", "Forest", "Bringer of the Last Gift"]

    def test_lands_bottomed_with_three_in_hand(self, cards):
        library = cards("Island", "Kiora, the Rising Tide", "Swamp")
        hand = cards("Island", "Swamp", "Forest")
        scry(library, hand, 2)
        assert [c.name for c in library] == ["Kiora, the Rising Tide", "Swamp", "Island"]

    def test_expensive_spell_bottomed_when_short(self, cards):
        library = cards("Superior Spider-Man", "Town Greeter", "Island")
        hand = cards("Island")
        scry(library, hand, 2)
        assert [c.name for c in library] == ["Town Greeter", "Island", "Superior Spider-Man"]

    def test_scry_zero_does_nothing(self, cards):
        library = cards("Bringer of the Last Gift", "Island")
        scry(library, cards("Island"), 0)
        assert [c.name for c in library] == ["Bringer of the Last Gift", "Island"]


# =============================================================================
# OPENING HAND PROTOCOL TESTS
# =============================================================================

class TestResolveMulligans:
    """Tests for the two-hand protocol."""

    def test_better_hand_kept(self, cards):
        good = cards("Island", "Swamp", "Forest", "Cache Grab", "Town Greeter",
                     "Kiora, the Rising Tide", "Superior Spider-Man")
        flooded = cards("Island", "Island", "Swamp", "Swamp", "Forest", "Forest", "Cache Grab")
        kept, rejected = choose_hand(good, flooded, GameRng(1))
        assert kept is good
        assert rejected is flooded

    def test_only_qualifying_hand_kept(self, cards):
        """When only the second hand has 2 lands it is kept."""
        no_lands = cards(*["Cache Grab"] * 7)
        two_lands = cards("Island", "Swamp", "Cache Grab", "Town Greeter",
                          "Kiora, the Rising Tide", "Superior Spider-Man", "Dredger's Insight")
        library = no_lands + two_lands + cards(*["Forest"] * 10)
        hand = resolve_mulligans(library, GameRng(3))
        assert [c.name for c in hand] == [c.name for c in two_lands]
        assert len(library) == 24 - OPENING_HAND_SIZE

    def test_neither_qualifies_mulligans_to_six_or_less(self, cards):
        library = cards(*["Cache Grab"] * 14) + cards(*["Island"] * 4)
        hand = resolve_mulligans(library, GameRng(11))
        assert MIN_HAND_SIZE <= len(hand) <= 6
        assert len(hand) + len(library) == 18

    def test_floor_without_lands(self, cards):
        """A landless deck bottoms out at 4 cards."""
        library = cards(*["Cache Grab"] * 30)
        hand = resolve_mulligans(library, GameRng(2))
        assert len(hand) == MIN_HAND_SIZE

    def test_mulligan_down_keeps_two_landers(self, cards):
        library = cards("Island", "Swamp", "Cache Grab", "Town Greeter", "Forest",
                        "Cache Grab", "Cache Grab")
        hand = mulligan_down(library, 5, GameRng(4))
        assert len(hand) == 5
        assert count_lands(hand) == 3

    def test_deterministic(self, deck_cards):
        library1 = list(deck_cards)
        library2 = list(deck_cards)
        GameRng(77).shuffle(library1)
        GameRng(77).shuffle(library2)
        hand1 = resolve_mulligans(library1, GameRng(78))
        hand2 = resolve_mulligans(library2, GameRng(78))
        assert [c.name for c in hand1] == [c.name for c in hand2]
        assert [c.name for c in library1] == [c.name for c in library2]
