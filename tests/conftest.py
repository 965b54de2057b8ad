"""
Shared pytest fixtures for the goldfish tests.

This module provides reusable fixtures for common test scenarios including:
- The bundled card catalog and reference deck
- Empty game states and a builder for board states
- Hand-made cards for isolated rules tests
"""

import pytest
from typing import Iterable, Optional

from goldfish.cards.database import CardDatabase, DEFAULT_CARDS_PATH
from goldfish.cards.parser import load_deck, Deck
from goldfish.cards.database import DATA_DIR
from goldfish.engine.objects import CreatureCard, LandCard, ManaCost, Permanent
from goldfish.engine.rng import GameRng
from goldfish.engine.state import GameState
from goldfish.engine.types import LandSubtype, ManaColor


# =============================================================================
# Catalog Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def catalog() -> CardDatabase:
    """
    Load the bundled card catalog once per test session.

    Returns:
        CardDatabase: Every card the reference deck uses.

    Usage:
        def test_lookup(catalog):
            assert catalog.get_card("Forest").is_land
    """
    return CardDatabase.from_file(DEFAULT_CARDS_PATH)


@pytest.fixture(scope="session")
def reference_deck(catalog) -> Deck:
    """
    The bundled 60-card reanimator list.

    Returns:
        Deck: One Card per copy, in list order.
    """
    return load_deck(DATA_DIR / "reanimator.txt", catalog)


@pytest.fixture
def deck_cards(reference_deck):
    """
    A fresh list of the reference deck's cards.

    Returns:
        list: Safe to mutate; the session deck is untouched.
    """
    return list(reference_deck.cards)


# =============================================================================
# State Fixtures
# =============================================================================

@pytest.fixture
def state() -> GameState:
    """
    An empty game state on turn 1 with a fixed seed.

    Returns:
        GameState: Empty zones, 20 life each, seed 1.
    """
    game_state = GameState(rng=GameRng(1))
    game_state.turn = 1
    return game_state


@pytest.fixture
def board(catalog):
    """
    Factory that builds a game state from card names.

    Returns:
        Callable: board(lands=..., hand=..., graveyard=..., library=...,
        creatures=..., turn=...) -> GameState. Lands and creatures start
        untapped and entered on turn 0.

    Usage:
        def test_cast(board):
            state = board(lands=["Island", "Swamp"], hand=["Kiora, the Rising Tide"])
    """
    def build(lands: Iterable[str] = (), hand: Iterable[str] = (),
              graveyard: Iterable[str] = (), library: Iterable[str] = (),
              creatures: Iterable[str] = (), turn: int = 4,
              seed: int = 1, life: int = 20) -> GameState:
        game_state = GameState(rng=GameRng(seed), life=life)
        game_state.turn = turn
        for name in lands:
            game_state.battlefield.add(Permanent(card=catalog.get_card(name), turn_entered=0))
        for name in creatures:
            game_state.battlefield.add(Permanent(card=catalog.get_card(name), turn_entered=0))
        game_state.hand.extend(catalog.get_card(n) for n in hand)
        game_state.graveyard.extend(catalog.get_card(n) for n in graveyard)
        game_state.library.extend(catalog.get_card(n) for n in library)
        return game_state

    return build


# =============================================================================
# Card Fixtures
# =============================================================================

def make_land(name: str, colors: Iterable[ManaColor], subtype: LandSubtype = LandSubtype.BASIC,
              enters_tapped: bool = False) -> LandCard:
    """Build a land outside the catalog."""
    return LandCard(name=name, subtype=subtype, enters_tapped=enters_tapped,
                    colors=tuple(colors))


def make_creature(name: str, power: int = 2, cost: Optional[str] = None,
                  creature_types: Iterable[str] = ()) -> CreatureCard:
    """Build a vanilla creature outside the catalog."""
    mana_cost = ManaCost.parse(cost or "{1}{G}")
    return CreatureCard(name=name, mana_cost=mana_cost, mana_value=mana_cost.total(),
                        power=power, toughness=power, creature_types=tuple(creature_types))


@pytest.fixture
def plains() -> LandCard:
    """A basic land producing only white mana."""
    return make_land("Plains", [ManaColor.WHITE])


@pytest.fixture
def wastes() -> LandCard:
    """A basic land producing only colorless mana."""
    return make_land("Wastes", [ManaColor.COLORLESS])
