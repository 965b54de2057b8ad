"""Goldfish Engine - Game State

GameState aggregates every zone, the turn bookkeeping, both life totals,
the mana pool and the game's RNG. One GameState is built per game and
discarded once the result record is assembled.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from .mana import ManaPool
from .objects import Card, Permanent
from .rng import GameRng
from .types import Phase
from .zones import Battlefield, Exile, Graveyard, Hand, Library


@dataclass
class GameState:
    """
    Complete state of a goldfish game.

    Attributes:
        library, hand, graveyard, battlefield, exile: The zones
        turn: Current turn number (0 before the first turn starts)
        phase: Phase the turn controller is in
        on_the_play: True if this player took the first turn
        land_played: Whether a land was played this turn
        life: Own life total
        opponent_life: The goldfish opponent's life total
        mana_pool: Floating mana
        rng: The game's only source of randomness
    """
    rng: GameRng = field(default_factory=GameRng)
    library: Library = field(default_factory=Library)
    hand: Hand = field(default_factory=Hand)
    graveyard: Graveyard = field(default_factory=Graveyard)
    battlefield: Battlefield = field(default_factory=Battlefield)
    exile: Exile = field(default_factory=Exile)
    turn: int = 0
    phase: Phase = Phase.UNTAP
    on_the_play: bool = False
    land_played: bool = False
    life: int = 20
    opponent_life: int = 20
    mana_pool: ManaPool = field(default_factory=ManaPool)

    # --- Turn Bookkeeping ---

    def start_turn(self):
        """Untap step: next turn number, untap everything, reset per-turn state."""
        self.turn += 1
        self.phase = Phase.UNTAP
        self.land_played = False
        self.mana_pool.clear()
        self.battlefield.untap_all()

    # --- Zone Movement ---

    def draw_card(self) -> Optional[Card]:
        """Draw the top card into hand. Returns None if the library is empty."""
        card = self.library.draw()
        if card is not None:
            self.hand.add(card)
        return card

    def draw_cards(self, n: int) -> List[Card]:
        drawn = []
        for _ in range(n):
            card = self.draw_card()
            if card is None:
                break
            drawn.append(card)
        return drawn

    def mill(self, n: int) -> List[Card]:
        """Mill up to n cards straight into the graveyard."""
        milled = self.library.mill(n)
        self.graveyard.extend(milled)
        return milled

    def discard_at(self, index: int) -> Optional[Card]:
        """Move the hand card at index to the graveyard."""
        card = self.hand.remove_at(index)
        if card is not None:
            self.graveyard.add(card)
        return card

    def put_onto_battlefield(self, card: Card, tapped: bool = False) -> Permanent:
        """Create a Permanent for card entering this turn."""
        permanent = Permanent(card=card, turn_entered=self.turn, tapped=tapped)
        self.battlefield.add(permanent)
        return permanent

    def deal_damage(self, amount: int):
        """Damage the opponent."""
        if amount > 0:
            self.opponent_life -= amount

    # --- Queries ---

    @property
    def opponent_dead(self) -> bool:
        return self.opponent_life <= 0

    def land_count(self) -> int:
        return self.battlefield.count_lands()

    def untapped_land_count(self) -> int:
        return len(self.battlefield.untapped_lands())


__all__ = ['GameState']
