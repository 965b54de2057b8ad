"""Goldfish Engine - Turn Structure

One turn is a fixed walk through the phases:

    UNTAP -> DRAW -> MAIN1 -> COMBAT -> MAIN2 -> END

- Untap: next turn number, untap everything, reset the land drop and pool
- Draw: draw a card (skipped on turn 1 on the play), then sagas gain a
  lore counter and resolve that chapter
- Main 1: land play and the casting loop
- Combat: see combat.py
- Main 2: nothing
- End: impending creatures lose a time counter, discard down to hand size

The win check and the turn ceiling belong to the game loop, not here.
"""
import logging
from typing import List, Optional

from . import names
from .combat import CombatManager
from .decisions import (
    choose_land_to_play,
    has_ardyn_combo,
    is_combo_lethal,
    calculate_combo_damage,
    should_hold_spider_man,
    spell_priority,
)
from .lands import play_land_from_hand
from .mana import can_cast, casting_cost, tap_lands_for_cost
from .objects import Card, CreatureCard, LandCard, Permanent, SagaCard
from .resolution import CardResolver
from .state import GameState
from .types import CounterType, LandSubtype, Phase

logger = logging.getLogger(__name__)

DEFAULT_MAX_HAND_SIZE = 7


def _join(items) -> str:
    labels = [getattr(item, "name", item) for item in items]
    return ", ".join(labels) if labels else "(empty)"


class TurnManager:
    """
    Drives the phases of each turn for one game.

    Attributes:
        state: The game being played
        verbose: Print the game trace
        max_hand_size: Hand size enforced in the end step
        resolver: Resolves spells and ETB triggers
        combat: Runs the combat phase
    """

    def __init__(self, state: GameState, verbose: bool = False,
                 max_hand_size: int = DEFAULT_MAX_HAND_SIZE):
        self.state = state
        self.verbose = verbose
        self.max_hand_size = max_hand_size
        self.resolver = CardResolver(state, verbose)
        self.combat = CombatManager(state, verbose)

    def say(self, message: str):
        if self.verbose:
            print(message)

    # =========================================================================
    # TURN
    # =========================================================================

    def execute_turn(self) -> int:
        """Play one full turn.

        Returns:
            Combat damage dealt this turn.
        """
        state = self.state

        self.untap_step()
        self.say(f"\n=== TURN {state.turn} ===")

        self.draw_step()
        self.say(f"[Main 1] Hand: {_join(state.hand)}")

        state.phase = Phase.MAIN1
        self.main_phase()

        state.phase = Phase.COMBAT
        combat_damage = self.combat.run()

        state.phase = Phase.MAIN2

        self.end_step()
        logger.debug("Turn %d done: opponent at %d", state.turn, state.opponent_life)
        return combat_damage

    # =========================================================================
    # BEGINNING PHASE
    # =========================================================================

    def untap_step(self):
        self.state.start_turn()

    def draw_step(self) -> Optional[Card]:
        """Draw for the turn, then advance sagas.

        Returns:
            The card drawn, or None if the draw was skipped or the library
            is empty.
        """
        state = self.state
        state.phase = Phase.DRAW

        drawn = None
        if state.turn == 1 and state.on_the_play:
            self.say("[Draw] Skipped (on the play)")
        else:
            drawn = state.draw_card()
            if drawn is not None:
                self.say(f"[Draw] Drew: {drawn.name}")

        self.advance_sagas()
        return drawn

    def advance_sagas(self):
        """Sagas that entered before this turn gain a lore counter.

        Every chapter reached is resolved, then sagas on their final chapter
        go to the graveyard.
        """
        state = self.state
        sagas: List[Permanent] = [
            p for p in state.battlefield
            if isinstance(p.card, SagaCard) and p.turn_entered < state.turn
        ]

        for saga in sagas:
            saga.add_counter(CounterType.LORE)
        for saga in sagas:
            self.resolver.resolve_saga_chapter(saga.name, saga.get_counter(CounterType.LORE))

        finished = [
            i for i, p in enumerate(state.battlefield)
            if any(p is saga for saga in sagas)
            and p.get_counter(CounterType.LORE) >= len(p.card.chapters)
        ]
        for permanent in state.battlefield.remove_indices(finished):
            state.graveyard.add(permanent.card)

    # =========================================================================
    # MAIN PHASE
    # =========================================================================

    def main_phase(self):
        """Set up the combo, dig for a land, play a land, then cast by priority."""
        self.combo_setup()
        if not self.state.land_played and not self._discard_outlet_ready():
            self.cast_land_finders()
        self.play_land()
        self.cast_spells()

    def _discard_outlet_ready(self) -> bool:
        """A reanimation target in hand and Kiora or Speaker to bin it."""
        hand = self.state.hand
        payload = names.BRINGER in hand or names.TERROR in hand
        outlet = names.KIORA in hand or names.SPEAKER in hand
        return payload and outlet

    def combo_setup(self) -> bool:
        """Play an untapped land before anything else when that makes 4 mana
        for Spider-Man with a combo target already in the graveyard.

        Returns:
            True if a land was played.
        """
        state = self.state
        combo_target = names.BRINGER in state.graveyard or has_ardyn_combo(list(state.graveyard))
        if not (names.SPIDER_MAN in state.hand and combo_target):
            return False
        if state.untapped_land_count() != 3 or state.land_played:
            return False

        index = state.hand.find_first(
            lambda c: isinstance(c, LandCard)
            and not c.enters_tapped
            and c.subtype is not LandSubtype.FASTLAND
        )
        if index is None:
            return False

        permanent = play_land_from_hand(state, index, self.verbose)
        self.say(f"  [COMBO SETUP] Played {permanent.name} first to enable turn 4 combo")
        return True

    def cast_land_finders(self):
        """Cast the cheapest Cache Grab, Dredger's Insight or Town Greeter
        until none is castable."""
        state = self.state
        while not state.land_played:
            best_idx = None
            best_mv = None
            for i, card in enumerate(state.hand):
                if card.name not in names.LAND_FINDERS or not can_cast(card, state):
                    continue
                if best_mv is None or card.mana_value < best_mv:
                    best_mv = card.mana_value
                    best_idx = i
            if best_idx is None:
                return

            card = state.hand.remove_at(best_idx)
            for_creature = card if isinstance(card, CreatureCard) else None
            if not tap_lands_for_cost(card.mana_cost, state, for_creature):
                state.hand.add(card)
                return

            if isinstance(card, CreatureCard):
                permanent = self.resolver.cast_creature(card)
                self.resolver.process_etb(permanent)
            else:
                self.resolver.cast_spell(card)
            self.say(f"  [Cast] {card.name}")

    def play_land(self) -> Optional[Permanent]:
        """Play the land the land ranking picks, if any."""
        state = self.state
        if state.land_played:
            return None
        index = choose_land_to_play(state)
        if index is None:
            return None

        permanent = play_land_from_hand(state, index, self.verbose)
        self.say(f"  [Land] {permanent.name}{' (tapped)' if permanent.tapped else ''}")
        return permanent

    def choose_spell(self, combo_lethal: bool) -> Optional[int]:
        """Hand index of the castable spell with the lowest priority value."""
        state = self.state
        best_idx = None
        best_priority = None
        for i, card in enumerate(state.hand):
            if card.is_land or not can_cast(card, state):
                continue
            if card.name == names.SPIDER_MAN and should_hold_spider_man(state, combo_lethal):
                continue
            priority = spell_priority(card, state, combo_lethal)
            if best_priority is None or priority < best_priority:
                best_priority = priority
                best_idx = i
        return best_idx

    def cast_spells(self):
        """Cast spells in priority order until nothing more can be cast."""
        state = self.state
        while True:
            bringer_in_gy = names.BRINGER in state.graveyard
            combo_lethal = bringer_in_gy and is_combo_lethal(state)

            if bringer_in_gy and names.SPIDER_MAN in state.hand and not combo_lethal:
                self.say(f"  [Waiting] Combo not lethal yet (expected: "
                         f"{calculate_combo_damage(state)} damage, need: {state.opponent_life})")

            index = self.choose_spell(combo_lethal)
            if index is None:
                return

            card = state.hand.remove_at(index)
            cost, use_impending = casting_cost(card, state)
            for_creature = card if isinstance(card, CreatureCard) else None
            if not tap_lands_for_cost(cost, state, for_creature):
                state.hand.add(card)
                return

            if isinstance(card, CreatureCard):
                permanent = self.resolver.cast_creature(card, use_impending)
                self.say(f"  [Cast] {card.name}{' (impending)' if use_impending else ''}")
                self.resolver.process_etb(permanent)
            else:
                self.resolver.cast_spell(card)
                self.say(f"  [Cast] {card.name}")

    # =========================================================================
    # ENDING PHASE
    # =========================================================================

    def end_step(self):
        """Impending countdown, then discard from the end of hand down to size."""
        state = self.state
        state.phase = Phase.END

        for permanent in state.battlefield:
            if permanent.is_impending:
                permanent.remove_counter(CounterType.TIME)

        while len(state.hand) > self.max_hand_size:
            state.discard_at(len(state.hand) - 1)

        if self.verbose:
            print(f"[End of Turn {state.turn}]")
            print(f"  Battlefield: {_join(p.describe() for p in state.battlefield)}")
            print(f"  Graveyard: {_join(state.graveyard)}")
            print(f"  Opponent life: {state.opponent_life}")


__all__ = [
    'DEFAULT_MAX_HAND_SIZE',
    'TurnManager',
]
