"""Goldfish Engine - Combat

The goldfish opponent never blocks, so combat is:
- Beginning of combat: Ardyn's Starscourge trigger
- Declare attackers: every ready creature attacks
- Combat damage: total attacking power to the opponent, lifelink for Demons
"""
import logging
from typing import List, Optional

from . import names
from .decisions import count_terrors, has_ardyn, is_demon
from .objects import CreatureCard, Permanent
from .state import GameState

logger = logging.getLogger(__name__)

# Starscourge tokens are 5/5 Demons
STARSCOURGE_POWER = 5
STARSCOURGE_TOUGHNESS = 5

# Graveyard creatures Starscourge prefers to exile, on top of their power
STARSCOURGE_BONUS = {
    names.BRINGER: 100,
    names.TERROR: 50,
}


class CombatManager:
    """
    Runs the combat phase of one turn against a goldfish opponent.

    Attributes:
        state: The game being played
        verbose: Print the combat narration
    """

    def __init__(self, state: GameState, verbose: bool = False):
        self.state = state
        self.verbose = verbose

    # =========================================================================
    # BEGINNING OF COMBAT
    # =========================================================================

    def starscourge_trigger(self) -> Optional[Permanent]:
        """Exile the best graveyard creature and create a 5/5 Demon copy of it.

        Every Terror on the battlefield deals 5 damage for the token.

        Returns:
            The token, or None if there was nothing to exile.
        """
        graveyard = self.state.graveyard
        best_idx = None
        best_score = 0
        for i, card in enumerate(graveyard):
            if not isinstance(card, CreatureCard):
                continue
            score = card.power + STARSCOURGE_BONUS.get(card.name, 0)
            if score > best_score:
                best_score = score
                best_idx = i

        if best_idx is None:
            return None

        exiled = graveyard.remove_at(best_idx)
        self.state.exile.add(exiled)

        terrors = count_terrors(self.state)
        token_card = CreatureCard(
            name=f"{exiled.name} (Starscourge Token)",
            power=STARSCOURGE_POWER,
            toughness=STARSCOURGE_TOUGHNESS,
            creature_types=("Demon",),
        )
        token = self.state.put_onto_battlefield(token_card)
        token.is_copy_of = exiled.name

        if self.verbose:
            print(f"  [Starscourge] Exile {exiled.name}, create 5/5 Demon token")

        if terrors > 0:
            damage = STARSCOURGE_POWER * terrors
            self.state.deal_damage(damage)
            if self.verbose:
                print(f"  Terror triggers on token: {damage} damage!")
        return token

    # =========================================================================
    # ATTACKERS
    # =========================================================================

    def can_attack(self, permanent: Permanent, ardyn: bool) -> bool:
        """Untapped, not impending, and not summoning sick.

        With Ardyn out, Demons have haste.
        """
        if not isinstance(permanent.card, CreatureCard):
            return False
        if permanent.tapped:
            return False
        if permanent.is_impending:
            return False
        if permanent.turn_entered >= self.state.turn:
            return ardyn and is_demon(permanent)
        return True

    def declare_attackers(self) -> List[Permanent]:
        """Every creature that can attack does, and taps."""
        ardyn = has_ardyn(self.state)
        attackers = [p for p in self.state.battlefield if self.can_attack(p, ardyn)]
        for permanent in attackers:
            permanent.tap()
        return attackers

    # =========================================================================
    # COMBAT PHASE
    # =========================================================================

    def run(self) -> int:
        """Run the whole combat phase.

        Returns:
            Combat damage dealt to the opponent.
        """
        ardyn = has_ardyn(self.state)
        if ardyn:
            self.starscourge_trigger()

        attackers = self.declare_attackers()
        if not attackers:
            return 0

        damage = 0
        lifelink = 0
        for permanent in attackers:
            damage += permanent.power
            if ardyn and is_demon(permanent):
                lifelink += permanent.power

        self.state.deal_damage(damage)
        self.state.life += lifelink

        if self.verbose:
            labels = ", ".join(p.describe() for p in attackers)
            print(f"  [Combat] Attack with {labels} for {damage} damage")
            if lifelink:
                print(f"  [Lifelink] Gained {lifelink} life")
        logger.debug("Turn %d: combat for %d", self.state.turn, damage)
        return damage


def simulate_combat(state: GameState, verbose: bool = False) -> int:
    """Run combat for the current turn and return the damage dealt."""
    return CombatManager(state, verbose).run()


__all__ = [
    'STARSCOURGE_POWER',
    'CombatManager',
    'simulate_combat',
]
