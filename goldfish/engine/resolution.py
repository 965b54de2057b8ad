"""Goldfish Engine - Card Resolution

Effects of every card the deck can cast, matched by ability tag or card
name. The set of effects is closed: a tag the resolver does not know is
simply inert.

Creature ETBs:
- Town Greeter: mill 4, return the best land
- Kiora: draw 2, discard 2
- Formidable Speaker: discard a card to tutor a creature
- Overlord: mill 4, maybe return a key creature
- Superior Spider-Man: copy a creature card in the graveyard
- Bringer: sacrifice, mass reanimate, then Terror triggers

Spells: Cache Grab, Dredger's Insight, Analyze the Pollen and the
Awaken the Honored Dead saga.
"""
import logging
from typing import List, Optional, Sequence

from . import names
from .decisions import (
    choose_mill_return,
    count_terrors,
    select_discards,
    select_permanent_from_mill,
    town_greeter_land_score,
)
from .errors import InvalidAbilityError
from .objects import (
    Card,
    CreatureCard,
    EnchantmentCard,
    LandCard,
    Permanent,
    SagaCard,
    SpellCard,
    card_abilities,
)
from .state import GameState
from .types import CounterType

logger = logging.getLogger(__name__)

# Ability tags the catalog may use, whether they do anything here or not
KNOWN_ABILITIES = frozenset({
    "etb_mill_4_return_land",
    "etb_draw_2_discard_2",
    "etb_discard_tutor_creature",
    "etb_or_attack_mill_4_return",
    "etb_mass_reanimate",
    "mind_swap_copy",
    "mill_4_return_permanent",
    "search_land_or_creature_with_evidence",
    "etb_mill_4_return_artifact_creature_land",
    "destroy_nonland_permanent",
    "mill_3",
    "return_creature_or_land",
    "impending_5",
    "etb_damage_trigger",
    "flying",
    "graveyard_leave_lifegain",
})


def check_ability(tag: str) -> str:
    """Return tag unchanged if the resolver knows it.

    Raises:
        InvalidAbilityError: If tag is not in KNOWN_ABILITIES.
    """
    if tag not in KNOWN_ABILITIES:
        raise InvalidAbilityError(tag)
    return tag


def _names(cards: Sequence[Card]) -> str:
    return ", ".join(c.name for c in cards)


class CardResolver:
    """
    Resolves spells and enter-the-battlefield triggers against one game.

    Attributes:
        state: The game being played
        verbose: Print a narration of every effect
    """

    def __init__(self, state: GameState, verbose: bool = False):
        self.state = state
        self.verbose = verbose

    def say(self, message: str):
        if self.verbose:
            print(message)

    # =========================================================================
    # CASTING
    # =========================================================================

    def cast_creature(self, card: Card, use_impending: bool = False) -> Permanent:
        """Put a creature onto the battlefield.

        Cast for impending, it enters with TIME counters. The caller
        resolves the ETB with process_etb, which triggers either way.

        Raises:
            ValueError: If card is not a creature.
        """
        if not isinstance(card, CreatureCard):
            raise ValueError(f"Not a creature card: {card.name}")

        permanent = self.state.put_onto_battlefield(card)
        if use_impending and card.has_impending:
            permanent.add_counter(CounterType.TIME, card.impending_counters or 0)
        return permanent

    def cast_spell(self, card: Card):
        """Resolve a non-creature spell.

        Raises:
            ValueError: If card is a land or a creature.
        """
        if isinstance(card, SagaCard):
            self._resolve_saga(card)
        elif isinstance(card, EnchantmentCard):
            self._resolve_enchantment(card)
        elif isinstance(card, SpellCard):
            self._resolve_instant_or_sorcery(card)
        else:
            raise ValueError(f"Not a spell card: {card.name}")

    def _resolve_instant_or_sorcery(self, card: SpellCard):
        for ability in card.abilities:
            if ability == "mill_4_return_permanent":
                self.resolve_cache_grab()
            elif ability == "search_land_or_creature_with_evidence":
                self.resolve_analyze_the_pollen()
        self.state.graveyard.add(card)

    def _resolve_enchantment(self, card: EnchantmentCard):
        self.state.put_onto_battlefield(card)
        if "etb_mill_4_return_artifact_creature_land" in card.abilities:
            self.resolve_dredgers_insight()

    def _resolve_saga(self, card: SagaCard):
        permanent = self.state.put_onto_battlefield(card)
        permanent.add_counter(CounterType.LORE, 1)
        self.resolve_saga_chapter(card.name, 1)

    # =========================================================================
    # ETB DISPATCH
    # =========================================================================

    def process_etb(self, permanent: Permanent):
        """Run the enter-the-battlefield abilities of a creature permanent."""
        if not isinstance(permanent.card, CreatureCard):
            return

        for ability in card_abilities(permanent.card):
            if ability == "etb_mill_4_return_land":
                self.resolve_town_greeter()
            elif ability == "etb_draw_2_discard_2":
                self.resolve_kiora()
            elif ability == "etb_discard_tutor_creature":
                self.resolve_speaker()
            elif ability == "etb_or_attack_mill_4_return":
                self.resolve_overlord()
            elif ability == "etb_mass_reanimate":
                self.resolve_bringer()
            elif ability == "mind_swap_copy":
                self.resolve_spider_man_copy(permanent)

    def _copied_etb(self, name: str):
        """ETB of a creature entering as name via copy or reanimation."""
        if name == names.KIORA:
            self.resolve_kiora()
        elif name == names.TOWN_GREETER:
            self.resolve_town_greeter()
        elif name == names.OVERLORD:
            self.resolve_overlord()
        elif name == names.SPEAKER:
            self.resolve_speaker()

    def _return_one(self, milled: List[Card], index: Optional[int], source: str):
        """Move milled[index] to hand and the rest to the graveyard."""
        for i, card in enumerate(milled):
            if i == index:
                self.state.hand.add(card)
            else:
                self.state.graveyard.add(card)
        if index is not None:
            self.say(f"    {source} returns: {milled[index].name}")

    # =========================================================================
    # CREATURE ETBS
    # =========================================================================

    def resolve_town_greeter(self):
        """Mill 4, return the best-scoring land."""
        milled = self.state.library.mill(4)
        self.say(f"    Mill 4: {_names(milled)}")

        best_idx = None
        best_score = -1
        for i, card in enumerate(milled):
            if not isinstance(card, LandCard):
                continue
            score = town_greeter_land_score(card)
            if score > best_score:
                best_score = score
                best_idx = i

        if best_idx is None:
            self.say("    Town Greeter returns nothing (no lands milled)")
        self._return_one(milled, best_idx, "Town Greeter")

    def resolve_kiora(self):
        """Draw 2, then discard 2 by discard priority."""
        drawn = self.state.draw_cards(2)
        if drawn:
            self.say(f"    Drew: {_names(drawn)}")

        discards = select_discards(self.state, 2)
        for card in discards:
            self.state.hand.remove_card(card)
            self.state.graveyard.add(card)
        if discards:
            self.say(f"    Discarded: {_names(discards)}")

    def _speaker_plan(self):
        """(card to discard, creature to tutor) for Formidable Speaker, or None.

        The discard is a card name, or None to mean "any land".
        """
        hand = self.state.hand
        graveyard = self.state.graveyard

        has_spider = names.SPIDER_MAN in hand
        has_bringer = names.BRINGER in hand
        has_terror = names.TERROR in hand
        kioras = hand.count(names.KIORA)
        greeters = hand.count(names.TOWN_GREETER)
        bringer_in_gy = names.BRINGER in graveyard
        terror_in_gy = names.TERROR in graveyard
        spider_in_library = names.SPIDER_MAN in self.state.library

        if not has_spider and spider_in_library:
            for payload in (names.BRINGER, names.TERROR, names.ARDYN):
                if payload in hand:
                    return payload, names.SPIDER_MAN

        if not has_spider and bringer_in_gy and spider_in_library:
            if kioras > 1:
                return names.KIORA, names.SPIDER_MAN
            if greeters > 1:
                return names.TOWN_GREETER, names.SPIDER_MAN
            if kioras >= 1:
                return names.KIORA, names.SPIDER_MAN
            if greeters >= 1:
                return names.TOWN_GREETER, names.SPIDER_MAN
            if names.OVERLORD in hand:
                return names.OVERLORD, names.SPIDER_MAN

        if has_spider and not bringer_in_gy and has_bringer:
            if not terror_in_gy and not has_terror:
                return names.BRINGER, names.TERROR
            if names.OVERLORD not in hand:
                return names.BRINGER, names.OVERLORD
            if kioras == 0:
                return names.BRINGER, names.KIORA
            return names.BRINGER, names.SPIDER_MAN

        if has_spider and bringer_in_gy and not terror_in_gy and not has_terror:
            if hand.count_lands() > 0:
                return None, names.TERROR

        return None

    def resolve_speaker(self):
        """Discard a card to tutor a creature, then shuffle."""
        plan = self._speaker_plan()
        if plan is None:
            self.say("    Formidable Speaker ETB: chose not to discard")
            return

        discard_name, tutor_name = plan
        hand = self.state.hand
        if discard_name is None:
            index = hand.find_first(lambda c: c.is_land)
        else:
            index = hand.find_index(discard_name)
        if index is None:
            self.say("    Formidable Speaker ETB: chose not to discard")
            return

        discarded = self.state.discard_at(index)
        self.say(f"    Formidable Speaker discards: {discarded.name}")

        found = self.state.library.take(tutor_name)
        if found is not None:
            hand.add(found)
            self.say(f"    Formidable Speaker tutors: {found.name}")
        else:
            self.say(f"    Formidable Speaker: {tutor_name} not in library")

        self.state.library.shuffle(self.state.rng)

    def resolve_overlord(self):
        """Mill 4, return Spider-Man, Kiora or Town Greeter when each is wanted."""
        milled = self.state.library.mill(4)
        self.say(f"    Mill 4: {_names(milled)}")

        state = self.state
        bringer_in_gy = names.BRINGER in state.graveyard
        spider_in_hand = names.SPIDER_MAN in state.hand
        bringer_in_hand = names.BRINGER in state.hand

        wanted = []
        if bringer_in_gy and not spider_in_hand:
            wanted.append(names.SPIDER_MAN)
        if bringer_in_hand:
            wanted.append(names.KIORA)
        if state.land_count() < 4:
            wanted.append(names.TOWN_GREETER)

        selected = None
        for name in wanted:
            selected = next((i for i, c in enumerate(milled) if c.name == name), None)
            if selected is not None:
                break

        if selected is None:
            self.say("    Overlord returns nothing (keeping creatures for reanimate)")
        self._return_one(milled, selected, "Overlord")

    def resolve_spider_man_copy(self, permanent: Permanent):
        """Superior Spider-Man enters as a copy of a graveyard creature.

        Bringer is the combo. Ardyn is copied when Starscourge has fuel.
        With a second Spider-Man in hand it copies a mill creature to dig.
        """
        graveyard = self.state.graveyard

        index = graveyard.find_index(names.BRINGER)
        if index is not None:
            self.say("    *** COMBO! Superior Spider-Man copies Bringer of the Last Gift! ***")
            permanent.is_copy_of = names.BRINGER
            self.state.exile.add(graveyard.remove_at(index))
            self.resolve_bringer()
            return

        index = graveyard.find_index(names.ARDYN)
        others = sum(1 for c in graveyard if c.is_creature and c.name != names.ARDYN)
        if index is not None and others >= 1:
            self.say(f"    *** Spider-Man copies Ardyn, the Usurper! ({others} creatures for Starscourge) ***")
            permanent.is_copy_of = names.ARDYN
            self.state.exile.add(graveyard.remove_at(index))
            return

        if names.SPIDER_MAN not in self.state.hand:
            self.say("    Spider-Man enters as a 4/4 (no good copy target)")
            return

        for target in (names.OVERLORD, names.KIORA, names.TOWN_GREETER):
            index = graveyard.find_index(target)
            if index is None:
                continue
            self.say(f"    Spider-Man copies {target} to dig for Bringer")
            permanent.is_copy_of = target
            self.state.exile.add(graveyard.remove_at(index))
            self._copied_etb(target)
            return

        self.say("    Spider-Man enters as a 4/4 (no good copy target)")

    def resolve_bringer(self):
        """Sacrifice the other creatures, then return every creature card.

        The Bringer (or the Spider-Man copying it) is the last permanent on
        the battlefield. Impending creatures are not creatures yet and
        survive. A reanimated Spider-Man copies a Terror from the graveyard.
        """
        state = self.state
        bringer_idx = max(0, len(state.battlefield) - 1)

        doomed = []
        for i, permanent in enumerate(state.battlefield):
            if i == bringer_idx or not permanent.is_creature:
                continue
            if permanent.is_impending:
                self.say(f"    Impending survives: {permanent.describe()}")
                continue
            doomed.append(i)

        if doomed:
            self.say(f"    Sacrifice: {', '.join(state.battlefield[i].name for i in doomed)}")
        for permanent in state.battlefield.remove_indices(doomed):
            state.graveyard.add(permanent.card)

        returning = state.graveyard.creatures()
        if returning:
            self.say(f"    Reanimate: {_names(returning)}")

        spider_copy = None
        if any(c.name == names.SPIDER_MAN for c in returning):
            index = state.graveyard.find_index(names.TERROR)
            if index is not None:
                self.say("    Superior Spider-Man (reanimated) copies Terror of the Peaks!")
                state.exile.add(state.graveyard.remove_at(index))
                spider_copy = names.TERROR

        state.graveyard.remove_creatures()

        for card in returning:
            permanent = state.put_onto_battlefield(card)
            if card.name == names.SPIDER_MAN and spider_copy is not None:
                permanent.is_copy_of = spider_copy

        for card in returning:
            self._copied_etb(card.name)

        self.resolve_terror_triggers(returning)

    def resolve_terror_triggers(self, entering: Sequence[Card]) -> int:
        """Every Terror deals damage equal to each other creature's power.

        Returns:
            The damage dealt.
        """
        terrors = count_terrors(self.state)
        if terrors == 0:
            return 0

        damage = sum(
            card.power * terrors
            for card in entering
            if isinstance(card, CreatureCard) and card.name != names.TERROR
        )
        self.state.deal_damage(damage)
        if damage > 0:
            self.say(f"  Terror triggers dealt {damage} damage! "
                     f"({terrors} Terror(s), {len(entering)} creatures entered)")
        logger.debug("Turn %d: Terror triggers for %d", self.state.turn, damage)
        return damage

    # =========================================================================
    # SPELLS
    # =========================================================================

    def resolve_cache_grab(self):
        """Mill 4, return a permanent card if one was milled."""
        milled = self.state.library.mill(4)
        self.say(f"    Mill 4: {_names(milled)}")

        selected = None
        if any(not c.is_instant_or_sorcery for c in milled):
            selected = select_permanent_from_mill(milled)
        self._return_one(milled, selected, "Cache Grab")

    def resolve_dredgers_insight(self):
        """Mill 4, return Spider-Man, Kiora, a land or a creature."""
        milled = self.state.library.mill(4)
        self.say(f"    Mill 4: {_names(milled)}")
        self._return_one(milled, choose_mill_return(milled), "Dredger's Insight")

    def resolve_analyze_the_pollen(self):
        """Tutor Spider-Man, Kiora, any creature, or a land, then shuffle."""
        library = self.state.library
        rules = (
            lambda c: c.name == names.SPIDER_MAN,
            lambda c: c.name == names.KIORA,
            lambda c: c.is_creature,
            lambda c: c.is_land,
        )
        for rule in rules:
            index = library.find_first(rule)
            if index is not None:
                target = library.remove_at(index)
                self.state.hand.add(target)
                self.say(f"    Analyze the Pollen tutors: {target.name}")
                break

        library.shuffle(self.state.rng)

    def resolve_saga_chapter(self, saga_name: str, chapter: int):
        """Awaken the Honored Dead chapters. Other sagas have no effect."""
        if saga_name != names.AWAKEN_THE_HONORED_DEAD:
            return

        if chapter == 1:
            # No opposing permanents to destroy
            self.say(f"    {saga_name} Chapter I: (destroy target - skipped)")
        elif chapter == 2:
            milled = self.state.mill(3)
            self.say(f"    {saga_name} Chapter II: Mill 3 - {_names(milled)}")
        elif chapter == 3:
            graveyard = self.state.graveyard
            for target in (names.SPIDER_MAN, names.KIORA):
                card = graveyard.take(target)
                if card is not None:
                    self.state.hand.add(card)
                    self.say(f"    {saga_name} Chapter III: Return from graveyard - {card.name}")
                    return
            self.say(f"    {saga_name} Chapter III: No creature to return")


__all__ = ['KNOWN_ABILITIES', 'check_ability', 'CardResolver']
