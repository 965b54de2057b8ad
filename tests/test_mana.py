"""
Test suite for the mana engine.

Tests cover:
- Mana cost parsing and serialization
- Mana pool payment
- Per-land color resolution for the conditional lands
- Feasibility (can_afford_cost) and payment (tap_lands_for_cost)
"""
import pytest

from goldfish.engine.mana import (
    ManaPool,
    available_colors,
    can_afford_cost,
    can_cast,
    casting_cost,
    find_payment,
    producible_colors,
    tap_lands_for_cost,
)
from goldfish.engine.objects import ManaCost, Permanent
from goldfish.engine.types import ManaColor

from .conftest import make_land


# =============================================================================
# MANA COST TESTS
# =============================================================================

class TestManaCost:
    """Tests for ManaCost parsing and totals."""

    def test_parse_braces(self):
        cost = ManaCost.parse("{2}{U}{B}")
        assert cost.generic == 2
        assert cost.blue == 1
        assert cost.black == 1
        assert cost.total() == 4

    def test_parse_compact(self):
        """Compact strings like 1UB parse the same as braces."""
        assert ManaCost.parse("1UB") == ManaCost(generic=1, blue=1, black=1)

    def test_parse_colorless_pip(self):
        cost = ManaCost.parse("{C}{C}")
        assert cost.colorless == 2
        assert cost.generic == 0

    def test_parse_empty(self):
        assert ManaCost.parse("").total() == 0

    def test_parse_unknown_symbol(self):
        with pytest.raises(ValueError):
            ManaCost.parse("{X}")

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            ManaCost(white=-1)

    def test_total_sums_all_seven_fields(self):
        cost = ManaCost(white=1, blue=1, black=1, red=1, green=1, colorless=1, generic=3)
        assert cost.total() == 9

    def test_dict_round_trip_omits_zeros(self):
        cost = ManaCost(black=2, generic=6)
        assert cost.to_dict() == {"black": 2, "generic": 6}
        assert ManaCost.from_dict(cost.to_dict()) == cost

    def test_str(self):
        assert str(ManaCost(generic=2, blue=1, black=1)) == "{2}{U}{B}"
        assert str(ManaCost()) == "{0}"


# =============================================================================
# MANA POOL TESTS
# =============================================================================

class TestManaPool:
    """Tests for the floating mana pool."""

    def test_white_pays_white_plus_generic(self):
        """A pool of three white pays {W} plus two generic and empties."""
        pool = ManaPool()
        pool.add(ManaColor.WHITE, 3)
        assert pool.pay(ManaCost(white=1, generic=2))
        assert pool.get_amount(ManaColor.WHITE) == 0

    def test_cannot_pay_missing_color(self):
        pool = ManaPool()
        pool.add(ManaColor.GREEN, 3)
        assert not pool.can_pay(ManaCost(blue=1))

    def test_failed_pay_leaves_pool(self):
        pool = ManaPool()
        pool.add(ManaColor.BLUE, 1)
        assert not pool.pay(ManaCost(blue=1, generic=1))
        assert pool.get_amount(ManaColor.BLUE) == 1

    def test_generic_prefers_colorless(self):
        pool = ManaPool()
        pool.add(ManaColor.COLORLESS, 1)
        pool.add(ManaColor.BLUE, 1)
        assert pool.pay(ManaCost(generic=1))
        assert pool.get_amount(ManaColor.BLUE) == 1
        assert pool.get_amount(ManaColor.COLORLESS) == 0

    def test_colorless_pip_needs_colorless(self):
        pool = ManaPool()
        pool.add(ManaColor.BLUE, 2)
        assert not pool.can_pay(ManaCost(colorless=1))

    def test_add_negative_rejected(self):
        with pytest.raises(ValueError):
            ManaPool().add(ManaColor.RED, -1)

    def test_clear(self):
        pool = ManaPool()
        pool.add(ManaColor.BLACK, 4)
        pool.clear()
        assert pool.is_empty()


# =============================================================================
# LAND COLOR RESOLUTION TESTS
# =============================================================================

class TestProducibleColors:
    """Tests for the board-dependent land rules."""

    def test_tapped_land_produces_nothing(self, board):
        state = board(lands=["Island"])
        state.battlefield[0].tap()
        assert producible_colors(state.battlefield[0], state) == frozenset()

    def test_basic(self, board):
        state = board(lands=["Island"])
        assert producible_colors(state.battlefield[0], state) == {ManaColor.BLUE}

    def test_wastewood_verge_needs_enabler(self, board):
        alone = board(lands=["Wastewood Verge"])
        assert producible_colors(alone.battlefield[0], alone) == {ManaColor.GREEN}

        enabled = board(lands=["Wastewood Verge", "Watery Grave"])
        assert ManaColor.BLACK in producible_colors(enabled.battlefield[0], enabled)

    def test_gloomlake_verge_needs_enabler(self, board):
        alone = board(lands=["Gloomlake Verge", "Forest"])
        assert producible_colors(alone.battlefield[0], alone) == {ManaColor.BLUE}

        enabled = board(lands=["Gloomlake Verge", "Swamp"])
        assert ManaColor.BLACK in producible_colors(enabled.battlefield[0], enabled)

    def test_cavern_colors_only_for_chosen_type(self, board, catalog):
        state = board(lands=["Cavern of Souls"])
        cavern = state.battlefield[0]
        cavern.chosen_type = "Human"
        spider_man = catalog.get_card("Superior Spider-Man")
        kiora = catalog.get_card("Kiora, the Rising Tide")

        assert producible_colors(cavern, state) == {ManaColor.COLORLESS}
        assert ManaColor.BLUE in producible_colors(cavern, state, spider_man)
        assert producible_colors(cavern, state, kiora) == {ManaColor.COLORLESS}

    def test_passage_produces_chosen_color(self, board):
        state = board(lands=["Multiversal Passage"])
        state.battlefield[0].chosen_color = ManaColor.GREEN
        assert producible_colors(state.battlefield[0], state) == {ManaColor.GREEN}

    def test_starting_town_needs_life(self, board):
        healthy = board(lands=["Starting Town"])
        assert ManaColor.BLACK in producible_colors(healthy.battlefield[0], healthy)

        dying = board(lands=["Starting Town"], life=1)
        assert producible_colors(dying.battlefield[0], dying) == {ManaColor.COLORLESS}

    def test_available_colors_union(self, board):
        state = board(lands=["Island", "Overgrown Tomb"])
        assert available_colors(state) == {ManaColor.BLUE, ManaColor.BLACK, ManaColor.GREEN}


# =============================================================================
# FEASIBILITY AND PAYMENT TESTS
# =============================================================================

class TestPayment:
    """Tests for can_afford_cost and tap_lands_for_cost."""

    def test_colorless_land_cannot_pay_white(self, state, wastes):
        """A lone colorless land cannot pay {W}."""
        state.battlefield.add(Permanent(card=wastes))
        assert not can_afford_cost(ManaCost(white=1), state)

    def test_white_land_pays_white(self, state, plains):
        state.battlefield.add(Permanent(card=plains))
        assert can_afford_cost(ManaCost(white=1), state)
        assert tap_lands_for_cost(ManaCost(white=1), state)
        assert state.battlefield[0].tapped
        assert state.mana_pool.is_empty()

    def test_not_enough_lands(self, board):
        state = board(lands=["Island", "Swamp"])
        assert not can_afford_cost(ManaCost(generic=3), state)

    def test_backtracking_finds_assignment(self, board):
        """Greedy U-first would take Watery Grave and strand the black pip."""
        state = board(lands=["Watery Grave", "Breeding Pool"])
        cost = ManaCost(blue=1, black=1)
        assert can_afford_cost(cost, state)
        assert tap_lands_for_cost(cost, state)
        assert all(p.tapped for p in state.battlefield)

    def test_infeasible_colors(self, board):
        state = board(lands=["Island", "Island", "Forest"])
        assert not can_afford_cost(ManaCost(black=1), state)

    def test_prefers_single_color_lands(self, board):
        """The flexible land stays untapped when a basic can pay."""
        state = board(lands=["Watery Grave", "Island"])
        assert tap_lands_for_cost(ManaCost(blue=1), state)
        assert not state.battlefield[0].tapped
        assert state.battlefield[1].tapped

    def test_failed_payment_taps_nothing(self, board):
        state = board(lands=["Island", "Forest"])
        assert not tap_lands_for_cost(ManaCost(black=1, generic=1), state)
        assert not any(p.tapped for p in state.battlefield)

    def test_tapped_lands_ignored(self, board):
        state = board(lands=["Swamp", "Swamp"])
        state.battlefield[0].tap()
        assert not can_afford_cost(ManaCost(black=2), state)

    def test_starting_town_colored_costs_life(self, board):
        state = board(lands=["Starting Town"])
        assert tap_lands_for_cost(ManaCost(blue=1), state)
        assert state.life == 19

    def test_starting_town_generic_is_free(self, board):
        state = board(lands=["Starting Town"])
        assert tap_lands_for_cost(ManaCost(generic=1), state)
        assert state.life == 20

    def test_two_towns_at_two_life(self, board):
        """Only one colored pip can come from Starting Towns at 2 life."""
        state = board(lands=["Starting Town", "Starting Town"], life=2)
        assert not can_afford_cost(ManaCost(blue=1, black=1), state)
        assert not tap_lands_for_cost(ManaCost(blue=1, black=1), state)
        assert state.life == 2
        assert not any(p.tapped for p in state.battlefield)

    def test_town_life_budget_leaves_colorless(self, board):
        state = board(lands=["Starting Town", "Starting Town"], life=2)
        assert tap_lands_for_cost(ManaCost(blue=1, generic=1), state)
        assert state.life == 1

    def test_town_budget_spends_other_lands_first(self, board):
        state = board(lands=["Starting Town", "Starting Town", "Swamp"], life=2)
        assert tap_lands_for_cost(ManaCost(blue=1, black=1), state)
        assert state.life == 1

    def test_plan_covers_every_pip(self, board):
        state = board(lands=["Island", "Swamp", "Forest", "Overgrown Tomb"])
        plan = find_payment(ManaCost(generic=2, blue=1, black=1), state)
        assert plan is not None
        assert len(plan) == 4
        assert len({index for index, _ in plan}) == 4


# =============================================================================
# CASTING COST TESTS
# =============================================================================

class TestCastingCost:
    """Tests for impending and castability."""

    def test_overlord_uses_impending(self, board, catalog):
        state = board(lands=["Swamp", "Forest"])
        overlord = catalog.get_card("Overlord of the Balemurk")
        cost, impending = casting_cost(overlord, state)
        assert impending
        assert cost == overlord.impending_cost
        assert can_cast(overlord, state)

    def test_regular_cost_without_impending(self, board, catalog):
        state = board(lands=["Island", "Swamp", "Forest"])
        kiora = catalog.get_card("Kiora, the Rising Tide")
        cost, impending = casting_cost(kiora, state)
        assert not impending
        assert cost == kiora.mana_cost

    def test_lands_are_not_cast(self, board, catalog):
        state = board(lands=["Island"])
        assert not can_cast(catalog.get_card("Forest"), state)

    def test_land_helper(self):
        land = make_land("Test Land", [ManaColor.RED])
        assert land.colors == (ManaColor.RED,)
