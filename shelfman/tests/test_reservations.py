"""
Tests for smart reservations across tiers.
"""

from datetime import timedelta

import pytest

from shelfman.adapters.memory import InMemoryLedger
from shelfman.exceptions import ApprovalRequired, InsufficientStock, InvalidArgument, NotFound
from shelfman.models.enums import Channel, Tier
from shelfman.plans import plan_total
from shelfman.services.commit import ReservationCommitter
from shelfman.services.reservations import SmartReservationCoordinator, tiers_for


@pytest.fixture
def coordinator(shop):
    return SmartReservationCoordinator(shop)


@pytest.fixture
def empty_shelf(ledger, today):
    """SKU1 shelf=0 store=2 main=10, restock level 5."""
    ledger.add_item('SKU1', restock_level=5)
    ledger.add_batch('SKU1', today + timedelta(days=4), store=2, main=10)
    return ledger


def _quantities(ledger, item_code):
    return {tier: ledger.tier_quantity(item_code, tier) for tier in Tier}


class TestChannelTiers:
    """Channel → (primary, secondary)."""

    def test_pos(self):
        assert tiers_for(Channel.POS) == (Tier.STORE, Tier.SHELF)

    def test_online(self):
        assert tiers_for(Channel.ONLINE) == (Tier.SHELF, Tier.STORE)

    def test_case_insensitive(self):
        assert tiers_for('POS') == (Tier.STORE, Tier.SHELF)

    def test_unknown_channel(self):
        with pytest.raises(InvalidArgument) as exc:
            tiers_for('fax')

        assert exc.value.code == 'INVALID_ARGUMENT'


class TestPrimaryOnly:
    """Requests the primary tier can cover."""

    def test_pos_uses_store(self, coordinator):
        pick = coordinator.reserve('SKU1', 1, Channel.POS)

        assert plan_total(pick.store_reservations) == 1
        assert pick.shelf_reservations == ()
        assert pick.used_main_to_fulfill is False
        assert pick.show_out_of_stock_message is False

    def test_online_uses_shelf(self, coordinator):
        pick = coordinator.reserve('SKU1', 4, Channel.ONLINE)

        assert plan_total(pick.shelf_reservations) == 4
        assert pick.store_reservations == ()
        assert pick.primary_tier == Tier.SHELF

    def test_exact_primary_sets_out_of_stock_flag(self, coordinator):
        """shelf=3 store=0, ONLINE 3: primary emptied, flag raised."""
        pick = coordinator.reserve('SKU2', 3, Channel.ONLINE,
                                   approve_secondary_tier=True,
                                   approve_main_backfill=True)

        assert pick.show_out_of_stock_message is True
        assert plan_total(pick.shelf_reservations) == 3
        assert pick.store_reservations == ()

    def test_simple_plan(self, coordinator):
        plan = coordinator.plan('SKU1', 2, Channel.POS)

        assert plan_total(plan) == 2

    def test_simple_plan_never_escalates(self, coordinator):
        with pytest.raises(InsufficientStock) as exc:
            coordinator.plan('SKU1', 3, Channel.POS)

        assert exc.value.tier == Tier.STORE

    def test_planning_writes_nothing(self, coordinator, shop):
        before = _quantities(shop, 'SKU1')

        coordinator.reserve('SKU1', 6, Channel.POS, approve_secondary_tier=True)

        assert _quantities(shop, 'SKU1') == before
        assert shop.moves == []


class TestEscalateSecondary:
    """Primary short, operator approval for the other in-store tier."""

    def test_pos_takes_store_then_shelf(self, coordinator, shop):
        """SKU1 shelf=5 store=2, POS 6 → store 2 + shelf 4."""
        pick = coordinator.reserve('SKU1', 6, Channel.POS,
                                   approve_secondary_tier=True,
                                   approve_main_backfill=True)

        assert plan_total(pick.store_reservations) == 2
        assert plan_total(pick.shelf_reservations) == 4
        assert pick.total_quantity == 6
        assert pick.used_main_to_fulfill is False
        assert pick.restock_level == 5

    def test_without_manager_approval_main_untouched(self, coordinator, shop):
        pick = coordinator.reserve('SKU1', 6, Channel.POS, approve_secondary_tier=True)

        assert pick.backfilled_secondary_to_restock_level is False
        assert shop.tier_quantity('SKU1', Tier.MAIN) == 10
        assert shop.tier_quantity('SKU1', Tier.SHELF) == 5

    def test_needs_operator_approval(self, coordinator, shop):
        """Without approvals: ApprovalRequired(SHELF), nothing changes."""
        before = _quantities(shop, 'SKU1')

        with pytest.raises(ApprovalRequired) as exc:
            coordinator.reserve('SKU1', 6, Channel.POS)

        assert exc.value.code == 'APPROVAL_REQUIRED'
        assert exc.value.tier == Tier.SHELF
        assert exc.value.data['shortfall'] == 4
        assert _quantities(shop, 'SKU1') == before

    def test_online_escalates_to_store(self, coordinator):
        pick = coordinator.reserve('SKU1', 7, Channel.ONLINE, approve_secondary_tier=True)

        assert plan_total(pick.shelf_reservations) == 5
        assert plan_total(pick.store_reservations) == 2

    def test_empty_primary(self, ledger, today):
        """Nothing in primary: the whole request comes from secondary."""
        ledger.add_item('SKU5', restock_level=5)
        ledger.add_batch('SKU5', today, shelf=4)

        pick = SmartReservationCoordinator(ledger).reserve(
            'SKU5', 3, Channel.POS, approve_secondary_tier=True,
        )

        assert pick.store_reservations == ()
        assert plan_total(pick.shelf_reservations) == 3


class TestTopUpAfterSale:
    """Secondary covers the shortfall; manager approval refills it from MAIN."""

    def test_tops_up_secondary_to_restock_level(self, coordinator, shop):
        """SKU1 shelf=5 store=2 restock=5, POS 6: shelf left with 1, refilled by 4."""
        pick = coordinator.reserve('SKU1', 6, Channel.POS,
                                   approve_secondary_tier=True,
                                   approve_main_backfill=True)

        assert pick.used_main_to_fulfill is False
        assert pick.backfilled_secondary_to_restock_level is True
        assert shop.tier_quantity('SKU1', Tier.MAIN) == 6
        assert shop.tier_quantity('SKU1', Tier.SHELF) == 9

    def test_plan_still_commits(self, coordinator, shop):
        """The refill only adds to the planned tier; the shelf ends at the restock level."""
        pick = coordinator.reserve('SKU1', 6, Channel.POS,
                                   approve_secondary_tier=True,
                                   approve_main_backfill=True)

        ReservationCommitter(shop).commit_pick(pick)

        assert shop.tier_quantity('SKU1', Tier.SHELF) == 5
        assert shop.tier_quantity('SKU1', Tier.STORE) == 0

    def test_skipped_when_secondary_stays_above_level(self, ledger, today):
        ledger.add_item('SKU1', restock_level=5)
        ledger.add_batch('SKU1', today, shelf=20, store=2, main=10)

        pick = SmartReservationCoordinator(ledger).reserve(
            'SKU1', 6, Channel.POS,
            approve_secondary_tier=True,
            approve_main_backfill=True,
        )

        assert pick.backfilled_secondary_to_restock_level is False
        assert ledger.tier_quantity('SKU1', Tier.MAIN) == 10
        assert ledger.moves == []

    def test_limited_by_main(self, ledger, today):
        """Needs 4, MAIN holds 1."""
        ledger.add_item('SKU1', restock_level=5)
        ledger.add_batch('SKU1', today, shelf=5, store=2, main=1)

        pick = SmartReservationCoordinator(ledger).reserve(
            'SKU1', 6, Channel.POS,
            approve_secondary_tier=True,
            approve_main_backfill=True,
        )

        assert pick.backfilled_secondary_to_restock_level is True
        assert ledger.tier_quantity('SKU1', Tier.MAIN) == 0
        assert ledger.tier_quantity('SKU1', Tier.SHELF) == 6

    def test_empty_main_moves_nothing(self, ledger, today):
        ledger.add_item('SKU1', restock_level=5)
        ledger.add_batch('SKU1', today, shelf=5, store=2)

        pick = SmartReservationCoordinator(ledger).reserve(
            'SKU1', 6, Channel.POS,
            approve_secondary_tier=True,
            approve_main_backfill=True,
        )

        assert pick.backfilled_secondary_to_restock_level is False
        assert ledger.moves == []


class TestBackfillMain:
    """Primary and secondary short, manager approval to pull from MAIN."""

    def test_needs_manager_approval(self, empty_shelf):
        """shelf=0 store=2 main=10, POS 6 → ApprovalRequired(MAIN)."""
        with pytest.raises(ApprovalRequired) as exc:
            SmartReservationCoordinator(empty_shelf).reserve(
                'SKU1', 6, Channel.POS,
                approve_secondary_tier=True,
                approve_main_backfill=False,
            )

        assert exc.value.tier == Tier.MAIN
        assert empty_shelf.tier_quantity('SKU1', Tier.MAIN) == 10
        assert empty_shelf.moves == []

    def test_backfills_to_restock_level(self, empty_shelf):
        """Shortfall 4, restock level 5: moves 5 from MAIN to the shelf."""
        pick = SmartReservationCoordinator(empty_shelf).reserve(
            'SKU1', 6, Channel.POS,
            approve_secondary_tier=True,
            approve_main_backfill=True,
        )

        assert pick.used_main_to_fulfill is True
        assert pick.backfilled_secondary_to_restock_level is True
        assert plan_total(pick.store_reservations) == 2
        assert plan_total(pick.shelf_reservations) == 4
        assert empty_shelf.tier_quantity('SKU1', Tier.MAIN) == 5
        assert empty_shelf.tier_quantity('SKU1', Tier.SHELF) == 5

    def test_moves_only_shortfall_when_above_restock_level(self, ledger, today):
        """Restock level 2 below the shortfall: moves exactly the shortfall."""
        ledger.add_item('SKU1', restock_level=2)
        ledger.add_batch('SKU1', today, store=2, main=10)

        pick = SmartReservationCoordinator(ledger).reserve(
            'SKU1', 6, Channel.POS,
            approve_secondary_tier=True,
            approve_main_backfill=True,
        )

        assert pick.used_main_to_fulfill is True
        assert pick.backfilled_secondary_to_restock_level is False
        assert ledger.tier_quantity('SKU1', Tier.MAIN) == 6

    def test_main_short(self, ledger, today):
        """MAIN holds less than the remaining shortfall → InsufficientStock(MAIN)."""
        ledger.add_item('SKU1', restock_level=5)
        ledger.add_batch('SKU1', today, store=2, main=1)

        with pytest.raises(InsufficientStock) as exc:
            SmartReservationCoordinator(ledger).reserve(
                'SKU1', 6, Channel.POS,
                approve_secondary_tier=True,
                approve_main_backfill=True,
            )

        assert exc.value.tier == Tier.MAIN
        assert exc.value.available == 1
        assert exc.value.requested == 4
        assert ledger.moves == []

    def test_transferred_units_stay_when_replan_fails(self, today):
        """Another caller drains part of the backfill before the re-plan."""

        class RacingLedger(InMemoryLedger):
            def transfer(self, item_code, from_tier, to_tier, qty, reason='Transferência', user=None):
                moved = super().transfer(item_code, from_tier, to_tier, qty, reason=reason, user=user)
                batch_id = self.snapshot_batches(item_code, to_tier)[0].batch_id
                self.conditional_decrement(batch_id, to_tier, 2)
                return moved

        ledger = RacingLedger()
        ledger.add_item('SKU1', restock_level=5)
        ledger.add_batch('SKU1', today, store=2, main=10)

        with pytest.raises(InsufficientStock) as exc:
            SmartReservationCoordinator(ledger).reserve(
                'SKU1', 6, Channel.POS,
                approve_secondary_tier=True,
                approve_main_backfill=True,
            )

        assert exc.value.tier == Tier.SHELF
        assert ledger.tier_quantity('SKU1', Tier.MAIN) == 5
        assert ledger.tier_quantity('SKU1', Tier.SHELF) == 3


class TestInvalidRequests:

    @pytest.mark.parametrize('qty', [0, -3])
    def test_non_positive_quantity(self, coordinator, shop, qty):
        with pytest.raises(InvalidArgument):
            coordinator.reserve('SKU1', qty, Channel.POS,
                                approve_secondary_tier=True,
                                approve_main_backfill=True)

        assert shop.moves == []

    def test_unknown_item(self, coordinator):
        with pytest.raises(NotFound):
            coordinator.reserve('NOPE', 1, Channel.ONLINE)
