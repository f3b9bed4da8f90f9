"""
Tests for background store → shelf restocking.
"""

import logging

import pytest

from shelfman.exceptions import InsufficientStock, InvalidArgument, NotFound
from shelfman.models.enums import Tier
from shelfman.services.restock import RestockPolicy, RestockService
from shelfman.signals import restock_threshold_hit


@pytest.fixture
def restocker(shop):
    return RestockService(shop)


@pytest.fixture
def hits():
    calls = []

    def handler(sender, item_code, shelf_qty, threshold, **kwargs):
        calls.append((item_code, shelf_qty, threshold))

    restock_threshold_hit.connect(handler, weak=False)
    yield calls
    restock_threshold_hit.disconnect(handler)


class TestRestockPolicy:
    """Pure policy decisions."""

    @pytest.mark.parametrize('shelf, threshold, expected', [
        (4, 5, True),
        (5, 5, False),
        (0, 1, True),
        (9, 5, False),
    ])
    def test_needs_restock(self, shelf, threshold, expected):
        assert RestockPolicy().needs_restock(shelf, threshold) is expected

    @pytest.mark.parametrize('store, fixed, expected', [
        (3, 10, 3),
        (10, 4, 4),
        (0, 5, 0),
        (5, -1, 0),
    ])
    def test_quantity_to_move(self, store, fixed, expected):
        assert RestockPolicy().quantity_to_move(store, fixed) == expected


class TestRestockFixed:

    def test_moves_what_store_has(self, restocker, shop):
        """Asks for 10, store holds 2."""
        assert restocker.restock_fixed('SKU1', 10) == 2
        assert shop.tier_quantity('SKU1', Tier.SHELF) == 7
        assert shop.tier_quantity('SKU1', Tier.STORE) == 0

    def test_records_moves(self, restocker, shop):
        restocker.restock_fixed('SKU1', 1)

        assert [(m.tier, m.delta) for m in shop.moves] == [(Tier.STORE, -1), (Tier.SHELF, 1)]
        assert {m.reason for m in shop.moves} == {'Reposição da prateleira'}

    def test_invalid_quantity(self, restocker):
        with pytest.raises(InvalidArgument):
            restocker.restock_fixed('SKU1', 0)

    def test_unknown_item(self, restocker):
        with pytest.raises(NotFound):
            restocker.restock_fixed('NOPE', 1)

    def test_empty_store(self, restocker):
        with pytest.raises(InsufficientStock) as exc:
            restocker.restock_fixed('SKU2', 1)

        assert exc.value.tier == Tier.STORE


class TestRestockToTarget:

    def test_tops_up(self, restocker, shop):
        assert restocker.restock_to_target('SKU1', 6) == 1
        assert shop.tier_quantity('SKU1', Tier.SHELF) == 6

    def test_already_at_target(self, restocker, shop):
        assert restocker.restock_to_target('SKU1', 5) == 0
        assert shop.moves == []

    def test_limited_by_store(self, restocker):
        assert restocker.restock_to_target('SKU1', 50) == 2


class TestRestockIfBelow:

    def test_not_below_restock_level(self, restocker, shop, hits):
        """SKU1 shelf=5, restock level 5: nothing to do."""
        assert restocker.restock_if_below('SKU1') == 0
        assert hits == []
        assert shop.moves == []

    def test_tops_up_to_threshold(self, restocker, shop, hits):
        assert restocker.restock_if_below('SKU1', threshold=6) == 1
        assert hits == [('SKU1', 5, 6)]
        assert shop.tier_quantity('SKU1', Tier.SHELF) == 6

    def test_fixed_quantity(self, restocker, shop):
        assert restocker.restock_if_below('SKU1', threshold=6, fixed_qty=2) == 2
        assert shop.tier_quantity('SKU1', Tier.SHELF) == 7

    def test_fixed_quantity_from_settings(self, restocker, shop, settings):
        settings.SHELFMAN = {'RESTOCK_FIXED_QTY': 2}

        assert restocker.restock_if_below('SKU1', threshold=6) == 2

    def test_empty_store_warns(self, restocker, hits, caplog):
        """SKU2 shelf=3 below threshold but the store is empty."""
        with caplog.at_level(logging.WARNING, logger='shelfman'):
            assert restocker.restock_if_below('SKU2', threshold=5) == 0

        assert hits == [('SKU2', 3, 5)]
        assert 'shelfman.restock.skipped' in caplog.messages

    def test_invalid_fixed_quantity(self, restocker):
        with pytest.raises(InvalidArgument):
            restocker.restock_if_below('SKU1', threshold=6, fixed_qty=0)


class TestRestockAll:

    def test_reports_items_restocked(self, restocker, shop):
        assert restocker.restock_all(threshold=10) == {'SKU1': 2}
        assert shop.tier_quantity('SKU2', Tier.SHELF) == 3


class TestLowStock:
    """Shelf + store at or below the restock level."""

    def test_above_level(self, restocker):
        """SKU1: 5 + 2 > 5."""
        assert restocker.is_low_stock('SKU1') is False

    def test_default_level(self, restocker):
        """SKU2 has no restock level: default 50."""
        assert restocker.is_low_stock('SKU2') is True

    def test_after_sale(self, restocker, shop):
        batch_id = shop.snapshot_batches('SKU1', Tier.SHELF)[0].batch_id
        shop.conditional_decrement(batch_id, Tier.SHELF, 2)

        assert restocker.is_low_stock('SKU1') is True
