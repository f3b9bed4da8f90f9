"""
Restocking — background store → shelf top-up.

Independent of request-time smart reservations. Meant to run periodically
(management command ``restock_shelves``, celery beat, cron).
"""

import logging

from shelfman.conf import shelfman_settings
from shelfman.exceptions import InsufficientStock, InvalidArgument, NotFound
from shelfman.models.enums import Tier
from shelfman.signals import restock_threshold_hit

logger = logging.getLogger('shelfman')


class RestockPolicy:
    """Pure restock decisions. No ledger access."""

    def needs_restock(self, shelf_qty: int, threshold: int) -> bool:
        return shelf_qty < threshold

    def quantity_to_move(self, store_qty: int, fixed_qty: int) -> int:
        return max(0, min(store_qty, fixed_qty))

    def is_low_stock(self, shelf_qty: int, store_qty: int, restock_level: int) -> bool:
        """In-store stock (shelf + backroom) at or below the restock level."""
        return shelf_qty + store_qty <= restock_level


class RestockService:
    """
    Moves stock from the backroom store to the shelf.

    Usage:
        service = RestockService(ledger)
        service.restock_if_below('SKU1')           # top up to restock level
        service.restock_fixed('SKU1', 10)          # move 10 now
    """

    def __init__(self, ledger, policy: RestockPolicy | None = None):
        self.ledger = ledger
        self.policy = policy or RestockPolicy()

    def restock_fixed(self, item_code: str, fixed_qty: int) -> int:
        """
        Move up to ``fixed_qty`` units store → shelf.

        Returns:
            Units moved

        Raises:
            NotFound: unknown item
            InvalidArgument: fixed_qty <= 0
            InsufficientStock(STORE): store is empty
        """
        self._require_item(item_code)
        if fixed_qty <= 0:
            raise InvalidArgument('fixed_qty must be > 0', requested=fixed_qty)

        store = self._require_store_stock(item_code)
        return self._move(item_code, self.policy.quantity_to_move(store, fixed_qty))

    def restock_to_target(self, item_code: str, target_shelf_qty: int) -> int:
        """
        Bring the shelf up to ``target_shelf_qty`` units if the store allows.

        Returns:
            Units moved (0 if the shelf already holds the target)

        Raises:
            NotFound, InvalidArgument, InsufficientStock(STORE)
        """
        self._require_item(item_code)
        if target_shelf_qty <= 0:
            raise InvalidArgument('target_shelf_qty must be > 0', requested=target_shelf_qty)

        shelf = self.ledger.tier_quantity(item_code, Tier.SHELF)
        if shelf >= target_shelf_qty:
            return 0

        store = self._require_store_stock(item_code)
        return self._move(item_code, self.policy.quantity_to_move(store, target_shelf_qty - shelf))

    def restock_if_below(self, item_code: str, threshold: int | None = None,
                         fixed_qty: int | None = None) -> int:
        """
        Top up the shelf when the policy says it is low.

        Args:
            item_code: Item to check
            threshold: Shelf level that triggers restock (None = item restock level)
            fixed_qty: Units to move (None = SHELFMAN['RESTOCK_FIXED_QTY'], and
                when that is 0, up to the threshold)

        Returns:
            Units moved (0 when not needed or the store is empty)
        """
        self._require_item(item_code)
        if fixed_qty is not None and fixed_qty <= 0:
            raise InvalidArgument('fixed_qty must be > 0', requested=fixed_qty)

        if threshold is None:
            threshold = self.ledger.restock_level(item_code)

        shelf = self.ledger.tier_quantity(item_code, Tier.SHELF)
        if not self.policy.needs_restock(shelf, threshold):
            return 0

        restock_threshold_hit.send(
            sender=type(self),
            item_code=item_code,
            shelf_qty=shelf,
            threshold=threshold,
        )

        store = self.ledger.tier_quantity(item_code, Tier.STORE)
        if store <= 0:
            logger.warning(
                "shelfman.restock.skipped",
                extra={
                    "item_code": item_code,
                    "shelf": str(shelf),
                    "threshold": str(threshold),
                    "reason": "store empty",
                },
            )
            return 0

        if fixed_qty is None:
            fixed_qty = shelfman_settings.RESTOCK_FIXED_QTY or threshold - shelf

        return self._move(item_code, self.policy.quantity_to_move(store, fixed_qty))

    def restock_all(self, threshold: int | None = None,
                    fixed_qty: int | None = None) -> dict[str, int]:
        """
        Run restock_if_below for every catalog item.

        Returns:
            {item_code: units moved} for items that received stock
        """
        moved = {}
        for item_code in self.ledger.item_codes():
            qty = self.restock_if_below(item_code, threshold=threshold, fixed_qty=fixed_qty)
            if qty:
                moved[item_code] = qty
        return moved

    def is_low_stock(self, item_code: str) -> bool:
        """Shelf + store at or below the item's restock level."""
        self._require_item(item_code)
        return self.policy.is_low_stock(
            self.ledger.tier_quantity(item_code, Tier.SHELF),
            self.ledger.tier_quantity(item_code, Tier.STORE),
            self.ledger.restock_level(item_code),
        )

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    def _require_item(self, item_code: str) -> None:
        if self.ledger.find_item(item_code) is None:
            raise NotFound(item_code)

    def _require_store_stock(self, item_code: str) -> int:
        store = self.ledger.tier_quantity(item_code, Tier.STORE)
        if store <= 0:
            raise InsufficientStock(Tier.STORE, item_code=item_code, available=store)
        return store

    def _move(self, item_code: str, qty: int) -> int:
        if qty <= 0:
            return 0
        moved = self.ledger.transfer(
            item_code, Tier.STORE, Tier.SHELF, qty, reason='Reposição da prateleira',
        )
        logger.info(
            "shelfman.restock",
            extra={"item_code": item_code, "moved": str(moved)},
        )
        return moved
