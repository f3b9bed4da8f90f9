"""
FEFO batch selection — pure allocation planning.

Never writes to the ledger. A plan either covers the full requested
quantity or is not returned at all.
"""

import logging

from shelfman.exceptions import InsufficientStock, InvalidArgument, NotFound
from shelfman.models.enums import Tier
from shelfman.plans import Reservation

logger = logging.getLogger('shelfman')


def plan_from_snapshot(item_code: str, requested_qty: int, snapshot, tier) -> list[Reservation]:
    """
    Build a FEFO plan from an already FEFO-ordered snapshot.

    Args:
        item_code: Item being planned
        requested_qty: Units wanted (> 0)
        snapshot: BatchSnapshot rows for one tier, FEFO-ordered
        tier: Tier the snapshot was taken from (for error reporting)

    Returns:
        Reservations whose quantities sum to requested_qty

    Raises:
        InvalidArgument: requested_qty <= 0
        InsufficientStock: the snapshot holds fewer than requested_qty units
    """
    if requested_qty <= 0:
        raise InvalidArgument('qty must be > 0', requested=requested_qty)

    remaining = requested_qty
    plan = []

    for batch in snapshot:
        if remaining == 0:
            break
        take = min(batch.available, remaining)
        if take > 0:
            plan.append(Reservation(batch.batch_id, item_code, take))
            remaining -= take

    if remaining > 0:
        raise InsufficientStock(
            Tier(tier),
            item_code=item_code,
            available=requested_qty - remaining,
            requested=requested_qty,
        )
    return plan


class FefoBatchSelector:
    """
    First-expiring-first-out planner over one tier of the ledger.

    Usage:
        selector = FefoBatchSelector(ledger)
        plan = selector.select_for('SKU1', 4, Tier.SHELF)
    """

    def __init__(self, ledger):
        self.ledger = ledger

    def select_for(self, item_code: str, requested_qty: int, tier) -> list[Reservation]:
        """
        Plan ``requested_qty`` units from the tier's current snapshot.

        Raises:
            InvalidArgument: requested_qty <= 0
            NotFound: unknown item code
            InsufficientStock: not enough units in the tier
        """
        snapshot = self.snapshot(item_code, requested_qty, tier)
        return self.plan(item_code, requested_qty, snapshot, tier)

    def snapshot(self, item_code: str, requested_qty: int, tier):
        """Validate the request and read the tier's FEFO snapshot."""
        if requested_qty <= 0:
            raise InvalidArgument('qty must be > 0', requested=requested_qty)
        if self.ledger.find_item(item_code) is None:
            raise NotFound(item_code)
        return self.ledger.snapshot_batches(item_code, tier)

    def plan(self, item_code: str, requested_qty: int, snapshot, tier) -> list[Reservation]:
        plan = plan_from_snapshot(item_code, requested_qty, snapshot, tier)
        logger.debug(
            "shelfman.plan",
            extra={
                "item_code": item_code,
                "tier": Tier(tier).value,
                "qty": str(requested_qty),
                "batches": [r.batch_id for r in plan],
            },
        )
        return plan
