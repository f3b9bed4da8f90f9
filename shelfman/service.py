"""
Inventory Service — The single public interface for checkout and back office.

Usage:
    from shelfman import Inventory, StockError

    inventory = Inventory()
    pick = inventory.reserve_smart('SKU1', 6, 'pos',
                                   approve_secondary_tier=True)
    inventory.commit_pick(pick, reference='order-42')
"""

from shelfman.adapters import get_ledger
from shelfman.models.enums import Tier
from shelfman.services import (
    FefoBatchSelector,
    ReservationCommitter,
    RestockService,
    SmartReservationCoordinator,
)


class Inventory:
    """
    Wires the allocation services around one ledger.

    Parameter convention: (item_code, quantity, channel/tier, ...)

    IMPORTANT: planning never writes. Only commit*, restock* and the
    approved MAIN backfill inside reserve_smart change tier quantities.
    """

    def __init__(self, ledger=None):
        self.ledger = ledger if ledger is not None else get_ledger()
        self.selector = FefoBatchSelector(self.ledger)
        self.coordinator = SmartReservationCoordinator(self.ledger, self.selector)
        self.committer = ReservationCommitter(self.ledger)
        self.restocker = RestockService(self.ledger)

    # ══════════════════════════════════════════════════════════════
    # CHECKOUT
    # ══════════════════════════════════════════════════════════════

    def plan_reservation(self, item_code: str, qty: int, channel) -> list:
        """FEFO plan from the channel's primary tier. Read-only."""
        return self.coordinator.plan(item_code, qty, channel)

    def reserve_smart(self, item_code: str, qty: int, channel,
                      approve_secondary_tier: bool = False,
                      approve_main_backfill: bool = False,
                      user=None):
        """
        Plan across tiers with operator/manager approvals.

        Returns:
            SmartPick (not yet committed)

        Raises:
            ApprovalRequired: escalation needed but not approved
            InsufficientStock, NotFound, InvalidArgument, TransferFailure
        """
        return self.coordinator.reserve(
            item_code, qty, channel,
            approve_secondary_tier=approve_secondary_tier,
            approve_main_backfill=approve_main_backfill,
            user=user,
        )

    def commit(self, reservations, tier, reference: str = '', user=None) -> None:
        """Apply reservations to one tier, all or nothing."""
        self.committer.commit(reservations, tier, reference=reference, user=user)

    def commit_pick(self, pick, reference: str = '', user=None) -> None:
        """Apply both tiers of a SmartPick in one transaction."""
        self.committer.commit_pick(pick, reference=reference, user=user)

    # ══════════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════════

    def tier_quantity(self, item_code: str, tier) -> int:
        return self.ledger.tier_quantity(item_code, Tier(tier))

    def restock_level(self, item_code: str) -> int:
        return self.ledger.restock_level(item_code)

    def item(self, item_code: str):
        """ItemInfo or None."""
        return self.ledger.find_item(item_code)

    def is_low_stock(self, item_code: str) -> bool:
        return self.restocker.is_low_stock(item_code)

    # ══════════════════════════════════════════════════════════════
    # RESTOCK
    # ══════════════════════════════════════════════════════════════

    def restock_fixed(self, item_code: str, fixed_qty: int) -> int:
        return self.restocker.restock_fixed(item_code, fixed_qty)

    def restock_to_target(self, item_code: str, target_shelf_qty: int) -> int:
        return self.restocker.restock_to_target(item_code, target_shelf_qty)

    def restock_if_below(self, item_code: str, threshold: int | None = None,
                         fixed_qty: int | None = None) -> int:
        return self.restocker.restock_if_below(item_code, threshold=threshold, fixed_qty=fixed_qty)

    def restock_all(self, threshold: int | None = None,
                    fixed_qty: int | None = None) -> dict[str, int]:
        return self.restocker.restock_all(threshold=threshold, fixed_qty=fixed_qty)
