"""
Plan types — what the engine hands back to checkout.

A plan is a list of Reservations. Nothing is decremented until the plan
goes through ReservationCommitter.commit().
"""

from __future__ import annotations

from dataclasses import dataclass, field

from shelfman.models.enums import Tier


@dataclass(frozen=True)
class Reservation:
    """Take ``quantity`` units of ``item_code`` from batch ``batch_id``."""

    batch_id: int
    item_code: str
    quantity: int


def plan_total(reservations) -> int:
    """Sum of reserved units."""
    return sum(r.quantity for r in reservations)


@dataclass(frozen=True)
class SmartPick:
    """
    Result of a smart reservation.

    Attributes:
        shelf_reservations: Commit against Tier.SHELF
        store_reservations: Commit against Tier.STORE
        used_main_to_fulfill: MAIN stock had to be moved in to cover the request
        backfilled_secondary_to_restock_level: the MAIN transfer moved more than
            the shortfall, topping the secondary tier up toward its restock level
        restock_level: the item's restock level at plan time
        show_out_of_stock_message: committing empties the primary tier
    """

    shelf_reservations: tuple[Reservation, ...] = ()
    store_reservations: tuple[Reservation, ...] = ()
    used_main_to_fulfill: bool = False
    backfilled_secondary_to_restock_level: bool = False
    restock_level: int = 0
    show_out_of_stock_message: bool = False
    primary_tier: Tier | None = field(default=None, compare=False)

    def reservations_for(self, tier) -> tuple[Reservation, ...]:
        """Reservations to commit against ``tier``."""
        tier = Tier(tier)
        if tier == Tier.SHELF:
            return self.shelf_reservations
        if tier == Tier.STORE:
            return self.store_reservations
        return ()

    @property
    def total_quantity(self) -> int:
        return plan_total(self.shelf_reservations) + plan_total(self.store_reservations)

    @property
    def tiers_used(self) -> list[Tier]:
        """Tiers with at least one reservation, shelf first."""
        return [t for t in (Tier.SHELF, Tier.STORE) if self.reservations_for(t)]
