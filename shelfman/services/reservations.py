"""
Smart reservations — channel-aware planning across tiers.

Flow for one request:

    PLAN_PRIMARY ──ok──────────────────────────────────────────► DONE
         │ short
         ▼  (approve_secondary_tier, else ApprovalRequired(secondary))
    ESCALATE_SECONDARY ──ok── (approve_main_backfill: top up ─► DONE
         │                    secondary from MAIN if the sale
         │                    leaves it at or below restock level)
         │ short
         ▼  (approve_main_backfill, else ApprovalRequired(MAIN))
    BACKFILL_MAIN ── transfer MAIN → secondary ── re-plan ─────► DONE

Planning never writes. The only writes are MAIN transfers, made only with
approve_main_backfill. Each commits on its own and is not undone if a later
step fails: the moved units stay in the secondary tier, available to any caller.
"""

import logging

from shelfman.exceptions import ApprovalRequired, InsufficientStock, InvalidArgument
from shelfman.models.enums import Channel, Tier
from shelfman.plans import SmartPick
from shelfman.services.selection import FefoBatchSelector

logger = logging.getLogger('shelfman')

# (primary, secondary) per channel
CHANNEL_TIERS = {
    Channel.POS: (Tier.STORE, Tier.SHELF),
    Channel.ONLINE: (Tier.SHELF, Tier.STORE),
}


def tiers_for(channel) -> tuple[Tier, Tier]:
    """
    Primary and secondary tier for a sales channel.

    Accepts a Channel or its name/value in any case ('POS', 'online').

    Raises:
        InvalidArgument: unknown channel
    """
    try:
        channel = Channel(str(channel).lower())
    except ValueError:
        raise InvalidArgument(f'unknown channel {channel!r}', channel=str(channel)) from None
    return CHANNEL_TIERS[channel]


def _available(snapshot) -> int:
    return sum(batch.available for batch in snapshot)


class SmartReservationCoordinator:
    """
    Plans a request across primary, secondary and main tiers.

    Usage:
        coordinator = SmartReservationCoordinator(ledger)
        pick = coordinator.reserve('SKU1', 6, Channel.POS,
                                   approve_secondary_tier=True,
                                   approve_main_backfill=False)
    """

    def __init__(self, ledger, selector: FefoBatchSelector | None = None):
        self.ledger = ledger
        self.selector = selector or FefoBatchSelector(ledger)

    def plan(self, item_code: str, requested_qty: int, channel) -> list:
        """
        Simple path: FEFO plan from the channel's primary tier only.

        Raises:
            InvalidArgument, NotFound, InsufficientStock(primary)
        """
        primary, _ = tiers_for(channel)
        return self.selector.select_for(item_code, requested_qty, primary)

    def reserve(self, item_code: str, requested_qty: int, channel,
                approve_secondary_tier: bool = False,
                approve_main_backfill: bool = False,
                user=None) -> SmartPick:
        """
        Plan ``requested_qty`` units, escalating across tiers as approved.

        Args:
            item_code: Item to reserve
            requested_qty: Units wanted (> 0)
            channel: Channel.POS or Channel.ONLINE
            approve_secondary_tier: operator allows using the other in-store tier
            approve_main_backfill: manager allows moving stock in from MAIN
            user: recorded on the MAIN transfer moves

        Returns:
            SmartPick covering exactly requested_qty units

        Raises:
            InvalidArgument: requested_qty <= 0 or unknown channel
            NotFound: unknown item
            ApprovalRequired: escalation needed but not approved
            InsufficientStock: MAIN cannot cover the remaining shortfall
            TransferFailure: MAIN emptied while transferring
        """
        primary, secondary = tiers_for(channel)

        # PLAN_PRIMARY
        primary_snapshot = self.selector.snapshot(item_code, requested_qty, primary)
        primary_available = _available(primary_snapshot)
        restock_level = self.ledger.restock_level(item_code)
        show_out_of_stock = primary_available == requested_qty

        try:
            primary_plan = self.selector.plan(item_code, requested_qty, primary_snapshot, primary)
        except InsufficientStock:
            pass
        else:
            return self._done(primary, primary_plan, [], restock_level, show_out_of_stock)

        shortfall = requested_qty - primary_available
        if not approve_secondary_tier:
            raise ApprovalRequired(
                secondary,
                item_code=item_code,
                requested=requested_qty,
                available=primary_available,
                shortfall=shortfall,
            )

        # ESCALATE_SECONDARY
        primary_plan = []
        if primary_available > 0:
            primary_plan = self.selector.plan(item_code, primary_available, primary_snapshot, primary)

        secondary_snapshot = self.ledger.snapshot_batches(item_code, secondary)
        secondary_available = _available(secondary_snapshot)

        logger.info(
            "shelfman.reserve.escalated",
            extra={
                "item_code": item_code,
                "primary": primary.value,
                "secondary": secondary.value,
                "shortfall": str(shortfall),
                "secondary_available": str(secondary_available),
            },
        )

        try:
            secondary_plan = self.selector.plan(item_code, shortfall, secondary_snapshot, secondary)
        except InsufficientStock:
            pass
        else:
            backfilled = False
            if approve_main_backfill:
                backfilled = self._top_up(
                    item_code, secondary, secondary_available - shortfall, restock_level, user,
                )
            return self._done(
                primary, primary_plan, secondary_plan, restock_level, show_out_of_stock,
                backfilled=backfilled,
            )

        if not approve_main_backfill:
            raise ApprovalRequired(
                Tier.MAIN,
                item_code=item_code,
                requested=requested_qty,
                available=primary_available + secondary_available,
                shortfall=shortfall - secondary_available,
            )

        # BACKFILL_MAIN
        secondary_shortfall = shortfall - secondary_available
        main_qty = self.ledger.tier_quantity(item_code, Tier.MAIN)
        if main_qty < secondary_shortfall:
            raise InsufficientStock(
                Tier.MAIN,
                item_code=item_code,
                available=main_qty,
                requested=secondary_shortfall,
            )

        to_move = max(secondary_shortfall, min(main_qty, restock_level - secondary_available))
        moved = self.ledger.transfer(
            item_code, Tier.MAIN, secondary, to_move,
            reason='Reposição do armazém', user=user,
        )

        logger.info(
            "shelfman.reserve.backfill",
            extra={
                "item_code": item_code,
                "to_tier": secondary.value,
                "shortfall": str(secondary_shortfall),
                "moved": str(moved),
                "restock_level": str(restock_level),
            },
        )

        try:
            secondary_plan = self.selector.select_for(item_code, shortfall, secondary)
        except InsufficientStock:
            # Transferred units stay in the secondary tier
            logger.warning(
                "shelfman.reserve.backfill_consumed",
                extra={
                    "item_code": item_code,
                    "tier": secondary.value,
                    "moved": str(moved),
                },
            )
            raise

        return self._done(
            primary, primary_plan, secondary_plan, restock_level, show_out_of_stock,
            used_main=True,
            backfilled=moved > secondary_shortfall,
        )

    def _top_up(self, item_code: str, secondary: Tier, secondary_after: int,
                restock_level: int, user) -> bool:
        """
        Refill the secondary tier from MAIN when the sale leaves it at or
        below the restock level.

        Only adds stock to the tier the plan draws from, so the plan stays valid.

        Returns:
            True if any units were moved
        """
        if secondary_after > restock_level:
            return False

        main_qty = self.ledger.tier_quantity(item_code, Tier.MAIN)
        to_move = min(restock_level - secondary_after, main_qty)
        if to_move <= 0:
            return False

        moved = self.ledger.transfer(
            item_code, Tier.MAIN, secondary, to_move,
            reason='Reposição do armazém', user=user,
        )
        logger.info(
            "shelfman.reserve.top_up",
            extra={
                "item_code": item_code,
                "to_tier": secondary.value,
                "secondary_after": str(secondary_after),
                "moved": str(moved),
                "restock_level": str(restock_level),
            },
        )
        return moved > 0

    def _done(self, primary: Tier, primary_plan, secondary_plan, restock_level: int,
              show_out_of_stock: bool, used_main: bool = False,
              backfilled: bool = False) -> SmartPick:
        if primary == Tier.SHELF:
            shelf, store = primary_plan, secondary_plan
        else:
            shelf, store = secondary_plan, primary_plan

        return SmartPick(
            shelf_reservations=tuple(shelf),
            store_reservations=tuple(store),
            used_main_to_fulfill=used_main,
            backfilled_secondary_to_restock_level=backfilled,
            restock_level=restock_level,
            show_out_of_stock_message=show_out_of_stock,
            primary_tier=primary,
        )
