"""
Reservation commit — turns a plan into durable decrements.

All conditional writes of one commit() run inside one ledger transaction.
A single zero-row write aborts the whole call.
"""

import logging

from shelfman.exceptions import ConcurrencyConflict, InvalidArgument
from shelfman.models.enums import Tier
from shelfman.plans import plan_total
from shelfman.signals import stock_depleted

logger = logging.getLogger('shelfman')


class ReservationCommitter:
    """
    Synchronization point for concurrent callers.

    Usage:
        committer = ReservationCommitter(ledger)
        committer.commit(pick.store_reservations, Tier.STORE)

    Concurrency:
        - Each reservation is a compare-and-swap style conditional decrement
        - Runs under ledger.atomic(); a conflict rolls every write back
        - Never re-plans: after ConcurrencyConflict the caller must ask the
          coordinator for a fresh plan
    """

    def __init__(self, ledger):
        self.ledger = ledger

    def commit(self, reservations, tier, reference: str = '', user=None) -> None:
        """
        Decrement ``tier`` by every reservation, all or nothing.

        Raises:
            InvalidArgument: a reservation has quantity <= 0
            ConcurrencyConflict: a batch no longer holds the reserved units
        """
        tier = Tier(tier)
        reservations = list(reservations)
        if not reservations:
            return

        with self.ledger.atomic():
            self._apply(reservations, tier, reference, user)

        self._committed(reservations, tier, reference)

    def commit_pick(self, pick, reference: str = '', user=None) -> None:
        """
        Commit both tiers of a SmartPick in one transaction.

        Raises:
            ConcurrencyConflict: either tier conflicted; nothing was written
        """
        tiers = pick.tiers_used

        with self.ledger.atomic():
            for tier in tiers:
                self._apply(list(pick.reservations_for(tier)), tier, reference, user)

        for tier in tiers:
            self._committed(list(pick.reservations_for(tier)), tier, reference)

    def _apply(self, reservations, tier: Tier, reference: str, user) -> None:
        for r in reservations:
            if r.quantity <= 0:
                raise InvalidArgument('reservation quantity must be > 0',
                                      batch_id=r.batch_id, requested=r.quantity)

        for r in reservations:
            ok = self.ledger.conditional_decrement(
                r.batch_id, tier, r.quantity,
                reason='Venda', reference=reference, user=user,
            )
            if not ok:
                logger.warning(
                    "shelfman.commit.conflict",
                    extra={
                        "batch_id": r.batch_id,
                        "item_code": r.item_code,
                        "tier": tier.value,
                        "qty": str(r.quantity),
                    },
                )
                raise ConcurrencyConflict(
                    r.batch_id,
                    tier=tier,
                    item_code=r.item_code,
                    requested=r.quantity,
                )

    def _committed(self, reservations, tier: Tier, reference: str) -> None:
        logger.info(
            "shelfman.commit",
            extra={
                "tier": tier.value,
                "reservations": len(reservations),
                "qty": str(plan_total(reservations)),
                "reference": reference,
            },
        )
        for item_code in sorted({r.item_code for r in reservations}):
            if self.ledger.tier_quantity(item_code, tier) == 0:
                stock_depleted.send(sender=type(self), item_code=item_code, tier=tier)
