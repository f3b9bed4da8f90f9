"""
Django ledger — the StockLedger on the Django ORM.

Concurrency:
    - Reads (snapshot_batches, tier_quantity) take no locks
    - conditional_decrement is a single UPDATE ... WHERE qty >= n; the
      affected row count is the compare-and-swap result
    - transfer locks the source batches with select_for_update() in FEFO order
    - atomic() is transaction.atomic(); nested blocks become savepoints
"""

import logging

from django.db import transaction
from django.db.models import F, IntegerField, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from shelfman.exceptions import InvalidArgument, TransferFailure
from shelfman.models.batch import Batch, tier_field
from shelfman.models.enums import Tier
from shelfman.models.item import Item
from shelfman.models.move import Move
from shelfman.protocols.ledger import BatchSnapshot, ItemInfo

logger = logging.getLogger('shelfman')


class DjangoLedger:
    """StockLedger backed by the Item, Batch and Move models."""

    # ══════════════════════════════════════════════════════════════
    # CATALOG
    # ══════════════════════════════════════════════════════════════

    def find_item(self, item_code: str) -> ItemInfo | None:
        item = Item.objects.filter(code=item_code).first()
        if item is None:
            return None
        return ItemInfo(
            code=item.code,
            name=item.name,
            unit_price=item.unit_price,
            restock_level=item.restock_level,
        )

    def item_codes(self) -> list[str]:
        return list(Item.objects.order_by('code').values_list('code', flat=True))

    def restock_level(self, item_code: str) -> int:
        from shelfman.conf import shelfman_settings

        level = Item.objects.filter(code=item_code).values_list('restock_level', flat=True).first()
        if level is None:
            return shelfman_settings.DEFAULT_RESTOCK_LEVEL
        return level

    # ══════════════════════════════════════════════════════════════
    # READS
    # ══════════════════════════════════════════════════════════════

    def snapshot_batches(self, item_code: str, tier) -> list[BatchSnapshot]:
        field = tier_field(tier)
        rows = (
            Batch.objects.for_item(item_code)
            .in_tier(tier)
            .fefo()
            .values_list('pk', 'expiry_date', field)
        )
        return [
            BatchSnapshot(batch_id=pk, item_code=item_code, expiry_date=expiry, available=qty)
            for pk, expiry, qty in rows
        ]

    def tier_quantity(self, item_code: str, tier) -> int:
        field = tier_field(tier)
        return Batch.objects.for_item(item_code).aggregate(
            t=Coalesce(Sum(field), 0, output_field=IntegerField())
        )['t']

    # ══════════════════════════════════════════════════════════════
    # WRITES
    # ══════════════════════════════════════════════════════════════

    def atomic(self):
        return transaction.atomic()

    def conditional_decrement(self, batch_id: int, tier, qty: int,
                              reason: str = 'Venda', reference: str = '',
                              user=None) -> bool:
        """
        Decrement ``tier`` of one batch by ``qty`` if enough units remain.

        Returns:
            False when another writer got there first (zero rows updated)
        """
        if qty <= 0:
            raise InvalidArgument('qty must be > 0', requested=qty)

        field = tier_field(tier)

        with transaction.atomic():
            updated = Batch.objects.filter(
                pk=batch_id, **{f'{field}__gte': qty}
            ).update(**{field: F(field) - qty, 'updated_at': timezone.now()})

            if not updated:
                return False

            Move.objects.create(
                batch_id=batch_id,
                tier=Tier(tier),
                delta=-qty,
                reason=reason,
                reference=reference,
                user=user,
            )
            return True

    def transfer(self, item_code: str, from_tier, to_tier, qty: int,
                 reason: str = 'Transferência', user=None) -> int:
        """
        Move up to ``qty`` units of an item between tiers, earliest expiry first.

        Units stay in their batch; only the tier columns change.

        Raises:
            InvalidArgument: qty <= 0 or same tier
            TransferFailure: source tier is empty
        """
        from_tier, to_tier = Tier(from_tier), Tier(to_tier)
        if qty <= 0:
            raise InvalidArgument('qty must be > 0', requested=qty)
        if from_tier == to_tier:
            raise InvalidArgument('from_tier and to_tier must differ', tier=from_tier)

        src, dst = tier_field(from_tier), tier_field(to_tier)
        remaining = qty
        moved = 0

        with transaction.atomic():
            batches = (
                Batch.objects.select_for_update()
                .for_item(item_code)
                .in_tier(from_tier)
                .fefo()
            )

            for batch in batches:
                if remaining == 0:
                    break

                take = min(getattr(batch, src), remaining)
                Batch.objects.filter(pk=batch.pk).update(**{
                    src: F(src) - take,
                    dst: F(dst) + take,
                    'updated_at': timezone.now(),
                })
                Move.objects.create(batch=batch, tier=from_tier, delta=-take,
                                    reason=reason, user=user)
                Move.objects.create(batch=batch, tier=to_tier, delta=take,
                                    reason=reason, user=user)
                remaining -= take
                moved += take

            if moved == 0:
                raise TransferFailure(
                    f'no stock in {from_tier.value} to move',
                    item_code=item_code,
                    from_tier=from_tier,
                    to_tier=to_tier,
                    requested=qty,
                )

        logger.info(
            "shelfman.transfer",
            extra={
                "item_code": item_code,
                "from_tier": from_tier.value,
                "to_tier": to_tier.value,
                "requested": str(qty),
                "moved": str(moved),
            },
        )
        return moved
