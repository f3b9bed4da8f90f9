"""
Batch model — one received lot of an item, split across the three tiers.

A batch is a row of the stock ledger. Its three quantity columns say how many
units of the lot are on the shelf, in the backroom store and in the main
warehouse. Units only ever change tier or leave through the ledger adapter:

    ledger.transfer('SKU1', Tier.MAIN, Tier.STORE, 10)
    ledger.conditional_decrement(batch.pk, Tier.STORE, 2)

Usage:
    batch = Batch.objects.create(
        item=item,
        expiry_date=date.today() + timedelta(days=3),
        qty_on_shelf=5, qty_in_store=20, qty_in_main=100,
    )
"""

from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from shelfman.fefo import fefo_ordering
from shelfman.models.enums import Tier

# Quantity column for each tier
TIER_FIELDS = {
    Tier.SHELF: 'qty_on_shelf',
    Tier.STORE: 'qty_in_store',
    Tier.MAIN: 'qty_in_main',
}


def tier_field(tier) -> str:
    """Column holding the quantity for ``tier``."""
    return TIER_FIELDS[Tier(tier)]


class BatchQuerySet(models.QuerySet):
    """Custom QuerySet for Batch with convenience filters."""

    def for_item(self, item_code: str):
        """Batches of one item."""
        return self.filter(item_id=item_code)

    def in_tier(self, tier):
        """Batches holding stock in ``tier``."""
        return self.filter(**{f'{tier_field(tier)}__gt': 0})

    def fefo(self):
        """First-expiring-first-out order: earliest expiry, undated last, then id."""
        return self.order_by(*fefo_ordering())


class Batch(models.Model):
    """
    Lot of an item with an optional expiry date.

    Key rules:
    - Quantities are never negative (enforced by a database constraint)
    - Batches without expiry are consumed after every dated batch
    - The allocation engine never creates or deletes batches
    """

    item = models.ForeignKey(
        'shelfman.Item',
        to_field='code',
        db_column='item_code',
        on_delete=models.PROTECT,
        related_name='batches',
        verbose_name=_('Item'),
    )
    expiry_date = models.DateField(
        null=True,
        blank=True,
        db_index=True,
        verbose_name=_('Data de Validade'),
        help_text=_('Vazio = sem validade (consumido por último)'),
    )

    qty_on_shelf = models.PositiveIntegerField(default=0, verbose_name=_('Na prateleira'))
    qty_in_store = models.PositiveIntegerField(default=0, verbose_name=_('No depósito'))
    qty_in_main = models.PositiveIntegerField(default=0, verbose_name=_('No armazém'))

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_('Criado em'))
    updated_at = models.DateTimeField(auto_now=True)

    objects = BatchQuerySet.as_manager()

    class Meta:
        verbose_name = _('Lote')
        verbose_name_plural = _('Lotes')
        ordering = ['expiry_date', 'id']
        constraints = [
            models.CheckConstraint(
                condition=Q(qty_on_shelf__gte=0) & Q(qty_in_store__gte=0) & Q(qty_in_main__gte=0),
                name='batch_tier_quantities_non_negative',
            ),
        ]
        indexes = [
            models.Index(fields=['item', 'expiry_date'], name='shelfman_ba_item_co_4e1b2c_idx'),
        ]

    def quantity_in(self, tier) -> int:
        """Units of this batch currently in ``tier``."""
        return getattr(self, tier_field(tier))

    @property
    def total_quantity(self) -> int:
        return self.qty_on_shelf + self.qty_in_store + self.qty_in_main

    @property
    def is_expired(self) -> bool:
        """Is this batch past its expiry date?"""
        if self.expiry_date is None:
            return False
        return timezone.localdate() > self.expiry_date

    def __str__(self) -> str:
        expiry = f" (val:{self.expiry_date})" if self.expiry_date else ""
        return f"Lote {self.pk} {self.item_id}{expiry}"
