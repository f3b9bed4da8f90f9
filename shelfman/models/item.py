"""
Item model — catalog entry the stock belongs to.
"""

from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class Item(models.Model):
    """
    Sellable item, identified by its code.

    Items are maintained by catalog administration; the allocation engine
    only reads them.

    Examples:
        Item.objects.create(code='SKU1', name='Iogurte Natural', unit_price=Decimal('4.50'))
        Item.objects.create(code='SKU2', name='Pão de Forma', restock_level=20)
    """

    code = models.CharField(
        max_length=50,
        unique=True,
        verbose_name=_('Código'),
        help_text=_('Código do item (ex: código de barras ou SKU)'),
    )
    name = models.CharField(
        max_length=200,
        verbose_name=_('Nome'),
    )
    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Preço unitário'),
    )
    restock_level = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_('Nível de reposição'),
        help_text=_('Vazio = usa o nível padrão configurado (50).'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Item')
        verbose_name_plural = _('Itens')
        ordering = ['code']

    @property
    def effective_restock_level(self) -> int:
        """Restock level, falling back to SHELFMAN['DEFAULT_RESTOCK_LEVEL']."""
        if self.restock_level is not None:
            return self.restock_level
        from shelfman.conf import shelfman_settings
        return shelfman_settings.DEFAULT_RESTOCK_LEVEL

    def __str__(self) -> str:
        return f"{self.code} — {self.name}"
