"""
Move model — Immutable audit trail of tier quantity changes.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from shelfman.models.enums import Tier


class Move(models.Model):
    """
    Immutable record of a quantity change in one tier of one batch.

    Rules:
    - NEVER update() or delete()
    - Written by the ledger in the same transaction as the quantity change
    - A transfer writes two Moves (negative on the source, positive on the target)
    """

    batch = models.ForeignKey(
        'shelfman.Batch',
        on_delete=models.PROTECT,
        related_name='moves',
        verbose_name=_('Lote'),
    )
    tier = models.CharField(
        max_length=10,
        choices=Tier.choices,
        verbose_name=_('Área'),
    )
    delta = models.IntegerField(
        verbose_name=_('Variação'),
        help_text=_('Positivo = entrada, Negativo = saída'),
    )

    reason = models.CharField(
        max_length=255,
        verbose_name=_('Motivo'),
        help_text=_('Obrigatório. Ex: "Venda", "Reposição do armazém"'),
    )
    reference = models.CharField(
        max_length=100,
        blank=True,
        default='',
        verbose_name=_('Referência'),
        help_text=_('Ex: número da conta ou pedido'),
    )

    timestamp = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Data/Hora'))
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        verbose_name=_('Usuário'),
    )

    class Meta:
        verbose_name = _('Movimento')
        verbose_name_plural = _('Movimentos')
        ordering = ['timestamp', 'id']
        indexes = [
            models.Index(fields=['batch', 'timestamp'], name='shelfman_mo_batch_i_7a3d91_idx'),
            models.Index(fields=['timestamp'], name='shelfman_mo_timesta_c25f08_idx'),
        ]

    def save(self, *args, **kwargs):
        """Save move. Moves can only be created, never changed."""
        if self.pk:
            raise ValueError(
                "Movimentos são imutáveis. "
                "Para corrigir, crie um novo Move com delta inverso."
            )

        if not self.reason:
            raise ValueError("Motivo é obrigatório")

        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """Prevent deletion — moves are immutable."""
        raise ValueError(
            "Movimentos são imutáveis. "
            "Para estornar, crie um novo Move com delta inverso."
        )

    def __str__(self) -> str:
        signal = '+' if self.delta > 0 else ''
        return f"{signal}{self.delta} {self.tier} | {self.reason}"
