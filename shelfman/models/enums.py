"""
Enums for Shelfman models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Tier(models.TextChoices):
    """
    Physical area where a batch's units sit.

    SHELF: Customer-facing shelf. Primary source for ONLINE orders.
    STORE: Backroom store. Primary source for POS sales.
    MAIN:  Central warehouse. Only reached through a manager-approved backfill.
    """
    SHELF = 'shelf', _('Prateleira')
    STORE = 'store', _('Depósito da loja')
    MAIN = 'main', _('Armazém central')


class Channel(models.TextChoices):
    """Sales channel a reservation request comes from."""
    POS = 'pos', _('Caixa')
    ONLINE = 'online', _('Online')
