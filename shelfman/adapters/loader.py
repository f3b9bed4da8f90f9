"""
Ledger loader — builds the StockLedger configured in settings.

Usage:
    from shelfman.adapters import get_ledger

    ledger = get_ledger()
    ledger.tier_quantity("SKU-001", Tier.SHELF)

Settings:
    SHELFMAN = {
        "LEDGER": "shelfman.adapters.django_ledger.DjangoLedger",
    }

Every call returns a new ledger handle; callers own its lifetime and pass it
to the engine components explicitly.
"""

from __future__ import annotations

import logging

from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from shelfman.conf import shelfman_settings
from shelfman.protocols.ledger import StockLedger

logger = logging.getLogger(__name__)


def get_ledger() -> StockLedger:
    """
    Return a new instance of the configured ledger.

    Raises:
        ImproperlyConfigured: If LEDGER is empty, fails to import, or does not
            implement the StockLedger protocol
    """
    ledger_path = shelfman_settings.LEDGER

    if not ledger_path:
        raise ImproperlyConfigured(
            "SHELFMAN['LEDGER'] must be configured. "
            "Example: 'shelfman.adapters.django_ledger.DjangoLedger'"
        )

    try:
        ledger_class = import_string(ledger_path)
    except ImportError as e:
        raise ImproperlyConfigured(
            f"Failed to import ledger '{ledger_path}': {e}"
        ) from e

    ledger = ledger_class()
    if not isinstance(ledger, StockLedger):
        raise ImproperlyConfigured(
            f"'{ledger_path}' does not implement the StockLedger protocol"
        )

    logger.debug("Loaded ledger: %s", ledger_path)
    return ledger
