"""
Shelfman configuration.

Usage in settings.py:
    SHELFMAN = {
        "LEDGER": "shelfman.adapters.django_ledger.DjangoLedger",
        "DEFAULT_RESTOCK_LEVEL": 50,
        "RESTOCK_FIXED_QTY": 0,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class ShelfmanSettings:
    """Shelfman configuration settings."""

    # Ledger backend (dotted path)
    LEDGER: str = "shelfman.adapters.django_ledger.DjangoLedger"

    # Restock level for items that don't define one
    DEFAULT_RESTOCK_LEVEL: int = 50

    # Units moved store -> shelf per background restock (0 = top up to threshold)
    RESTOCK_FIXED_QTY: int = 0


def get_shelfman_settings() -> ShelfmanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "SHELFMAN", {})
    return ShelfmanSettings(**{
        k: v for k, v in user_settings.items()
        if k in ShelfmanSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_shelfman_settings(), name)


shelfman_settings = _LazySettings()
