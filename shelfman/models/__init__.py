"""
Shelfman Models.

Core models for tiered stock:
- Item: Catalog entry (code, name, price, restock level)
- Batch: Lot with expiry and per-tier quantities (shelf, store, main)
- Move: Immutable audit trail of quantity changes
"""

from shelfman.models.batch import TIER_FIELDS, Batch
from shelfman.models.enums import Channel, Tier
from shelfman.models.item import Item
from shelfman.models.move import Move

__all__ = [
    'Tier',
    'Channel',
    'TIER_FIELDS',
    'Item',
    'Batch',
    'Move',
]
