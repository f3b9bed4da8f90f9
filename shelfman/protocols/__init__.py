"""
Shelfman Protocols.

Defines interfaces for the stock ledger the engine runs against.
"""

from shelfman.protocols.ledger import (
    BatchReader,
    BatchSnapshot,
    CatalogReader,
    ItemInfo,
    StockLedger,
    TierMutator,
    TransactionScope,
)

__all__ = [
    "BatchReader",
    "BatchSnapshot",
    "CatalogReader",
    "ItemInfo",
    "StockLedger",
    "TierMutator",
    "TransactionScope",
]
