"""
Stock Ledger Protocols — narrow capabilities the allocation engine consumes.

Shelfman defines these protocols; adapters (Django ORM, in-memory) implement
them. Each engine component depends only on the capabilities it uses:

- FefoBatchSelector:            CatalogReader + BatchReader
- SmartReservationCoordinator:  CatalogReader + BatchReader + TierMutator.transfer
- ReservationCommitter:         TierMutator.conditional_decrement + TransactionScope
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class ItemInfo:
    """Read-only view of a catalog item."""

    code: str
    name: str
    unit_price: Decimal = Decimal('0')
    restock_level: int | None = None  # None = use configured default


@dataclass(frozen=True)
class BatchSnapshot:
    """Stock of one batch in one tier, as observed at snapshot time."""

    batch_id: int
    item_code: str
    expiry_date: date | None
    available: int


@runtime_checkable
class CatalogReader(Protocol):
    """Item lookups."""

    def find_item(self, item_code: str) -> ItemInfo | None:
        """
        Look up an item by code.

        Returns:
            ItemInfo or None if not found
        """
        ...

    def item_codes(self) -> list[str]:
        """All item codes, ordered."""
        ...

    def restock_level(self, item_code: str) -> int:
        """Item restock level, with the configured default applied."""
        ...


@runtime_checkable
class BatchReader(Protocol):
    """Read-only stock queries. Safe to call concurrently without locks."""

    def snapshot_batches(self, item_code: str, tier) -> list[BatchSnapshot]:
        """
        Batches of the item holding stock in ``tier``.

        Returns:
            FEFO-ordered list (earliest expiry first, undated last, then id)
        """
        ...

    def tier_quantity(self, item_code: str, tier) -> int:
        """Total units of the item in ``tier``."""
        ...


@runtime_checkable
class TierMutator(Protocol):
    """The only operations allowed to change tier quantities."""

    def conditional_decrement(self, batch_id: int, tier, qty: int,
                              reason: str = 'Venda', reference: str = '',
                              user=None) -> bool:
        """
        Decrement the batch's tier quantity by ``qty`` only if at least
        ``qty`` units are there.

        Returns:
            True if the row was updated, False on conflict
        """
        ...

    def transfer(self, item_code: str, from_tier, to_tier, qty: int,
                 reason: str = 'Transferência', user=None) -> int:
        """
        Move up to ``qty`` units between tiers, FEFO-ordered, in its own
        transaction.

        Returns:
            Units actually moved

        Raises:
            InvalidArgument: qty <= 0 or from_tier == to_tier
            TransferFailure: nothing could be moved
        """
        ...


@runtime_checkable
class TransactionScope(Protocol):
    """Groups ledger writes so they commit or roll back together."""

    def atomic(self) -> AbstractContextManager:
        """Context manager; an exception inside rolls every write back."""
        ...


@runtime_checkable
class StockLedger(CatalogReader, BatchReader, TierMutator, TransactionScope, Protocol):
    """Everything the engine needs, composed from the narrow capabilities."""
