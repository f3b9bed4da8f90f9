"""
In-memory ledger — StockLedger adapter for development and testing.

Implements the same contract as DjangoLedger without a database:
- Rows live in process memory, guarded by one re-entrant lock
- atomic() journals batch quantities on entry to every block and restores
  them if that block raises, so nested blocks behave like savepoints
- Moves are appended to ``self.moves`` for assertions

Usage:
    ledger = InMemoryLedger()
    ledger.add_item('SKU1', restock_level=5)
    ledger.add_batch('SKU1', date(2026, 1, 10), shelf=5, store=2, main=10)

WARNING: Do NOT use in production. State is lost when the process exits
and is not shared between processes.
"""

from __future__ import annotations

import itertools
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from shelfman.exceptions import InvalidArgument, TransferFailure
from shelfman.fefo import fefo_key
from shelfman.models.enums import Tier
from shelfman.protocols.ledger import BatchSnapshot, ItemInfo

logger = logging.getLogger('shelfman')


@dataclass
class _BatchRow:
    batch_id: int
    item_code: str
    expiry_date: date | None
    quantities: dict[Tier, int] = field(default_factory=dict)


@dataclass(frozen=True)
class MemoryMove:
    """Audit record, same shape as the Move model."""

    batch_id: int
    tier: Tier
    delta: int
    reason: str
    reference: str = ''


class InMemoryLedger:
    """Thread-safe StockLedger kept in process memory."""

    def __init__(self, default_restock_level: int | None = None):
        self._items: dict[str, ItemInfo] = {}
        self._batches: dict[int, _BatchRow] = {}
        self._ids = itertools.count(1)
        self._lock = threading.RLock()
        self._default_restock_level = default_restock_level
        self.moves: list[MemoryMove] = []

    # ══════════════════════════════════════════════════════════════
    # SETUP (catalog administration stand-in)
    # ══════════════════════════════════════════════════════════════

    def add_item(self, code: str, name: str = '', unit_price: Decimal = Decimal('0'),
                 restock_level: int | None = None) -> ItemInfo:
        item = ItemInfo(code=code, name=name or code, unit_price=unit_price,
                        restock_level=restock_level)
        with self._lock:
            self._items[code] = item
        return item

    def add_batch(self, item_code: str, expiry_date: date | None = None,
                  shelf: int = 0, store: int = 0, main: int = 0) -> int:
        """Create a batch and return its id."""
        if min(shelf, store, main) < 0:
            raise InvalidArgument('quantities must be >= 0')
        with self._lock:
            if item_code not in self._items:
                raise InvalidArgument(f'unknown item {item_code}', item_code=item_code)
            batch_id = next(self._ids)
            self._batches[batch_id] = _BatchRow(
                batch_id=batch_id,
                item_code=item_code,
                expiry_date=expiry_date,
                quantities={Tier.SHELF: shelf, Tier.STORE: store, Tier.MAIN: main},
            )
            return batch_id

    def quantity(self, batch_id: int, tier) -> int:
        """Current units of one batch in ``tier``."""
        with self._lock:
            return self._batches[batch_id].quantities[Tier(tier)]

    # ══════════════════════════════════════════════════════════════
    # CATALOG
    # ══════════════════════════════════════════════════════════════

    def find_item(self, item_code: str) -> ItemInfo | None:
        return self._items.get(item_code)

    def item_codes(self) -> list[str]:
        return sorted(self._items)

    def restock_level(self, item_code: str) -> int:
        item = self._items.get(item_code)
        if item is not None and item.restock_level is not None:
            return item.restock_level
        if self._default_restock_level is not None:
            return self._default_restock_level
        from shelfman.conf import shelfman_settings
        return shelfman_settings.DEFAULT_RESTOCK_LEVEL

    # ══════════════════════════════════════════════════════════════
    # READS
    # ══════════════════════════════════════════════════════════════

    def _fefo_rows(self, item_code: str, tier: Tier) -> list[_BatchRow]:
        rows = [
            row for row in self._batches.values()
            if row.item_code == item_code and row.quantities[tier] > 0
        ]
        return sorted(rows, key=lambda row: fefo_key(row.expiry_date, row.batch_id))

    def snapshot_batches(self, item_code: str, tier) -> list[BatchSnapshot]:
        tier = Tier(tier)
        with self._lock:
            return [
                BatchSnapshot(
                    batch_id=row.batch_id,
                    item_code=item_code,
                    expiry_date=row.expiry_date,
                    available=row.quantities[tier],
                )
                for row in self._fefo_rows(item_code, tier)
            ]

    def tier_quantity(self, item_code: str, tier) -> int:
        tier = Tier(tier)
        with self._lock:
            return sum(
                row.quantities[tier] for row in self._batches.values()
                if row.item_code == item_code
            )

    # ══════════════════════════════════════════════════════════════
    # WRITES
    # ══════════════════════════════════════════════════════════════

    @contextmanager
    def atomic(self):
        with self._lock:
            journal = {
                batch_id: dict(row.quantities)
                for batch_id, row in self._batches.items()
            }
            moves_mark = len(self.moves)
            try:
                yield self
            except BaseException:
                for batch_id, quantities in journal.items():
                    self._batches[batch_id].quantities = quantities
                del self.moves[moves_mark:]
                raise

    def conditional_decrement(self, batch_id: int, tier, qty: int,
                              reason: str = 'Venda', reference: str = '',
                              user=None) -> bool:
        if qty <= 0:
            raise InvalidArgument('qty must be > 0', requested=qty)
        tier = Tier(tier)

        with self._lock:
            row = self._batches.get(batch_id)
            if row is None or row.quantities[tier] < qty:
                return False
            row.quantities[tier] -= qty
            self.moves.append(MemoryMove(batch_id, tier, -qty, reason, reference))
            return True

    def transfer(self, item_code: str, from_tier, to_tier, qty: int,
                 reason: str = 'Transferência', user=None) -> int:
        from_tier, to_tier = Tier(from_tier), Tier(to_tier)
        if qty <= 0:
            raise InvalidArgument('qty must be > 0', requested=qty)
        if from_tier == to_tier:
            raise InvalidArgument('from_tier and to_tier must differ', tier=from_tier)

        with self.atomic():
            remaining = qty
            moved = 0
            for row in self._fefo_rows(item_code, from_tier):
                if remaining == 0:
                    break
                take = min(row.quantities[from_tier], remaining)
                row.quantities[from_tier] -= take
                row.quantities[to_tier] += take
                self.moves.append(MemoryMove(row.batch_id, from_tier, -take, reason))
                self.moves.append(MemoryMove(row.batch_id, to_tier, take, reason))
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
