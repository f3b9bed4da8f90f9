"""
FEFO ordering — isolated, testable, reusable.

First-Expiring-First-Out: stock that expires soonest is consumed first.

Rules:
    - Ascending expiry date
    - Batches without expiry go after every dated batch
    - Ties broken by ascending batch id, so the order is deterministic

The same rule is expressed twice: as ORM ordering for querysets and as a
sort key for in-memory rows. Both must agree.
"""

from datetime import date

from django.db.models import F

# Sorts after any real expiry date
_NO_EXPIRY = date.max


def fefo_ordering() -> tuple:
    """
    ORM ``order_by()`` arguments for FEFO.

    Usage:
        Batch.objects.filter(item_id='SKU1').order_by(*fefo_ordering())
    """
    return (F('expiry_date').asc(nulls_last=True), 'id')


def fefo_key(expiry_date: date | None, batch_id: int) -> tuple[date, int]:
    """
    Sort key for FEFO ordering of in-memory rows.

    Args:
        expiry_date: Batch expiry, or None for no expiry
        batch_id: Batch identity (tie-breaker)

    Returns:
        Tuple usable with sorted(key=...)
    """
    return (expiry_date if expiry_date is not None else _NO_EXPIRY, batch_id)


def is_fefo_ordered(snapshot) -> bool:
    """Check that a sequence of BatchSnapshot rows respects FEFO order."""
    keys = [fefo_key(row.expiry_date, row.batch_id) for row in snapshot]
    return keys == sorted(keys)
