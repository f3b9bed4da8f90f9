"""
Stock services — the allocation engine, one concern per module.

    from shelfman.services import (
        FefoBatchSelector, SmartReservationCoordinator,
        ReservationCommitter, RestockPolicy, RestockService,
    )
"""

from shelfman.services.commit import ReservationCommitter
from shelfman.services.reservations import SmartReservationCoordinator, tiers_for
from shelfman.services.restock import RestockPolicy, RestockService
from shelfman.services.selection import FefoBatchSelector, plan_from_snapshot

__all__ = [
    'FefoBatchSelector',
    'plan_from_snapshot',
    'SmartReservationCoordinator',
    'tiers_for',
    'ReservationCommitter',
    'RestockPolicy',
    'RestockService',
]
