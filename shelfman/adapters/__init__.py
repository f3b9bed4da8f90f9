"""
Shelfman Adapters.

Implementations of the ledger protocols.
"""

from shelfman.adapters.loader import get_ledger

__all__ = [
    "get_ledger",
]
