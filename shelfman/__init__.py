"""
Django Shelfman — Estoque perecível por áreas (prateleira, depósito, armazém).

Reserva FEFO por canal de venda, com aprovação para escalar entre áreas.

Uso:
    from shelfman import Inventory, StockError

    inventory = Inventory()
    pick = inventory.reserve_smart('SKU1', 6, 'pos', approve_secondary_tier=True)
    inventory.commit_pick(pick)
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'Inventory':
        from shelfman.service import Inventory
        return Inventory
    elif name == 'StockError':
        from shelfman.exceptions import StockError
        return StockError
    elif name == 'Item':
        from shelfman.models.item import Item
        return Item
    elif name == 'Batch':
        from shelfman.models.batch import Batch
        return Batch
    elif name == 'Move':
        from shelfman.models.move import Move
        return Move
    elif name == 'Tier':
        from shelfman.models.enums import Tier
        return Tier
    elif name == 'Channel':
        from shelfman.models.enums import Channel
        return Channel
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'Inventory',
    'StockError',
    'Item',
    'Batch',
    'Move',
    'Tier',
    'Channel',
]

__version__ = '0.1.0'
