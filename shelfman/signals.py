"""
Shelfman signals.

Usage:
    from shelfman.signals import stock_depleted

    @receiver(stock_depleted)
    def notify_floor(sender, item_code, tier, **kwargs):
        ...

stock_depleted:
    Sent after a commit leaves an item with zero units in a tier.
    Arguments: item_code, tier

restock_threshold_hit:
    Sent by RestockService when the shelf is below its threshold.
    Arguments: item_code, shelf_qty, threshold
"""

from django.dispatch import Signal

stock_depleted = Signal()
restock_threshold_hit = Signal()
