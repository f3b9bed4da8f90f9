"""
Pytest fixtures for Shelfman tests.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone

from shelfman.adapters.memory import InMemoryLedger
from shelfman.models import Batch, Item
from shelfman.service import Inventory


User = get_user_model()


@pytest.fixture
def today():
    """Return today's local date."""
    return timezone.localdate()


# ══════════════════════════════════════════════════════════════
# IN-MEMORY LEDGER
# ══════════════════════════════════════════════════════════════


@pytest.fixture
def ledger():
    """Empty in-memory ledger."""
    return InMemoryLedger()


@pytest.fixture
def shop(ledger, today):
    """
    Two items, one batch each:

        SKU1  shelf=5 store=2 main=10  restock level 5
        SKU2  shelf=3 store=0 main=0   default restock level
    """
    ledger.add_item('SKU1', name='Iogurte Natural', unit_price=Decimal('4.50'), restock_level=5)
    ledger.add_item('SKU2', name='Pão de Forma', unit_price=Decimal('9.90'))
    ledger.add_batch('SKU1', today + timedelta(days=5), shelf=5, store=2, main=10)
    ledger.add_batch('SKU2', today + timedelta(days=2), shelf=3)
    return ledger


@pytest.fixture
def inventory(shop):
    """Inventory facade over the shop ledger."""
    return Inventory(ledger=shop)


# ══════════════════════════════════════════════════════════════
# DATABASE
# ══════════════════════════════════════════════════════════════


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username='testuser',
        password='testpass123'
    )


@pytest.fixture
def item(db):
    """SKU1 with restock level 5."""
    return Item.objects.create(
        code='SKU1',
        name='Iogurte Natural',
        unit_price=Decimal('4.50'),
        restock_level=5,
    )


@pytest.fixture
def batch(item, today):
    """SKU1 batch: shelf=5 store=2 main=10."""
    return Batch.objects.create(
        item=item,
        expiry_date=today + timedelta(days=5),
        qty_on_shelf=5,
        qty_in_store=2,
        qty_in_main=10,
    )
