"""
Shelfman Admin.

- Item: list + edit (catalog, restock level)
- Batch: list + edit (expiry, per-tier quantities)
- Move: read-only audit trail (timestamp, tier, delta, reason)
"""

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from shelfman.models import Batch, Item, Move


# =========================================================================
# ITEM ADMIN
# =========================================================================

@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    """Item admin — editable."""

    list_display = ['code', 'name', 'unit_price', 'restock_level_display']
    search_fields = ['code', 'name']
    readonly_fields = ['created_at', 'updated_at']

    @admin.display(description=_('Nível de reposição'))
    def restock_level_display(self, obj):
        return obj.effective_restock_level


# =========================================================================
# BATCH ADMIN
# =========================================================================

@admin.register(Batch)
class BatchAdmin(admin.ModelAdmin):
    """Batch admin — per-tier quantities, FEFO order."""

    list_display = ['id', 'item', 'expiry_date', 'qty_on_shelf', 'qty_in_store',
                    'qty_in_main', 'is_expired_display']
    list_filter = ['expiry_date']
    search_fields = ['item__code', 'item__name']
    readonly_fields = ['created_at', 'updated_at']
    list_select_related = ['item']

    @admin.display(description=_('Vencido?'), boolean=True)
    def is_expired_display(self, obj):
        return obj.is_expired


# =========================================================================
# MOVE ADMIN (read-only audit trail)
# =========================================================================

@admin.register(Move)
class MoveAdmin(admin.ModelAdmin):
    """Move admin — read-only. Immutable audit trail."""

    list_display = ['timestamp', 'batch', 'tier', 'delta', 'reason', 'reference', 'user']
    list_filter = ['tier', 'timestamp', 'user']
    search_fields = ['reason', 'reference', 'batch__item__code']
    readonly_fields = ['batch', 'tier', 'delta', 'reason', 'reference', 'timestamp', 'user']
    date_hierarchy = 'timestamp'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
