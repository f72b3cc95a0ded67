"""
RO Ledger Admin — read-only views for production debugging.

- LedgerSnapshot: key, unit/transaction counts, raw JSON
- "Kiểm tra" action: runs the ledger audit on the selected snapshots
"""

import logging

from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _

from roledger.models import LedgerSnapshot

logger = logging.getLogger(__name__)


@admin.register(LedgerSnapshot)
class LedgerSnapshotAdmin(admin.ModelAdmin):
    """LedgerSnapshot admin — read-only. The ledger only changes via Ledger."""

    list_display = ['key', 'unit_count_display', 'transaction_count_display', 'updated_at']
    search_fields = ['key']
    readonly_fields = ['key', 'data', 'created_at', 'updated_at']
    actions = ['verify_snapshots']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.display(description=_('Số máy'))
    def unit_count_display(self, obj):
        return obj.unit_count

    @admin.display(description=_('Số giao dịch'))
    def transaction_count_display(self, obj):
        return obj.transaction_count

    @admin.action(description=_('Kiểm tra tính nhất quán'))
    def verify_snapshots(self, request, queryset):
        from roledger.adapters.database import DatabaseSnapshotStore
        from roledger.service import Ledger

        for snapshot in queryset:
            violations = Ledger(store=DatabaseSnapshotStore(), storage_key=snapshot.key).verify()
            if violations:
                logger.warning("verify_snapshots: %s has %d violation(s)", snapshot.key, len(violations))
                self.message_user(
                    request,
                    _('{key}: {count} lỗi').format(key=snapshot.key, count=len(violations)),
                    level=messages.WARNING,
                )
            else:
                self.message_user(request, _('{key}: nhất quán').format(key=snapshot.key))
