"""
LedgerSnapshot model — the persisted ledger aggregate.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class LedgerSnapshot(models.Model):
    """
    One JSON aggregate per storage key.

    The ledger is read wholesale at startup and written wholesale after
    every mutation. Rows are only written by a SnapshotStore, never edited
    by hand.
    """

    key = models.CharField(
        unique=True,
        max_length=100,
        verbose_name=_('Khóa'),
        help_text=_('Khóa lưu trữ (ex: RO_MASTER_DB_V3_FINAL)'),
    )
    data = models.JSONField(
        default=dict,
        blank=True,
        verbose_name=_('Dữ liệu'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Bản lưu sổ kho')
        verbose_name_plural = _('Bản lưu sổ kho')
        ordering = ['key']

    @property
    def unit_count(self) -> int:
        units = self.data.get('units') if isinstance(self.data, dict) else None
        return len(units) if isinstance(units, list) else 0

    @property
    def transaction_count(self) -> int:
        transactions = self.data.get('transactions') if isinstance(self.data, dict) else None
        return len(transactions) if isinstance(transactions, list) else 0

    def __str__(self) -> str:
        return self.key
