"""
Database Snapshot Store — ledger blob in a LedgerSnapshot row.

Usage in settings.py (this is the default):
    ROLEDGER = {
        "STORAGE_BACKEND": "roledger.adapters.database.DatabaseSnapshotStore",
    }
"""

from __future__ import annotations

import logging
from typing import Any

from django.db import transaction

from roledger.models.snapshot import LedgerSnapshot

logger = logging.getLogger(__name__)


class DatabaseSnapshotStore:
    """
    Stores each key as one LedgerSnapshot row (JSONField).

    Concurrency:
        - save() runs under transaction.atomic()
        - update_or_create keyed on the unique key column
    """

    def load(self, key: str) -> Any:
        snapshot = LedgerSnapshot.objects.filter(key=key).first()
        if snapshot is None:
            return None
        return snapshot.data

    def save(self, key: str, data: dict[str, Any]) -> None:
        with transaction.atomic():
            LedgerSnapshot.objects.update_or_create(
                key=key,
                defaults={'data': data},
            )
        logger.debug("Saved ledger snapshot %s", key)

    def delete(self, key: str) -> None:
        deleted, _ = LedgerSnapshot.objects.filter(key=key).delete()
        if deleted:
            logger.debug("Deleted ledger snapshot %s", key)
