"""
RO Ledger configuration.

Usage in settings.py:
    ROLEDGER = {
        "STORAGE_BACKEND": "roledger.adapters.database.DatabaseSnapshotStore",
        "STORAGE_KEY": "RO_MASTER_DB_V3_FINAL",
        "RECENT_TRANSACTIONS_LIMIT": 10,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class RoLedgerSettings:
    """RO Ledger configuration settings."""

    # Snapshot store backend (dotted path)
    STORAGE_BACKEND: str = "roledger.adapters.database.DatabaseSnapshotStore"

    # Key the ledger aggregate is stored under
    STORAGE_KEY: str = "RO_MASTER_DB_V3_FINAL"

    # Key the scan drafts are stored under
    DRAFT_STORAGE_KEY: str = "RO_MASTER_DB_V3_FINAL_DRAFTS"

    # Location of units that left the warehouses
    OUT_LOCATION: str = "OUT"

    # Transactions shown on the dashboard
    RECENT_TRANSACTIONS_LIMIT: int = 10


def get_roledger_settings() -> RoLedgerSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "ROLEDGER", {})
    return RoLedgerSettings(**{
        k: v for k, v in user_settings.items()
        if k in RoLedgerSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_roledger_settings(), name)


roledger_settings = _LazySettings()
