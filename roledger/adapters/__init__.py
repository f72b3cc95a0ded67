"""
RO Ledger Adapters.

Implementations of protocols for storage backends.
"""

from roledger.adapters.database import DatabaseSnapshotStore
from roledger.adapters.loader import get_snapshot_store
from roledger.adapters.memory import MemorySnapshotStore

__all__ = [
    "DatabaseSnapshotStore",
    "MemorySnapshotStore",
    "get_snapshot_store",
]
