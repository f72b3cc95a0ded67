"""
RO Ledger Protocols.

Defines interfaces for pluggable backends.
"""

from roledger.protocols.storage import SnapshotStore

__all__ = [
    "SnapshotStore",
]
