"""
Snapshot Storage Protocol — where the ledger aggregate lives.

The ledger is persisted as a single blob under a fixed key, read wholesale
at startup and rewritten wholesale after every mutation.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SnapshotStore(Protocol):
    """
    Protocol for snapshot persistence.

    Implementations must make save() all-or-nothing: a failed save leaves
    the previously stored blob intact.
    """

    def load(self, key: str) -> Any:
        """
        Read the blob stored under key.

        Args:
            key: Storage key

        Returns:
            The stored value (dict, or a JSON string), or None if absent
        """
        ...

    def save(self, key: str, data: dict[str, Any]) -> None:
        """
        Replace the blob stored under key.

        Args:
            key: Storage key
            data: JSON-serializable aggregate
        """
        ...

    def delete(self, key: str) -> None:
        """Remove the blob stored under key. Missing keys are ignored."""
        ...
