"""
Memory Snapshot Store — process-local adapter for development and testing.

Blobs are kept as JSON strings, the same way a browser key/value store
holds them, so anything that would not survive serialization fails here
too.

Usage in settings.py:
    ROLEDGER = {
        "STORAGE_BACKEND": "roledger.adapters.memory.MemorySnapshotStore",
    }

WARNING: Do NOT use in production. Everything is lost when the process exits.
"""

from __future__ import annotations

import json
from typing import Any


class MemorySnapshotStore:
    """
    In-memory snapshot store.

    Implements the ``SnapshotStore`` protocol without a database, making it
    suitable for:

    - Unit tests that don't need django_db
    - Scripts and shells that inspect a ledger without persisting it
    """

    def __init__(self, initial: dict[str, Any] | None = None):
        self._blobs: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self._blobs[key] = value if isinstance(value, str) else json.dumps(value)

    def load(self, key: str) -> Any:
        """Return the raw JSON string stored under key (or None)."""
        return self._blobs.get(key)

    def save(self, key: str, data: dict[str, Any]) -> None:
        # Serialize before replacing, so a bad payload keeps the old blob
        self._blobs[key] = json.dumps(data, ensure_ascii=False)

    def delete(self, key: str) -> None:
        self._blobs.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._blobs)
