"""
Snapshot store loader.

Loads the configured SnapshotStore from settings.

Usage:
    from roledger.adapters import get_snapshot_store

    store = get_snapshot_store()
    blob = store.load("RO_MASTER_DB_V3_FINAL")

Settings:
    ROLEDGER = {
        "STORAGE_BACKEND": "roledger.adapters.database.DatabaseSnapshotStore",
    }
"""

from __future__ import annotations

import logging

from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from roledger.conf import roledger_settings
from roledger.protocols.storage import SnapshotStore

logger = logging.getLogger(__name__)


def get_snapshot_store(backend_path: str | None = None) -> SnapshotStore:
    """
    Return a new instance of the configured snapshot store.

    Args:
        backend_path: Dotted path overriding ROLEDGER['STORAGE_BACKEND']

    Raises:
        ImproperlyConfigured: If the backend is empty, can't be imported,
            or doesn't implement SnapshotStore
    """
    path = backend_path or roledger_settings.STORAGE_BACKEND

    if not path:
        raise ImproperlyConfigured(
            "ROLEDGER['STORAGE_BACKEND'] must be configured. "
            "Example: 'roledger.adapters.database.DatabaseSnapshotStore'"
        )

    try:
        store_class = import_string(path)
    except ImportError as e:
        raise ImproperlyConfigured(
            f"Failed to import snapshot store '{path}': {e}"
        ) from e

    store = store_class()
    if not isinstance(store, SnapshotStore):
        raise ImproperlyConfigured(
            f"'{path}' does not implement the SnapshotStore protocol"
        )

    logger.debug("Loaded snapshot store: %s", path)
    return store
