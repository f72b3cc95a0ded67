"""
Ledger Service — The single public interface for all ledger operations.

Usage:
    from roledger import build_ledger, LedgerError

    ledger = build_ledger()           # once, at application start
    ledger.import_units('p-1', ['SN1', 'SN2'], 'Kho Tổng (Hà Nội)')
    ledger.export_units('p-1', ['SN1'], 'Đại lý Điện máy Xanh')
    ledger.get_unit_by_serial('SN1').status  # 'SOLD'

The ledger is an explicit object: build it once and hand it to every
consumer. There is no module-level instance.
"""

import json
import logging
import uuid
from datetime import datetime

from django.utils import timezone

from roledger.adapters.loader import get_snapshot_store
from roledger.conf import roledger_settings
from roledger.protocols.storage import SnapshotStore
from roledger.records import SerialUnit
from roledger.services.audit import verify_state
from roledger.services.catalog import CatalogStore
from roledger.services.movements import UnitMovements
from roledger.services.planning import LedgerPlanning
from roledger.services.queries import UnitQueries
from roledger.state import LedgerState

logger = logging.getLogger('roledger')


class Ledger(CatalogStore, UnitQueries, UnitMovements, LedgerPlanning):
    """
    Owner and sole mutator of the ledger aggregate.

    IMPORTANT: Every mutation works on a copy of the state, validates the
    whole request, persists the copy and only then makes it live. If
    anything raises, the live state is exactly what it was before the call.
    """

    def __init__(self, store: SnapshotStore | None = None,
                 storage_key: str | None = None,
                 draft_storage_key: str | None = None):
        self._store = store if store is not None else get_snapshot_store()
        self._storage_key = storage_key or roledger_settings.STORAGE_KEY
        self._draft_storage_key = draft_storage_key or roledger_settings.DRAFT_STORAGE_KEY
        self._out_location = roledger_settings.OUT_LOCATION
        self._state = LedgerState()
        self._unit_index: dict[str, SerialUnit] = {}
        self._drafts: dict[str, list[str]] | None = None
        self._load()

    # ══════════════════════════════════════════════════════════════
    # PERSISTENCE
    # ══════════════════════════════════════════════════════════════

    @property
    def storage_key(self) -> str:
        return self._storage_key

    @property
    def out_location(self) -> str:
        return self._out_location

    def _load(self) -> None:
        """
        Read the aggregate from the store.

        Missing blob: default catalog, persisted right away.
        Corrupt blob: logged, default catalog used (the blob is left as is
        until the next mutation overwrites it).
        """
        raw = self._store.load(self._storage_key)

        if raw is None:
            state = LedgerState.default()
            self._store.save(self._storage_key, state.to_dict())
            self._install(state)
            logger.info("ledger.load.default", extra={"key": self._storage_key})
            return

        try:
            data = json.loads(raw) if isinstance(raw, (str, bytes)) else raw
            state = LedgerState.from_dict(data)
        except (AttributeError, TypeError, KeyError, ValueError) as exc:
            logger.error(
                "ledger.load.corrupt",
                extra={"key": self._storage_key, "error": str(exc)},
            )
            state = LedgerState.default()

        self._install(state)

    def _install(self, state: LedgerState) -> None:
        self._state = state
        self._unit_index = {u.serial_number: u for u in state.units}

    def _commit(self, state: LedgerState) -> None:
        """Persist a working copy, then make it the live state."""
        self._store.save(self._storage_key, state.to_dict())
        self._install(state)

    def reload(self) -> None:
        """Drop in-memory state and read it back from the store."""
        self._drafts = None
        self._load()

    def reset_database(self) -> None:
        """Wipe everything persisted and start over from the default catalog."""
        self._store.delete(self._storage_key)
        self._store.delete(self._draft_storage_key)
        self._drafts = None
        self._load()
        logger.warning("ledger.reset", extra={"key": self._storage_key})

    # ══════════════════════════════════════════════════════════════
    # AUDIT
    # ══════════════════════════════════════════════════════════════

    def verify(self) -> list[str]:
        """
        Check the unit projection against the transaction log.

        Returns:
            List of violation messages (empty = consistent)
        """
        violations = verify_state(self._state, self._out_location)
        for violation in violations:
            logger.warning(
                "ledger.audit.violation",
                extra={"key": self._storage_key, "violation": violation},
            )
        return violations

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    def _now(self) -> datetime:
        return timezone.now()

    def _new_id(self, prefix: str) -> str:
        return f"{prefix}-{uuid.uuid4().hex[:12]}"


def build_ledger(store: SnapshotStore | None = None, **kwargs) -> Ledger:
    """Build a Ledger from ROLEDGER settings (store/keys may be overridden)."""
    return Ledger(store=store, **kwargs)
