"""
Ledger services — modular organization of ledger operations.

Ledger mixes these in; import them directly for the pure helpers:
    from roledger.services import CatalogStore, UnitQueries, UnitMovements, LedgerPlanning
    from roledger.services.allocation import allocate
"""

from roledger.services.catalog import CatalogStore
from roledger.services.movements import UnitMovements
from roledger.services.planning import LedgerPlanning
from roledger.services.queries import UnitQueries

__all__ = [
    'CatalogStore',
    'UnitQueries',
    'UnitMovements',
    'LedgerPlanning',
]
