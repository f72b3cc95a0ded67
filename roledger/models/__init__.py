"""
RO Ledger Models.

- LedgerSnapshot: the persisted ledger aggregate (one JSON blob per key)
- Enums shared by the in-memory records
"""

from roledger.models.enums import (
    CustomerType,
    SalesOrderStatus,
    SalesOrderType,
    TransactionType,
    UnitStatus,
)
from roledger.models.snapshot import LedgerSnapshot

__all__ = [
    'LedgerSnapshot',
    'UnitStatus',
    'TransactionType',
    'CustomerType',
    'SalesOrderType',
    'SalesOrderStatus',
]
