"""
RO Ledger — Serial-unit inventory ledger for RO water-filter units.

Tracks every serialized unit from import to sale (and one re-import),
spreads inbound batches across capacity-bounded warehouses and keeps an
append-only transaction history.

Usage:
    from roledger import build_ledger, LedgerError

    ledger = build_ledger()
    ledger.import_units('p-1', ['SN1', 'SN2'], 'Kho Tổng (Hà Nội)')
    ledger.get_warehouse_current_stock('Kho Tổng (Hà Nội)')  # 2
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'Ledger':
        from roledger.service import Ledger
        return Ledger
    elif name == 'build_ledger':
        from roledger.service import build_ledger
        return build_ledger
    elif name in ('LedgerError', 'ReferentialIntegrityError', 'AlreadyInStock',
                  'ReimportLimitExceeded', 'InvalidSelection'):
        from roledger import exceptions
        return getattr(exceptions, name)
    elif name in ('Product', 'Warehouse', 'Customer', 'SerialUnit', 'Transaction',
                  'ProductionPlan', 'SalesOrder', 'SalesOrderItem'):
        from roledger import records
        return getattr(records, name)
    elif name in ('UnitStatus', 'TransactionType', 'CustomerType'):
        from roledger.models import enums
        return getattr(enums, name)
    elif name == 'LedgerSnapshot':
        from roledger.models.snapshot import LedgerSnapshot
        return LedgerSnapshot
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'Ledger',
    'build_ledger',
    'LedgerError',
    'ReferentialIntegrityError',
    'AlreadyInStock',
    'ReimportLimitExceeded',
    'InvalidSelection',
    'Product',
    'Warehouse',
    'Customer',
    'SerialUnit',
    'Transaction',
    'ProductionPlan',
    'SalesOrder',
    'SalesOrderItem',
    'UnitStatus',
    'TransactionType',
    'CustomerType',
    'LedgerSnapshot',
]

__version__ = '0.1.0'
