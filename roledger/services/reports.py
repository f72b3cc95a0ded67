"""
Reports — read-only projections of units and transactions into rows.

Rows are plain dicts, ready for a spreadsheet writer or a template. No
file formatting happens here.

Usage:
    from roledger.services.reports import inventory_summary, transaction_rows

    rows = inventory_summary(ledger)
    history = transaction_rows(ledger, ledger.get_history_by_date_range(['INBOUND']))
"""

from collections.abc import Iterable

from roledger.conf import roledger_settings
from roledger.models.enums import (
    SalesOrderStatus,
    SalesOrderType,
    TransactionType,
    UnitStatus,
)
from roledger.records import ProductionPlan, SalesOrder, Transaction


def _model_name(ledger, product_id: str) -> str:
    product = ledger.get_product_by_id(product_id)
    return product.model if product else product_id


def transaction_label(tx: Transaction) -> str:
    if tx.type == TransactionType.INBOUND:
        return 'Nhập kho (Tái nhập)' if tx.is_reimport_tx else 'Nhập kho (Mới)'
    return str(TransactionType(tx.type).label)


def inventory_summary(ledger) -> list[dict]:
    """One row per product: on shelf, sold and total units."""
    rows = []
    for product in ledger.get_products():
        units = ledger.get_units_by_product(product.id)
        rows.append({
            'product_id': product.id,
            'model': product.model,
            'brand': product.brand,
            'specs': product.specs,
            'in_stock': sum(1 for u in units if u.status == UnitStatus.NEW),
            'sold': sum(1 for u in units if u.status == UnitStatus.SOLD),
            'total': len(units),
        })
    return rows


def dashboard_stats(ledger, recent_limit: int | None = None) -> dict:
    """
    Headline numbers for the dashboard.

    Returns:
        total_stock: units on shelf
        out_of_stock: models with nothing on shelf
        stock_by_model: [{'model', 'stock'}] in catalog order
        recent_transactions: newest first
    """
    limit = recent_limit if recent_limit is not None else roledger_settings.RECENT_TRANSACTIONS_LIMIT
    stock_by_model = [
        {'model': row['model'], 'stock': row['in_stock']}
        for row in inventory_summary(ledger)
    ]
    recent = sorted(ledger.get_transactions(), key=lambda t: t.date, reverse=True)
    return {
        'total_stock': sum(1 for u in ledger.get_units() if u.status == UnitStatus.NEW),
        'out_of_stock': sum(1 for row in stock_by_model if row['stock'] == 0),
        'stock_by_model': stock_by_model,
        'recent_transactions': recent[:limit],
    }


def transaction_rows(ledger, transactions: Iterable[Transaction]) -> list[dict]:
    """History rows. Counterpart is the customer for sales, the destination otherwise."""
    rows = []
    for tx in transactions:
        if tx.type == TransactionType.OUTBOUND:
            counterpart = tx.customer
        else:
            counterpart = tx.to_location or '-'
        rows.append({
            'id': tx.id,
            'date': tx.date,
            'type': transaction_label(tx),
            'model': _model_name(ledger, tx.product_id),
            'plan_name': tx.plan_name or '-',
            'quantity': tx.quantity,
            'counterpart': counterpart,
            'serials': ', '.join(tx.serial_numbers),
        })
    return rows


def inbound_rows(ledger) -> list[dict]:
    """Every INBOUND transaction, in log order."""
    rows = []
    for tx in ledger.get_transactions():
        if tx.type != TransactionType.INBOUND:
            continue
        rows.append({
            'date': tx.date,
            'model': _model_name(ledger, tx.product_id),
            'plan_name': tx.plan_name or '-',
            'warehouse': tx.to_location,
            'quantity': tx.quantity,
            'kind': 'Tái nhập' if tx.is_reimport_tx else 'Nhập mới',
            'serials': ', '.join(tx.serial_numbers),
        })
    return rows


def plan_detail_rows(ledger, plan: ProductionPlan) -> list[dict]:
    rows = []
    for index, serial in enumerate(plan.serials, start=1):
        unit = ledger.get_unit_by_serial(serial)
        if unit is None:
            status = 'Chưa sản xuất'
        elif unit.status == UnitStatus.NEW:
            status = 'Đã nhập kho (Tồn)'
        else:
            status = str(UnitStatus(unit.status).label)
        rows.append({
            'index': index,
            'serial': serial,
            'status': status,
            'location': unit.warehouse_location if unit else '-',
            'import_date': unit.import_date if unit else None,
        })
    return rows


def unit_rows(ledger) -> list[dict]:
    """Full dump of every unit, in ledger order."""
    return [
        {
            'index': index,
            'serial': unit.serial_number,
            'model': _model_name(ledger, unit.product_id),
            'status': str(UnitStatus(unit.status).label),
            'location': unit.warehouse_location,
            'import_date': unit.import_date,
            'export_date': unit.export_date,
            'customer': unit.customer_name or '-',
            'reimported': unit.is_reimported,
        }
        for index, unit in enumerate(ledger.get_units(), start=1)
    ]


def sales_order_rows(ledger, orders: Iterable[SalesOrder]) -> list[dict]:
    rows = []
    for order in orders:
        details = '; '.join(
            f"{_model_name(ledger, item.product_id)} (x{item.quantity}, đã quét: {item.scanned_count})"
            for item in order.items
        )
        rows.append({
            'code': order.code,
            'type': str(SalesOrderType(order.type).label),
            'status': str(SalesOrderStatus(order.status).label),
            'target': order.customer_name or order.destination_warehouse or '-',
            'created_date': order.created_date,
            'details': details,
        })
    return rows
