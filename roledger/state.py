"""
LedgerState — the aggregate persisted under one storage key.

Usage:
    state = LedgerState.from_dict(blob)
    working = state.copy()
    working.units.append(unit)
    blob = working.to_dict()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from roledger.models.enums import CustomerType
from roledger.records import (
    Customer,
    Product,
    ProductionPlan,
    SalesOrder,
    SerialUnit,
    Transaction,
    Warehouse,
)


DEFAULT_WAREHOUSES = (
    Warehouse(id='wh-01', name='Kho Tổng (Hà Nội)', address='Thanh Xuân, Hà Nội'),
    Warehouse(id='wh-02', name='Kho Chi Nhánh (HCM)', address='Quận 7, TP.HCM'),
    Warehouse(id='wh-03', name='Kho Đà Nẵng', address='Hải Châu, Đà Nẵng'),
)

DEFAULT_CUSTOMERS = (
    Customer(id='cus-01', name='Đại lý Điện máy Xanh', type=CustomerType.DEALER, phone='18001061'),
    Customer(id='cus-02', name='Đại lý Karofi Cầu Giấy', type=CustomerType.DEALER, phone='0901234567'),
    Customer(id='cus-03', name='Khách lẻ (Vãng lai)', type=CustomerType.RETAIL),
)


@dataclass
class LedgerState:
    """
    Every collection the ledger owns.

    Lists are owned by the state; records inside are frozen and shared
    between copies.
    """

    products: list[Product] = field(default_factory=list)
    units: list[SerialUnit] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)
    warehouses: list[Warehouse] = field(default_factory=list)
    customers: list[Customer] = field(default_factory=list)
    production_plans: list[ProductionPlan] = field(default_factory=list)
    sales_orders: list[SalesOrder] = field(default_factory=list)

    @classmethod
    def default(cls) -> LedgerState:
        """Built-in catalog: seed warehouses and customers, no units."""
        return cls(
            warehouses=list(DEFAULT_WAREHOUSES),
            customers=list(DEFAULT_CUSTOMERS),
        )

    def copy(self) -> LedgerState:
        """Working copy: new lists, same (immutable) records."""
        return LedgerState(
            products=list(self.products),
            units=list(self.units),
            transactions=list(self.transactions),
            warehouses=list(self.warehouses),
            customers=list(self.customers),
            production_plans=list(self.production_plans),
            sales_orders=list(self.sales_orders),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            'products': [p.to_dict() for p in self.products],
            'units': [u.to_dict() for u in self.units],
            'transactions': [t.to_dict() for t in self.transactions],
            'warehouses': [w.to_dict() for w in self.warehouses],
            'customers': [c.to_dict() for c in self.customers],
            'productionPlans': [p.to_dict() for p in self.production_plans],
            'salesOrders': [o.to_dict() for o in self.sales_orders],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LedgerState:
        """
        Rebuild the aggregate from a stored blob.

        Missing arrays default to empty; an empty warehouse list falls back
        to the seed warehouses (at least one warehouse must exist).

        Raises:
            TypeError / KeyError / ValueError: If the blob is malformed
        """
        if not isinstance(data, dict):
            raise TypeError(f"Ledger blob must be a dict, got {type(data).__name__}")

        warehouses = [Warehouse.from_dict(w) for w in data.get('warehouses') or []]
        return cls(
            products=[Product.from_dict(p) for p in data.get('products') or []],
            units=[SerialUnit.from_dict(u) for u in data.get('units') or []],
            transactions=[Transaction.from_dict(t) for t in data.get('transactions') or []],
            warehouses=warehouses or list(DEFAULT_WAREHOUSES),
            customers=[Customer.from_dict(c) for c in data.get('customers') or []],
            production_plans=[ProductionPlan.from_dict(p) for p in data.get('productionPlans') or []],
            sales_orders=[SalesOrder.from_dict(o) for o in data.get('salesOrders') or []],
        )
