"""
Ledger records — the in-memory entities of the ledger aggregate.

Records are frozen dataclasses. Changes are made with dataclasses.replace()
on a working copy of the state, never in place.

Serialization uses the camelCase keys of the persisted layout:
    SerialUnit(serial_number='SN1', ...).to_dict()
    # {'serialNumber': 'SN1', 'productId': ..., 'warehouseLocation': ...}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from roledger.models.enums import (
    CustomerType,
    SalesOrderStatus,
    SalesOrderType,
    TransactionType,
    UnitStatus,
)


def parse_timestamp(value: Any) -> datetime | None:
    """ISO string (or datetime) to an aware datetime. Empty values give None."""
    if value in (None, ''):
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        dt = parse_datetime(str(value))
        if dt is None:
            raise ValueError(f"Invalid timestamp: {value!r}")
    if timezone.is_naive(dt):
        dt = timezone.make_aware(dt, timezone.get_current_timezone())
    return dt


def format_timestamp(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    """Drop optional keys that are unset, like the JSON the UI writes."""
    return {k: v for k, v in data.items() if v is not None}


# ══════════════════════════════════════════════════════════════
# CATALOG
# ══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Product:
    """A sellable model (ex: 'Karofi KAQ-U95', 9 cấp lọc)."""

    id: str
    model: str
    brand: str = ''
    specs: str = ''

    def to_dict(self) -> dict[str, Any]:
        return {'id': self.id, 'model': self.model, 'brand': self.brand, 'specs': self.specs}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Product:
        return cls(
            id=str(data['id']),
            model=data.get('model', ''),
            brand=data.get('brand', ''),
            specs=data.get('specs', ''),
        )


@dataclass(frozen=True)
class Warehouse:
    """
    A physical storage location.

    Units point at warehouses by name, not id. max_capacity=None means
    unbounded.
    """

    id: str
    name: str
    address: str | None = None
    max_capacity: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact({
            'id': self.id,
            'name': self.name,
            'address': self.address,
            'maxCapacity': self.max_capacity,
        })

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Warehouse:
        capacity = data.get('maxCapacity')
        return cls(
            id=str(data['id']),
            name=data['name'],
            address=data.get('address'),
            max_capacity=int(capacity) if capacity not in (None, '') else None,
        )


@dataclass(frozen=True)
class Customer:
    """A sale/transfer counterpart."""

    id: str
    name: str
    type: str = CustomerType.RETAIL
    phone: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact({'id': self.id, 'name': self.name, 'phone': self.phone, 'type': str(self.type)})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Customer:
        return cls(
            id=str(data['id']),
            name=data['name'],
            type=CustomerType(data.get('type', CustomerType.RETAIL)),
            phone=data.get('phone'),
        )


# ══════════════════════════════════════════════════════════════
# LEDGER
# ══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class SerialUnit:
    """
    One physical device, keyed by its serial number.

    Invariants:
        status == SOLD  <=>  warehouse_location == OUT
        is_reimported never goes back to False
    """

    serial_number: str
    product_id: str
    status: str
    warehouse_location: str
    import_date: datetime
    export_date: datetime | None = None
    customer_name: str | None = None
    is_reimported: bool = False

    @property
    def in_stock(self) -> bool:
        return self.status == UnitStatus.NEW

    def to_dict(self) -> dict[str, Any]:
        return _compact({
            'serialNumber': self.serial_number,
            'productId': self.product_id,
            'status': str(self.status),
            'warehouseLocation': self.warehouse_location,
            'importDate': format_timestamp(self.import_date),
            'exportDate': format_timestamp(self.export_date),
            'customerName': self.customer_name,
            'isReimported': self.is_reimported,
        })

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SerialUnit:
        return cls(
            serial_number=str(data['serialNumber']),
            product_id=str(data['productId']),
            status=UnitStatus(data['status']),
            warehouse_location=data['warehouseLocation'],
            import_date=parse_timestamp(data['importDate']),
            export_date=parse_timestamp(data.get('exportDate')),
            customer_name=data.get('customerName'),
            is_reimported=bool(data.get('isReimported', False)),
        )


@dataclass(frozen=True)
class Transaction:
    """
    Immutable audit record of one ledger movement.

    Rules:
    - NEVER replaced or removed once appended
    - serial_numbers is the exact batch affected
    """

    id: str
    type: str
    date: datetime
    product_id: str
    quantity: int
    serial_numbers: tuple[str, ...]
    to_location: str | None = None
    from_location: str | None = None
    customer: str | None = None
    is_reimport_tx: bool | None = None
    plan_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact({
            'id': self.id,
            'type': str(self.type),
            'date': format_timestamp(self.date),
            'productId': self.product_id,
            'quantity': self.quantity,
            'serialNumbers': list(self.serial_numbers),
            'toLocation': self.to_location,
            'fromLocation': self.from_location,
            'customer': self.customer,
            'isReimportTx': self.is_reimport_tx,
            'planName': self.plan_name,
        })

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Transaction:
        serials = tuple(str(s) for s in data.get('serialNumbers', []))
        return cls(
            id=str(data['id']),
            type=TransactionType(data['type']),
            date=parse_timestamp(data['date']),
            product_id=str(data['productId']),
            quantity=int(data.get('quantity', len(serials))),
            serial_numbers=serials,
            to_location=data.get('toLocation'),
            from_location=data.get('fromLocation'),
            customer=data.get('customer'),
            is_reimport_tx=data.get('isReimportTx'),
            plan_name=data.get('planName'),
        )


# ══════════════════════════════════════════════════════════════
# PLANNING
# ══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ProductionPlan:
    """Named batch of serials declared for production (Lô / Kế hoạch SX)."""

    id: str
    name: str
    product_id: str
    created_date: datetime
    serials: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'productId': self.product_id,
            'createdDate': format_timestamp(self.created_date),
            'serials': list(self.serials),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProductionPlan:
        return cls(
            id=str(data['id']),
            name=data['name'],
            product_id=str(data['productId']),
            created_date=parse_timestamp(data['createdDate']),
            serials=tuple(str(s) for s in data.get('serials', [])),
        )


@dataclass(frozen=True)
class SalesOrderItem:
    product_id: str
    quantity: int
    scanned_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {'productId': self.product_id, 'quantity': self.quantity, 'scannedCount': self.scanned_count}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SalesOrderItem:
        return cls(
            product_id=str(data['productId']),
            quantity=int(data['quantity']),
            scanned_count=int(data.get('scannedCount', 0)),
        )


@dataclass(frozen=True)
class SalesOrder:
    """Pending sale or transfer order, fulfilled by scanning serials."""

    id: str
    code: str
    type: str
    status: str
    created_date: datetime
    items: tuple[SalesOrderItem, ...] = field(default_factory=tuple)
    customer_name: str | None = None
    destination_warehouse: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact({
            'id': self.id,
            'code': self.code,
            'type': str(self.type),
            'status': str(self.status),
            'customerName': self.customer_name,
            'destinationWarehouse': self.destination_warehouse,
            'createdDate': format_timestamp(self.created_date),
            'items': [item.to_dict() for item in self.items],
        })

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SalesOrder:
        return cls(
            id=str(data['id']),
            code=data['code'],
            type=SalesOrderType(data['type']),
            status=SalesOrderStatus(data.get('status', SalesOrderStatus.PENDING)),
            created_date=parse_timestamp(data['createdDate']),
            items=tuple(SalesOrderItem.from_dict(i) for i in data.get('items', [])),
            customer_name=data.get('customerName'),
            destination_warehouse=data.get('destinationWarehouse'),
        )
