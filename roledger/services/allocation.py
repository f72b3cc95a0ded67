"""
Capacity-aware allocation of an inbound batch across warehouses.

Isolated, deterministic and testable: no state, no persistence.

Rules:
    1. Warehouses are walked starting at the initial one, then the ones
       after it, wrapping around to the ones before it. An unknown initial
       name starts at the first warehouse.
    2. Each warehouse takes min(space_left, remaining) serials, in batch
       order. space_left = max(0, max_capacity - current_stock); no
       capacity means unbounded.
    3. Serials left over once every warehouse is full go to the last
       warehouse that received something (or the initial one if none did).
       Capacity is a soft limit: overflow is accepted, never an error.

Example:
    A(cap=2, stock=1), B(cap=1, stock=0), batch [s1, s2, s3] starting at A
    → [(A, [s1]), (B, [s2, s3])]
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from roledger.records import Warehouse


@dataclass(frozen=True)
class Allocation:
    """Serials assigned to one warehouse, in batch order."""

    warehouse: Warehouse
    serials: tuple[str, ...]


def order_warehouses(warehouses: Sequence[Warehouse], initial_name: str | None) -> list[Warehouse]:
    """Rotate the warehouse list so it starts at initial_name."""
    start = 0
    for index, warehouse in enumerate(warehouses):
        if warehouse.name == initial_name:
            start = index
            break
    return list(warehouses[start:]) + list(warehouses[:start])


def space_left(warehouse: Warehouse, current_stock: int) -> int | None:
    """Free slots in a warehouse. None = unbounded."""
    if warehouse.max_capacity is None:
        return None
    return max(0, warehouse.max_capacity - current_stock)


def allocate(serials: Sequence[str], warehouses: Sequence[Warehouse],
             initial_name: str | None,
             current_stock: Callable[[str], int]) -> list[Allocation]:
    """
    Split a batch across warehouses.

    Args:
        serials: Batch in scan order
        warehouses: Full warehouse list (catalog order)
        initial_name: Warehouse chosen by the operator
        current_stock: warehouse name -> units currently on shelf there

    Returns:
        One Allocation per warehouse that received serials, in walk order.
        Empty if serials or warehouses is empty.
    """
    ordered = order_warehouses(warehouses, initial_name)
    if not ordered or not serials:
        return []

    groups: dict[str, list[str]] = {}
    by_name: dict[str, Warehouse] = {}
    remaining = list(serials)
    last_touched: Warehouse | None = None

    for warehouse in ordered:
        if not remaining:
            break
        free = space_left(warehouse, current_stock(warehouse.name))
        take = len(remaining) if free is None else min(free, len(remaining))
        if take <= 0:
            continue
        groups.setdefault(warehouse.name, []).extend(remaining[:take])
        by_name[warehouse.name] = warehouse
        remaining = remaining[take:]
        last_touched = warehouse

    if remaining:
        fallback = last_touched or ordered[0]
        groups.setdefault(fallback.name, []).extend(remaining)
        by_name[fallback.name] = fallback

    return [
        Allocation(warehouse=by_name[name], serials=tuple(assigned))
        for name, assigned in groups.items()
    ]
