"""
Ledger audit — check the unit projection against the transaction log.

Usage:
    violations = ledger.verify()
    # [] when consistent; one message per problem otherwise

Checks:
    - serial numbers are unique
    - SOLD units are at OUT and nothing else is
    - NEW units sit in a known warehouse
    - every unit has at least one INBOUND transaction
    - re-imported units have two INBOUND transactions
    - every transaction serial is a known unit and quantity matches the batch
"""

from collections import Counter

from roledger.models.enums import TransactionType, UnitStatus
from roledger.state import LedgerState


def verify_state(state: LedgerState, out_location: str = 'OUT') -> list[str]:
    """Return one message per invariant violation (empty = consistent)."""
    violations = []

    counts = Counter(u.serial_number for u in state.units)
    for serial, count in sorted(counts.items()):
        if count > 1:
            violations.append(f"serial {serial} appears {count} times")

    warehouse_names = {w.name for w in state.warehouses}
    inbound = Counter()
    known = set(counts)

    for tx in state.transactions:
        if tx.quantity != len(tx.serial_numbers):
            violations.append(
                f"transaction {tx.id} quantity {tx.quantity} != {len(tx.serial_numbers)} serials"
            )
        for serial in tx.serial_numbers:
            if serial not in known:
                violations.append(f"transaction {tx.id} references unknown serial {serial}")
            if tx.type == TransactionType.INBOUND:
                inbound[serial] += 1

    for unit in state.units:
        serial = unit.serial_number
        is_sold = unit.status == UnitStatus.SOLD
        is_out = unit.warehouse_location == out_location

        if is_sold != is_out:
            violations.append(
                f"serial {serial} is {unit.status} at {unit.warehouse_location}"
            )
        if unit.status == UnitStatus.NEW and unit.warehouse_location not in warehouse_names:
            violations.append(
                f"serial {serial} is on shelf at unknown warehouse {unit.warehouse_location}"
            )

        expected = 2 if unit.is_reimported else 1
        if inbound[serial] < expected:
            violations.append(
                f"serial {serial} has {inbound[serial]} inbound transaction(s), expected {expected}"
            )

    return violations
