"""
Unit movements — state-changing operations (import, transfer, export).

Every method validates the whole batch against the live state first, then
builds the result on a working copy and commits it in one step. A raised
error leaves units and transactions untouched.
"""

import logging
from collections.abc import Sequence
from dataclasses import replace

from roledger.exceptions import (
    AlreadyInStock,
    InvalidSelection,
    ReimportLimitExceeded,
)
from roledger.models.enums import TransactionType, UnitStatus
from roledger.records import SerialUnit, Transaction
from roledger.services.allocation import allocate
from roledger.services.queries import stock_at

logger = logging.getLogger('roledger')


class UnitMovements:
    """State-changing unit movement methods (mixed into Ledger)."""

    def import_units(self, product_id: str, serials: Sequence[str],
                     initial_warehouse_name: str,
                     plan_name: str | None = None) -> list[Transaction]:
        """
        Stock entry, spread across warehouses by capacity.

        Per serial:
            - never seen        → new NEW unit
            - SOLD, first time  → back to NEW, is_reimported=True
            - SOLD, reimported  → ReimportLimitExceeded
            - on shelf          → AlreadyInStock

        Creates one INBOUND Transaction per warehouse that received serials.

        Returns:
            The created transactions, in allocation order

        Raises:
            InvalidSelection('EMPTY_BATCH'): If serials is empty
            InvalidSelection('UNKNOWN_PRODUCT'): If the product doesn't exist
            InvalidSelection('ALREADY_SCANNED'): If a serial appears twice in the batch
            InvalidSelection('PRODUCT_MISMATCH'): If a sold serial belongs to another product
            AlreadyInStock: First serial (batch order) currently on shelf
            ReimportLimitExceeded: First serial (batch order) already re-imported once
        """
        serials = list(serials)
        if not serials:
            raise InvalidSelection('EMPTY_BATCH')
        if self.get_product_by_id(product_id) is None:
            raise InvalidSelection('UNKNOWN_PRODUCT', product_id=product_id)

        seen = set()
        for serial in serials:
            self._reject_repeat(serial, seen)
            self._check_importable(product_id, serial)

        if self.get_warehouse_by_name(initial_warehouse_name) is None:
            logger.warning(
                "ledger.import.unknown_warehouse",
                extra={"warehouse": initial_warehouse_name},
            )

        state = self._state.copy()
        allocations = allocate(
            serials,
            state.warehouses,
            initial_warehouse_name,
            lambda name: stock_at(state.units, name),
        )
        if not allocations:
            raise InvalidSelection('UNKNOWN_WAREHOUSE', warehouse=initial_warehouse_name)

        now = self._now()
        positions = {u.serial_number: i for i, u in enumerate(state.units)}
        created = []

        for allocation in allocations:
            location = allocation.warehouse.name
            is_reimport = False

            for serial in allocation.serials:
                index = positions.get(serial)
                if index is None:
                    positions[serial] = len(state.units)
                    state.units.append(SerialUnit(
                        serial_number=serial,
                        product_id=product_id,
                        status=UnitStatus.NEW,
                        warehouse_location=location,
                        import_date=now,
                        is_reimported=False,
                    ))
                else:
                    state.units[index] = replace(
                        state.units[index],
                        status=UnitStatus.NEW,
                        warehouse_location=location,
                        import_date=now,
                        is_reimported=True,
                    )
                    is_reimport = True

            tx = Transaction(
                id=self._new_id('tx-in'),
                type=TransactionType.INBOUND,
                date=now,
                product_id=product_id,
                quantity=len(allocation.serials),
                serial_numbers=allocation.serials,
                to_location=location,
                is_reimport_tx=is_reimport,
                plan_name=plan_name,
            )
            state.transactions.append(tx)
            created.append(tx)

        self._commit(state)

        for tx in created:
            logger.info(
                "ledger.import",
                extra={
                    "tx_id": tx.id,
                    "product_id": product_id,
                    "qty": tx.quantity,
                    "warehouse": tx.to_location,
                    "reimport": tx.is_reimport_tx,
                    "plan": plan_name,
                },
            )
        return created

    def transfer_units(self, product_id: str, serials: Sequence[str],
                       to_location_name: str) -> Transaction:
        """
        Move on-shelf units to another warehouse.

        No capacity check. from_location of the transaction is the first
        unit's previous location.

        Raises:
            InvalidSelection('EMPTY_BATCH'): If serials is empty
            InvalidSelection('UNKNOWN_WAREHOUSE'): If the destination doesn't exist
            InvalidSelection('ALREADY_SCANNED'): If a serial appears twice in the batch
            InvalidSelection('UNKNOWN_SERIAL'): If a serial was never imported
            InvalidSelection('PRODUCT_MISMATCH'): If a unit belongs to another product
            InvalidSelection('NOT_IN_STOCK'): If a unit is not on shelf
        """
        serials = list(serials)
        if not serials:
            raise InvalidSelection('EMPTY_BATCH')
        if self.get_warehouse_by_name(to_location_name) is None:
            raise InvalidSelection('UNKNOWN_WAREHOUSE', warehouse=to_location_name)

        seen = set()
        for serial in serials:
            self._reject_repeat(serial, seen)
            unit = self._require_unit(product_id, serial)
            if unit.status != UnitStatus.NEW:
                raise InvalidSelection('NOT_IN_STOCK', serial=serial, status=str(unit.status))

        from_location = self._unit_index[serials[0]].warehouse_location
        state = self._state.copy()
        moving = set(serials)
        state.units = [
            replace(u, warehouse_location=to_location_name) if u.serial_number in moving else u
            for u in state.units
        ]

        tx = Transaction(
            id=self._new_id('tx-tr'),
            type=TransactionType.TRANSFER,
            date=self._now(),
            product_id=product_id,
            quantity=len(serials),
            serial_numbers=tuple(serials),
            from_location=from_location,
            to_location=to_location_name,
        )
        state.transactions.append(tx)
        self._commit(state)

        logger.info(
            "ledger.transfer",
            extra={
                "tx_id": tx.id,
                "product_id": product_id,
                "qty": tx.quantity,
                "from": from_location,
                "to": to_location_name,
            },
        )
        return tx

    def export_units(self, product_id: str, serials: Sequence[str],
                     customer_name: str, from_location: str | None = None) -> Transaction:
        """
        Stock exit (sale).

        Units become SOLD at OUT. Prior status is not checked here: the
        outbound screen validates each scan with validate_outbound_scan().

        Raises:
            InvalidSelection('EMPTY_BATCH'): If serials is empty
            InvalidSelection('UNKNOWN_CUSTOMER'): If customer_name is empty
            InvalidSelection('ALREADY_SCANNED'): If a serial appears twice in the batch
            InvalidSelection('UNKNOWN_SERIAL'): If a serial was never imported
            InvalidSelection('PRODUCT_MISMATCH'): If a unit belongs to another product
        """
        serials = list(serials)
        if not serials:
            raise InvalidSelection('EMPTY_BATCH')
        if not customer_name:
            raise InvalidSelection('UNKNOWN_CUSTOMER')

        seen = set()
        for serial in serials:
            self._reject_repeat(serial, seen)
            self._require_unit(product_id, serial)

        if from_location is None:
            from_location = self._unit_index[serials[0]].warehouse_location

        now = self._now()
        state = self._state.copy()
        leaving = set(serials)
        state.units = [
            replace(
                u,
                status=UnitStatus.SOLD,
                export_date=now,
                customer_name=customer_name,
                warehouse_location=self._out_location,
            ) if u.serial_number in leaving else u
            for u in state.units
        ]

        tx = Transaction(
            id=self._new_id('tx-out'),
            type=TransactionType.OUTBOUND,
            date=now,
            product_id=product_id,
            quantity=len(serials),
            serial_numbers=tuple(serials),
            from_location=from_location,
            customer=customer_name,
        )
        state.transactions.append(tx)
        self._commit(state)

        logger.info(
            "ledger.export",
            extra={
                "tx_id": tx.id,
                "product_id": product_id,
                "qty": tx.quantity,
                "customer": customer_name,
                "from": from_location,
            },
        )
        return tx

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    def _check_importable(self, product_id: str, serial: str) -> None:
        unit = self._unit_index.get(serial)
        if unit is None:
            return
        if unit.status != UnitStatus.SOLD:
            raise AlreadyInStock(serial=serial, location=unit.warehouse_location)
        if unit.is_reimported:
            raise ReimportLimitExceeded(serial=serial)
        if unit.product_id != product_id:
            raise InvalidSelection('PRODUCT_MISMATCH', serial=serial, product_id=unit.product_id)

    def _reject_repeat(self, serial: str, seen: set) -> None:
        if serial in seen:
            raise InvalidSelection('ALREADY_SCANNED', serial=serial)
        seen.add(serial)

    def _require_unit(self, product_id: str, serial: str) -> SerialUnit:
        unit = self._unit_index.get(serial)
        if unit is None:
            raise InvalidSelection('UNKNOWN_SERIAL', serial=serial)
        if unit.product_id != product_id:
            raise InvalidSelection('PRODUCT_MISMATCH', serial=serial, product_id=unit.product_id)
        return unit
