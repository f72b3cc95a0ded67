"""
Tests for the ledger audit.
"""

import logging
from dataclasses import replace
from datetime import datetime

import pytest
from django.utils import timezone

from roledger.models import TransactionType, UnitStatus
from roledger.records import SerialUnit, Transaction, Warehouse
from roledger.services.audit import verify_state
from roledger.state import LedgerState


T0 = timezone.make_aware(datetime(2024, 10, 1, 9, 0))


def unit(serial, **kwargs):
    defaults = dict(
        serial_number=serial, product_id='P1', status=UnitStatus.NEW,
        warehouse_location='A', import_date=T0,
    )
    defaults.update(kwargs)
    return SerialUnit(**defaults)


def inbound(tx_id, *serials, quantity=None):
    return Transaction(
        id=tx_id, type=TransactionType.INBOUND, date=T0, product_id='P1',
        quantity=len(serials) if quantity is None else quantity,
        serial_numbers=serials, to_location='A',
    )


def consistent_state():
    return LedgerState(
        units=[unit('SN1'), unit('SN2')],
        transactions=[inbound('tx-1', 'SN1', 'SN2')],
        warehouses=[Warehouse(id='a', name='A')],
    )


class TestVerifyState:
    """Tests for verify_state()."""

    def test_consistent(self):
        assert verify_state(consistent_state()) == []

    def test_duplicate_serial(self):
        state = consistent_state()
        state.units.append(unit('SN1'))

        violations = verify_state(state)

        assert 'serial SN1 appears 2 times' in violations

    def test_sold_outside_out(self):
        state = consistent_state()
        state.units[0] = replace(state.units[0], status=UnitStatus.SOLD)

        assert verify_state(state) == ['serial SN1 is SOLD at A']

    def test_new_at_out(self):
        state = consistent_state()
        state.units[0] = replace(state.units[0], warehouse_location='OUT')

        violations = verify_state(state)

        assert 'serial SN1 is NEW at OUT' in violations

    def test_unknown_warehouse(self):
        state = consistent_state()
        state.units[1] = replace(state.units[1], warehouse_location='Kho cũ')

        assert verify_state(state) == ['serial SN2 is on shelf at unknown warehouse Kho cũ']

    def test_missing_inbound(self):
        state = consistent_state()
        state.units.append(unit('SN3'))

        assert verify_state(state) == ['serial SN3 has 0 inbound transaction(s), expected 1']

    def test_reimported_needs_two_inbound(self):
        state = consistent_state()
        state.units[0] = replace(state.units[0], is_reimported=True)

        assert verify_state(state) == ['serial SN1 has 1 inbound transaction(s), expected 2']

    def test_quantity_mismatch(self):
        state = consistent_state()
        state.transactions[0] = inbound('tx-1', 'SN1', 'SN2', quantity=3)

        assert verify_state(state) == ['transaction tx-1 quantity 3 != 2 serials']

    def test_unknown_serial_in_transaction(self):
        state = consistent_state()
        state.transactions.append(inbound('tx-2', 'GHOST'))

        assert verify_state(state) == ['transaction tx-2 references unknown serial GHOST']

    def test_custom_out_location(self):
        state = consistent_state()
        state.units[0] = replace(state.units[0], status=UnitStatus.SOLD, warehouse_location='DA_BAN')

        assert verify_state(state, out_location='DA_BAN') == []


@pytest.mark.django_db
class TestLedgerVerify:
    """Tests for ledger.verify()."""

    def test_fresh_ledger_is_consistent(self, ledger):
        ledger.import_units('P1', ['SN1', 'SN2'], 'W1')
        ledger.export_units('P1', ['SN2'], 'Khách A')

        assert ledger.verify() == []

    def test_violations_are_logged(self, ledger, caplog):
        ledger.import_units('P1', ['SN1'], 'W1')
        ledger.update_warehouse('w1', name='W1 cũ')

        with caplog.at_level(logging.WARNING, logger='roledger'):
            violations = ledger.verify()

        assert violations == ['serial SN1 is on shelf at unknown warehouse W1']
        records = [r for r in caplog.records if r.getMessage() == 'ledger.audit.violation']
        assert len(records) == 1
        assert records[0].violation == violations[0]
