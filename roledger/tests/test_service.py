"""
Tests for Ledger movements: import, transfer, export.
"""

import pytest

from roledger import (
    AlreadyInStock,
    InvalidSelection,
    LedgerError,
    ReimportLimitExceeded,
)
from roledger.models import TransactionType, UnitStatus
from roledger.records import Product, SerialUnit, Warehouse


pytestmark = pytest.mark.django_db


class TestImportUnits:
    """Tests for ledger.import_units()."""

    def test_import_creates_units_and_one_transaction(self, ledger):
        """New serials become NEW units in the chosen warehouse."""
        created = ledger.import_units('P1', ['SN1', 'SN2'], 'W1', plan_name='Lô 10/2024')

        for serial in ('SN1', 'SN2'):
            unit = ledger.get_unit_by_serial(serial)
            assert unit.status == UnitStatus.NEW
            assert unit.warehouse_location == 'W1'
            assert unit.is_reimported is False

        assert len(created) == 1
        tx = created[0]
        assert tx.type == TransactionType.INBOUND
        assert tx.quantity == 2
        assert tx.serial_numbers == ('SN1', 'SN2')
        assert tx.to_location == 'W1'
        assert tx.is_reimport_tx is False
        assert tx.plan_name == 'Lô 10/2024'
        assert ledger.get_transactions() == created

    def test_import_sets_import_date(self, ledger, clock):
        ledger.import_units('P1', ['SN1'], 'W1')

        assert ledger.get_unit_by_serial('SN1').import_date == clock.now

    def test_import_already_in_stock(self, ledger):
        """Serial on shelf cannot be imported again."""
        ledger.import_units('P1', ['SN1'], 'W1')

        with pytest.raises(AlreadyInStock) as exc:
            ledger.import_units('P1', ['SN1'], 'W1')

        assert exc.value.code == 'ALREADY_IN_STOCK'
        assert exc.value.serial == 'SN1'

    def test_import_is_all_or_nothing(self, ledger):
        """Second serial on shelf: nothing from the batch is written."""
        ledger.import_units('P1', ['SN2'], 'W1')
        units_before = ledger.get_units()
        txs_before = ledger.get_transactions()

        with pytest.raises(AlreadyInStock) as exc:
            ledger.import_units('P1', ['SN1', 'SN2', 'SN3'], 'W1')

        assert exc.value.serial == 'SN2'
        assert ledger.get_unit_by_serial('SN1') is None
        assert ledger.get_units() == units_before
        assert ledger.get_transactions() == txs_before

    def test_failed_import_is_not_persisted(self, ledger, store):
        """The stored snapshot is untouched by a failed call."""
        ledger.import_units('P1', ['SN2'], 'W1')
        stored_before = store.load(ledger.storage_key)

        with pytest.raises(AlreadyInStock):
            ledger.import_units('P1', ['SN1', 'SN2'], 'W1')

        assert store.load(ledger.storage_key) == stored_before

    def test_first_invalid_serial_in_batch_order_wins(self, ledger):
        """The error names the first bad serial, whatever its kind."""
        ledger.import_units('P1', ['A1', 'B1'], 'W1')
        ledger.export_units('P1', ['A1'], 'Khách A')
        ledger.import_units('P1', ['A1'], 'W1')
        ledger.export_units('P1', ['A1'], 'Khách A')

        with pytest.raises(ReimportLimitExceeded) as exc:
            ledger.import_units('P1', ['NEW1', 'A1', 'B1'], 'W1')

        assert exc.value.serial == 'A1'

    def test_empty_batch(self, ledger):
        with pytest.raises(InvalidSelection) as exc:
            ledger.import_units('P1', [], 'W1')

        assert exc.value.code == 'EMPTY_BATCH'

    def test_unknown_product(self, ledger):
        with pytest.raises(InvalidSelection) as exc:
            ledger.import_units('P404', ['SN1'], 'W1')

        assert exc.value.code == 'UNKNOWN_PRODUCT'
        assert not ledger.check_serial_imported('SN1')

    def test_duplicate_serial_in_batch(self, ledger):
        """A serial scanned twice in one batch is rejected, not double-counted."""
        with pytest.raises(InvalidSelection) as exc:
            ledger.import_units('P1', ['SN1', 'SN1'], 'W1')

        assert exc.value.code == 'ALREADY_SCANNED'
        assert ledger.get_units() == []

    def test_unknown_warehouse_falls_back_to_first(self, ledger):
        """Unknown initial warehouse starts the walk at the first warehouse."""
        first = ledger.get_warehouses()[0]

        ledger.import_units('P1', ['SN1'], 'Kho không tồn tại')

        assert ledger.get_unit_by_serial('SN1').warehouse_location == first.name


class TestReimport:
    """Tests for the SOLD → NEW re-import edge."""

    def test_reimport_once(self, ledger):
        """A sold unit comes back once, flagged as re-imported."""
        ledger.import_units('P1', ['SN1'], 'W1')
        ledger.export_units('P1', ['SN1'], 'Khách A')

        created = ledger.import_units('P1', ['SN1'], 'W1')

        unit = ledger.get_unit_by_serial('SN1')
        assert unit.status == UnitStatus.NEW
        assert unit.warehouse_location == 'W1'
        assert unit.is_reimported is True
        assert created[0].is_reimport_tx is True

    def test_second_reimport_fails(self, ledger):
        """After one re-import the edge is closed for good."""
        ledger.import_units('P1', ['SN1'], 'W1')
        ledger.export_units('P1', ['SN1'], 'Khách A')
        ledger.import_units('P1', ['SN1'], 'W1')
        ledger.export_units('P1', ['SN1'], 'Khách B')

        with pytest.raises(ReimportLimitExceeded) as exc:
            ledger.import_units('P1', ['SN1'], 'W1')

        assert exc.value.code == 'REIMPORT_LIMIT_EXCEEDED'
        unit = ledger.get_unit_by_serial('SN1')
        assert unit.status == UnitStatus.SOLD
        assert unit.warehouse_location == 'OUT'

    def test_mixed_batch_flags_transaction(self, ledger):
        """One re-imported serial is enough to flag the batch transaction."""
        ledger.import_units('P1', ['SN1'], 'W1')
        ledger.export_units('P1', ['SN1'], 'Khách A')

        created = ledger.import_units('P1', ['SN1', 'SN9'], 'W1')

        assert len(created) == 1
        assert created[0].is_reimport_tx is True
        assert ledger.get_unit_by_serial('SN9').is_reimported is False

    def test_reimport_under_other_product_fails(self, ledger):
        """A sold serial cannot come back as another model."""
        ledger.add_product(Product(id='P2', model='Kangaroo KG100'))
        ledger.import_units('P1', ['SN1'], 'W1')
        ledger.export_units('P1', ['SN1'], 'Khách A')

        with pytest.raises(InvalidSelection) as exc:
            ledger.import_units('P2', ['SN1'], 'W1')

        assert exc.value.code == 'PRODUCT_MISMATCH'


class TestCapacitySpillover:
    """Tests for multi-warehouse allocation through import_units()."""

    def test_spillover_creates_transaction_per_warehouse(self, make_ledger, clock):
        """A(cap=2, stock=1), B(cap=1): 1 to A, 2 to B, two INBOUND transactions."""
        existing = SerialUnit(
            serial_number='OLD', product_id='P1', status=UnitStatus.NEW,
            warehouse_location='A', import_date=clock.now,
        )
        ledger = make_ledger(
            [Warehouse(id='a', name='A', max_capacity=2), Warehouse(id='b', name='B', max_capacity=1)],
            units=[existing],
        )

        created = ledger.import_units('P1', ['s1', 's2', 's3'], 'A')

        assert [(tx.to_location, tx.serial_numbers) for tx in created] == [
            ('A', ('s1',)),
            ('B', ('s2', 's3')),
        ]
        assert [tx.quantity for tx in created] == [1, 2]
        assert ledger.get_warehouse_current_stock('A') == 2
        assert ledger.get_warehouse_current_stock('B') == 2

    def test_reimport_goes_to_its_group_warehouse(self, make_ledger):
        """Re-imported units land where their group was allocated."""
        ledger = make_ledger([
            Warehouse(id='a', name='A', max_capacity=1),
            Warehouse(id='b', name='B'),
        ])
        ledger.import_units('P1', ['s1'], 'A')
        ledger.export_units('P1', ['s1'], 'Khách A')
        ledger.import_units('P1', ['s2'], 'A')

        created = ledger.import_units('P1', ['s1'], 'A')

        assert created[0].to_location == 'B'
        assert ledger.get_unit_by_serial('s1').warehouse_location == 'B'


class TestTransferUnits:
    """Tests for ledger.transfer_units()."""

    def test_transfer_moves_units(self, ledger):
        ledger.import_units('P1', ['SN1', 'SN2'], 'W1')
        destination = ledger.get_warehouses()[0].name

        tx = ledger.transfer_units('P1', ['SN1', 'SN2'], destination)

        assert ledger.get_unit_by_serial('SN1').warehouse_location == destination
        assert ledger.get_warehouse_current_stock('W1') == 0
        assert tx.type == TransactionType.TRANSFER
        assert tx.from_location == 'W1'
        assert tx.to_location == destination
        assert tx.quantity == 2

    def test_transfer_ignores_capacity(self, ledger):
        """Transfers may overfill a warehouse."""
        ledger.add_warehouse(Warehouse(id='tiny', name='Tiny', max_capacity=1))
        ledger.import_units('P1', ['SN1', 'SN2'], 'W1')

        ledger.transfer_units('P1', ['SN1', 'SN2'], 'Tiny')

        assert ledger.get_warehouse_current_stock('Tiny') == 2

    def test_transfer_unknown_destination(self, ledger):
        ledger.import_units('P1', ['SN1'], 'W1')

        with pytest.raises(InvalidSelection) as exc:
            ledger.transfer_units('P1', ['SN1'], 'Kho ma')

        assert exc.value.code == 'UNKNOWN_WAREHOUSE'

    def test_transfer_sold_unit_fails(self, ledger):
        """Sold units stay at OUT."""
        ledger.import_units('P1', ['SN1'], 'W1')
        ledger.export_units('P1', ['SN1'], 'Khách A')

        with pytest.raises(InvalidSelection) as exc:
            ledger.transfer_units('P1', ['SN1'], 'W1')

        assert exc.value.code == 'NOT_IN_STOCK'
        assert ledger.get_unit_by_serial('SN1').warehouse_location == 'OUT'

    def test_transfer_empty_batch(self, ledger):
        with pytest.raises(InvalidSelection) as exc:
            ledger.transfer_units('P1', [], 'W1')

        assert exc.value.code == 'EMPTY_BATCH'

    def test_transfer_repeated_serial(self, ledger):
        """A serial listed twice is rejected, not counted twice."""
        ledger.import_units('P1', ['SN1', 'SN2'], 'W1')
        txs_before = ledger.get_transactions()

        with pytest.raises(InvalidSelection) as exc:
            ledger.transfer_units('P1', ['SN1', 'SN2', 'SN1'], ledger.get_warehouses()[0].name)

        assert exc.value.code == 'ALREADY_SCANNED'
        assert exc.value.serial == 'SN1'
        assert ledger.get_transactions() == txs_before
        assert ledger.get_warehouse_current_stock('W1') == 2


class TestExportUnits:
    """Tests for ledger.export_units()."""

    def test_export_sells_units(self, ledger, clock):
        ledger.import_units('P1', ['SN1', 'SN2'], 'W1')
        clock.advance(hours=2)

        tx = ledger.export_units('P1', ['SN1'], 'Customer A')

        unit = ledger.get_unit_by_serial('SN1')
        assert unit.status == UnitStatus.SOLD
        assert unit.warehouse_location == 'OUT'
        assert unit.customer_name == 'Customer A'
        assert unit.export_date == clock.now
        assert ledger.get_unit_by_serial('SN2').status == UnitStatus.NEW
        assert tx.type == TransactionType.OUTBOUND
        assert tx.customer == 'Customer A'
        assert tx.from_location == 'W1'
        assert tx.quantity == 1

    def test_export_explicit_from_location(self, ledger):
        ledger.import_units('P1', ['SN1'], 'W1')

        tx = ledger.export_units('P1', ['SN1'], 'Customer A', from_location='Quầy')

        assert tx.from_location == 'Quầy'

    def test_export_unknown_serial(self, ledger):
        with pytest.raises(InvalidSelection) as exc:
            ledger.export_units('P1', ['GHOST'], 'Customer A')

        assert exc.value.code == 'UNKNOWN_SERIAL'
        assert ledger.get_transactions() == []

    def test_export_requires_customer(self, ledger):
        ledger.import_units('P1', ['SN1'], 'W1')

        with pytest.raises(InvalidSelection) as exc:
            ledger.export_units('P1', ['SN1'], '')

        assert exc.value.code == 'UNKNOWN_CUSTOMER'

    def test_export_repeated_serial(self, ledger):
        """A serial listed twice is rejected, not counted twice."""
        ledger.import_units('P1', ['SN1'], 'W1')

        with pytest.raises(InvalidSelection) as exc:
            ledger.export_units('P1', ['SN1', 'SN1'], 'Customer A')

        assert exc.value.code == 'ALREADY_SCANNED'
        assert ledger.get_unit_by_serial('SN1').status == UnitStatus.NEW
        assert len(ledger.get_transactions()) == 1


class TestEndToEnd:
    """Full lifecycle of a serial."""

    def test_import_export_reimport_cycle(self, ledger, clock):
        ledger.import_units('P1', ['SN1', 'SN2'], 'W1')
        assert [ledger.get_unit_by_serial(s).status for s in ('SN1', 'SN2')] == ['NEW', 'NEW']
        assert len(ledger.get_transactions()) == 1

        clock.advance(days=1)
        ledger.export_units('P1', ['SN1'], 'Customer A')
        sn1 = ledger.get_unit_by_serial('SN1')
        assert (sn1.status, sn1.warehouse_location, sn1.customer_name) == ('SOLD', 'OUT', 'Customer A')
        assert ledger.get_transactions()[-1].type == TransactionType.OUTBOUND

        clock.advance(days=1)
        created = ledger.import_units('P1', ['SN1'], 'W1')
        sn1 = ledger.get_unit_by_serial('SN1')
        assert (sn1.status, sn1.is_reimported) == ('NEW', True)
        assert created[0].is_reimport_tx is True

        clock.advance(days=1)
        ledger.export_units('P1', ['SN1'], 'Customer B')
        with pytest.raises(ReimportLimitExceeded):
            ledger.import_units('P1', ['SN1'], 'W1')

        assert len(ledger.get_transactions()) == 4
        assert ledger.verify() == []

    def test_status_location_coupling_holds(self, ledger):
        """SOLD ⇔ OUT for every unit after a mix of operations."""
        ledger.import_units('P1', ['a', 'b', 'c', 'd'], 'W1')
        ledger.export_units('P1', ['a', 'c'], 'Customer A')
        ledger.transfer_units('P1', ['b'], ledger.get_warehouses()[0].name)
        ledger.import_units('P1', ['a'], 'W1')

        for unit in ledger.get_units():
            assert (unit.status == UnitStatus.SOLD) == (unit.warehouse_location == 'OUT')
        serials = [u.serial_number for u in ledger.get_units()]
        assert len(serials) == len(set(serials))

    def test_errors_share_base_class(self, ledger):
        """Every ledger error can be caught as LedgerError."""
        with pytest.raises(LedgerError) as exc:
            ledger.import_units('P1', [], 'W1')

        assert exc.value.as_dict()['code'] == 'EMPTY_BATCH'
