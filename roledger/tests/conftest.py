"""
Pytest fixtures for RO Ledger tests.
"""

from datetime import datetime, timedelta

import pytest
from django.utils import timezone

from roledger.adapters.database import DatabaseSnapshotStore
from roledger.adapters.memory import MemorySnapshotStore
from roledger.records import Product, Warehouse
from roledger.service import Ledger


STORAGE_KEY = 'RO_TEST_DB'


class Clock:
    """Controllable replacement for Ledger._now."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    """Clock fixed at 2024-10-01 09:00 local time."""
    return Clock(timezone.make_aware(datetime(2024, 10, 1, 9, 0)))


@pytest.fixture
def store(db):
    """Database-backed snapshot store."""
    return DatabaseSnapshotStore()


@pytest.fixture
def ledger(store, clock):
    """Ledger on the default catalog with one product and one roomy warehouse."""
    ledger = Ledger(store=store)
    ledger._now = clock
    ledger.add_warehouse(Warehouse(id='w1', name='W1', address='Thanh Xuân', max_capacity=10))
    ledger.add_product(Product(id='P1', model='Karofi KAQ-U95', brand='Karofi', specs='9 cấp lọc'))
    return ledger


@pytest.fixture
def make_ledger(clock):
    """
    Build a ledger on an in-memory store with exactly the given warehouses.

    Usage:
        ledger = make_ledger([Warehouse(id='a', name='A', max_capacity=2)])
    """
    def _make(warehouses, products=None, units=None):
        blob = {
            'products': [p.to_dict() for p in (products or [Product(id='P1', model='RO-9')])],
            'units': [u.to_dict() for u in (units or [])],
            'transactions': [],
            'warehouses': [w.to_dict() for w in warehouses],
            'customers': [],
            'productionPlans': [],
            'salesOrders': [],
        }
        ledger = Ledger(store=MemorySnapshotStore({STORAGE_KEY: blob}), storage_key=STORAGE_KEY)
        ledger._now = clock
        return ledger
    return _make
