"""
Ledger queries — read-only operations.

Nothing here mutates state; repeated calls give identical results absent
intervening writes.
"""

from collections.abc import Iterable
from datetime import date, datetime, time

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from roledger.models.enums import UnitStatus
from roledger.records import SerialUnit, Transaction


END_OF_DAY = time(23, 59, 59, 999000)


def stock_at(units: Iterable[SerialUnit], warehouse_name: str) -> int:
    """Units on shelf (NEW) at a warehouse name."""
    return sum(
        1 for u in units
        if u.status == UnitStatus.NEW and u.warehouse_location == warehouse_name
    )


def _as_local_date(value) -> date | None:
    """Accept date, datetime or ISO string; datetimes are read in local time."""
    if value in (None, ''):
        return None
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    parsed_date = parse_date(text)
    if parsed_date is not None:
        return parsed_date
    parsed = parse_datetime(text)
    if parsed is None:
        raise ValueError(f"Invalid date: {value!r}")
    return _as_local_date(parsed)


def day_bounds(start, end) -> tuple[datetime | None, datetime | None]:
    """
    Inclusive day window in the current timezone.

    start → 00:00:00.000 of its day, end → 23:59:59.999 of its day.
    None leaves that side open.
    """
    tz = timezone.get_current_timezone()
    start_day = _as_local_date(start)
    end_day = _as_local_date(end)
    lower = timezone.make_aware(datetime.combine(start_day, time.min), tz) if start_day else None
    upper = timezone.make_aware(datetime.combine(end_day, END_OF_DAY), tz) if end_day else None
    return lower, upper


class UnitQueries:
    """Read-only unit and history methods (mixed into Ledger)."""

    def get_units(self) -> list[SerialUnit]:
        return list(self._state.units)

    def get_transactions(self) -> list[Transaction]:
        """Every transaction, in the order they were appended."""
        return list(self._state.transactions)

    def get_unit_by_serial(self, serial: str) -> SerialUnit | None:
        return self._unit_index.get(serial)

    def check_serial_imported(self, serial: str) -> bool:
        """True if the serial was ever imported, whatever its current status."""
        return serial in self._unit_index

    def get_units_by_product(self, product_id: str, status: str | None = None) -> list[SerialUnit]:
        return [
            u for u in self._state.units
            if u.product_id == product_id and (status is None or u.status == status)
        ]

    def get_warehouse_current_stock(self, warehouse_name: str) -> int:
        return stock_at(self._state.units, warehouse_name)

    def get_serial_history(self, serial: str) -> list[Transaction]:
        """Transactions that touched a serial, oldest first."""
        history = [t for t in self._state.transactions if serial in t.serial_numbers]
        return sorted(history, key=lambda t: t.date)

    def get_history_by_date_range(self, types: Iterable[str], start=None, end=None) -> list[Transaction]:
        """
        Transactions of the given types inside an inclusive day window.

        Args:
            types: Transaction types to keep (ex: ['OUTBOUND', 'TRANSFER'])
            start: First day (date, datetime or ISO string; None = open)
            end: Last day (date, datetime or ISO string; None = open)

        Returns:
            Matching transactions, newest first
        """
        wanted = {str(t) for t in types}
        lower, upper = day_bounds(start, end)
        matches = [
            t for t in self._state.transactions
            if str(t.type) in wanted
            and (lower is None or t.date >= lower)
            and (upper is None or t.date <= upper)
        ]
        return sorted(matches, key=lambda t: t.date, reverse=True)
