"""
Planning — production plans, sales orders, scan validation and drafts.

These entities reference the ledger (through get_unit_by_serial) but never
take part in the unit state machine.
"""

import json
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from roledger.exceptions import (
    AlreadyInStock,
    InvalidSelection,
    ReimportLimitExceeded,
)
from roledger.models.enums import SalesOrderStatus, SalesOrderType, UnitStatus
from roledger.records import ProductionPlan, SalesOrder, SalesOrderItem, SerialUnit

logger = logging.getLogger('roledger')

DRAFT_KINDS = ('inbound', 'outbound')


@dataclass(frozen=True)
class PlanCheckResult:
    serial: str
    unit: SerialUnit | None

    @property
    def found(self) -> bool:
        return self.unit is not None


@dataclass(frozen=True)
class PlanProgress:
    """How much of a production plan already reached the warehouses."""

    plan: ProductionPlan
    results: tuple[PlanCheckResult, ...]

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def found(self) -> int:
        return sum(1 for r in self.results if r.found)

    @property
    def remaining(self) -> int:
        return self.total - self.found


def _unique(serials: Iterable[str]) -> tuple[str, ...]:
    """Strip, drop blanks and duplicates, keep first-seen order."""
    seen = {}
    for serial in serials:
        cleaned = str(serial).strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return tuple(seen)


class LedgerPlanning:
    """Production plan, sales order and draft methods (mixed into Ledger)."""

    # ══════════════════════════════════════════════════════════════
    # PRODUCTION PLANS
    # ══════════════════════════════════════════════════════════════

    def get_production_plans(self) -> list[ProductionPlan]:
        """Newest first."""
        return list(self._state.production_plans)

    def get_production_plan(self, plan_id: str) -> ProductionPlan | None:
        return next((p for p in self._state.production_plans if p.id == plan_id), None)

    def add_production_plan(self, name: str, product_id: str, serials: Sequence[str]) -> ProductionPlan:
        """
        Declare a batch of serials for production tracking.

        Raises:
            InvalidSelection('INVALID_NAME'): If name is empty
            InvalidSelection('UNKNOWN_PRODUCT'): If the product doesn't exist
            InvalidSelection('EMPTY_BATCH'): If no serial is left after cleanup
        """
        cleaned = self._validate_plan(name, product_id, serials)
        plan = ProductionPlan(
            id=self._new_id('plan'),
            name=name.strip(),
            product_id=product_id,
            created_date=self._now(),
            serials=cleaned,
        )
        state = self._state.copy()
        state.production_plans.insert(0, plan)
        self._commit(state)
        logger.info(
            "planning.plan.add",
            extra={"plan_id": plan.id, "plan": plan.name, "serials": len(cleaned)},
        )
        return plan

    def update_production_plan(self, plan_id: str, name: str, product_id: str,
                               serials: Sequence[str]) -> ProductionPlan | None:
        """Replace name, product and serials. No-op (returns None) if absent."""
        plans = self._state.production_plans
        index = next((i for i, p in enumerate(plans) if p.id == plan_id), None)
        if index is None:
            return None

        cleaned = self._validate_plan(name, product_id, serials)
        updated = replace(plans[index], name=name.strip(), product_id=product_id, serials=cleaned)
        state = self._state.copy()
        state.production_plans[index] = updated
        self._commit(state)
        logger.info("planning.plan.update", extra={"plan_id": plan_id, "serials": len(cleaned)})
        return updated

    def delete_production_plan(self, plan_id: str) -> None:
        state = self._state.copy()
        state.production_plans = [p for p in state.production_plans if p.id != plan_id]
        if len(state.production_plans) != len(self._state.production_plans):
            self._commit(state)
            logger.info("planning.plan.delete", extra={"plan_id": plan_id})

    def check_production_plan(self, plan_id: str) -> PlanProgress:
        """
        Match a plan's serials against the ledger.

        Raises:
            InvalidSelection('UNKNOWN_PLAN'): If the plan doesn't exist
        """
        plan = self.get_production_plan(plan_id)
        if plan is None:
            raise InvalidSelection('UNKNOWN_PLAN', plan_id=plan_id)
        return PlanProgress(
            plan=plan,
            results=tuple(
                PlanCheckResult(serial=s, unit=self.get_unit_by_serial(s))
                for s in plan.serials
            ),
        )

    def _validate_plan(self, name: str, product_id: str, serials: Sequence[str]) -> tuple[str, ...]:
        if not name or not name.strip():
            raise InvalidSelection('INVALID_NAME')
        if self.get_product_by_id(product_id) is None:
            raise InvalidSelection('UNKNOWN_PRODUCT', product_id=product_id)
        cleaned = _unique(serials)
        if not cleaned:
            raise InvalidSelection('EMPTY_BATCH')
        return cleaned

    # ══════════════════════════════════════════════════════════════
    # SCAN VALIDATION
    # ══════════════════════════════════════════════════════════════

    def validate_inbound_scan(self, plan_id: str | None, serial: str,
                              scanned: Iterable[str] = ()) -> str:
        """
        Check one scanned code before it joins an inbound list.

        Returns:
            The cleaned serial

        Raises:
            InvalidSelection('UNKNOWN_PLAN'): No plan selected / plan missing
            InvalidSelection('UNKNOWN_SERIAL'): Blank scan
            InvalidSelection('ALREADY_SCANNED'): Already in the list
            InvalidSelection('NOT_IN_PLAN'): Serial not declared in the plan
            AlreadyInStock: Unit is on shelf
            ReimportLimitExceeded: Unit was already re-imported once
        """
        plan = self.get_production_plan(plan_id) if plan_id else None
        if plan is None:
            raise InvalidSelection('UNKNOWN_PLAN', plan_id=plan_id)

        code = (serial or '').strip()
        if not code:
            raise InvalidSelection('UNKNOWN_SERIAL', serial=code)
        if code in set(scanned):
            raise InvalidSelection('ALREADY_SCANNED', serial=code)
        if code not in plan.serials:
            raise InvalidSelection('NOT_IN_PLAN', serial=code, plan=plan.name)

        unit = self.get_unit_by_serial(code)
        if unit is not None:
            if unit.status != UnitStatus.SOLD:
                raise AlreadyInStock(serial=code, location=unit.warehouse_location)
            if unit.is_reimported:
                raise ReimportLimitExceeded(serial=code)
        return code

    def validate_outbound_scan(self, product_id: str | None, serial: str,
                               scanned: Iterable[str] = ()) -> SerialUnit:
        """
        Check one scanned code before it joins an outbound list.

        Returns:
            The unit on shelf

        Raises:
            InvalidSelection('UNKNOWN_PRODUCT'): No model selected / model missing
            InvalidSelection('ALREADY_SCANNED'): Already in the list
            InvalidSelection('UNKNOWN_SERIAL'): Serial never imported
            InvalidSelection('PRODUCT_MISMATCH'): Unit belongs to another model
            InvalidSelection('NOT_IN_STOCK'): Unit already left
        """
        if not product_id or self.get_product_by_id(product_id) is None:
            raise InvalidSelection('UNKNOWN_PRODUCT', product_id=product_id)

        code = (serial or '').strip()
        if not code:
            raise InvalidSelection('UNKNOWN_SERIAL', serial=code)
        if code in set(scanned):
            raise InvalidSelection('ALREADY_SCANNED', serial=code)

        unit = self.get_unit_by_serial(code)
        if unit is None:
            raise InvalidSelection('UNKNOWN_SERIAL', serial=code)
        if unit.product_id != product_id:
            raise InvalidSelection('PRODUCT_MISMATCH', serial=code, product_id=unit.product_id)
        if unit.status != UnitStatus.NEW:
            raise InvalidSelection('NOT_IN_STOCK', serial=code, status=str(unit.status))
        return unit

    # ══════════════════════════════════════════════════════════════
    # SALES ORDERS
    # ══════════════════════════════════════════════════════════════

    def get_sales_orders(self) -> list[SalesOrder]:
        """Newest first."""
        return list(self._state.sales_orders)

    def add_sales_order(self, code: str, target_name: str, items: Sequence[SalesOrderItem],
                        type: str = SalesOrderType.SALE,
                        destination: str | None = None) -> SalesOrder:
        """
        Create a PENDING order. Scanned counts start at zero.

        SALE orders keep target_name as the customer; TRANSFER orders keep
        destination as the target warehouse.

        Raises:
            InvalidSelection('INVALID_FIELD'): Unknown order type
            InvalidSelection('EMPTY_BATCH'): No items
            InvalidSelection('UNKNOWN_PRODUCT'): Item with an unknown product
            InvalidSelection('UNKNOWN_CUSTOMER'): SALE without a customer
            InvalidSelection('UNKNOWN_WAREHOUSE'): TRANSFER without a destination
        """
        try:
            order_type = SalesOrderType(type)
        except ValueError:
            raise InvalidSelection('INVALID_FIELD', type=type)

        items = list(items)
        if not items:
            raise InvalidSelection('EMPTY_BATCH')
        for item in items:
            if self.get_product_by_id(item.product_id) is None:
                raise InvalidSelection('UNKNOWN_PRODUCT', product_id=item.product_id)

        if order_type == SalesOrderType.SALE and not target_name:
            raise InvalidSelection('UNKNOWN_CUSTOMER')
        if order_type == SalesOrderType.TRANSFER and not destination:
            raise InvalidSelection('UNKNOWN_WAREHOUSE', warehouse=destination)

        order = SalesOrder(
            id=self._new_id('so'),
            code=code,
            type=order_type,
            status=SalesOrderStatus.PENDING,
            created_date=self._now(),
            items=tuple(replace(item, scanned_count=0) for item in items),
            customer_name=target_name if order_type == SalesOrderType.SALE else None,
            destination_warehouse=destination if order_type == SalesOrderType.TRANSFER else None,
        )
        state = self._state.copy()
        state.sales_orders.insert(0, order)
        self._commit(state)
        logger.info(
            "planning.order.add",
            extra={"order_id": order.id, "code": code, "type": str(order_type)},
        )
        return order

    def delete_sales_order(self, order_id: str) -> None:
        state = self._state.copy()
        state.sales_orders = [o for o in state.sales_orders if o.id != order_id]
        if len(state.sales_orders) != len(self._state.sales_orders):
            self._commit(state)
            logger.info("planning.order.delete", extra={"order_id": order_id})

    # ══════════════════════════════════════════════════════════════
    # DRAFTS
    # ══════════════════════════════════════════════════════════════

    def get_drafts(self) -> dict[str, list[str]]:
        """Unsubmitted scan lists, one per kind."""
        drafts = self._load_drafts()
        return {kind: list(drafts.get(kind, [])) for kind in DRAFT_KINDS}

    def save_draft(self, kind: str, serials: Sequence[str]) -> None:
        if kind not in DRAFT_KINDS:
            raise InvalidSelection('INVALID_DRAFT_KIND', kind=kind)
        drafts = self.get_drafts()
        drafts[kind] = [str(s) for s in serials]
        self._store.save(self._draft_storage_key, drafts)
        self._drafts = drafts

    def clear_draft(self, kind: str) -> None:
        self.save_draft(kind, [])

    def _load_drafts(self) -> dict[str, list[str]]:
        if self._drafts is None:
            raw = self._store.load(self._draft_storage_key)
            try:
                data = json.loads(raw) if isinstance(raw, (str, bytes)) else raw
            except ValueError:
                data = None
            if not isinstance(data, dict):
                data = {}
            self._drafts = {
                kind: [str(s) for s in data[kind]] if isinstance(data.get(kind), list) else []
                for kind in DRAFT_KINDS
            }
        return self._drafts
