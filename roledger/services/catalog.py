"""
Catalog store — products, warehouses and customers.

Plain CRUD with referential guards. Every mutation persists the whole
ledger snapshot.
"""

import logging
from dataclasses import fields, replace

from roledger.exceptions import InvalidSelection, ReferentialIntegrityError
from roledger.records import Customer, Product, Warehouse

logger = logging.getLogger('roledger')


def _merge(record, updates: dict):
    """Copy of record with updates applied. The id is never changed."""
    allowed = {f.name for f in fields(record)} - {'id'}
    unknown = set(updates) - allowed
    if unknown:
        raise InvalidSelection('INVALID_FIELD', fields=sorted(unknown))
    return replace(record, **updates)


def _clean_capacity(value) -> int | None:
    """None/'' mean unbounded; anything else must be a non-negative integer."""
    if value in (None, ''):
        return None
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise InvalidSelection('INVALID_FIELD', max_capacity=value)
    try:
        capacity = int(value)
    except (TypeError, ValueError):
        raise InvalidSelection('INVALID_FIELD', max_capacity=value) from None
    if capacity < 0:
        raise InvalidSelection('INVALID_FIELD', max_capacity=value)
    return capacity


class CatalogStore:
    """Catalog CRUD methods (mixed into Ledger)."""

    # ══════════════════════════════════════════════════════════════
    # GETTERS
    # ══════════════════════════════════════════════════════════════

    def get_products(self) -> list[Product]:
        return list(self._state.products)

    def get_warehouses(self) -> list[Warehouse]:
        return list(self._state.warehouses)

    def get_customers(self) -> list[Customer]:
        return list(self._state.customers)

    def get_product_by_id(self, product_id: str) -> Product | None:
        return next((p for p in self._state.products if p.id == product_id), None)

    def get_warehouse_by_id(self, warehouse_id: str) -> Warehouse | None:
        return next((w for w in self._state.warehouses if w.id == warehouse_id), None)

    def get_warehouse_by_name(self, name: str) -> Warehouse | None:
        return next((w for w in self._state.warehouses if w.name == name), None)

    def get_customer_by_id(self, customer_id: str) -> Customer | None:
        return next((c for c in self._state.customers if c.id == customer_id), None)

    # ══════════════════════════════════════════════════════════════
    # PRODUCTS
    # ══════════════════════════════════════════════════════════════

    def add_product(self, product: Product) -> Product:
        """
        Raises:
            InvalidSelection('DUPLICATE_ID'): If the id is already used
        """
        if self.get_product_by_id(product.id) is not None:
            raise InvalidSelection('DUPLICATE_ID', id=product.id)
        state = self._state.copy()
        state.products.append(product)
        self._commit(state)
        logger.info("catalog.product.add", extra={"product_id": product.id, "model": product.model})
        return product

    def update_product(self, product_id: str, **updates) -> Product | None:
        """Merge fields into a product. No-op (returns None) if the id is absent."""
        return self._update_record('products', product_id, updates)

    def delete_product(self, product_id: str) -> None:
        """
        Raises:
            ReferentialIntegrityError('PRODUCT_IN_USE'): If any unit references it
        """
        in_use = sum(1 for u in self._state.units if u.product_id == product_id)
        if in_use:
            raise ReferentialIntegrityError('PRODUCT_IN_USE', product_id=product_id, units=in_use)
        self._delete_record('products', product_id)

    # ══════════════════════════════════════════════════════════════
    # WAREHOUSES
    # ══════════════════════════════════════════════════════════════

    def add_warehouse(self, warehouse: Warehouse) -> Warehouse:
        """
        Raises:
            InvalidSelection('DUPLICATE_ID'): If the id is already used
            InvalidSelection('INVALID_NAME'): If the name is empty or the OUT location
            InvalidSelection('DUPLICATE_NAME'): If another warehouse has the name
            InvalidSelection('INVALID_FIELD'): If max_capacity is not a non-negative integer
        """
        self._check_warehouse_name(warehouse.name, warehouse.id)
        if self.get_warehouse_by_id(warehouse.id) is not None:
            raise InvalidSelection('DUPLICATE_ID', id=warehouse.id)
        warehouse = replace(warehouse, max_capacity=_clean_capacity(warehouse.max_capacity))
        state = self._state.copy()
        state.warehouses.append(warehouse)
        self._commit(state)
        logger.info("catalog.warehouse.add", extra={"warehouse_id": warehouse.id, "warehouse_name": warehouse.name})
        return warehouse

    def update_warehouse(self, warehouse_id: str, **updates) -> Warehouse | None:
        """
        Merge fields into a warehouse. No-op (returns None) if the id is absent.

        Renaming does not touch units: they keep pointing at the old name.

        Raises:
            InvalidSelection('INVALID_NAME'): If the new name is empty or the OUT location
            InvalidSelection('DUPLICATE_NAME'): If another warehouse has the new name
            InvalidSelection('INVALID_FIELD'): Unknown field, or a bad max_capacity
        """
        if self.get_warehouse_by_id(warehouse_id) is None:
            return None
        if 'name' in updates:
            self._check_warehouse_name(updates['name'], warehouse_id)
        if 'max_capacity' in updates:
            updates['max_capacity'] = _clean_capacity(updates['max_capacity'])
        return self._update_record('warehouses', warehouse_id, updates)

    def _check_warehouse_name(self, name, warehouse_id: str) -> None:
        """Names are the join key from units: non-empty, not OUT, unique."""
        if not name or not str(name).strip() or name == self._out_location:
            raise InvalidSelection('INVALID_NAME', id=warehouse_id, warehouse=name)
        clash = self.get_warehouse_by_name(name)
        if clash is not None and clash.id != warehouse_id:
            raise InvalidSelection('DUPLICATE_NAME', warehouse=name, id=clash.id)

    def delete_warehouse(self, warehouse_id: str) -> None:
        """
        Raises:
            ReferentialIntegrityError('WAREHOUSE_IN_USE'): If units are on shelf there
            ReferentialIntegrityError('LAST_WAREHOUSE'): If it is the only warehouse
        """
        warehouse = self.get_warehouse_by_id(warehouse_id)
        if warehouse is None:
            return

        stored = self.get_warehouse_current_stock(warehouse.name)
        if stored:
            raise ReferentialIntegrityError(
                'WAREHOUSE_IN_USE',
                warehouse=warehouse.name,
                units=stored,
            )
        if len(self._state.warehouses) <= 1:
            raise ReferentialIntegrityError('LAST_WAREHOUSE', warehouse=warehouse.name)

        self._delete_record('warehouses', warehouse_id)

    # ══════════════════════════════════════════════════════════════
    # CUSTOMERS
    # ══════════════════════════════════════════════════════════════

    def add_customer(self, customer: Customer) -> Customer:
        if self.get_customer_by_id(customer.id) is not None:
            raise InvalidSelection('DUPLICATE_ID', id=customer.id)
        state = self._state.copy()
        state.customers.append(customer)
        self._commit(state)
        logger.info("catalog.customer.add", extra={"customer_id": customer.id, "customer_name": customer.name})
        return customer

    def update_customer(self, customer_id: str, **updates) -> Customer | None:
        return self._update_record('customers', customer_id, updates)

    def delete_customer(self, customer_id: str) -> None:
        self._delete_record('customers', customer_id)

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    def _update_record(self, collection: str, record_id: str, updates: dict):
        records = getattr(self._state, collection)
        index = next((i for i, r in enumerate(records) if r.id == record_id), None)
        if index is None:
            return None

        updated = _merge(records[index], updates)
        state = self._state.copy()
        getattr(state, collection)[index] = updated
        self._commit(state)
        logger.info(
            "catalog.update",
            extra={"collection": collection, "id": record_id, "fields": sorted(updates)},
        )
        return updated

    def _delete_record(self, collection: str, record_id: str) -> None:
        state = self._state.copy()
        records = getattr(state, collection)
        kept = [r for r in records if r.id != record_id]
        if len(kept) == len(records):
            return
        setattr(state, collection, kept)
        self._commit(state)
        logger.info("catalog.delete", extra={"collection": collection, "id": record_id})

