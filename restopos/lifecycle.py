"""Order lifecycle: location selection, editing, saving and status transitions."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator
from uuid import uuid4

from restopos.catalog import Catalog
from restopos.config import ALLOW_NEGATIVE_STOCK, TAX_RATE
from restopos.errors import InvalidTransition, LocationOccupied, NotFound, PolicyViolation
from restopos.locations import LocationRegistry
from restopos.models import LocationId, OrderStatus, Product, now_stamp
from restopos.orders import Order
from restopos.persistence import ORDERS_KEY, PRODUCTS_KEY, KeyValueStore, iter_records

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.COMPLETED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

PrinterSink = Callable[[Order], None]


def can_transition(current: OrderStatus, new: OrderStatus) -> bool:
    return new in ALLOWED_TRANSITIONS[current]


def next_status(current: OrderStatus) -> OrderStatus | None:
    """The forward (non-cancelling) step from ``current``, if any."""
    forward = [status for status in ALLOWED_TRANSITIONS[current] if status is not OrderStatus.CANCELLED]
    return forward[0] if forward else None


class OrderSession:
    """State of one terminal session: loaded orders, occupancy and the order being edited.

    ``current`` is a working copy. Edits to it stay in memory until ``save``;
    every persisted change is built on copies and only swapped into
    ``orders``/the catalog after the store write succeeds.
    """

    def __init__(
        self,
        store: KeyValueStore,
        catalog: Catalog | None = None,
        *,
        tax_rate: float = TAX_RATE,
        allow_negative_stock: bool = ALLOW_NEGATIVE_STOCK,
    ) -> None:
        self.store = store
        self.catalog = catalog if catalog is not None else Catalog(store)
        self.tax_rate = tax_rate
        self.allow_negative_stock = allow_negative_stock
        self.registry = LocationRegistry()
        self.orders: list[Order] = []
        self._unreadable: list[dict] = []
        self.current: Order | None = None
        self._locks: dict[LocationId, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self.load()

    # -------------------- loading / queries --------------------

    def load(self) -> None:
        """Reload orders and catalog from the store and recompute occupancy."""
        orders: list[Order] = []
        unreadable: list[dict] = []
        for row in iter_records(self.store, ORDERS_KEY):
            try:
                orders.append(Order.from_dict(row, tax_rate=self.tax_rate))
            except (KeyError, TypeError, ValueError, NotFound) as exc:
                # Kept verbatim and written back on every save so the record is never lost.
                logger.warning("unreadable order record kept as-is id=%s error=%r", row.get("id"), exc)
                unreadable.append(row)
        self.orders = orders
        self._unreadable = unreadable
        self.catalog.load()
        self.registry.rebuild(self.orders)

        if self.current is None:
            return
        if self.current.id is None:
            draft_location = self.current.location
            if draft_location is not None and self.registry.is_occupied(draft_location):
                logger.info("draft for %s dropped: location taken after reload", draft_location)
                self.current = None
            elif draft_location is not None:
                self.registry.mark_occupied(draft_location)
            return
        stored = self.find_order(self.current.id)
        self.current = stored.snapshot() if stored is not None and not stored.is_terminal else None

    def find_order(self, order_id: str) -> Order | None:
        for order in self.orders:
            if order.id == order_id:
                return order
        return None

    def get_order(self, order_id: str) -> Order:
        order = self.find_order(order_id)
        if order is None:
            raise NotFound(f"Unknown order: {order_id!r}")
        return order

    def active_order_for(self, location: LocationId | str) -> Order | None:
        location = LocationId.parse(location)
        current = self.current
        if current is not None and current.id is None and current.location == location:
            return current
        for order in self.orders:
            if order.location == location and not order.is_terminal:
                return order
        return None

    def active_orders(self) -> list[Order]:
        return [order for order in self.orders if not order.is_terminal]

    def orders_by_status(self, status: OrderStatus | str) -> list[Order]:
        status = OrderStatus(status)
        return [order for order in self.orders if order.status is status]

    def is_occupied(self, location: LocationId | str) -> bool:
        return self.registry.is_occupied(LocationId.parse(location))

    # -------------------- location selection --------------------

    def select_location(self, location: LocationId | str) -> Order:
        """Resume the open order at ``location`` or start a fresh one there."""
        location = LocationId.parse(location)
        with self._location_lock(location):
            if self.current is not None and self.current.location == location:
                return self.current
            existing = self.active_order_for(location)
            if existing is not None:
                self._release_current()
                self.current = existing.snapshot()
                logger.info("resumed order id=%s at %s", existing.id, location)
                return self.current
            return self._create_order(location)

    def start_new_order(self, location: LocationId | str) -> Order:
        """Start a brand-new order; fails if ``location`` already has an open one."""
        location = LocationId.parse(location)
        with self._location_lock(location):
            if self.registry.is_occupied(location) or self.active_order_for(location) is not None:
                raise LocationOccupied(f"{location.display_name} is occupied; select another location")
            return self._create_order(location)

    def clear(self) -> None:
        """Detach from the current order, discarding it if it was never saved."""
        self._release_current()

    def _create_order(self, location: LocationId) -> Order:
        self._release_current()
        order = Order(location=location, tax_rate=self.tax_rate)
        self.registry.mark_occupied(location)
        self.current = order
        logger.info("new order started at %s", location)
        return order

    def _release_current(self) -> None:
        current = self.current
        if current is not None and current.id is None and current.location is not None:
            self.registry.mark_free(current.location)
        self.current = None

    @contextmanager
    def _location_lock(self, location: LocationId) -> Iterator[None]:
        with self._locks_guard:
            lock = self._locks.setdefault(location, threading.Lock())
        with lock:
            yield

    # -------------------- editing --------------------

    def add_item(self, product_id: str) -> bool:
        order = self._require_current()
        product = self.catalog.get_product(product_id)
        return order.add_item(product)

    def change_quantity(self, product_id: str, delta: int) -> None:
        self._require_current().change_quantity(product_id, delta)

    def save(self) -> Order:
        """Persist the current order, assigning its id on first save."""
        order = self._require_current()
        if order.location is None:
            raise PolicyViolation("Select a location before saving the order")
        if order.is_empty:
            raise PolicyViolation("Add products to the order before saving it")
        saved = self._commit(order.snapshot())
        logger.info("order saved id=%s location=%s total=%.2f", saved.id, saved.location, saved.total)
        return saved

    def print_kitchen_ticket(self, printer: PrinterSink) -> Order:
        """Save, send the order to the kitchen printer, then freeze item removal."""
        saved = self.save()
        printer(saved.snapshot())
        flagged = saved.snapshot()
        flagged.kitchen_ticket_printed = True
        flagged = self._commit(flagged)
        logger.info("kitchen ticket printed id=%s", flagged.id)
        return flagged

    def _commit(self, saved: Order) -> Order:
        """Stamp and write ``saved``; memory is only updated once the store accepted it."""
        stamp = now_stamp()
        if saved.id is None:
            saved.id = uuid4().hex
            saved.created_at = stamp
        saved.updated_at = stamp

        orders = self._with_order(saved)
        self.store.set_many({ORDERS_KEY: self._order_records(orders)})

        self.orders = orders
        self.registry.mark_occupied(saved.location)
        self.current = saved.snapshot()
        return saved

    def _order_records(self, orders: list[Order]) -> list[dict]:
        return [row.to_dict() for row in orders] + [dict(row) for row in self._unreadable]

    def _require_current(self) -> Order:
        if self.current is None:
            raise NotFound("No order selected; pick a location first")
        return self.current

    # -------------------- status transitions --------------------

    def transition(self, order: Order | str, new_status: OrderStatus | str) -> Order:
        """Move a saved order along one lifecycle edge and apply its side effects."""
        order_id = order.id if isinstance(order, Order) else order
        if order_id is None:
            raise NotFound("Order has not been saved yet")
        stored = self.get_order(order_id)
        try:
            target = OrderStatus(new_status)
        except ValueError as exc:
            raise InvalidTransition(f"Unknown status: {new_status!r}") from exc
        if not can_transition(stored.status, target):
            raise InvalidTransition(f"Cannot move order {stored.short_id} from {stored.status.value} to {target.value}")

        updated = stored.snapshot()
        stamp = now_stamp()
        updated.status = target
        updated.updated_at = stamp

        records: dict[str, object] = {}
        products: list[Product] | None = None
        if target is OrderStatus.COMPLETED:
            products = self.catalog.decremented_stock(updated.items, allow_negative=self.allow_negative_stock)
            updated.is_paid = True
            updated.completed_at = stamp
            records[PRODUCTS_KEY] = [product.to_dict() for product in products]

        orders = self._with_order(updated)
        records[ORDERS_KEY] = self._order_records(orders)
        self.store.set_many(records)

        self.orders = orders
        if products is not None:
            self.catalog.replace_products(products)
        if target.is_terminal and updated.location is not None:
            self.registry.mark_free(updated.location)

        current = self.current
        if current is not None and current.id == updated.id:
            if target.is_terminal:
                self.current = None
            else:
                current.status = updated.status
                current.updated_at = updated.updated_at
        logger.info("order %s: %s -> %s", updated.id, stored.status.value, target.value)
        return updated

    def _with_order(self, order: Order) -> list[Order]:
        replaced = False
        orders: list[Order] = []
        for row in self.orders:
            if row.id == order.id:
                orders.append(order)
                replaced = True
            else:
                orders.append(row)
        if not replaced:
            orders.append(order)
        return orders
