import pytest

from restopos.errors import InvalidTransition, LocationOccupied, NotFound, PersistenceFailure, PolicyViolation
from restopos.lifecycle import ALLOWED_TRANSITIONS, OrderSession, next_status
from restopos.models import LocationId, OrderStatus
from restopos.persistence import ORDERS_KEY

MESA_3 = LocationId("mesa", 3)


def _saved_order(session, location="mesa_3", product_id="burger", quantity=1):
    session.select_location(location)
    for _ in range(quantity):
        session.add_item(product_id)
    return session.save()


def _advance(session, order, *statuses):
    for status in statuses:
        order = session.transition(order, status)
    return order


def test_full_lifecycle_decrements_stock_and_frees_location(session, stock_of):
    order = session.select_location("mesa_3")
    assert order.id is None
    assert session.is_occupied(MESA_3)

    session.add_item("burger")
    session.add_item("burger")
    assert session.current.find_item("burger").quantity == 2

    saved = session.save()
    assert saved.id is not None
    assert saved.total == pytest.approx(17.0 * 1.16)

    preparing = session.transition(saved, "preparing")
    assert preparing.status is OrderStatus.PREPARING
    assert session.is_occupied(MESA_3)

    ready = session.transition(preparing, OrderStatus.READY)
    completed = session.transition(ready, OrderStatus.COMPLETED)

    assert completed.status is OrderStatus.COMPLETED
    assert completed.is_paid is True
    assert completed.completed_at is not None
    assert not session.is_occupied(MESA_3)
    assert session.current is None
    assert session.catalog.get_product("burger").stock == 3
    assert stock_of("burger") == 3


def test_transition_returns_new_object(session):
    saved = _saved_order(session)
    preparing = session.transition(saved, "preparing")
    assert saved.status is OrderStatus.PENDING
    assert preparing is not saved
    assert session.get_order(saved.id).status is OrderStatus.PREPARING


def test_start_new_order_on_occupied_location(session):
    first = _saved_order(session)
    session.clear()

    with pytest.raises(LocationOccupied):
        session.start_new_order("mesa_3")

    resumed = session.select_location("mesa_3")
    assert resumed.id == first.id
    assert resumed is not session.get_order(first.id)


def test_start_new_order_on_free_location(session):
    order = session.start_new_order("barra_2")
    assert order.location == LocationId("barra", 2)
    assert session.is_occupied("barra_2")


@pytest.mark.parametrize("current", list(OrderStatus))
@pytest.mark.parametrize("target", list(OrderStatus))
def test_only_allowed_edges_succeed(session, current, target):
    order = _saved_order(session)
    paths = {
        OrderStatus.PENDING: (),
        OrderStatus.PREPARING: ("preparing",),
        OrderStatus.READY: ("preparing", "ready"),
        OrderStatus.COMPLETED: ("preparing", "ready", "completed"),
        OrderStatus.CANCELLED: ("cancelled",),
    }
    order = _advance(session, order, *paths[current])
    assert order.status is current

    if target in ALLOWED_TRANSITIONS[current]:
        assert session.transition(order, target).status is target
    else:
        with pytest.raises(InvalidTransition):
            session.transition(order, target)
        assert session.get_order(order.id).status is current


def test_unknown_status_is_invalid_transition(session):
    order = _saved_order(session)
    with pytest.raises(InvalidTransition):
        session.transition(order, "served")


def test_next_status():
    assert next_status(OrderStatus.PENDING) is OrderStatus.PREPARING
    assert next_status(OrderStatus.PREPARING) is OrderStatus.READY
    assert next_status(OrderStatus.READY) is OrderStatus.COMPLETED
    assert next_status(OrderStatus.COMPLETED) is None


def test_cancel_frees_location_without_touching_stock(session, stock_of):
    order = _saved_order(session, quantity=2)
    order = session.transition(order, "preparing")
    cancelled = session.transition(order, "cancelled")

    assert cancelled.status is OrderStatus.CANCELLED
    assert cancelled.is_paid is False
    assert not session.is_occupied(MESA_3)
    assert stock_of("burger") == 5


def test_completion_may_oversell_when_allowed(session, stock_of):
    order = _saved_order(session, quantity=5)
    session.current.change_quantity("burger", 2)
    order = session.save()
    _advance(session, order, "preparing", "ready", "completed")
    assert stock_of("burger") == -2


def test_completion_rejects_oversell_when_negative_stock_disabled(stocked_store, stock_of):
    session = OrderSession(stocked_store, tax_rate=0.16, allow_negative_stock=False)
    order = _saved_order(session, quantity=5)
    session.current.change_quantity("burger", 1)
    order = _advance(session, session.save(), "preparing", "ready")

    with pytest.raises(PolicyViolation):
        session.transition(order, "completed")
    assert session.get_order(order.id).status is OrderStatus.READY
    assert stock_of("burger") == 5
    assert session.is_occupied(MESA_3)


def test_store_failure_leaves_memory_untouched(session, stocked_store, monkeypatch):
    order = _advance(session, _saved_order(session), "preparing", "ready")

    def fail(records):
        raise PersistenceFailure("disk full")

    monkeypatch.setattr(stocked_store, "set_many", fail)
    with pytest.raises(PersistenceFailure):
        session.transition(order, "completed")

    assert session.get_order(order.id).status is OrderStatus.READY
    assert session.catalog.get_product("burger").stock == 5
    assert session.is_occupied(MESA_3)


def test_save_requires_items(session):
    session.select_location("mesa_1")
    with pytest.raises(PolicyViolation):
        session.save()


def test_save_without_selection(session):
    with pytest.raises(NotFound):
        session.save()


def test_add_sold_out_product_is_noop(session):
    session.select_location("mesa_1")
    assert session.add_item("water") is False
    assert session.current.is_empty


def test_switching_location_discards_unsaved_draft(session):
    session.select_location("mesa_1")
    session.add_item("soda")
    session.select_location("mesa_2")

    assert not session.is_occupied("mesa_1")
    assert session.is_occupied("mesa_2")
    assert session.store.get(ORDERS_KEY, []) == []


def test_reselecting_same_location_keeps_draft(session):
    draft = session.select_location("mesa_1")
    session.add_item("soda")
    assert session.select_location("mesa_1") is draft
    assert draft.find_item("soda").quantity == 1


def test_reload_rebuilds_occupancy(session, stocked_store):
    _saved_order(session, location="domicilio_4")
    done = _saved_order(session, location="barra_1")
    _advance(session, done, "preparing", "ready", "completed")

    reopened = OrderSession(stocked_store, tax_rate=0.16)
    assert reopened.registry.occupied == {LocationId("domicilio", 4)}
    assert len(reopened.orders) == 2
    assert reopened.catalog.get_product("burger").stock == 4


def test_print_kitchen_ticket_sets_flag(session):
    _saved_order(session, quantity=2)
    printed = []

    saved = session.print_kitchen_ticket(printed.append)

    assert len(printed) == 1
    assert printed[0].find_item("burger").quantity == 2
    assert saved.kitchen_ticket_printed is True
    assert session.get_order(saved.id).kitchen_ticket_printed is True
    with pytest.raises(PolicyViolation):
        session.change_quantity("burger", -1)
    session.change_quantity("burger", 1)
    assert session.current.find_item("burger").quantity == 3


def test_failed_print_leaves_flag_unset(session):
    _saved_order(session)

    def broken_printer(order):
        raise RuntimeError("printer offline")

    with pytest.raises(RuntimeError):
        session.print_kitchen_ticket(broken_printer)
    assert session.current.kitchen_ticket_printed is False
    session.change_quantity("burger", -1)
    assert session.current.is_empty


def test_failed_flag_write_leaves_flag_unset(session, stocked_store, monkeypatch):
    _saved_order(session)
    real_set_many = stocked_store.set_many
    calls = []

    def fail_second(records):
        calls.append(records)
        if len(calls) > 1:
            raise PersistenceFailure("disk full")
        real_set_many(records)

    monkeypatch.setattr(stocked_store, "set_many", fail_second)
    printed = []
    with pytest.raises(PersistenceFailure):
        session.print_kitchen_ticket(printed.append)

    assert len(printed) == 1
    assert session.current.kitchen_ticket_printed is False
    assert session.get_order(session.current.id).kitchen_ticket_printed is False
    assert all(not row["kitchenTicketPrinted"] for row in stocked_store.get(ORDERS_KEY))
    session.change_quantity("burger", -1)
    assert session.current.is_empty


def test_unreadable_order_records_survive_saves(stocked_store):
    broken = {"id": "old-1", "items": [], "status": "pending", "location": "mesa_20"}
    stocked_store.set(ORDERS_KEY, [broken])
    session = OrderSession(stocked_store, tax_rate=0.16)
    assert session.orders == []

    saved = _saved_order(session, location="mesa_1", product_id="soda")
    stored = stocked_store.get(ORDERS_KEY)
    assert [row["id"] for row in stored] == [saved.id, "old-1"]
    assert stored[1] == broken

    session.transition(saved, "cancelled")
    assert broken in stocked_store.get(ORDERS_KEY)


def test_orders_by_status_and_active_orders(session):
    first = _saved_order(session, location="mesa_1")
    _saved_order(session, location="mesa_2")
    session.transition(first, "preparing")

    assert [order.location for order in session.orders_by_status("preparing")] == [LocationId("mesa", 1)]
    assert len(session.active_orders()) == 2
