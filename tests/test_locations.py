import pytest

from restopos.errors import NotFound
from restopos.locations import LocationRegistry
from restopos.models import LocationId, OrderStatus
from restopos.orders import Order


def _order(location, status):
    return Order(location=LocationId.parse(location) if location else None, status=status)


def test_location_id_parse_and_accessors():
    location = LocationId.parse("domicilio_12")
    assert location == LocationId("domicilio", 12)
    assert location.location_type == "domicilio"
    assert location.display_name == "Dom 12"
    assert str(location) == "domicilio_12"


@pytest.mark.parametrize("raw", ["mesa", "mesa_0", "mesa_15", "terraza_1", "mesa_x", ""])
def test_location_id_rejects_unknown(raw):
    with pytest.raises(NotFound):
        LocationId.parse(raw)


def test_rebuild_counts_only_non_terminal_orders():
    orders = [
        _order("mesa_1", OrderStatus.PENDING),
        _order("mesa_2", OrderStatus.PREPARING),
        _order("barra_1", OrderStatus.READY),
        _order("mesa_3", OrderStatus.COMPLETED),
        _order("mesa_4", OrderStatus.CANCELLED),
        _order(None, OrderStatus.PENDING),
    ]
    registry = LocationRegistry()
    occupied = registry.rebuild(orders)
    assert occupied == {LocationId("mesa", 1), LocationId("mesa", 2), LocationId("barra", 1)}
    assert registry.is_occupied(LocationId("mesa", 1))
    assert not registry.is_occupied(LocationId("mesa", 3))


def test_rebuild_is_idempotent_and_discards_overrides():
    orders = [_order("mesa_1", OrderStatus.PENDING)]
    registry = LocationRegistry()
    registry.mark_occupied(LocationId("mesa", 9))

    first = registry.rebuild(orders)
    second = registry.rebuild(orders)
    assert first == second == {LocationId("mesa", 1)}


def test_mark_free_and_occupied():
    registry = LocationRegistry()
    location = LocationId("barra", 3)
    registry.mark_occupied(location)
    assert registry.is_occupied(location)
    registry.mark_free(location)
    registry.mark_free(location)
    assert not registry.is_occupied(location)


def test_free_locations_excludes_occupied():
    registry = LocationRegistry()
    registry.mark_occupied(LocationId("mesa", 2))
    free = registry.free_locations("mesa", max_locations=3)
    assert free == [LocationId("mesa", 1), LocationId("mesa", 3)]
