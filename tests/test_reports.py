import json
from datetime import date

import pytest

from restopos.models import LineItem, OrderStatus, Product
from restopos.orders import Order
from restopos.persistence import CATEGORIES_KEY, ORDERS_KEY, PRODUCTS_KEY
from restopos.reports import dashboard_stats, export_data, filter_orders, popular_products, sales_report

PRODUCTS = [
    Product(id="burger", name="Hamburguesa", category_id="1", price=10.0, stock=4),
    Product(id="soda", name="Coca Cola", category_id="6", price=2.0, stock=40),
]


def _order(order_id, created_at, status=OrderStatus.COMPLETED, items=(("burger", 10.0, 1),)):
    return Order(
        id=order_id,
        items=[LineItem(product_id, product_id, price, quantity) for product_id, price, quantity in items],
        status=status,
        created_at=created_at,
        tax_rate=0.0,
    )


ORDERS = [
    _order("a", "2024-03-01 09:00:00"),
    _order("b", "2024-03-02 23:59:59", items=(("soda", 2.0, 3),)),
    _order("c", "2024-03-03 00:00:00"),
    _order("d", "2024-03-02 12:00:00", status=OrderStatus.CANCELLED),
    _order("e", "2024-03-02 13:00:00", status=OrderStatus.PENDING),
    _order("f", "2024-03-02 14:00:00", items=(("gone", 5.0, 2),)),
]


def test_sales_report_range_is_inclusive_and_completed_only():
    report = sales_report(ORDERS, "2024-03-01", date(2024, 3, 2))
    assert [order.id for order in report.orders] == ["a", "b", "f"]
    assert report.count == 3
    assert report.total == pytest.approx(26.0)
    assert report.average == pytest.approx(26.0 / 3)


def test_sales_report_empty_range():
    report = sales_report(ORDERS, "2025-01-01", "2025-01-31")
    assert report.count == 0
    assert report.average == 0.0


def test_sales_report_rejects_reversed_range():
    with pytest.raises(ValueError):
        sales_report(ORDERS, "2024-03-05", "2024-03-01")


def test_filter_orders():
    assert [order.id for order in filter_orders(ORDERS, status="pending")] == ["e"]
    assert [order.id for order in filter_orders(ORDERS, on_date="2024-03-02")] == ["b", "d", "e", "f"]
    assert len(filter_orders(ORDERS)) == len(ORDERS)


def test_popular_products_counts_completed_sales():
    popular = popular_products(ORDERS, PRODUCTS)
    assert [(row.name, row.quantity) for row in popular] == [
        ("Coca Cola", 3),
        ("Hamburguesa", 2),
        ("Producto Desconocido", 2),
    ]


def test_dashboard_stats():
    stats = dashboard_stats(ORDERS, PRODUCTS, today=date(2024, 3, 2))
    assert stats.today_orders == 4
    assert stats.today_revenue == pytest.approx(16.0)
    assert stats.product_count == 2
    assert stats.low_stock_count == 1
    assert [order.id for order in stats.recent_sales] == ["f", "c", "b", "a"]
    assert stats.popular_products[0].name == "Coca Cola"


def test_export_data_writes_all_records(stocked_store, tmp_path):
    stocked_store.set(ORDERS_KEY, [_order("a", "2024-03-01 09:00:00").to_dict()])

    path = export_data(stocked_store, tmp_path / "out" / "backup.json")

    data = json.loads(path.read_text(encoding="utf-8"))
    assert set(data) == {"products", "orders", "categories", "exportDate"}
    assert data["products"] == stocked_store.get(PRODUCTS_KEY)
    assert data["categories"] == stocked_store.get(CATEGORIES_KEY)
    assert data["orders"][0]["id"] == "a"
