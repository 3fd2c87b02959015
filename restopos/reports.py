"""Sales reporting, dashboard figures and JSON export."""

from __future__ import annotations

import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Iterable

from restopos.config import DATE_FORMAT, LOW_STOCK_THRESHOLD
from restopos.models import OrderStatus, Product, now_stamp, parse_stamp
from restopos.orders import Order
from restopos.persistence import CATEGORIES_KEY, ORDERS_KEY, PRODUCTS_KEY, KeyValueStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SalesReport:
    """Completed sales within a date range."""

    orders: list[Order]
    total: float
    count: int

    @property
    def average(self) -> float:
        return self.total / self.count if self.count else 0.0


@dataclass(frozen=True)
class PopularProduct:
    name: str
    quantity: int


@dataclass(frozen=True)
class DashboardStats:
    today_orders: int
    today_revenue: float
    product_count: int
    low_stock_count: int
    recent_sales: list[Order] = field(default_factory=list)
    popular_products: list[PopularProduct] = field(default_factory=list)


def _order_date(order: Order) -> date | None:
    if not order.created_at:
        return None
    try:
        return parse_stamp(order.created_at).date()
    except ValueError:
        return None


def _as_date(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value, DATE_FORMAT).date()


def sales_report(orders: Iterable[Order], start: date | str, end: date | str) -> SalesReport:
    """Completed orders created between ``start`` and ``end``, both days included."""
    first, last = _as_date(start), _as_date(end)
    if first > last:
        raise ValueError("Start date must not be after end date")

    selected = []
    for order in orders:
        day = _order_date(order)
        if order.status is OrderStatus.COMPLETED and day is not None and first <= day <= last:
            selected.append(order)
    return SalesReport(orders=selected, total=sum(order.total for order in selected), count=len(selected))


def filter_orders(
    orders: Iterable[Order],
    status: OrderStatus | str | None = None,
    on_date: date | str | None = None,
) -> list[Order]:
    wanted_status = OrderStatus(status) if status else None
    wanted_day = _as_date(on_date) if on_date else None
    result = []
    for order in orders:
        if wanted_status is not None and order.status is not wanted_status:
            continue
        if wanted_day is not None and _order_date(order) != wanted_day:
            continue
        result.append(order)
    return result


def popular_products(orders: Iterable[Order], products: Iterable[Product], limit: int = 5) -> list[PopularProduct]:
    sold: Counter[str] = Counter()
    for order in orders:
        if order.status is not OrderStatus.COMPLETED:
            continue
        for item in order.items:
            sold[item.product_id] += item.quantity

    names = {product.id: product.name for product in products}
    return [
        PopularProduct(name=names.get(product_id, "Producto Desconocido"), quantity=quantity)
        for product_id, quantity in sold.most_common(limit)
    ]


def dashboard_stats(
    orders: Iterable[Order],
    products: Iterable[Product],
    today: date | None = None,
    low_stock_threshold: int = LOW_STOCK_THRESHOLD,
) -> DashboardStats:
    orders = list(orders)
    products = list(products)
    today = today or date.today()

    todays = [order for order in orders if _order_date(order) == today]
    completed = [order for order in orders if order.status is OrderStatus.COMPLETED]
    return DashboardStats(
        today_orders=len(todays),
        today_revenue=sum(order.total for order in todays if order.status is OrderStatus.COMPLETED),
        product_count=len(products),
        low_stock_count=sum(1 for product in products if product.stock <= low_stock_threshold),
        recent_sales=list(reversed(completed[-5:])),
        popular_products=popular_products(completed, products),
    )


def default_export_path(directory: str | Path = ".") -> Path:
    return Path(directory) / f"restaurant-data-{date.today().strftime(DATE_FORMAT)}.json"


def export_data(store: KeyValueStore, path: str | Path | None = None) -> Path:
    """Write every catalog and order record to one timestamped JSON file."""
    target = Path(path) if path is not None else default_export_path()
    data = {
        "products": store.get(PRODUCTS_KEY, []),
        "orders": store.get(ORDERS_KEY, []),
        "categories": store.get(CATEGORIES_KEY, []),
        "exportDate": now_stamp(),
    }
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("exported data to %s", target)
    return target
