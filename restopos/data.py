"""Typed views of the static configuration and the sample-data loader."""

from __future__ import annotations

import logging

from restopos.config import TAX_RATE
from restopos.constant import DEFAULT_CATEGORIES, SAMPLE_ORDERS, SAMPLE_PRODUCTS, STATUS_LABELS
from restopos.models import Category, OrderStatus, Product, now_stamp
from restopos.orders import Order
from restopos.persistence import CATEGORIES_KEY, ORDERS_KEY, PRODUCTS_KEY, KeyValueStore

logger = logging.getLogger(__name__)


def status_label(status: OrderStatus | str) -> str:
    """Get display label for an order status."""
    value = status.value if isinstance(status, OrderStatus) else str(status)
    return STATUS_LABELS.get(value, value)


def default_categories() -> list[Category]:
    return [Category.from_dict(row) for row in DEFAULT_CATEGORIES]


def sample_products() -> list[Product]:
    products = [Product.from_dict(row) for row in SAMPLE_PRODUCTS]
    stamp = now_stamp()
    for product in products:
        product.created_at = product.created_at or stamp
    return products


def sample_orders(tax_rate: float = TAX_RATE) -> list[Order]:
    return [Order.from_dict(row, tax_rate=tax_rate) for row in SAMPLE_ORDERS]


def load_sample_data(store: KeyValueStore, tax_rate: float = TAX_RATE) -> bool:
    """Seed categories, products and orders into an empty store.

    Returns False without writing anything when products already exist.
    """
    if store.get(PRODUCTS_KEY):
        logger.info("sample data skipped: store already has products")
        return False

    store.set_many(
        {
            CATEGORIES_KEY: [category.to_dict() for category in default_categories()],
            PRODUCTS_KEY: [product.to_dict() for product in sample_products()],
            ORDERS_KEY: [order.to_dict() for order in sample_orders(tax_rate)],
        }
    )
    logger.info("sample data loaded")
    return True
