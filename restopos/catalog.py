"""Product and category lookup over the persisted catalog."""

from __future__ import annotations

import copy
import logging
from typing import Iterable
from uuid import uuid4

from restopos.config import LOW_STOCK_THRESHOLD
from restopos.constant import DEFAULT_CATEGORIES
from restopos.errors import NotFound, PolicyViolation
from restopos.models import Category, LineItem, Product, now_stamp
from restopos.persistence import CATEGORIES_KEY, PRODUCTS_KEY, KeyValueStore, iter_records

logger = logging.getLogger(__name__)


class Catalog:
    """A single flat view of products and categories.

    Order pricing reads from here. Stock changes are computed as new product
    copies (``decremented_stock``) that the session writes back to the store,
    and only then swapped in with ``replace_products``.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self._products: list[Product] = []
        self._categories: list[Category] = []
        self.load()

    def load(self) -> None:
        self._products = [Product.from_dict(row) for row in iter_records(self.store, PRODUCTS_KEY)]
        stored_categories = list(iter_records(self.store, CATEGORIES_KEY))
        self._categories = [Category.from_dict(row) for row in (stored_categories or DEFAULT_CATEGORIES)]

    @property
    def products(self) -> list[Product]:
        return list(self._products)

    @property
    def categories(self) -> list[Category]:
        return list(self._categories)

    def find_product(self, product_id: str) -> Product | None:
        for product in self._products:
            if product.id == product_id:
                return product
        return None

    def get_product(self, product_id: str) -> Product:
        product = self.find_product(product_id)
        if product is None:
            raise NotFound(f"Unknown product: {product_id!r}")
        return product

    def get_category(self, category_id: str) -> Category:
        for category in self._categories:
            if category.id == category_id:
                return category
        raise NotFound(f"Unknown category: {category_id!r}")

    def category_name(self, product: Product) -> str:
        try:
            return self.get_category(product.category_id).name
        except NotFound:
            return "Sin categoría"

    def products_in_category(self, category_id: str) -> list[Product]:
        return [product for product in self._products if product.category_id == category_id]

    def search(self, term: str = "", category_id: str | None = None) -> list[Product]:
        needle = term.strip().lower()
        results = self.products_in_category(category_id) if category_id else self._products
        if needle:
            results = [product for product in results if needle in product.name.lower()]
        return list(results)

    def low_stock(self, threshold: int = LOW_STOCK_THRESHOLD) -> list[Product]:
        return [product for product in self._products if product.stock <= threshold]

    def decremented_stock(self, items: Iterable[LineItem], allow_negative: bool = True) -> list[Product]:
        """Return the full product list with each line's quantity taken off its product.

        Lines whose product has since been deleted are skipped. With
        ``allow_negative=False`` a line that would oversell raises
        ``PolicyViolation`` and nothing is returned.
        """
        updated = copy.deepcopy(self._products)
        by_id = {product.id: product for product in updated}
        for item in items:
            product = by_id.get(item.product_id)
            if product is None:
                logger.warning("stock update skipped for deleted product %s", item.product_id)
                continue
            if not allow_negative and product.stock < item.quantity:
                raise PolicyViolation(
                    f"Not enough stock for {product.name}: {product.stock} left, {item.quantity} ordered"
                )
            product.stock -= item.quantity
        return updated

    def replace_products(self, products: Iterable[Product]) -> None:
        self._products = list(products)

    def save_product(self, product: Product) -> Product:
        """Insert or update a product and persist the whole product list."""
        if not product.name.strip():
            raise ValueError("Product name is required")
        self.get_category(product.category_id)
        if product.price < 0:
            raise ValueError("Price cannot be negative")
        if product.stock < 0:
            raise ValueError("Stock cannot be negative")

        saved = copy.deepcopy(product)
        updated = copy.deepcopy(self._products)
        if saved.id is not None and any(row.id == saved.id for row in updated):
            updated = [saved if row.id == saved.id else row for row in updated]
        else:
            saved.id = saved.id or uuid4().hex
            saved.created_at = saved.created_at or now_stamp()
            updated.append(saved)

        self.store.set(PRODUCTS_KEY, [row.to_dict() for row in updated])
        self._products = updated
        logger.info("product saved id=%s name=%r", saved.id, saved.name)
        return saved

    def delete_product(self, product_id: str) -> None:
        self.get_product(product_id)
        updated = [row for row in self._products if row.id != product_id]
        self.store.set(PRODUCTS_KEY, [row.to_dict() for row in updated])
        self._products = updated
        logger.info("product deleted id=%s", product_id)
