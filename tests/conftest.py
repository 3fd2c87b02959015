import pytest

from restopos.lifecycle import OrderSession
from restopos.models import Product
from restopos.persistence import CATEGORIES_KEY, PRODUCTS_KEY, KeyValueStore

CATEGORIES = [
    {"id": "1", "name": "Hamburguesas", "color": "#FF6B6B"},
    {"id": "6", "name": "Bebidas", "color": "#3498DB"},
]

PRODUCTS = [
    Product(id="burger", name="Hamburguesa Clásica", category_id="1", price=8.5, stock=5),
    Product(id="soda", name="Coca Cola", category_id="6", price=2.5, stock=12),
    Product(id="water", name="Agua Mineral", category_id="6", price=1.5, stock=0),
]


@pytest.fixture
def store(tmp_path):
    return KeyValueStore(tmp_path / "pos.db")


@pytest.fixture
def stocked_store(store):
    store.set_many(
        {
            CATEGORIES_KEY: CATEGORIES,
            PRODUCTS_KEY: [product.to_dict() for product in PRODUCTS],
        }
    )
    return store


@pytest.fixture
def session(stocked_store):
    return OrderSession(stocked_store, tax_rate=0.16, allow_negative_stock=True)


@pytest.fixture
def stock_of(stocked_store):
    """Stock of a product as currently written in the store."""

    def read(product_id):
        for row in stocked_store.get(PRODUCTS_KEY, []):
            if row["id"] == product_id:
                return row["stock"]
        raise AssertionError(f"no product {product_id}")

    return read
