import json
import logging

import pytest

from restopos.data import load_sample_data, status_label
from restopos.lifecycle import OrderSession
from restopos.main import configure_logging, main
from restopos.models import LocationId, OrderStatus
from restopos.persistence import KeyValueStore


def test_status_label():
    assert status_label(OrderStatus.PREPARING) == "Preparando"
    assert status_label("cancelled") == "Cancelado"
    assert status_label("unknown") == "unknown"


def test_load_sample_data_seeds_empty_store_once(store):
    assert load_sample_data(store, tax_rate=0.16) is True
    assert load_sample_data(store, tax_rate=0.16) is False

    session = OrderSession(store, tax_rate=0.16)
    assert len(session.catalog.categories) == 9
    assert len(session.catalog.products) == 23
    assert session.catalog.get_product("13").name == "Coca Cola"
    assert [order.id for order in session.orders] == ["1001", "1002", "1003"]
    assert session.get_order("1001").total == pytest.approx(25.5 * 1.16)
    assert session.get_order("1003").status is OrderStatus.PENDING
    assert session.registry.occupied == {LocationId("barra", 2)}


def test_main_seed_and_export(tmp_path, monkeypatch):
    monkeypatch.setattr("restopos.main.configure_logging", lambda: None)
    db_path = tmp_path / "pos.db"
    out = tmp_path / "export.json"

    assert main(["--db", str(db_path), "--seed", "--export", str(out)]) == 0

    data = json.loads(out.read_text(encoding="utf-8"))
    assert len(data["products"]) == len(KeyValueStore(db_path).get("products"))
    assert [order["id"] for order in data["orders"]] == ["1001", "1002", "1003"]


def test_configure_logging_adds_one_handler_per_file(tmp_path):
    log_path = tmp_path / "logs" / "debug.log"
    logger = logging.getLogger("restopos")

    def file_handlers():
        return [
            handler
            for handler in logger.handlers
            if isinstance(handler, logging.FileHandler) and handler.baseFilename == str(log_path)
        ]

    try:
        configure_logging(str(log_path))
        configure_logging(str(log_path))
        assert len(file_handlers()) == 1
        assert log_path.exists()
    finally:
        for handler in file_handlers():
            logger.removeHandler(handler)
            handler.close()
