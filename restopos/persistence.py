"""SQLite-backed key-value store for named records."""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Any, Iterator, Mapping

from restopos.config import DB_PATH
from restopos.errors import PersistenceFailure
from restopos.models import now_stamp

logger = logging.getLogger(__name__)

PRODUCTS_KEY = "products"
ORDERS_KEY = "orders"
CATEGORIES_KEY = "categories"
CREDENTIALS_KEY = "credentials"
SESSION_KEY = "userSession"


class KeyValueStore:
    """Named JSON records in a single SQLite table.

    ``set_many`` writes every key in one transaction; the session relies on
    it to commit an order status and the matching stock update together.
    """

    def __init__(self, db_path: str | Path = DB_PATH) -> None:
        self.db_path = Path(db_path)
        self.bootstrap_schema()

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        return sqlite3.connect(self.db_path)

    def bootstrap_schema(self) -> None:
        """Create the records table if it does not already exist."""
        try:
            with closing(self._connect()) as conn, conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS records (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TEXT
                    )
                    """
                )
        except sqlite3.Error as exc:
            raise PersistenceFailure(f"Cannot initialise store at {self.db_path}: {exc}") from exc

    def get(self, key: str, default: Any = None) -> Any:
        try:
            with closing(self._connect()) as conn:
                row = conn.execute("SELECT value FROM records WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as exc:
            logger.error("store read failed key=%s error=%r", key, exc)
            raise PersistenceFailure(f"Cannot read {key!r}: {exc}") from exc
        if row is None:
            return default
        try:
            return json.loads(row[0])
        except json.JSONDecodeError as exc:
            raise PersistenceFailure(f"Record {key!r} is not valid JSON: {exc}") from exc

    def set(self, key: str, value: Any) -> None:
        self.set_many({key: value})

    def set_many(self, records: Mapping[str, Any]) -> None:
        """Write all ``records`` atomically: either every key is stored or none is."""
        try:
            payload = [(key, json.dumps(value, ensure_ascii=False), now_stamp()) for key, value in records.items()]
        except (TypeError, ValueError) as exc:
            raise PersistenceFailure(f"Cannot serialise records {sorted(records)}: {exc}") from exc

        try:
            with closing(self._connect()) as conn:
                with conn:
                    conn.executemany(
                        """
                        INSERT INTO records (key, value, updated_at) VALUES (?, ?, ?)
                        ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                        """,
                        payload,
                    )
        except sqlite3.Error as exc:
            logger.error("store write failed keys=%s error=%r", sorted(records), exc)
            raise PersistenceFailure(f"Cannot write {sorted(records)}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            with closing(self._connect()) as conn:
                with conn:
                    conn.execute("DELETE FROM records WHERE key = ?", (key,))
        except sqlite3.Error as exc:
            raise PersistenceFailure(f"Cannot delete {key!r}: {exc}") from exc

    def keys(self) -> list[str]:
        try:
            with closing(self._connect()) as conn:
                return [row[0] for row in conn.execute("SELECT key FROM records ORDER BY key")]
        except sqlite3.Error as exc:
            raise PersistenceFailure(f"Cannot list keys: {exc}") from exc


def iter_records(store: KeyValueStore, key: str) -> Iterator[dict[str, Any]]:
    """Yield the dict entries of a list-valued record, skipping anything else."""
    value = store.get(key, [])
    if not isinstance(value, list):
        logger.warning("record %s is not a list; ignoring", key)
        return
    for row in value:
        if isinstance(row, dict):
            yield row
