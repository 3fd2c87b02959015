"""Entry point for the restopos Textual app."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from restopos.config import DB_PATH, DEBUG_LOG_PATH
from restopos.data import load_sample_data
from restopos.errors import PosError
from restopos.lifecycle import OrderSession
from restopos.persistence import KeyValueStore
from restopos.reports import default_export_path, export_data

logger = logging.getLogger("restopos")


def configure_logging(log_path: str = DEBUG_LOG_PATH) -> None:
    """Send debug logging to a file; the terminal belongs to the TUI. Safe to call more than once."""
    target = os.path.abspath(log_path)
    for existing in logger.handlers:
        if isinstance(existing, logging.FileHandler) and existing.baseFilename == target:
            return
    Path(target).parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(target, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="restopos", description="Restaurant point of sale")
    parser.add_argument("--db", default=DB_PATH, help=f"SQLite store path (default: {DB_PATH})")
    parser.add_argument("--seed", action="store_true", help="load sample catalog and orders into an empty store")
    parser.add_argument(
        "--export",
        nargs="?",
        const="",
        metavar="PATH",
        help="write products, orders and categories to a JSON file and exit",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the Textual application, or a one-shot seed/export command."""
    args = build_parser().parse_args(argv)
    configure_logging()

    try:
        store = KeyValueStore(args.db)
        if args.seed:
            loaded = load_sample_data(store)
            print("Sample data loaded" if loaded else "Store already has products; nothing loaded")
        if args.export is not None:
            path = export_data(store, args.export or default_export_path())
            print(f"Exported to {path}")
            return 0
        session = OrderSession(store)
    except PosError as exc:
        logger.error("startup failed: %s", exc)
        print(f"ERR: {exc}")
        return 1

    from restopos.pos_app import PosApp

    PosApp(session).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
