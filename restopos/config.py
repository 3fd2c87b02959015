"""Runtime configuration defaults for persistence, ordering and printing."""

from __future__ import annotations

import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


DB_PATH = os.environ.get("RESTOPOS_DB_PATH", "data/restopos.db")
DEBUG_LOG_PATH = os.environ.get("RESTOPOS_DEBUG_LOG", "/tmp/restopos-debug.log")

# IVA applied to order subtotals; RESTOPOS_TAX_RATE=0 disables tax.
TAX_RATE = float(os.environ.get("RESTOPOS_TAX_RATE", "0.16"))
ALLOW_NEGATIVE_STOCK = _env_bool("RESTOPOS_ALLOW_NEGATIVE_STOCK", True)

LOCATION_TYPES = ("mesa", "domicilio", "barra")
MAX_LOCATIONS = 14
LOW_STOCK_THRESHOLD = 10

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"

PRINTER_USB_VENDOR_ID = 0x28E9
PRINTER_USB_PRODUCT_ID = 0x0289
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 48
PRINTER_RECEIPT_FONT_SIZE = 22
PRINTER_FONT_PATH = "/System/Library/Fonts/SFNS.ttf"
PRINTER_LEFT_INDENT_PX = 16
PRINTER_TAIL_SPACER_PX = 70
