"""Kitchen ticket and receipt printing on a USB ESC/POS thermal printer.

Text layout is plain strings (``format_*_lines``) so it can be checked without
hardware. Printing renders each line to a 1-bit Pillow image and sends it with
``printer.image``; fonts are drawn by Pillow rather than the printer's ROM so
accented Spanish text comes out intact.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from time import sleep
from typing import Iterator

from restopos.config import (
    PRINTER_FONT_PATH,
    PRINTER_FONT_SIZE,
    PRINTER_LEFT_INDENT_PX,
    PRINTER_RECEIPT_FONT_SIZE,
    PRINTER_TAIL_SPACER_PX,
    PRINTER_USB_PRODUCT_ID,
    PRINTER_USB_VENDOR_ID,
    PRINTER_WIDTH_PX,
)
from restopos.orders import Order

logger = logging.getLogger(__name__)

_RULE_HEIGHT_PX = 12
_RULE_THICKNESS_PX = 3
# Rules go out two rows at a time with a short pause so the print head does not smear them.
_RULE_BAND_PX = 2
_RULE_BAND_PAUSE_SECONDS = 0.1
_LINE_PADDING_PX = 20
_HEADER_PADDING_PX = (4, 12)
_RECEIPT_RULE = "=" * 32
_FONT_OVERRIDE_ENV = "RESTOPOS_PRINTER_FONT_PATH"
_FONT_FALLBACKS = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    "C:/Windows/Fonts/arial.ttf",
)


def format_money(amount: float) -> str:
    return f"${amount:.2f}"


def format_kitchen_ticket_lines(order: Order) -> list[str]:
    """Lines for the kitchen: where the order goes and what to prepare."""
    location = order.location.display_name if order.location is not None else "Sin ubicación"
    lines = [location, f"Orden #{order.short_id}"]
    lines.extend(f"{item.quantity}x {item.name}" for item in order.items)
    return lines


def format_receipt_lines(order: Order, printed_at: datetime | None = None) -> list[str]:
    """Customer receipt text; ``_RECEIPT_RULE`` lines mark section breaks."""
    printed_at = printed_at or datetime.now()
    lines = [
        _RECEIPT_RULE,
        "RESTAURANTE - RECIBO",
        _RECEIPT_RULE,
        f"Fecha: {printed_at.strftime('%d/%m/%Y %H:%M')}",
    ]
    if order.location is not None:
        lines.append(f"Ubicación: {order.location.display_name}")
    lines.append(_RECEIPT_RULE)
    lines.extend(f"{item.name} x{item.quantity} {format_money(item.subtotal)}" for item in order.items)
    lines.append(_RECEIPT_RULE)
    lines.append(f"Subtotal: {format_money(order.subtotal)}")
    if order.tax_rate:
        lines.append(f"IVA ({order.tax_rate * 100:g}%): {format_money(order.tax)}")
    lines.append(f"TOTAL: {format_money(order.total)}")
    lines.append(_RECEIPT_RULE)
    lines.append("¡Gracias por su visita!")
    return lines


def _font_candidates() -> Iterator[str]:
    override = os.environ.get(_FONT_OVERRIDE_ENV, "").strip()
    if override:
        yield override
    yield PRINTER_FONT_PATH
    yield from _FONT_FALLBACKS


def resolve_printer_font_path() -> str:
    """First existing font among the env override, the configured path and common system fonts."""
    tried: list[str] = []
    for candidate in _font_candidates():
        if candidate in tried:
            continue
        tried.append(candidate)
        if Path(candidate).is_file():
            return candidate
    raise RuntimeError(f"No printer font found; set {_FONT_OVERRIDE_ENV}. Tried: {', '.join(tried)}")


def check_printer_dependencies() -> tuple[bool, str]:
    """Report whether a ticket could be printed, without opening the USB device."""
    try:
        import escpos.printer  # noqa: F401
        from PIL import ImageFont

        ImageFont.truetype(resolve_printer_font_path(), PRINTER_RECEIPT_FONT_SIZE)
    except (ImportError, OSError, RuntimeError) as exc:
        return False, f"Impresora no disponible: {exc}"
    return True, "Impresora lista"


def _blank(height_px: int):
    from PIL import Image

    return Image.new("1", (PRINTER_WIDTH_PX, max(1, height_px)), color=1)


def _measure(text: str, font) -> tuple[int, int, int, int]:
    from PIL import ImageDraw

    return ImageDraw.Draw(_blank(1)).textbbox((0, 0), text, font=font)


def _text_line(text: str, font, size_px: int):
    from PIL import ImageDraw

    left, top, _, bottom = _measure(text, font)
    canvas = _blank(size_px + _LINE_PADDING_PX)
    # Centre on the glyph box, not the origin, so descenders stay on the paper.
    y = (canvas.height - (bottom - top)) // 2 - top
    ImageDraw.Draw(canvas).text((PRINTER_LEFT_INDENT_PX - left, y), text, font=font, fill=0)
    return canvas


def _ticket_header(location: str, order_label: str, font, not_paid: bool):
    """Location on the left, order number flush right, ``NO PAGADO`` under the location."""
    from PIL import ImageDraw

    pad_top, pad_bottom = _HEADER_PADDING_PX
    small = font.font_variant(size=max(12, font.size // 2))
    label_box = _measure(order_label, font)
    location_box = _measure(location, small)
    badge = "NO PAGADO" if not_paid else ""
    badge_box = _measure(badge, small) if badge else (0, 0, 0, 0)

    left_height = (location_box[3] - location_box[1]) + (badge_box[3] - badge_box[1])
    height = max(label_box[3] - label_box[1], left_height) + pad_top + pad_bottom
    canvas = _blank(height)
    draw = ImageDraw.Draw(canvas)

    label_x = PRINTER_WIDTH_PX - PRINTER_LEFT_INDENT_PX - label_box[2]
    draw.text((label_x, pad_top - label_box[1]), order_label, font=font, fill=0)
    draw.text((PRINTER_LEFT_INDENT_PX, pad_top - location_box[1]), location, font=small, fill=0)
    if badge:
        badge_y = pad_top + (location_box[3] - location_box[1]) - badge_box[1] + 2
        draw.text((PRINTER_LEFT_INDENT_PX, badge_y), badge, font=small, fill=0)
    return canvas


def _print_rule(printer) -> None:
    from PIL import ImageDraw

    rule = _blank(_RULE_HEIGHT_PX)
    top = (_RULE_HEIGHT_PX - _RULE_THICKNESS_PX) // 2
    ImageDraw.Draw(rule).rectangle((0, top, PRINTER_WIDTH_PX - 1, top + _RULE_THICKNESS_PX - 1), fill=0)
    for band_top in range(0, rule.height, _RULE_BAND_PX):
        band_bottom = min(rule.height, band_top + _RULE_BAND_PX)
        printer.image(rule.crop((0, band_top, PRINTER_WIDTH_PX, band_bottom)))
        if band_bottom < rule.height:
            sleep(_RULE_BAND_PAUSE_SECONDS)


def _open_printer():
    from escpos.printer import Usb

    return Usb(PRINTER_USB_VENDOR_ID, PRINTER_USB_PRODUCT_ID)


def print_kitchen_ticket(order: Order) -> None:
    """Print the kitchen ticket: header with location and order number, then one line per item."""
    if not order.items:
        return
    from PIL import ImageFont

    font = ImageFont.truetype(resolve_printer_font_path(), PRINTER_FONT_SIZE)
    location, order_label, *item_lines = format_kitchen_ticket_lines(order)

    printer = _open_printer()
    printer.image(_ticket_header(location, order_label, font, not_paid=not order.is_paid))
    _print_rule(printer)
    for line in item_lines:
        printer.image(_text_line(line, font, PRINTER_FONT_SIZE))
    if len(item_lines) == 1:
        printer.image(_blank(PRINTER_TAIL_SPACER_PX))
    printer.cut()
    logger.info("kitchen ticket sent order=%s lines=%d", order.id, len(item_lines))


def print_receipt(order: Order) -> None:
    """Print the customer receipt with totals."""
    if not order.items:
        return
    from PIL import ImageFont

    font = ImageFont.truetype(resolve_printer_font_path(), PRINTER_RECEIPT_FONT_SIZE)
    printer = _open_printer()
    for line in format_receipt_lines(order):
        if line == _RECEIPT_RULE:
            _print_rule(printer)
        else:
            printer.image(_text_line(line, font, PRINTER_RECEIPT_FONT_SIZE))
    printer.image(_blank(PRINTER_TAIL_SPACER_PX))
    printer.cut()
    logger.info("receipt sent order=%s total=%.2f", order.id, order.total)
