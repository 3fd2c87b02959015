"""Rich text views of locations, orders and catalog rows."""

from __future__ import annotations

from rich.text import Text

from restopos.data import status_label
from restopos.models import LineItem, LocationId, OrderStatus, Product
from restopos.orders import Order
from restopos.printer import format_money

_STATUS_STYLES: dict[OrderStatus, str] = {
    OrderStatus.PENDING: "bold #0b1f0f on #f2c14e",
    OrderStatus.PREPARING: "bold #ffffff on #2f6db5",
    OrderStatus.READY: "bold #0b1f0f on #5fbf72",
    OrderStatus.COMPLETED: "bold #ffffff on #4a4a4a",
    OrderStatus.CANCELLED: "bold #ffffff on #b23a48",
}


def badge_style(status: OrderStatus) -> str:
    """Return a consistent badge style for order statuses."""
    return _STATUS_STYLES.get(status, "bold")


def format_status_badge(status: OrderStatus) -> Text:
    return Text(f" {status_label(status)} ", style=badge_style(status))


def format_location_option(location: LocationId, occupied: bool, selected: bool) -> Text:
    """One cell of the location grid: occupied slots red, the selected one reversed."""
    style = "bold #ffffff on #b23a48" if occupied else "#0b1f0f on #5fbf72"
    if selected:
        style = f"{style} reverse"
    return Text(f" {location.display_name} ", style=style)


def format_line_item(item: LineItem) -> Text:
    text = Text()
    text.append(f"{item.quantity:>3} x ")
    text.append(item.name, style="bold")
    text.append(f"  {format_money(item.price)}", style="dim")
    text.append(f"  = {format_money(item.subtotal)}")
    return text


def format_product_row(product: Product) -> Text:
    text = Text()
    text.append(product.name)
    text.append(f"  {format_money(product.price)}", style="bold")
    stock_style = "bold #b23a48" if product.stock <= 0 else "dim"
    text.append(f"  stock {product.stock}", style=stock_style)
    return text


def format_totals(order: Order) -> Text:
    text = Text()
    text.append(f"Subtotal: {format_money(order.subtotal)}\n")
    text.append(f"IVA ({order.tax_rate * 100:g}%): {format_money(order.tax)}\n")
    text.append(f"TOTAL: {format_money(order.total)}", style="bold")
    return text


def format_order_summary(order: Order) -> Text:
    """Single-line order card: number, status badge, location, item count and total."""
    text = Text()
    text.append(f"#{order.short_id} ")
    text.append_text(format_status_badge(order.status))
    location = order.location.display_name if order.location is not None else "Sin ubicación"
    text.append(f" {location}")
    text.append(f"  {order.item_count} items  {format_money(order.total)}", style="dim")
    if order.kitchen_ticket_printed:
        text.append("  [cocina]", style="italic")
    return text
