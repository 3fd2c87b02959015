"""Orders modal screen."""

from __future__ import annotations

from typing import Callable

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Static

from restopos.data import status_label
from restopos.errors import PosError
from restopos.lifecycle import OrderSession, next_status
from restopos.models import OrderStatus
from restopos.orders import Order
from restopos.rendering import format_line_item, format_order_summary
from restopos.reports import filter_orders

_FILTERS: tuple[OrderStatus | None, ...] = (None, *OrderStatus)


class OrdersModal(ModalScreen[None]):
    """Centered modal listing orders, with status transitions for the highlighted one."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("ctrl+c", "close", "Close"),
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("up", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("n", "advance", "Next status"),
        ("x", "cancel_order", "Cancel order"),
        ("f", "cycle_filter", "Filter"),
    ]

    CSS = """
    OrdersModal {
        align: center middle;
        background: $background 60%;
    }

    #orders-dialog {
        width: 90;
        height: auto;
        max-height: 90%;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #orders-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #orders-message {
        color: #ffb3b3;
    }

    #orders-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    cursor_index = reactive(0)

    def __init__(self, session: OrderSession, after_change: Callable[[], None]) -> None:
        super().__init__()
        self.session = session
        self.after_change = after_change
        self.filter_index = 0
        self.message = ""

    def compose(self) -> ComposeResult:
        with Container(id="orders-dialog"):
            yield Static(id="orders-title")
            yield Static(id="orders-body")
            yield Static(id="orders-message")
            yield Static("J/K/↑/↓ move, N next status, X cancel, F filter, Esc/q close", id="orders-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def action_close(self) -> None:
        self.dismiss()
        self.after_change()

    def action_move_cursor(self, delta: int) -> None:
        rows = self._rows()
        if not rows:
            return
        self.cursor_index = (self.cursor_index + delta) % len(rows)
        self._refresh_content()

    def action_cycle_filter(self) -> None:
        self.filter_index = (self.filter_index + 1) % len(_FILTERS)
        self.cursor_index = 0
        self._refresh_content()

    def action_advance(self) -> None:
        order = self._selected()
        if order is None:
            return
        target = next_status(order.status)
        if target is None:
            self.message = f"Orden #{order.short_id} ya está {status_label(order.status).lower()}"
            self._refresh_content()
            return
        self._transition(order, target)

    def action_cancel_order(self) -> None:
        order = self._selected()
        if order is None:
            return
        self._transition(order, OrderStatus.CANCELLED)

    def _transition(self, order: Order, target: OrderStatus) -> None:
        try:
            updated = self.session.transition(order, target)
        except PosError as exc:
            self.message = str(exc)
        else:
            self.message = f"Orden #{updated.short_id}: {status_label(updated.status)}"
        self._refresh_content()

    def _rows(self) -> list[Order]:
        status = _FILTERS[self.filter_index]
        rows = filter_orders(self.session.orders, status=status)
        # Open orders first, newest first within each group.
        rows.sort(key=lambda order: order.created_at or "", reverse=True)
        rows.sort(key=lambda order: order.is_terminal)
        return rows

    def _selected(self) -> Order | None:
        rows = self._rows()
        if not rows:
            return None
        return rows[min(self.cursor_index, len(rows) - 1)]

    def _refresh_content(self) -> None:
        status = _FILTERS[self.filter_index]
        title = "Órdenes" if status is None else f"Órdenes · {status_label(status)}"
        self.query_one("#orders-title", Static).update(title)
        self.query_one("#orders-message", Static).update(self.message)

        rows = self._rows()
        body = self.query_one("#orders-body", Static)
        if not rows:
            body.update("(sin órdenes)")
            return
        if self.cursor_index >= len(rows):
            self.cursor_index = len(rows) - 1

        content = Text(style="white")
        for idx, order in enumerate(rows):
            if idx > 0:
                content.append("\n")
            pointer = "➤ " if idx == self.cursor_index else "  "
            content.append(pointer)
            content.append_text(format_order_summary(order))
            if idx == self.cursor_index:
                for item in order.items:
                    content.append("\n      ")
                    content.append_text(format_line_item(item))
        body.update(content)
