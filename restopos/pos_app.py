"""Main Textual app class."""

from __future__ import annotations

import logging
from typing import Callable

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Header, Static

from restopos.auth import User, clear_session
from restopos.config import LOCATION_TYPES, MAX_LOCATIONS
from restopos.errors import PosError
from restopos.lifecycle import OrderSession
from restopos.login_modal import LoginModal
from restopos.models import Category, LineItem, LocationId, Product
from restopos.orders_modal import OrdersModal
from restopos.password_modal import PasswordModal
from restopos.printer import check_printer_dependencies, print_kitchen_ticket, print_receipt
from restopos.product_modal import ProductModal
from restopos.rendering import (
    format_line_item,
    format_location_option,
    format_product_row,
    format_status_badge,
    format_totals,
)
from restopos.report_modal import ReportModal
from restopos.reports import export_data

logger = logging.getLogger(__name__)

_LOCATION_KEYS = {"m": "mesa", "d": "domicilio", "b": "barra"}


class PosApp(App):
    """A Textual point-of-sale app for table, delivery and counter orders."""

    TITLE = "Restaurante POS"
    SUB_TITLE = "Facturación"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #order-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #search-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #locations {
        height: auto;
        margin-bottom: 1;
    }

    #order-header {
        height: auto;
        margin-bottom: 1;
    }

    #order-items {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #order-totals {
        height: auto;
        margin-top: 1;
    }

    #search-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 6;
    }

    #results {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    input_state = reactive("normal")
    location_type = reactive("mesa")
    location_cursor = reactive(1)
    search_query = reactive("")
    selected_index = reactive(0)
    item_selected_index = reactive(None)

    BINDINGS = [
        ("tab", "cycle_results(1)", "Next result"),
        ("up", "cycle_results(-1)", "Previous result"),
        ("down", "cycle_results(1)", "Next result"),
        ("left", "move_location(-1)", "Previous location"),
        ("right", "move_location(1)", "Next location"),
        ("enter", "add_selected", "Add item"),
        ("backspace", "backspace_query", "Delete query char"),
        Binding("ctrl+s", "save_order", "Save", priority=True),
        Binding("ctrl+e", "export", "Export", priority=True),
        Binding("ctrl+l", "logout", "Logout", priority=True),
        ("ctrl+o", "edit_product", "Edit product"),
        ("ctrl+d", "delete_product", "Delete product"),
        ("ctrl+c", "cancel_active_mode", "Exit search"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, session: OrderSession) -> None:
        super().__init__()
        self.session = session
        self.user: User | None = None
        self.system_status = ""
        self.category_index = 0
        self._pending_delete: str | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="order-pane"):
                yield Static(id="locations")
                yield Static(id="order-header")
                yield Static("(sin productos)", id="order-items")
                yield Static(id="order-totals")
            with Vertical(id="search-pane"):
                yield Static("Productos", classes="pane-title")
                yield Static(id="search-bar")
                yield Static(id="results")

    def on_mount(self) -> None:
        _, msg = check_printer_dependencies()
        self.system_status = msg
        logger.info("on_mount printer_status=%r", msg)
        self._refresh_all()
        self._require_login()

    # -------------------- login --------------------

    def _require_login(self) -> None:
        self.push_screen(LoginModal(self.session.store), self._on_login)

    def _on_login(self, user: User | None) -> None:
        if user is None:
            self._require_login()
            return
        self.user = user
        self.sub_title = f"{user.display_name} ({user.role})"
        self.system_status = f"Bienvenido, {user.display_name}"
        self._refresh_all()
        if user.default_tab == "dashboard":
            self._open_reports()

    def action_logout(self) -> None:
        if self.user is None or isinstance(self.screen, ModalScreen):
            return
        clear_session(self.session.store)
        self.session.clear()
        self.user = None
        self._refresh_all()
        self._require_login()

    # -------------------- keyboard --------------------

    def on_key(self, event: Key) -> None:
        if self.user is None or isinstance(self.screen, ModalScreen):
            return

        if self.input_state == "normal" and event.character in {"+", "-"}:
            self._change_selected_quantity(1 if event.character == "+" else -1)
            event.stop()
            return

        if not event.is_printable or not event.character or len(event.character) != 1:
            return
        if not (event.character.isalnum() or (self.input_state == "active" and event.character == " ")):
            if event.character == "/" and self.input_state == "normal":
                self._enter_search()
                event.stop()
            return

        key = event.character.lower()
        if self.input_state == "active":
            self.search_query += event.character
            self.selected_index = 0
            self._refresh_search()
            event.stop()
            return

        handlers: dict[str, Callable[[], None]] = {
            "h": lambda: self.action_move_location(-1),
            "l": lambda: self.action_move_location(1),
            "o": self._select_location_at_cursor,
            "a": self._enter_search,
            "j": lambda: self._move_item_selection(1),
            "k": lambda: self._move_item_selection(-1),
            "p": self._print_kitchen_ticket,
            "r": self._print_receipt,
            "c": self._clear_order,
            "v": self._open_orders,
            "i": self._open_product_form,
            "g": self._open_reports,
            "f": self._cycle_category,
            "s": self._open_settings,
        }
        if key in _LOCATION_KEYS:
            self.location_type = _LOCATION_KEYS[key]
            self.location_cursor = 1
            self._refresh_locations()
        elif key in handlers:
            handlers[key]()
        else:
            return
        event.stop()

    def action_cancel_active_mode(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state == "normal":
            return

        self.input_state = "normal"
        self.search_query = ""
        self.selected_index = 0
        self._refresh_search()

    def action_cycle_results(self, delta: int) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "active":
            return

        self._pending_delete = None
        results = self._filtered_results()
        if not results:
            self.selected_index = 0
            self._refresh_results(results)
            return
        self.selected_index = (self.selected_index + delta) % len(results)
        self._refresh_results(results)

    def action_move_location(self, delta: int) -> None:
        if self.user is None or isinstance(self.screen, ModalScreen) or self.input_state != "normal":
            return
        self.location_cursor = (self.location_cursor - 1 + delta) % MAX_LOCATIONS + 1
        self._refresh_locations()

    def action_add_selected(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "active":
            return

        results = self._filtered_results()
        if not results:
            return
        product = results[self.selected_index]

        def add() -> None:
            if not self.session.add_item(product.id):
                self.system_status = f"{product.name} sin stock"
            else:
                self.system_status = f"Agregado: {product.name}"

        self._run(add)

    def action_backspace_query(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "active":
            return

        if not self.search_query:
            return
        self.search_query = self.search_query[:-1]
        self.selected_index = 0
        self._refresh_search()

    def action_save_order(self) -> None:
        if self.user is None or isinstance(self.screen, ModalScreen):
            return

        def save() -> None:
            saved = self.session.save()
            self.system_status = f"Orden #{saved.short_id} guardada ({saved.location.display_name})"

        self._run(save)

    def action_export(self) -> None:
        if self.user is None or isinstance(self.screen, ModalScreen):
            return
        if not self.user.can("settings"):
            self._set_status("Solo los administradores pueden exportar datos.")
            return

        def export() -> None:
            path = export_data(self.session.store)
            self.system_status = f"Datos exportados a: {path}"

        self._run(export)

    # -------------------- intents --------------------

    def _run(self, intent: Callable[[], None]) -> None:
        """Run a session intent, turning domain errors into a status message."""
        try:
            intent()
        except (PosError, ValueError) as exc:
            logger.info("intent rejected: %s", exc)
            self.system_status = str(exc)
        self._refresh_all()

    def _set_status(self, message: str) -> None:
        self.system_status = message
        self._refresh_search()

    def _enter_search(self) -> None:
        self.input_state = "active"
        self.search_query = ""
        self.selected_index = 0
        self._refresh_search()

    def _select_location_at_cursor(self) -> None:
        location = LocationId(self.location_type, self.location_cursor)

        def select() -> None:
            order = self.session.select_location(location)
            verb = "Editando" if order.id else "Nueva orden en"
            self.system_status = f"{verb} {location.display_name}"
            self.item_selected_index = None

        self._run(select)

    def _change_selected_quantity(self, delta: int) -> None:
        item = self._selected_item()
        if item is None:
            return
        self._run(lambda: self.session.change_quantity(item.product_id, delta))

    def _clear_order(self) -> None:
        self.session.clear()
        self.item_selected_index = None
        self._set_status("Orden limpiada")
        self._refresh_all()

    def _print_kitchen_ticket(self) -> None:
        try:
            saved = self.session.print_kitchen_ticket(print_kitchen_ticket)
        except (PosError, ValueError) as exc:
            self.system_status = str(exc)
        except Exception as exc:
            logger.error("kitchen ticket failed error=%r", exc)
            self.system_status = f"Guardada pero la impresión falló: {exc}"
        else:
            self.system_status = f"Comanda enviada: #{saved.short_id}"
        self._refresh_all()

    def _print_receipt(self) -> None:
        order = self.session.current
        if order is None or order.is_empty:
            self._set_status("No hay items en la orden para imprimir.")
            return
        try:
            print_receipt(order.snapshot())
        except Exception as exc:
            logger.error("receipt failed error=%r", exc)
            self._set_status(f"La impresión falló: {exc}")
            return
        self._set_status(f"Recibo impreso: #{order.short_id}")

    def _open_orders(self) -> None:
        if not self.user.can("orders"):
            self._set_status("Sin permiso para ver órdenes.")
            return
        self.push_screen(OrdersModal(self.session, after_change=self._refresh_all))

    def _open_reports(self) -> None:
        if not self.user.can("dashboard"):
            self._set_status("Sin permiso para ver el dashboard.")
            return
        self.push_screen(ReportModal(self.session, include_sales=self.user.can("reports")))

    def _open_settings(self) -> None:
        if not self.user.can("settings"):
            self._set_status("Solo los administradores pueden cambiar la configuración.")
            return
        self.push_screen(PasswordModal(self.session.store), self._on_password_changed)

    def _on_password_changed(self, changed: bool | None) -> None:
        if changed:
            self._set_status("Contraseña actualizada exitosamente.")

    def _open_product_form(self) -> None:
        if not self.user.can("inventory"):
            self._set_status("Solo los administradores pueden agregar productos al inventario.")
            return
        self.push_screen(ProductModal(self.session.catalog), self._on_product_saved)

    def _on_product_saved(self, product: Product | None) -> None:
        if product is not None:
            self._set_status(f"Producto guardado: {product.name}")
        self._refresh_all()

    def _highlighted_product(self) -> Product | None:
        if self.input_state != "active":
            return None
        results = self._filtered_results()
        if not results:
            return None
        return results[min(self.selected_index, len(results) - 1)]

    def action_edit_product(self) -> None:
        if self.user is None or isinstance(self.screen, ModalScreen):
            return
        product = self._highlighted_product()
        if product is None:
            return
        if not self.user.can("inventory"):
            self._set_status("Solo los administradores pueden editar productos.")
            return
        self.push_screen(ProductModal(self.session.catalog, product), self._on_product_saved)

    def action_delete_product(self) -> None:
        """Delete the highlighted product; the first press only asks for confirmation."""
        if self.user is None or isinstance(self.screen, ModalScreen):
            return
        product = self._highlighted_product()
        if product is None:
            return
        if not self.user.can("inventory"):
            self._set_status("Solo los administradores pueden eliminar productos.")
            return
        if self._pending_delete != product.id:
            self._pending_delete = product.id
            self._set_status(f"Ctrl+D otra vez para eliminar {product.name}")
            return

        def delete() -> None:
            self.session.catalog.delete_product(product.id)
            self.system_status = f"Producto eliminado: {product.name}"

        self._pending_delete = None
        self.selected_index = 0
        self._run(delete)

    def _cycle_category(self) -> None:
        categories = self.session.catalog.categories
        self.category_index = (self.category_index + 1) % (len(categories) + 1)
        category = self._active_category()
        self._enter_search()
        self._set_status(f"Categoría: {category.name}" if category else "Todas las categorías")

    def _active_category(self) -> Category | None:
        categories = self.session.catalog.categories
        if not 0 < self.category_index <= len(categories):
            return None
        return categories[self.category_index - 1]

    # -------------------- rendering --------------------

    def _filtered_results(self) -> list[Product]:
        category = self._active_category()
        return self.session.catalog.search(self.search_query, category.id if category else None)

    def _refresh_all(self) -> None:
        self._refresh_locations()
        self._refresh_order()
        self._refresh_search()

    def _move_item_selection(self, delta: int) -> None:
        order = self.session.current
        if order is None or not order.items:
            return

        if self.item_selected_index is None:
            self.item_selected_index = 0 if delta > 0 else len(order.items) - 1
        else:
            self.item_selected_index = (self.item_selected_index + delta) % len(order.items)
        self._refresh_order()

    def _selected_item(self) -> LineItem | None:
        order = self.session.current
        if order is None or self.item_selected_index is None:
            return None
        if not (0 <= self.item_selected_index < len(order.items)):
            return None
        return order.items[self.item_selected_index]

    def _refresh_locations(self) -> None:
        try:
            widget = self.query_one("#locations", Static)
        except NoMatches:
            return
        current = self.session.current
        text = Text()
        for kind in LOCATION_TYPES:
            style = "bold underline" if kind == self.location_type else "dim"
            text.append(f"[{kind[0].upper()}] {kind}  ", style=style)
        text.append("\n")
        for idx in range(1, MAX_LOCATIONS + 1):
            location = LocationId(self.location_type, idx)
            occupied = self.session.registry.is_occupied(location)
            selected = current is not None and current.location == location
            if idx == self.location_cursor:
                text.append("➤", style="bold")
            else:
                text.append(" ")
            text.append_text(format_location_option(location, occupied, selected))
            if idx % 7 == 0 and idx < MAX_LOCATIONS:
                text.append("\n")
        widget.update(text)

    def _refresh_order(self) -> None:
        try:
            header = self.query_one("#order-header", Static)
            items_widget = self.query_one("#order-items", Static)
            totals = self.query_one("#order-totals", Static)
        except NoMatches:
            return

        order = self.session.current
        if order is None:
            self.item_selected_index = None
            header.update("Ubicación: Sin seleccionar")
            items_widget.update("(sin productos)")
            totals.update("")
            return

        head = Text()
        head.append(f"Ubicación: {order.location.display_name if order.location else 'Sin seleccionar'}  ")
        head.append(f"Orden #{order.short_id} ")
        head.append_text(format_status_badge(order.status))
        if order.kitchen_ticket_printed:
            head.append("  comanda impresa", style="italic")
        header.update(head)
        totals.update(format_totals(order))

        if not order.items:
            self.item_selected_index = None
            items_widget.update("(sin productos)")
            return
        if self.item_selected_index is not None and self.item_selected_index >= len(order.items):
            self.item_selected_index = len(order.items) - 1

        lines = Text()
        for idx, item in enumerate(order.items):
            if idx > 0:
                lines.append("\n")
            pointer = "➤ " if idx == self.item_selected_index else "  "
            lines.append(pointer)
            lines.append_text(format_line_item(item))
        items_widget.update(lines)

    def _refresh_search(self) -> None:
        self._refresh_search_bar()
        if self.input_state == "normal":
            self._refresh_results([])
            return
        self._refresh_results(self._filtered_results())

    def _refresh_search_bar(self) -> None:
        try:
            bar = self.query_one("#search-bar", Static)
        except NoMatches:
            return
        if self.input_state == "normal":
            status = self.system_status or "Listo"
            bar.update(
                "M/D/B tipo, H/L/←/→ mover, O abrir. A buscar, F categoría, J/K item, +/- cantidad.\n"
                "Ctrl+S guardar, P comanda, R recibo, V órdenes, C limpiar.\n"
                f"G dashboard, I producto, S contraseña, Ctrl+L salir.\n{status}"
            )
            return

        text = Text()
        text.append("Buscar", style="bold")
        text.append(f": {self.search_query}")
        category = self._active_category()
        if category is not None:
            text.append(f"  [{category.name}]", style="dim")
        text.append("\nEnter agregar, Ctrl+O editar, Ctrl+D eliminar, Ctrl+C salir.", style="dim")
        if self.system_status:
            text.append(f"\n{self.system_status}")
        bar.update(text)

    def _refresh_results(self, results: list[Product]) -> None:
        try:
            results_widget = self.query_one("#results", Static)
        except NoMatches:
            return
        if self.input_state == "normal":
            results_widget.update("")
            return

        if not results:
            results_widget.update("Sin resultados")
            return

        if self.selected_index >= len(results):
            self.selected_index = 0

        lines = Text()
        for idx, product in enumerate(results):
            if idx > 0:
                lines.append("\n")
            pointer = "➤ " if idx == self.selected_index else "  "
            lines.append(pointer)
            lines.append_text(format_product_row(product))
        results_widget.update(lines)
