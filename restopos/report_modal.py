"""Dashboard and sales report modal screen."""

from __future__ import annotations

from datetime import date, timedelta

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Static

from restopos.lifecycle import OrderSession
from restopos.printer import format_money
from restopos.rendering import format_order_summary
from restopos.reports import dashboard_stats, sales_report

_RANGES = (("Hoy", 0), ("Últimos 7 días", 6), ("Últimos 30 días", 29))


class ReportModal(ModalScreen[None]):
    """Today's figures and low-stock products, plus a sales report over a selectable range when ``include_sales``."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("ctrl+c", "close", "Close"),
        ("r", "cycle_range", "Range"),
    ]

    CSS = """
    ReportModal {
        align: center middle;
        background: $background 60%;
    }

    #report-dialog {
        width: 72;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #report-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #report-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    def __init__(self, session: OrderSession, include_sales: bool = True) -> None:
        super().__init__()
        self.session = session
        self.include_sales = include_sales
        self.range_index = 0

    def compose(self) -> ComposeResult:
        with Container(id="report-dialog"):
            yield Static("Reportes" if self.include_sales else "Dashboard", id="report-title")
            yield Static(id="report-body")
            yield Static("R cambia rango. Esc/q cerrar." if self.include_sales else "Esc/q cerrar.", id="report-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def action_close(self) -> None:
        self.dismiss()

    def action_cycle_range(self) -> None:
        if not self.include_sales:
            return
        self.range_index = (self.range_index + 1) % len(_RANGES)
        self._refresh_content()

    def _refresh_content(self) -> None:
        products = self.session.catalog.products
        stats = dashboard_stats(self.session.orders, products)
        content = Text(style="white")
        content.append("Hoy\n", style="bold")
        content.append(f"  Órdenes: {stats.today_orders}   Ingresos: {format_money(stats.today_revenue)}\n")
        content.append(f"  Productos: {stats.product_count}   Stock bajo: {stats.low_stock_count}\n")

        content.append("\nMás vendidos\n", style="bold")
        for popular in stats.popular_products:
            content.append(f"  {popular.name}  {popular.quantity} vendidos\n")

        content.append("\nVentas recientes\n", style="bold")
        for order in stats.recent_sales:
            content.append("  ")
            content.append_text(format_order_summary(order))
            content.append("\n")

        content.append("\nStock bajo\n", style="bold")
        for product in self.session.catalog.low_stock():
            content.append(f"  {product.name}  Stock: {product.stock}\n", style="#ffb3b3")

        if self.include_sales:
            self._append_sales(content)
        self.query_one("#report-body", Static).update(content)

    def _append_sales(self, content: Text) -> None:
        label, days_back = _RANGES[self.range_index]
        today = date.today()
        report = sales_report(self.session.orders, today - timedelta(days=days_back), today)
        content.append(f"\n{label}\n", style="bold")
        content.append(f"  Total de Ventas: {report.count}\n")
        content.append(f"  Ingresos Totales: {format_money(report.total)}\n")
        content.append(f"  Promedio por Venta: {format_money(report.average)}")
