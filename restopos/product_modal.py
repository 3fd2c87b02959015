"""Product entry modal screen."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from restopos.catalog import Catalog
from restopos.errors import PosError
from restopos.models import Product


class ProductModal(ModalScreen[Product | None]):
    """Form for adding or editing one catalog product."""

    CSS = """
    ProductModal {
        align: center middle;
        background: $background 60%;
    }

    #product-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #product-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #product-fields {
        color: white;
        margin-bottom: 1;
    }

    #product-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #product-help {
        color: #dddddd;
    }
    """

    _FIELDS = (
        ("name", "Nombre"),
        ("category_id", "Categoría (id)"),
        ("price", "Precio"),
        ("stock", "Stock"),
        ("description", "Descripción"),
    )

    def __init__(self, catalog: Catalog, product: Product | None = None) -> None:
        super().__init__()
        self.catalog = catalog
        self.product = product
        first_category = catalog.categories[0].id if catalog.categories else ""
        self.values = {
            "name": product.name if product else "",
            "category_id": product.category_id if product else first_category,
            "price": f"{product.price:.2f}" if product else "",
            "stock": str(product.stock) if product else "",
            "description": (product.description or "") if product else "",
        }
        self.field_index = 0
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="product-dialog"):
            yield Static("Editar Producto" if self.product else "Agregar Producto", id="product-title")
            yield Static(id="product-fields")
            yield Static(id="product-error")
            yield Static("Tab/↑/↓ campo. Enter guardar. Esc cancelar.", id="product-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key in {"tab", "down"}:
            self.field_index = (self.field_index + 1) % len(self._FIELDS)
        elif event.key in {"shift+tab", "up"}:
            self.field_index = (self.field_index - 1) % len(self._FIELDS)
        elif event.key == "enter":
            event.stop()
            self._confirm()
            return
        elif event.key == "backspace":
            name = self._FIELDS[self.field_index][0]
            self.values[name] = self.values[name][:-1]
        elif event.is_printable and event.character:
            name = self._FIELDS[self.field_index][0]
            self.values[name] += event.character
        else:
            return
        self._refresh_content()
        event.stop()

    def _confirm(self) -> None:
        if not self.values["price"].strip():
            self.error = "Por favor completa todos los campos requeridos."
            self._refresh_content()
            return
        try:
            price = float(self.values["price"])
            stock = int(self.values["stock"] or "0")
        except ValueError:
            self.error = "Precio y stock deben ser numéricos."
            self._refresh_content()
            return

        candidate = Product(
            id=self.product.id if self.product else None,
            name=self.values["name"].strip(),
            category_id=self.values["category_id"].strip(),
            price=price,
            stock=stock,
            description=self.values["description"].strip() or None,
            created_at=self.product.created_at if self.product else None,
        )
        try:
            saved = self.catalog.save_product(candidate)
        except (PosError, ValueError) as exc:
            self.error = str(exc)
            self._refresh_content()
            return
        self.dismiss(saved)

    def _refresh_content(self) -> None:
        lines = []
        for idx, (name, label) in enumerate(self._FIELDS):
            pointer = "➤ " if idx == self.field_index else "  "
            lines.append(f"{pointer}{label}: {self.values[name]}")
        categories = ", ".join(f"{category.id}={category.name}" for category in self.catalog.categories)
        lines.append(f"\nCategorías: {categories}")
        self.query_one("#product-fields", Static).update("\n".join(lines))
        self.query_one("#product-error", Static).update(self.error or "")
