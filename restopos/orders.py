"""Order aggregate: line items, flags and derived totals for one order."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from restopos.config import TAX_RATE
from restopos.errors import NotFound, PolicyViolation
from restopos.models import LineItem, LocationId, OrderStatus, Product


@dataclass
class Order:
    """One in-progress or historical order.

    Totals are derived: every mutating method recomputes them before
    returning, so ``subtotal``/``tax``/``total`` are never stale.
    """

    id: str | None = None
    items: list[LineItem] = field(default_factory=list)
    status: OrderStatus = OrderStatus.PENDING
    location: LocationId | None = None
    created_at: str | None = None
    updated_at: str | None = None
    completed_at: str | None = None
    kitchen_ticket_printed: bool = False
    is_paid: bool = False
    tax_rate: float = TAX_RATE
    subtotal: float = 0.0
    tax: float = 0.0
    total: float = 0.0

    def __post_init__(self) -> None:
        self.recompute_totals()

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def short_id(self) -> str:
        return self.id[-6:] if self.id else "nuevo"

    def find_item(self, product_id: str) -> LineItem | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    def add_item(self, product: Product) -> bool:
        """Add one unit of ``product``; returns False (no-op) when it is out of stock."""
        self._ensure_mutable()
        if product.stock <= 0:
            return False
        if product.id is None:
            raise NotFound(f"Product {product.name!r} has not been saved")

        existing = self.find_item(product.id)
        if existing is not None:
            existing.quantity += 1
        else:
            self.items.append(LineItem(product_id=product.id, name=product.name, price=product.price))
        self.recompute_totals()
        return True

    def change_quantity(self, product_id: str, delta: int) -> None:
        """Adjust a line's quantity by ``delta``, dropping the line when it reaches zero."""
        self._ensure_mutable()
        if delta < 0 and self.kitchen_ticket_printed:
            raise PolicyViolation("Items cannot be removed after the kitchen ticket has been printed")
        item = self.find_item(product_id)
        if item is None:
            raise NotFound(f"Order has no line for product {product_id!r}")
        if delta == 0:
            return

        item.quantity += delta
        if item.quantity <= 0:
            self.items = [row for row in self.items if row.product_id != product_id]
        self.recompute_totals()

    def recompute_totals(self) -> None:
        self.subtotal = sum(item.subtotal for item in self.items)
        self.tax = self.subtotal * self.tax_rate
        self.total = self.subtotal + self.tax

    def snapshot(self) -> Order:
        """Detached deep copy for renderers and printers."""
        return copy.deepcopy(self)

    def _ensure_mutable(self) -> None:
        if self.is_terminal:
            raise PolicyViolation(f"Order {self.short_id} is {self.status.value} and can no longer change")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "items": [item.to_dict() for item in self.items],
            "status": self.status.value,
            "location": str(self.location) if self.location is not None else None,
            "locationType": self.location.location_type if self.location is not None else None,
            "locationDisplay": self.location.display_name if self.location is not None else None,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "completedAt": self.completed_at,
            "kitchenTicketPrinted": self.kitchen_ticket_printed,
            "isPaid": self.is_paid,
            "taxRate": self.tax_rate,
            "subtotal": self.subtotal,
            "tax": self.tax,
            "total": self.total,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], tax_rate: float = TAX_RATE) -> Order:
        """Load a persisted record; totals are recomputed rather than trusted."""
        raw_location = data.get("location")
        raw_id = data.get("id")
        return cls(
            id=str(raw_id) if raw_id is not None else None,
            items=[LineItem.from_dict(row) for row in data.get("items", [])],
            status=OrderStatus(data.get("status", OrderStatus.PENDING.value)),
            location=LocationId.parse(raw_location) if raw_location else None,
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
            completed_at=data.get("completedAt"),
            kitchen_ticket_printed=bool(data.get("kitchenTicketPrinted", False)),
            is_paid=bool(data.get("isPaid", False)),
            tax_rate=float(data.get("taxRate", tax_rate)),
        )
