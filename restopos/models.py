"""Domain models for restopos."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from restopos.config import LOCATION_TYPES, MAX_LOCATIONS, TIMESTAMP_FORMAT
from restopos.constant import LOCATION_LABELS
from restopos.errors import NotFound


def now_stamp() -> str:
    """Local-time timestamp in the persisted record format."""
    return datetime.now().strftime(TIMESTAMP_FORMAT)


def parse_stamp(value: str) -> datetime:
    return datetime.strptime(value, TIMESTAMP_FORMAT)


class OrderStatus(str, Enum):
    """Order lifecycle states."""

    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.COMPLETED, OrderStatus.CANCELLED)


ACTIVE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.PREPARING, OrderStatus.READY})


@dataclass(frozen=True, order=True)
class LocationId:
    """A service point such as ``mesa_3``: a kind plus a 1-based slot number."""

    kind: str
    index: int

    def __post_init__(self) -> None:
        if self.kind not in LOCATION_TYPES:
            raise NotFound(f"Unknown location type: {self.kind!r}")
        if not (1 <= self.index <= MAX_LOCATIONS):
            raise NotFound(f"Location index must be between 1 and {MAX_LOCATIONS}, got {self.index}")

    @classmethod
    def parse(cls, value: str | LocationId) -> LocationId:
        if isinstance(value, LocationId):
            return value
        kind, sep, raw_index = str(value).rpartition("_")
        if not sep or not raw_index.isdigit():
            raise NotFound(f"Malformed location id: {value!r}")
        return cls(kind, int(raw_index))

    @property
    def location_type(self) -> str:
        return self.kind

    @property
    def display_name(self) -> str:
        return f"{LOCATION_LABELS[self.kind]} {self.index}"

    def __str__(self) -> str:
        return f"{self.kind}_{self.index}"


def all_locations(kind: str, max_locations: int = MAX_LOCATIONS) -> list[LocationId]:
    """Every slot of one location type, in display order."""
    return [LocationId(kind, idx) for idx in range(1, max_locations + 1)]


@dataclass
class Category:
    """A presentational product grouping."""

    id: str
    name: str
    color: str = "#888888"
    icon: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "name": self.name, "color": self.color}
        if self.icon is not None:
            data["icon"] = self.icon
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Category:
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            color=str(data.get("color", "#888888")),
            icon=data.get("icon"),
        )


@dataclass
class Product:
    """A sellable catalog item.

    Attributes:
        id: Store-assigned identifier (``None`` until first saved)
        name: Display name
        category_id: Reference to a ``Category``
        price: Unit price, never negative
        stock: Units on hand; may go negative when overselling is allowed
        description: Optional free text
        created_at: Timestamp of the first save
    """

    id: str | None
    name: str
    category_id: str
    price: float
    stock: int = 0
    description: str | None = None
    created_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "categoryId": self.category_id,
            "price": self.price,
            "stock": self.stock,
            "description": self.description,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Product:
        raw_id = data.get("id")
        return cls(
            id=str(raw_id) if raw_id is not None else None,
            name=str(data.get("name", "")),
            category_id=str(data.get("categoryId", "")),
            price=float(data.get("price", 0.0)),
            stock=int(data.get("stock", 0)),
            description=data.get("description") or None,
            created_at=data.get("createdAt"),
        )


@dataclass
class LineItem:
    """One product line of an order, with name and price copied at add time."""

    product_id: str
    name: str
    price: float
    quantity: int = 1

    @property
    def subtotal(self) -> float:
        return self.quantity * self.price

    def to_dict(self) -> dict[str, Any]:
        return {
            "productId": self.product_id,
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
            "subtotal": self.subtotal,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LineItem:
        return cls(
            product_id=str(data["productId"]),
            name=str(data.get("name", "")),
            price=float(data.get("price", 0.0)),
            quantity=int(data.get("quantity", 1)),
        )
