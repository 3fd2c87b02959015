"""Occupancy view over the order set."""

from __future__ import annotations

from typing import Iterable

from restopos.config import MAX_LOCATIONS
from restopos.models import ACTIVE_STATUSES, LocationId, all_locations
from restopos.orders import Order


class LocationRegistry:
    """Tracks which locations currently hold a non-terminal order.

    Nothing here is persisted: ``rebuild`` recomputes the set from orders
    after every reload, and the session adjusts it incrementally afterward.
    """

    def __init__(self) -> None:
        self._occupied: set[LocationId] = set()

    @property
    def occupied(self) -> frozenset[LocationId]:
        return frozenset(self._occupied)

    def is_occupied(self, location: LocationId) -> bool:
        return location in self._occupied

    def mark_occupied(self, location: LocationId) -> None:
        self._occupied.add(location)

    def mark_free(self, location: LocationId) -> None:
        self._occupied.discard(location)

    def rebuild(self, orders: Iterable[Order]) -> frozenset[LocationId]:
        self._occupied = {
            order.location
            for order in orders
            if order.location is not None and order.status in ACTIVE_STATUSES
        }
        return self.occupied

    def free_locations(self, kind: str, max_locations: int = MAX_LOCATIONS) -> list[LocationId]:
        return [loc for loc in all_locations(kind, max_locations) if loc not in self._occupied]
