"""Order, location and persistence errors.

Raised by the session and store layers when business rules are violated or
the store cannot be read. The TUI catches these and shows the message in its
status line.
"""

from __future__ import annotations


class PosError(Exception):
    """Base class for recoverable point-of-sale failures."""


class InvalidTransition(PosError):
    """The requested status change is not an edge of the order lifecycle."""


class LocationOccupied(PosError):
    """A new order was requested for a location that already has one open."""


class PolicyViolation(PosError):
    """An order mutation broke a business rule (e.g. removing items after the kitchen ticket)."""


class NotFound(PosError):
    """An unknown product, order, category or location identifier was used."""


class PersistenceFailure(PosError):
    """The underlying key-value store failed to read or write."""
