"""Failure kinds surfaced to callers of the bookstore domain.

Missing entities are reported with Protean's ``ObjectNotFoundError``, raised
by the repositories themselves. The kinds below are deterministic,
user-actionable failures; none of them is retried.
"""

from protean.exceptions import InvalidOperationError, ValidationError


class InsufficientStock(ValidationError):
    """Requested (or combined) quantity exceeds the book's current stock."""


class EmptyCart(ValidationError):
    """An order was placed from a missing or empty cart."""


class PurchaseRequired(ValidationError):
    """A review was written for a book the user never ordered."""


class InvalidCredential(ValidationError):
    """The supplied current password does not match."""


class AccessDenied(InvalidOperationError):
    """The caller does not own the cart line, order or review."""
