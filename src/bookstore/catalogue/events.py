"""Domain events for the Book aggregate.

Only the inventory and rating facts are modelled here; catalogue editing is
handled outside this domain.
"""

from protean.fields import DateTime, Float, Identifier, Integer

from bookstore.domain import bookstore


@bookstore.event(part_of="Book")
class StockWithdrawn:
    """Stock left the shelf for an order."""

    __version__ = 1

    book_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    withdrawn_at = DateTime(required=True)


@bookstore.event(part_of="Book")
class StockRestored:
    """Stock was put back (e.g. after a cancellation)."""

    __version__ = 1

    book_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    restored_at = DateTime(required=True)


@bookstore.event(part_of="Book")
class BookRatingRecalculated:
    """The rating aggregate was rebuilt from the book's live reviews."""

    __version__ = 1

    book_id = Identifier(required=True)
    rating_average = Float(required=True)
    rating_count = Integer(required=True)
    recalculated_at = DateTime(required=True)
