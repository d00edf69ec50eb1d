"""Domain events for the Cart aggregate."""

from protean.fields import DateTime, Identifier, Integer

from bookstore.domain import bookstore


@bookstore.event(part_of="Cart")
class CartItemAdded:
    """A book was put in the cart, or an existing line was topped up."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    book_id = Identifier(required=True)
    quantity_added = Integer(required=True)
    line_quantity = Integer(required=True)


@bookstore.event(part_of="Cart")
class CartItemQuantityUpdated:
    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@bookstore.event(part_of="Cart")
class CartItemRemoved:
    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    book_id = Identifier(required=True)


@bookstore.event(part_of="Cart")
class CartCleared:
    """Every line was removed, by the user or after an order was placed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    lines_removed = Integer(required=True)
    cleared_at = DateTime(required=True)
