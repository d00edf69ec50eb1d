"""Cart aggregate (CQRS): one per user, created lazily on first access.

The aggregate only knows lines and quantities. Stock limits come from the
caller as ``available``, the book's live stock at the time of the call.
A cart never reserves stock.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from bookstore.cart.events import CartCleared, CartItemAdded, CartItemQuantityUpdated, CartItemRemoved
from bookstore.domain import bookstore
from bookstore.shared.errors import AccessDenied, InsufficientStock


@bookstore.entity(part_of="Cart")
class CartLine:
    book_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@bookstore.aggregate
class Cart:
    user_id = Identifier(required=True)
    items = HasMany(CartLine)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def one_line_per_book(self):
        book_ids = [str(line.book_id) for line in self.items]
        if len(book_ids) != len(set(book_ids)):
            raise ValidationError({"items": ["A book can appear only once in a cart"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(user_id=user_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------
    def line_for_book(self, book_id):
        return next((line for line in self.items if str(line.book_id) == str(book_id)), None)

    def line_for_id(self, line_id):
        return next((line for line in self.items if str(line.id) == str(line_id)), None)

    def owned_line(self, line_id):
        """Return the line with ``line_id`` or raise AccessDenied if it is not in this cart."""
        line = self.line_for_id(line_id)
        if line is None:
            raise AccessDenied({"line_id": ["Cart line does not belong to this cart"]})
        return line

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, book_id, quantity, available):
        """Add ``quantity`` copies of a book, merging with an existing line.

        The merged quantity is checked against ``available`` before anything
        changes, so a rejected call leaves the cart as it was.
        """
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        existing = self.line_for_book(book_id)
        new_quantity = quantity + (existing.quantity if existing else 0)
        if new_quantity > available:
            raise InsufficientStock({"quantity": [f"Not enough stock: {available} available, {new_quantity} requested"]})

        now = datetime.now(UTC)
        if existing:
            existing.quantity = new_quantity
            line = existing
        else:
            line = CartLine(book_id=book_id, quantity=quantity, added_at=now)
            self.add_items(line)
        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                line_id=str(line.id),
                book_id=str(book_id),
                quantity_added=quantity,
                line_quantity=new_quantity,
            )
        )
        return line

    def update_item_quantity(self, line_id, quantity, available):
        """Replace a line's quantity; zero or less removes the line."""
        line = self.owned_line(line_id)
        if quantity <= 0:
            self.remove_item(line_id)
            return

        if quantity > available:
            raise InsufficientStock({"quantity": [f"Not enough stock: {available} available, {quantity} requested"]})

        previous = line.quantity
        line.quantity = quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemQuantityUpdated(
                cart_id=str(self.id),
                line_id=str(line.id),
                previous_quantity=previous,
                new_quantity=quantity,
            )
        )

    def remove_item(self, line_id):
        line = self.owned_line(line_id)
        book_id = str(line.book_id)

        self.remove_items(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                line_id=str(line_id),
                book_id=book_id,
            )
        )

    def clear(self):
        lines = list(self.items)
        for line in lines:
            self.remove_items(line)

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                lines_removed=len(lines),
                cleared_at=now,
            )
        )

    def is_empty(self) -> bool:
        return not self.items
