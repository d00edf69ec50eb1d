"""Book aggregate (CQRS): catalogue entry carrying stock and rating.

Only two parts of a book change inside this domain:

    stock_quantity  withdrawn by orders, restored on cancellation
    rating_*        rebuilt from the review set after every review change

Both are written through aggregate methods so the non-negative stock
invariant and the rating bounds are checked on every change. Persisting a
book goes through Protean's version check, so a write based on a stale read
is rejected instead of overwriting a concurrent withdrawal.
"""

from datetime import UTC, datetime
from decimal import Decimal

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from bookstore.catalogue.events import BookRatingRecalculated, StockRestored, StockWithdrawn
from bookstore.domain import bookstore
from bookstore.shared.errors import InsufficientStock


@bookstore.aggregate
class Book:
    title = String(required=True, max_length=255)
    author = String(required=True, max_length=255)
    description = Text()
    isbn = String(max_length=20)
    category_id = Identifier()
    price = Float(required=True, min_value=0.0)
    cover_image_url = String(max_length=500)
    stock_quantity = Integer(required=True, min_value=0, default=0)
    rating_average = Float(default=0.0)
    rating_count = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock_quantity is not None and self.stock_quantity < 0:
            raise ValidationError({"stock_quantity": ["Stock cannot be negative"]})

    @invariant.post
    def rating_average_must_be_within_scale(self):
        if self.rating_count == 0 and self.rating_average != 0.0:
            raise ValidationError({"rating_average": ["A book without reviews has no rating"]})
        if self.rating_count and not (1.0 <= self.rating_average <= 5.0):
            raise ValidationError({"rating_average": ["Rating average must be between 1 and 5"]})

    @classmethod
    def create(
        cls,
        title,
        author,
        price,
        stock_quantity=0,
        description=None,
        isbn=None,
        category_id=None,
        cover_image_url=None,
    ):
        now = datetime.now(UTC)
        return cls(
            title=title,
            author=author,
            price=price,
            stock_quantity=stock_quantity,
            description=description,
            isbn=isbn,
            category_id=category_id,
            cover_image_url=cover_image_url,
            rating_average=0.0,
            rating_count=0,
            created_at=now,
            updated_at=now,
        )

    @property
    def unit_price(self) -> Decimal:
        """Price as an exact decimal, for money arithmetic."""
        return Decimal(str(self.price))

    def has_stock_for(self, quantity) -> bool:
        return self.stock_quantity >= quantity

    def withdraw_stock(self, quantity):
        """Take ``quantity`` copies off the shelf, or fail without touching stock."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        if not self.has_stock_for(quantity):
            raise InsufficientStock(
                {"quantity": [f"Not enough stock for book: {self.title} ({self.stock_quantity} available)"]}
            )

        previous = self.stock_quantity
        now = datetime.now(UTC)
        self.stock_quantity = previous - quantity
        self.updated_at = now

        self.raise_(
            StockWithdrawn(
                book_id=str(self.id),
                quantity=quantity,
                previous_stock=previous,
                new_stock=self.stock_quantity,
                withdrawn_at=now,
            )
        )

    def restore_stock(self, quantity):
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        previous = self.stock_quantity
        now = datetime.now(UTC)
        self.stock_quantity = previous + quantity
        self.updated_at = now

        self.raise_(
            StockRestored(
                book_id=str(self.id),
                quantity=quantity,
                previous_stock=previous,
                new_stock=self.stock_quantity,
                restored_at=now,
            )
        )

    def record_rating(self, average, count):
        """Overwrite the derived rating fields with freshly computed values."""
        now = datetime.now(UTC)
        with atomic_change(self):
            self.rating_count = count
            self.rating_average = average
            self.updated_at = now

        self.raise_(
            BookRatingRecalculated(
                book_id=str(self.id),
                rating_average=average,
                rating_count=count,
                recalculated_at=now,
            )
        )
