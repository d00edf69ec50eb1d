"""Order aggregate (CQRS): the durable result of a placed cart.

Order lines are snapshots of the book at placement time (title, cover,
price). They are never edited afterwards, so later catalogue changes do not
rewrite order history. Money is stored in whole cents; ``unit_price``,
``subtotal`` and ``total_amount`` are exact ``Decimal`` views of those counts.

Status values:
    PENDING -> PAID -> SHIPPED -> DELIVERED, or PENDING/PAID -> CANCELLED

Placement only ever produces PENDING (payment failed) or PAID. Later moves
are made by an administrator through ``change_status``, which accepts any
target status.
"""

from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, ValueObject

from bookstore.domain import bookstore
from bookstore.order.events import OrderPaymentFailed, OrderPaymentSucceeded, OrderPlaced, OrderStatusChanged

CENTS = Decimal("0.01")


class OrderStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class PaymentStatus(Enum):
    PENDING = "Pending"
    SUCCESS = "Success"
    FAILED = "Failed"


def to_decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def to_cents(amount) -> int:
    """Whole cents for a money amount, rounding half up."""
    return int((to_decimal(amount) / CENTS).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents) -> Decimal:
    return (Decimal(cents or 0) * CENTS).quantize(CENTS)


def parse_status(value) -> OrderStatus:
    """Accept an OrderStatus, its value ("Paid") or its name ("PAID")."""
    if isinstance(value, OrderStatus):
        return value
    by_name = OrderStatus.__members__.get(str(value).upper())
    if by_name is not None:
        return by_name
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError({"status": [f"Unknown order status: {value}"]}) from None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@bookstore.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships, captured once at placement."""

    line1 = String(required=True, max_length=255)
    line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    postcode = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@bookstore.entity(part_of="Order")
class OrderLine:
    book_id = Identifier(required=True)
    title = String(required=True, max_length=255)
    cover_url = String(max_length=500)
    unit_price_cents = Integer(required=True, min_value=0)
    quantity = Integer(required=True, min_value=1)
    subtotal_cents = Integer(required=True, min_value=0)

    @property
    def unit_price(self) -> Decimal:
        return from_cents(self.unit_price_cents)

    @property
    def subtotal(self) -> Decimal:
        return from_cents(self.subtotal_cents)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@bookstore.aggregate
class Order:
    user_id = Identifier(required=True)
    items = HasMany(OrderLine)
    total_cents = Integer(required=True, min_value=0, default=0)  # money is kept in whole cents
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_provider = String(max_length=50)
    payment_reference = String(max_length=100)
    shipping_address = ValueObject(ShippingAddress)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_equal_sum_of_subtotals(self):
        if sum(line.subtotal_cents for line in self.items) != self.total_cents:
            raise ValidationError({"total_cents": ["Order total must equal the sum of its line subtotals"]})

    @invariant.post
    def payment_reference_only_on_success(self):
        if self.payment_reference and self.payment_status != PaymentStatus.SUCCESS.value:
            raise ValidationError({"payment_reference": ["Only successful payments carry a reference"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, user_id, lines, shipping_address, payment_provider=None):
        """Create a Pending order from line snapshots.

        Args:
            user_id: The ordering user.
            lines: Iterable of dicts with book_id, title, cover_url,
                unit_price (Decimal) and quantity.
            shipping_address: Dict with line1, line2, city, postcode, country.
            payment_provider: Free-form provider name chosen by the user.
        """
        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            total_cents=0,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            payment_provider=payment_provider,
            shipping_address=ShippingAddress(**shipping_address),
            created_at=now,
            updated_at=now,
        )

        total_cents = 0
        with atomic_change(order):
            for line in lines:
                unit_price_cents = to_cents(line["unit_price"])
                subtotal_cents = unit_price_cents * line["quantity"]
                total_cents += subtotal_cents
                order.add_items(
                    OrderLine(
                        book_id=str(line["book_id"]),
                        title=line["title"],
                        cover_url=line.get("cover_url"),
                        unit_price_cents=unit_price_cents,
                        quantity=line["quantity"],
                        subtotal_cents=subtotal_cents,
                    )
                )
            order.total_cents = total_cents

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                total_amount=str(order.total_amount),
                line_count=len(order.items),
                payment_provider=payment_provider,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def total_amount(self) -> Decimal:
        return from_cents(self.total_cents)

    def is_owned_by(self, user_id) -> bool:
        return str(self.user_id) == str(user_id)

    def includes_book(self, book_id) -> bool:
        return any(str(line.book_id) == str(book_id) for line in self.items)

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def record_payment(self, succeeded, reference=None):
        """Apply the payment outcome.

        A declined payment is not an error: the order stays Pending with a
        Failed payment status.
        """
        now = datetime.now(UTC)
        if succeeded:
            if not reference:
                raise ValidationError({"payment_reference": ["A successful payment needs a reference"]})
            with atomic_change(self):
                self.status = OrderStatus.PAID.value
                self.payment_status = PaymentStatus.SUCCESS.value
                self.payment_reference = reference
                self.updated_at = now
            self.raise_(
                OrderPaymentSucceeded(
                    order_id=str(self.id),
                    payment_reference=reference,
                    amount=str(self.total_amount),
                )
            )
        else:
            with atomic_change(self):
                self.status = OrderStatus.PENDING.value
                self.payment_status = PaymentStatus.FAILED.value
                self.updated_at = now
            self.raise_(OrderPaymentFailed(order_id=str(self.id), amount=str(self.total_amount)))

    # -------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------
    def change_status(self, new_status):
        """Set any status. No transition rules are applied."""
        target = parse_status(new_status)
        previous = self.status
        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous,
                new_status=target.value,
                changed_at=now,
            )
        )
