"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from bookstore.domain import bookstore


@bookstore.event(part_of="Order")
class OrderPlaced:
    """A cart was converted into an order; stock has already been withdrawn."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    total_amount = String(required=True, max_length=20)
    line_count = Integer(required=True)
    payment_provider = String()
    placed_at = DateTime(required=True)


@bookstore.event(part_of="Order")
class OrderPaymentSucceeded:
    __version__ = 1

    order_id = Identifier(required=True)
    payment_reference = String(required=True)
    amount = String(required=True, max_length=20)


@bookstore.event(part_of="Order")
class OrderPaymentFailed:
    """The simulated payment was declined; the order stays Pending."""

    __version__ = 1

    order_id = Identifier(required=True)
    amount = String(required=True, max_length=20)


@bookstore.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)
