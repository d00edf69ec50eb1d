"""PlaceOrder: convert a user's cart into an order.

The whole placement runs in the command's Unit of Work:

    1. reserve stock for every cart line (InsufficientStock aborts)
    2. snapshot each book into an order line and total the subtotals
    3. ask the payment simulator for an outcome
    4. PAID + reference on success; PENDING + FAILED payment otherwise
    5. persist the withdrawn books and the order
    6. clear the cart, whatever the payment outcome

Stock is reserved on loaded aggregates and only written once every line
passed, so an InsufficientStock on any line leaves all books and the cart
exactly as they were. A declined payment keeps the order, the stock
withdrawal and the cleared cart.
"""

import json

import structlog
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from bookstore.account.user import require_user
from bookstore.cart.cart import Cart
from bookstore.cart.store import find_cart
from bookstore.domain import bookstore
from bookstore.inventory.ledger import InventoryLedger, StockRequest
from bookstore.order.order import Order
from bookstore.payment import get_simulator
from bookstore.payment.simulator import new_payment_reference
from bookstore.shared.errors import EmptyCart
from bookstore.utils.logging import request_context

logger = structlog.get_logger(__name__)


@bookstore.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    shipping_address = Text(required=True)  # JSON: {line1, line2, city, postcode, country}
    payment_provider = String(max_length=50)


@bookstore.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        with request_context(user_id=str(command.user_id)):
            return self._place(command)

    def _place(self, command):
        require_user(command.user_id)

        cart = find_cart(command.user_id)
        if cart is None or cart.is_empty():
            raise EmptyCart({"cart": ["Cart is empty"]})

        shipping_address = (
            json.loads(command.shipping_address)
            if isinstance(command.shipping_address, str)
            else command.shipping_address
        )

        cart_lines = list(cart.items)
        ledger = InventoryLedger()
        books = ledger.reserve(
            [StockRequest(book_id=str(line.book_id), quantity=line.quantity) for line in cart_lines]
        )

        order = Order.place(
            user_id=str(command.user_id),
            lines=[
                {
                    "book_id": str(book.id),
                    "title": book.title,
                    "cover_url": book.cover_image_url,
                    "unit_price": book.unit_price,
                    "quantity": line.quantity,
                }
                for line, book in zip(cart_lines, books, strict=True)
            ],
            shipping_address=shipping_address,
            payment_provider=command.payment_provider,
        )

        succeeded = get_simulator().attempt()
        order.record_payment(succeeded, reference=new_payment_reference() if succeeded else None)

        ledger.commit(books)
        current_domain.repository_for(Order).add(order)

        cart.clear()
        current_domain.repository_for(Cart).add(cart)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            total_amount=str(order.total_amount),
            status=order.status,
            payment_status=order.payment_status,
        )
        return str(order.id)
