"""DeleteAccount: remove a user and everything they own.

Cascade order: cart, orders, reviews, then the user. The books the deleted
reviews pointed at are collected first and each is re-rated once after the
reviews are gone.
"""

import structlog
from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from bookstore.account.user import User, require_user
from bookstore.cart.cart import Cart
from bookstore.cart.store import find_cart
from bookstore.domain import bookstore
from bookstore.order.order import Order, OrderLine
from bookstore.order.queries import user_orders
from bookstore.review.rating import RatingAggregator
from bookstore.review.queries import reviews_by_user
from bookstore.review.review import Review

logger = structlog.get_logger(__name__)


@bookstore.command(part_of="User")
class DeleteAccount:
    user_id = Identifier(required=True)


@bookstore.command_handler(part_of=User)
class DeleteAccountHandler:
    @handle(DeleteAccount)
    def delete_account(self, command):
        user = require_user(command.user_id)

        cart = find_cart(user.id)
        if cart is not None:
            carts = current_domain.repository_for(Cart)
            # Drop the lines first so no orphaned line outlives its cart
            cart.clear()
            carts.add(cart)
            carts._dao.delete(cart)

        orders = current_domain.repository_for(Order)
        order_lines = current_domain.repository_for(OrderLine)
        deleted_orders = user_orders(user.id)
        for order in deleted_orders:
            # Lines first, so none outlives its order
            for line in order.items:
                order_lines._dao.delete(line)
            orders._dao.delete(order)

        reviews = current_domain.repository_for(Review)
        user_reviews = reviews_by_user(user.id)
        affected_books = {str(review.book_id) for review in user_reviews}
        for review in user_reviews:
            reviews._dao.delete(review)

        RatingAggregator().recompute_all(affected_books)

        current_domain.repository_for(User)._dao.delete(user)

        logger.info(
            "account_deleted",
            user_id=str(user.id),
            orders_deleted=len(deleted_orders),
            reviews_deleted=len(user_reviews),
            books_rerated=len(affected_books),
        )
