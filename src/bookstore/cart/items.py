"""Cart item management: commands and handler.

Every mutation checks the requested quantity against the book's live stock;
nothing is reserved until the order is placed.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from bookstore.cart.cart import Cart
from bookstore.cart.store import ensure_line_exists, get_or_create
from bookstore.catalogue.book import Book
from bookstore.domain import bookstore

logger = structlog.get_logger(__name__)


@bookstore.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    book_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@bookstore.command(part_of="Cart")
class UpdateCartLine:
    """Replace a line's quantity. Zero or a negative quantity removes the line."""

    user_id = Identifier(required=True)
    line_id = Identifier(required=True)
    quantity = Integer(required=True)


@bookstore.command(part_of="Cart")
class RemoveCartLine:
    user_id = Identifier(required=True)
    line_id = Identifier(required=True)


@bookstore.command(part_of="Cart")
class ClearCart:
    user_id = Identifier(required=True)


def _owned_cart_line(cart, line_id):
    if cart.line_for_id(line_id) is None:
        ensure_line_exists(line_id)
    return cart.owned_line(line_id)


@bookstore.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        cart = get_or_create(command.user_id)
        book = current_domain.repository_for(Book).get(str(command.book_id))

        line = cart.add_item(
            book_id=str(book.id),
            quantity=command.quantity,
            available=book.stock_quantity,
        )
        current_domain.repository_for(Cart).add(cart)

        logger.info("cart_item_added", cart_id=str(cart.id), book_id=str(book.id), line_quantity=line.quantity)
        return str(cart.id)

    @handle(UpdateCartLine)
    def update_cart_line(self, command):
        cart = get_or_create(command.user_id)
        line = _owned_cart_line(cart, command.line_id)

        available = current_domain.repository_for(Book).get(str(line.book_id)).stock_quantity
        cart.update_item_quantity(command.line_id, command.quantity, available=available)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(RemoveCartLine)
    def remove_cart_line(self, command):
        cart = get_or_create(command.user_id)
        _owned_cart_line(cart, command.line_id)

        cart.remove_item(command.line_id)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = get_or_create(command.user_id)
        cart.clear()
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)
