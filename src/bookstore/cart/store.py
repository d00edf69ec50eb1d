"""Cart lookups and the read-side cart summary.

A user's cart is created the first time anything asks for it. The summary
is rebuilt from live book data on every read; totals are never stored.
"""

from dataclasses import dataclass
from decimal import Decimal

from protean.exceptions import InvalidOperationError
from protean.utils.globals import current_domain

from bookstore.account.user import require_user
from bookstore.cart.cart import Cart, CartLine
from bookstore.catalogue.book import Book


@dataclass(frozen=True)
class CartLineView:
    id: str
    book_id: str
    title: str
    cover_image_url: str | None
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


@dataclass(frozen=True)
class CartSummary:
    id: str
    user_id: str
    items: tuple[CartLineView, ...]
    total_amount: Decimal


def find_cart(user_id) -> Cart | None:
    """Return the user's cart without creating one.

    Two concurrent first accesses through ``get_or_create`` can each create a
    cart. A second cart is never picked silently: it raises
    InvalidOperationError.
    """
    repo = current_domain.repository_for(Cart)
    carts = repo._dao.query.filter(user_id=str(user_id)).all().items
    if not carts:
        return None
    if len(carts) > 1:
        raise InvalidOperationError({"cart": [f"User {user_id} has {len(carts)} carts"]})
    return repo.get(carts[0].id)


def get_or_create(user_id) -> Cart:
    """Return the user's cart, creating an empty one on first access."""
    require_user(user_id)

    cart = find_cart(user_id)
    if cart is None:
        cart = Cart.create(user_id=str(user_id))
        current_domain.repository_for(Cart).add(cart)
    return cart


def ensure_line_exists(line_id) -> None:
    """Raise ObjectNotFoundError when no cart at all holds ``line_id``."""
    current_domain.repository_for(CartLine)._dao.get(str(line_id))


def summarize(cart: Cart) -> CartSummary:
    books = current_domain.repository_for(Book)

    lines = []
    for line in cart.items:
        book = books.get(str(line.book_id))
        lines.append(
            CartLineView(
                id=str(line.id),
                book_id=str(line.book_id),
                title=book.title,
                cover_image_url=book.cover_image_url,
                quantity=line.quantity,
                unit_price=book.unit_price,
                subtotal=book.unit_price * line.quantity,
            )
        )

    return CartSummary(
        id=str(cart.id),
        user_id=str(cart.user_id),
        items=tuple(lines),
        total_amount=sum((line.subtotal for line in lines), Decimal("0")),
    )


def cart_summary(user_id) -> CartSummary:
    return summarize(get_or_create(user_id))
