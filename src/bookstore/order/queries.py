"""Read-side order lookups: a user's history, one order, the admin listing."""

from protean.utils.globals import current_domain

from bookstore.account.user import require_user
from bookstore.order.order import Order
from bookstore.shared.errors import AccessDenied
from bookstore.shared.queries import fetch_all, fetch_page


def _orders():
    return current_domain.repository_for(Order)._dao.query


def orders_for_user(user_id, page=0, page_size=20) -> list[Order]:
    """The user's orders, newest first."""
    require_user(user_id)
    return fetch_page(_orders().filter(user_id=str(user_id)), page, page_size)


def order_for_user(user_id, order_id) -> Order:
    order = current_domain.repository_for(Order).get(str(order_id))
    if not order.is_owned_by(user_id):
        raise AccessDenied({"order_id": ["Order belongs to another user"]})
    return order


def all_orders(page=0, page_size=20) -> list[Order]:
    return fetch_page(_orders(), page, page_size)


def user_orders(user_id) -> list[Order]:
    return fetch_all(_orders().filter(user_id=str(user_id)))


def has_purchased(user_id, book_id) -> bool:
    """True when any order of the user has a line for ``book_id``.

    Order and payment status are not considered: a Pending order with a
    failed payment counts as a purchase.
    """
    return any(order.includes_book(book_id) for order in user_orders(user_id))
