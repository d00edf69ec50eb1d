"""BDD tests for placing an order."""

from decimal import Decimal

from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, scenarios, then, when

from bookstore.cart.store import find_cart
from bookstore.catalogue.book import Book
from bookstore.order.order import Order
from bookstore.order.placement import PlaceOrder
from bookstore.shared.errors import EmptyCart, InsufficientStock

scenarios("features/order_placement.feature")


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('{quantity:d} copies of "{title}" are sold elsewhere'))
def sold_elsewhere(books, quantity, title):
    repo = current_domain.repository_for(Book)
    book = repo.get(books[title])
    book.withdraw_stock(quantity)
    repo.add(book)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
def _place(customer_id, shipping_address):
    return current_domain.process(
        PlaceOrder(user_id=customer_id, shipping_address=shipping_address, payment_provider="card"),
        asynchronous=False,
    )


@when("the customer places the order", target_fixture="order")
def place_order(customer_id, shipping_address):
    return current_domain.repository_for(Order).get(_place(customer_id, shipping_address))


@when("the customer tries to place the order")
def try_place_order(customer_id, shipping_address, error):
    try:
        _place(customer_id, shipping_address)
    except ValidationError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the order total is {total}"))
def order_total_is(order, total):
    assert order.total_amount == Decimal(total)


@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order, status):
    assert order.status == status


@then(parsers.cfparse('the payment status is "{status}"'))
def payment_status_is(order, status):
    assert order.payment_status == status


@then("the order has no payment reference")
def no_payment_reference(order):
    assert order.payment_reference is None


@then("the customer's cart is empty")
def cart_is_empty(customer_id):
    assert find_cart(customer_id).is_empty()


@then(parsers.cfparse('the customer\'s cart still holds {quantity:d} copies of "{title}"'))
def cart_still_holds(customer_id, books, quantity, title):
    line = find_cart(customer_id).line_for_book(books[title])
    assert line.quantity == quantity


@then("the order is rejected for insufficient stock")
def rejected_for_stock(error):
    assert isinstance(error["exc"], InsufficientStock)


@then("the order is rejected because the cart is empty")
def rejected_for_empty_cart(error):
    assert isinstance(error["exc"], EmptyCart)
