"""Shared BDD fixtures and step definitions for order placement."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then

from bookstore.cart.items import AddToCart
from bookstore.catalogue.book import Book
from bookstore.payment import set_simulator
from bookstore.payment.simulator import PaymentSimulator


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def books():
    """Title to book id, for the books created by the scenario."""
    return {}


@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a registered customer", target_fixture="customer_id")
def registered_customer(make_user):
    return make_user()


@given(parsers.cfparse('a book "{title}" priced {price:f} with {stock:d} copies in stock'))
def book_in_stock(make_book, books, title, price, stock):
    books[title] = make_book(title=title, price=price, stock_quantity=stock)


@given("the payment provider approves payments")
def payments_approved():
    set_simulator(PaymentSimulator(failure_rate=0.0))


@given("the payment provider declines payments")
def payments_declined():
    set_simulator(PaymentSimulator(failure_rate=1.0))


@given(parsers.cfparse('the customer has {quantity:d} copies of "{title}" in the cart'))
def cart_holds(customer_id, books, quantity, title):
    current_domain.process(
        AddToCart(user_id=customer_id, book_id=books[title], quantity=quantity),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{title}" has {stock:d} copies in stock'))
def stock_is(books, title, stock):
    assert current_domain.repository_for(Book).get(books[title]).stock_quantity == stock
