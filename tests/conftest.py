import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the configuration overlay before the domain module is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)


@pytest.fixture(scope="session")
def bookstore_bed():
    from bookstore.domain import bookstore

    bed = DomainFixture(bookstore)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(scope="session", autouse=True)
def setup_db(bookstore_bed):
    from bookstore.domain import bookstore
    from bookstore.utils.db import drop_db, setup_db

    setup_db(bookstore)

    yield

    drop_db(bookstore)


@pytest.fixture(autouse=True)
def _ctx(bookstore_bed):
    """Push the domain context for each test and wipe all data afterwards."""
    with bookstore_bed.domain_context():
        yield

        from protean import current_domain

        from bookstore.payment import reset_simulator

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        for _, broker in current_domain.brokers.items():
            broker._data_reset()

        current_domain.event_store.store._data_reset()
        reset_simulator()


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_user():
    """Register a customer through the command and return the user id."""
    from protean import current_domain

    from bookstore.account.registration import RegisterUser

    counter = {"n": 0}

    def _make(email=None, password="s3cret-pass", first_name="Ada", last_name="Reader"):
        counter["n"] += 1
        email = email or f"reader{counter['n']}@example.com"
        return current_domain.process(
            RegisterUser(
                email=email,
                password=password,
                confirm_password=password,
                first_name=first_name,
                last_name=last_name,
            ),
            asynchronous=False,
        )

    return _make


@pytest.fixture()
def user_id(make_user):
    return make_user()


@pytest.fixture()
def make_book():
    """Persist a book and return its id."""
    from protean import current_domain

    from bookstore.catalogue.book import Book

    def _make(title="Dune", author="Frank Herbert", price=10.0, stock_quantity=100, **extra):
        book = Book.create(title=title, author=author, price=price, stock_quantity=stock_quantity, **extra)
        current_domain.repository_for(Book).add(book)
        return str(book.id)

    return _make


@pytest.fixture()
def book_id(make_book):
    return make_book()


@pytest.fixture()
def payment_approves():
    from bookstore.payment import set_simulator
    from bookstore.payment.simulator import PaymentSimulator

    set_simulator(PaymentSimulator(failure_rate=0.0))


@pytest.fixture()
def payment_declines():
    from bookstore.payment import set_simulator
    from bookstore.payment.simulator import PaymentSimulator

    set_simulator(PaymentSimulator(failure_rate=1.0))


SHIPPING_ADDRESS = (
    '{"line1": "1 Library Lane", "line2": null, "city": "Springfield", "postcode": "12345", "country": "US"}'
)


@pytest.fixture()
def shipping_address():
    return SHIPPING_ADDRESS
