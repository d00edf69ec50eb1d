"""Inventory ledger: the only writer of a book's stock count.

Two ways in:

* ``check_and_decrement`` / ``restore`` change one book and persist it
  straight away.
* ``reserve`` / ``commit`` split the same work in two phases for multi-line
  orders: every line is checked and withdrawn on the loaded aggregates
  first, and nothing is written until all of them passed.

Each persisted write is version-guarded by the repository. A withdrawal
computed from a stale copy of the book fails with ``ExpectedVersionError``
when it is saved, so two callers cannot both succeed against the same
pre-check stock.
"""

from dataclasses import dataclass

import structlog
from protean.utils.globals import current_domain

from bookstore.catalogue.book import Book

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StockRequest:
    book_id: str
    quantity: int


class InventoryLedger:
    def _books(self):
        return current_domain.repository_for(Book)

    def available(self, book_id) -> int:
        return self._books().get(str(book_id)).stock_quantity

    def check_and_decrement(self, book_id, quantity) -> Book:
        """Withdraw ``quantity`` copies or raise ``InsufficientStock``."""
        repo = self._books()
        book = repo.get(str(book_id))
        book.withdraw_stock(quantity)
        repo.add(book)

        logger.info("stock_withdrawn", book_id=str(book_id), quantity=quantity, remaining=book.stock_quantity)
        return book

    def restore(self, book_id, quantity) -> Book:
        repo = self._books()
        book = repo.get(str(book_id))
        book.restore_stock(quantity)
        repo.add(book)

        logger.info("stock_restored", book_id=str(book_id), quantity=quantity, remaining=book.stock_quantity)
        return book

    def reserve(self, requests) -> list[Book]:
        """Withdraw stock for every request on in-memory copies.

        Fails on the first request that cannot be satisfied; since nothing
        has been written yet, a failure leaves every book untouched.
        """
        repo = self._books()
        reserved = []
        for request in requests:
            book = repo.get(str(request.book_id))
            book.withdraw_stock(request.quantity)
            reserved.append(book)
        return reserved

    def commit(self, books) -> None:
        repo = self._books()
        for book in books:
            repo.add(book)
