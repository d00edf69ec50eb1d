"""Rating aggregation: rebuilds a book's rating from its live reviews.

Every review mutation calls ``recompute`` inside the same Unit of Work, so
the book's ``rating_average``/``rating_count`` are always derived from the
review set as it stands after the change. Each recompute is a full rescan of
the book's reviews.
"""

import structlog
from protean.utils.globals import current_domain

from bookstore.catalogue.book import Book
from bookstore.review.review import Review
from bookstore.shared.queries import fetch_all

logger = structlog.get_logger(__name__)


def reviews_of(book_id) -> list[Review]:
    query = current_domain.repository_for(Review)._dao.query.filter(book_id=str(book_id))
    return fetch_all(query)


def rating_of(ratings) -> tuple[float, int]:
    """(average, count) for a list of integer ratings; (0.0, 0) when empty."""
    count = len(ratings)
    if count == 0:
        return 0.0, 0
    return sum(ratings) / count, count


class RatingAggregator:
    def recompute(self, book_id) -> Book:
        repo = current_domain.repository_for(Book)
        book = repo.get(str(book_id))

        average, count = rating_of([review.rating for review in reviews_of(book_id)])
        book.record_rating(average, count)
        repo.add(book)

        logger.debug("book_rating_recalculated", book_id=str(book_id), rating_average=average, rating_count=count)
        return book

    def recompute_all(self, book_ids) -> None:
        """Recompute each distinct book once, however often it appears."""
        for book_id in dict.fromkeys(str(book_id) for book_id in book_ids):
            self.recompute(book_id)
