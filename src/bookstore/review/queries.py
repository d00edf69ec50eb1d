"""Read-side review lookups."""

from protean.utils.globals import current_domain

from bookstore.catalogue.book import Book
from bookstore.review.review import Review
from bookstore.shared.queries import fetch_all, fetch_page


def reviews_for_book(book_id, page=0, page_size=20) -> list[Review]:
    """A page of the book's reviews, newest first."""
    current_domain.repository_for(Book).get(str(book_id))
    query = current_domain.repository_for(Review)._dao.query.filter(book_id=str(book_id))
    return fetch_page(query, page, page_size)


def reviews_by_user(user_id) -> list[Review]:
    return fetch_all(current_domain.repository_for(Review)._dao.query.filter(user_id=str(user_id)))
