"""CreateReview: a purchaser rates a book.

The purchase check needs the user's orders, so it lives here rather than on
the aggregate. Any order line for the book qualifies, whatever the order or
payment status.
"""

from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from bookstore.account.user import require_user
from bookstore.catalogue.book import Book
from bookstore.domain import bookstore
from bookstore.order.queries import has_purchased
from bookstore.review.rating import RatingAggregator
from bookstore.review.review import Review
from bookstore.shared.errors import PurchaseRequired


@bookstore.command(part_of="Review")
class CreateReview:
    user_id = Identifier(required=True)
    book_id = Identifier(required=True)
    rating = Integer(required=True, min_value=1, max_value=5)
    comment = Text()


@bookstore.command_handler(part_of=Review)
class CreateReviewHandler:
    @handle(CreateReview)
    def create_review(self, command):
        require_user(command.user_id)
        book = current_domain.repository_for(Book).get(str(command.book_id))

        if not has_purchased(command.user_id, book.id):
            raise PurchaseRequired({"book_id": ["You must purchase the book to review it"]})

        review = Review.write(
            user_id=str(command.user_id),
            book_id=str(book.id),
            rating=command.rating,
            comment=command.comment,
        )
        current_domain.repository_for(Review).add(review)

        RatingAggregator().recompute(book.id)
        return str(review.id)
