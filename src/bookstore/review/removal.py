"""DeleteReview: the author deletes a review; the book's rating follows."""

from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from bookstore.domain import bookstore
from bookstore.review.rating import RatingAggregator
from bookstore.review.review import Review


@bookstore.command(part_of="Review")
class DeleteReview:
    user_id = Identifier(required=True)
    review_id = Identifier(required=True)


@bookstore.command_handler(part_of=Review)
class DeleteReviewHandler:
    @handle(DeleteReview)
    def delete_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(str(command.review_id))
        review.assert_written_by(command.user_id)

        book_id = str(review.book_id)
        repo._dao.delete(review)

        RatingAggregator().recompute(book_id)
