"""UpdateReview: the author changes rating and comment."""

from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from bookstore.domain import bookstore
from bookstore.review.rating import RatingAggregator
from bookstore.review.review import Review


@bookstore.command(part_of="Review")
class UpdateReview:
    user_id = Identifier(required=True)  # Must match the author
    review_id = Identifier(required=True)
    rating = Integer(required=True, min_value=1, max_value=5)
    comment = Text()


@bookstore.command_handler(part_of=Review)
class UpdateReviewHandler:
    @handle(UpdateReview)
    def update_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(str(command.review_id))
        review.assert_written_by(command.user_id)

        review.edit(rating=command.rating, comment=command.comment)
        repo.add(review)

        RatingAggregator().recompute(review.book_id)
