"""Review aggregate (CQRS): one user's rating and comment for one book.

Reviews are written by purchasers only (checked by the submission handler)
and can be edited or deleted by their author. Several reviews by the same
user for the same book are allowed.
"""

from datetime import UTC, datetime

from protean import atomic_change
from protean.fields import DateTime, Identifier, Integer, Text

from bookstore.domain import bookstore
from bookstore.review.events import ReviewEdited, ReviewWritten
from bookstore.shared.errors import AccessDenied


@bookstore.aggregate
class Review:
    user_id = Identifier(required=True)
    book_id = Identifier(required=True)
    rating = Integer(required=True, min_value=1, max_value=5)
    comment = Text()
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def write(cls, user_id, book_id, rating, comment=None):
        now = datetime.now(UTC)
        review = cls(
            user_id=user_id,
            book_id=book_id,
            rating=rating,
            comment=comment,
            created_at=now,
            updated_at=now,
        )
        review.raise_(
            ReviewWritten(
                review_id=str(review.id),
                user_id=str(user_id),
                book_id=str(book_id),
                rating=rating,
                written_at=now,
            )
        )
        return review

    def assert_written_by(self, user_id):
        if str(self.user_id) != str(user_id):
            raise AccessDenied({"review_id": ["Only the review author can change this review"]})

    def edit(self, rating, comment):
        previous_rating = self.rating
        now = datetime.now(UTC)
        with atomic_change(self):
            self.rating = rating
            self.comment = comment
            self.updated_at = now

        self.raise_(
            ReviewEdited(
                review_id=str(self.id),
                book_id=str(self.book_id),
                previous_rating=previous_rating,
                new_rating=rating,
                edited_at=now,
            )
        )
