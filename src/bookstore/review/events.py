"""Domain events for the Review aggregate."""

from protean.fields import DateTime, Identifier, Integer

from bookstore.domain import bookstore


@bookstore.event(part_of="Review")
class ReviewWritten:
    __version__ = 1

    review_id = Identifier(required=True)
    user_id = Identifier(required=True)
    book_id = Identifier(required=True)
    rating = Integer(required=True)
    written_at = DateTime(required=True)


@bookstore.event(part_of="Review")
class ReviewEdited:
    __version__ = 1

    review_id = Identifier(required=True)
    book_id = Identifier(required=True)
    previous_rating = Integer(required=True)
    new_rating = Integer(required=True)
    edited_at = DateTime(required=True)
