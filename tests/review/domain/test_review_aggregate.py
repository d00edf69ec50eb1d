"""Tests for the Review aggregate and the rating arithmetic."""

import pytest
from protean.exceptions import ValidationError

from bookstore.review.events import ReviewEdited, ReviewWritten
from bookstore.review.rating import rating_of
from bookstore.review.review import Review
from bookstore.shared.errors import AccessDenied


def _review(**overrides):
    defaults = {"user_id": "user-1", "book_id": "book-1", "rating": 4, "comment": "Loved it"}
    defaults.update(overrides)
    return Review.write(**defaults)


class TestWrite:
    def test_write_raises_review_written(self):
        review = _review()
        event = review._events[-1]
        assert isinstance(event, ReviewWritten)
        assert event.rating == 4

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_outside_scale(self, rating):
        with pytest.raises(ValidationError):
            _review(rating=rating)

    def test_comment_is_optional(self):
        assert _review(comment=None).comment is None


class TestEdit:
    def test_edit_replaces_rating_and_comment(self):
        review = _review()
        review.edit(rating=2, comment="Second read was worse")

        assert review.rating == 2
        assert review.comment == "Second read was worse"
        event = review._events[-1]
        assert isinstance(event, ReviewEdited)
        assert event.previous_rating == 4

    def test_edit_rejects_bad_rating(self):
        with pytest.raises(ValidationError):
            _review().edit(rating=9, comment=None)


class TestAuthorship:
    def test_author_passes(self):
        _review().assert_written_by("user-1")

    def test_anyone_else_is_denied(self):
        with pytest.raises(AccessDenied):
            _review().assert_written_by("user-2")


class TestRatingOf:
    def test_empty(self):
        assert rating_of([]) == (0.0, 0)

    def test_average_and_count(self):
        assert rating_of([5, 3, 4]) == (4.0, 3)

    def test_fractional_average(self):
        assert rating_of([5, 4]) == (4.5, 2)
