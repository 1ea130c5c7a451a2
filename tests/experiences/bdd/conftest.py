"""Shared BDD fixtures and step definitions for the Experiences domain."""

import pytest
from experiences.exceptions import InvalidStateError
from experiences.review.events import (
    ReviewApproved,
    ReviewDeleted,
    ReviewEdited,
    ReviewHeldForModeration,
    ReviewRejected,
    ReviewSubmitted,
)
from experiences.review.review import Review
from pytest_bdd import given, parsers, then

_REVIEW_EVENT_CLASSES = {
    "ReviewSubmitted": ReviewSubmitted,
    "ReviewEdited": ReviewEdited,
    "ReviewHeldForModeration": ReviewHeldForModeration,
    "ReviewApproved": ReviewApproved,
    "ReviewRejected": ReviewRejected,
    "ReviewDeleted": ReviewDeleted,
}


@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


def _pending_review(author_id=None):
    review = Review.submit(
        interview_id="int-bdd",
        rating=4,
        comment="A short note about the loop.",
        author_id=author_id,
    )
    review._events.clear()
    return review


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a pending review by user "{author_id}"'), target_fixture="review")
def pending_review_by_user(author_id):
    return _pending_review(author_id)


@given("a pending guest review", target_fixture="review")
def pending_guest_review():
    return _pending_review()


@given(parsers.cfparse('an approved review by user "{author_id}"'), target_fixture="review")
def approved_review_by_user(author_id):
    review = _pending_review(author_id)
    review.approve(moderator_id="mod-bdd")
    review._events.clear()
    return review


@given(parsers.cfparse('a rejected review by user "{author_id}"'), target_fixture="review")
def rejected_review_by_user(author_id):
    review = _pending_review(author_id)
    review.reject(moderator_id="mod-bdd", reason="Off topic")
    review._events.clear()
    return review


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the review status is "{status}"'))
def review_status_is(review, status):
    assert review.status == status


@then("the action fails with an invalid state error")
def action_fails_with_invalid_state(error):
    assert error["exc"] is not None, "Expected an invalid state error but none was raised"
    assert isinstance(error["exc"], InvalidStateError)


@then(parsers.cfparse("a {event_type} event is raised"))
def review_event_raised(review, event_type):
    event_cls = _REVIEW_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in review._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in review._events]}"


@then("the review is marked as edited")
def review_is_edited(review):
    assert review.is_edited is True
