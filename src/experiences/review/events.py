"""Domain events for the Review aggregate.

All events are versioned, immutable facts representing state changes.
"""

from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from experiences.domain import experiences


@experiences.event(part_of="Review")
class ReviewSubmitted:
    """A reviewer submitted a new interview review."""

    __version__ = 1

    review_id = Identifier(required=True)
    interview_id = Identifier(required=True)
    author_type = String(required=True)
    author_id = Identifier()
    rating = Integer(required=True)
    tag_keys = Text()  # JSON array
    round_type = String()
    outcome = String()
    submitted_at = DateTime(required=True)


@experiences.event(part_of="Review")
class ReviewEdited:
    """The author edited a pending review; moderation starts over."""

    __version__ = 1

    review_id = Identifier(required=True)
    interview_id = Identifier(required=True)
    author_id = Identifier(required=True)
    rating = Integer(required=True)
    tag_keys = Text()
    edited_at = DateTime(required=True)


@experiences.event(part_of="Review")
class ReviewHeldForModeration:
    """The moderation policy left the review pending for a moderator."""

    __version__ = 1

    review_id = Identifier(required=True)
    interview_id = Identifier(required=True)
    eligible = Boolean(default=False)
    reasons = Text()  # JSON array of flag reasons
    held_at = DateTime(required=True)


@experiences.event(part_of="Review")
class ReviewApproved:
    """The review became publicly visible."""

    __version__ = 1

    review_id = Identifier(required=True)
    interview_id = Identifier(required=True)
    author_id = Identifier()
    rating = Integer(required=True)
    moderator_id = Identifier()
    auto_approved = Boolean(default=False)
    approved_at = DateTime(required=True)


@experiences.event(part_of="Review")
class ReviewRejected:
    """A moderator rejected the review."""

    __version__ = 1

    review_id = Identifier(required=True)
    interview_id = Identifier(required=True)
    author_id = Identifier()
    moderator_id = Identifier(required=True)
    reason = Text()
    rejected_at = DateTime(required=True)


@experiences.event(part_of="Review")
class ReviewDeleted:
    """The author deleted an unpublished review."""

    __version__ = 1

    review_id = Identifier(required=True)
    interview_id = Identifier(required=True)
    author_id = Identifier(required=True)
    status = String(required=True)
    deleted_at = DateTime(required=True)


@experiences.event(part_of="ReviewVote")
class HelpfulVoteCast:
    """A reader marked a review as helpful."""

    __version__ = 1

    review_id = Identifier(required=True)
    user_identifier = String(required=True)
    voted_at = DateTime(required=True)
