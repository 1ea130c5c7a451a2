"""Review aggregate — the core of the Experiences domain.

The Review aggregate manages the moderation lifecycle of an interview
review: submission, automated policy evaluation, moderator decisions,
author edits and author deletion.

State Machine (3 states):
    PENDING → APPROVED | REJECTED
    APPROVED → (terminal, permanent public record)
    REJECTED → (terminal)

An author edit is not a transition: it is only allowed while PENDING and
resets the review to a fresh PENDING state before the policy runs again.
"""

import json
import re
from datetime import UTC, datetime
from enum import Enum

import structlog
from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text, ValueObject

from experiences.domain import experiences
from experiences.exceptions import InvalidStateError
from experiences.review import policy
from experiences.review.events import (
    ReviewApproved,
    ReviewDeleted,
    ReviewEdited,
    ReviewHeldForModeration,
    ReviewRejected,
    ReviewSubmitted,
)

logger = structlog.get_logger(__name__)

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()

MAX_TAGS = 5


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class ReviewStatus(Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ReviewOutcome(Enum):
    OFFER = "OFFER"
    REJECTED = "REJECTED"
    WITHDREW = "WITHDREW"


class AuthorType(Enum):
    GUEST = "GUEST"
    USER = "USER"


class ModerationAction(Enum):
    APPROVE = "APPROVE"
    REJECT = "REJECT"


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    ReviewStatus.PENDING: {ReviewStatus.APPROVED, ReviewStatus.REJECTED},
    ReviewStatus.APPROVED: set(),  # Terminal state
    ReviewStatus.REJECTED: set(),  # Terminal state
}


def normalize_initials(initials):
    """Keep letters only, upper-cased, at most 4; fewer than 2 letters means none."""
    if initials is None or not initials.strip():
        return None

    normalized = re.sub(r"[^a-zA-Z]", "", initials).upper()[:4]
    return normalized if len(normalized) >= 2 else None


def _blank_to_none(value):
    if value is None or not value.strip():
        return None
    return value.strip()


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@experiences.value_object(part_of="Review")
class Rating:
    """A star rating from 1 to 5."""

    score = Integer(required=True)

    @invariant.post
    def score_must_be_in_range(self):
        if self.score is not None and (self.score < 1 or self.score > 5):
            raise ValidationError({"score": ["Rating must be between 1 and 5"]})


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@experiences.aggregate
class Review:
    """A candidate's review of one interview experience at a company."""

    interview_id = Identifier(required=True)

    # Content
    rating = ValueObject(Rating, required=True)
    comment = Text(required=True)
    reviewer_name = String(required=True, max_length=255)
    tags = Text()  # JSON array of tag keys
    round_type = String(max_length=50)
    interviewer_initials = String(max_length=4)
    outcome = String(choices=ReviewOutcome)

    # Authorship
    author_type = String(choices=AuthorType, default=AuthorType.GUEST.value)
    author_id = Identifier()

    # Moderation
    status = String(choices=ReviewStatus, default=ReviewStatus.PENDING.value)
    approved_at = DateTime()
    moderated_by = Identifier()
    moderated_at = DateTime()
    rejection_reason = Text()

    # Editing
    is_edited = Boolean(default=False)
    edited_at = DateTime()

    # Timestamps
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def approved_at_matches_status(self):
        approved = self.status == ReviewStatus.APPROVED.value
        if approved != (self.approved_at is not None):
            raise ValidationError({"approved_at": ["Approval time is set if and only if the review is approved"]})

    @invariant.post
    def guest_reviews_have_no_author(self):
        if self.author_type == AuthorType.GUEST.value and self.author_id:
            raise ValidationError({"author_id": ["Guest reviews cannot carry an author"]})
        if self.author_type == AuthorType.USER.value and not self.author_id:
            raise ValidationError({"author_id": ["User reviews must carry an author"]})

    @invariant.post
    def tags_cannot_exceed_maximum(self):
        if len(self.tag_keys) > MAX_TAGS:
            raise ValidationError({"tags": [f"Cannot attach more than {MAX_TAGS} tags to a review"]})

    @invariant.post
    def comment_must_not_be_empty(self):
        if self.comment is not None and len(self.comment.strip()) == 0:
            raise ValidationError({"comment": ["Review comment cannot be empty"]})

    @invariant.post
    def rejection_reason_only_on_rejected(self):
        if self.rejection_reason and self.status != ReviewStatus.REJECTED.value:
            raise ValidationError({"rejection_reason": ["Only rejected reviews carry a rejection reason"]})

    # -------------------------------------------------------------------
    # Derived
    # -------------------------------------------------------------------
    @property
    def tag_keys(self) -> list[str]:
        return json.loads(self.tags) if self.tags else []

    @property
    def is_guest(self) -> bool:
        return self.author_type == AuthorType.GUEST.value

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def submit(
        cls,
        interview_id,
        rating,
        comment,
        reviewer_name="Anonymous",
        tag_keys=None,
        round_type=None,
        interviewer_initials=None,
        outcome=None,
        author_id=None,
    ):
        """Create a new review in PENDING state.

        The moderation policy is not applied here; call
        :meth:`apply_moderation_policy` once the review is complete.
        """
        now = datetime.now(UTC)
        author_type = AuthorType.USER if author_id else AuthorType.GUEST
        tags = json.dumps(list(tag_keys)) if tag_keys else None

        review = cls(
            interview_id=interview_id,
            rating=Rating(score=rating),
            comment=comment,
            reviewer_name=reviewer_name,
            tags=tags,
            round_type=_blank_to_none(round_type),
            interviewer_initials=normalize_initials(interviewer_initials),
            outcome=outcome,
            author_type=author_type.value,
            author_id=author_id,
            status=ReviewStatus.PENDING.value,
            is_edited=False,
            created_at=now,
            updated_at=now,
        )

        review.raise_(
            ReviewSubmitted(
                review_id=str(review.id),
                interview_id=str(interview_id),
                author_type=author_type.value,
                author_id=str(author_id) if author_id else None,
                rating=rating,
                tag_keys=tags,
                round_type=review.round_type,
                outcome=outcome,
                submitted_at=now,
            )
        )

        return review

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate state machine transition."""
        current = ReviewStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidStateError(f"Cannot transition review from {current.value} to {target_status.value}")

    def _assert_owned_by(self, caller_id, action, past):
        """Only the authenticated author may change a review; guests never can."""
        if self.is_guest:
            raise InvalidStateError(f"Guest reviews cannot be {past}")
        if caller_id is None or str(self.author_id) != str(caller_id):
            raise InvalidStateError(f"Only the review author can {action} this review")

    # -------------------------------------------------------------------
    # Automated moderation
    # -------------------------------------------------------------------
    def apply_moderation_policy(self):
        """Run the moderation policy; auto-approve or hold for a moderator.

        Returns the policy verdict.
        """
        verdict = policy.evaluate(self)

        if verdict.approves:
            self.approve(auto=True)
            logger.info("Review auto-approved", review_id=str(self.id))
        else:
            self.raise_(
                ReviewHeldForModeration(
                    review_id=str(self.id),
                    interview_id=str(self.interview_id),
                    eligible=verdict.eligible,
                    reasons=json.dumps([reason.value for reason in verdict.reasons]),
                    held_at=datetime.now(UTC),
                )
            )
            logger.info(
                "Review requires manual moderation",
                review_id=str(self.id),
                decision=verdict.decision.value,
            )

        return verdict

    # -------------------------------------------------------------------
    # Moderation
    # -------------------------------------------------------------------
    def approve(self, moderator_id=None, auto=False):
        """Publish the review. Only valid from PENDING."""
        self._assert_can_transition(ReviewStatus.APPROVED)

        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = ReviewStatus.APPROVED.value
            self.approved_at = now
            self.moderated_by = moderator_id
            self.moderated_at = now
            self.rejection_reason = None
            self.updated_at = now

        self.raise_(
            ReviewApproved(
                review_id=str(self.id),
                interview_id=str(self.interview_id),
                author_id=str(self.author_id) if self.author_id else None,
                rating=self.rating.score,
                moderator_id=str(moderator_id) if moderator_id else None,
                auto_approved=auto,
                approved_at=now,
            )
        )

    def reject(self, moderator_id, reason=None):
        """Reject the review. Only valid from PENDING; the reason is optional."""
        self._assert_can_transition(ReviewStatus.REJECTED)

        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = ReviewStatus.REJECTED.value
            self.moderated_by = moderator_id
            self.moderated_at = now
            self.rejection_reason = reason
            self.updated_at = now

        self.raise_(
            ReviewRejected(
                review_id=str(self.id),
                interview_id=str(self.interview_id),
                author_id=str(self.author_id) if self.author_id else None,
                moderator_id=str(moderator_id),
                reason=reason,
                rejected_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Edit
    # -------------------------------------------------------------------
    def edit(
        self,
        caller_id,
        rating=_UNSET,
        comment=_UNSET,
        reviewer_name=_UNSET,
        tag_keys=_UNSET,
        round_type=_UNSET,
        interviewer_initials=_UNSET,
        outcome=_UNSET,
    ):
        """Edit review content and reset moderation.

        Only the authenticated author may edit, and only while PENDING.
        The caller is expected to re-run the moderation policy afterwards.
        """
        self._assert_owned_by(caller_id, "edit", "edited")

        current = ReviewStatus(self.status)
        if current != ReviewStatus.PENDING:
            raise InvalidStateError(f"Can only edit reviews that are pending. Current status: {current.value}")

        # Build value objects up front so a bad value leaves the review untouched
        new_rating = Rating(score=rating) if rating is not _UNSET else self.rating
        if tag_keys is not _UNSET and tag_keys and len(tag_keys) > MAX_TAGS:
            raise ValidationError({"tags": [f"Cannot attach more than {MAX_TAGS} tags to a review"]})

        now = datetime.now(UTC)

        with atomic_change(self):
            self.rating = new_rating
            if comment is not _UNSET:
                self.comment = comment
            if reviewer_name is not _UNSET:
                self.reviewer_name = reviewer_name
            if tag_keys is not _UNSET:
                self.tags = json.dumps(list(tag_keys)) if tag_keys else None
            if round_type is not _UNSET:
                self.round_type = _blank_to_none(round_type)
            if interviewer_initials is not _UNSET:
                self.interviewer_initials = normalize_initials(interviewer_initials)
            if outcome is not _UNSET:
                self.outcome = outcome

            # Reset moderation metadata
            self.status = ReviewStatus.PENDING.value
            self.approved_at = None
            self.moderated_by = None
            self.moderated_at = None
            self.rejection_reason = None

            self.is_edited = True
            self.edited_at = now
            self.updated_at = now

        self.raise_(
            ReviewEdited(
                review_id=str(self.id),
                interview_id=str(self.interview_id),
                author_id=str(self.author_id),
                rating=self.rating.score,
                tag_keys=self.tags,
                edited_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Deletion
    # -------------------------------------------------------------------
    def mark_deleted(self, caller_id):
        """Check the author may delete this review and record the deletion.

        Approved reviews are permanent public record. The repository removes
        the row; this only validates and raises the event.
        """
        self._assert_owned_by(caller_id, "delete", "deleted")

        if ReviewStatus(self.status) == ReviewStatus.APPROVED:
            raise InvalidStateError("Approved reviews cannot be deleted")

        self.raise_(
            ReviewDeleted(
                review_id=str(self.id),
                interview_id=str(self.interview_id),
                author_id=str(self.author_id),
                status=self.status,
                deleted_at=datetime.now(UTC),
            )
        )
