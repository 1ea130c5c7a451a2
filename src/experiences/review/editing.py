"""EditReview — the author rewrites a pending review.

Only the authenticated author can edit, only while PENDING. The edit resets
all moderation metadata and the moderation policy runs again as part of the
same command, so an edit may publish the review immediately.
"""

import json

import structlog
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from experiences.contribution.ledger import record_contribution
from experiences.domain import experiences
from experiences.review.review import Review, ReviewOutcome, ReviewStatus
from experiences.screening import screen_review_text
from experiences.tag.tag import resolve_tag_keys

logger = structlog.get_logger(__name__)


@experiences.command(part_of="Review")
class EditReview:
    review_id = Identifier(required=True)
    caller_id = Identifier(required=True)  # Must match the review author
    rating = Integer()
    comment = Text()
    reviewer_name = String(max_length=255)
    tag_keys = Text()  # JSON array; "[]" clears all tags
    round_type = String(max_length=50)
    interviewer_initials = String(max_length=50)
    outcome = String(choices=ReviewOutcome)


@experiences.command_handler(part_of=Review)
class EditReviewHandler:
    @handle(EditReview)
    def edit_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        screen_review_text(command.comment, command.interviewer_initials)

        # Build kwargs with sentinel for unset fields
        kwargs = {}
        if command.rating is not None:
            kwargs["rating"] = command.rating
        if command.comment is not None:
            kwargs["comment"] = command.comment
        if command.reviewer_name is not None:
            kwargs["reviewer_name"] = command.reviewer_name
        if command.tag_keys is not None:
            kwargs["tag_keys"] = resolve_tag_keys(json.loads(command.tag_keys))
        if command.round_type is not None:
            kwargs["round_type"] = command.round_type
        if command.interviewer_initials is not None:
            kwargs["interviewer_initials"] = command.interviewer_initials
        if command.outcome is not None:
            kwargs["outcome"] = command.outcome

        review.edit(command.caller_id, **kwargs)
        review.apply_moderation_policy()

        repo.commit_transition(review, expected_status=ReviewStatus.PENDING)

        if review.status == ReviewStatus.APPROVED.value:
            record_contribution(review.author_id, review.interview_id, review.id)

        logger.info("Review edited", review_id=str(review.id), status=review.status)
