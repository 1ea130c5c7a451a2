"""SubmitReview — submit a new interview review.

Screens free text, validates the interview record and tag keys, creates the
review in PENDING and immediately applies the moderation policy. An
auto-approved review by an authenticated author unlocks insights for that
interview in the same unit of work.
"""

import json

import structlog
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from experiences.contribution.ledger import record_contribution
from experiences.domain import experiences
from experiences.interview.interview import Interview
from experiences.review.review import Review, ReviewOutcome, ReviewStatus
from experiences.screening import screen_review_text
from experiences.tag.tag import resolve_tag_keys

logger = structlog.get_logger(__name__)


@experiences.command(part_of="Review")
class SubmitReview:
    interview_id = Identifier(required=True)
    rating = Integer(required=True)
    comment = Text(required=True)
    reviewer_name = String(max_length=255, default="Anonymous")
    tag_keys = Text()  # JSON array of tag keys
    round_type = String(max_length=50)
    interviewer_initials = String(max_length=50)
    outcome = String(choices=ReviewOutcome)
    author_id = Identifier()  # Authenticated author; absent for guests


@experiences.command_handler(part_of=Review)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        # Guardrails run before anything touches a repository
        screen_review_text(command.comment, command.interviewer_initials)

        interview = current_domain.repository_for(Interview).get(command.interview_id)
        tag_keys = resolve_tag_keys(json.loads(command.tag_keys) if command.tag_keys else [])

        review = Review.submit(
            interview_id=interview.id,
            rating=command.rating,
            comment=command.comment,
            reviewer_name=command.reviewer_name or "Anonymous",
            tag_keys=tag_keys,
            round_type=command.round_type,
            interviewer_initials=command.interviewer_initials,
            outcome=command.outcome,
            author_id=command.author_id,
        )
        review.apply_moderation_policy()

        current_domain.repository_for(Review).add(review)

        if review.status == ReviewStatus.APPROVED.value:
            record_contribution(review.author_id, review.interview_id, review.id)

        logger.info(
            "Review submitted",
            review_id=str(review.id),
            interview_id=str(review.interview_id),
            author_type=review.author_type,
            status=review.status,
        )
        return str(review.id)
