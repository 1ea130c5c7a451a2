"""ModerateReview — a moderator approves or rejects a pending review.

Decisions are only valid on PENDING reviews. Approval unlocks insights for
an authenticated author; the rejection reason is optional.
"""

import structlog
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from experiences.contribution.ledger import record_contribution
from experiences.domain import experiences
from experiences.review.review import ModerationAction, Review, ReviewStatus

logger = structlog.get_logger(__name__)


@experiences.command(part_of="Review")
class ModerateReview:
    review_id = Identifier(required=True)
    moderator_id = Identifier(required=True)
    action = String(required=True, choices=ModerationAction)
    reason = Text()


@experiences.command_handler(part_of=Review)
class ModerateReviewHandler:
    @handle(ModerateReview)
    def moderate_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        action = ModerationAction(command.action)

        if action == ModerationAction.APPROVE:
            review.approve(moderator_id=command.moderator_id)
        else:  # ModerationAction.REJECT
            review.reject(moderator_id=command.moderator_id, reason=command.reason)

        repo.commit_transition(review, expected_status=ReviewStatus.PENDING)

        if action == ModerationAction.APPROVE:
            record_contribution(review.author_id, review.interview_id, review.id)

        logger.info(
            "Review moderated",
            review_id=str(review.id),
            moderator_id=str(command.moderator_id),
            action=action.value,
        )
