"""DeleteReview — the author withdraws an unpublished review.

Only the authenticated author can delete, and only PENDING or REJECTED
reviews. Approved reviews are permanent public record.
"""

import structlog
from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from experiences.domain import experiences
from experiences.review.review import Review

logger = structlog.get_logger(__name__)


@experiences.command(part_of="Review")
class DeleteReview:
    review_id = Identifier(required=True)
    caller_id = Identifier(required=True)


@experiences.command_handler(part_of=Review)
class DeleteReviewHandler:
    @handle(DeleteReview)
    def delete_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        review.mark_deleted(command.caller_id)
        repo.delete_unless_approved(review)

        logger.info("Review deleted", review_id=str(command.review_id))
