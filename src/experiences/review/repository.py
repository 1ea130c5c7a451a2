"""Repository for the Review aggregate.

Adds the guarded status write used by every moderation transition and the
read queries the lifecycle and insights need.
"""

import threading

import structlog
from protean.exceptions import ExpectedVersionError

from experiences.domain import experiences
from experiences.exceptions import InvalidStateError
from experiences.review.review import Review, ReviewStatus

logger = structlog.get_logger(__name__)

PAGE_SIZE = 100

# Serializes the re-read/compare/write sequence of status transitions
_transition_lock = threading.Lock()


def _fetch_all(queryset) -> list:
    """Drain a queryset page by page."""
    items = []
    offset = 0
    while True:
        page = queryset.offset(offset).limit(PAGE_SIZE).all().items
        items.extend(page)
        if len(page) < PAGE_SIZE:
            return items
        offset += PAGE_SIZE


@experiences.repository(part_of=Review)
class ReviewRepository:
    def commit_transition(self, review: Review, expected_status: ReviewStatus) -> None:
        """Persist ``review`` only if the stored status is still ``expected_status``.

        This is the compare-and-set that makes racing transitions safe: of two
        callers that both loaded a PENDING review, only the first to commit
        wins; the other gets ``InvalidStateError`` and nothing is written.
        """
        with _transition_lock:
            stored = self._dao.get(review.id)
            if stored.status != expected_status.value:
                logger.warning(
                    "Refused stale review transition",
                    review_id=str(review.id),
                    expected_status=expected_status.value,
                    stored_status=stored.status,
                )
                raise InvalidStateError(
                    f"Review {review.id} is no longer {expected_status.value} (current status: {stored.status})"
                )

            try:
                self.add(review)
            except ExpectedVersionError as exc:
                raise InvalidStateError(f"Review {review.id} was modified concurrently") from exc

    def delete_unless_approved(self, review: Review) -> None:
        """Remove ``review`` unless the stored row has been approved meanwhile.

        Shares the transition lock so a moderator approval and an author
        deletion can never both land.
        """
        with _transition_lock:
            stored = self._dao.get(review.id)
            if stored.status == ReviewStatus.APPROVED.value:
                logger.warning("Refused deletion of approved review", review_id=str(review.id))
                raise InvalidStateError("Approved reviews cannot be deleted")

            self._dao.delete(review)

    def approved_for_interview(self, interview_id) -> list[Review]:
        return _fetch_all(
            self._dao.query.filter(
                interview_id=str(interview_id),
                status=ReviewStatus.APPROVED.value,
            ).order_by("created_at")
        )

    def pending_queue(self) -> list[Review]:
        """Reviews awaiting a moderator, oldest first."""
        return _fetch_all(self._dao.query.filter(status=ReviewStatus.PENDING.value).order_by("created_at"))

    def by_author(self, author_id) -> list[Review]:
        return _fetch_all(self._dao.query.filter(author_id=str(author_id)).order_by("-created_at"))

    def count_by_status(self) -> dict[str, int]:
        return {
            status.value.lower(): self._dao.query.filter(status=status.value).all().total for status in ReviewStatus
        }
