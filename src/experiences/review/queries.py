"""Moderation queue and author views over the Review repository."""

from protean.utils.globals import current_domain

from experiences.review.review import Review


def pending_reviews() -> list[Review]:
    """Reviews awaiting a moderator decision, oldest first."""
    return current_domain.repository_for(Review).pending_queue()


def moderation_stats() -> dict[str, int]:
    return current_domain.repository_for(Review).count_by_status()


def reviews_by_author(author_id) -> list[Review]:
    """An authenticated author's own reviews in any status, newest first."""
    return current_domain.repository_for(Review).by_author(author_id)
