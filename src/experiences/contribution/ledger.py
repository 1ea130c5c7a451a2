"""Contribution ledger — the sole gate between teaser and full insights.

``record_contribution`` is idempotent on the (user, interview) pair: retried
approvals and edited-then-reapproved reviews never create a second row.
"""

from datetime import UTC, datetime

import structlog
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError
from protean.utils.globals import current_domain

from experiences.contribution.contribution import Contribution, unlock_key

logger = structlog.get_logger(__name__)


def _is_blank(user_identifier) -> bool:
    return user_identifier is None or not str(user_identifier).strip()


def has_unlocked(user_identifier, interview_id) -> bool:
    if _is_blank(user_identifier):
        return False

    try:
        current_domain.repository_for(Contribution).get(unlock_key(user_identifier, interview_id))
    except ObjectNotFoundError:
        return False
    return True


def record_contribution(user_identifier, interview_id, review_id) -> bool:
    """Unlock insights for ``user_identifier`` on ``interview_id``.

    Returns True when a ledger row was written, False for the no-op cases
    (guest author, or the pair is already unlocked).
    """
    if _is_blank(user_identifier):
        logger.debug("Skipping contribution: no user identifier", review_id=str(review_id))
        return False

    if has_unlocked(user_identifier, interview_id):
        logger.info(
            "Contribution already recorded",
            user_identifier=str(user_identifier),
            interview_id=str(interview_id),
        )
        return False

    contribution = Contribution.unlock(
        user_identifier=user_identifier,
        interview_id=interview_id,
        review_id=review_id,
        unlocked_at=datetime.now(UTC),
    )
    try:
        current_domain.repository_for(Contribution).add(contribution)
    except ExpectedVersionError:
        # A concurrent caller wrote the same pair first
        logger.info(
            "Contribution recorded concurrently",
            user_identifier=str(user_identifier),
            interview_id=str(interview_id),
        )
        return False

    logger.info(
        "Recorded contribution",
        user_identifier=str(user_identifier),
        interview_id=str(interview_id),
        review_id=str(review_id),
    )
    return True


def contributions_for(user_identifier) -> list[Contribution]:
    """Every interview the user has unlocked."""
    if _is_blank(user_identifier):
        return []
    repo = current_domain.repository_for(Contribution)
    return repo._dao.query.filter(user_identifier=str(user_identifier)).order_by("unlocked_at").all().items
