"""Read entry points for insights and ratings.

Each read loads a snapshot of one interview record's APPROVED reviews. The
contribution ledger alone decides between full insights and the teaser.
"""

from datetime import datetime

import structlog
from protean.utils.globals import current_domain

from experiences.contribution.ledger import has_unlocked
from experiences.insights.aggregation import FullInsights, TeaserInsights, build_full_insights, build_teaser
from experiences.insights.weighting import rating_breakdown, weighted_average_rating
from experiences.interview.interview import Interview
from experiences.review.review import Review

logger = structlog.get_logger(__name__)


def _approved_reviews(interview_id):
    interview = current_domain.repository_for(Interview).get(interview_id)
    reviews = current_domain.repository_for(Review).approved_for_interview(interview_id)
    return interview, reviews


def get_insights(interview_id, user_identifier=None, as_of: datetime | None = None) -> FullInsights | TeaserInsights:
    interview, reviews = _approved_reviews(interview_id)

    if has_unlocked(user_identifier, interview_id):
        logger.info("Serving full insights", interview_id=str(interview_id), review_count=len(reviews))
        return build_full_insights(interview, reviews, as_of)

    logger.info("Serving insights teaser", interview_id=str(interview_id))
    return build_teaser(interview, reviews)


def get_weighted_rating(interview_id, as_of: datetime | None = None) -> float | None:
    _, reviews = _approved_reviews(interview_id)
    return weighted_average_rating(reviews, as_of)


def get_rating_breakdown(interview_id) -> dict[str, int]:
    _, reviews = _approved_reviews(interview_id)
    return rating_breakdown(reviews)


def unlock_status(interview_id, user_identifier=None) -> dict:
    current_domain.repository_for(Interview).get(interview_id)
    return {
        "interview_id": str(interview_id),
        "unlocked": has_unlocked(user_identifier, interview_id),
    }
