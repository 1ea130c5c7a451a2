"""Interview Experiences bounded context — reviews, moderation and insights.

Handles the review lifecycle (submission, automated moderation policy,
moderator decisions, author edits and deletions), the contribution ledger
that unlocks company insights for reviewers, and the aggregation of
approved reviews into weighted ratings and insights.
"""

from protean.domain import Domain

from experiences.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

experiences = Domain(name="experiences")
