"""ToggleHelpfulVote — mark a review helpful, or take the mark back.

One vote row per (review, voter); the helpful count is derived from the
vote rows on read, so concurrent voters never race on a counter.
"""

from datetime import UTC, datetime
from enum import Enum

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from experiences.domain import experiences
from experiences.review.events import HelpfulVoteCast
from experiences.review.review import Review

logger = structlog.get_logger(__name__)


class VoteType(Enum):
    HELPFUL = "HELPFUL"


def vote_key(review_id, user_identifier) -> str:
    return f"{review_id}::{user_identifier}"


@experiences.aggregate
class ReviewVote:
    vote_key = String(identifier=True, max_length=300)
    review_id = Identifier(required=True)
    user_identifier = String(required=True, max_length=255)
    vote_type = String(choices=VoteType, default=VoteType.HELPFUL.value)
    voted_at = DateTime(required=True)

    @classmethod
    def cast(cls, review_id, user_identifier):
        now = datetime.now(UTC)
        vote = cls(
            vote_key=vote_key(review_id, user_identifier),
            review_id=str(review_id),
            user_identifier=str(user_identifier),
            vote_type=VoteType.HELPFUL.value,
            voted_at=now,
        )
        vote.raise_(
            HelpfulVoteCast(
                review_id=str(review_id),
                user_identifier=str(user_identifier),
                voted_at=now,
            )
        )
        return vote


@experiences.command(part_of="ReviewVote")
class ToggleHelpfulVote:
    review_id = Identifier(required=True)
    user_identifier = String(required=True, max_length=255)


@experiences.command_handler(part_of=ReviewVote)
class ToggleHelpfulVoteHandler:
    @handle(ToggleHelpfulVote)
    def toggle_helpful_vote(self, command):
        if not command.user_identifier.strip():
            raise ValidationError({"user_identifier": ["User identifier required for voting"]})

        # The review must exist
        current_domain.repository_for(Review).get(command.review_id)

        repo = current_domain.repository_for(ReviewVote)
        try:
            existing = repo.get(vote_key(command.review_id, command.user_identifier))
        except ObjectNotFoundError:
            existing = None

        if existing is None:
            repo.add(ReviewVote.cast(command.review_id, command.user_identifier))
            logger.info("Added vote", review_id=str(command.review_id), user_identifier=command.user_identifier)
            return True

        repo._dao.delete(existing)
        logger.info("Removed vote", review_id=str(command.review_id), user_identifier=command.user_identifier)
        return False


def helpful_count(review_id) -> int:
    """Number of helpful votes, counted from the vote rows."""
    repo = current_domain.repository_for(ReviewVote)
    return repo._dao.query.filter(review_id=str(review_id)).all().total


def has_voted(review_id, user_identifier) -> bool:
    if user_identifier is None or not str(user_identifier).strip():
        return False
    try:
        current_domain.repository_for(ReviewVote).get(vote_key(review_id, user_identifier))
    except ObjectNotFoundError:
        return False
    return True
