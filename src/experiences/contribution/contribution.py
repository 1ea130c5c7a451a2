"""Contribution aggregate — one insights unlock per (user, interview) pair.

The identity of a contribution is derived from the pair itself, so the
persistence layer's primary key enforces the one-row-per-pair rule. Records
are append-only: there is no update or delete behavior.
"""

from protean.fields import DateTime, Identifier, String

from experiences.contribution.events import ContributionRecorded
from experiences.domain import experiences


def unlock_key(user_identifier, interview_id) -> str:
    return f"{user_identifier}::{interview_id}"


@experiences.aggregate
class Contribution:
    unlock_key = String(identifier=True, max_length=300)
    user_identifier = String(required=True, max_length=255)
    interview_id = Identifier(required=True)
    review_id = Identifier(required=True)
    unlocked_at = DateTime(required=True)

    @classmethod
    def unlock(cls, user_identifier, interview_id, review_id, unlocked_at):
        contribution = cls(
            unlock_key=unlock_key(user_identifier, interview_id),
            user_identifier=str(user_identifier),
            interview_id=str(interview_id),
            review_id=str(review_id),
            unlocked_at=unlocked_at,
        )
        contribution.raise_(
            ContributionRecorded(
                user_identifier=str(user_identifier),
                interview_id=str(interview_id),
                review_id=str(review_id),
                unlocked_at=unlocked_at,
            )
        )
        return contribution
