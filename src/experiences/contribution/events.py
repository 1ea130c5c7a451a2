from protean.fields import DateTime, Identifier, String

from experiences.domain import experiences


@experiences.event(part_of="Contribution")
class ContributionRecorded:
    """An approved review unlocked insights for its author on one interview."""

    __version__ = 1

    user_identifier = String(required=True)
    interview_id = Identifier(required=True)
    review_id = Identifier(required=True)
    unlocked_at = DateTime(required=True)
