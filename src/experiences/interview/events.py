from protean.fields import DateTime, Identifier, String

from experiences.domain import experiences


@experiences.event(part_of="Interview")
class InterviewRegistered:
    """A company/role interview record was created."""

    __version__ = 1

    interview_id = Identifier(required=True)
    company = String(required=True)
    role = String(required=True)
    registered_at = DateTime(required=True)
