"""RegisterInterview — create the company/role record reviews attach to."""

from protean.fields import String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from experiences.domain import experiences
from experiences.interview.interview import Interview


@experiences.command(part_of="Interview")
class RegisterInterview:
    company = String(required=True, max_length=200)
    role = String(required=True, max_length=200)
    level = String(max_length=100)
    stage = String(max_length=100)
    location = String(max_length=100)


@experiences.command_handler(part_of=Interview)
class RegisterInterviewHandler:
    @handle(RegisterInterview)
    def register_interview(self, command):
        interview = Interview.register(
            company=command.company,
            role=command.role,
            level=command.level,
            stage=command.stage,
            location=command.location,
        )
        current_domain.repository_for(Interview).add(interview)
        return str(interview.id)
