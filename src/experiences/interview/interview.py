"""Interview aggregate — the company/role record reviews attach to."""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from experiences.domain import experiences
from experiences.interview.events import InterviewRegistered


@experiences.aggregate
class Interview:
    company = String(required=True, max_length=200)
    role = String(required=True, max_length=200)
    level = String(max_length=100)
    stage = String(max_length=100)
    location = String(max_length=100)
    created_at = DateTime()

    @invariant.post
    def company_and_role_must_not_be_blank(self):
        errors = {}
        if self.company is not None and not self.company.strip():
            errors["company"] = ["Company cannot be blank"]
        if self.role is not None and not self.role.strip():
            errors["role"] = ["Role cannot be blank"]
        if errors:
            raise ValidationError(errors)

    @classmethod
    def register(cls, company, role, level=None, stage=None, location=None):
        now = datetime.now(UTC)
        interview = cls(
            company=company.strip() if company else company,
            role=role.strip() if role else role,
            level=level,
            stage=stage,
            location=location,
            created_at=now,
        )
        interview.raise_(
            InterviewRegistered(
                interview_id=str(interview.id),
                company=interview.company,
                role=interview.role,
                registered_at=now,
            )
        )
        return interview
