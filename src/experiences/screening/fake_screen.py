"""Fake content screen — deterministic verdicts for testing."""

from experiences.screening.port import PASSED, ContentScreen, ScreeningVerdict


class FakeContentScreen(ContentScreen):
    """Passes everything by default."""

    def __init__(self):
        self.rejected_field = None
        self.reason = "Rejected by content screen"
        self.calls = []

    def configure(self, rejected_field: str | None = None, reason: str = "Rejected by content screen"):
        """Make every subsequent screening fail on ``rejected_field`` (None passes)."""
        self.rejected_field = rejected_field
        self.reason = reason

    def screen(self, comment, interviewer_initials=None):
        self.calls.append({"comment": comment, "interviewer_initials": interviewer_initials})
        if self.rejected_field:
            return ScreeningVerdict(passed=False, field=self.rejected_field, reason=self.reason)
        return PASSED
