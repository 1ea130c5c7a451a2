"""Content screening abstraction — pluggable free-text guardrails."""

import os

_screen_instance = None


def get_content_screen():
    """Return the configured content screen (singleton).

    Uses PatternContentScreen by default. Configure via the
    CONTENT_SCREEN environment variable.
    """
    global _screen_instance
    if _screen_instance is None:
        adapter = os.environ.get("CONTENT_SCREEN", "pattern")
        if adapter == "pattern":
            from experiences.screening.pattern_screen import PatternContentScreen

            _screen_instance = PatternContentScreen()
        elif adapter == "fake":
            from experiences.screening.fake_screen import FakeContentScreen

            _screen_instance = FakeContentScreen()
        else:
            raise ValueError(f"Unknown content screen: {adapter}")
    return _screen_instance


def reset_content_screen():
    """Reset the content screen singleton (useful for testing)."""
    global _screen_instance
    _screen_instance = None


def screen_review_text(comment, interviewer_initials=None):
    """Raise ContentRejectedError for the first field that fails screening."""
    from experiences.exceptions import ContentRejectedError

    verdict = get_content_screen().screen(comment=comment, interviewer_initials=interviewer_initials)
    if not verdict.passed:
        raise ContentRejectedError(verdict.field, verdict.reason)
    return verdict
