"""Pattern-based content screen — rejects names, contact details and links."""

import re

import structlog

from experiences.screening.port import PASSED, ContentScreen, ScreeningVerdict

logger = structlog.get_logger(__name__)

# Two or more capitalized words together (e.g. "John Smith")
FULL_NAME_PATTERN = re.compile(r"\b[A-Z][a-z]+\s+[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\b")
EMAIL_PATTERN = re.compile(r"\b[\w.-]+@[\w.-]+\.\w+\b")
PHONE_PATTERN = re.compile(r"\b\d{3}[-.]?\d{3}[-.]?\d{4}\b")
URL_PATTERN = re.compile(r"(https?://|www\.)", re.IGNORECASE)

NO_FULL_NAMES = "Please do not include full names. Use initials instead."
NO_CONTACT_INFO = "Please do not include contact information."
NO_URLS = "Please do not include URLs."


class PatternContentScreen(ContentScreen):
    def screen(self, comment, interviewer_initials=None):
        if comment and FULL_NAME_PATTERN.search(comment):
            return self._reject("comment", NO_FULL_NAMES, "full_name")

        if interviewer_initials and FULL_NAME_PATTERN.search(interviewer_initials):
            return self._reject("interviewer_initials", NO_FULL_NAMES, "full_name")

        if comment and (EMAIL_PATTERN.search(comment) or PHONE_PATTERN.search(comment)):
            return self._reject("comment", NO_CONTACT_INFO, "contact_info")

        if comment and URL_PATTERN.search(comment):
            return self._reject("comment", NO_URLS, "url")

        return PASSED

    @staticmethod
    def _reject(field, reason, rule):
        logger.warning("Content screening rejected review text", field=field, rule=rule)
        return ScreeningVerdict(passed=False, field=field, reason=reason)
