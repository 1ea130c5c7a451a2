"""Content screening port — abstract interface for free-text guardrails.

Screening runs before a review reaches the lifecycle. The domain code
programs against the port; adapters are swapped via configuration.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ScreeningVerdict:
    """Result of screening a review's free-text fields."""

    passed: bool
    field: str | None = None
    reason: str | None = None


PASSED = ScreeningVerdict(passed=True)


class ContentScreen(ABC):
    """Abstract content screen interface."""

    @abstractmethod
    def screen(self, comment: str | None, interviewer_initials: str | None = None) -> ScreeningVerdict:
        """Screen the free-text fields of a review draft.

        Returns a failing verdict naming the offending field on the first
        violation, or ``PASSED``.
        """
        ...
