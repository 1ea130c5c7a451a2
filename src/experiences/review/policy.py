"""Moderation policy — decides whether a review publishes on its own.

A pure function of a review's current attributes, applied identically on
submission and after every edit. Two independent checks run:

* **Auto-approval eligibility** (all must hold): at least one tag, a
  non-blank round type, and a comment of at least 50 characters.
* **Manual-review requirement** (any triggers it): interviewer initials
  together with a rating of 2 or lower, or strong negative/profane language
  in the comment.

A review is auto-approved only when it is eligible and nothing requires a
moderator. Flagging always wins over eligibility.
"""

import re
from dataclasses import dataclass, field
from enum import Enum

import structlog

logger = structlog.get_logger(__name__)

MIN_COMMENT_LENGTH = 50
LOW_RATING_THRESHOLD = 2

# Word stems; each matches its inflections ("racist" matches "racists").
STRONG_NEGATIVE_STEMS = (
    # Negative descriptors
    "terrible",
    "worst",
    "horrible",
    "awful",
    "disgusting",
    "incompetent",
    "racist",
    "sexist",
    "discriminat",
    "harass",
    "unprofessional",
    "hostile",
    "rude",
    "abusive",
    # Profanity
    "fuck",
    "shit",
    "damn",
    "ass",
    "bitch",
    "crap",
    "hell",
    "bastard",
    "idiot",
    "stupid",
    "dumb",
    "moron",
)

_NEGATIVE_LANGUAGE = re.compile(
    r"\b(" + "|".join(STRONG_NEGATIVE_STEMS) + r")\w*\b",
    re.IGNORECASE,
)


class ModerationDecision(Enum):
    AUTO_APPROVE = "AUTO_APPROVE"
    FLAGGED = "FLAGGED"
    PENDING = "PENDING"


class FlagReason(Enum):
    LOW_RATING_WITH_INTERVIEWER = "LOW_RATING_WITH_INTERVIEWER"
    STRONG_NEGATIVE_LANGUAGE = "STRONG_NEGATIVE_LANGUAGE"


@dataclass(frozen=True)
class ModerationVerdict:
    decision: ModerationDecision
    eligible: bool
    reasons: tuple[FlagReason, ...] = field(default_factory=tuple)

    @property
    def approves(self) -> bool:
        return self.decision == ModerationDecision.AUTO_APPROVE


def _is_blank(value) -> bool:
    return value is None or not str(value).strip()


def _score(review):
    rating = review.rating
    return getattr(rating, "score", rating)


def is_auto_approvable(review) -> bool:
    """Minimum-quality bar for publishing without a moderator."""
    if not review.tag_keys:
        logger.debug("Review not auto-approvable: no tags", review_id=str(review.id))
        return False

    if _is_blank(review.round_type):
        logger.debug("Review not auto-approvable: no round type", review_id=str(review.id))
        return False

    comment_length = len(review.comment or "")
    if comment_length < MIN_COMMENT_LENGTH:
        logger.debug(
            "Review not auto-approvable: comment too short",
            review_id=str(review.id),
            comment_length=comment_length,
        )
        return False

    return True


def contains_strong_negative_language(text) -> bool:
    if _is_blank(text):
        return False
    return _NEGATIVE_LANGUAGE.search(text) is not None


def manual_review_reasons(review) -> tuple[FlagReason, ...]:
    reasons = []

    score = _score(review)
    if not _is_blank(review.interviewer_initials) and score is not None and score <= LOW_RATING_THRESHOLD:
        reasons.append(FlagReason.LOW_RATING_WITH_INTERVIEWER)

    if contains_strong_negative_language(review.comment):
        reasons.append(FlagReason.STRONG_NEGATIVE_LANGUAGE)

    return tuple(reasons)


def requires_manual_review(review) -> bool:
    return bool(manual_review_reasons(review))


def evaluate(review) -> ModerationVerdict:
    eligible = is_auto_approvable(review)
    reasons = manual_review_reasons(review)

    if reasons:
        decision = ModerationDecision.FLAGGED
        logger.info(
            "Review flagged for manual review",
            review_id=str(review.id),
            reasons=[r.value for r in reasons],
        )
    elif eligible:
        decision = ModerationDecision.AUTO_APPROVE
    else:
        decision = ModerationDecision.PENDING

    return ModerationVerdict(decision=decision, eligible=eligible, reasons=reasons)
