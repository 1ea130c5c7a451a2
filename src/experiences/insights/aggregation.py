"""Insights aggregation over one interview record's approved reviews.

Everything here is a pure function of the review set. The difficulty and
feedback-speed figures are rating-derived proxies, not measurements.
"""

import math
from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime

from experiences.insights.weighting import is_recent, rating_breakdown, recency_cutoff, weighted_average_rating
from experiences.tag.tag import CATALOG_ORDER

TREND_THRESHOLD = 0.3
COMMON_FEEDBACK_LIMIT = 5
FAST_FEEDBACK_RATING = 4.0
AVERAGE_FEEDBACK_RATING = 2.5

UNLOCK_MESSAGE = "Share your interview experience to unlock detailed insights"
BLUR = "•"


def round_half_up(value: float, places: int = 1) -> float:
    factor = 10**places
    return math.floor(value * factor + 0.5) / factor


@dataclass(frozen=True)
class Trend:
    recent_average_rating: float
    older_average_rating: float
    rating_change: float
    direction: str
    recent_review_count: int
    older_review_count: int


@dataclass(frozen=True)
class FullInsights:
    company_name: str
    role: str
    total_reviews: int
    tag_distribution: dict[str, float] = field(default_factory=dict)
    average_difficulty: float | None = None
    feedback_speed: str | None = None
    common_feedback: list[str] = field(default_factory=list)
    recent_trend: Trend | None = None
    outcome_distribution: dict[str, float] = field(default_factory=dict)
    weighted_rating: float | None = None
    rating_breakdown: dict[str, int] = field(default_factory=dict)
    locked: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class TeaserInsights:
    company_name: str
    total_reviews: int
    available_insights_count: int
    unlock_message: str
    top_tags_blurred: list[str] = field(default_factory=list)
    locked: bool = True

    def to_dict(self) -> dict:
        return asdict(self)


def _mean_rating(reviews) -> float:
    if not reviews:
        return 0.0
    return sum(review.rating.score for review in reviews) / len(reviews)


def _tag_counts(reviews) -> Counter:
    """Reviews per tag key, grouped in catalog order."""
    counts = Counter()
    for review in reviews:
        counts.update(set(review.tag_keys))
    ordered = sorted(counts, key=lambda key: CATALOG_ORDER.get(key, len(CATALOG_ORDER)))
    return Counter({key: counts[key] for key in ordered})


def tag_distribution(reviews) -> dict[str, float]:
    """Percentage of reviews carrying each tag present."""
    if not reviews:
        return {}
    total = len(reviews)
    return {key: round_half_up(count / total * 100) for key, count in _tag_counts(reviews).items()}


def outcome_distribution(reviews) -> dict[str, float]:
    """Percentage per outcome, over reviews that report an outcome only."""
    outcomes = Counter(review.outcome for review in reviews if review.outcome is not None)
    total = sum(outcomes.values())
    if total == 0:
        return {}
    return {outcome: round_half_up(count / total * 100) for outcome, count in outcomes.items()}


def average_difficulty(reviews) -> float:
    return round_half_up(_mean_rating(reviews))


def feedback_speed(reviews) -> str:
    average = _mean_rating(reviews) if reviews else 3.0
    if average >= FAST_FEEDBACK_RATING:
        return "Fast"
    if average >= AVERAGE_FEEDBACK_RATING:
        return "Average"
    return "Slow"


def recent_trend(reviews, as_of: datetime | None = None) -> Trend:
    cutoff = recency_cutoff(as_of)
    recent = [review for review in reviews if is_recent(review, cutoff)]
    older = [review for review in reviews if not is_recent(review, cutoff)]

    recent_average = _mean_rating(recent)
    older_average = _mean_rating(older)
    change = recent_average - older_average

    if abs(change) < TREND_THRESHOLD:
        direction = "stable"
    elif change > 0:
        direction = "improving"
    else:
        direction = "declining"

    return Trend(
        recent_average_rating=round_half_up(recent_average),
        older_average_rating=round_half_up(older_average),
        rating_change=round_half_up(change),
        direction=direction,
        recent_review_count=len(recent),
        older_review_count=len(older),
    )


def common_feedback(reviews, limit: int = COMMON_FEEDBACK_LIMIT) -> list[str]:
    """Most frequent tag keys; ties keep catalog order."""
    counts = _tag_counts(reviews)
    return sorted(counts, key=lambda key: counts[key], reverse=True)[:limit]


def build_full_insights(interview, reviews, as_of: datetime | None = None) -> FullInsights:
    if not reviews:
        return FullInsights(company_name=interview.company, role=interview.role, total_reviews=0)

    weighted = weighted_average_rating(reviews, as_of)

    return FullInsights(
        company_name=interview.company,
        role=interview.role,
        total_reviews=len(reviews),
        tag_distribution=tag_distribution(reviews),
        average_difficulty=average_difficulty(reviews),
        feedback_speed=feedback_speed(reviews),
        common_feedback=common_feedback(reviews),
        recent_trend=recent_trend(reviews, as_of),
        outcome_distribution=outcome_distribution(reviews),
        weighted_rating=round_half_up(weighted, 2) if weighted is not None else None,
        rating_breakdown=rating_breakdown(reviews),
    )


def build_teaser(interview, reviews) -> TeaserInsights:
    """Locked preview: counts only, never tag names or percentages."""
    unique_tags = {key for review in reviews for key in review.tag_keys}

    hints = []
    if unique_tags:
        hints = [
            f"Interview feedback includes {len(unique_tags)} insights",
            f"Common patterns: {BLUR * 8}",
            f"Success factors: {BLUR * 6}",
        ]

    return TeaserInsights(
        company_name=interview.company,
        total_reviews=len(reviews),
        available_insights_count=len(unique_tags),
        unlock_message=UNLOCK_MESSAGE,
        top_tags_blurred=hints,
    )
