"""Weighted rating — one headline number per interview record.

Each approved review is weighted by how complete and how recent it is:

=====================================  ======
Factor                                 Weight
=====================================  ======
Base                                   1.0
Has at least one tag                   +1.0
Has a round type                       +1.0
Comment of 150 characters or more      +1.0
Created within the last six months     +1.0
=====================================  ======

Weights are internal and never leave this module's callers. Raw ratings stay
available unweighted through :func:`rating_breakdown`.
"""

import calendar
from datetime import UTC, datetime

BASE_WEIGHT = 1.0
FACTOR_WEIGHT = 1.0
DETAILED_COMMENT_LENGTH = 150
RECENT_MONTHS = 6


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes read back from storage as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def months_before(moment: datetime, months: int) -> datetime:
    """Same wall-clock time ``months`` calendar months earlier.

    The day is clamped to the length of the target month (Aug 31 → Feb 28).
    """
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def recency_cutoff(as_of: datetime | None = None) -> datetime:
    return months_before(as_utc(as_of or datetime.now(UTC)), RECENT_MONTHS)


def is_recent(review, cutoff: datetime) -> bool:
    """Created strictly after the cutoff."""
    return review.created_at is not None and as_utc(review.created_at) > cutoff


def review_weight(review, as_of: datetime | None = None) -> float:
    return _weight(review, recency_cutoff(as_of))


def _weight(review, cutoff: datetime) -> float:
    weight = BASE_WEIGHT

    if review.tag_keys:
        weight += FACTOR_WEIGHT

    if review.round_type and review.round_type.strip():
        weight += FACTOR_WEIGHT

    if review.comment and len(review.comment) >= DETAILED_COMMENT_LENGTH:
        weight += FACTOR_WEIGHT

    if is_recent(review, cutoff):
        weight += FACTOR_WEIGHT

    return weight


def weighted_average_rating(reviews, as_of: datetime | None = None) -> float | None:
    """Sum(rating * weight) / Sum(weight), or None when there is nothing to weigh."""
    total_weighted_rating = 0.0
    total_weight = 0.0
    cutoff = recency_cutoff(as_of)

    for review in reviews:
        weight = _weight(review, cutoff)
        total_weighted_rating += review.rating.score * weight
        total_weight += weight

    if total_weight <= 0:
        return None
    return total_weighted_rating / total_weight


def rating_breakdown(reviews) -> dict[str, int]:
    """Exact, unweighted count of reviews per star value."""
    breakdown = {str(star): 0 for star in range(1, 6)}
    for review in reviews:
        breakdown[str(review.rating.score)] += 1
    return breakdown
