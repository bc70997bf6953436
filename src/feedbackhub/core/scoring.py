"""Scoring and summary metrics."""

import math
from typing import Iterable, Optional, Sequence

from .constants import AnalysisConstants
from .models import FeedbackItem


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


def percentage(part: int, whole: int) -> int:
    """Integer percentage of part over whole; 0 when whole is empty."""
    if whole <= 0:
        return 0
    return round_half_up(100.0 * part / whole)


def average_rating(items: Iterable[FeedbackItem]) -> Optional[float]:
    """Mean star rating over rated items, one decimal. None if nothing is rated."""
    ratings = [item.rating for item in items if item.rating is not None]
    if not ratings:
        return None
    return round(sum(ratings) / len(ratings), 1)


def health_score(
    avg_rating: Optional[float],
    review_positive_ratio: Optional[float],
    social_positive_ratio: Optional[float],
) -> int:
    """
    Weighted 0-100 composite:
    40% average rating (normalized by 5), 30% review positive ratio,
    30% social positive ratio. Missing inputs fall back to neutral defaults.
    """
    rating = AnalysisConstants.HEALTH_DEFAULT_RATING if avg_rating is None else avg_rating
    review = AnalysisConstants.HEALTH_DEFAULT_POSITIVE_RATIO if review_positive_ratio is None else review_positive_ratio
    social = AnalysisConstants.HEALTH_DEFAULT_POSITIVE_RATIO if social_positive_ratio is None else social_positive_ratio

    rating_norm = max(0.0, min(1.0, rating / 5.0))
    score = (
        rating_norm * AnalysisConstants.HEALTH_RATING_WEIGHT
        + review * AnalysisConstants.HEALTH_REVIEW_SENTIMENT_WEIGHT
        + social * AnalysisConstants.HEALTH_SOCIAL_SENTIMENT_WEIGHT
    ) * 100
    return round_half_up(score)


def feedback_velocity(items: Sequence[FeedbackItem]) -> float:
    """Items per day across the span of the given items."""
    if not items:
        return 0.0
    timestamps = [item.timestamp for item in items]
    span_days = (max(timestamps) - min(timestamps)).total_seconds() / 86400
    if span_days <= 0:
        span_days = 1.0
    return round(len(items) / span_days, 1)
