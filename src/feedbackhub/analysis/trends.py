"""Topic trend detection across the feed timeline."""

from typing import List, Optional, Sequence

from ..core.constants import AnalysisConstants
from ..core.models import FeedbackItem
from ..core.report import Trend, TrendDirection
from ..core.taxonomy import TREND_TOPICS


def classify_trend(old_rate: float, recent_rate: float) -> TrendDirection:
    """Compare mention rates of the older and recent halves of the feed."""
    if recent_rate > old_rate * AnalysisConstants.TREND_RISING_FACTOR:
        return TrendDirection.RISING
    if recent_rate < old_rate * AnalysisConstants.TREND_FALLING_FACTOR:
        return TrendDirection.FALLING
    return TrendDirection.STABLE


def mention_rate(items: Sequence[FeedbackItem], topic: str) -> float:
    if not items:
        return 0.0
    mentions = sum(1 for item in items if topic in item.text.lower())
    return mentions / len(items)


class TrendAnalyzer:
    def __init__(self, topics: Optional[Sequence[str]] = None):
        self.topics = list(topics or TREND_TOPICS)

    def analyze(self, items: Sequence[FeedbackItem]) -> List[Trend]:
        """Split the time-ordered feed at its midpoint and compare topic rates."""
        ordered = sorted(items, key=lambda item: item.timestamp)
        midpoint = len(ordered) // 2
        old, recent = ordered[:midpoint], ordered[midpoint:]

        trends = []
        for topic in self.topics:
            old_rate = mention_rate(old, topic)
            recent_rate = mention_rate(recent, topic)
            if not old or not recent:
                direction = TrendDirection.STABLE
            else:
                direction = classify_trend(old_rate, recent_rate)
            trends.append(Trend(
                topic=topic,
                direction=direction,
                old_rate=round(old_rate, 4),
                recent_rate=round(recent_rate, 4),
            ))
        return trends
