"""Prioritized recommendations and the overall health score."""

from typing import List, Optional, Sequence

from ..core.constants import AnalysisConstants, SourceConstants
from ..core.models import FeedbackItem, Sentiment
from ..core.report import Action, Insight, InsightType, Issue
from ..core.scoring import average_rating, health_score


def positive_ratio(items: Sequence[FeedbackItem]) -> Optional[float]:
    if not items:
        return None
    return sum(1 for item in items if item.sentiment is Sentiment.POSITIVE) / len(items)


def split_by_channel(items: Sequence[FeedbackItem]):
    """Partition items into (review, social) by source."""
    reviews = [item for item in items if item.source in SourceConstants.REVIEW_SOURCES]
    social = [item for item in items if item.source not in SourceConstants.REVIEW_SOURCES]
    return reviews, social


class RecommendationGenerator:
    """Turns insights and the health score into a ranked action list."""

    def health_score(self, items: Sequence[FeedbackItem]) -> int:
        """Health score for sentiment-annotated items."""
        reviews, social = split_by_channel(items)
        return health_score(
            average_rating(items),
            positive_ratio(reviews),
            positive_ratio(social),
        )

    def generate(
        self,
        insights: Sequence[Insight],
        health: int,
        issues: Sequence[Issue] = (),
    ) -> List[Action]:
        actions = []

        for insight in insights:
            if insight.type is InsightType.CRITICAL:
                actions.append(Action(
                    priority=1,
                    action=insight.recommendation,
                    impact=insight.expected_impact,
                    effort="high",
                    timeline="immediate",
                ))

        if health < AnalysisConstants.HEALTH_QUICK_WIN_THRESHOLD:
            top = [issue.category for issue in issues[:3]]
            action = "Implement quick fixes for top 3 user complaints"
            if top:
                action += f" ({', '.join(top)})"
            actions.append(Action(
                priority=2,
                action=action,
                impact="Improve health score by 10-15 points",
                effort="medium",
                timeline="1-2 weeks",
            ))

        for insight in insights:
            if insight.type is InsightType.OPPORTUNITY:
                actions.append(Action(
                    priority=3,
                    action=insight.recommendation,
                    impact=insight.expected_impact,
                    effort="medium",
                    timeline="1-2 months",
                ))

        # sort is stable, so insight order is kept within a priority
        actions.sort(key=lambda a: a.priority)
        return actions
