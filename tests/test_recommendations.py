"""Tests for recommendation generation and the health score."""

from feedbackhub.analysis.recommendations import RecommendationGenerator
from feedbackhub.core.models import Sentiment
from feedbackhub.core.report import Evidence, Insight, InsightType, Issue


def make_insight(insight_type, recommendation):
    return Insight(
        type=insight_type,
        title=recommendation,
        description="",
        evidence=[Evidence("app_store", "evidence")],
        recommendation=recommendation,
        expected_impact="impact",
        confidence=0.9,
    )


class TestRecommendationGenerator:
    def setup_method(self):
        self.generator = RecommendationGenerator()

    def test_priorities(self):
        insights = [
            make_insight(InsightType.OPPORTUNITY, "Build export"),
            make_insight(InsightType.CRITICAL, "Fix crashes"),
            make_insight(InsightType.WARNING, "Study competitors"),
        ]
        actions = self.generator.generate(insights, health=50)

        assert [a.priority for a in actions] == [1, 2, 3]
        assert actions[0].action == "Fix crashes"
        assert (actions[0].effort, actions[0].timeline) == ("high", "immediate")
        assert (actions[1].effort, actions[1].timeline) == ("medium", "1-2 weeks")
        assert actions[2].action == "Build export"
        assert (actions[2].effort, actions[2].timeline) == ("medium", "1-2 months")

    def test_quick_wins_only_when_unhealthy(self):
        assert self.generator.generate([], health=70) == []
        assert len(self.generator.generate([], health=69)) == 1

    def test_quick_wins_name_top_complaints(self):
        issues = [Issue("Performance Issues", 9), Issue("Bugs", 4), Issue("Price Concerns", 2), Issue("Battery Drain", 1)]
        action = self.generator.generate([], health=40, issues=issues)[0]
        assert action.action == (
            "Implement quick fixes for top 3 user complaints "
            "(Performance Issues, Bugs, Price Concerns)"
        )
        assert action.impact == "Improve health score by 10-15 points"

    def test_multiple_criticals_keep_order(self):
        insights = [make_insight(InsightType.CRITICAL, "first"), make_insight(InsightType.CRITICAL, "second")]
        actions = self.generator.generate(insights, health=90)
        assert [a.action for a in actions] == ["first", "second"]

    def test_health_score_without_data(self):
        assert self.generator.health_score([]) == 54

    def test_health_score_splits_reviews_and_social(self, make_item):
        items = [
            make_item("great", rating=5, sentiment=Sentiment.POSITIVE),
            make_item("awful", source="reddit", sentiment=Sentiment.NEGATIVE),
        ]
        # 40 for 5 stars, 30 for reviews, 0 for social
        assert self.generator.health_score(items) == 70
