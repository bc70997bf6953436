"""Tests for trend detection."""

import pytest

from feedbackhub.analysis.trends import TrendAnalyzer, classify_trend
from feedbackhub.core.report import TrendDirection


@pytest.mark.parametrize("old,recent,expected", [
    (0.2, 0.5, TrendDirection.RISING),
    (0.5, 0.2, TrendDirection.FALLING),
    (0.5, 0.55, TrendDirection.STABLE),
    (0.5, 0.45, TrendDirection.STABLE),
    (0.0, 0.0, TrendDirection.STABLE),
    (0.0, 0.1, TrendDirection.RISING),
])
def test_classify_trend(old, recent, expected):
    assert classify_trend(old, recent) is expected


class TestTrendAnalyzer:
    def setup_method(self):
        self.analyzer = TrendAnalyzer()

    def test_rising_topic(self, make_item):
        old = [make_item("price went up" if i < 2 else f"old note {i}", days=i) for i in range(10)]
        recent = [make_item("price is too high" if i < 5 else f"new note {i}", days=20 + i) for i in range(10)]
        # Feed order must not matter, only timestamps
        trends = {t.topic: t for t in self.analyzer.analyze(recent + old)}

        assert trends["price"].old_rate == 0.2
        assert trends["price"].recent_rate == 0.5
        assert trends["price"].direction is TrendDirection.RISING
        assert trends["support"].direction is TrendDirection.STABLE

    def test_falling_topic(self, make_item):
        old = [make_item("support never answers", days=i) for i in range(4)]
        recent = [make_item("all fine", days=10 + i) for i in range(4)]
        trends = {t.topic: t for t in self.analyzer.analyze(old + recent)}
        assert trends["support"].direction is TrendDirection.FALLING

    def test_empty_half_is_stable(self, make_item):
        trends = self.analyzer.analyze([make_item("performance is bad")])
        assert all(t.direction is TrendDirection.STABLE for t in trends)
        assert self.analyzer.analyze([])[0].direction is TrendDirection.STABLE

    def test_all_topics_reported(self, make_item):
        trends = self.analyzer.analyze([make_item("a"), make_item("b")])
        assert [t.topic for t in trends] == ["performance", "features", "price", "support", "design"]
