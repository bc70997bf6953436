"""Shared fixtures for FeedbackHub tests."""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from feedbackhub.core.models import FeedbackItem, Provenance, Sentiment
from feedbackhub.core.report import (
    Action,
    Evidence,
    Insight,
    InsightType,
    Issue,
    Report,
    ReportSummary,
    SentimentBreakdown,
    Trend,
    TrendDirection,
    ViralItem,
)

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)

_ids = itertools.count(1)


def build_item(text, source="app_store", rating=None, provenance=Provenance.REAL,
               days=0, engagement=None, sentiment=None, url=None):
    provenance = Provenance(provenance)
    return FeedbackItem(
        id=f"{source}:{next(_ids)}",
        source=source,
        text=text,
        timestamp=BASE_TIME + timedelta(days=days),
        provenance=provenance,
        rating=rating,
        engagement=engagement,
        sentiment=sentiment,
        tags=frozenset({source, provenance.value}),
        url=url,
    )


@pytest.fixture
def make_item():
    return build_item


@pytest.fixture
def report():
    return Report(
        summary=ReportSummary(
            total_feedback=12,
            real_data_percentage=50,
            real_reviews_percentage=56,
            source_breakdown={"app_store": 5, "reddit": 7},
            sentiment_breakdown=SentimentBreakdown(positive=4, negative=6, neutral=2),
            real_data_sources=["app_store"],
            mock_data_sources=["reddit"],
            health_score=48,
            average_rating=2.6,
            velocity={"reviews": 1.2, "social": 0.5},
        ),
        insights=[Insight(
            type=InsightType.CRITICAL,
            title="Performance Crisis Detected",
            description="Performance issues are damaging brand reputation across 2 channels",
            evidence=[Evidence("app_store", "11 items mention performance issues")],
            recommendation="Emergency performance optimization sprint required",
            expected_impact="Prevent 30% user churn, improve rating by 1.2 stars",
            confidence=0.92,
        )],
        recommendations=[Action(1, "Emergency performance optimization sprint required",
                                "Prevent 30% user churn", "high", "immediate")],
        issues=[Issue("Performance Issues", 11, ["App crashes..."], {"app_store": 11}, Sentiment.NEGATIVE)],
        trends=[Trend("price", TrendDirection.RISING, 0.2, 0.5)],
        viral_content=[ViralItem("reddit", "This app...", 150, Sentiment.NEGATIVE,
                                 "Address this criticism publicly to prevent further spread",
                                 "https://reddit.com/r/x")],
        generated_at=datetime(2024, 2, 1, 9, 30, tzinfo=timezone.utc),
    )
