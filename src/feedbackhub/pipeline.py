"""End-to-end collection and analysis pipeline."""

import logging
from typing import List, Optional, Sequence

import requests

from .analysis import (
    Aggregator,
    InsightCorrelator,
    IssueExtractor,
    RecommendationGenerator,
    SentimentClassifier,
    TrendAnalyzer,
)
from .analysis.issues import truncate
from .analysis.recommendations import split_by_channel
from .core.config import Settings
from .core.constants import AnalysisConstants
from .core.models import FeedbackItem, FeedbackQuery, OrchestrationResult, Sentiment
from .core.report import Report, ReportSummary, ViralItem
from .core.scoring import average_rating, feedback_velocity
from .core.taxonomy import load_analysis_rules
from .services.orchestrator import FallbackOrchestrator, build_adapters
from .services.storage import FeedbackSink, RawPayloadStore

logger = logging.getLogger(__name__)

RESPONSE_SUGGESTIONS = {
    Sentiment.POSITIVE: "Leverage this positive content in marketing materials",
    Sentiment.NEGATIVE: "Address this criticism publicly to prevent further spread",
}
DEFAULT_SUGGESTION = "Monitor discussion and engage if appropriate"


def viral_content(items: Sequence[FeedbackItem]) -> List[ViralItem]:
    """Most engaged items above the viral threshold, highest first."""
    engaged = [
        item for item in items
        if item.engagement and item.engagement.total > AnalysisConstants.VIRAL_ENGAGEMENT_THRESHOLD
    ]
    engaged.sort(key=lambda item: item.engagement.total, reverse=True)

    viral = []
    for item in engaged[:AnalysisConstants.MAX_VIRAL_ITEMS]:
        viral.append(ViralItem(
            source=item.source,
            text=truncate(item.text, AnalysisConstants.MAX_VIRAL_TEXT_LENGTH),
            engagement=item.engagement.total,
            sentiment=item.sentiment,
            suggestion=RESPONSE_SUGGESTIONS.get(item.sentiment, DEFAULT_SUGGESTION),
            url=item.url,
        ))
    return viral


class FeedbackPipeline:
    """Collects feedback for a query and turns it into a Report."""

    def __init__(
        self,
        orchestrator: FallbackOrchestrator,
        aggregator: Optional[Aggregator] = None,
        classifier: Optional[SentimentClassifier] = None,
        extractor: Optional[IssueExtractor] = None,
        trend_analyzer: Optional[TrendAnalyzer] = None,
        correlator: Optional[InsightCorrelator] = None,
        recommender: Optional[RecommendationGenerator] = None,
        sink: Optional[FeedbackSink] = None,
    ):
        self.orchestrator = orchestrator
        self.aggregator = aggregator or Aggregator()
        self.classifier = classifier or SentimentClassifier()
        self.extractor = extractor or IssueExtractor()
        self.trend_analyzer = trend_analyzer or TrendAnalyzer()
        self.correlator = correlator or InsightCorrelator()
        self.recommender = recommender or RecommendationGenerator()
        self.sink = sink
        self.last_orchestration: Optional[OrchestrationResult] = None

    def run(self, query: FeedbackQuery) -> Report:
        """Collect and analyze. The per-source outcome stays on ``last_orchestration``."""
        orchestration = self.orchestrator.collect(query)
        self.last_orchestration = orchestration
        feed = self.aggregator.merge(orchestration.results, since=query.since)
        return self.analyze(feed, orchestration)

    def analyze(self, feed: Sequence[FeedbackItem], orchestration: OrchestrationResult) -> Report:
        """Run the analysis stages over an aggregated feed."""
        items = self.classifier.annotate(feed)
        issues = self.extractor.extract(items)
        items = self.extractor.annotate(items)
        trends = self.trend_analyzer.analyze(items)
        insights = self.correlator.correlate(items)
        health = self.recommender.health_score(items)
        recommendations = self.recommender.generate(insights, health, issues)

        if self.sink is not None:
            try:
                self.sink.store_batch(items)
            except Exception as e:
                logger.error(f"Failed to store canonical feed: {e}")

        reviews, social = split_by_channel(items)
        source_breakdown = {result.source: 0 for result in orchestration.results}
        for item in items:
            source_breakdown[item.source] = source_breakdown.get(item.source, 0) + 1

        summary = ReportSummary(
            total_feedback=len(items),
            real_data_percentage=orchestration.real_data_percentage,
            real_reviews_percentage=orchestration.real_reviews_percentage,
            source_breakdown=source_breakdown,
            sentiment_breakdown=self.classifier.breakdown(items),
            real_data_sources=list(orchestration.real_data_sources),
            mock_data_sources=list(orchestration.mock_data_sources),
            health_score=health,
            average_rating=average_rating(items),
            velocity={
                "reviews": feedback_velocity(reviews),
                "social": feedback_velocity(social),
            },
        )
        logger.info(
            f"Report ready: {summary.total_feedback} items, health {health}, "
            f"{len(insights)} insights, {len(recommendations)} recommendations"
        )
        return Report(
            summary=summary,
            insights=insights,
            recommendations=recommendations,
            issues=issues,
            trends=trends,
            viral_content=viral_content(items),
        )


def build_pipeline(
    settings: Settings,
    query: FeedbackQuery,
    session: Optional[requests.Session] = None,
    reddit=None,
    raw_store: Optional[RawPayloadStore] = None,
    sink: Optional[FeedbackSink] = None,
) -> FeedbackPipeline:
    """Wire a pipeline for ``query`` from settings."""
    adapters = build_adapters(query, settings, session=session, reddit=reddit, raw_store=raw_store)
    orchestrator = FallbackOrchestrator.from_settings(adapters, settings, raw_store=raw_store)
    return FeedbackPipeline(
        orchestrator,
        aggregator=Aggregator(dedupe=settings.dedupe),
        classifier=SentimentClassifier(settings.rating_rule),
        correlator=InsightCorrelator(load_analysis_rules(settings.analysis_rules_file)),
        sink=sink,
    )
