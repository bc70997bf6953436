"""Rule-based analysis stages for FeedbackHub."""

from .aggregator import Aggregator
from .insights import InsightCorrelator
from .issues import IssueExtractor
from .recommendations import RecommendationGenerator
from .sentiment import SentimentClassifier
from .trends import TrendAnalyzer

__all__ = [
    "Aggregator",
    "SentimentClassifier",
    "IssueExtractor",
    "TrendAnalyzer",
    "InsightCorrelator",
    "RecommendationGenerator",
]
