"""Core modules for FeedbackHub."""

from .config import settings, Settings
from .errors import *
from .models import *
from .report import *

__all__ = [
    "settings",
    "Settings",
    "FeedbackItem",
    "Engagement",
    "Provenance",
    "Sentiment",
    "SourceStatus",
    "SourceQuery",
    "FeedbackQuery",
    "SourceResult",
    "OrchestrationResult",
    "Insight",
    "InsightType",
    "Evidence",
    "Action",
    "Issue",
    "Trend",
    "TrendDirection",
    "SentimentBreakdown",
    "ViralItem",
    "ReportSummary",
    "Report",
]
