"""Recurring-issue extraction by keyword category."""

import logging
from collections import Counter
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ..core.constants import AnalysisConstants
from ..core.models import FeedbackItem, Sentiment
from ..core.report import Issue
from ..core.taxonomy import ISSUE_CATEGORIES, slugify

logger = logging.getLogger(__name__)


def truncate(text: str, length: int) -> str:
    if len(text) <= length:
        return text
    return text[:length] + "..."


class IssueExtractor:
    """Counts items per issue category and picks representative complaints."""

    def __init__(self, categories: Optional[Mapping[str, Sequence[str]]] = None):
        self.categories = dict(categories or ISSUE_CATEGORIES)

    def matches(self, item: FeedbackItem) -> List[str]:
        """Categories whose keywords appear in the item text."""
        text = item.text.lower()
        return [
            category for category, keywords in self.categories.items()
            if any(keyword in text for keyword in keywords)
        ]

    def extract(self, items: Sequence[FeedbackItem]) -> List[Issue]:
        matched: Dict[str, List[FeedbackItem]] = {category: [] for category in self.categories}
        for item in items:
            for category in self.matches(item):
                matched[category].append(item)

        issues = []
        for category, hits in matched.items():
            if not hits:
                continue
            issues.append(Issue(
                category=category,
                count=len(hits),
                examples=self._examples(hits),
                source_counts=dict(Counter(item.source for item in hits)),
                sentiment=self._aggregate_sentiment(hits),
            ))

        issues.sort(key=lambda issue: issue.count, reverse=True)
        return issues

    def annotate(self, items: Iterable[FeedbackItem]) -> List[FeedbackItem]:
        """Return copies tagged with ``issue:<slug>`` for every matching category."""
        annotated = []
        for item in items:
            categories = self.matches(item)
            if categories:
                item = item.with_tags(f"issue:{slugify(category)}" for category in categories)
            annotated.append(item)
        return annotated

    @staticmethod
    def _is_complaint(item: FeedbackItem) -> bool:
        if item.rating is not None:
            return item.rating <= AnalysisConstants.EXAMPLE_RATING_CEILING
        return item.sentiment is Sentiment.NEGATIVE

    def _examples(self, hits: List[FeedbackItem]) -> List[str]:
        complaints = [item for item in hits if self._is_complaint(item)]
        others = [item for item in hits if not self._is_complaint(item)]
        chosen = (complaints + others)[:AnalysisConstants.MAX_ISSUE_EXAMPLES]
        return [truncate(item.text, AnalysisConstants.MAX_EXAMPLE_LENGTH) for item in chosen]

    @staticmethod
    def _aggregate_sentiment(hits: List[FeedbackItem]) -> Sentiment:
        positive = sum(1 for item in hits if item.sentiment is Sentiment.POSITIVE)
        negative = sum(1 for item in hits if item.sentiment is Sentiment.NEGATIVE)
        if positive and negative:
            if positive >= 2 * negative:
                return Sentiment.POSITIVE
            if negative >= 2 * positive:
                return Sentiment.NEGATIVE
            return Sentiment.MIXED
        if negative:
            return Sentiment.NEGATIVE
        if positive:
            return Sentiment.POSITIVE
        return Sentiment.NEUTRAL
