"""Rule-based sentiment classification."""

import re
from typing import Iterable, List, Sequence

from ..core.constants import AnalysisConstants
from ..core.errors import ConfigurationError
from ..core.models import FeedbackItem, Sentiment
from ..core.report import SentimentBreakdown
from ..core.taxonomy import NEGATIVE_WORDS, POSITIVE_WORDS

RATING_RULES = ("threshold", "banded")


def _word_pattern(words: Sequence[str]) -> "re.Pattern":
    return re.compile(r"\b(" + "|".join(re.escape(w) for w in words) + r")\b", re.IGNORECASE)


class SentimentClassifier:
    """
    Labels items positive, negative or neutral.

    Rated items follow the configured rating rule; unrated items are scored
    by distinct positive minus distinct negative lexicon words. ``mixed`` is
    never assigned to a single item.
    """

    def __init__(self, rating_rule: str = "threshold"):
        if rating_rule not in RATING_RULES:
            raise ConfigurationError(f"Unknown rating rule '{rating_rule}', expected one of {RATING_RULES}")
        self.rating_rule = rating_rule
        self._positive = _word_pattern(POSITIVE_WORDS)
        self._negative = _word_pattern(NEGATIVE_WORDS)

    def classify(self, item: FeedbackItem) -> Sentiment:
        if item.rating is not None:
            return self.classify_rating(item.rating)
        return self.classify_text(item.text)

    def classify_rating(self, rating: int) -> Sentiment:
        if self.rating_rule == "banded":
            if rating > AnalysisConstants.RATING_BANDED_POSITIVE:
                return Sentiment.POSITIVE
            if rating <= AnalysisConstants.RATING_BANDED_NEGATIVE:
                return Sentiment.NEGATIVE
            return Sentiment.NEUTRAL
        if rating >= AnalysisConstants.RATING_POSITIVE_THRESHOLD:
            return Sentiment.POSITIVE
        return Sentiment.NEGATIVE

    def classify_text(self, text: str) -> Sentiment:
        positive = {m.lower() for m in self._positive.findall(text)}
        negative = {m.lower() for m in self._negative.findall(text)}
        score = len(positive) - len(negative)
        if score > 0:
            return Sentiment.POSITIVE
        if score < 0:
            return Sentiment.NEGATIVE
        return Sentiment.NEUTRAL

    def annotate(self, items: Iterable[FeedbackItem]) -> List[FeedbackItem]:
        """Return labelled copies; the inputs are left untouched."""
        return [item.with_sentiment(self.classify(item)) for item in items]

    @staticmethod
    def breakdown(items: Iterable[FeedbackItem]) -> SentimentBreakdown:
        counts = SentimentBreakdown()
        for item in items:
            if item.sentiment is Sentiment.POSITIVE:
                counts.positive += 1
            elif item.sentiment is Sentiment.NEGATIVE:
                counts.negative += 1
            elif item.sentiment is Sentiment.MIXED:
                counts.mixed += 1
            else:
                counts.neutral += 1
        return counts
