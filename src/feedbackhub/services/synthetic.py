"""Synthetic fallback data for sources that could not deliver real feedback."""

import logging
import random
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from ..core.constants import MockDataConstants, SourceConstants
from ..core.models import FeedbackItem, Provenance, Sentiment, SourceQuery, SourceResult

logger = logging.getLogger(__name__)

# label -> (openers, details); every opener/detail pair is a distinct text
MOCK_TEXTS = {
    Sentiment.POSITIVE: (
        [
            "Love this app.",
            "Great experience overall.",
            "Excellent product, works as promised.",
            "Amazing update from the team.",
            "Best tool we have tried so far.",
        ],
        [
            "Fast shipping and good communication.",
            "The new dashboard makes daily work much easier.",
            "Setup took five minutes.",
            "Customer service answered within the hour.",
            "Sync between devices is seamless.",
        ],
    ),
    Sentiment.NEGATIVE: (
        [
            "Terrible experience lately.",
            "Very disappointing update.",
            "The app is broken again.",
            "Worst release so far.",
            "Awful customer experience.",
        ],
        [
            "App crashes constantly when trying to upload photos.",
            "The new update made everything so slow. It takes forever to load.",
            "Battery drain is insane, my phone dies in 2 hours.",
            "No response to my support tickets.",
            "Expensive subscription for what you get.",
        ],
    ),
    Sentiment.NEUTRAL: (
        [
            "Works okay for the basics.",
            "It does the job.",
            "Decent app with room to grow.",
            "Average experience so far.",
            "Mixed feelings after a month.",
        ],
        [
            "Interface is confusing in places.",
            "Missing key features that competitors have.",
            "Needs calendar integration.",
            "Would like an export option.",
            "Navigation could be simpler.",
        ],
    ),
}

RATING_RANGES = {
    Sentiment.POSITIVE: (4, 5),
    Sentiment.NEGATIVE: (1, 2),
    Sentiment.NEUTRAL: (3, 3),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SyntheticGenerator:
    """
    Produces plausible stand-in feedback for a source.

    Items are tagged ``provenance=synthetic`` and roughly follow a
    40/30/30 positive/negative/neutral mix. With a ``seed`` the output for a
    given source is reproducible across runs.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        items_per_source: int = MockDataConstants.MOCK_ITEM_COUNT,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.seed = seed
        self.items_per_source = items_per_source
        self.clock = clock or _utcnow

    def _rng(self, source: str) -> random.Random:
        if self.seed is None:
            return random.Random()
        return random.Random(f"{self.seed}:{source}")

    def _labels(self, rng: random.Random, count: int) -> List[Sentiment]:
        positive = round(count * MockDataConstants.POSITIVE_MOCK_RATIO)
        negative = round(count * MockDataConstants.NEGATIVE_MOCK_RATIO)
        neutral = max(0, count - positive - negative)
        labels = [Sentiment.POSITIVE] * positive + [Sentiment.NEGATIVE] * negative + [Sentiment.NEUTRAL] * neutral
        rng.shuffle(labels)
        return labels[:count]

    def _texts(self, rng: random.Random, label: Sentiment, count: int) -> List[str]:
        openers, details = MOCK_TEXTS[label]
        pairs = [f"{opener} {detail}" for opener in openers for detail in details]
        rng.shuffle(pairs)
        texts = []
        for i in range(count):
            text = pairs[i % len(pairs)]
            rounds = i // len(pairs)
            if rounds:
                text = f"{text} (follow-up {rounds})"
            texts.append(text)
        return texts

    def generate(self, query: SourceQuery) -> SourceResult:
        """Generate a synthetic result for ``query.source``."""
        source = query.source
        rng = self._rng(source)
        count = max(1, min(self.items_per_source, query.limit))
        labels = self._labels(rng, count)

        texts = {label: iter(self._texts(rng, label, labels.count(label))) for label in MOCK_TEXTS}
        now = self.clock()
        span_seconds = MockDataConstants.MOCK_SPAN_DAYS * 86400
        rated = source in SourceConstants.REVIEW_SOURCES

        items = []
        for label in labels:
            low, high = RATING_RANGES[label]
            items.append(FeedbackItem(
                id=f"synthetic:{source}:{uuid.UUID(int=rng.getrandbits(128)).hex}",
                source=source,
                text=next(texts[label]),
                timestamp=now - timedelta(seconds=rng.randint(0, span_seconds)),
                provenance=Provenance.SYNTHETIC,
                rating=rng.randint(low, high) if rated else None,
                author=f"user_{rng.randint(1000, 9999)}",
                tags=frozenset({source, Provenance.SYNTHETIC.value}),
            ))

        logger.debug(f"Generated {len(items)} synthetic items for {source}")
        return SourceResult.ok(source, items, provenance=Provenance.SYNTHETIC)
