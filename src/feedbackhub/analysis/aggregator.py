"""Merges per-source results into one canonical feed."""

import logging
import re
from datetime import datetime
from typing import Iterable, List, Optional, Set, Tuple

from ..core.errors import AggregationError
from ..core.models import FeedbackItem, SourceResult

logger = logging.getLogger(__name__)

URL_RE = re.compile(r"https?://\S+")
WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Lower-case, strip URLs and collapse whitespace for duplicate detection."""
    text = URL_RE.sub("", text or "")
    return WHITESPACE_RE.sub(" ", text.lower()).strip()


class Aggregator:
    """Flattens source results in configured order, optionally de-duplicating."""

    def __init__(self, dedupe: bool = True):
        self.dedupe = dedupe

    def merge(self, results: Iterable[SourceResult], since: Optional[datetime] = None) -> List[FeedbackItem]:
        """
        Build the canonical feed.

        Items keep their provenance and tags. With ``dedupe`` the first item
        for each ``(source, normalized text)`` wins. Items older than
        ``since`` are dropped. Malformed entries are logged and skipped.
        """
        feed: List[FeedbackItem] = []
        seen: Set[Tuple[str, str]] = set()
        duplicates = 0
        stale = 0

        for result in results:
            for item in result.items:
                try:
                    self._check(item, result)
                except AggregationError as e:
                    logger.warning(f"Skipping malformed item: {e}")
                    continue

                if since is not None and item.timestamp < since:
                    stale += 1
                    continue

                if self.dedupe:
                    key = (item.source, normalize_text(item.text))
                    if key in seen:
                        duplicates += 1
                        continue
                    seen.add(key)
                feed.append(item)

        logger.info(f"Aggregated {len(feed)} items ({duplicates} duplicates, {stale} outside time range)")
        return feed

    @staticmethod
    def _check(item: object, result: SourceResult) -> None:
        if not isinstance(item, FeedbackItem):
            raise AggregationError(f"{result.source}: expected FeedbackItem, got {type(item).__name__}")
        if item.source != result.source:
            raise AggregationError(f"item {item.id} claims source {item.source} inside {result.source} result")
