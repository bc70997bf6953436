"""Source adapter abstraction."""

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Iterable, Optional

from ..core.errors import EmptyResultError, FetchError, ParseError
from ..core.models import Engagement, FeedbackItem, Provenance, SourceQuery, SourceResult, parse_datetime
from .storage import RawPayloadStore

logger = logging.getLogger(__name__)


class SourceAdapter(ABC):
    """
    Fetches feedback items for one external source.

    Subclasses implement ``_fetch_items`` and are free to raise ``FetchError``,
    ``ParseError`` or ``EmptyResultError`` from it. ``fetch`` turns every
    outcome into a ``SourceResult`` so nothing escapes past the orchestrator.
    Vendor payloads are mapped into ``FeedbackItem`` here, at the boundary;
    downstream code never sees vendor-specific fields.
    """

    source: str = ""

    def __init__(self, raw_store: Optional[RawPayloadStore] = None):
        self.raw_store = raw_store

    def fetch(self, query: SourceQuery) -> SourceResult:
        """Fetch up to ``query.limit`` items. Never raises."""
        try:
            items = list(self._fetch_items(query))
        except EmptyResultError as e:
            logger.info(f"{self.source}: no items for '{query.identifier}'")
            return SourceResult.empty(self.source, str(e))
        except (FetchError, ParseError) as e:
            logger.warning(f"❌ {self.source}: {type(e).__name__}: {e}")
            return SourceResult.failed(self.source, f"{type(e).__name__}: {e}")
        except Exception as e:
            logger.exception(f"❌ {self.source}: unexpected adapter error")
            return SourceResult.failed(self.source, f"{type(e).__name__}: {e}")

        if not items:
            return SourceResult.empty(self.source, "no items returned")
        return SourceResult.ok(self.source, items[:query.limit])

    @abstractmethod
    def _fetch_items(self, query: SourceQuery) -> Iterable[FeedbackItem]:
        """Fetch and map vendor records into real FeedbackItems."""

    def make_item(
        self,
        *,
        text: str,
        timestamp: Any,
        vendor_id: Optional[str] = None,
        rating: Optional[int] = None,
        author: Optional[str] = None,
        engagement: Optional[Engagement] = None,
        url: Optional[str] = None,
    ) -> FeedbackItem:
        """Build a real FeedbackItem for this source, raising ParseError if it is malformed."""
        item_id = f"{self.source}:{vendor_id}" if vendor_id else f"{self.source}:{uuid.uuid4().hex}"
        try:
            return FeedbackItem(
                id=item_id,
                source=self.source,
                text=(text or "").strip(),
                timestamp=timestamp,
                provenance=Provenance.REAL,
                rating=rating,
                author=author or None,
                engagement=engagement,
                tags=frozenset({self.source, Provenance.REAL.value}),
                url=url,
            )
        except ValueError as e:
            raise ParseError(str(e), source=self.source) from e

    def archive(self, prefix: str, payload: Any) -> None:
        """Hand a raw payload to the audit store, if one is configured."""
        if self.raw_store is None:
            return
        try:
            self.raw_store.save(prefix, payload)
        except Exception as e:
            # Auditing is not required for correctness
            logger.warning(f"Failed to archive {prefix} payload for {self.source}: {e}")


def coerce_rating(value: Any) -> Optional[int]:
    """Map a vendor rating onto 1..5, or None when absent or out of range."""
    if value is None or value == "":
        return None
    try:
        rating = int(round(float(value)))
    except (TypeError, ValueError):
        return None
    return rating if 1 <= rating <= 5 else None


def coerce_count(value: Any) -> int:
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError):
        return 0


def coerce_timestamp(value: Any) -> datetime:
    """Parse a vendor date, raising ParseError when it cannot be read."""
    try:
        return parse_datetime(value)
    except (TypeError, ValueError) as e:
        raise ParseError(f"unreadable date {value!r}") from e
