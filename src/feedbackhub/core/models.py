"""Data models for FeedbackHub."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from .constants import SourceConstants
from .errors import ConfigurationError


class Provenance(str, Enum):
    REAL = "real"
    SYNTHETIC = "synthetic"


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    MIXED = "mixed"


class SourceStatus(str, Enum):
    OK = "ok"
    FAILED = "failed"
    EMPTY = "empty"


def parse_datetime(value: Any) -> datetime:
    """Parse an ISO string or timestamp into an aware UTC datetime."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        dt = datetime.fromtimestamp(value, tz=timezone.utc)
    elif isinstance(value, str):
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    else:
        raise ValueError(f"Unsupported timestamp value: {value!r}")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


@dataclass(frozen=True)
class Engagement:
    """Engagement counters. Semantics vary by source; only ever added up."""
    likes: int = 0
    replies: int = 0
    upvotes: int = 0
    shares: int = 0

    def __post_init__(self):
        for name in ("likes", "replies", "upvotes", "shares"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"Engagement.{name} must be a non-negative int, got {value!r}")

    @property
    def total(self) -> int:
        return self.likes + self.replies + self.upvotes + self.shares

    def to_dict(self) -> Dict[str, int]:
        return {
            "likes": self.likes,
            "replies": self.replies,
            "upvotes": self.upvotes,
            "shares": self.shares,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Engagement":
        return cls(
            likes=int(data.get("likes", 0) or 0),
            replies=int(data.get("replies", 0) or 0),
            upvotes=int(data.get("upvotes", 0) or 0),
            shares=int(data.get("shares", 0) or 0),
        )


@dataclass(frozen=True)
class FeedbackItem:
    """One unit of user feedback from a single source.

    Instances are immutable. Analyzers derive annotated copies through
    ``with_sentiment`` / ``with_tags``; provenance is carried over unchanged.
    """
    id: str
    source: str
    text: str
    timestamp: datetime
    provenance: Provenance
    rating: Optional[int] = None
    author: Optional[str] = None
    engagement: Optional[Engagement] = None
    sentiment: Optional[Sentiment] = None
    tags: FrozenSet[str] = frozenset()
    url: Optional[str] = None

    def __post_init__(self):
        if not self.id:
            raise ValueError("FeedbackItem.id must be non-empty")
        if not self.source:
            raise ValueError("FeedbackItem.source must be non-empty")
        if not isinstance(self.text, str) or not self.text.strip():
            raise ValueError(f"FeedbackItem.text must be non-empty (id={self.id})")
        if self.rating is not None:
            if isinstance(self.rating, bool) or not isinstance(self.rating, int) or not 1 <= self.rating <= 5:
                raise ValueError(f"FeedbackItem.rating must be an int in 1..5, got {self.rating!r}")

        # Frozen dataclass: normalize through object.__setattr__ during construction only
        object.__setattr__(self, "provenance", Provenance(self.provenance))
        object.__setattr__(self, "timestamp", parse_datetime(self.timestamp))
        object.__setattr__(self, "tags", frozenset(self.tags))
        if self.sentiment is not None:
            object.__setattr__(self, "sentiment", Sentiment(self.sentiment))

    @property
    def is_real(self) -> bool:
        return self.provenance is Provenance.REAL

    def with_sentiment(self, sentiment: Sentiment) -> "FeedbackItem":
        return replace(self, sentiment=sentiment)

    def with_tags(self, tags: Iterable[str]) -> "FeedbackItem":
        return replace(self, tags=self.tags | frozenset(tags))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "text": self.text,
            "rating": self.rating,
            "timestamp": self.timestamp.isoformat(),
            "author": self.author,
            "engagement": self.engagement.to_dict() if self.engagement else None,
            "sentiment": self.sentiment.value if self.sentiment else None,
            "provenance": self.provenance.value,
            "tags": sorted(self.tags),
            "url": self.url,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeedbackItem":
        engagement = data.get("engagement")
        return cls(
            id=data["id"],
            source=data["source"],
            text=data["text"],
            rating=data.get("rating"),
            timestamp=parse_datetime(data["timestamp"]),
            author=data.get("author"),
            engagement=Engagement.from_dict(engagement) if engagement else None,
            sentiment=data.get("sentiment"),
            provenance=data["provenance"],
            tags=frozenset(data.get("tags") or ()),
            url=data.get("url"),
        )


@dataclass(frozen=True)
class SourceQuery:
    """What one adapter is asked to fetch."""
    source: str
    identifier: str
    limit: int
    time_range_days: Optional[int] = None

    def __post_init__(self):
        if self.limit <= 0:
            raise ConfigurationError(f"limit must be positive, got {self.limit}")

    @property
    def since(self) -> Optional[datetime]:
        if not self.time_range_days:
            return None
        return datetime.now(timezone.utc) - timedelta(days=self.time_range_days)


@dataclass
class FeedbackQuery:
    """Inbound collection request: which sources, what to look for, how much."""
    sources: List[str]
    identifiers: Dict[str, str] = field(default_factory=dict)
    limit: int = 50
    time_range_days: Optional[int] = None
    default_identifier: str = ""

    def validate(self) -> None:
        if not self.sources:
            raise ConfigurationError("At least one source must be configured")
        if len(set(self.sources)) != len(self.sources):
            raise ConfigurationError(f"Duplicate sources configured: {self.sources}")
        if self.limit <= 0:
            raise ConfigurationError(f"limit must be positive, got {self.limit}")
        if self.time_range_days is not None and self.time_range_days <= 0:
            raise ConfigurationError(f"timeRangeDays must be positive, got {self.time_range_days}")

    @property
    def since(self) -> Optional[datetime]:
        if not self.time_range_days:
            return None
        return datetime.now(timezone.utc) - timedelta(days=self.time_range_days)

    def for_source(self, source: str) -> SourceQuery:
        identifier = self.identifiers.get(source) or self.default_identifier
        return SourceQuery(
            source=source,
            identifier=identifier,
            limit=self.limit,
            time_range_days=self.time_range_days,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeedbackQuery":
        """
        Build a query from the inbound JSON shape.

        Explicit ``identifiers`` win; otherwise each source takes the
        top-level key of its kind (``appId``, ``companyName`` or ``searchQuery``).
        """
        sources = list(data.get("sources") or [])
        identifiers = dict(data.get("identifiers") or {})
        for source in sources:
            kind = SourceConstants.IDENTIFIER_KINDS.get(source, "searchQuery")
            if not identifiers.get(source) and data.get(kind):
                identifiers[source] = data[kind]
        return cls(
            sources=sources,
            identifiers=identifiers,
            limit=int(data.get("limit", 50)),
            time_range_days=data.get("timeRangeDays"),
            default_identifier=data.get("searchQuery", ""),
        )


@dataclass(frozen=True)
class SourceResult:
    """Outcome of one source attempt. Lives for a single orchestration run."""
    source: str
    items: Tuple[FeedbackItem, ...]
    status: SourceStatus
    provenance: Provenance
    error: Optional[str] = None
    fallback_reason: Optional[SourceStatus] = None
    attempts: int = 0

    @classmethod
    def ok(cls, source: str, items: Iterable[FeedbackItem],
           provenance: Provenance = Provenance.REAL) -> "SourceResult":
        return cls(source=source, items=tuple(items), status=SourceStatus.OK, provenance=provenance)

    @classmethod
    def failed(cls, source: str, error: str) -> "SourceResult":
        return cls(source=source, items=(), status=SourceStatus.FAILED,
                   provenance=Provenance.REAL, error=error)

    @classmethod
    def empty(cls, source: str, error: Optional[str] = None) -> "SourceResult":
        return cls(source=source, items=(), status=SourceStatus.EMPTY,
                   provenance=Provenance.REAL, error=error)

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def has_real_data(self) -> bool:
        return self.provenance is Provenance.REAL and self.count > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "status": self.status.value,
            "provenance": self.provenance.value,
            "count": self.count,
            "error": self.error,
            "fallbackReason": self.fallback_reason.value if self.fallback_reason else None,
            "attempts": self.attempts,
        }


@dataclass
class OrchestrationResult:
    """Fan-in of all source results for one run."""
    results: List[SourceResult]
    real_data_sources: List[str]
    mock_data_sources: List[str]
    real_data_percentage: int
    real_reviews_percentage: int
    total_items: int
    real_items: int
    elapsed_seconds: float = 0.0

    @property
    def total_sources(self) -> int:
        return len(self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_sources": self.total_sources,
            "real_data_sources": list(self.real_data_sources),
            "mock_data_sources": list(self.mock_data_sources),
            "real_data_percentage": self.real_data_percentage,
            "real_reviews_percentage": self.real_reviews_percentage,
            "total_reviews": self.total_items,
            "real_reviews": self.real_items,
            "mock_reviews": self.total_items - self.real_items,
            "sources": [r.to_dict() for r in self.results],
            "elapsed_seconds": round(self.elapsed_seconds, 3),
        }
