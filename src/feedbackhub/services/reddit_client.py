"""Reddit feedback collection service."""

import logging
from typing import List, Optional, Sequence

import praw
from prawcore.exceptions import PrawcoreException

from ..core.constants import SourceConstants
from ..core.errors import EmptyResultError, FetchError, ParseError
from ..core.models import Engagement, FeedbackItem, SourceQuery
from .adapters import SourceAdapter, coerce_count, coerce_timestamp
from .storage import RawPayloadStore

logger = logging.getLogger(__name__)

STOP_USERS = {"AutoModerator"}


def _time_filter(days: Optional[int]) -> str:
    """Map a time range onto Reddit's search time filters."""
    if not days:
        return "all"
    if days <= 1:
        return "day"
    if days <= 7:
        return "week"
    if days <= 31:
        return "month"
    if days <= 365:
        return "year"
    return "all"


class RedditAdapter(SourceAdapter):
    """Searches Reddit submissions mentioning the product."""

    source = SourceConstants.REDDIT

    def __init__(
        self,
        reddit: Optional[praw.Reddit] = None,
        client_id: str = "",
        client_secret: str = "",
        user_agent: str = "",
        subreddits: Sequence[str] = ("all",),
        raw_store: Optional[RawPayloadStore] = None,
    ):
        super().__init__(raw_store)
        self.subreddits = list(subreddits) or ["all"]
        self.reddit = reddit
        if self.reddit is None:
            self._init_reddit(client_id, client_secret, user_agent)

    def _init_reddit(self, client_id: str, client_secret: str, user_agent: str) -> None:
        """Initialize Reddit client."""
        if client_id and client_secret and user_agent:
            try:
                self.reddit = praw.Reddit(
                    client_id=client_id,
                    client_secret=client_secret,
                    user_agent=user_agent,
                )
                logger.info("Reddit client initialized successfully")
            except Exception as e:
                logger.error(f"Failed to initialize Reddit client: {e}")
                self.reddit = None
        else:
            logger.warning("Reddit credentials not provided, source will fall back to synthetic data")

    def _fetch_items(self, query: SourceQuery) -> List[FeedbackItem]:
        if self.reddit is None:
            raise FetchError("Reddit client not configured", source=self.source)
        if not query.identifier:
            raise FetchError("no search query given", source=self.source)

        bucket = "+".join(self.subreddits)
        logger.info(f"🔍 Searching r/{bucket} for '{query.identifier}'...")
        try:
            submissions = list(self.reddit.subreddit(bucket).search(
                query.identifier,
                sort="new",
                time_filter=_time_filter(query.time_range_days),
                limit=min(query.limit, SourceConstants.REDDIT_MAX_LIMIT),
            ))
        except PrawcoreException as e:
            raise FetchError(f"Reddit search failed: {e}", source=self.source) from e

        items = []
        raw = []
        malformed = 0
        for submission in submissions:
            author = str(getattr(submission, "author", "") or "")
            if author in STOP_USERS:
                continue
            text = " ".join(
                part for part in (getattr(submission, "title", ""), getattr(submission, "selftext", "")) if part
            )
            if not text.strip():
                continue
            permalink = getattr(submission, "permalink", "")
            raw.append({
                "id": submission.id,
                "title": getattr(submission, "title", ""),
                "score": getattr(submission, "score", 0),
                "num_comments": getattr(submission, "num_comments", 0),
                "created_utc": getattr(submission, "created_utc", None),
                "permalink": permalink,
            })
            try:
                items.append(self.make_item(
                    vendor_id=submission.id,
                    text=text,
                    timestamp=coerce_timestamp(getattr(submission, "created_utc", None)),
                    author=author or None,
                    engagement=Engagement(
                        upvotes=coerce_count(getattr(submission, "score", 0)),
                        replies=coerce_count(getattr(submission, "num_comments", 0)),
                    ),
                    url=f"https://reddit.com{permalink}" if permalink else None,
                ))
            except ParseError as e:
                malformed += 1
                logger.warning(f"Skipping malformed reddit submission {submission.id}: {e}")

        self.archive("reddit_mentions", {"query": query.identifier, "submissions": raw})
        if not items and malformed:
            raise ParseError(f"all {malformed} submissions were malformed", source=self.source)
        if not items:
            raise EmptyResultError(f"no submissions found for '{query.identifier}'", source=self.source)
        logger.info(f"✅ reddit: collected {len(items)} submissions ({malformed} skipped)")
        return items
