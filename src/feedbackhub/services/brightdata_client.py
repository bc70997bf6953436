"""Bright Data review collection for star-rated sources."""

import logging
from typing import Any, Dict, List, Optional

import requests

from ..core.constants import OrchestrationConstants, SourceConstants
from ..core.errors import EmptyResultError, FetchError, ParseError
from ..core.models import Engagement, FeedbackItem, SourceQuery
from .adapters import SourceAdapter, coerce_count, coerce_rating, coerce_timestamp
from .storage import RawPayloadStore

logger = logging.getLogger(__name__)


class BrightDataClient:
    """Client for the Bright Data dataset trigger API."""

    def __init__(
        self,
        api_key: str,
        customer_id: str = "",
        base_url: str = "https://api.brightdata.com",
        session: Optional[requests.Session] = None,
        timeout: int = OrchestrationConstants.REQUEST_TIMEOUT,
    ):
        self.api_key = api_key
        self.customer_id = customer_id
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        } if self.api_key else {}

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def trigger(self, collector: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Run a dataset collector and return its records."""
        if not self.configured:
            raise FetchError("Bright Data API key not configured")

        try:
            response = self.session.post(
                f"{self.base_url}/datasets/v3/trigger",
                headers=self.headers,
                json={
                    "customer_id": self.customer_id,
                    "collector": collector,
                    "params": params,
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise FetchError(f"{collector} request failed: {e}") from e

        if response.status_code != 200:
            raise FetchError(f"{collector} failed: {response.status_code} - {response.text[:200]}")

        try:
            data = response.json()
        except ValueError as e:
            raise ParseError(f"{collector} returned a non-JSON body") from e

        if isinstance(data, dict) and isinstance(data.get("data"), list):
            data = data["data"]
        if not isinstance(data, list):
            raise ParseError(f"{collector} returned {type(data).__name__}, expected a list of records")

        logger.info(f"Bright Data {collector}: {len(data)} records")
        return data


class BrightDataReviewAdapter(SourceAdapter):
    """
    Maps Bright Data collector records onto FeedbackItems.

    Subclasses name the collector and the vendor fields it uses. Individual
    malformed records are skipped; a payload where every record is malformed
    marks the source as failed.
    """

    collector: str = ""
    id_field: Optional[str] = None
    text_field: str = "review_text"
    rating_field: str = "rating"
    date_field: str = "date"
    author_field: Optional[str] = None
    helpful_field: Optional[str] = None

    def __init__(self, client: BrightDataClient, raw_store: Optional[RawPayloadStore] = None):
        super().__init__(raw_store)
        self.client = client

    def _params(self, query: SourceQuery) -> Dict[str, Any]:
        return {"limit": min(query.limit, SourceConstants.BRIGHT_DATA_MAX_LIMIT)}

    def _text(self, record: Dict[str, Any]) -> str:
        return record.get(self.text_field) or ""

    def _fetch_items(self, query: SourceQuery) -> List[FeedbackItem]:
        if not query.identifier:
            raise FetchError("no identifier given", source=self.source)
        logger.info(f"🔍 Fetching {self.source} reviews for {query.identifier}...")
        records = self.client.trigger(self.collector, self._params(query))
        self.archive(f"{self.source}_reviews", {"identifier": query.identifier, "records": records})

        if not records:
            raise EmptyResultError(f"no reviews found for '{query.identifier}'", source=self.source)

        items = []
        malformed = 0
        for record in records:
            try:
                items.append(self._to_item(record))
            except (ParseError, KeyError, TypeError, AttributeError) as e:
                malformed += 1
                logger.warning(f"Skipping malformed {self.source} record: {e}")

        if not items:
            raise ParseError(f"all {malformed} records were malformed", source=self.source)
        logger.info(f"✅ {self.source}: mapped {len(items)} reviews ({malformed} skipped)")
        return items

    def _to_item(self, record: Dict[str, Any]) -> FeedbackItem:
        helpful = coerce_count(record.get(self.helpful_field)) if self.helpful_field else 0
        return self.make_item(
            vendor_id=str(record[self.id_field]) if self.id_field and record.get(self.id_field) else None,
            text=self._text(record),
            rating=coerce_rating(record.get(self.rating_field)),
            timestamp=coerce_timestamp(record[self.date_field]),
            author=record.get(self.author_field) if self.author_field else None,
            engagement=Engagement(likes=helpful) if helpful else None,
            url=record.get("url"),
        )


class GooglePlayAdapter(BrightDataReviewAdapter):
    source = SourceConstants.GOOGLE_PLAY
    collector = "google_play_reviews"
    id_field = "review_id"
    text_field = "review_text"
    author_field = "reviewer_name"
    helpful_field = "thumbs_up_count"

    def _params(self, query: SourceQuery) -> Dict[str, Any]:
        params = super()._params(query)
        params.update({"app_id": query.identifier, "sort": "newest", "include_developer_reply": True})
        return params


class AppStoreAdapter(BrightDataReviewAdapter):
    source = SourceConstants.APP_STORE
    collector = "app_store_reviews"
    id_field = "review_id"
    text_field = "review"
    author_field = "user_name"
    helpful_field = "helpful_count"

    def _params(self, query: SourceQuery) -> Dict[str, Any]:
        params = super()._params(query)
        params.update({"app_id": query.identifier, "country": "us", "sort": "recent"})
        return params


class GoogleReviewsAdapter(BrightDataReviewAdapter):
    source = SourceConstants.GOOGLE_REVIEWS
    collector = "google_maps_reviews"
    id_field = "review_id"
    text_field = "review_text"
    date_field = "review_date"
    author_field = "reviewer_name"

    def _params(self, query: SourceQuery) -> Dict[str, Any]:
        params = super()._params(query)
        params["query"] = query.identifier
        return params


class TrustpilotAdapter(BrightDataReviewAdapter):
    source = SourceConstants.TRUSTPILOT
    collector = "trustpilot_reviews"
    id_field = "review_id"
    text_field = "review_content"
    date_field = "review_date"
    author_field = "reviewer_name"
    helpful_field = "useful_count"

    def _params(self, query: SourceQuery) -> Dict[str, Any]:
        params = super()._params(query)
        params["domain"] = query.identifier
        return params


class GlassdoorAdapter(BrightDataReviewAdapter):
    source = SourceConstants.GLASSDOOR
    collector = "glassdoor_reviews"
    id_field = "review_id"
    date_field = "review_date"
    author_field = "job_title"
    helpful_field = "helpful_count"

    def _params(self, query: SourceQuery) -> Dict[str, Any]:
        params = super()._params(query)
        params["company"] = query.identifier
        return params

    def _text(self, record: Dict[str, Any]) -> str:
        pros = (record.get("pros") or "").strip()
        cons = (record.get("cons") or "").strip()
        if not pros and not cons:
            return ""
        return f"Pros: {pros}\nCons: {cons}"
