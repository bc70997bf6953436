"""Tests for the core data model."""

import dataclasses
from datetime import datetime, timezone

import pytest

from feedbackhub.core.errors import ConfigurationError
from feedbackhub.core.models import (
    Engagement,
    FeedbackItem,
    FeedbackQuery,
    Provenance,
    Sentiment,
    SourceQuery,
    SourceResult,
    SourceStatus,
)


class TestFeedbackItem:
    """Test FeedbackItem validation and immutability."""

    def test_empty_text_rejected(self, make_item):
        with pytest.raises(ValueError):
            make_item("")
        with pytest.raises(ValueError):
            make_item("   \n ")

    @pytest.mark.parametrize("rating", [0, 6, -1, True, 4.5])
    def test_invalid_rating_rejected(self, make_item, rating):
        with pytest.raises(ValueError):
            make_item("Fine app", rating=rating)

    def test_rating_bounds_accepted(self, make_item):
        assert make_item("Bad", rating=1).rating == 1
        assert make_item("Good", rating=5).rating == 5

    def test_naive_timestamp_is_utc(self):
        item = FeedbackItem(
            id="x:1", source="x", text="hello", timestamp=datetime(2024, 3, 1, 12, 0),
            provenance="real",
        )
        assert item.timestamp.tzinfo == timezone.utc
        assert item.provenance is Provenance.REAL

    def test_iso_timestamp_with_z_suffix(self):
        item = FeedbackItem(id="x:1", source="x", text="hello",
                            timestamp="2024-03-01T12:00:00Z", provenance="synthetic")
        assert item.timestamp == datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

    def test_item_is_frozen(self, make_item):
        item = make_item("Great app")
        with pytest.raises(dataclasses.FrozenInstanceError):
            item.provenance = Provenance.SYNTHETIC

    def test_with_sentiment_returns_copy(self, make_item):
        item = make_item("Great app", provenance=Provenance.SYNTHETIC)
        labelled = item.with_sentiment(Sentiment.POSITIVE)

        assert item.sentiment is None
        assert labelled.sentiment is Sentiment.POSITIVE
        assert labelled.provenance is Provenance.SYNTHETIC
        assert labelled.id == item.id

    def test_with_tags_adds_to_existing(self, make_item):
        item = make_item("Slow app", source="reddit")
        tagged = item.with_tags(["issue:performance_issues"])
        assert tagged.tags == {"reddit", "real", "issue:performance_issues"}
        assert item.tags == {"reddit", "real"}

    def test_dict_round_trip(self, make_item):
        item = make_item(
            "Love it", source="reddit", rating=5,
            engagement=Engagement(upvotes=10, replies=2),
            sentiment=Sentiment.POSITIVE, url="https://reddit.com/r/x",
        )
        assert FeedbackItem.from_dict(item.to_dict()) == item


class TestEngagement:
    def test_total(self):
        assert Engagement(likes=1, replies=2, upvotes=3, shares=4).total == 10

    def test_negative_counts_rejected(self):
        with pytest.raises(ValueError):
            Engagement(likes=-1)


class TestQueries:
    """Test inbound query validation."""

    def test_no_sources_is_fatal(self):
        with pytest.raises(ConfigurationError):
            FeedbackQuery(sources=[]).validate()

    def test_duplicate_sources_rejected(self):
        with pytest.raises(ConfigurationError):
            FeedbackQuery(sources=["reddit", "reddit"]).validate()

    def test_non_positive_limit_rejected(self):
        with pytest.raises(ConfigurationError):
            FeedbackQuery(sources=["reddit"], limit=0).validate()
        with pytest.raises(ConfigurationError):
            SourceQuery(source="reddit", identifier="x", limit=0)

    def test_non_positive_time_range_rejected(self):
        with pytest.raises(ConfigurationError):
            FeedbackQuery(sources=["reddit"], time_range_days=0).validate()

    def test_from_dict_reads_wire_keys(self):
        query = FeedbackQuery.from_dict({
            "sources": ["app_store", "reddit"],
            "identifiers": {"app_store": "123"},
            "limit": 20,
            "timeRangeDays": 30,
            "searchQuery": "acme",
        })
        query.validate()

        assert query.for_source("app_store") == SourceQuery("app_store", "123", 20, 30)
        assert query.for_source("reddit").identifier == "acme"
        assert query.since is not None

    def test_from_dict_reads_identifier_kinds(self):
        query = FeedbackQuery.from_dict({
            "sources": ["app_store", "glassdoor", "google_reviews"],
            "appId": "123",
            "companyName": "Acme",
            "searchQuery": "Acme Cafe Berlin",
        })

        assert query.for_source("app_store").identifier == "123"
        assert query.for_source("glassdoor").identifier == "Acme"
        assert query.for_source("google_reviews").identifier == "Acme Cafe Berlin"

    def test_explicit_identifiers_win(self):
        query = FeedbackQuery.from_dict({
            "sources": ["app_store"],
            "identifiers": {"app_store": "999"},
            "appId": "123",
        })
        assert query.for_source("app_store").identifier == "999"

    def test_since_is_none_without_time_range(self):
        assert FeedbackQuery(sources=["reddit"]).since is None


class TestSourceResult:
    def test_has_real_data(self, make_item):
        real = SourceResult.ok("app_store", [make_item("ok")])
        synthetic = SourceResult.ok("app_store", [make_item("ok", provenance="synthetic")],
                                    provenance=Provenance.SYNTHETIC)
        empty = SourceResult.empty("app_store")

        assert real.has_real_data
        assert not synthetic.has_real_data
        assert not empty.has_real_data
        assert empty.status is SourceStatus.EMPTY

    def test_to_dict(self):
        failed = SourceResult.failed("reddit", "FetchError: boom")
        data = failed.to_dict()
        assert data["status"] == "failed"
        assert data["count"] == 0
        assert data["error"] == "FetchError: boom"
