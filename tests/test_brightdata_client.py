"""Tests for the Bright Data client and review adapters."""

from unittest.mock import Mock

import pytest
import requests

from feedbackhub.core.errors import FetchError, ParseError
from feedbackhub.core.models import Provenance, SourceQuery, SourceStatus
from feedbackhub.services.brightdata_client import (
    AppStoreAdapter,
    BrightDataClient,
    GlassdoorAdapter,
    GooglePlayAdapter,
)


def make_response(payload=None, status_code=200, json_error=None):
    response = Mock()
    response.status_code = status_code
    response.text = "server says no"
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


def make_client(response=None, error=None):
    session = Mock()
    if error is not None:
        session.post.side_effect = error
    else:
        session.post.return_value = response
    return BrightDataClient("secret", customer_id="c-1", session=session, timeout=5), session


class TestBrightDataClient:
    """Test trigger calls and error translation."""

    def test_trigger_posts_collector_request(self):
        client, session = make_client(make_response([{"review_text": "hi"}]))
        records = client.trigger("google_play_reviews", {"app_id": "com.acme"})

        assert records == [{"review_text": "hi"}]
        session.post.assert_called_once_with(
            "https://api.brightdata.com/datasets/v3/trigger",
            headers={"Authorization": "Bearer secret", "Content-Type": "application/json"},
            json={"customer_id": "c-1", "collector": "google_play_reviews", "params": {"app_id": "com.acme"}},
            timeout=5,
        )

    def test_data_envelope_unwrapped(self):
        client, _ = make_client(make_response({"data": [{"a": 1}]}))
        assert client.trigger("x", {}) == [{"a": 1}]

    def test_missing_key(self):
        client = BrightDataClient("", session=Mock())
        with pytest.raises(FetchError):
            client.trigger("x", {})

    def test_http_error(self):
        client, _ = make_client(make_response(status_code=500))
        with pytest.raises(FetchError, match="500"):
            client.trigger("x", {})

    def test_transport_error(self):
        client, _ = make_client(error=requests.ConnectionError("refused"))
        with pytest.raises(FetchError):
            client.trigger("x", {})

    def test_non_json_body(self):
        client, _ = make_client(make_response(json_error=ValueError("no json")))
        with pytest.raises(ParseError):
            client.trigger("x", {})

    def test_unexpected_shape(self):
        client, _ = make_client(make_response({"status": "running"}))
        with pytest.raises(ParseError):
            client.trigger("x", {})


class TestReviewAdapters:
    """Test vendor record mapping."""

    def setup_method(self):
        self.query = SourceQuery(source="google_play", identifier="com.acme.app", limit=10)

    def test_google_play_mapping(self):
        records = [{
            "review_id": "r1",
            "review_text": "  Crashes on launch  ",
            "rating": "2",
            "date": "2024-01-20T10:00:00Z",
            "reviewer_name": "Sam",
            "thumbs_up_count": 7,
        }]
        client, session = make_client(make_response(records))
        result = GooglePlayAdapter(client).fetch(self.query)

        assert result.status is SourceStatus.OK
        item = result.items[0]
        assert item.id == "google_play:r1"
        assert item.text == "Crashes on launch"
        assert item.rating == 2
        assert item.engagement.likes == 7
        assert item.author == "Sam"
        assert item.provenance is Provenance.REAL
        assert item.tags == {"google_play", "real"}
        assert item.sentiment is None

        params = session.post.call_args.kwargs["json"]["params"]
        assert params["app_id"] == "com.acme.app"

    def test_app_store_params(self):
        client, session = make_client(make_response([{"review": "Fine", "date": "2024-01-01"}]))
        query = SourceQuery(source="app_store", identifier="123", limit=500)
        result = AppStoreAdapter(client).fetch(query)

        assert result.items[0].text == "Fine"
        params = session.post.call_args.kwargs["json"]["params"]
        assert params == {"limit": 100, "app_id": "123", "country": "us", "sort": "recent"}

    def test_glassdoor_text(self):
        records = [{"pros": "Good people", "cons": "Long hours", "rating": 3,
                    "review_date": "2024-01-05", "job_title": "Engineer", "helpful_count": 0}]
        client, _ = make_client(make_response(records))
        query = SourceQuery(source="glassdoor", identifier="Acme", limit=5)
        item = GlassdoorAdapter(client).fetch(query).items[0]

        assert item.text == "Pros: Good people\nCons: Long hours"
        assert item.author == "Engineer"
        assert item.engagement is None

    def test_malformed_records_skipped(self):
        records = [
            {"review_text": "ok", "date": "2024-01-01"},
            {"review_text": "no date"},
            {"review_text": "", "date": "2024-01-01"},
            {"review_text": "bad date", "date": "yesterday"},
        ]
        client, _ = make_client(make_response(records))
        result = GooglePlayAdapter(client).fetch(self.query)

        assert result.status is SourceStatus.OK
        assert [item.text for item in result.items] == ["ok"]

    def test_all_records_malformed(self):
        client, _ = make_client(make_response([{"review_text": "no date"}]))
        result = GooglePlayAdapter(client).fetch(self.query)

        assert result.status is SourceStatus.FAILED
        assert result.error.startswith("ParseError")

    def test_empty_payload(self):
        client, _ = make_client(make_response([]))
        result = GooglePlayAdapter(client).fetch(self.query)
        assert result.status is SourceStatus.EMPTY
        assert result.count == 0

    def test_transport_failure_becomes_failed_result(self):
        client, _ = make_client(error=requests.Timeout("slow"))
        result = GooglePlayAdapter(client).fetch(self.query)
        assert result.status is SourceStatus.FAILED
        assert "FetchError" in result.error

    def test_missing_identifier_skips_trigger(self):
        client, session = make_client(make_response([{"review": "Fine", "date": "2024-01-01"}]))
        query = SourceQuery(source="app_store", identifier="", limit=10)
        result = AppStoreAdapter(client).fetch(query)

        assert result.status is SourceStatus.FAILED
        assert "no identifier given" in result.error
        session.post.assert_not_called()

    def test_limit_applied(self):
        records = [{"review_text": f"review {i}", "date": "2024-01-01"} for i in range(20)]
        client, _ = make_client(make_response(records))
        assert GooglePlayAdapter(client).fetch(self.query).count == 10

    def test_raw_payload_archived(self):
        store = Mock()
        client, _ = make_client(make_response([{"review_text": "ok", "date": "2024-01-01"}]))
        GooglePlayAdapter(client, raw_store=store).fetch(self.query)
        assert store.save.call_args[0][0] == "google_play_reviews"

    def test_archive_failure_is_not_fatal(self):
        store = Mock()
        store.save.side_effect = OSError("read-only")
        client, _ = make_client(make_response([{"review_text": "ok", "date": "2024-01-01"}]))
        assert GooglePlayAdapter(client, raw_store=store).fetch(self.query).status is SourceStatus.OK
