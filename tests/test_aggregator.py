"""Tests for canonical feed aggregation."""

from datetime import timedelta

from feedbackhub.analysis.aggregator import Aggregator, normalize_text
from feedbackhub.core.models import Provenance, SourceResult, SourceStatus

from conftest import BASE_TIME


def test_normalize_text():
    assert normalize_text("  Great   APP! https://example.com/x \n") == "great app!"


class TestAggregator:
    """Test merging, de-duplication and filtering."""

    def setup_method(self):
        self.aggregator = Aggregator()

    def test_preserves_configured_order(self, make_item):
        first = SourceResult.ok("app_store", [make_item("a1"), make_item("a2")])
        second = SourceResult.ok("reddit", [make_item("r1", source="reddit")])

        feed = self.aggregator.merge([first, second])
        assert [item.text for item in feed] == ["a1", "a2", "r1"]

    def test_duplicates_within_source_dropped(self, make_item):
        original = make_item("Great app! https://example.com/promo")
        duplicate = make_item("great   app!")
        result = SourceResult.ok("app_store", [original, duplicate])

        feed = self.aggregator.merge([result])
        assert feed == [original]

    def test_same_text_from_different_sources_kept(self, make_item):
        feed = self.aggregator.merge([
            SourceResult.ok("app_store", [make_item("Too slow")]),
            SourceResult.ok("reddit", [make_item("Too slow", source="reddit")]),
        ])
        assert len(feed) == 2

    def test_dedupe_can_be_disabled(self, make_item):
        result = SourceResult.ok("app_store", [make_item("Same"), make_item("same")])
        assert len(Aggregator(dedupe=False).merge([result])) == 2

    def test_provenance_preserved(self, make_item):
        synthetic = SourceResult.ok(
            "reddit", [make_item("fake", source="reddit", provenance="synthetic")],
            provenance=Provenance.SYNTHETIC,
        )
        feed = self.aggregator.merge([synthetic])
        assert feed[0].provenance is Provenance.SYNTHETIC
        assert "synthetic" in feed[0].tags

    def test_malformed_entries_skipped(self, make_item):
        good = make_item("fine")
        wrong_source = make_item("elsewhere", source="reddit")
        result = SourceResult(
            source="app_store",
            items=("not an item", wrong_source, good),
            status=SourceStatus.OK,
            provenance=Provenance.REAL,
        )
        assert self.aggregator.merge([result]) == [good]

    def test_since_drops_older_items(self, make_item):
        old = make_item("old", days=0)
        recent = make_item("recent", days=10)
        result = SourceResult.ok("app_store", [old, recent])

        feed = self.aggregator.merge([result], since=BASE_TIME + timedelta(days=5))
        assert feed == [recent]
