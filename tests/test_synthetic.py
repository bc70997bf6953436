"""Tests for synthetic fallback generation."""

from datetime import datetime, timedelta, timezone

from feedbackhub.analysis.aggregator import normalize_text
from feedbackhub.core.models import Provenance, SourceQuery, SourceStatus
from feedbackhub.services.synthetic import SyntheticGenerator

NOW = datetime(2024, 2, 1, tzinfo=timezone.utc)


def generate(source="app_store", limit=50, **kwargs):
    kwargs.setdefault("clock", lambda: NOW)
    generator = SyntheticGenerator(**kwargs)
    return generator.generate(SourceQuery(source=source, identifier="acme", limit=limit))


class TestSyntheticGenerator:
    def test_items_are_synthetic(self):
        result = generate(seed=1)

        assert result.status is SourceStatus.OK
        assert result.provenance is Provenance.SYNTHETIC
        assert result.count == 10
        for item in result.items:
            assert item.provenance is Provenance.SYNTHETIC
            assert item.tags == {"app_store", "synthetic"}
            assert item.id.startswith("synthetic:app_store:")
            assert item.sentiment is None

    def test_seeded_output_is_reproducible(self):
        first = generate(seed=42)
        second = generate(seed=42)
        assert first.items == second.items

    def test_sources_get_different_streams(self):
        app_store = [item.text for item in generate("app_store", seed=42).items]
        play = [item.text for item in generate("google_play", seed=42).items]
        assert app_store != play

    def test_label_mix(self):
        ratings = [item.rating for item in generate(seed=5).items]
        assert sum(1 for r in ratings if r >= 4) == 4
        assert sum(1 for r in ratings if r <= 2) == 3
        assert sum(1 for r in ratings if r == 3) == 3

    def test_social_sources_are_unrated(self):
        assert all(item.rating is None for item in generate("reddit", seed=5).items)

    def test_texts_survive_deduplication(self):
        result = generate(seed=9, items_per_source=100, limit=100)
        texts = {normalize_text(item.text) for item in result.items}
        assert len(texts) == 100

    def test_limit_caps_count(self):
        assert generate(seed=1, limit=3).count == 3

    def test_timestamps_within_window(self):
        for item in generate(seed=2).items:
            assert NOW - timedelta(days=30) <= item.timestamp <= NOW
