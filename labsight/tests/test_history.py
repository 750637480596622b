"""
Tests for the history ledger.
"""

import pytest

from ..recognition import HistoryLedger, HistoryVerdict


class TestHistoryLedger:
    """Tests for HistoryLedger."""

    def test_add_records_timestamp(self, ledger):
        """Records carry the clock's timestamp."""
        record = ledger.add("beaker", 0.7)

        assert record.identity == "beaker"
        assert record.confidence == 0.7
        assert record.timestamp == 1.0
        assert len(ledger) == 1

    def test_capacity_evicts_oldest(self, ledger):
        """The 51st record pushes out the first; order is kept."""
        for i in range(51):
            ledger.add(f"item{i}", 0.5)

        assert len(ledger) == 50
        identities = [r.identity for r in ledger.records]
        assert identities[0] == "item1"
        assert identities[-1] == "item50"
        assert identities == [f"item{i}" for i in range(1, 51)]

    def test_custom_capacity(self):
        """Capacity is configurable."""
        ledger = HistoryLedger(capacity=2)
        for identity in ["beaker", "flask", "pipette"]:
            ledger.add(identity, 0.5)
        assert [r.identity for r in ledger.records] == ["flask", "pipette"]

    def test_invalid_capacity(self):
        """Capacity must be positive."""
        with pytest.raises(ValueError):
            HistoryLedger(capacity=0)

    def test_most_likely_empty(self, ledger):
        """An empty ledger has no verdict."""
        assert ledger.most_likely() == HistoryVerdict(identity=None, score=0.0)

    def test_most_likely_count_times_average(self, ledger):
        """Frequent moderate detections beat one strong detection."""
        ledger.add("flask", 0.9)
        ledger.add("beaker", 0.5)
        ledger.add("beaker", 0.6)

        verdict = ledger.most_likely()

        assert verdict.identity == "beaker"
        assert verdict.score == pytest.approx(1.1)

    def test_most_likely_tie_keeps_first_seen(self, ledger):
        """On equal scores the identity seen first wins."""
        ledger.add("flask", 0.4)
        ledger.add("beaker", 0.4)

        assert ledger.most_likely().identity == "flask"

    def test_most_likely_zero_confidences(self, ledger):
        """A ledger of zero-confidence records still names an identity."""
        ledger.add("unknown", 0.0)
        ledger.add("beaker", 0.0)

        verdict = ledger.most_likely()

        assert verdict.identity == "unknown"
        assert verdict.score == 0.0

    def test_eviction_changes_verdict(self):
        """Only records still in the ledger count."""
        ledger = HistoryLedger(capacity=3)
        ledger.add("flask", 0.9)
        ledger.add("flask", 0.9)
        ledger.add("beaker", 0.5)
        assert ledger.most_likely().identity == "flask"

        for _ in range(3):
            ledger.add("beaker", 0.5)

        assert ledger.most_likely().identity == "beaker"

    def test_statistics(self, ledger):
        """Statistics summarize the ledger and copy the posteriors."""
        ledger.add("beaker", 0.5)
        ledger.add("flask", 0.2)
        ledger.add("beaker", 0.7)
        posteriors = {"beaker": 0.6, "flask": 0.1}

        stats = ledger.statistics(posteriors)

        assert stats.total_count == 3
        assert stats.unique_identity_count == 2
        assert stats.most_likely.identity == "beaker"
        assert stats.most_likely.score == pytest.approx(1.2)
        assert stats.current_posteriors == posteriors
        assert stats.current_posteriors is not posteriors

    def test_statistics_without_posteriors(self, ledger):
        """Posteriors default to empty."""
        stats = ledger.statistics()
        assert stats.total_count == 0
        assert stats.unique_identity_count == 0
        assert stats.current_posteriors == {}

    def test_clear(self, ledger):
        """clear drops every record."""
        ledger.add("beaker", 0.5)
        ledger.clear()

        assert len(ledger) == 0
        assert ledger.most_likely().identity is None
