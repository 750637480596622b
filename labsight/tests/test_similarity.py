"""
Tests for the similarity scorer.

Tests:
- Each tier of the ladder
- Case-insensitivity
- Short-circuiting of earlier tiers
- Custom keyword tables
"""

import pytest

from ..recognition import (
    SimilarityScorer,
    EXACT_MATCH_SCORE,
    PARTIAL_MATCH_SCORE,
    KEYWORD_MATCH_SCORE,
    DEFAULT_SCORE,
)


@pytest.fixture
def scorer():
    return SimilarityScorer()


class TestSimilarityLadder:
    """Tests for the four similarity tiers."""

    def test_exact_match(self, scorer):
        """Identical strings score 1.0."""
        assert scorer.similarity("beaker", "beaker") == EXACT_MATCH_SCORE

    def test_exact_match_ignores_case(self, scorer):
        """Case does not matter for exact matches."""
        assert scorer.similarity("Bunsen Burner", "bunsen burner") == 1.0

    def test_substring_either_direction(self, scorer):
        """Containment qualifies whichever string is longer."""
        assert scorer.similarity("cup", "beaker-cup-combo") == PARTIAL_MATCH_SCORE
        assert scorer.similarity("beaker-cup-combo", "cup") == PARTIAL_MATCH_SCORE

    def test_substring_of_multiword_identity(self, scorer):
        """A label that is part of the identity name is a partial match."""
        assert scorer.similarity("tube", "test tube") == 0.8

    def test_keyword_association(self, scorer):
        """A label containing an associated keyword scores 0.6."""
        assert scorer.similarity("cup", "beaker") == KEYWORD_MATCH_SCORE
        assert scorer.similarity("lamp", "bunsen burner") == 0.6

    def test_keyword_inside_longer_label(self, scorer):
        """The keyword only needs to appear inside the label."""
        assert scorer.similarity("wine bottle", "flask") == 0.6

    def test_unrelated_label_gets_floor(self, scorer):
        """Unrelated labels score 0.1, never zero."""
        assert scorer.similarity("cup", "flask") == DEFAULT_SCORE
        assert scorer.similarity("person", "microscope") == 0.1

    def test_identity_without_keywords(self, scorer):
        """Identities missing from the keyword table fall through to the floor."""
        assert scorer.associations("wire gauze") == ()
        assert scorer.similarity("cup", "wire gauze") == 0.1

    def test_empty_label_gets_floor(self, scorer):
        """An empty label does not count as a substring match."""
        assert scorer.similarity("", "beaker") == DEFAULT_SCORE


class TestShortCircuit:
    """Earlier tiers win over later ones."""

    def test_exact_match_short_circuits_keyword_tier(self):
        """An exact match is 1.0 even when the label is also an associated keyword."""
        scorer = SimilarityScorer(keywords={"cup": ["cup"]})
        assert scorer.similarity("cup", "cup") == 1.0

    def test_exact_match_is_not_reported_as_partial(self, scorer):
        """Equal strings are substrings of each other but still score 1.0."""
        assert scorer.similarity("flask", "flask") != PARTIAL_MATCH_SCORE
        assert scorer.similarity("flask", "flask") == EXACT_MATCH_SCORE

    def test_partial_match_short_circuits_keyword_tier(self):
        """Containment wins over keyword association."""
        scorer = SimilarityScorer(keywords={"beaker": ["beak"]})
        assert scorer.similarity("beak", "beaker") == 0.8


class TestCustomKeywords:
    """Tests for caller-supplied keyword tables."""

    def test_custom_table_replaces_default(self):
        """A custom table is used instead of the built-in one."""
        scorer = SimilarityScorer(keywords={"centrifuge": ["drum"]})
        assert scorer.similarity("drum", "centrifuge") == 0.6
        assert scorer.similarity("cup", "beaker") == 0.1

    def test_custom_table_is_case_insensitive(self):
        """Table keys and terms are normalized."""
        scorer = SimilarityScorer(keywords={"Centrifuge": ["DRUM"]})
        assert scorer.associations("centrifuge") == ("drum",)
        assert scorer.similarity("Drum", "CENTRIFUGE") == 0.6
