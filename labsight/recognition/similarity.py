"""
Similarity Scorer - Semantic closeness between a classifier label and an identity.

The classifier knows generic objects ("cup", "bottle"), not lab equipment.
The scorer bridges that gap with a fixed ladder, first match wins:

1. Exact match (case-insensitive)          -> 1.0
2. One string contains the other           -> 0.8
3. Label contains an associated keyword    -> 0.6
4. Anything else                           -> 0.1

The floor is never zero so an unrelated label cannot collapse a
posterior to exactly zero.
"""

from __future__ import annotations
from typing import Iterable, Mapping


EXACT_MATCH_SCORE = 1.0
PARTIAL_MATCH_SCORE = 0.8
KEYWORD_MATCH_SCORE = 0.6
DEFAULT_SCORE = 0.1


# Generic classifier labels that commonly stand in for each equipment kind
LAB_KEYWORDS: dict[str, tuple[str, ...]] = {
    "beaker": ("cup", "bottle", "container"),
    "flask": ("bottle", "container"),
    "test tube": ("cup", "bottle"),
    "pipette": ("stick", "tool"),
    "burette": ("stick", "tool", "bottle"),
    "microscope": ("instrument", "device"),
    "bunsen burner": ("lamp", "light"),
}


class SimilarityScorer:
    """
    Pure, deterministic label-to-identity similarity.

    Usage:
        scorer = SimilarityScorer()
        scorer.similarity("cup", "beaker")  # 0.6 via keyword association
    """

    def __init__(self, keywords: Mapping[str, Iterable[str]] | None = None):
        source = LAB_KEYWORDS if keywords is None else keywords
        self._keywords: dict[str, tuple[str, ...]] = {
            identity.lower(): tuple(term.lower() for term in terms)
            for identity, terms in source.items()
        }

    def associations(self, identity: str) -> tuple[str, ...]:
        """Keywords associated with an identity (empty if none)."""
        return self._keywords.get(identity.lower(), ())

    def similarity(self, detected_label: str, identity: str) -> float:
        """Score how closely a detected label matches an identity."""
        detected = detected_label.lower()
        equipment = identity.lower()

        # An empty label would be a substring of everything
        if not detected:
            return DEFAULT_SCORE

        if detected == equipment:
            return EXACT_MATCH_SCORE

        if detected in equipment or equipment in detected:
            return PARTIAL_MATCH_SCORE

        if any(term in detected for term in self.associations(equipment)):
            return KEYWORD_MATCH_SCORE

        return DEFAULT_SCORE
