"""
Recognition Layer - Turns raw classifier labels into equipment beliefs.

Architecture:
    (label, confidence) -> SimilarityScorer -> BeliefEngine -> ranked posteriors
                                                   |
                                             HistoryLedger (temporal verdict)

The priors and likelihoods are heuristics, not learned values. The
ranking they produce is what matters, not calibrated probabilities.
"""

from .similarity import (
    SimilarityScorer,
    LAB_KEYWORDS,
    EXACT_MATCH_SCORE,
    PARTIAL_MATCH_SCORE,
    KEYWORD_MATCH_SCORE,
    DEFAULT_SCORE,
)
from .belief import BeliefEngine, MARGINAL_FLOOR, DEFAULT_PRIOR
from .history import HistoryLedger, HistoryRecord, HistoryVerdict, HistoryStatistics

__all__ = [
    "SimilarityScorer",
    "LAB_KEYWORDS",
    "EXACT_MATCH_SCORE",
    "PARTIAL_MATCH_SCORE",
    "KEYWORD_MATCH_SCORE",
    "DEFAULT_SCORE",
    "BeliefEngine",
    "MARGINAL_FLOOR",
    "DEFAULT_PRIOR",
    "HistoryLedger",
    "HistoryRecord",
    "HistoryVerdict",
    "HistoryStatistics",
]
