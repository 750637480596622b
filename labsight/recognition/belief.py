"""
Belief Engine - Bayesian re-ranking of equipment identities.

For every candidate identity:

    posterior(i) = likelihood(i) * prior(i) / sum_j likelihood(j) * prior(j)

where the sum runs over every identity that currently has a prior.
An identity without an explicit likelihood contributes the current
observation's confidence in its place, so the marginal is a heuristic
and not a true P(observation).

State is NOT normalized or cleared between ticks:
- likelihoods are overwritten only for the identities just evaluated
- posteriors are overwritten only for the identities just evaluated
Entries for untouched identities stay as they were.

Invalid probabilities are rejected; the setters return False.
"""

from __future__ import annotations
from numbers import Real
from typing import Iterable

from .similarity import SimilarityScorer


# Substituted for a zero marginal to avoid division by zero
MARGINAL_FLOOR = 1e-4

# Prior assumed for an identity that was never given one
DEFAULT_PRIOR = 0.1


def is_probability(value: object) -> bool:
    """True if value is a real number in [0, 1] (NaN and bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return 0.0 <= value <= 1.0


class BeliefEngine:
    """
    Owns priors, likelihoods and posteriors over equipment identities.

    Usage:
        engine = BeliefEngine()
        engine.initialize_uniform_priors(["beaker", "flask", "microscope"])

        ranked = engine.update_belief("cup", 0.9, ["beaker", "flask", "microscope"])
        best_identity, best_posterior = next(iter(ranked.items()))
    """

    def __init__(self, scorer: SimilarityScorer | None = None):
        self.scorer = scorer or SimilarityScorer()

        self.priors: dict[str, float] = {}  # P(identity)
        self.likelihoods: dict[str, float] = {}  # P(observation | identity)
        self.posteriors: dict[str, float] = {}  # P(identity | observation)

    # =========================================================================
    # Setters
    # =========================================================================

    def set_prior(self, identity: str, probability: float) -> bool:
        """Set P(identity). Values outside [0, 1] are ignored."""
        if not is_probability(probability):
            return False
        self.priors[identity] = float(probability)
        return True

    def initialize_uniform_priors(self, identities: Iterable[str]) -> None:
        """Give every identity the same prior, 1 / len(identities)."""
        identities = list(identities)
        if not identities:
            return
        probability = 1.0 / len(identities)
        for identity in identities:
            self.priors[identity] = probability

    def set_likelihood(self, identity: str, likelihood: float) -> bool:
        """Set P(observation | identity). Values outside [0, 1] are ignored."""
        if not is_probability(likelihood):
            return False
        self.likelihoods[identity] = float(likelihood)
        return True

    def prime(self, identities: Iterable[str], base_likelihood: float) -> None:
        """
        Prepare beliefs for a catalog.

        Replaces existing priors and likelihoods with uniform priors and
        a shared base likelihood. Posteriors are left alone.
        """
        identities = list(identities)
        self.priors.clear()
        self.likelihoods.clear()
        self.initialize_uniform_priors(identities)
        for identity in identities:
            self.set_likelihood(identity, base_likelihood)

    def reset(self) -> None:
        """Forget all priors, likelihoods and posteriors."""
        self.priors.clear()
        self.likelihoods.clear()
        self.posteriors.clear()

    # =========================================================================
    # Inference
    # =========================================================================

    def calculate_posterior(self, identity: str, observed_confidence: float) -> float:
        """
        Compute P(identity | observation) with Bayes' rule.

        The marginal is recomputed over every identity in priors on
        every call. The result is stored in posteriors[identity].
        """
        prior = self.priors.get(identity, DEFAULT_PRIOR)
        likelihood = self.likelihoods.get(identity, observed_confidence)

        marginal = 0.0
        for other, other_prior in self.priors.items():
            marginal += self.likelihoods.get(other, observed_confidence) * other_prior

        if marginal == 0:
            marginal = MARGINAL_FLOOR

        # An identity without a prior is not part of the marginal and
        # could otherwise exceed 1
        posterior = min(1.0, max(0.0, likelihood * prior / marginal))
        self.posteriors[identity] = posterior
        return posterior

    def update_belief(
        self,
        detected_label: str,
        confidence: float,
        candidates: Iterable[str],
    ) -> dict[str, float]:
        """
        Re-rank candidate identities for one observation.

        Each candidate's likelihood becomes similarity * confidence before
        its posterior is computed. Returns identity -> posterior ordered by
        descending posterior; ties keep the candidates' order.
        """
        result: dict[str, float] = {}

        for identity in candidates:
            similarity = self.scorer.similarity(detected_label, identity)
            self.set_likelihood(identity, similarity * confidence)
            result[identity] = self.calculate_posterior(identity, confidence)

        ranked = sorted(result.items(), key=lambda item: item[1], reverse=True)
        return dict(ranked)
