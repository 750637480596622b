"""
LabSight - Laboratory Equipment Identifier

Identifies lab equipment a camera is pointed at by fusing a generic
object classifier's noisy output with priors about what is plausible
in a laboratory. The engine provides:
- Semantic similarity between classifier labels and equipment kinds
- Bayesian re-ranking of equipment beliefs
- A bounded detection history for temporal reasoning
- A timer-driven detection session that reconciles on-screen markers
"""

__version__ = "0.1.0"
