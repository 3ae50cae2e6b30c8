"""Diagnostics for simulated responses."""

from .diagnostics import (
    DiagnosticResult,
    softmax,
    marginal_probabilities,
    category_frequencies,
    goodness_of_fit,
    cramers_v,
    latent_correlation_gap,
)

__all__ = [
    'DiagnosticResult',
    'softmax',
    'marginal_probabilities',
    'category_frequencies',
    'goodness_of_fit',
    'cramers_v',
    'latent_correlation_gap',
]
