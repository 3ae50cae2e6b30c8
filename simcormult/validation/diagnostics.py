"""
Simulation Diagnostics
======================

Checks that simulated responses behave as the marginal model says:

- Marginal probabilities: softmax of the linear predictor per occasion
- Goodness of fit: chi-square test of observed category counts against the
  expected counts summed over subjects
- Association: Cramer's V between responses at two occasions
- NORTA gap: realized minus requested latent correlation

The NORTA gap is expected to be non-zero for non-normal margins; it is
reported, not tested against zero.
"""

from dataclasses import dataclass

import numpy as np
import pandas as pd
from scipy import stats


@dataclass
class DiagnosticResult:
    """Statistic and p-value of a diagnostic test."""
    statistic: float
    p_value: float
    dof: int

    def rejects(self, alpha: float = 0.05) -> bool:
        return self.p_value < alpha


def softmax(utilities: np.ndarray, axis: int = -1) -> np.ndarray:
    """
    Compute choice probabilities using softmax (logit formula).

    P(j) = exp(V_j) / sum_k exp(V_k)
    """
    u = utilities - np.max(utilities, axis=axis, keepdims=True)
    exp_u = np.exp(u)
    return exp_u / exp_u.sum(axis=axis, keepdims=True)


def marginal_probabilities(lin_pred: np.ndarray, clsize: int, ncategories: int) -> np.ndarray:
    """
    Logit-implied probabilities for every subject, occasion and category.

    Args:
        lin_pred: (R, clsize * ncategories) linear predictor
        clsize: Number of occasions T
        ncategories: Number of categories J

    Returns:
        (R, T, J) array of probabilities summing to 1 over the last axis
    """
    n_subjects = lin_pred.shape[0]
    return softmax(lin_pred.reshape(n_subjects, clsize, ncategories), axis=2)


def category_frequencies(responses: np.ndarray, ncategories: int,
                         normalize: bool = True) -> pd.DataFrame:
    """Category counts (or shares) by occasion; rows are occasions 1..T, columns 1..J."""
    counts = np.stack([
        np.bincount(responses[:, t] - 1, minlength=ncategories)
        for t in range(responses.shape[1])
    ])
    freq = pd.DataFrame(
        counts,
        index=pd.Index(range(1, responses.shape[1] + 1), name='time'),
        columns=pd.Index(range(1, ncategories + 1), name='category'),
    )
    if normalize:
        freq = freq.div(freq.sum(axis=1), axis=0)
    return freq


def goodness_of_fit(responses: np.ndarray, probabilities: np.ndarray, occasion: int) -> DiagnosticResult:
    """
    Chi-square goodness of fit of one occasion's responses.

    Args:
        responses: (R, T) simulated responses
        probabilities: (R, T, J) marginal probabilities
        occasion: 1-based occasion index

    Returns:
        DiagnosticResult with J - 1 degrees of freedom
    """
    t = occasion - 1
    ncategories = probabilities.shape[2]
    observed = np.bincount(responses[:, t] - 1, minlength=ncategories)
    expected = probabilities[:, t, :].sum(axis=0)
    # rescale so both sum to R exactly; chisquare checks the totals
    expected = expected * observed.sum() / expected.sum()
    statistic, p_value = stats.chisquare(observed, expected)
    return DiagnosticResult(float(statistic), float(p_value), ncategories - 1)


def cramers_v(a: np.ndarray, b: np.ndarray) -> tuple:
    """
    Cramer's V between two nominal vectors, with the chi-square independence test.

    Returns:
        (V, DiagnosticResult)
    """
    table = pd.crosstab(pd.Series(a, name='a'), pd.Series(b, name='b')).to_numpy()
    chi2, p_value, dof, _ = stats.chi2_contingency(table, correction=False)
    n = table.sum()
    k = min(table.shape) - 1
    v = np.sqrt(chi2 / (n * k)) if k > 0 else 0.0
    return float(v), DiagnosticResult(float(chi2), float(p_value), int(dof))


def latent_correlation_gap(latent: np.ndarray, cor_matrix: np.ndarray) -> np.ndarray:
    """Realized latent correlation minus the requested NORTA correlation."""
    realized = np.corrcoef(latent, rowvar=False)
    return realized - np.asarray(cor_matrix, dtype=float)
