"""
Correlation Matrix Builders
===========================

Helpers for the (clsize * ncategories) correlation matrix of the NORTA
normal vector. Under choice independence the latent utilities of one
occasion are uncorrelated, so the matrix is the Kronecker product of a
clsize x clsize occasion correlation matrix with the J x J identity:

    Sigma = R_occasion (x) I_J

Block (t, s) is then r_ts * I_J: category j at occasion t is correlated
only with the same category j at occasion s.
"""

from typing import Sequence

import numpy as np
from scipy.linalg import toeplitz

from simcormult.exceptions import InvalidClusterSize, InvalidCorrelationMatrix


def exchangeable_correlation(clsize: int, rho: float) -> np.ndarray:
    """Occasion correlation matrix with every off-diagonal entry equal to rho."""
    if clsize < 1:
        raise InvalidClusterSize(f"clsize must be a positive integer, got {clsize}")
    if clsize > 1 and not (-1.0 / (clsize - 1) <= rho <= 1.0):
        raise InvalidCorrelationMatrix(
            f"Exchangeable correlation {rho} is not valid for {clsize} occasions "
            f"(must lie in [{-1.0 / (clsize - 1):.4f}, 1])"
        )
    corr = np.full((clsize, clsize), float(rho))
    np.fill_diagonal(corr, 1.0)
    return corr


def toeplitz_correlation(values: Sequence[float]) -> np.ndarray:
    """
    Occasion correlation matrix with entry (t, s) = values[|t - s|].

    values[0] must be 1. Positive semi-definiteness is checked later, when
    the full matrix is validated.
    """
    values = np.asarray(values, dtype=float)
    if values.ndim != 1 or values.size == 0:
        raise InvalidCorrelationMatrix("Toeplitz correlation needs a non-empty vector of lags")
    if values[0] != 1.0:
        raise InvalidCorrelationMatrix(f"Lag-0 correlation must be 1, got {values[0]}")
    return toeplitz(values)


def choice_independent_correlation(occasion_corr, ncategories: int) -> np.ndarray:
    """
    Expand an occasion correlation matrix to the full latent correlation matrix.

    Args:
        occasion_corr: (clsize, clsize) correlation matrix between occasions
        ncategories: Number of response categories J

    Returns:
        (clsize * J, clsize * J) matrix whose diagonal blocks are I_J
    """
    occasion_corr = np.asarray(occasion_corr, dtype=float)
    return np.kron(occasion_corr, np.eye(ncategories))


def independent_correlation(clsize: int, ncategories: int) -> np.ndarray:
    """Identity matrix: no dependence between occasions."""
    return np.eye(clsize * ncategories)
