"""
Correlated Latent Generator (NORTA)
===================================

Generates the latent random vectors e_i = (e_i11, ..., e_i1J, ..., e_iTJ)
whose margins are the extreme-value noise of the random-utility form of the
baseline-category logit model, with dependence induced by a Gaussian copula:

1. Validate Sigma (symmetric, unit diagonal, PSD) and choice independence
   (every J x J diagonal block is the identity)
2. Factor Sigma = L L'
3. Draw Z ~ N(0, I) with shape (R, T*J), row-major: subject, occasion, category
4. Correlate: Zc = Z L'
5. Transform each margin: e = F^{-1}(Phi(Zc))

Step 5 gives exact margins, but the correlation of e only approximates Sigma
(NORTA attenuates correlations for non-normal margins).

A caller-supplied latent matrix skips all of the above; only its shape and
finiteness are checked.

References:
    Cario, M. C. and Nelson, B. L. (1997) Modeling and generating random
    vectors with arbitrary marginal distributions and correlation matrix.
    Li, S. T. and Hammond, J. L. (1975) Generation of pseudorandom numbers
    with specified univariate distributions and correlation coefficients.
"""

from typing import Optional, Sequence, Union

import numpy as np
from scipy import stats

from simcormult.constants import EIGEN_TOLERANCE, SYMMETRY_TOLERANCE, PPF_CLIP_EPS
from simcormult.exceptions import (
    InvalidCorrelationMatrix,
    ChoiceIndependenceViolation,
    LatentMatrixDimensionMismatch,
    NonFiniteValues,
)
from simcormult.simulation.margins import Margin
from simcormult.utils.logging_config import get_logger

logger = get_logger(__name__)


# =============================================================================
# CORRELATION MATRIX VALIDATION
# =============================================================================

def validate_correlation_matrix(cor_matrix, dim: int) -> np.ndarray:
    """
    Check that cor_matrix is a valid dim x dim correlation matrix.

    Args:
        cor_matrix: Candidate correlation matrix
        dim: Required number of rows and columns

    Returns:
        The matrix as a float array

    Raises:
        InvalidCorrelationMatrix: If missing, misshapen, non-finite, asymmetric,
                                  not unit-diagonal or not positive semi-definite
    """
    if cor_matrix is None:
        raise InvalidCorrelationMatrix(
            "A correlation matrix is required when no latent matrix is supplied"
        )

    try:
        arr = np.asarray(cor_matrix, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidCorrelationMatrix(f"Correlation matrix is not numeric: {e}") from e

    if arr.shape != (dim, dim):
        raise InvalidCorrelationMatrix(
            f"Correlation matrix must be {dim} x {dim}, got shape {arr.shape}"
        )
    if not np.all(np.isfinite(arr)):
        raise InvalidCorrelationMatrix("Correlation matrix contains non-finite values")
    if not np.allclose(arr, arr.T, rtol=0.0, atol=SYMMETRY_TOLERANCE):
        raise InvalidCorrelationMatrix("Correlation matrix must be symmetric")
    if not np.allclose(np.diag(arr), 1.0, rtol=0.0, atol=SYMMETRY_TOLERANCE):
        raise InvalidCorrelationMatrix("Correlation matrix must have a unit diagonal")

    min_eigenvalue = np.linalg.eigvalsh(arr).min()
    if min_eigenvalue < -EIGEN_TOLERANCE:
        raise InvalidCorrelationMatrix(
            f"Correlation matrix must be positive semi-definite "
            f"(smallest eigenvalue {min_eigenvalue:.3g})"
        )

    return arr


def check_choice_independence(cor_matrix: np.ndarray, clsize: int, ncategories: int) -> None:
    """Raise ChoiceIndependenceViolation unless every occasion's diagonal block is I_J."""
    identity = np.eye(ncategories)
    for t in range(clsize):
        block = slice(t * ncategories, (t + 1) * ncategories)
        if not np.allclose(cor_matrix[block, block], identity, rtol=0.0, atol=SYMMETRY_TOLERANCE):
            raise ChoiceIndependenceViolation(t + 1)


def prepare_correlation_matrix(cor_matrix, clsize: int, ncategories: int) -> np.ndarray:
    """Full validation of the NORTA correlation matrix for a nominal model."""
    arr = validate_correlation_matrix(cor_matrix, clsize * ncategories)
    check_choice_independence(arr, clsize, ncategories)
    return arr


# =============================================================================
# SAMPLING
# =============================================================================

def factor_correlation_matrix(cor_matrix: np.ndarray) -> np.ndarray:
    """
    Return L with L @ L.T == cor_matrix.

    Uses the Cholesky factor; singular PSD matrices (e.g. perfectly
    correlated occasions) fall back to an eigendecomposition with
    tolerance-level negative eigenvalues set to zero.
    """
    try:
        return np.linalg.cholesky(cor_matrix)
    except np.linalg.LinAlgError:
        logger.debug("Correlation matrix is singular; factoring by eigendecomposition")
        eigenvalues, eigenvectors = np.linalg.eigh(cor_matrix)
        eigenvalues = np.clip(eigenvalues, 0.0, None)
        return eigenvectors * np.sqrt(eigenvalues)


def rsmvnorm(n: int, cor_matrix: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """
    Draw n standard multivariate normal vectors with correlation cor_matrix.

    Draws are taken row by row, so for a fixed seed the i-th row depends
    only on the generator state after the first i - 1 rows.
    """
    L = factor_correlation_matrix(cor_matrix)
    Z = rng.standard_normal(size=(n, cor_matrix.shape[0]))
    return Z @ L.T


def rnorta(n: int, cor_matrix, margins: Union[Margin, Sequence[Margin]],
           rng: np.random.Generator) -> np.ndarray:
    """
    Simulate n random vectors with the given margins via NORTA.

    Args:
        n: Number of vectors (rows)
        cor_matrix: Correlation matrix of the underlying normal vector
        margins: One Margin (or margin name) for every column, or a sequence
                 with one per column
        rng: NumPy random generator

    Returns:
        Array of shape (n, d) with column k distributed as margins[k]

    Raises:
        InvalidCorrelationMatrix: If cor_matrix is not a valid correlation matrix
        ValueError: If the number of margins does not match the dimension
    """
    cor_matrix = np.asarray(cor_matrix, dtype=float)
    dim = cor_matrix.shape[0] if cor_matrix.ndim == 2 else -1
    cor_matrix = validate_correlation_matrix(cor_matrix, dim)

    if isinstance(margins, str):
        margins = Margin.from_name(margins)
    if not isinstance(margins, Margin):
        margins = [Margin.from_name(m) for m in margins]
        if len(margins) != dim:
            raise ValueError(f"Need {dim} margins, got {len(margins)}")

    z = rsmvnorm(n, cor_matrix, rng)
    u = np.clip(stats.norm.cdf(z), PPF_CLIP_EPS, 1.0 - PPF_CLIP_EPS)

    if isinstance(margins, Margin):
        return margins.ppf(u)

    latent = np.empty_like(u)
    for k, margin in enumerate(margins):
        latent[:, k] = margin.ppf(u[:, k])
    return latent


# =============================================================================
# PATH SELECTION
# =============================================================================

def check_latent_matrix(latent, n_subjects: int, clsize: int, ncategories: int) -> np.ndarray:
    """Validate the shape and values of an externally supplied latent matrix."""
    arr = np.asarray(latent, dtype=float)
    expected = (n_subjects, clsize * ncategories)
    if arr.shape != expected:
        raise LatentMatrixDimensionMismatch(expected, arr.shape)
    if not np.all(np.isfinite(arr)):
        bad = np.argwhere(~np.isfinite(arr))[0]
        raise NonFiniteValues(
            f"Latent matrix has non-finite values (first at row {bad[0]}, column {bad[1]})"
        )
    return arr


def create_latent(n_subjects: int, clsize: int, ncategories: int,
                  cor_matrix=None, latent=None,
                  rng: Optional[np.random.Generator] = None,
                  margin: Margin = Margin.GUMBEL) -> np.ndarray:
    """
    Produce the (n_subjects, clsize * ncategories) latent matrix.

    If latent is given it is returned after shape and finiteness checks,
    and cor_matrix is ignored. Otherwise cor_matrix is validated (including choice
    independence) and latent values are drawn with NORTA.

    Args:
        n_subjects: Number of subjects R
        clsize: Number of occasions T
        ncategories: Number of categories J
        cor_matrix: (T*J, T*J) correlation matrix for the NORTA path
        latent: Externally generated latent matrix
        rng: NumPy random generator (a fresh unseeded one if None)
        margin: Latent margin for the NORTA path

    Returns:
        Latent matrix, column t*J + j for occasion t, category j (0-based)
    """
    if latent is not None:
        return check_latent_matrix(latent, n_subjects, clsize, ncategories)

    cor_matrix = prepare_correlation_matrix(cor_matrix, clsize, ncategories)
    if rng is None:
        rng = np.random.default_rng()
    return rnorta(n_subjects, cor_matrix, margin, rng)
