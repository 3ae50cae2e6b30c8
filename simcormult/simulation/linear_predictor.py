"""
Linear Predictor Builder
========================

Computes the systematic utilities of the baseline-category logit model:

    eta_itj = x_it' beta_tj      for j = 1, ..., J-1
    eta_itJ = 0                  (reference category)

Coefficients come in one of two explicit forms, resolved once by
resolve_coefficients():

- SharedCoefficients: one vector of length p * (J-1) used at every occasion
- PerOccasionCoefficients: a (clsize, p * (J-1)) matrix, row t for occasion t

Within a coefficient row, category j owns the block [(j-1)*p, j*p), in the
column order of the design matrix (intercept first when present).
"""

from dataclasses import dataclass
from typing import Union

import numpy as np

from simcormult.exceptions import DimensionMismatch, NonFiniteValues


# =============================================================================
# COEFFICIENT FORMS
# =============================================================================

@dataclass(frozen=True)
class SharedCoefficients:
    """Regression parameters common to all occasions."""
    values: np.ndarray

    @property
    def width(self) -> int:
        return self.values.shape[0]

    def for_occasion(self, t: int) -> np.ndarray:
        return self.values


@dataclass(frozen=True)
class PerOccasionCoefficients:
    """Occasion-specific regression parameters, one row per occasion."""
    values: np.ndarray

    @property
    def width(self) -> int:
        return self.values.shape[1]

    @property
    def n_occasions(self) -> int:
        return self.values.shape[0]

    def for_occasion(self, t: int) -> np.ndarray:
        return self.values[t]


CoefficientSet = Union[SharedCoefficients, PerOccasionCoefficients]


def resolve_coefficients(betas, clsize: int) -> CoefficientSet:
    """
    Resolve raw coefficients into a CoefficientSet.

    A 1-D input is shared across occasions. A 2-D input must have one row
    per occasion.

    Args:
        betas: Sequence, array, or an already-resolved CoefficientSet
        clsize: Number of occasions per subject

    Returns:
        SharedCoefficients or PerOccasionCoefficients

    Raises:
        DimensionMismatch: If a matrix does not have clsize rows, or the
                           input has more than two dimensions
    """
    if isinstance(betas, SharedCoefficients):
        return betas
    if isinstance(betas, PerOccasionCoefficients):
        if betas.n_occasions != clsize:
            raise DimensionMismatch(
                f"Occasion-specific coefficients need {clsize} rows, got {betas.n_occasions}"
            )
        return betas

    arr = np.asarray(betas, dtype=float)
    if arr.ndim == 1:
        return SharedCoefficients(arr)
    if arr.ndim == 2:
        if arr.shape[0] != clsize:
            raise DimensionMismatch(
                f"Occasion-specific coefficients need {clsize} rows (one per occasion), "
                f"got {arr.shape[0]}"
            )
        return PerOccasionCoefficients(arr)
    raise DimensionMismatch(f"Coefficients must be a vector or a matrix, got {arr.ndim} dimensions")


# =============================================================================
# LINEAR PREDICTOR
# =============================================================================

def build_linear_predictor(X, coefficients: CoefficientSet,
                           clsize: int, ncategories: int) -> np.ndarray:
    """
    Build the (R, clsize * ncategories) matrix of utility baselines.

    Column t * ncategories + j (0-based) holds eta for occasion t and
    category j; the last category of every occasion is identically zero.

    Args:
        X: Design matrix with R * clsize rows, ordered subject then occasion
        coefficients: Resolved coefficients (see resolve_coefficients)
        clsize: Number of occasions per subject
        ncategories: Number of response categories

    Returns:
        Array of shape (R, clsize * ncategories)

    Raises:
        DimensionMismatch: If rows are not a multiple of clsize or the
                           coefficient width is not p * (ncategories - 1)
        NonFiniteValues: If X or the coefficients contain NaN or inf
    """
    X = np.asarray(X, dtype=float)
    if X.ndim != 2:
        raise DimensionMismatch(f"Design matrix must be 2-D, got {X.ndim} dimensions")
    if not np.all(np.isfinite(X)):
        bad_rows = np.flatnonzero(~np.isfinite(X).all(axis=1))
        raise NonFiniteValues(
            f"Design matrix has non-finite values in {bad_rows.size} rows "
            f"(first at row {bad_rows[0]}); drop or impute missing covariates first"
        )
    if not np.all(np.isfinite(coefficients.values)):
        raise NonFiniteValues("Coefficients contain non-finite values")

    n_rows, p = X.shape
    if n_rows % clsize != 0:
        raise DimensionMismatch(
            f"Design matrix has {n_rows} rows, not a multiple of the cluster size {clsize}"
        )

    n_free = ncategories - 1
    expected = p * n_free
    if coefficients.width != expected:
        raise DimensionMismatch(
            f"Expected {expected} coefficients per occasion "
            f"({p} covariates x {n_free} non-reference categories), got {coefficients.width}"
        )
    if isinstance(coefficients, PerOccasionCoefficients) and coefficients.n_occasions != clsize:
        raise DimensionMismatch(
            f"Occasion-specific coefficients need {clsize} rows, got {coefficients.n_occasions}"
        )

    n_subjects = n_rows // clsize
    X_by_occasion = X.reshape(n_subjects, clsize, p)

    lin_pred = np.zeros((n_subjects, clsize, ncategories))
    for t in range(clsize):
        # Row j of B is the coefficient block of category j
        B = coefficients.for_occasion(t).reshape(n_free, p)
        lin_pred[:, t, :n_free] = X_by_occasion[:, t, :] @ B.T

    return lin_pred.reshape(n_subjects, clsize * ncategories)
