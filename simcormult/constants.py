"""
Centralized Constants for Correlated Nominal Simulation
=======================================================

This module defines the numeric tolerances and naming conventions used
across the simulation package. Import from here to keep them consistent.

Usage:
    from simcormult.constants import EIGEN_TOLERANCE, SEED_DEFAULT
    # or
    import simcormult.constants as C
"""

# =============================================================================
# CORRELATION MATRIX TOLERANCES
# =============================================================================

# Smallest eigenvalue allowed for a positive semi-definite correlation matrix.
# Eigenvalues in [-EIGEN_TOLERANCE, 0) are treated as zero when factoring.
EIGEN_TOLERANCE = 1e-8

# Absolute tolerance for symmetry, unit diagonal and identity-block checks
SYMMETRY_TOLERANCE = 1e-10


# =============================================================================
# MARGIN TRANSFORMS
# =============================================================================

# Uniforms are clipped to [eps, 1 - eps] before a quantile function is applied
# so that no latent value is infinite.
PPF_CLIP_EPS = 1e-12


# =============================================================================
# SIMULATION DEFAULTS
# =============================================================================

# Random seed for reproducibility
SEED_DEFAULT = 42

# Minimum number of nominal response categories
MIN_CATEGORIES = 2

# Margin used for the latent utilities of the baseline-category logit model
MARGIN_DEFAULT = 'gumbel'

# Correlation structure used when a config does not name one
CORRELATION_STRUCTURE_DEFAULT = 'independent'
VALID_CORRELATION_STRUCTURES = ['independent', 'exchangeable', 'toeplitz', 'matrix']


# =============================================================================
# OUTPUT COLUMNS
# =============================================================================

RESPONSE_COLUMN = 'y'
ID_COLUMN = 'id'
TIME_COLUMN = 'time'

# Name given to the constant column added by the design-matrix helper.
# It is dropped from the long-format output table.
INTERCEPT_COLUMN = 'const'


def latent_column_names(clsize: int, ncategories: int) -> list:
    """Column labels for a latent matrix: e_<occasion>_<category>, 1-based."""
    return [
        f'e_{t}_{j}'
        for t in range(1, clsize + 1)
        for j in range(1, ncategories + 1)
    ]
