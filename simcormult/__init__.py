"""
simcormult
==========

Simulation of correlated nominal responses whose margins follow a
baseline-category logit model, with latent dependence from the NORTA method.

Usage:
    from simcormult import rmult_bcl, intercept_only_design
"""

from simcormult.exceptions import (
    SimulationError,
    InvalidClusterSize,
    InvalidCategoryCount,
    DimensionMismatch,
    InvalidCorrelationMatrix,
    ChoiceIndependenceViolation,
    LatentMatrixDimensionMismatch,
    NonFiniteValues,
    ColumnNameConflict,
)
from simcormult.simulation import (
    BCLSimulator,
    Margin,
    PerOccasionCoefficients,
    SharedCoefficients,
    SimulationResult,
    assign_responses,
    build_linear_predictor,
    choice_independent_correlation,
    create_latent,
    design_matrix,
    exchangeable_correlation,
    independent_correlation,
    intercept_only_design,
    resolve_coefficients,
    rmult_bcl,
    rnorta,
    toeplitz_correlation,
)

__version__ = '0.1.0'

__all__ = [
    'SimulationError',
    'InvalidClusterSize',
    'InvalidCategoryCount',
    'DimensionMismatch',
    'InvalidCorrelationMatrix',
    'ChoiceIndependenceViolation',
    'LatentMatrixDimensionMismatch',
    'NonFiniteValues',
    'ColumnNameConflict',
    'BCLSimulator',
    'Margin',
    'PerOccasionCoefficients',
    'SharedCoefficients',
    'SimulationResult',
    'assign_responses',
    'build_linear_predictor',
    'choice_independent_correlation',
    'create_latent',
    'design_matrix',
    'exchangeable_correlation',
    'independent_correlation',
    'intercept_only_design',
    'resolve_coefficients',
    'rmult_bcl',
    'rnorta',
    'toeplitz_correlation',
]
