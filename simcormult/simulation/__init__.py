"""
Simulation components: linear predictor, NORTA latent generator,
utility-maximization assigner and output composer.
"""

from .assigner import assign_responses
from .bcl_simulator import BCLSimulator, rmult_bcl
from .correlation import (
    choice_independent_correlation,
    exchangeable_correlation,
    independent_correlation,
    toeplitz_correlation,
)
from .design import design_matrix, intercept_only_design
from .linear_predictor import (
    CoefficientSet,
    PerOccasionCoefficients,
    SharedCoefficients,
    build_linear_predictor,
    resolve_coefficients,
)
from .margins import Margin
from .norta import (
    check_choice_independence,
    create_latent,
    factor_correlation_matrix,
    prepare_correlation_matrix,
    rnorta,
    rsmvnorm,
    validate_correlation_matrix,
)
from .output import SimulationResult, compose_output
