"""
Correlated Nominal Responses under a Marginal Baseline-Category Logit Model
===========================================================================

Simulates R clusters of T correlated nominal responses with J categories.
The assumed marginal model for subject i at occasion t is

    log[ P(Y_it = j | x_it) / P(Y_it = J | x_it) ] = beta_tj0 + beta_tj' x_it

for j = 1, ..., J-1. Responses are generated by random utility maximization
(Touloumis, 2016): Y_it = argmax_j (eta_itj + e_itj), where the latent
vectors e_i have maximum-extreme-value margins and, by default, Gaussian
copula dependence (NORTA) given by a correlation matrix whose within-occasion
blocks are the identity.

Entry points:
- rmult_bcl(): programmatic simulation call
- BCLSimulator: config-driven simulation with CSV export
- main(): command-line interface

Example:
    >>> import numpy as np
    >>> from simcormult import rmult_bcl, choice_independent_correlation
    >>> from simcormult import exchangeable_correlation, intercept_only_design
    >>> X = intercept_only_design(n_subjects=500, clsize=3)
    >>> sigma = choice_independent_correlation(exchangeable_correlation(3, 0.9), 4)
    >>> result = rmult_bcl(3, 4, betas=[1.0, 0.5, 0.25], X=X, cor_matrix=sigma, seed=1)
    >>> result.responses.shape
    (500, 3)

References:
    McFadden, D. (1974) Conditional logit analysis of qualitative choice behavior.
    Touloumis, A. (2016) Simulating correlated binary and multinomial responses
    under marginal model specification: the SimCorMultRes package.
    The R Journal 8, 79-91.
"""

import logging
import numbers
from pathlib import Path
from typing import List, Optional, Union

import numpy as np
import pandas as pd

from simcormult.config_schema import load_config
from simcormult.constants import MIN_CATEGORIES
from simcormult.exceptions import (
    SimulationError,
    InvalidClusterSize,
    InvalidCategoryCount,
    InvalidCorrelationMatrix,
)
from simcormult.simulation.assigner import assign_responses
from simcormult.simulation.correlation import (
    choice_independent_correlation,
    exchangeable_correlation,
    independent_correlation,
    toeplitz_correlation,
)
from simcormult.simulation.design import design_matrix, intercept_only_design
from simcormult.simulation.linear_predictor import build_linear_predictor, resolve_coefficients
from simcormult.simulation.margins import Margin
from simcormult.simulation.norta import create_latent, prepare_correlation_matrix
from simcormult.simulation.output import SimulationResult, compose_output, covariate_frame
from simcormult.utils.logging_config import SimulationLogger, get_logger, setup_logging

logger = get_logger(__name__)


# =============================================================================
# ARGUMENT CHECKS
# =============================================================================

def check_cluster_size(clsize) -> int:
    """Return clsize as an int, or raise InvalidClusterSize."""
    if isinstance(clsize, bool):
        raise InvalidClusterSize(f"clsize must be a positive integer, got {clsize!r}")
    if isinstance(clsize, numbers.Integral):
        value = int(clsize)
    elif isinstance(clsize, numbers.Real) and float(clsize).is_integer():
        value = int(clsize)
    else:
        raise InvalidClusterSize(f"clsize must be a positive integer, got {clsize!r}")
    if value < 1:
        raise InvalidClusterSize(f"clsize must be a positive integer, got {clsize!r}")
    return value


def check_ncategories(ncategories) -> int:
    """Return ncategories as an int, or raise InvalidCategoryCount."""
    if isinstance(ncategories, bool) or not isinstance(ncategories, numbers.Real):
        raise InvalidCategoryCount(f"ncategories must be an integer >= {MIN_CATEGORIES}, got {ncategories!r}")
    if not float(ncategories).is_integer() or ncategories < MIN_CATEGORIES:
        raise InvalidCategoryCount(f"ncategories must be an integer >= {MIN_CATEGORIES}, got {ncategories!r}")
    return int(ncategories)


# =============================================================================
# SIMULATION CALL
# =============================================================================

def rmult_bcl(clsize: int, ncategories: int, betas, X,
              cor_matrix=None, latent=None,
              seed: Optional[int] = None,
              rng: Optional[np.random.Generator] = None,
              covariate_names: Optional[List[str]] = None,
              margin: Margin = Margin.GUMBEL) -> SimulationResult:
    """
    Simulate correlated nominal responses under a marginal BCL model.

    Exactly one latent source is used: the supplied latent matrix if given,
    otherwise NORTA with cor_matrix. All argument checks run before any
    random number is drawn.

    Args:
        clsize: Common cluster size T
        ncategories: Number of nominal categories J
        betas: p*(J-1) coefficients shared by all occasions, or a (T, p*(J-1))
               matrix of occasion-specific coefficients. Category j owns
               positions (j-1)*p .. j*p - 1 of a row.
        X: Design matrix, R*T rows ordered subject then occasion
        cor_matrix: (T*J, T*J) NORTA correlation matrix with identity
                    within-occasion blocks; required unless latent is given
        latent: (R, T*J) latent matrix bypassing NORTA
        seed: Seed for a new generator (ignored when rng is given)
        rng: NumPy random generator
        covariate_names: Column names for an array X in the output table
        margin: Latent margin for the NORTA path

    Returns:
        SimulationResult with responses, simulated_table and latent

    Raises:
        InvalidClusterSize, InvalidCategoryCount, DimensionMismatch,
        InvalidCorrelationMatrix, ChoiceIndependenceViolation,
        LatentMatrixDimensionMismatch, NonFiniteValues,
        ColumnNameConflict
    """
    sim_log = SimulationLogger('rmult_bcl')
    try:
        clsize = check_cluster_size(clsize)
        ncategories = check_ncategories(ncategories)
        coefficients = resolve_coefficients(betas, clsize)
        lin_pred = build_linear_predictor(X, coefficients, clsize, ncategories)
        covariate_frame(X, covariate_names)
        n_subjects = lin_pred.shape[0]

        if latent is None:
            cor_matrix = prepare_correlation_matrix(cor_matrix, clsize, ncategories)
            sim_log.latent_path('norta')
        else:
            sim_log.latent_path('external')

        sim_log.start(n_subjects, clsize, ncategories)
        if rng is None:
            rng = np.random.default_rng(seed)

        latent = create_latent(n_subjects, clsize, ncategories,
                               cor_matrix=cor_matrix, latent=latent,
                               rng=rng, margin=margin)
        responses = assign_responses(lin_pred, latent, clsize, ncategories)
    except SimulationError as e:
        sim_log.failed(str(e))
        raise

    result = compose_output(responses, latent, X, covariate_names)
    sim_log.finished(responses)
    return result


# =============================================================================
# CONFIG-DRIVEN SIMULATOR
# =============================================================================

class BCLSimulator:
    """
    Runs rmult_bcl from a JSON configuration file.

    Coordinates:
    - Design matrix loading (CSV or intercept only)
    - Correlation matrix construction
    - Simulation and CSV export
    """

    def __init__(self, config_path: Union[str, Path], seed: Optional[int] = None):
        """
        Initialize simulator with configuration file.

        Args:
            config_path: Path to JSON configuration file
            seed: Overrides population.seed when given
        """
        self.config_path = Path(config_path)
        self.config = load_config(self.config_path)

        pop = self.config['population']
        self.clsize = check_cluster_size(pop['T'])
        self.ncategories = check_ncategories(self.config['categories']['J'])
        self.margin = Margin.from_name(self.config['categories']['margin'])
        self.seed = int(pop['seed']) if seed is None else int(seed)

        self.design = self._load_design()
        self.cor_matrix = self._build_correlation()

    def _load_design(self) -> pd.DataFrame:
        """Design matrix from design.path, or intercept only for population.N subjects."""
        design_cfg = self.config.get('design')
        if not design_cfg:
            return intercept_only_design(int(self.config['population']['N']), self.clsize)

        design_path = Path(design_cfg['path'])
        if not design_path.is_absolute():
            design_path = self.config_path.parent / design_path
        if not design_path.exists():
            raise FileNotFoundError(f"Design file not found: {design_path}")

        xdata = pd.read_csv(design_path)
        X = design_matrix(xdata, design_cfg.get('columns'), design_cfg['intercept'])
        logger.info(f"Loaded {len(X)} covariate rows from {design_path}")
        return X

    def _build_correlation(self) -> np.ndarray:
        """Full (T*J, T*J) latent correlation matrix from the correlation section."""
        corr_cfg = self.config['correlation']
        structure = corr_cfg['structure']

        if structure == 'independent':
            return independent_correlation(self.clsize, self.ncategories)

        if structure == 'exchangeable':
            occasion_corr = exchangeable_correlation(self.clsize, float(corr_cfg['rho']))
        elif structure == 'toeplitz':
            values = corr_cfg['values']
            if len(values) != self.clsize:
                raise InvalidCorrelationMatrix(
                    f"Toeplitz correlation needs {self.clsize} lag values, got {len(values)}"
                )
            occasion_corr = toeplitz_correlation(values)
        else:
            matrix = np.asarray(corr_cfg['matrix'], dtype=float)
            if matrix.shape != (self.clsize, self.clsize):
                return matrix
            occasion_corr = matrix

        return choice_independent_correlation(occasion_corr, self.ncategories)

    def run(self) -> SimulationResult:
        """Run the simulation with a fresh generator seeded from self.seed."""
        logger.info(f"Running {self.config['model_info']['name']} (seed={self.seed})")
        return rmult_bcl(
            self.clsize,
            self.ncategories,
            self.config['betas'],
            self.design,
            cor_matrix=self.cor_matrix,
            rng=np.random.default_rng(self.seed),
            margin=self.margin,
        )

    def export(self, output_path: Union[str, Path],
               latent_path: Optional[Union[str, Path]] = None) -> SimulationResult:
        """
        Run simulation and export to CSV.

        Args:
            output_path: Path for the long-format table
            latent_path: Optional path for the latent matrix

        Returns:
            The SimulationResult that was written
        """
        result = self.run()
        result.to_csv(output_path, latent_path=latent_path)
        logger.info(f"Exported {len(result.simulated_table):,} rows to: {output_path}")
        if latent_path is not None:
            logger.info(f"Exported latent matrix to: {latent_path}")
        return result


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """Command-line interface for the simulator."""
    import argparse

    parser = argparse.ArgumentParser(
        description='Simulate correlated nominal responses (baseline-category logit margins)',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example usage:
  simcormult-bcl --config bcl_config.json --out simulated_data.csv
  simcormult-bcl --config bcl_config.json --out simulated_data.csv --latent-out latent.csv
        """
    )
    parser.add_argument(
        '--config',
        required=True,
        help='Path to JSON configuration file'
    )
    parser.add_argument(
        '--out',
        default='simulated_bcl_data.csv',
        help='Output CSV file path (default: simulated_bcl_data.csv)'
    )
    parser.add_argument(
        '--latent-out',
        default=None,
        help='Optional CSV path for the latent matrix'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Random seed (overrides population.seed)'
    )
    parser.add_argument(
        '--log-level',
        default='INFO',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: INFO)'
    )

    args = parser.parse_args(argv)
    setup_logging(level=getattr(logging, args.log_level))

    try:
        simulator = BCLSimulator(args.config, seed=args.seed)
        simulator.export(args.out, latent_path=args.latent_out)
    except (ValueError, FileNotFoundError) as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
