"""
Output Composer
===============

Packages simulated responses into the structures returned to callers:

- responses: (R, T) matrix, element (i, t) is Y_it
- simulated_table: long-format DataFrame, one row per subject-occasion with
  the response, the covariates, the subject id and the occasion index
- latent: the (R, T*J) latent matrix, generated or passed through
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

import numpy as np
import pandas as pd

from simcormult.constants import (
    RESPONSE_COLUMN,
    ID_COLUMN,
    TIME_COLUMN,
    INTERCEPT_COLUMN,
    latent_column_names,
)
from simcormult.exceptions import ColumnNameConflict


@dataclass
class SimulationResult:
    """Container for one simulation call."""
    responses: np.ndarray
    simulated_table: pd.DataFrame
    latent: np.ndarray

    @property
    def n_subjects(self) -> int:
        return self.responses.shape[0]

    @property
    def clsize(self) -> int:
        return self.responses.shape[1]

    def latent_frame(self) -> pd.DataFrame:
        """Latent matrix with e_<occasion>_<category> column labels."""
        ncategories = self.latent.shape[1] // self.clsize
        return pd.DataFrame(self.latent, columns=latent_column_names(self.clsize, ncategories))

    def to_csv(self, path: Union[str, Path], latent_path: Optional[Union[str, Path]] = None) -> None:
        """Write the long-format table (and optionally the latent matrix) to CSV."""
        self.simulated_table.to_csv(path, index=False)
        if latent_path is not None:
            self.latent_frame().to_csv(latent_path, index=False)


RESERVED_COLUMNS = (RESPONSE_COLUMN, ID_COLUMN, TIME_COLUMN)


def covariate_frame(X, covariate_names: Optional[List[str]] = None) -> pd.DataFrame:
    """
    Covariates as they appear in the long-format table.

    The intercept column is dropped. Names that collide with the response,
    id or time columns raise ColumnNameConflict.
    """
    if isinstance(X, pd.DataFrame):
        covariates = X.reset_index(drop=True).copy()
    else:
        X = np.asarray(X, dtype=float)
        if covariate_names is None:
            covariate_names = [f'x{k}' for k in range(1, X.shape[1] + 1)]
        covariates = pd.DataFrame(X, columns=covariate_names)

    if INTERCEPT_COLUMN in covariates.columns:
        covariates = covariates.drop(columns=INTERCEPT_COLUMN)

    clashes = [c for c in covariates.columns if c in RESERVED_COLUMNS]
    if clashes:
        raise ColumnNameConflict(
            f"Covariate names {clashes} collide with the output columns "
            f"{list(RESERVED_COLUMNS)}; rename them before simulating"
        )
    return covariates


def compose_output(responses: np.ndarray, latent: np.ndarray, X,
                   covariate_names: Optional[List[str]] = None) -> SimulationResult:
    """
    Assemble the simulation result.

    Args:
        responses: (R, T) response matrix
        latent: (R, T*J) latent matrix
        X: Design matrix with R*T rows (DataFrame or array)
        covariate_names: Column names for an array X; defaults to x1..xp.
                         Ignored when X is a DataFrame.

    Returns:
        SimulationResult

    Raises:
        ColumnNameConflict: If a covariate is named like an output column
    """
    n_subjects, clsize = responses.shape
    covariates = covariate_frame(X, covariate_names)

    table = pd.DataFrame({RESPONSE_COLUMN: responses.reshape(-1)})
    table = pd.concat([table, covariates], axis=1)
    table[ID_COLUMN] = np.repeat(np.arange(1, n_subjects + 1), clsize)
    table[TIME_COLUMN] = np.tile(np.arange(1, clsize + 1), n_subjects)

    return SimulationResult(responses=responses, simulated_table=table, latent=latent)
