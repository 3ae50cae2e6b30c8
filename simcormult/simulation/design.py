"""
Design Matrix Helper
====================

Turns covariate columns of a long-format DataFrame into the numeric design
matrix consumed by the linear predictor builder. Rows must be ordered subject
first, occasion second: row i * clsize + t belongs to subject i, occasion t.

This replaces formula parsing: callers name the columns explicitly and
choose whether a constant column is prepended.
"""

from typing import List, Optional

import numpy as np
import pandas as pd

from simcormult.constants import INTERCEPT_COLUMN
from simcormult.utils.logging_config import get_logger

logger = get_logger(__name__)


def design_matrix(xdata: Optional[pd.DataFrame] = None,
                  columns: Optional[List[str]] = None,
                  intercept: bool = True) -> pd.DataFrame:
    """
    Build a design matrix from covariate columns.

    Args:
        xdata: Long-format covariate data (one row per subject-occasion)
        columns: Covariate columns to use, in coefficient order.
                 Defaults to every column of xdata.
        intercept: Prepend a constant column named INTERCEPT_COLUMN

    Returns:
        DataFrame of floats with the intercept (if any) first

    Raises:
        ValueError: If a requested column is missing, xdata is None while
                    columns are requested, or a column named INTERCEPT_COLUMN
                    is used together with intercept=True
    """
    if xdata is None:
        if columns:
            raise ValueError(f"Covariate columns {columns} requested without covariate data")
        raise ValueError("Covariate data is required; use intercept_only_design() for none")

    if columns is None:
        columns = list(xdata.columns)

    missing = [c for c in columns if c not in xdata.columns]
    if missing:
        available = sorted(xdata.columns.tolist())
        raise ValueError(
            f"Missing covariate columns: {missing}\n"
            f"Available columns: {available}"
        )

    X = xdata[columns].dropna()
    n_dropped = len(xdata) - len(X)
    if n_dropped:
        logger.warning(f"Dropped {n_dropped} covariate rows with missing values")

    X = X.astype(float).reset_index(drop=True)
    if intercept:
        if INTERCEPT_COLUMN in X.columns:
            raise ValueError(
                f"Covariate column '{INTERCEPT_COLUMN}' clashes with the intercept column; "
                f"rename it or pass intercept=False"
            )
        X.insert(0, INTERCEPT_COLUMN, 1.0)
    return X


def intercept_only_design(n_subjects: int, clsize: int) -> pd.DataFrame:
    """Design matrix with a single constant column for n_subjects * clsize rows."""
    return pd.DataFrame({INTERCEPT_COLUMN: np.ones(n_subjects * clsize)})
