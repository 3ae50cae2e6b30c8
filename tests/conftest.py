"""
Pytest Configuration and Shared Fixtures
=========================================

Provides common test fixtures for simulation testing.
"""

import json
import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from simcormult.simulation.correlation import (  # noqa: E402
    choice_independent_correlation,
    exchangeable_correlation,
)
from simcormult.simulation.design import design_matrix  # noqa: E402


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture(scope="session")
def project_root():
    """Return project root path."""
    return PROJECT_ROOT


@pytest.fixture
def base_config():
    """Minimal intercept-only configuration dictionary."""
    return {
        'model_info': {'name': 'BCL test', 'description': 'intercept only'},
        'population': {'N': 100, 'T': 2, 'seed': 7},
        'categories': {'J': 3},
        'betas': [0.2, -0.1],
        'correlation': {'structure': 'exchangeable', 'rho': 0.5},
    }


@pytest.fixture
def config_file(tmp_path, base_config):
    """Write base_config to a JSON file and return its path."""
    path = tmp_path / 'bcl_config.json'
    path.write_text(json.dumps(base_config), encoding='utf-8')
    return path


# =============================================================================
# Data Fixtures - Covariates with Known Parameters
# =============================================================================

@pytest.fixture
def rng():
    """Seeded random generator."""
    return np.random.default_rng(42)


@pytest.fixture
def covariate_data():
    """
    Long-format covariates for 200 subjects and 3 occasions.

    x1 is constant within subject, x2 varies by occasion.
    """
    gen = np.random.default_rng(1)
    n_subjects, clsize = 200, 3
    x1 = np.repeat(gen.normal(size=n_subjects), clsize)
    x2 = gen.normal(size=n_subjects * clsize)
    return pd.DataFrame({'x1': x1, 'x2': x2})


@pytest.fixture
def bcl_example(covariate_data):
    """
    Three occasions, four categories, covariates x1 and x2.

    Coefficients per non-reference category: (intercept, x1, x2).
    """
    clsize, ncategories = 3, 4
    return {
        'clsize': clsize,
        'ncategories': ncategories,
        'betas': [1.0, 3.0, 2.0, 1.25, 3.25, 1.75, 0.75, 2.75, 2.25],
        'X': design_matrix(covariate_data, ['x1', 'x2']),
        'cor_matrix': choice_independent_correlation(
            exchangeable_correlation(clsize, 0.95), ncategories
        ),
    }
