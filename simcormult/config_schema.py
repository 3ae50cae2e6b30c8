"""
Simulation Configuration Schema
===============================

JSON configuration format for command-line simulation runs. It provides:
1. Schema definition with validation
2. Default values

Configuration Structure:
------------------------
{
    "model_info": {
        "name": str,           # Run name (e.g., "BCL exchangeable")
        "description": str     # Brief description
    },
    "population": {
        "N": int,              # Number of subjects (ignored if design.path is set)
        "T": int,              # Cluster size (occasions per subject)
        "seed": int            # Random seed for reproducibility
    },
    "categories": {
        "J": int,              # Number of nominal response categories
        "margin": str          # Latent margin (default "gumbel")
    },
    "design": {                # Optional; intercept-only design when absent
        "path": str,           # Long-format covariate CSV, R*T rows
        "columns": list,       # Covariate columns in coefficient order
        "intercept": bool      # Prepend a constant column (default true)
    },
    "betas": list,             # p*(J-1) values, or T rows of p*(J-1) values
    "correlation": {
        "structure": str,      # "independent", "exchangeable", "toeplitz" or "matrix"
        "rho": float,          # exchangeable: common occasion correlation
        "values": list,        # toeplitz: correlation by lag, values[0] == 1
        "matrix": list         # matrix: occasion (T x T) or full (T*J x T*J) matrix
    }
}

For "exchangeable", "toeplitz" and a T x T "matrix", the occasion correlation
matrix is expanded to the full latent correlation matrix with the J x J
identity (choice independence).
"""

import copy
import json
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Union

from simcormult.constants import (
    SEED_DEFAULT,
    MIN_CATEGORIES,
    MARGIN_DEFAULT,
    CORRELATION_STRUCTURE_DEFAULT,
    VALID_CORRELATION_STRUCTURES,
)
from simcormult.simulation.margins import Margin


# =============================================================================
# SCHEMA VALIDATION
# =============================================================================

@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def _is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def validate_config(config: Dict) -> ValidationResult:
    """
    Validate configuration against schema.

    Args:
        config: Configuration dictionary

    Returns:
        ValidationResult with validity status and any errors/warnings
    """
    errors = []
    warnings_list = []

    required_keys = ['population', 'categories', 'betas']
    for key in required_keys:
        if key not in config:
            errors.append(f"Missing required key: {key}")

    if errors:
        return ValidationResult(False, errors, warnings_list)

    if 'name' not in config.get('model_info', {}):
        warnings_list.append("model_info.name not specified")

    # Population
    pop = config['population']
    design = config.get('design', {})
    if 'T' not in pop:
        errors.append("population.T is required")
    elif not _is_positive_int(pop['T']):
        errors.append(f"population.T must be a positive integer, got {pop['T']!r}")
    if 'path' not in design:
        if 'N' not in pop:
            errors.append("population.N is required when design.path is not given")
        elif not _is_positive_int(pop['N']):
            errors.append(f"population.N must be a positive integer, got {pop['N']!r}")
    elif 'N' in pop:
        warnings_list.append("population.N is ignored; subjects are taken from design.path")
    if 'seed' not in pop:
        warnings_list.append(f"population.seed not specified, using default {SEED_DEFAULT}")

    # Categories
    cats = config['categories']
    if 'J' not in cats:
        errors.append("categories.J is required")
    elif not isinstance(cats['J'], int) or cats['J'] < MIN_CATEGORIES:
        errors.append(f"categories.J must be an integer >= {MIN_CATEGORIES}, got {cats['J']!r}")
    if 'margin' in cats:
        try:
            Margin.from_name(cats['margin'])
        except ValueError as e:
            errors.append(f"categories.margin: {e}")
        else:
            if Margin.from_name(cats['margin']) is not Margin.GUMBEL:
                warnings_list.append(
                    "categories.margin is not 'gumbel'; responses will not follow "
                    "the baseline-category logit margins"
                )

    # Design
    if design and 'path' not in design and 'columns' in design:
        errors.append("design.columns requires design.path")

    # Correlation
    corr = config.get('correlation', {})
    structure = corr.get('structure', CORRELATION_STRUCTURE_DEFAULT)
    if structure not in VALID_CORRELATION_STRUCTURES:
        errors.append(
            f"Invalid correlation structure: {structure}. "
            f"Must be one of {VALID_CORRELATION_STRUCTURES}"
        )
    elif structure == 'exchangeable' and 'rho' not in corr:
        errors.append("correlation.rho is required for exchangeable structure")
    elif structure == 'toeplitz' and 'values' not in corr:
        errors.append("correlation.values is required for toeplitz structure")
    elif structure == 'matrix' and 'matrix' not in corr:
        errors.append("correlation.matrix is required for matrix structure")

    if not isinstance(config['betas'], list) or len(config['betas']) == 0:
        errors.append("betas must be a non-empty list (vector or list of rows)")

    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings_list
    )


# =============================================================================
# CONFIG LOADING
# =============================================================================

def load_config(config_path: Union[str, Path]) -> Dict:
    """
    Load and validate configuration from JSON file.

    Args:
        config_path: Path to config.json

    Returns:
        Validated configuration dictionary with defaults applied

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If configuration is invalid
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        config = json.load(f)

    result = validate_config(config)

    for w in result.warnings:
        warnings.warn(w, UserWarning)

    if not result.is_valid:
        raise ValueError("Invalid configuration:\n" + "\n".join(result.errors))

    return apply_defaults(config)


def apply_defaults(config: Dict) -> Dict:
    """
    Apply default values to configuration.

    Args:
        config: Raw configuration dictionary

    Returns:
        New configuration dictionary with defaults applied
    """
    config = copy.deepcopy(config)

    config.setdefault('model_info', {}).setdefault('name', 'rmult_bcl')
    config['population'].setdefault('seed', SEED_DEFAULT)
    config['categories'].setdefault('margin', MARGIN_DEFAULT)

    if 'design' in config:
        config['design'].setdefault('intercept', True)

    config.setdefault('correlation', {}).setdefault('structure', CORRELATION_STRUCTURE_DEFAULT)

    return config
