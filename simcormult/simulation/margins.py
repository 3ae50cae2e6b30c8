"""
Margin Transforms
=================

Closed set of marginal distributions a NORTA latent vector can be mapped to.
Each member carries its scipy distribution, so the quantile function is
resolved when the member is chosen rather than looked up by name at draw time.

The baseline-category logit model uses GUMBEL: utilities perturbed by
independent maximum-extreme-value noise, -log(-log(U)), reproduce the
multinomial logit choice probabilities under utility maximization.
"""

from enum import Enum

import numpy as np
from scipy import stats


class Margin(Enum):
    """Target marginal distribution of a latent variable."""

    GUMBEL = ('gumbel', stats.gumbel_r)
    GUMBEL_MIN = ('gumbel_min', stats.gumbel_l)
    LOGISTIC = ('logistic', stats.logistic)
    NORMAL = ('normal', stats.norm)
    CAUCHY = ('cauchy', stats.cauchy)

    def __init__(self, label: str, distribution):
        self.label = label
        self.distribution = distribution

    def ppf(self, u: np.ndarray) -> np.ndarray:
        """Quantile function applied elementwise to uniforms in (0, 1)."""
        return self.distribution.ppf(u)

    def cdf(self, x: np.ndarray) -> np.ndarray:
        return self.distribution.cdf(x)

    @classmethod
    def from_name(cls, name: str) -> 'Margin':
        """
        Look up a margin by label, member name or link-function alias.

        Args:
            name: e.g. 'gumbel', 'GUMBEL', 'cloglog', 'probit'

        Returns:
            Matching Margin member

        Raises:
            ValueError: If the name is unknown
        """
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower()
        if key in LINK_ALIASES:
            return LINK_ALIASES[key]
        for member in cls:
            if key in (member.label, member.name.lower()):
                return member
        valid = sorted({m.label for m in cls} | set(LINK_ALIASES))
        raise ValueError(f"Unknown margin '{name}'. Must be one of {valid}")


# Link functions of cumulative/binary models and the latent margin they imply
LINK_ALIASES = {
    'probit': Margin.NORMAL,
    'logit': Margin.LOGISTIC,
    'cloglog': Margin.GUMBEL_MIN,
    'cauchit': Margin.CAUCHY,
}
