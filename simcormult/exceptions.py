"""
Simulation Errors
=================

Every failure of a simulation call is a caller error detected before any
random number is drawn (the shape of a supplied latent matrix is checked at
first use). None of them is recoverable; the call produces no output.

All errors derive from SimulationError, itself a ValueError, so code that
already catches ValueError from the config loaders keeps working.
"""


class SimulationError(ValueError):
    """Base class for invalid simulation inputs."""


class InvalidClusterSize(SimulationError):
    """The cluster size (number of occasions) is not a positive integer."""


class InvalidCategoryCount(SimulationError):
    """Fewer than two response categories were requested."""


class DimensionMismatch(SimulationError):
    """Coefficient shape does not match the covariates, occasions or categories."""


class InvalidCorrelationMatrix(SimulationError):
    """Correlation matrix is missing, misshapen, asymmetric, not unit-diagonal or not PSD."""


class ChoiceIndependenceViolation(SimulationError):
    """A within-occasion diagonal block of the correlation matrix is not the identity."""

    def __init__(self, occasion: int, message: str = None):
        self.occasion = occasion
        super().__init__(
            message or
            f"Within-occasion block for occasion {occasion} must be the identity matrix "
            f"(latent utilities of one occasion are independent across categories)"
        )


class LatentMatrixDimensionMismatch(SimulationError):
    """A supplied latent matrix does not have R rows and clsize * ncategories columns."""

    def __init__(self, expected: tuple, actual: tuple):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Latent matrix must have shape {expected}, got {actual}"
        )


class NonFiniteValues(SimulationError):
    """Design matrix, coefficients or a supplied latent matrix contain NaN or infinite values."""


class ColumnNameConflict(SimulationError):
    """A covariate name collides with a column the long-format table reserves."""
