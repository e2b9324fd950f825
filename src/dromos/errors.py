"""
Exception and warning types raised by the Dromos engine.

Every failure is raised where it is detected; the engine never retries and
never returns NaN in place of an error. Geometry that forces a fallback
convention during orbit determination is not an error: it is reported with
the DegenerateGeometry warning category and tagged on the result.
"""


class DromosError(Exception):
    """Base class for all errors raised by Dromos."""


class InvalidElements(DromosError, ValueError):
    """Orbital elements outside the supported (elliptical) domain.

    Raised for e outside [0, 1), a <= 0, a non-positive mu or non-finite
    inputs passed to forward propagation or the Kepler solver.
    """


class InvalidState(DromosError, ValueError):
    """Position/velocity input that cannot be turned into elements."""


class SolverDivergence(DromosError, RuntimeError):
    """Kepler solver exceeded its iteration cap without converging."""

    def __init__(self, message, mean_anomaly=None, eccentricity=None,
                 iterations=None):
        super().__init__(message)
        self.mean_anomaly = mean_anomaly
        self.eccentricity = eccentricity
        self.iterations = iterations


class NumericOverflow(DromosError, ArithmeticError):
    """State with non-negative specific energy (parabolic or hyperbolic)."""


class DegenerateGeometry(UserWarning):
    """Near-zero node vector or eccentricity during orbit determination.

    The returned elements use the documented fallback convention and are
    flagged with ``degenerate=True``.
    """
