"""
Global Configuration for Dromos Package
=======================================

This module provides package-wide configuration settings that users can modify
to control solver tolerances, degenerate-geometry thresholds, validation
behavior and equality comparisons.

Examples
--------
View current configuration:

>>> import dromos
>>> print(dromos.config)

Modify settings:

>>> dromos.config.KEPLER_TOL = 1e-12  # Tighter Kepler solver
>>> dromos.config.DEFAULT_PATH_POINTS = 2000  # Denser orbit paths

Reset to defaults:

>>> dromos.config.reset()

Temporarily modify settings:

>>> with dromos.temp_config(WARN_ON_DEGENERATE=False):
...     # No DegenerateGeometry warnings for this block only
...     elements = dromos.determine(r, v, mu)

Notes
-----
These settings affect package-wide behavior. Modifying them will impact
all subsequent operations until changed again or reset.
"""

from dataclasses import dataclass
from contextlib import contextmanager


@dataclass
class DromosConfig:
    """
    Global configuration for Dromos package.

    Attributes
    ----------
    EQUALITY_RTOL : float
        Relative tolerance for floating-point equality comparisons of
        lengths, velocities and eccentricity.
        Default: 1e-12
    EQUALITY_ATOL : float
        Absolute tolerance for floating-point equality comparisons.
        Default: 1e-14
    ANGLE_ATOL : float
        Absolute tolerance in degrees for angle equality comparisons.
        Angles are compared modulo 360 degrees.
        Default: 1e-10
    KEPLER_TOL : float
        Convergence tolerance on the Newton step of the Kepler solver [rad].
        Default: 1e-8
    KEPLER_MAX_ITER : int
        Iteration cap of the Kepler solver. Exceeding it raises
        SolverDivergence.
        Default: 100
    DEGENERATE_THRESHOLD : float
        Normalized threshold below which the node vector (|N|/|h|) or the
        eccentricity is treated as zero during orbit determination.
        Default: 1e-8
    PERIOD_RTOL : float
        Relative tolerance between a stored period and the period implied
        by a and mu before a consistency warning is issued.
        Default: 1e-6
    STRICT_VALIDATION : bool
        If True, validation failures raise exceptions.
        If False, validation failures issue warnings.
        Default: True
    WARN_ON_DEGENERATE : bool
        If True, orbit determination issues a DegenerateGeometry warning
        whenever a fallback convention is used.
        Default: True
    DEFAULT_PATH_POINTS : int
        Default number of samples for orbit paths.
        Default: 360
    """

    # Numerical tolerance for equality comparisons
    EQUALITY_RTOL: float = 1e-12
    EQUALITY_ATOL: float = 1e-14
    ANGLE_ATOL: float = 1e-10

    # Kepler solver
    KEPLER_TOL: float = 1e-8
    KEPLER_MAX_ITER: int = 100

    # Singular geometry handling
    DEGENERATE_THRESHOLD: float = 1e-8
    PERIOD_RTOL: float = 1e-6

    # Validation behavior
    STRICT_VALIDATION: bool = True
    WARN_ON_DEGENERATE: bool = True

    # Sampling defaults
    DEFAULT_PATH_POINTS: int = 360

    def reset(self):
        """
        Reset all configuration values to package defaults.

        Examples
        --------
        >>> import dromos
        >>> dromos.config.KEPLER_MAX_ITER = 5  # Modify
        >>> dromos.config.reset()  # Back to defaults
        >>> dromos.config.KEPLER_MAX_ITER
        100
        """
        defaults = DromosConfig()
        for key in self.__dataclass_fields__:
            setattr(self, key, getattr(defaults, key))

    def __repr__(self):
        """Return formatted string showing all configuration values."""
        lines = ["DromosConfig:"]
        lines.append("  Numerical Tolerances:")
        lines.append(f"    EQUALITY_RTOL = {self.EQUALITY_RTOL}")
        lines.append(f"    EQUALITY_ATOL = {self.EQUALITY_ATOL}")
        lines.append(f"    ANGLE_ATOL = {self.ANGLE_ATOL}")
        lines.append("  Kepler Solver:")
        lines.append(f"    KEPLER_TOL = {self.KEPLER_TOL}")
        lines.append(f"    KEPLER_MAX_ITER = {self.KEPLER_MAX_ITER}")
        lines.append("  Degenerate Geometry:")
        lines.append(f"    DEGENERATE_THRESHOLD = {self.DEGENERATE_THRESHOLD}")
        lines.append(f"    PERIOD_RTOL = {self.PERIOD_RTOL}")
        lines.append("  Behavior:")
        lines.append(f"    STRICT_VALIDATION = {self.STRICT_VALIDATION}")
        lines.append(f"    WARN_ON_DEGENERATE = {self.WARN_ON_DEGENERATE}")
        lines.append("  Sampling:")
        lines.append(f"    DEFAULT_PATH_POINTS = {self.DEFAULT_PATH_POINTS}")
        return "\n".join(lines)


# Global configuration instance
config = DromosConfig()


@contextmanager
def temp_config(**kwargs):
    """
    Context manager for temporarily modifying configuration values.

    Configuration is automatically restored when the context exits,
    even if an exception occurs.

    Parameters
    ----------
    **kwargs
        Configuration attributes to temporarily modify.

    Examples
    --------
    >>> import dromos
    >>> with dromos.temp_config(KEPLER_MAX_ITER=3):
    ...     # Very small iteration budget for this block only
    ...     dromos.solve_kepler(0.1, 0.99)
    Traceback (most recent call last):
    ...
    dromos.errors.SolverDivergence: ...
    >>> # Original config restored here
    >>> dromos.config.KEPLER_MAX_ITER
    100

    Raises
    ------
    AttributeError
        If an invalid configuration attribute is specified.
    """
    old_values = {}
    for key, value in kwargs.items():
        if not hasattr(config, key):
            raise AttributeError(
                f"DromosConfig has no attribute '{key}'. "
                f"Valid attributes: {list(config.__dataclass_fields__.keys())}"
            )
        old_values[key] = getattr(config, key)
        setattr(config, key, value)

    try:
        yield config
    finally:
        for key, value in old_values.items():
            setattr(config, key, value)
