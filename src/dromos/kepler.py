'''Kepler equation solver and anomaly conversions

All angles in radians. These conversions are the only place the relation
between mean, eccentric and true anomaly is written down; propagation and
orbit determination both call into this module.'''

import numpy as np

from .config import config
from .errors import InvalidElements, SolverDivergence

TWO_PI = 2.0 * np.pi

# eccentricity above which Newton starts from pi instead of M
_HIGH_ECC = 0.8


def _check_elliptic(e):
    if not np.isfinite(e) or e < 0.0 or e >= 1.0:
        raise InvalidElements(
            f"Eccentricity must be in [0, 1) for elliptical orbits, got e={e}")


def solve_kepler(M: float, e: float, tol: float = None,
                 max_iter: int = None) -> float:
    """
    Solve Kepler's equation  M = E - e sin(E)  via Newton-Raphson.

    Parameters
    ----------
    M : float
        Mean anomaly [rad], any value (normalized to [0, 2pi) internally)
    e : float
        Eccentricity, 0 <= e < 1
    tol : float, optional
        Convergence tolerance on |dE| [rad], defaults to config.KEPLER_TOL
    max_iter : int, optional
        Iteration cap, defaults to config.KEPLER_MAX_ITER

    Returns
    -------
    float
        Eccentric anomaly E [rad] in [0, 2pi]

    Raises
    ------
    InvalidElements
        If e is outside [0, 1) or M is not finite
    SolverDivergence
        If the iteration cap is reached before |dE| < tol
    """
    _check_elliptic(e)
    if not np.isfinite(M):
        raise InvalidElements(f"Mean anomaly must be finite, got M={M}")
    if tol is None:
        tol = config.KEPLER_TOL
    if max_iter is None:
        max_iter = config.KEPLER_MAX_ITER

    M = np.mod(M, TWO_PI)
    # Starting from pi keeps Newton monotone when f'(E) is tiny near periapsis
    E = M if e < _HIGH_ECC else np.pi
    dE = np.inf
    for _ in range(max_iter):
        dE = (E - e*np.sin(E) - M) / (1.0 - e*np.cos(E))
        E -= dE
        if abs(dE) < tol:
            return float(E)

    raise SolverDivergence(
        f"Kepler solver did not converge in {max_iter} iterations "
        f"(M={M}, e={e}, last step={dE})",
        mean_anomaly=float(M), eccentricity=float(e), iterations=max_iter)


def true_from_eccentric(E, e):
    """True anomaly from eccentric anomaly (quadrant-safe)."""
    return np.arctan2(np.sqrt(1.0 - e**2) * np.sin(E), np.cos(E) - e)


def eccentric_from_true(nu, e):
    """Eccentric anomaly from true anomaly (quadrant-safe)."""
    return np.arctan2(np.sqrt(1.0 - e**2) * np.sin(nu), e + np.cos(nu))


def mean_from_eccentric(E, e):
    """Mean anomaly from eccentric anomaly (Kepler's equation)."""
    return E - e * np.sin(E)


def mean_from_true(nu, e):
    """Mean anomaly in [0, 2pi) from true anomaly."""
    _check_elliptic(e)
    return float(np.mod(mean_from_eccentric(eccentric_from_true(nu, e), e),
                        TWO_PI))


def true_from_mean(M, e):
    """True anomaly in [0, 2pi) from mean anomaly."""
    E = solve_kepler(M, e)
    return float(np.mod(true_from_eccentric(E, e), TWO_PI))
