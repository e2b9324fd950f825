'''Forward propagation: orbital elements + elapsed time -> inertial state'''

import warnings

import numpy as np
import pandas as pd

from .config import config
from .errors import InvalidElements
from .frames import perifocal_to_inertial
from .kepler import solve_kepler, true_from_eccentric, TWO_PI
from .orbital_elements import OrbitalElementSet
from .state import StateVector


def _check_inputs(elements: OrbitalElementSet, mu: float):
    if not isinstance(elements, OrbitalElementSet):
        raise TypeError(
            f"elements must be OrbitalElementSet, got {type(elements)}")
    if not np.all(np.isfinite(elements.elements)):
        raise InvalidElements("Elements contain NaN or Inf")
    if elements.e < 0 or elements.e >= 1:
        raise InvalidElements(
            f"Eccentricity must be in [0, 1) for elliptical orbits, got e={elements.e}")
    if elements.a <= 0:
        raise InvalidElements(
            f"Elliptic orbit requires positive semi-major axis, got a={elements.a}")
    if not (np.isfinite(mu) and mu > 0):
        raise InvalidElements(f"Gravitational parameter must be positive, got mu={mu}")


def _check_period(elements: OrbitalElementSet, mu: float):
    if elements.period is None:
        return
    expected = elements.orbital_period(mu)
    if abs(elements.period - expected) > config.PERIOD_RTOL * expected:
        warnings.warn(
            f"Stored period {elements.period} disagrees with 2*pi*sqrt(a^3/mu) = "
            f"{expected}; propagating with mu",
            UserWarning, stacklevel=3)


def propagate(elements: OrbitalElementSet, dt: float, mu: float) -> StateVector:
    """
    Position and velocity at a time offset from the element epoch.

    Parameters
    ----------
    elements : OrbitalElementSet
        Elliptical elements (0 <= e < 1, a > 0)
    dt : float
        Time since epoch, in the time unit of mu (negative goes backward)
    mu : float
        Gravitational parameter of the central body

    Returns
    -------
    StateVector
        Inertial position and velocity relative to the central body

    Raises
    ------
    InvalidElements
        If e is outside [0, 1), a <= 0, mu <= 0 or dt is not finite
    SolverDivergence
        If the Kepler solver exceeds its iteration cap
    """
    _check_inputs(elements, mu)
    if not np.isfinite(dt):
        raise InvalidElements(f"Time offset must be finite, got dt={dt}")
    _check_period(elements, mu)

    e, a, i, omega, w, _ = elements.elements
    # mean motion and mean anomaly at dt
    n = np.sqrt(mu / a**3)
    M0 = np.radians(elements.mean_anomaly_at_epoch)
    M = np.mod(M0 + n*dt, TWO_PI)
    # eccentric and true anomaly
    E = solve_kepler(M, e)
    nu = true_from_eccentric(E, e)
    r_mag = a * (1 - e*np.cos(E))
    # position and velocity in perifocal frame
    h = np.sqrt(mu * a * (1 - e**2))
    rvec = np.array([r_mag*np.cos(nu), r_mag*np.sin(nu), 0.0])
    vvec = np.array([-(mu/h) * np.sin(nu), (mu/h) * (e + np.cos(nu)), 0.0])
    # rotate from perifocal frame to inertial frame using DCM
    DCM = perifocal_to_inertial(np.radians(omega), np.radians(i), np.radians(w))
    return StateVector(DCM @ rvec, DCM @ vvec)


def sample_orbit(elements: OrbitalElementSet, mu: float,
                 n_points: int = None) -> np.ndarray:
    """
    Positions evenly spaced in time over one full period.

    Parameters
    ----------
    elements : OrbitalElementSet
    mu : float
    n_points : int, optional
        Number of samples, defaults to config.DEFAULT_PATH_POINTS

    Returns
    -------
    np.ndarray
        (n_points, 3) array of inertial positions starting at epoch
    """
    if n_points is None:
        n_points = config.DEFAULT_PATH_POINTS
    if n_points < 2:
        raise ValueError("n_points must be at least 2, use propagate()")
    _check_inputs(elements, mu)
    period = elements.orbital_period(mu)
    times = np.arange(n_points) / n_points * period
    return np.array([propagate(elements, t, mu).position for t in times])


def state_table(elements: OrbitalElementSet, times, mu: float) -> pd.DataFrame:
    """
    Export propagated states to a pandas DataFrame.

    Parameters
    ----------
    elements : OrbitalElementSet
    times : array-like
        Time offsets from epoch
    mu : float

    Returns
    -------
    pd.DataFrame
        Columns time, x, y, z, vx, vy, vz
    """
    times = np.atleast_1d(np.asarray(times, dtype=float))
    states = np.array([propagate(elements, t, mu).to_array() for t in times])
    states = states.reshape(len(times), 6)

    data = {
        'time': times,
        'x': states[:, 0],
        'y': states[:, 1],
        'z': states[:, 2],
        'vx': states[:, 3],
        'vy': states[:, 4],
        'vz': states[:, 5],
    }

    return pd.DataFrame(data)
