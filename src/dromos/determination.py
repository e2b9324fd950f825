'''Orbit determination: inertial state -> osculating orbital elements

Gauss vector method. Singular geometries (circular or equatorial orbits)
never divide by a near-zero node vector or eccentricity; they take the
fallback below and the result is flagged degenerate:

- equatorial (|N|/|h| below threshold): omega = 0
- circular (e below threshold): w = 0, anomaly measured from the node
- equatorial and eccentric: w is the longitude of periapsis from the x-axis
  (mirrored for retrograde orbits), so the elements still reproduce the state
- equatorial and circular: omega = w = 0, anomaly measured from the x-axis
'''

import warnings

import numpy as np

from .config import config
from .errors import InvalidState, NumericOverflow, DegenerateGeometry
from .frames import inertial_to_perifocal
from .kepler import eccentric_from_true, mean_from_eccentric, TWO_PI
from .orbital_elements import OrbitalElementSet
from .utils import as_vector3


def _node_angle(n_vec, n_mag):
    # longitude of the ascending node, quadrant from N_y
    raan = np.arccos(np.clip(n_vec[0] / n_mag, -1.0, 1.0))
    if n_vec[1] < 0.0:
        raan = TWO_PI - raan
    return raan


def _periapsis_angle(n_vec, n_mag, e_vec, e, h_vec, equatorial):
    if not equatorial:
        argp = np.arccos(np.clip(np.dot(n_vec, e_vec) / (n_mag * e), -1.0, 1.0))
        if e_vec[2] < 0.0:
            argp = TWO_PI - argp
        return argp
    # longitude of periapsis; R1(180 deg) mirrors the in-plane angle
    lon_peri = np.arctan2(e_vec[1], e_vec[0])
    if h_vec[2] < 0.0:
        lon_peri = -lon_peri
    return np.mod(lon_peri, TWO_PI)


def determine(position, velocity, mu: float, dt: float = 0.0) -> OrbitalElementSet:
    """
    Osculating orbital elements from an inertial state.

    Parameters
    ----------
    position : array-like
        (3,) position relative to the central body
    velocity : array-like
        (3,) velocity relative to the central body
    mu : float
        Gravitational parameter of the central body
    dt : float, optional
        Time of the state since the element epoch; the returned L0 refers
        to the epoch (default 0)

    Returns
    -------
    OrbitalElementSet
        Elements with period set from mu, ``degenerate`` set when a
        fallback convention was used

    Raises
    ------
    InvalidState
        If inputs are non-finite, the position is zero or mu <= 0
    NumericOverflow
        If the specific energy is non-negative (parabolic/hyperbolic) or the
        state is rectilinear

    Warns
    -----
    DegenerateGeometry
        When a fallback convention was used and config.WARN_ON_DEGENERATE
    """
    try:
        rvec = as_vector3(position, "position")
        vvec = as_vector3(velocity, "velocity")
    except ValueError as exc:
        raise InvalidState(str(exc)) from exc
    if not (np.all(np.isfinite(rvec)) and np.all(np.isfinite(vvec))):
        raise InvalidState("Position or velocity contains NaN or Inf")
    if not (np.isfinite(mu) and mu > 0):
        raise InvalidState(f"Gravitational parameter must be positive, got mu={mu}")
    if not np.isfinite(dt):
        raise InvalidState(f"Time offset must be finite, got dt={dt}")
    r_mag = np.linalg.norm(rvec)
    if r_mag == 0.0:
        raise InvalidState("Position vector has zero length")
    v_mag = np.linalg.norm(vvec)

    # specific energy and semi-major axis
    energy = v_mag**2 / 2 - mu / r_mag
    if energy >= 0.0:
        raise NumericOverflow(
            f"Non-negative specific energy ({energy}): state is on an open "
            f"(parabolic or hyperbolic) trajectory")
    a = -mu / (2 * energy)

    # angular momentum, node and eccentricity vectors
    hvec = np.cross(rvec, vvec)
    h_mag = np.linalg.norm(hvec)
    if h_mag <= config.DEGENERATE_THRESHOLD * r_mag * v_mag:
        raise NumericOverflow("Rectilinear state: angular momentum is zero (e = 1)")
    nvec = np.array([-hvec[1], hvec[0], 0.0])
    n_mag = np.linalg.norm(nvec)
    evec = np.cross(vvec, hvec) / mu - rvec / r_mag
    e = np.linalg.norm(evec)
    if e >= 1.0:
        raise NumericOverflow(f"Eccentricity {e} >= 1 for a bound state")

    equatorial = n_mag < config.DEGENERATE_THRESHOLD * h_mag
    circular = e < config.DEGENERATE_THRESHOLD

    # atan2 keeps precision near 0 and 180 degrees
    inc = np.arctan2(n_mag, hvec[2])
    raan = 0.0 if equatorial else _node_angle(nvec, n_mag)
    argp = 0.0 if circular else _periapsis_angle(nvec, n_mag, evec, e, hvec, equatorial)

    # true anomaly from the position in the same perifocal frame propagation uses
    r_pf = inertial_to_perifocal(raan, inc, argp) @ rvec
    nu = np.arctan2(r_pf[1], r_pf[0])
    E = eccentric_from_true(nu, e)
    M = mean_from_eccentric(E, e)

    # back to the epoch with the mean motion
    n = np.sqrt(mu / a**3)
    M0 = np.mod(M - n*dt, TWO_PI)
    L0 = np.degrees(M0 + argp + raan)

    degenerate = bool(equatorial or circular)
    if degenerate and config.WARN_ON_DEGENERATE:
        kind = " and ".join(k for k, flag in
                            (("equatorial", equatorial), ("circular", circular)) if flag)
        warnings.warn(
            f"Degenerate {kind} geometry (|N|/|h|={n_mag / h_mag:.3e}, e={e:.3e}); "
            f"using fallback angle convention", DegenerateGeometry, stacklevel=2)

    return OrbitalElementSet(
        e=e, a=a, i=np.degrees(inc), omega=np.degrees(raan),
        w=np.degrees(argp), L0=L0, period=TWO_PI / n, degenerate=degenerate)
