'''Impulsive maneuvers as element snapshot substitution'''

from .determination import determine
from .orbital_elements import OrbitalElementSet
from .propagation import propagate
from .utils import as_vector3


def apply_impulse(elements: OrbitalElementSet, dt: float, mu: float,
                  delta_v) -> OrbitalElementSet:
    """
    Elements after an instantaneous velocity change.

    The body is propagated to ``dt``, ``delta_v`` is added to its inertial
    velocity and the osculating elements of the new state are determined
    with the same epoch. The input snapshot is left untouched; the caller
    replaces it with the returned one.

    Parameters
    ----------
    elements : OrbitalElementSet
        Current snapshot
    dt : float
        Time of the burn since the element epoch
    mu : float
        Gravitational parameter of the central body
    delta_v : array-like
        (3,) inertial velocity increment

    Returns
    -------
    OrbitalElementSet
        New snapshot, period derived from mu

    Raises
    ------
    InvalidElements, SolverDivergence
        From propagation of the current snapshot
    NumericOverflow
        If the burn puts the body on an open trajectory
    """
    state = propagate(elements, dt, mu).with_delta_v(as_vector3(delta_v, "delta_v"))
    return determine(state.position, state.velocity, mu, dt)
