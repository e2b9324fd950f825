'''Boundary used by the host application once per tick per body

The host (renderer, simulator) owns the per-body element snapshots and the
central-body mu values; these functions read them and return values.
'''

import warnings
from typing import Dict, Mapping, Union

import numpy as np
import pandas as pd

from .determination import determine
from .errors import DromosError
from .orbital_elements import OrbitalElementSet
from .propagation import propagate
from .state import StateVector


def compute_state_at_time(elements: OrbitalElementSet, delta_time: float,
                          mu: float) -> StateVector:
    """State of one body ``delta_time`` after its element epoch."""
    return propagate(elements, delta_time, mu)


def compute_elements_from_state(position, velocity, mu: float,
                                delta_time: float = 0.0) -> OrbitalElementSet:
    """Osculating elements of one body, referred back to its epoch."""
    return determine(position, velocity, mu, delta_time)


def _mu_for(mu, name):
    if isinstance(mu, Mapping):
        if name not in mu:
            raise KeyError(f"No gravitational parameter given for body '{name}'")
        return mu[name]
    return mu


def propagate_bodies(bodies: Mapping[str, OrbitalElementSet], delta_time: float,
                     mu: Union[float, Mapping[str, float]]
                     ) -> Dict[str, Union[StateVector, DromosError]]:
    """
    Propagate many bodies, isolating failures per body.

    Parameters
    ----------
    bodies : mapping
        Body name -> current element snapshot
    delta_time : float
        Time since epoch, shared by all bodies
    mu : float or mapping
        One gravitational parameter for all bodies, or body name -> mu
        (moons and planets orbit different primaries)

    Returns
    -------
    dict
        Body name -> StateVector, or the DromosError raised for that body.
        A failing body is reported with a warning and does not stop the
        others.

    Raises
    ------
    KeyError
        If ``mu`` is a mapping without an entry for one of the bodies. The
        mu table is caller configuration, so this aborts the whole batch
        before any body is propagated.
    """
    mus = {name: _mu_for(mu, name) for name in bodies}
    results = {}
    for name, elements in bodies.items():
        try:
            results[name] = propagate(elements, delta_time, mus[name])
        except DromosError as exc:
            warnings.warn(f"Propagation failed for '{name}': {exc}",
                          UserWarning, stacklevel=2)
            results[name] = exc
    return results


def bodies_to_dataframe(results: Mapping[str, Union[StateVector, DromosError]]
                        ) -> pd.DataFrame:
    """
    Flatten :func:`propagate_bodies` output to a DataFrame.

    Returns
    -------
    pd.DataFrame
        Indexed by body name with columns x, y, z, vx, vy, vz, ok, error.
        Failed bodies have NaN state and the error message.
    """
    columns = ['x', 'y', 'z', 'vx', 'vy', 'vz']
    rows = []
    for result in results.values():
        if isinstance(result, StateVector):
            rows.append(list(result.to_array()) + [True, None])
        else:
            rows.append([np.nan] * 6 + [False, f"{type(result).__name__}: {result}"])
    return pd.DataFrame(rows, columns=columns + ['ok', 'error'],
                        index=pd.Index(list(results.keys()), name='body'))
