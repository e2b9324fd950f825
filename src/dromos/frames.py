'''Perifocal to inertial frame rotation

The classical 3-1-3 sequence: rotate by the argument of periapsis about the
orbit normal, by the inclination about the line of nodes, then by the
ascending-node longitude about the inertial pole. Propagation and orbit
determination both build their matrix here.'''

import numpy as np


def rot_z(angle: float) -> np.ndarray:
    """Active rotation about the z-axis by angle [rad]."""
    c, s = np.cos(angle), np.sin(angle)
    return np.array([
        [c,  -s,  0.0],
        [s,   c,  0.0],
        [0.0, 0.0, 1.0]
    ])


def rot_x(angle: float) -> np.ndarray:
    """Active rotation about the x-axis by angle [rad]."""
    c, s = np.cos(angle), np.sin(angle)
    return np.array([
        [1.0, 0.0, 0.0],
        [0.0, c,  -s  ],
        [0.0, s,   c  ]
    ])


def perifocal_to_inertial(raan: float, inc: float, argp: float) -> np.ndarray:
    """
    Direction cosine matrix from the perifocal (PQW) frame to the inertial frame.

    Parameters
    ----------
    raan : float
        Longitude of the ascending node [rad]
    inc : float
        Inclination [rad]
    argp : float
        Argument of periapsis [rad]

    Returns
    -------
    np.ndarray
        (3, 3) rotation matrix R with r_inertial = R @ r_perifocal
    """
    return rot_z(raan) @ rot_x(inc) @ rot_z(argp)


def inertial_to_perifocal(raan: float, inc: float, argp: float) -> np.ndarray:
    """Transpose of :func:`perifocal_to_inertial`."""
    return perifocal_to_inertial(raan, inc, argp).T
