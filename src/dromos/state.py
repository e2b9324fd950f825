'''Inertial position/velocity state
StateVector class definition'''

import numpy as np

from .config import config
from .utils import as_vector3


class StateVector:
    """
    Immutable inertial state of a body relative to its central body.

    Holds a read-only position and velocity. The gravitational parameter and
    time offset that produced the state belong to the caller and are not
    stored here.
    """

    # ========== CONSTRUCTION ==========
    def __init__(self, position, velocity):
        """
        Parameters
        ----------
        position : array-like
            (3,) position vector [length]
        velocity : array-like
            (3,) velocity vector [length/time]
        """
        self._position = as_vector3(position, "position").copy()
        self._velocity = as_vector3(velocity, "velocity").copy()
        self._position.flags.writeable = False
        self._velocity.flags.writeable = False

    @classmethod
    def from_array(cls, array):
        """Build from a 6-element array [x, y, z, vx, vy, vz]."""
        array = np.asarray(array, dtype=np.float64)
        if array.shape != (6,):
            raise ValueError(f"State array must have shape (6,), got {array.shape}")
        return cls(array[:3], array[3:])

    # ========== PROPERTY ACCESS ==========
    @property
    def position(self) -> np.ndarray:
        """Position vector"""
        return self._position

    @property
    def velocity(self) -> np.ndarray:
        """Velocity vector"""
        return self._velocity

    @property
    def radius(self) -> float:
        """|position|"""
        return float(np.linalg.norm(self._position))

    @property
    def speed(self) -> float:
        """|velocity|"""
        return float(np.linalg.norm(self._velocity))

    # ========== ORBITAL PROPERTIES ==========
    def angular_momentum(self) -> np.ndarray:
        """Specific angular momentum vector h = r x v"""
        return np.cross(self._position, self._velocity)

    def specific_energy(self, mu: float) -> float:
        """Specific orbital energy v^2/2 - mu/r"""
        return self.speed**2 / 2 - mu / self.radius

    def flight_path_angle(self) -> float:
        """Angle between velocity and the local horizontal [rad]"""
        h = np.linalg.norm(self.angular_momentum())
        return float(np.arctan2(np.dot(self._position, self._velocity), h))

    # ========== UTILITY METHODS ==========
    def with_delta_v(self, delta_v) -> "StateVector":
        """New state with an impulsive velocity change added."""
        return StateVector(self._position, self._velocity + as_vector3(delta_v, "delta_v"))

    def to_array(self) -> np.ndarray:
        """Concatenated [x, y, z, vx, vy, vz] copy"""
        return np.concatenate([self._position, self._velocity])

    # ========== SPECIAL METHODS ==========
    def __iter__(self):
        #Allow unpacking: r, v = state
        return iter((self._position, self._velocity))

    def __repr__(self):
        return (f"StateVector(position={self._position.tolist()}, "
                f"velocity={self._velocity.tolist()})")

    def __str__(self):
        r = self._position
        v = self._velocity
        return (f"State Vector:\n"
                f"  r = [{r[0]:14.4f}, {r[1]:14.4f}, {r[2]:14.4f}]\n"
                f"  v = [{v[0]:14.6f}, {v[1]:14.6f}, {v[2]:14.6f}]")

    def __eq__(self, other):
        #Check equality with tolerance
        if not isinstance(other, StateVector):
            return NotImplemented
        return bool(np.allclose(self.to_array(), other.to_array(),
                           rtol=config.EQUALITY_RTOL,
                           atol=config.EQUALITY_ATOL))

    def __hash__(self):
        # __eq__ is tolerance based, so no rounded key is stable under it
        return hash(StateVector)
