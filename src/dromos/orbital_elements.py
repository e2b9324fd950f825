'''Orbital element snapshot for the two-body engine
OrbitalElementSet class definition'''

import numpy as np
import pandas as pd
from typing import Optional

from .config import config
from .errors import InvalidElements
from .utils import validation_error, wrap_angle, angle_difference

# positional order of the element array
ELEMENT_NAMES = ('e', 'a', 'i', 'omega', 'w', 'L0')
# indices of the angles stored in [0, 360)
_WRAPPED = (3, 4, 5)


class OrbitalElementSet:
    """
    Immutable set of classical orbital elements for an elliptical orbit.

    Elements are stored as a read-only array [e, a, i, omega, w, L0]:
    eccentricity, semi-major axis, inclination, longitude of the ascending
    node, argument of periapsis and mean longitude at epoch. Angles are in
    degrees; omega, w and L0 are normalized to [0, 360) on construction.

    The snapshot is never mutated. A perturbation yields a new instance
    (see ``replace`` and ``dromos.maneuver.apply_impulse``) that the owner
    swaps in for the old one.
    """

    # ========== CONSTRUCTION ==========
    def __init__(self, elements=None, period=None, degenerate=False,
                 validate=True, **kwargs):
        """
        Create an orbital element set.

        Can be called in two ways:

        1. Array-based:
        OrbitalElementSet([0.0167, 1.496e8, 0.0, 348.7, 102.9, 100.5], period=3.156e7)

        2. Named parameters:
        OrbitalElementSet(e=0.0167, a=1.496e8, i=0.0, omega=348.7, w=102.9,
                          L0=100.5, period=3.156e7)

        Parameters
        ----------
        elements : array-like, optional
            6-element array [e, a, i, omega, w, L0]
        period : float, optional
            Orbital period in the caller's time unit, None if unknown
        degenerate : bool, optional
            True when produced by a fallback convention in orbit determination
        validate : bool, optional
            Whether to validate elements (default True)
        **kwargs : dict
            Named parameters e, a, i, omega, w, L0
        """
        if elements is not None:
            if kwargs:
                raise ValueError(
                    "Provide either an elements array or named parameters, not both")
            elements = np.array(elements, dtype=np.float64)
        elif kwargs:
            elements = self._from_named_params(kwargs)
        else:
            raise ValueError(
                "Must provide either an elements array [e, a, i, omega, w, L0] "
                f"or named parameters {list(ELEMENT_NAMES)}"
            )

        if elements.shape != (6,):
            raise ValueError(
                f"Orbital elements must be 6-element vector, got shape {elements.shape}")
        if np.all(np.isfinite(elements)):
            elements[list(_WRAPPED)] = wrap_angle(elements[list(_WRAPPED)])
        self.elements = elements
        # Ensure immutability of elements array
        self.elements.flags.writeable = False

        self._period = None if period is None else float(period)
        self._degenerate = bool(degenerate)

        # run validation checks on input parameters (if not flagged otherwise)
        if validate:
            self._validate()

    @classmethod
    def from_mu(cls, mu, elements=None, degenerate=False, validate=True,
                **kwargs):
        """
        Create an element set whose period is derived from mu.

        Parameters
        ----------
        mu : float
            Gravitational parameter in the caller's unit system
        elements, degenerate, validate, **kwargs
            As for the constructor

        Returns
        -------
        OrbitalElementSet
        """
        oe = cls(elements, degenerate=degenerate, validate=validate, **kwargs)
        with np.errstate(invalid="ignore", divide="ignore"):
            period = oe.orbital_period(mu)
        # unvalidated sets may have no real period (a <= 0 or mu <= 0)
        if not validate and not np.isfinite(period):
            period = None
        return cls(oe.elements.copy(), period=period, degenerate=degenerate,
                   validate=validate)

    # ========== VALIDATION ==========
    def _validate(self):
        """Check the elliptical-orbit invariants.

        Non-finite values always raise; range violations raise or warn
        depending on config.STRICT_VALIDATION.
        """
        if not np.all(np.isfinite(self.elements)):
            raise InvalidElements("Elements contain NaN or Inf")
        e, a, i, _, _, _ = self.elements
        if e < 0 or e >= 1:
            validation_error(
                f"Eccentricity must be in [0, 1) for elliptical orbits, got e={e}",
                InvalidElements)
        if a <= 0:
            validation_error(
                f"Elliptic orbit requires positive semi-major axis, got a={a}",
                InvalidElements)
        if i < 0 or i > 180:
            validation_error(
                f"Inclination must be in [0, 180] degrees, got i={i}",
                InvalidElements)
        if self._period is not None and not (np.isfinite(self._period)
                                             and self._period > 0):
            validation_error(
                f"Period must be positive and finite, got period={self._period}",
                InvalidElements)

    # ========== FACTORY METHODS ==========
    @classmethod
    def from_numpy(cls, array, periods=None, validate=True):
        """
        Create list of OrbitalElementSet from NumPy array.

        Parameters
        ----------
        array : np.ndarray
            Array of shape (n_orbits, 6) in [e, a, i, omega, w, L0] order
        periods : array-like, optional
            n_orbits periods (None entries allowed)
        validate : bool, optional, defaults to True

        Returns
        -------
        list of OrbitalElementSet
        """
        array = np.asarray(array, dtype=np.float64)
        if array.ndim != 2 or array.shape[1] != 6:
            raise ValueError(f"Array must have shape (n, 6), got {array.shape}")
        if periods is None:
            periods = [None] * len(array)
        elif len(periods) != len(array):
            raise ValueError(
                f"periods length ({len(periods)}) must match "
                f"number of orbits ({len(array)})")

        return [cls(row, period=p, validate=validate)
                for row, p in zip(array, periods)]

    @classmethod
    def from_dataframe(cls, df, validate=True):
        """
        Create list of OrbitalElementSet from pandas DataFrame.

        Parameters
        ----------
        df : pd.DataFrame
            DataFrame with columns e, a, i, omega, w, L0 and optionally
            period and degenerate
        validate : bool, optional, defaults to True

        Returns
        -------
        list of OrbitalElementSet
        """
        missing = [c for c in ELEMENT_NAMES if c not in df.columns]
        if missing:
            raise ValueError(f"DataFrame is missing element columns: {missing}")

        orbits = []
        for _, row in df.iterrows():
            period = row['period'] if 'period' in df.columns else None
            if pd.isna(period) or not np.isfinite(float(period)):
                period = None
            degenerate = bool(row['degenerate']) if 'degenerate' in df.columns else False
            orbits.append(cls(row[list(ELEMENT_NAMES)].to_numpy(dtype=np.float64),
                              period=period, degenerate=degenerate,
                              validate=validate))
        return orbits

    # ========== PROPERTY ACCESS ==========
    @property
    def e(self):
        """Eccentricity"""
        return self.elements[0]

    @property
    def a(self):
        """Semi-major axis"""
        return self.elements[1]

    @property
    def i(self):
        """Inclination [deg]"""
        return self.elements[2]

    @property
    def omega(self):
        """Longitude of the ascending node [deg]"""
        return self.elements[3]

    @property
    def w(self):
        """Argument of periapsis [deg]"""
        return self.elements[4]

    @property
    def L0(self):
        """Mean longitude at epoch [deg]"""
        return self.elements[5]

    @property
    def period(self) -> Optional[float]:
        """Orbital period, None when not known"""
        return self._period

    @property
    def degenerate(self) -> bool:
        """True when a fallback convention produced omega, w or L0"""
        return self._degenerate

    @property
    def mean_anomaly_at_epoch(self):
        """Mean anomaly at epoch M0 = L0 - omega - w, in [0, 360) degrees"""
        return wrap_angle(self.L0 - self.omega - self.w)

    @property
    def periapsis(self):
        """Periapsis radius a(1 - e)"""
        return self.a * (1 - self.e)

    @property
    def apoapsis(self):
        """Apoapsis radius a(1 + e)"""
        return self.a * (1 + self.e)

    # ========== ORBITAL PROPERTIES ==========
    def mean_motion(self, mu):
        """
        Calculate mean motion (n = sqrt(mu/a^3))

        Returns
        -------
        float
            Mean motion [rad per time unit]
        """
        return np.sqrt(mu / self.a**3)

    def orbital_period(self, mu):
        """Orbital period 2*pi*sqrt(a^3/mu) implied by mu"""
        return 2 * np.pi * np.sqrt(self.a**3 / mu)

    def specific_energy(self, mu):
        """Specific orbital energy -mu/(2a)"""
        return -mu / (2 * self.a)

    def specific_angular_momentum(self, mu):
        """Specific angular momentum magnitude sqrt(mu*a*(1-e^2))"""
        return np.sqrt(mu * self.a * (1 - self.e**2))

    # ========== UTILITY METHODS ==========
    def replace(self, **changes):
        """
        Return a new snapshot with some fields changed.

        Accepts any of e, a, i, omega, w, L0, period, degenerate.
        """
        unknown = set(changes) - set(ELEMENT_NAMES) - {'period', 'degenerate'}
        if unknown:
            raise ValueError(f"Unknown element fields: {sorted(unknown)}")
        values = {k: changes.get(k, v) for k, v in zip(ELEMENT_NAMES, self.elements)}
        return OrbitalElementSet(
            period=changes.get('period', self._period),
            degenerate=changes.get('degenerate', self._degenerate),
            **values)

    def copy(self):
        """Create a deep copy of the orbital elements"""
        return OrbitalElementSet(self.elements.copy(), period=self._period,
                                 degenerate=self._degenerate, validate=False)

    def isclose(self, other, rtol=None, atol=None, angle_atol=None):
        """
        Compare with another set, angles modulo 360 degrees.

        Parameters
        ----------
        other : OrbitalElementSet
        rtol : float, optional
            Relative tolerance on a (and period), defaults to config.EQUALITY_RTOL
        atol : float, optional
            Absolute tolerance on e, defaults to config.EQUALITY_ATOL
        angle_atol : float, optional
            Absolute tolerance on angles [deg], defaults to config.ANGLE_ATOL

        Returns
        -------
        bool
        """
        rtol = config.EQUALITY_RTOL if rtol is None else rtol
        atol = config.EQUALITY_ATOL if atol is None else atol
        angle_atol = config.ANGLE_ATOL if angle_atol is None else angle_atol

        if not np.isclose(self.a, other.a, rtol=rtol, atol=atol):
            return False
        if abs(self.e - other.e) > atol + rtol * abs(other.e):
            return False
        angle_err = np.abs(angle_difference(self.elements[2:], other.elements[2:]))
        if np.any(angle_err > angle_atol):
            return False
        if self._period is not None and other._period is not None:
            return bool(np.isclose(self._period, other._period, rtol=rtol, atol=atol))
        return True

    # ========== BATCH OPERATIONS ==========
    class Batch:
        """
        Batch operations on collections of OrbitalElementSet.

        All methods accept a list of OrbitalElementSet and return
        arrays or DataFrames.
        """
        @staticmethod
        def to_numpy(orbits):
            """
            Convert list of OrbitalElementSet to NumPy array.

            Returns
            -------
            np.ndarray
                Array of shape (n_orbits, 6) in [e, a, i, omega, w, L0] order
            """
            if not orbits:
                return np.empty((0, 6))
            return np.array([o.elements for o in orbits])

        @staticmethod
        def periods(orbits):
            """Get periods for multiple orbits (NaN where unknown)"""
            return np.array([np.nan if o.period is None else o.period
                             for o in orbits])

        @staticmethod
        def to_dataframe(orbits, index=None):
            """
            Convert list of OrbitalElementSet to pandas DataFrame.

            Parameters
            ----------
            orbits : list of OrbitalElementSet
            index : array-like, optional
                Index for the DataFrame (e.g., body names).
                If None, uses integer index.

            Returns
            -------
            pd.DataFrame
                Columns e, a, i, omega, w, L0, period, degenerate
            """
            columns = list(ELEMENT_NAMES) + ['period', 'degenerate']
            if not orbits:
                return pd.DataFrame(columns=columns)
            if index is not None and len(index) != len(orbits):
                raise ValueError(
                    f"Index length ({len(index)}) must match "
                    f"number of orbits ({len(orbits)})"
                )
            df = pd.DataFrame(OrbitalElementSet.Batch.to_numpy(orbits),
                              columns=list(ELEMENT_NAMES), index=index)
            df['period'] = OrbitalElementSet.Batch.periods(orbits)
            df['degenerate'] = [o.degenerate for o in orbits]
            return df

    # ========== SPECIAL METHODS ==========
    def __len__(self):
        return 6

    def __getitem__(self, key):
        return self.elements[key]

    def __iter__(self):
        return iter(self.elements)

    def __repr__(self):
        return (f"OrbitalElementSet({self.elements.tolist()}, "
                f"period={self._period}, degenerate={self._degenerate})")

    def __str__(self):
        e, a, i, omega, w, L0 = self.elements
        period = "unknown" if self._period is None else f"{self._period:12.4f}"
        flag = " (degenerate)" if self._degenerate else ""
        return (f"Orbital Elements{flag}:\n"
                f"  e      = {e:12.6f}\n"
                f"  a      = {a:12.4f}\n"
                f"  i      = {i:12.4f}°\n"
                f"  Ω      = {omega:12.4f}°\n"
                f"  ω      = {w:12.4f}°\n"
                f"  L0     = {L0:12.4f}°\n"
                f"  period = {period}")

    def __eq__(self, other):
        #Check equality with tolerance
        if not isinstance(other, OrbitalElementSet):
            return NotImplemented
        return (self._degenerate == other._degenerate and
                (self._period is None) == (other._period is None) and
                self.isclose(other))

    def __hash__(self):
        # Only the fields __eq__ compares exactly; tolerant fields have no
        # rounding that keeps equal sets in one bucket across the 0/360 wrap
        return hash((self._degenerate, self._period is None))

    # ========== STATIC METHODS ==========
    @staticmethod
    def _from_named_params(kwargs):
        """Convert named parameters to an elements array."""
        missing = [k for k in ELEMENT_NAMES if k not in kwargs]
        unknown = [k for k in kwargs if k not in ELEMENT_NAMES]
        if missing or unknown:
            raise ValueError(
                f"Could not build elements from parameters: {list(kwargs)}\n"
                f"Required: {list(ELEMENT_NAMES)}"
            )
        return np.array([kwargs[k] for k in ELEMENT_NAMES], dtype=np.float64)
