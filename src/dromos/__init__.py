"""
Dromos: Two-Body Orbit Engine

A Python package for converting between classical orbital elements and
inertial position/velocity under unperturbed two-body gravity, in both
directions, with a shared Kepler solver and frame rotation.
"""

# Configuration
from .config import config, temp_config, DromosConfig

# Error taxonomy
from .errors import (
    DromosError, InvalidElements, InvalidState, SolverDivergence,
    NumericOverflow, DegenerateGeometry,
)

# Core value types
from .orbital_elements import OrbitalElementSet, OrbitalElementSet as OES
from .state import StateVector

# Engine components
from .kepler import (
    solve_kepler, true_from_eccentric, eccentric_from_true,
    mean_from_eccentric, mean_from_true, true_from_mean,
)
from .frames import perifocal_to_inertial, inertial_to_perifocal
from .propagation import propagate, sample_orbit, state_table
from .determination import determine
from .maneuver import apply_impulse
from .engine import (
    compute_state_at_time, compute_elements_from_state,
    propagate_bodies, bodies_to_dataframe,
)

# Package metadata
__version__ = "0.1.0"

# Define what gets imported with "from dromos import *"
__all__ = [
    # Configuration
    "config",
    "temp_config",
    "DromosConfig",
    # Errors
    "DromosError",
    "InvalidElements",
    "InvalidState",
    "SolverDivergence",
    "NumericOverflow",
    "DegenerateGeometry",
    # Classes
    "OrbitalElementSet",
    "StateVector",
    # Abbreviations
    "OES",
    # Functions
    "solve_kepler",
    "true_from_eccentric",
    "eccentric_from_true",
    "mean_from_eccentric",
    "mean_from_true",
    "true_from_mean",
    "perifocal_to_inertial",
    "inertial_to_perifocal",
    "propagate",
    "sample_orbit",
    "state_table",
    "determine",
    "apply_impulse",
    "compute_state_at_time",
    "compute_elements_from_state",
    "propagate_bodies",
    "bodies_to_dataframe",
]
