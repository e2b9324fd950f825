"""
Utility functions for the Dromos package.
"""

import warnings
from typing import Type

import numpy as np

from .config import config


def validation_error(message: str, error_class: Type[Exception] = ValueError):
    """
    Raise error or warn based on config.STRICT_VALIDATION.

    This function provides consistent validation behavior across the package.
    When STRICT_VALIDATION is True (default), raises the specified exception.
    When False, issues a UserWarning instead.

    Parameters
    ----------
    message : str
        Validation error message
    error_class : Type[Exception], optional
        Exception class to raise if STRICT_VALIDATION is True.
        Default: ValueError

    Raises
    ------
    Exception (of type error_class)
        If config.STRICT_VALIDATION is True

    Warns
    -----
    UserWarning
        If config.STRICT_VALIDATION is False

    Examples
    --------
    >>> from dromos.utils import validation_error
    >>> from dromos import config, InvalidElements
    >>> config.STRICT_VALIDATION = True
    >>> validation_error("Invalid value")  # Raises ValueError
    >>> validation_error("e out of range", InvalidElements)  # Raises InvalidElements

    >>> config.STRICT_VALIDATION = False
    >>> validation_error("Invalid value")  # Issues warning
    """
    if config.STRICT_VALIDATION:
        raise error_class(message)
    else:
        warnings.warn(message, UserWarning, stacklevel=2)


def wrap_angle(angle, period=360.0):
    """Wrap an angle (or array of angles) into [0, period).

    Works for degrees (default) or radians (``period=2*np.pi``).
    """
    wrapped = np.mod(angle, period)
    # np.mod of a tiny negative value rounds to exactly `period`
    wrapped = np.where(wrapped >= period, 0.0, wrapped)
    return float(wrapped) if np.ndim(wrapped) == 0 else wrapped


def angle_difference(a, b, period=360.0):
    """Signed smallest difference ``a - b`` in (-period/2, period/2]."""
    half = period / 2.0
    diff = np.mod(np.asarray(a) - np.asarray(b) + half, period) - half
    diff = np.where(diff == -half, half, diff)
    return float(diff) if np.ndim(diff) == 0 else diff


def as_vector3(value, name: str) -> np.ndarray:
    """Coerce input to a float64 (3,) array, raising ValueError otherwise."""
    vec = np.asarray(value, dtype=np.float64)
    if vec.shape != (3,):
        raise ValueError(f"{name} must be a 3-component vector, got shape {vec.shape}")
    return vec
