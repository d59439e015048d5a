"""
Utility functions.
"""

import numpy as np

from .exceptions import DomainError, NumericError


def check_array(X, name='X', dtype=np.float64):
    """Validate matrix input."""
    X = np.asarray(X, dtype=dtype)
    if X.ndim != 2:
        raise ValueError(f"{name} must be 2-dimensional")
    if not np.all(np.isfinite(X)):
        raise ValueError(f"{name} contains NaN or Inf")
    return X


def check_vector(y, name='y', dtype=np.float64, size=None):
    """Validate vector input."""
    y = np.asarray(y, dtype=dtype)
    if y.ndim == 0:
        y = y.reshape(1)
    if y.ndim != 1:
        raise ValueError(f"{name} must be 1-dimensional")
    if size is not None and y.shape[0] != size:
        raise ValueError(f"{name} has length {y.shape[0]}, expected {size}")
    if not np.all(np.isfinite(y)):
        raise ValueError(f"{name} contains NaN or Inf")
    return y


def check_positive(value, name='dispersion'):
    """Validate a strictly positive scalar (checked on every evaluation)."""
    value = float(value)
    if not value > 0:
        raise DomainError(f"{name} must be positive, got {value}")
    return value


def check_predictor(eta, name='eta', size=None):
    """
    Validate a linear predictor recomputed on every evaluation.

    Non-finite values come from upstream parameter draws, so they are a
    NumericError (reject the proposal) rather than a setup ValueError.
    """
    eta = np.asarray(eta, dtype=np.float64)
    if eta.ndim == 0:
        eta = eta.reshape(1)
    if eta.ndim != 1:
        raise ValueError(f"{name} must be 1-dimensional")
    if size is not None and eta.shape[0] != size:
        raise ValueError(f"{name} has length {eta.shape[0]}, expected {size}")
    if not np.all(np.isfinite(eta)):
        raise NumericError(f"{name} contains NaN or Inf")
    return eta
