"""
Family log-likelihoods.

Two code paths: an aggregate closed form for unit weights, and a
pointwise vector dotted with arbitrary weights. Both must agree when all
weights are one.
"""

import warnings
import numpy as np
from typing import Optional, Union

from .dispersion import precision
from .stats import SufficientStats, validate_outcome, compute_sufficient_stats
from .._utils import check_positive, check_predictor, check_vector
from ..exceptions import ConfigurationError, NumericError


def _resolve_backend(backend):
    from .._backends import get_backend
    if backend is None:
        return get_backend('cpu')
    return get_backend(backend)


def _prepare(config, y, eta, dispersion, stats, eta_z, backend):
    """Validate per-call inputs; returns (y, eta, dispersion, stats, backend)."""
    backend = _resolve_backend(backend)

    if stats is None:
        y = validate_outcome(y, config)
        stats = compute_sufficient_stats(y, config)
    else:
        y = np.asarray(y, dtype=np.float64)
    eta = check_predictor(eta, size=stats.n)

    if config.has_dispersion_submodel:
        if eta_z is None:
            raise ConfigurationError(
                f"eta_z is required for '{config.describe()}'"
            )
        eta_z = check_predictor(eta_z, name='eta_z', size=stats.n)
        dispersion = precision(config, eta_z, backend=backend)
    else:
        dispersion = check_positive(dispersion)

    return y, eta, dispersion, stats, backend


def check_weights(weights, n: int) -> np.ndarray:
    """Weights must be finite and nonnegative."""
    weights = check_vector(weights, name='weights', size=n)
    if np.any(weights < 0):
        raise ValueError("weights must be nonnegative")
    if n > 0 and not np.any(weights):
        warnings.warn("All weights are zero; the log-likelihood is identically 0")
    return weights


def _finite(value, config, what):
    if not np.all(np.isfinite(value)):
        raise NumericError(
            f"Non-finite {what} for '{config.describe()}'; "
            f"the linear predictor is likely outside the link's domain"
        )
    return value


def log_likelihood(
    config,
    y,
    eta,
    dispersion: Optional[Union[float, np.ndarray]] = None,
    weights=None,
    stats: Optional[SufficientStats] = None,
    eta_z=None,
    backend=None,
) -> float:
    """
    Total log-likelihood of y given the adjusted linear predictor.

    Parameters
    ----------
    config : ModelConfig
        Family/link configuration
    y : array-like, shape (n,)
        Outcome
    eta : array-like, shape (n,)
        Linear predictor after the identifiability shift
    dispersion : float
        σ (gaussian), shape (gamma), λ (inverse gaussian) or φ (beta).
        Ignored when the beta precision sub-model is active.
    weights : array-like, shape (n,), optional
        Observation weights. None selects the closed-form aggregate path.
    stats : SufficientStats, optional
        Precomputed statistics; computed (and y validated) when omitted
    eta_z : array-like, shape (n,), optional
        Adjusted precision predictor (beta sub-model only)
    backend : str or Backend, optional
        Computational backend (default: CPU)

    Returns
    -------
    float

    Raises
    ------
    DomainError
        Dispersion ≤ 0, a precision ≤ 0, or y outside the family support
    NumericError
        Non-finite result
    """
    y, eta, dispersion, stats, backend = _prepare(
        config, y, eta, dispersion, stats, eta_z, backend
    )
    family, link = int(config.family), config.link

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        if weights is None:
            ll = backend.log_likelihood(family, link, y, eta, dispersion, stats)
        else:
            weights = check_weights(weights, stats.n)
            ll = backend.weighted_log_likelihood(
                family, link, y, eta, dispersion, stats, weights
            )

    return float(_finite(ll, config, "log-likelihood"))


def pointwise_log_likelihood(
    config,
    y,
    eta,
    dispersion: Optional[Union[float, np.ndarray]] = None,
    stats: Optional[SufficientStats] = None,
    eta_z=None,
    backend=None,
) -> np.ndarray:
    """
    Per-observation log-likelihood.

    Same arguments as :func:`log_likelihood`, without weights.

    Returns
    -------
    ndarray, shape (n,)
    """
    y, eta, dispersion, stats, backend = _prepare(
        config, y, eta, dispersion, stats, eta_z, backend
    )

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        ll = backend.pointwise_log_likelihood(
            int(config.family), config.link, y, eta, dispersion, stats
        )

    return _finite(np.asarray(ll, dtype=np.float64), config, "pointwise log-likelihood")


__all__ = ["log_likelihood", "pointwise_log_likelihood", "check_weights"]
