"""
Posterior-predictive simulation.

Draws one outcome per observation from the fitted family/link and
reduces to the mean (mean_PPD). Uses the same inverse links as the
likelihood, so the draws come from the distribution that was scored.
"""

import numpy as np
from typing import Optional, Union

from .dispersion import precision
from .families import Family
from .links import inverse_link
from .._utils import check_positive, check_predictor
from ..exceptions import ConfigurationError, DomainError


def inverse_gaussian_rng(mu, lam: float, rng: np.random.Generator) -> np.ndarray:
    """
    Inverse gaussian draws (Michael, Schucany & Haas, 1976).

    Transforms a squared standard normal into a root of the IG
    quadratic, then picks one of the two roots with a uniform draw.

    Parameters
    ----------
    mu : array-like, shape (n,)
        Means (positive)
    lam : float
        Shape λ (positive)
    rng : numpy.random.Generator
        Random source

    Returns
    -------
    ndarray, shape (n,)
    """
    mu = np.asarray(mu, dtype=np.float64)
    mu2 = np.square(mu)
    v = np.square(rng.standard_normal(mu.shape))
    x = mu + (mu2 * v - mu * np.sqrt(4 * mu * lam * v + mu2 * np.square(v))) * (0.5 / lam)
    z = rng.uniform(0.0, 1.0, mu.shape)
    return np.where(z <= mu / (mu + x), x, mu2 / x)


def _check_rng(rng):
    if not isinstance(rng, np.random.Generator):
        raise TypeError(
            f"rng must be a numpy.random.Generator, got {type(rng).__name__}. "
            f"Use np.random.default_rng(seed)."
        )
    return rng


def _positive_mean(mu, config):
    if not np.all(mu > 0):
        raise DomainError(
            f"Mean must be positive for all observations under '{config.describe()}'"
        )
    return mu


def posterior_predictive_draws(
    config,
    eta,
    dispersion: Optional[Union[float, np.ndarray]],
    rng: np.random.Generator,
    eta_z=None,
    backend=None,
) -> np.ndarray:
    """
    Draw one simulated outcome per observation.

    Parameters
    ----------
    config : ModelConfig
        Family/link configuration
    eta : array-like, shape (n,)
        Adjusted linear predictor (after the identifiability shift)
    dispersion : float
        Family dispersion; ignored when the beta precision sub-model is active
    rng : numpy.random.Generator
        Random source owned by the caller
    eta_z : array-like, shape (n,), optional
        Adjusted precision predictor (beta sub-model only)
    backend : Backend, optional
        Backend for the inverse links

    Returns
    -------
    ndarray, shape (n,)
    """
    rng = _check_rng(rng)
    eta = check_predictor(eta)
    family, link = config.family, config.link

    if config.has_dispersion_submodel:
        if eta_z is None:
            raise ConfigurationError(f"eta_z is required for '{config.describe()}'")
        phi = precision(config, check_predictor(eta_z, name='eta_z', size=eta.shape[0]), backend=backend)
    else:
        phi = check_positive(dispersion)

    if family == Family.GAUSSIAN:
        if link == 2:
            return rng.lognormal(mean=eta, sigma=phi)
        mu = inverse_link(eta, link, family, backend=backend)
        return rng.normal(loc=mu, scale=phi)

    mu = inverse_link(eta, link, family, backend=backend)

    if family == Family.GAMMA:
        mu = _positive_mean(mu, config)
        return rng.gamma(shape=phi, scale=mu / phi)

    if family == Family.INVERSE_GAUSSIAN:
        mu = _positive_mean(mu, config)
        return inverse_gaussian_rng(mu, phi, rng)

    return rng.beta(mu * phi, (1 - mu) * phi)


def posterior_predictive_mean(
    config,
    eta,
    dispersion: Optional[Union[float, np.ndarray]],
    rng: np.random.Generator,
    eta_z=None,
    backend=None,
) -> float:
    """
    Mean of one posterior-predictive draw per observation (mean_PPD).

    Same arguments as :func:`posterior_predictive_draws`.
    """
    draws = posterior_predictive_draws(config, eta, dispersion, rng, eta_z=eta_z, backend=backend)
    return float(np.mean(draws))


__all__ = ["inverse_gaussian_rng", "posterior_predictive_draws", "posterior_predictive_mean"]
