"""
Beta precision sub-model.

Turns a secondary design matrix Z and coefficients ω into a
per-observation precision φᵢ = h⁻¹(ηᶻᵢ).
"""

import numpy as np
from typing import Optional

from .families import Family
from .identifiability import AdjustedPredictor, shift_predictor
from .links import inverse_link_phi
from .._utils import check_array, check_vector
from ..exceptions import ConfigurationError, DomainError


def _phi_bounds(link_phi: int):
    # log link is unconstrained; identity and sqrt need ηᶻ ≥ 0
    if link_phi == 1:
        return -np.inf, np.inf
    return 0.0, np.inf


def dispersion_predictor(
    config,
    Z: Optional[np.ndarray] = None,
    omega: Optional[np.ndarray] = None,
    intercept_z: Optional[float] = None,
    zbar: Optional[np.ndarray] = None,
    n: Optional[int] = None,
) -> AdjustedPredictor:
    """
    Compute the adjusted precision predictor ηᶻ.

    Parameters
    ----------
    config : ModelConfig
        Must be a beta configuration with link_phi > 0
    Z : ndarray, shape (n, q), optional
        Secondary design matrix (centered when there is an intercept).
        May have zero columns.
    omega : ndarray, shape (q,), optional
        Secondary coefficients
    intercept_z : float, optional
        Sampled precision intercept; required iff config.has_intercept_z
    zbar : ndarray, shape (q,), optional
        Column means of the uncentered Z
    n : int, optional
        Number of observations, required when Z is None

    Returns
    -------
    AdjustedPredictor
        ``eta`` is the final ηᶻ; ``reported_intercept`` is the precision
        intercept on the uncentered scale (ω_int)

    Notes
    -----
    With an intercept the shift follows the precision link: −min(ηᶻ) for
    identity/sqrt, none for log. Without one, ηᶻ is anchored at the mean
    profile by adding zbar·ω.
    """
    if config.family != Family.BETA or not config.has_dispersion_submodel:
        raise ConfigurationError(
            f"No precision sub-model for '{config.describe()}'"
        )

    if Z is None:
        if n is None:
            raise ValueError("n is required when Z is not given")
        Z = np.zeros((n, 0))
    else:
        Z = check_array(Z, name='Z')

    q = Z.shape[1]
    if q > 0:
        omega = check_vector(omega, name='omega', size=q)
        eta_z = Z @ omega
    else:
        omega = np.zeros(0)
        eta_z = np.zeros(Z.shape[0])

    centering = 0.0
    if zbar is not None and q > 0:
        zbar = check_vector(zbar, name='zbar', size=q)
        centering = float(np.dot(zbar, omega))

    if config.has_intercept_z:
        if intercept_z is None:
            raise ValueError("intercept_z is required when has_intercept_z=True")
        return shift_predictor(eta_z, intercept_z, _phi_bounds(config.link_phi), centering)

    if intercept_z is not None:
        raise ValueError("intercept_z given but the model has no precision intercept")
    return shift_predictor(eta_z, None, _phi_bounds(config.link_phi), centering)


def precision(config, eta_z, backend=None) -> np.ndarray:
    """
    Per-observation precision φ = h⁻¹(ηᶻ).

    Raises
    ------
    DomainError
        If any precision is not strictly positive
    """
    mu_z = inverse_link_phi(eta_z, config.link_phi, backend=backend)
    if not np.all(mu_z > 0):
        raise DomainError(
            f"Precision must be positive for all observations under "
            f"'{config.describe()}' (min = {np.min(mu_z):.6g})"
        )
    return mu_z


__all__ = ["dispersion_predictor", "precision"]
