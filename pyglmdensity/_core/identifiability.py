"""
Intercept / identifiability shift.

Keeps the linear predictor inside the domain of its link. When the link
needs a bounded predictor, the predictor is shifted so that its extreme
value sits at zero and the intercept is the value at that extreme.
The same routine serves fitting and the reported (generated) intercept.
"""

import numpy as np
from typing import Optional, Tuple
from dataclasses import dataclass

from .._utils import check_predictor
from ..exceptions import DomainError


@dataclass
class AdjustedPredictor:
    """Result of the identifiability shift."""
    eta: np.ndarray                # Final predictor: shifted + intercept
    shifted: np.ndarray            # Predictor after the domain shift, before the intercept
    shift: float                   # −min(η), −max(η) or 0
    intercept: Optional[float]     # Sampled intercept (value at the extreme)
    reported_intercept: Optional[float]  # Intercept of the uncentered design

    def __iter__(self):
        # unpacks as (eta, reported_intercept)
        yield self.eta
        yield self.reported_intercept


def shift_predictor(
    eta: np.ndarray,
    intercept: Optional[float],
    bounds: Tuple[float, float],
    centering: float = 0.0,
) -> AdjustedPredictor:
    """
    Apply the shift-then-add-intercept rule for a given domain.

    Parameters
    ----------
    eta : ndarray, shape (n,)
        Raw predictor (from a centered design when there is an intercept)
    intercept : float or None
        Sampled intercept; None when the model has no intercept
    bounds : (lower, upper)
        Domain of the intercept (and of the final predictor)
    centering : float
        xbar·β, the offset between centered and uncentered designs

    Returns
    -------
    AdjustedPredictor
    """
    lower, upper = bounds

    if intercept is None:
        return AdjustedPredictor(
            eta=eta + centering,
            shifted=eta.copy(),
            shift=0.0,
            intercept=None,
            reported_intercept=None,
        )

    intercept = float(intercept)
    if not lower <= intercept <= upper:
        raise DomainError(
            f"Intercept {intercept} outside its domain [{lower}, {upper}]"
        )

    if np.isinf(lower) and np.isinf(upper):
        shift = 0.0
    elif np.isfinite(upper):
        shift = -float(np.max(eta)) if eta.size else 0.0
    else:
        shift = -float(np.min(eta)) if eta.size else 0.0

    shifted = eta + shift
    return AdjustedPredictor(
        eta=shifted + intercept,
        shifted=shifted,
        shift=shift,
        intercept=intercept,
        reported_intercept=intercept - centering + shift,
    )


def adjusted_predictor_and_intercept(
    eta,
    config,
    intercept: Optional[float] = None,
    centering: float = 0.0,
) -> AdjustedPredictor:
    """
    Shift a linear predictor into the domain of the configured link.

    Policy:
    - gaussian, any log link, or beta with link ≠ 5: add the intercept
    - beta log link (link 5, needs η ≤ 0): subtract max(η), add intercept
    - identity/inverse/1/mu^2 on gamma or inverse gaussian (need η > 0):
      subtract min(η), add intercept
    - no intercept: add ``centering`` (xbar·β) instead

    Parameters
    ----------
    eta : array-like, shape (n,)
        Raw linear predictor
    config : ModelConfig
        Family/link configuration
    intercept : float, optional
        Sampled intercept; required iff ``config.has_intercept``
    centering : float
        xbar·β for the centered design

    Returns
    -------
    AdjustedPredictor
        Unpacks as ``(eta, reported_intercept)``

    Examples
    --------
    >>> cfg = make_config('gamma', 'inverse')
    >>> adj = adjusted_predictor_and_intercept([-2., -1., 0.], cfg, intercept=1.0)
    >>> adj.shifted, adj.eta, adj.reported_intercept
    (array([0., 1., 2.]), array([1., 2., 3.]), 3.0)
    """
    eta = check_predictor(eta)

    if config.has_intercept and intercept is None:
        raise ValueError(
            f"An intercept is required for '{config.describe()}' with has_intercept=True"
        )
    if not config.has_intercept and intercept is not None:
        raise ValueError("intercept given but the model has no intercept")

    return shift_predictor(eta, intercept, config.intercept_bounds, float(centering))


__all__ = ["AdjustedPredictor", "shift_predictor", "adjusted_predictor_and_intercept"]
