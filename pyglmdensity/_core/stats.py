"""
Outcome validation and sufficient statistics.

Computed once per fit and reused, read-only, by every evaluation.
"""

import numpy as np
from typing import Optional
from dataclasses import dataclass

from .families import Family
from .._utils import check_vector
from ..exceptions import DomainError


@dataclass(frozen=True)
class SufficientStats:
    """Precomputed statistics of the outcome."""
    n: int
    sum_log_y: Optional[float] = None     # Σ log(y)
    log_y: Optional[np.ndarray] = None    # log(y)
    sqrt_y: Optional[np.ndarray] = None   # √y (inverse gaussian)
    log1m_y: Optional[np.ndarray] = None  # log(1 - y) (beta)


def validate_outcome(y, config) -> np.ndarray:
    """
    Check that y lies in the support of the configured family.

    Gaussian is unconstrained except under the log link (lognormal),
    gamma and inverse gaussian need y > 0, beta needs 0 < y < 1.

    Raises
    ------
    DomainError
        If any y is outside the support
    """
    y = check_vector(y, name='y')
    family = config.family

    if family == Family.BETA:
        if np.any((y <= 0) | (y >= 1)):
            raise DomainError(
                f"All outcome values must be in (0, 1) for family "
                f"'{config.describe()}'"
            )
    elif family in (Family.GAMMA, Family.INVERSE_GAUSSIAN) or config.link == 2:
        # Gaussian with log link is lognormal
        if np.any(y <= 0):
            raise DomainError(
                f"All outcome values must be positive for family "
                f"'{config.describe()}'"
            )
    return y


def compute_sufficient_stats(y: np.ndarray, config) -> SufficientStats:
    """
    Compute the statistics the likelihood kernels need for this family.

    Parameters
    ----------
    y : ndarray, shape (n,)
        Validated outcome
    config : ModelConfig
        Family/link configuration

    Returns
    -------
    SufficientStats
    """
    y = np.asarray(y, dtype=np.float64)
    n = y.shape[0]
    family = config.family

    if family == Family.GAUSSIAN:
        if config.link != 2:
            return SufficientStats(n=n)
        log_y = np.log(y)
        return SufficientStats(n=n, sum_log_y=float(np.sum(log_y)), log_y=log_y)

    if family == Family.GAMMA:
        log_y = np.log(y)
        return SufficientStats(n=n, sum_log_y=float(np.sum(log_y)), log_y=log_y)

    if family == Family.INVERSE_GAUSSIAN:
        log_y = np.log(y)
        return SufficientStats(
            n=n,
            sum_log_y=float(np.sum(log_y)),
            log_y=log_y,
            sqrt_y=np.sqrt(y),
        )

    log_y = np.log(y)
    return SufficientStats(
        n=n,
        sum_log_y=float(np.sum(log_y)),
        log_y=log_y,
        log1m_y=np.log1p(-y),
    )


__all__ = ["SufficientStats", "validate_outcome", "compute_sufficient_stats"]
