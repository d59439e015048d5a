"""
Core algorithms (backend-agnostic).
"""

from .families import Family, LINKS, PHI_LINKS, intercept_bounds
from .links import inverse_link, inverse_link_phi
from .stats import SufficientStats, compute_sufficient_stats, validate_outcome
from .identifiability import AdjustedPredictor, adjusted_predictor_and_intercept
from .dispersion import dispersion_predictor, precision
from .likelihood import log_likelihood, pointwise_log_likelihood
from .ppd import posterior_predictive_draws, posterior_predictive_mean, inverse_gaussian_rng

__all__ = [
    "Family",
    "LINKS",
    "PHI_LINKS",
    "intercept_bounds",
    "inverse_link",
    "inverse_link_phi",
    "SufficientStats",
    "compute_sufficient_stats",
    "validate_outcome",
    "AdjustedPredictor",
    "adjusted_predictor_and_intercept",
    "dispersion_predictor",
    "precision",
    "log_likelihood",
    "pointwise_log_likelihood",
    "posterior_predictive_draws",
    "posterior_predictive_mean",
    "inverse_gaussian_rng",
]
