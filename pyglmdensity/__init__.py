"""
PyGLMDensity: log-likelihoods, links and posterior-predictive draws for
continuous-outcome Bayesian GLMs.

Copyright (C) 2024 SGCX
Licensed under GPL-3.0
"""

__version__ = "1.0.0"

# Import main user-facing API
from .config import ModelConfig, make_config
from .engine import LikelihoodEngine, GeneratedQuantities
from .glm import ContinuousGLM, glm_density
from ._core import (
    Family,
    AdjustedPredictor,
    SufficientStats,
    adjusted_predictor_and_intercept,
    compute_sufficient_stats,
    dispersion_predictor,
    intercept_bounds,
    inverse_link,
    inverse_link_phi,
    log_likelihood,
    pointwise_log_likelihood,
    posterior_predictive_draws,
    posterior_predictive_mean,
)
from .exceptions import (
    ConfigurationError,
    DomainError,
    InvalidFamilyError,
    InvalidLinkError,
    NumericError,
    PyGLMDensityError,
)

# Import backend utilities (for advanced users)
from ._backends import get_backend, list_available_backends

__all__ = [
    'ModelConfig',
    'make_config',
    'LikelihoodEngine',
    'GeneratedQuantities',
    'ContinuousGLM',
    'glm_density',
    'Family',
    'AdjustedPredictor',
    'SufficientStats',
    'adjusted_predictor_and_intercept',
    'compute_sufficient_stats',
    'dispersion_predictor',
    'intercept_bounds',
    'inverse_link',
    'inverse_link_phi',
    'log_likelihood',
    'pointwise_log_likelihood',
    'posterior_predictive_draws',
    'posterior_predictive_mean',
    'ConfigurationError',
    'DomainError',
    'InvalidFamilyError',
    'InvalidLinkError',
    'NumericError',
    'PyGLMDensityError',
    'get_backend',
    'list_available_backends',
]
