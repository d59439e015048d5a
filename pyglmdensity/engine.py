"""
Likelihood engine.

Holds the read-only data of a fit (outcome, weights, offset, precision
design and sufficient statistics) and evaluates the log-likelihood
contribution and generated quantities once per sampler step.
"""

import logging
import numpy as np
import pandas as pd
from typing import Optional
from dataclasses import dataclass

from ._backends import get_backend
from ._core.identifiability import AdjustedPredictor, adjusted_predictor_and_intercept
from ._core.dispersion import dispersion_predictor
from ._core.likelihood import check_weights, log_likelihood, pointwise_log_likelihood
from ._core.ppd import posterior_predictive_mean
from ._core.stats import compute_sufficient_stats, validate_outcome
from ._utils import check_array, check_vector, check_predictor
from .config import ModelConfig
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class GeneratedQuantities:
    """Per-draw generated quantities."""
    alpha: Optional[float]      # Intercept on the uncentered scale
    omega_int: Optional[float]  # Precision intercept on the uncentered scale
    mean_PPD: float             # Mean posterior-predictive draw (-inf if disabled)

    def to_series(self) -> pd.Series:
        """Named values, omitting intercepts the model does not have."""
        values = {}
        if self.alpha is not None:
            values['(Intercept)'] = self.alpha
        if self.omega_int is not None:
            values['(phi)_(Intercept)'] = self.omega_int
        values['mean_PPD'] = self.mean_PPD
        return pd.Series(values, dtype=np.float64)


class LikelihoodEngine:
    """
    Evaluate the target-density contribution of a continuous GLM.

    The engine is configured once; each call is a pure function of the
    sampled parameters and may be made concurrently from several chains.

    Parameters
    ----------
    config : ModelConfig
        Family/link configuration
    y : array-like, shape (n,)
        Outcome, validated against the family support
    weights : array-like, shape (n,), optional
        Observation weights. None uses the closed-form aggregate path.
    offset : array-like, shape (n,), optional
        Added to the linear predictor before the identifiability shift
    Z : array-like, shape (n, q), optional
        Precision design matrix (beta sub-model). Centered when the
        precision predictor has an intercept.
    zbar : array-like, shape (q,), optional
        Column means of the uncentered Z
    backend : str or Backend
        'auto', 'cpu' or 'pytorch'

    Examples
    --------
    >>> cfg = make_config('gamma', 'log')
    >>> engine = LikelihoodEngine(cfg, y)
    >>> engine.log_likelihood(X @ beta, dispersion=2.0, intercept=0.5)
    """

    def __init__(
        self,
        config: ModelConfig,
        y,
        weights=None,
        offset=None,
        Z=None,
        zbar=None,
        backend='auto',
    ):
        if not isinstance(config, ModelConfig):
            raise TypeError(f"config must be a ModelConfig, got {type(config).__name__}")
        self.config = config
        self.backend = get_backend(backend)

        self.y = validate_outcome(y, config)
        self.n_obs = self.y.shape[0]
        self.stats = compute_sufficient_stats(self.y, config)

        self.weights = None if weights is None else check_weights(weights, self.n_obs)
        self.offset = None if offset is None else check_vector(offset, name='offset', size=self.n_obs)

        if config.has_dispersion_submodel:
            self.Z = np.zeros((self.n_obs, 0)) if Z is None else check_array(Z, name='Z')
            if self.Z.shape[0] != self.n_obs:
                raise ValueError(f"Z has {self.Z.shape[0]} rows, expected {self.n_obs}")
            self.zbar = None if zbar is None else check_vector(zbar, name='zbar', size=self.Z.shape[1])
            if self.Z.shape[1] == 0 and not config.has_intercept_z:
                raise ConfigurationError(
                    "The precision sub-model needs covariates in Z or an intercept"
                )
        else:
            if Z is not None:
                raise ConfigurationError(
                    f"Z given but '{config.describe()}' has no precision sub-model"
                )
            self.Z = None
            self.zbar = None

        logger.debug(
            "LikelihoodEngine: %s, n=%d, weighted=%s, offset=%s, backend=%s",
            config.describe(), self.n_obs, self.weights is not None,
            self.offset is not None, self.backend.name,
        )

    @property
    def has_weights(self) -> bool:
        return self.weights is not None

    def linear_predictor(self, eta, intercept: Optional[float] = None,
                         centering: float = 0.0) -> AdjustedPredictor:
        """
        Apply the offset and the identifiability shift to a raw predictor.

        Parameters
        ----------
        eta : array-like, shape (n,)
            Raw predictor (X_centered @ β, plus group-level terms)
        intercept : float, optional
            Sampled intercept
        centering : float
            xbar·β

        Returns
        -------
        AdjustedPredictor
        """
        eta = check_predictor(eta, size=self.n_obs)
        if self.offset is not None:
            eta = eta + self.offset
        return adjusted_predictor_and_intercept(eta, self.config, intercept, centering)

    def dispersion_predictor(self, omega=None,
                             intercept_z: Optional[float] = None) -> Optional[AdjustedPredictor]:
        """Adjusted precision predictor, or None without a sub-model."""
        if not self.config.has_dispersion_submodel:
            return None
        return dispersion_predictor(
            self.config, self.Z, omega, intercept_z, zbar=self.zbar, n=self.n_obs
        )

    def _predictors(self, eta, intercept, centering, omega, intercept_z):
        adj = self.linear_predictor(eta, intercept, centering)
        adj_z = self.dispersion_predictor(omega, intercept_z)
        return adj, adj_z

    def log_likelihood(
        self,
        eta,
        dispersion: Optional[float] = None,
        intercept: Optional[float] = None,
        centering: float = 0.0,
        omega=None,
        intercept_z: Optional[float] = None,
    ) -> float:
        """
        Log-likelihood contribution to the target density.

        Uses the aggregate path without weights and the weighted pointwise
        path otherwise. Returns 0 when sampling the prior predictive.
        """
        if self.config.prior_PD:
            return 0.0
        adj, adj_z = self._predictors(eta, intercept, centering, omega, intercept_z)
        return log_likelihood(
            self.config, self.y, adj.eta, dispersion,
            weights=self.weights,
            stats=self.stats,
            eta_z=None if adj_z is None else adj_z.eta,
            backend=self.backend,
        )

    def pointwise_log_likelihood(
        self,
        eta,
        dispersion: Optional[float] = None,
        intercept: Optional[float] = None,
        centering: float = 0.0,
        omega=None,
        intercept_z: Optional[float] = None,
    ) -> np.ndarray:
        """Unweighted per-observation log-likelihood, shape (n,)."""
        adj, adj_z = self._predictors(eta, intercept, centering, omega, intercept_z)
        return pointwise_log_likelihood(
            self.config, self.y, adj.eta, dispersion,
            stats=self.stats,
            eta_z=None if adj_z is None else adj_z.eta,
            backend=self.backend,
        )

    def generated_quantities(
        self,
        eta,
        dispersion: Optional[float] = None,
        intercept: Optional[float] = None,
        centering: float = 0.0,
        omega=None,
        intercept_z: Optional[float] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> GeneratedQuantities:
        """
        Reported intercepts and the mean posterior-predictive draw.

        The intercepts are back-transformed to the uncentered design using
        the same shift as the likelihood. mean_PPD is -inf when
        ``compute_mean_PPD`` is off.
        """
        adj, adj_z = self._predictors(eta, intercept, centering, omega, intercept_z)

        mean_ppd = -np.inf
        if self.config.compute_mean_PPD:
            if rng is None:
                raise ValueError("rng is required when compute_mean_PPD=True")
            mean_ppd = posterior_predictive_mean(
                self.config, adj.eta, dispersion, rng,
                eta_z=None if adj_z is None else adj_z.eta,
                backend=self.backend,
            )

        return GeneratedQuantities(
            alpha=adj.reported_intercept,
            omega_int=None if adj_z is None else adj_z.reported_intercept,
            mean_PPD=mean_ppd,
        )

    def __repr__(self):
        return f"LikelihoodEngine({self.config.describe()}, n={self.n_obs}, backend={self.backend.name})"


__all__ = ["LikelihoodEngine", "GeneratedQuantities"]
