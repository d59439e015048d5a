"""
Test posterior-predictive simulation.

Moment checks use large samples and loose tolerances.
"""

import numpy as np
import pytest

from pyglmdensity import (
    DomainError,
    inverse_link,
    make_config,
    pointwise_log_likelihood,
    posterior_predictive_draws,
    posterior_predictive_mean,
)
from pyglmdensity._core.ppd import inverse_gaussian_rng

N = 200_000


class TestInverseGaussianRNG:
    """Michael-Schucany-Haas transformation."""

    @pytest.mark.parametrize("mu,lam", [(1.0, 1.0), (2.0, 5.0), (0.5, 0.3)])
    def test_moments(self, mu, lam):
        rng = np.random.default_rng(123)
        x = inverse_gaussian_rng(np.full(N, mu), lam, rng)
        assert np.all(x > 0)
        assert np.mean(x) == pytest.approx(mu, rel=0.02)
        assert np.var(x) == pytest.approx(mu ** 3 / lam, rel=0.1)

    def test_reproducible(self):
        a = inverse_gaussian_rng(np.ones(10), 2.0, np.random.default_rng(5))
        b = inverse_gaussian_rng(np.ones(10), 2.0, np.random.default_rng(5))
        np.testing.assert_array_equal(a, b)


class TestDraws:
    """Draws come from the fitted family/link."""

    def test_gaussian_identity_mean(self):
        cfg = make_config('gaussian', 'identity')
        eta = np.linspace(-1, 3, N)
        m = posterior_predictive_mean(cfg, eta, 2.0, np.random.default_rng(0))
        assert m == pytest.approx(1.0, abs=0.02)

    def test_gaussian_log_is_lognormal(self):
        cfg = make_config('gaussian', 'log')
        eta = np.full(N, 0.5)
        draws = posterior_predictive_draws(cfg, eta, 0.4, np.random.default_rng(1))
        assert np.all(draws > 0)
        assert np.median(draws) == pytest.approx(np.exp(0.5), rel=0.02)
        assert np.mean(draws) == pytest.approx(np.exp(0.5 + 0.4 ** 2 / 2), rel=0.02)
        # draws are scoreable under the same likelihood
        assert np.all(np.isfinite(pointwise_log_likelihood(cfg, draws[:100], eta[:100], 0.4)))

    @pytest.mark.parametrize("link,eta0", [('log', 0.7), ('inverse', 0.5), ('identity', 2.0)])
    def test_gamma_mean(self, link, eta0):
        cfg = make_config('gamma', link)
        eta = np.full(N, eta0)
        mu = inverse_link(eta[:1], link, 'gamma')[0]
        m = posterior_predictive_mean(cfg, eta, 3.0, np.random.default_rng(2))
        assert m == pytest.approx(mu, rel=0.02)

    def test_inverse_gaussian_mean(self):
        cfg = make_config('inverse_gaussian', '1/mu^2')
        eta = np.full(N, 0.25)   # mu = 2
        m = posterior_predictive_mean(cfg, eta, 4.0, np.random.default_rng(3))
        assert m == pytest.approx(2.0, rel=0.03)

    @pytest.mark.parametrize("link", ['logit', 'probit', 'cloglog', 'cauchit', 'loglog'])
    def test_beta_in_unit_interval(self, link):
        cfg = make_config('beta', link)
        eta = np.full(N, 0.3)
        mu = inverse_link(eta[:1], link, 'beta')[0]
        draws = posterior_predictive_draws(cfg, eta, 5.0, np.random.default_rng(4))
        assert np.all((draws > 0) & (draws < 1))
        assert np.mean(draws) == pytest.approx(mu, abs=0.01)

    def test_beta_precision_submodel(self):
        cfg = make_config('beta', 'logit', link_phi='log', has_intercept_z=True)
        eta = np.zeros(N)
        eta_z = np.full(N, np.log(50.0))
        draws = posterior_predictive_draws(cfg, eta, None, np.random.default_rng(6), eta_z=eta_z)
        # Var = mu (1 - mu) / (1 + phi)
        assert np.var(draws) == pytest.approx(0.25 / 51, rel=0.05)

    def test_same_seed_same_mean(self):
        cfg = make_config('gamma', 'log')
        eta = np.zeros(50)
        a = posterior_predictive_mean(cfg, eta, 1.0, np.random.default_rng(9))
        b = posterior_predictive_mean(cfg, eta, 1.0, np.random.default_rng(9))
        assert a == b


class TestErrors:
    """Invalid inputs."""

    def test_requires_generator(self):
        cfg = make_config('gaussian')
        with pytest.raises(TypeError, match="Generator"):
            posterior_predictive_mean(cfg, [0.0], 1.0, 42)

    def test_nonpositive_dispersion(self):
        cfg = make_config('gaussian')
        with pytest.raises(DomainError):
            posterior_predictive_mean(cfg, [0.0], 0.0, np.random.default_rng())

    def test_nonpositive_mean(self):
        cfg = make_config('gamma', 'identity')
        with pytest.raises(DomainError, match="positive"):
            posterior_predictive_mean(cfg, [1.0, -1.0], 1.0, np.random.default_rng())
