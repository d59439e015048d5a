"""
Test the likelihood engine and the pandas-facing model.
"""

import numpy as np
import pandas as pd
import pytest

from pyglmdensity import (
    ConfigurationError,
    ContinuousGLM,
    DomainError,
    LikelihoodEngine,
    glm_density,
    log_likelihood,
    make_config,
)


@pytest.fixture
def gamma_data():
    rng = np.random.default_rng(42)
    n = 60
    X = rng.normal(0, 1, (n, 2))
    beta = np.array([0.3, -0.2])
    xbar = X.mean(axis=0)
    mu = np.exp(0.5 + X @ beta)
    y = rng.gamma(shape=2.0, scale=mu / 2.0)
    return X, beta, xbar, y


class TestLikelihoodEngine:
    """Orchestration of shift, dispersion and likelihood."""

    def test_matches_functional_api(self, gamma_data):
        X, beta, xbar, y = gamma_data
        cfg = make_config('gamma', 'log')
        engine = LikelihoodEngine(cfg, y, backend='cpu')

        eta = (X - xbar) @ beta
        ll = engine.log_likelihood(eta, 2.0, intercept=0.5)
        assert ll == pytest.approx(log_likelihood(cfg, y, eta + 0.5, 2.0), rel=1e-12)

    def test_unit_weights_agree(self, gamma_data):
        X, beta, xbar, y = gamma_data
        cfg = make_config('gamma', 'inverse')
        eta = (X - xbar) @ beta
        plain = LikelihoodEngine(cfg, y, backend='cpu')
        weighted = LikelihoodEngine(cfg, y, weights=np.ones(len(y)), backend='cpu')

        assert not plain.has_weights and weighted.has_weights
        assert weighted.log_likelihood(eta, 2.0, intercept=0.4) == \
            pytest.approx(plain.log_likelihood(eta, 2.0, intercept=0.4), rel=1e-9)

    def test_offset(self):
        cfg = make_config('gaussian')
        y = np.array([1.0, 2.0, 3.0])
        engine = LikelihoodEngine(cfg, y, offset=[1.0, 2.0, 3.0], backend='cpu')
        ll = engine.log_likelihood(np.zeros(3), 1.0, intercept=0.0)
        assert ll == pytest.approx(3 * np.log(1 / np.sqrt(2 * np.pi)), rel=1e-12)

    def test_prior_predictive_skips_likelihood(self):
        cfg = make_config('gamma', 'log', prior_PD=True)
        engine = LikelihoodEngine(cfg, [1.0, 2.0], backend='cpu')
        assert engine.log_likelihood([0.0, 0.0], 1.0, intercept=0.0) == 0.0

    def test_idempotent(self, gamma_data):
        X, beta, xbar, y = gamma_data
        engine = LikelihoodEngine(make_config('gamma', 'identity'), y, backend='cpu')
        eta = (X - xbar) @ beta
        assert engine.log_likelihood(eta, 1.3, intercept=1.0) == \
            engine.log_likelihood(eta, 1.3, intercept=1.0)

    def test_pointwise_length(self, gamma_data):
        X, beta, xbar, y = gamma_data
        engine = LikelihoodEngine(make_config('gamma', 'log'), y, backend='cpu')
        pw = engine.pointwise_log_likelihood((X - xbar) @ beta, 2.0, intercept=0.5)
        assert pw.shape == (len(y),)

    def test_setup_validates_outcome(self):
        with pytest.raises(DomainError):
            LikelihoodEngine(make_config('gamma', 'log'), [1.0, 0.0], backend='cpu')

    def test_requires_config(self):
        with pytest.raises(TypeError):
            LikelihoodEngine('gamma', [1.0], backend='cpu')

    def test_z_without_submodel(self):
        with pytest.raises(ConfigurationError):
            LikelihoodEngine(make_config('beta'), [0.5], Z=np.ones((1, 1)), backend='cpu')


class TestBetaEngine:
    """Beta family with a precision sub-model."""

    def test_submodel_likelihood(self):
        rng = np.random.default_rng(1)
        n = 40
        Z_raw = rng.uniform(0, 2, (n, 1))
        zbar = Z_raw.mean(axis=0)
        y = rng.uniform(0.1, 0.9, n)
        cfg = make_config('beta', 'logit', link_phi='log', has_intercept_z=True)
        engine = LikelihoodEngine(cfg, y, Z=Z_raw - zbar, zbar=zbar, backend='cpu')

        eta = rng.normal(0, 0.5, n)
        ll = engine.log_likelihood(eta, intercept=0.1, omega=[0.7], intercept_z=2.0)

        eta_z = (Z_raw - zbar) @ [0.7] + 2.0
        expected = log_likelihood(cfg, y, eta + 0.1, eta_z=eta_z)
        assert ll == pytest.approx(expected, rel=1e-12)

    def test_generated_quantities(self):
        rng = np.random.default_rng(2)
        n = 30
        Z_raw = rng.uniform(0, 2, (n, 1))
        zbar = Z_raw.mean(axis=0)
        cfg = make_config('beta', 'logit', link_phi='sqrt', has_intercept_z=True)
        engine = LikelihoodEngine(cfg, rng.uniform(0.1, 0.9, n),
                                  Z=Z_raw - zbar, zbar=zbar, backend='cpu')

        gq = engine.generated_quantities(np.zeros(n), intercept=0.2, omega=[0.5],
                                         intercept_z=3.0, rng=np.random.default_rng(0))
        raw_z = (Z_raw - zbar) @ [0.5]
        assert gq.alpha == 0.2
        assert gq.omega_int == pytest.approx(3.0 - zbar[0] * 0.5 - raw_z.min())
        assert 0 < gq.mean_PPD < 1

        series = gq.to_series()
        assert list(series.index) == ['(Intercept)', '(phi)_(Intercept)', 'mean_PPD']

    def test_submodel_needs_covariates_or_intercept(self):
        cfg = make_config('beta', link_phi='log', has_intercept_z=False)
        with pytest.raises(ConfigurationError):
            LikelihoodEngine(cfg, [0.5, 0.4], backend='cpu')


class TestGeneratedQuantities:
    """Reported intercept and mean_PPD."""

    def test_reported_intercept(self, gamma_data):
        X, beta, xbar, y = gamma_data
        engine = LikelihoodEngine(make_config('gamma', 'inverse'), y, backend='cpu')
        eta = (X - xbar) @ beta
        gq = engine.generated_quantities(eta, 2.0, intercept=0.3, centering=xbar @ beta,
                                         rng=np.random.default_rng(0))
        assert gq.alpha == pytest.approx(0.3 - xbar @ beta - eta.min())
        assert np.isfinite(gq.mean_PPD) and gq.mean_PPD > 0

    def test_mean_ppd_disabled(self):
        cfg = make_config('gaussian', compute_mean_PPD=False)
        engine = LikelihoodEngine(cfg, [1.0, 2.0], backend='cpu')
        gq = engine.generated_quantities([0.0, 0.0], 1.0, intercept=1.0)
        assert gq.mean_PPD == -np.inf
        assert gq.alpha == 1.0

    def test_mean_ppd_needs_rng(self):
        engine = LikelihoodEngine(make_config('gaussian'), [1.0], backend='cpu')
        with pytest.raises(ValueError, match="rng"):
            engine.generated_quantities([0.0], 1.0, intercept=0.0)

    def test_no_intercept_series(self):
        cfg = make_config('gaussian', has_intercept=False)
        engine = LikelihoodEngine(cfg, [1.0, 2.0], backend='cpu')
        gq = engine.generated_quantities([0.0, 0.0], 1.0, rng=np.random.default_rng(0))
        assert gq.alpha is None
        assert list(gq.to_series().index) == ['mean_PPD']


class TestContinuousGLM:
    """DataFrame-facing model."""

    @pytest.fixture
    def df(self):
        rng = np.random.default_rng(3)
        n = 25
        return pd.DataFrame({
            'rate': rng.uniform(0.05, 0.95, n),
            'dose': rng.uniform(0, 4, n),
            'w': rng.uniform(0.5, 2.0, n),
        })

    def test_from_dataframe(self, df):
        model = glm_density(y='rate', family='beta', link='logit', data=df,
                            z=['dose'], link_phi='log', backend='cpu')
        assert model.config.has_dispersion_submodel
        assert model.config.has_intercept_z
        assert model.z_names == ['dose']
        np.testing.assert_allclose(model.engine.zbar, [df['dose'].mean()])

        eta = np.zeros(len(df))
        ll = model.log_likelihood(eta, intercept=0.0, omega=[0.2], intercept_z=1.0)
        pw = model.pointwise_log_likelihood(eta, intercept=0.0, omega=[0.2], intercept_z=1.0)
        assert isinstance(pw, pd.Series)
        assert ll == pytest.approx(pw.sum(), rel=1e-9)

    def test_weights_column(self, df):
        model = ContinuousGLM(y='rate', family='beta', data=df, weights='w', backend='cpu')
        eta = np.zeros(len(df))
        ll = model.log_likelihood(eta, 4.0, intercept=0.0)
        pw = model.pointwise_log_likelihood(eta, 4.0, intercept=0.0)
        assert ll == pytest.approx(np.dot(df['w'], pw), rel=1e-12)

    def test_string_requires_data(self):
        with pytest.raises(ValueError, match="data"):
            ContinuousGLM(y='rate', family='beta')

    def test_summary(self, df, capsys):
        model = glm_density(y='rate', family='beta', link='cloglog', data=df, backend='cpu')
        model.summary()
        out = capsys.readouterr().out
        assert 'CONTINUOUS GLM LIKELIHOOD' in out
        assert 'cloglog' in out
        assert 'rate' in out

    def test_repr(self, df):
        model = glm_density(y='rate', family='beta', data=df, backend='cpu')
        assert repr(model) == "ContinuousGLM(beta(link=logit), n=25)"
