"""
Test family/link tables and inverse links.
"""

import numpy as np
import pytest

from pyglmdensity import (
    ConfigurationError,
    DomainError,
    Family,
    InvalidFamilyError,
    InvalidLinkError,
    NumericError,
    inverse_link,
    inverse_link_phi,
    intercept_bounds,
    make_config,
)
from pyglmdensity._core.families import resolve_family, resolve_link

from _cases import VALID_PAIRS, simulate_case


class TestLinkTables:
    """Test family and link resolution."""

    def test_family_codes(self):
        assert resolve_family(1) == Family.GAUSSIAN
        assert resolve_family('Gamma') == Family.GAMMA
        assert resolve_family('inverse.gaussian') == Family.INVERSE_GAUSSIAN
        assert resolve_family(Family.BETA) == Family.BETA

    def test_link_names(self):
        assert resolve_link('log', 'gamma') == 2
        assert resolve_link('1/mu^2', 'inverse_gaussian') == 4
        assert resolve_link('loglog', 'beta') == 6

    @pytest.mark.parametrize("family", [0, 5, -1, 'poisson', 2.5])
    def test_invalid_family(self, family):
        with pytest.raises(InvalidFamilyError):
            resolve_family(family)

    def test_invalid_family_is_configuration_error(self):
        with pytest.raises(ConfigurationError, match="Invalid family"):
            make_config(5, 1)

    @pytest.mark.parametrize("family,link", [
        (4, 7), (4, 0), (1, 4), (2, 4), (3, 5), (1, 'logit'), (4, 1.5),
    ])
    def test_invalid_link(self, family, link):
        with pytest.raises(InvalidLinkError):
            make_config(family, link)

    def test_invalid_link_message_names_family(self):
        with pytest.raises(ConfigurationError, match="beta"):
            make_config('beta', 7)

    def test_invalid_link_fails_in_inverse_link(self):
        with pytest.raises(ConfigurationError):
            inverse_link(np.zeros(3), 7, 4)

    def test_intercept_bounds(self):
        assert intercept_bounds(1, 3) == (-np.inf, np.inf)
        assert intercept_bounds(2, 2) == (-np.inf, np.inf)
        assert intercept_bounds(2, 3) == (0.0, np.inf)
        assert intercept_bounds(3, 4) == (0.0, np.inf)
        assert intercept_bounds(4, 5) == (-np.inf, 0.0)
        assert intercept_bounds(4, 6) == (-np.inf, np.inf)


class TestInverseLink:
    """Test inverse links map into the family's support."""

    @pytest.mark.parametrize("family,link", VALID_PAIRS)
    def test_support(self, family, link):
        _, eta = simulate_case(family, link, n=200, seed=family * 10 + link)
        mu = inverse_link(eta, link, family)

        assert mu.shape == eta.shape
        assert np.all(np.isfinite(mu))
        if family == 4:
            assert np.all((mu > 0) & (mu < 1))
        elif family in (2, 3):
            assert np.all(mu > 0)

    def test_positive_links_for_any_eta(self):
        eta = np.linspace(-30, 30, 101)
        assert np.all(inverse_link(eta, 'log', 'gamma') > 0)
        assert np.all(inverse_link(eta, 'log', 'inverse_gaussian') > 0)

    def test_known_values(self):
        np.testing.assert_allclose(inverse_link([0.0], 'logit', 'beta'), [0.5])
        np.testing.assert_allclose(inverse_link([0.0], 'probit', 'beta'), [0.5])
        np.testing.assert_allclose(inverse_link([0.0], 'cauchit', 'beta'), [0.5])
        np.testing.assert_allclose(inverse_link([0.0], 'cloglog', 'beta'), [1 - np.exp(-1)])
        np.testing.assert_allclose(inverse_link([0.0], 'loglog', 'beta'), [np.exp(-1)])
        np.testing.assert_allclose(inverse_link([4.0], '1/mu^2', 'inverse_gaussian'), [0.5])
        np.testing.assert_allclose(inverse_link([4.0], 'inverse', 'gamma'), [0.25])

    def test_gaussian_log_link_is_median(self):
        np.testing.assert_allclose(inverse_link([1.0], 'log', 'gaussian'), [np.e])

    def test_beta_log_link_rejects_positive_eta(self):
        with pytest.raises(DomainError, match="between 0 and 1"):
            inverse_link([-1.0, 0.5], 'log', 'beta')

    def test_non_finite_eta(self):
        with pytest.raises(NumericError):
            inverse_link([0.0, np.nan], 'identity', 'gaussian')

    def test_eta_not_modified(self):
        eta = np.array([1.0, 2.0])
        mu = inverse_link(eta, 'identity', 'gamma')
        mu[0] = 99.0
        assert eta[0] == 1.0


class TestPrecisionLink:
    """Test the beta precision links."""

    def test_values(self):
        eta_z = np.array([0.5, 1.0, 2.0])
        np.testing.assert_allclose(inverse_link_phi(eta_z, 'log'), np.exp(eta_z))
        np.testing.assert_allclose(inverse_link_phi(eta_z, 'identity'), eta_z)
        np.testing.assert_allclose(inverse_link_phi(eta_z, 'sqrt'), eta_z ** 2)

    def test_invalid(self):
        with pytest.raises(InvalidLinkError):
            inverse_link_phi([1.0], 4)
