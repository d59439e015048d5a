"""
CPU backend using NumPy + SciPy.

This is the reference implementation.
"""

import numpy as np
from scipy import special, stats as sp_stats
from typing import Union

from .base import CPUBackend, as_dispersion
from .._core.families import Family
from ..exceptions import DomainError, InvalidFamilyError, InvalidLinkError

LOG_SQRT_2PI = 0.5 * np.log(2 * np.pi)


class CPUBackendFP64(CPUBackend):
    """
    CPU backend using NumPy + SciPy.

    Reference implementation. Always uses FP64 precision.
    """

    def __init__(self):
        self.name = "cpu_fp64"
        self.precision = "fp64"

    # ------------------------------------------------------------------
    # Inverse links
    # ------------------------------------------------------------------

    def inverse_link(self, eta: np.ndarray, family: int, link: int) -> np.ndarray:
        eta = np.asarray(eta, dtype=np.float64)

        if family in (1, 2, 3):
            if link == 1:
                return eta.copy()
            if link == 2:
                return np.exp(eta)
            if link == 3:
                return 1.0 / eta
            if link == 4 and family == 3:
                return 1.0 / np.sqrt(eta)
            raise InvalidLinkError(Family(family).label, link)

        if family == 4:
            return self._inverse_link_beta(eta, link)

        raise InvalidFamilyError(family)

    @staticmethod
    def _inverse_link_beta(eta: np.ndarray, link: int) -> np.ndarray:
        if link == 1:    # logit
            return special.expit(eta)
        if link == 2:    # probit
            return special.ndtr(eta)
        if link == 3:    # cloglog: 1 - exp(-exp(η))
            return -np.expm1(-np.exp(eta))
        if link == 4:    # cauchit
            return 0.5 + np.arctan(eta) / np.pi
        if link == 5:    # log
            mu = np.exp(eta)
            if np.any(mu > 1):
                raise DomainError(
                    "mu needs to be between 0 and 1 under the beta log link "
                    f"(max eta = {np.max(eta):.6g} > 0)"
                )
            return mu
        if link == 6:    # loglog: exp(-exp(-η))
            return np.exp(-np.exp(-eta))
        raise InvalidLinkError("beta", link)

    def inverse_link_phi(self, eta_z: np.ndarray, link_phi: int) -> np.ndarray:
        eta_z = np.asarray(eta_z, dtype=np.float64)
        if link_phi == 1:    # log
            return np.exp(eta_z)
        if link_phi == 2:    # identity
            return eta_z.copy()
        if link_phi == 3:    # sqrt
            return np.square(eta_z)
        raise InvalidLinkError("beta (precision)", link_phi)

    # ------------------------------------------------------------------
    # Aggregate log-likelihood (unit weights)
    # ------------------------------------------------------------------

    def log_likelihood(
        self,
        family: int,
        link: int,
        y: np.ndarray,
        eta: np.ndarray,
        dispersion: Union[float, np.ndarray],
        stats,
    ) -> float:
        n = y.shape[0]

        if family == 1:
            sigma = dispersion
            if link == 2:
                # lognormal: η is the log of the median
                z = (stats.log_y - eta) / sigma
                return float(
                    -n * (LOG_SQRT_2PI + np.log(sigma)) - stats.sum_log_y
                    - 0.5 * np.dot(z, z)
                )
            mu = self.inverse_link(eta, family, link)
            z = (y - mu) / sigma
            return float(-n * (LOG_SQRT_2PI + np.log(sigma)) - 0.5 * np.dot(z, z))

        if family == 2:
            shape = dispersion
            ret = n * (shape * np.log(shape) - special.gammaln(shape)) + \
                (shape - 1) * stats.sum_log_y
            if link == 2:      # log
                ret -= shape * np.sum(eta) + shape * np.sum(y / np.exp(eta))
            elif link == 1:    # identity
                ret -= shape * np.sum(np.log(eta)) + shape * np.sum(y / eta)
            elif link == 3:    # inverse
                ret += shape * np.sum(np.log(eta)) - shape * np.dot(eta, y)
            else:
                raise InvalidLinkError("gamma", link)
            return float(ret)

        if family == 3:
            lam = dispersion
            mu = self.inverse_link(eta, family, link)
            r = (y - mu) / (mu * stats.sqrt_y)
            return float(
                0.5 * n * np.log(lam / (2 * np.pi)) - 1.5 * stats.sum_log_y
                - 0.5 * lam * np.dot(r, r)
            )

        if family == 4:
            mu = self.inverse_link(eta, family, link)
            phi_vec = as_dispersion(dispersion, n)
            if phi_vec is None:
                shape1 = mu * dispersion
                shape2 = (1 - mu) * dispersion
                norm = n * special.gammaln(dispersion)
            else:
                shape1 = mu * phi_vec
                shape2 = (1 - mu) * phi_vec
                norm = np.sum(special.gammaln(phi_vec))
            return float(
                norm - np.sum(special.gammaln(shape1)) - np.sum(special.gammaln(shape2))
                + np.dot(shape1 - 1, stats.log_y) + np.dot(shape2 - 1, stats.log1m_y)
            )

        raise InvalidFamilyError(family)

    # ------------------------------------------------------------------
    # Pointwise log-likelihood
    # ------------------------------------------------------------------

    def pointwise_log_likelihood(
        self,
        family: int,
        link: int,
        y: np.ndarray,
        eta: np.ndarray,
        dispersion: Union[float, np.ndarray],
        stats,
    ) -> np.ndarray:
        if family == 1:
            if link == 2:
                return sp_stats.norm.logpdf(stats.log_y, loc=eta, scale=dispersion) - stats.log_y
            mu = self.inverse_link(eta, family, link)
            return sp_stats.norm.logpdf(y, loc=mu, scale=dispersion)

        if family == 2:
            shape = dispersion
            if link == 3:
                rate = shape * eta
            elif link in (1, 2):
                rate = shape / self.inverse_link(eta, family, link)
            else:
                raise InvalidLinkError("gamma", link)
            return sp_stats.gamma.logpdf(y, a=shape, scale=1.0 / rate)

        if family == 3:
            lam = dispersion
            mu = self.inverse_link(eta, family, link)
            r = (y - mu) / (mu * stats.sqrt_y)
            return -0.5 * lam * np.square(r) + 0.5 * np.log(lam / (2 * np.pi)) - 1.5 * stats.log_y

        if family == 4:
            mu = self.inverse_link(eta, family, link)
            return sp_stats.beta.logpdf(y, mu * dispersion, (1 - mu) * dispersion)

        raise InvalidFamilyError(family)

    def get_device_info(self) -> dict:
        """Get backend information."""
        import scipy
        return {
            'backend': 'cpu',
            'precision': 'fp64',
            'library': f'NumPy {np.__version__}, SciPy {scipy.__version__}',
        }
