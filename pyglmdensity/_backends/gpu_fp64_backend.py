"""
GPU backend using PyTorch with FP64 precision.

For data center GPUs: A100, H100, V100. Runs on CPU tensors when no
CUDA device is present.
"""

import math
import numpy as np
import warnings
from typing import Optional, Union, Any

from .base import GPUBackendFP64, as_dispersion
from .._core.families import Family
from ..exceptions import DomainError, InvalidFamilyError, InvalidLinkError

LOG_SQRT_2PI = 0.5 * math.log(2 * math.pi)


class PyTorchBackendFP64(GPUBackendFP64):
    """
    PyTorch backend with FP64 precision.

    Keeps all computation on the device using torch tensors.
    Only converts at entry (numpy → torch) and exit (torch → numpy).
    Apple Metal is rejected: it has no FP64 support.
    """

    def __init__(self, device: Optional[str] = None):
        """Initialize PyTorch FP64 backend."""
        self.name = "pytorch_fp64"
        self.precision = "fp64"

        try:
            import torch
            self.torch = torch
        except ImportError:
            raise ImportError(
                "PyTorch required for GPU backend. "
                "Install: pip install torch"
            )

        self.device = self._select_device(device)
        self.dtype = torch.float64

    def _select_device(self, requested: Optional[str]) -> Any:
        torch = self.torch

        if requested == 'mps':
            raise RuntimeError(
                "FP64 not supported on Apple Metal. "
                "Use the CPU backend."
            )

        if requested is not None:
            return torch.device(requested)

        if torch.cuda.is_available():
            device = torch.device('cuda')
            from .precision_detector import detect_gpu_capabilities
            caps = detect_gpu_capabilities()
            if caps.fp64_support.value == 'gimped_fp64':
                warnings.warn(
                    f"Using FP64 on {caps.gpu_name} with gimped FP64 support. "
                    f"This will be ~{int(1/caps.fp64_throughput_ratio)}x slower than FP32.",
                    UserWarning
                )
            return device

        warnings.warn("No CUDA GPU available, using CPU")
        return torch.device('cpu')

    def _to_tensor(self, x):
        return self.torch.as_tensor(np.asarray(x, dtype=np.float64), dtype=self.dtype, device=self.device)

    def _to_numpy(self, t) -> np.ndarray:
        return t.detach().cpu().numpy()

    # ------------------------------------------------------------------
    # Inverse links (tensor in, tensor out)
    # ------------------------------------------------------------------

    def _linkinv(self, eta, family: int, link: int):
        torch = self.torch

        if family in (1, 2, 3):
            if link == 1:
                return eta.clone()
            if link == 2:
                return torch.exp(eta)
            if link == 3:
                return torch.reciprocal(eta)
            if link == 4 and family == 3:
                return torch.rsqrt(eta)
            raise InvalidLinkError(Family(family).label, link)

        if family == 4:
            if link == 1:
                return torch.special.expit(eta)
            if link == 2:
                return torch.special.ndtr(eta)
            if link == 3:
                return -torch.expm1(-torch.exp(eta))
            if link == 4:
                return 0.5 + torch.atan(eta) / math.pi
            if link == 5:
                mu = torch.exp(eta)
                if bool(torch.any(mu > 1)):
                    raise DomainError(
                        "mu needs to be between 0 and 1 under the beta log link "
                        f"(max eta = {float(torch.max(eta)):.6g} > 0)"
                    )
                return mu
            if link == 6:
                return torch.exp(-torch.exp(-eta))
            raise InvalidLinkError("beta", link)

        raise InvalidFamilyError(family)

    def inverse_link(self, eta: np.ndarray, family: int, link: int) -> np.ndarray:
        return self._to_numpy(self._linkinv(self._to_tensor(eta), family, link))

    def inverse_link_phi(self, eta_z: np.ndarray, link_phi: int) -> np.ndarray:
        torch = self.torch
        eta_z = self._to_tensor(eta_z)
        if link_phi == 1:
            mu_z = torch.exp(eta_z)
        elif link_phi == 2:
            mu_z = eta_z.clone()
        elif link_phi == 3:
            mu_z = torch.square(eta_z)
        else:
            raise InvalidLinkError("beta (precision)", link_phi)
        return self._to_numpy(mu_z)

    # ------------------------------------------------------------------
    # Log-likelihood kernels
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
        torch = self.torch
        n = y.shape[0]
        y_t = self._to_tensor(y)
        eta_t = self._to_tensor(eta)

        if family == 1:
            sigma = float(dispersion)
            if link == 2:
                z = (self._to_tensor(stats.log_y) - eta_t) / sigma
                ret = -n * (LOG_SQRT_2PI + math.log(sigma)) - stats.sum_log_y - 0.5 * torch.dot(z, z)
            else:
                z = (y_t - self._linkinv(eta_t, family, link)) / sigma
                ret = -n * (LOG_SQRT_2PI + math.log(sigma)) - 0.5 * torch.dot(z, z)
            return float(ret)

        if family == 2:
            shape = float(dispersion)
            ret = n * (shape * math.log(shape) - math.lgamma(shape)) + \
                (shape - 1) * stats.sum_log_y
            if link == 2:
                ret = ret - (shape * torch.sum(eta_t) + shape * torch.sum(y_t / torch.exp(eta_t)))
            elif link == 1:
                ret = ret - (shape * torch.sum(torch.log(eta_t)) + shape * torch.sum(y_t / eta_t))
            elif link == 3:
                ret = ret + shape * torch.sum(torch.log(eta_t)) - shape * torch.dot(eta_t, y_t)
            else:
                raise InvalidLinkError("gamma", link)
            return float(ret)

        if family == 3:
            lam = float(dispersion)
            mu = self._linkinv(eta_t, family, link)
            r = (y_t - mu) / (mu * self._to_tensor(stats.sqrt_y))
            return float(
                0.5 * n * math.log(lam / (2 * math.pi)) - 1.5 * stats.sum_log_y
                - 0.5 * lam * torch.dot(r, r)
            )

        if family == 4:
            mu = self._linkinv(eta_t, family, link)
            phi_vec = as_dispersion(dispersion, n)
            phi = float(dispersion) if phi_vec is None else self._to_tensor(phi_vec)
            shape1 = mu * phi
            shape2 = (1 - mu) * phi
            if phi_vec is None:
                norm = n * math.lgamma(phi)
            else:
                norm = torch.sum(torch.lgamma(phi))
            ret = (
                norm - torch.sum(torch.lgamma(shape1)) - torch.sum(torch.lgamma(shape2))
                + torch.dot(shape1 - 1, self._to_tensor(stats.log_y))
                + torch.dot(shape2 - 1, self._to_tensor(stats.log1m_y))
            )
            return float(ret)

        raise InvalidFamilyError(family)

    def pointwise_log_likelihood(
        self,
        family: int,
        link: int,
        y: np.ndarray,
        eta: np.ndarray,
        dispersion: Union[float, np.ndarray],
        stats,
    ) -> np.ndarray:
        torch = self.torch
        dist = torch.distributions
        y_t = self._to_tensor(y)
        eta_t = self._to_tensor(eta)

        if family == 1:
            scale = self._to_tensor(dispersion)
            if link == 2:
                ll = dist.LogNormal(eta_t, scale, validate_args=False).log_prob(y_t)
            else:
                mu = self._linkinv(eta_t, family, link)
                ll = dist.Normal(mu, scale, validate_args=False).log_prob(y_t)
            return self._to_numpy(ll)

        if family == 2:
            shape = self._to_tensor(dispersion)
            if link == 3:
                rate = shape * eta_t
            elif link in (1, 2):
                rate = shape / self._linkinv(eta_t, family, link)
            else:
                raise InvalidLinkError("gamma", link)
            ll = dist.Gamma(shape.expand_as(rate), rate, validate_args=False).log_prob(y_t)
            return self._to_numpy(ll)

        if family == 3:
            lam = float(dispersion)
            mu = self._linkinv(eta_t, family, link)
            r = (y_t - mu) / (mu * self._to_tensor(stats.sqrt_y))
            ll = -0.5 * lam * torch.square(r) + 0.5 * math.log(lam / (2 * math.pi)) \
                - 1.5 * self._to_tensor(stats.log_y)
            return self._to_numpy(ll)

        if family == 4:
            mu = self._linkinv(eta_t, family, link)
            phi = self._to_tensor(dispersion)
            ll = dist.Beta(mu * phi, (1 - mu) * phi, validate_args=False).log_prob(y_t)
            return self._to_numpy(ll)

        raise InvalidFamilyError(family)

    def get_device_info(self) -> dict:
        """Get backend information."""
        return {
            'backend': 'gpu' if self.device.type == 'cuda' else 'cpu',
            'precision': 'fp64',
            'device': str(self.device),
            'library': f'PyTorch {self.torch.__version__}',
        }
