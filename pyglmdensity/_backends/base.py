"""
Abstract base classes for backends.

Defines the interface all backends must implement.
"""

from abc import ABC, abstractmethod
import numpy as np
from typing import Optional, Union


class BackendBase(ABC):
    """
    Abstract base class for all backends.

    Backends evaluate the per-family kernels using their native array
    types, converting only at entry (numpy in) and exit (numpy/float out).
    Family and link codes are validated by the caller; backends still
    reject an unknown code rather than fall through to a wrong formula.
    """

    name: str
    precision: str

    @abstractmethod
    def inverse_link(self, eta: np.ndarray, family: int, link: int) -> np.ndarray:
        """
        Inverse link μ = g⁻¹(η) for the family's link table.

        Parameters
        ----------
        eta : ndarray, shape (n,)
            Linear predictor
        family : int
            Family code (1-4)
        link : int
            Link code within the family's table

        Returns
        -------
        mu : ndarray, shape (n,)
        """
        pass

    @abstractmethod
    def inverse_link_phi(self, eta_z: np.ndarray, link_phi: int) -> np.ndarray:
        """Inverse link of the beta precision sub-model."""
        pass

    @abstractmethod
    def log_likelihood(
        self,
        family: int,
        link: int,
        y: np.ndarray,
        eta: np.ndarray,
        dispersion: Union[float, np.ndarray],
        stats,
    ) -> float:
        """
        Total log-likelihood over all observations (unit weights).

        Uses the precomputed sufficient statistics in closed form where
        the family allows it.

        Parameters
        ----------
        family, link : int
            Validated family and link codes
        y : ndarray, shape (n,)
            Outcome
        eta : ndarray, shape (n,)
            Adjusted linear predictor
        dispersion : float or ndarray
            Scalar dispersion, or the per-observation beta precision
        stats : SufficientStats
            Precomputed statistics of y

        Returns
        -------
        float
        """
        pass

    @abstractmethod
    def pointwise_log_likelihood(
        self,
        family: int,
        link: int,
        y: np.ndarray,
        eta: np.ndarray,
        dispersion: Union[float, np.ndarray],
        stats,
    ) -> np.ndarray:
        """Per-observation log-likelihood, shape (n,)."""
        pass

    def weighted_log_likelihood(
        self,
        family: int,
        link: int,
        y: np.ndarray,
        eta: np.ndarray,
        dispersion: Union[float, np.ndarray],
        stats,
        weights: np.ndarray,
    ) -> float:
        """Weighted log-likelihood: dot(weights, pointwise)."""
        summands = self.pointwise_log_likelihood(family, link, y, eta, dispersion, stats)
        return float(np.dot(weights, summands))

    @abstractmethod
    def get_device_info(self) -> dict:
        """Get backend information."""
        pass


class CPUBackend(BackendBase):
    """CPU backend base class (always FP64)."""
    pass


class GPUBackendFP64(BackendBase):
    """GPU backend base class for FP64."""
    pass


def as_dispersion(dispersion: Union[float, np.ndarray], n: int) -> Optional[np.ndarray]:
    """Return dispersion as a vector when it varies by observation, else None."""
    if np.ndim(dispersion) == 0:
        return None
    dispersion = np.asarray(dispersion, dtype=np.float64)
    if dispersion.shape != (n,):
        raise ValueError(f"dispersion vector has shape {dispersion.shape}, expected ({n},)")
    return dispersion
