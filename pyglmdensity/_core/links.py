"""
Inverse link functions.

Backend-agnostic interface: validates the family/link pair, then
delegates the elementwise transform to the backend.
"""

import numpy as np
from typing import Union

from .families import Family, resolve_family, resolve_link, resolve_phi_link
from .._utils import check_predictor


def inverse_link(
    eta,
    link: Union[int, str],
    family: Union[int, str, Family],
    backend=None,
) -> np.ndarray:
    """
    Map a linear predictor to the mean scale: μ = g⁻¹(η).

    Parameters
    ----------
    eta : array-like, shape (n,)
        Linear predictor
    link : int or str
        Link code (or name) from the family's table
    family : int, str or Family
        Outcome family
    backend : Backend, optional
        Computational backend (default: CPU)

    Returns
    -------
    mu : ndarray, shape (n,)

    Raises
    ------
    InvalidFamilyError, InvalidLinkError
        If the family or link is not valid
    DomainError
        Beta log link with any η > 0 (μ would exceed 1)

    Notes
    -----
    Under the gaussian log link this returns exp(η), the median of the
    lognormal outcome, not its mean.
    """
    family = resolve_family(family)
    link = resolve_link(link, family)
    eta = check_predictor(eta)

    if backend is None:
        from .._backends import get_backend
        backend = get_backend('cpu')

    return backend.inverse_link(eta, int(family), link)


def inverse_link_phi(eta_z, link_phi: Union[int, str], backend=None) -> np.ndarray:
    """
    Inverse link of the beta precision sub-model (log, identity or sqrt).

    The sqrt link maps η to η².
    """
    link_phi = resolve_phi_link(link_phi)
    eta_z = check_predictor(eta_z, name="eta_z")

    if backend is None:
        from .._backends import get_backend
        backend = get_backend('cpu')

    return backend.inverse_link_phi(eta_z, link_phi)


__all__ = ["inverse_link", "inverse_link_phi"]
