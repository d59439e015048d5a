"""
GLM family definitions.

Defines the family codes, their link tables and the domain each link
imposes on the linear predictor.
"""

import numpy as np
from enum import IntEnum
from typing import Tuple, Union

from ..exceptions import InvalidFamilyError, InvalidLinkError


class Family(IntEnum):
    """Outcome families. Values match the integer family codes."""
    GAUSSIAN = 1
    GAMMA = 2
    INVERSE_GAUSSIAN = 3
    BETA = 4

    @property
    def label(self) -> str:
        return self.name.lower()


# Link tables, keyed by family. Codes are 1-indexed.
LINKS = {
    Family.GAUSSIAN: {1: "identity", 2: "log", 3: "inverse"},
    Family.GAMMA: {1: "identity", 2: "log", 3: "inverse"},
    Family.INVERSE_GAUSSIAN: {1: "identity", 2: "log", 3: "inverse", 4: "1/mu^2"},
    Family.BETA: {1: "logit", 2: "probit", 3: "cloglog", 4: "cauchit", 5: "log", 6: "loglog"},
}

# Precision (phi) links of the beta dispersion sub-model
PHI_LINKS = {1: "log", 2: "identity", 3: "sqrt"}

_FAMILY_ALIASES = {
    "gaussian": Family.GAUSSIAN,
    "normal": Family.GAUSSIAN,
    "gamma": Family.GAMMA,
    "inverse_gaussian": Family.INVERSE_GAUSSIAN,
    "inverse.gaussian": Family.INVERSE_GAUSSIAN,
    "inversegaussian": Family.INVERSE_GAUSSIAN,
    "beta": Family.BETA,
}


def resolve_family(family: Union[int, str, Family]) -> Family:
    """
    Convert a family code or name to a Family.

    Raises
    ------
    InvalidFamilyError
        If the code or name is not one of the four families
    """
    if isinstance(family, Family):
        return family
    if isinstance(family, str):
        try:
            return _FAMILY_ALIASES[family.strip().lower()]
        except KeyError:
            raise InvalidFamilyError(family) from None
    if isinstance(family, (bool, np.bool_)):
        raise InvalidFamilyError(family)
    try:
        code = int(family)
        if code != family:
            raise ValueError(family)
        return Family(code)
    except (TypeError, ValueError):
        raise InvalidFamilyError(family) from None


def _resolve_code(code, table, family_label):
    if isinstance(code, str):
        for num, name in table.items():
            if name == code.strip().lower():
                return num
        raise InvalidLinkError(family_label, code, table)
    if isinstance(code, (bool, np.bool_)):
        raise InvalidLinkError(family_label, code, table)
    try:
        num = int(code)
    except (TypeError, ValueError):
        raise InvalidLinkError(family_label, code, table) from None
    if num != code or num not in table:
        raise InvalidLinkError(family_label, code, table)
    return num


def resolve_link(link: Union[int, str], family: Union[int, str, Family]) -> int:
    """
    Validate a link code (or name) against the family's link table.

    Returns
    -------
    int
        The 1-indexed link code

    Raises
    ------
    InvalidLinkError
        If the link is not in the family's table
    """
    family = resolve_family(family)
    return _resolve_code(link, LINKS[family], family.label)


def resolve_phi_link(link_phi: Union[int, str]) -> int:
    """Validate a link for the beta precision sub-model."""
    return _resolve_code(link_phi, PHI_LINKS, "beta (precision)")


def link_name(link: int, family: Union[int, str, Family]) -> str:
    family = resolve_family(family)
    return LINKS[family][resolve_link(link, family)]


def intercept_bounds(family: Union[int, str, Family], link: int) -> Tuple[float, float]:
    """
    Bounds on the intercept implied by the link's domain.

    Inverse-type links need a positive predictor, the beta log link needs
    a nonpositive one. All other combinations are unconstrained.

    Returns
    -------
    (lower, upper)
    """
    family = resolve_family(family)
    link = resolve_link(link, family)

    if family == Family.BETA:
        if link == 5:
            return -np.inf, 0.0
        return -np.inf, np.inf

    if family in (Family.GAMMA, Family.INVERSE_GAUSSIAN) and link != 2:
        return 0.0, np.inf

    return -np.inf, np.inf


__all__ = [
    "Family",
    "LINKS",
    "PHI_LINKS",
    "resolve_family",
    "resolve_link",
    "resolve_phi_link",
    "link_name",
    "intercept_bounds",
]
