"""
Model configuration.

A ModelConfig is fixed for the lifetime of a fit and is passed explicitly
into every core call, so independent chains can share it safely.
"""

from dataclasses import dataclass
from typing import Optional, Union

from ._core.families import (
    Family,
    link_name,
    resolve_family,
    resolve_link,
    resolve_phi_link,
    intercept_bounds,
    PHI_LINKS,
)
from .exceptions import ConfigurationError


@dataclass(frozen=True)
class ModelConfig:
    """
    Immutable family/link configuration.

    Attributes
    ----------
    family : Family
        Outcome family
    link : int
        Link code for the mean, from the family's link table
    link_phi : int
        Link code for the beta precision sub-model; 0 means no sub-model
        (a single scalar precision is used)
    has_intercept : bool
        Whether the mean predictor has an intercept
    has_intercept_z : bool
        Whether the precision predictor has an intercept
    prior_PD : bool
        Draw from the prior predictive: the likelihood contributes nothing
    compute_mean_PPD : bool
        Whether generated quantities include the mean posterior-predictive draw
    """
    family: Family
    link: int
    link_phi: int = 0
    has_intercept: bool = True
    has_intercept_z: bool = False
    prior_PD: bool = False
    compute_mean_PPD: bool = True

    def __post_init__(self):
        family = resolve_family(self.family)
        link = resolve_link(self.link, family)

        if self.link_phi is None or self.link_phi == 0:
            link_phi = 0
        else:
            if family != Family.BETA:
                raise ConfigurationError(
                    f"A precision sub-model (link_phi={self.link_phi!r}) is only "
                    f"available for the beta family, not '{family.label}'"
                )
            link_phi = resolve_phi_link(self.link_phi)

        if self.has_intercept_z and link_phi == 0:
            raise ConfigurationError(
                "has_intercept_z requires a precision sub-model (link_phi > 0)"
            )

        # frozen dataclass: normalise via object.__setattr__
        object.__setattr__(self, "family", family)
        object.__setattr__(self, "link", link)
        object.__setattr__(self, "link_phi", link_phi)
        object.__setattr__(self, "has_intercept", bool(self.has_intercept))
        object.__setattr__(self, "has_intercept_z", bool(self.has_intercept_z))
        object.__setattr__(self, "prior_PD", bool(self.prior_PD))
        object.__setattr__(self, "compute_mean_PPD", bool(self.compute_mean_PPD))

    @property
    def link_label(self) -> str:
        return link_name(self.link, self.family)

    @property
    def has_dispersion_submodel(self) -> bool:
        return self.link_phi > 0

    @property
    def phi_link_label(self) -> Optional[str]:
        return PHI_LINKS[self.link_phi] if self.link_phi else None

    @property
    def intercept_bounds(self):
        return intercept_bounds(self.family, self.link)

    def describe(self) -> str:
        """One-line description, e.g. ``beta(link=logit, phi link=log)``."""
        desc = f"{self.family.label}(link={self.link_label}"
        if self.link_phi:
            desc += f", phi link={self.phi_link_label}"
        return desc + ")"


def make_config(
    family: Union[int, str, Family],
    link: Union[int, str, None] = None,
    link_phi: Union[int, str, None] = None,
    **kwargs,
) -> ModelConfig:
    """
    Build a ModelConfig, defaulting the link to the family's canonical choice.

    Defaults: identity for gaussian, inverse for gamma, 1/mu^2 for
    inverse_gaussian and logit for beta.

    Examples
    --------
    >>> make_config('gamma', 'log')
    >>> make_config('beta', link_phi='log', has_intercept_z=True)
    """
    family = resolve_family(family)
    if link is None:
        link = {
            Family.GAUSSIAN: 1,
            Family.GAMMA: 3,
            Family.INVERSE_GAUSSIAN: 4,
            Family.BETA: 1,
        }[family]
    return ModelConfig(family=family, link=link, link_phi=link_phi or 0, **kwargs)


__all__ = ["ModelConfig", "make_config"]
