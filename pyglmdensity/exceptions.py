"""
Exception hierarchy.

Configuration errors are fatal to a fit. Domain and numeric errors reject
a single density evaluation and are left to the caller's sampler.
"""


class PyGLMDensityError(Exception):
    """Base class for all pyglmdensity errors."""


class ConfigurationError(PyGLMDensityError, ValueError):
    """Invalid family or link configuration."""


class InvalidFamilyError(ConfigurationError):
    """Family code outside the supported set."""

    def __init__(self, family):
        self.family = family
        super().__init__(
            f"Invalid family: {family!r}. "
            f"Valid options: 1 (gaussian), 2 (gamma), "
            f"3 (inverse_gaussian), 4 (beta)"
        )


class InvalidLinkError(ConfigurationError):
    """Link code outside the family's link table."""

    def __init__(self, family, link, valid=None):
        self.family = family
        self.link = link
        msg = f"Invalid link {link!r} for family '{family}'"
        if valid:
            options = ", ".join(f"{code} ({name})" for code, name in valid.items())
            msg += f". Valid options: {options}"
        super().__init__(msg)


class DomainError(PyGLMDensityError, ValueError):
    """A value lies outside the support required by the family or link."""


class NumericError(PyGLMDensityError, ArithmeticError):
    """A non-finite value was produced during evaluation."""


__all__ = [
    "PyGLMDensityError",
    "ConfigurationError",
    "InvalidFamilyError",
    "InvalidLinkError",
    "DomainError",
    "NumericError",
]
