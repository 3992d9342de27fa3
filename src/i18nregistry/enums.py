"""Enumerations for i18nregistry type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    """Tag identifying which failure a registry operation hit.

    Every RegistryError subclass carries exactly one of these tags, and
    LookupResult exposes it for callers that branch on the failure instead
    of catching exception types.

    StrEnum provides automatic string conversion: str(ErrorKind.KEY_NOT_FOUND) == "key_not_found"
    """

    INVALID_ARGUMENT = "invalid_argument"
    """A required argument (key, bundle name, namespace) was missing or malformed."""

    BUNDLE_NOT_FOUND = "bundle_not_found"
    """The bundle is not registered, or its text set could not be loaded."""

    KEY_NOT_FOUND = "key_not_found"
    """None of the consulted bundles contains the key."""

    FORMAT_ERROR = "format_error"
    """The resolved template and the positional values are incompatible."""


__all__ = [
    "ErrorKind",
]
