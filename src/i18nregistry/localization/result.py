"""Value-or-error result of a registry lookup.

BundleRegistry.lookup() and lookup_formatted() return a LookupResult instead
of raising for the four registry failure kinds, for callers that prefer
branching over exception handling:

    match registry.lookup("greeting"):
        case LookupResult(value, None):
            show(value)
        case LookupResult(_, KeyNotFoundError() as err):
            log_missing(err.key)

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from i18nregistry.diagnostics import RegistryError
    from i18nregistry.enums import ErrorKind

__all__ = ["LookupResult"]


@dataclass(frozen=True, slots=True)
class LookupResult:
    """Resolved text or the registry error that prevented resolving it.

    Exactly one of value and error is set. A present but empty text is a
    success with value "".

    Attributes:
        value: Resolved (and possibly formatted) text on success
        error: RegistryError describing the failure, None on success
    """

    value: str | None = None
    error: RegistryError | None = None

    def __post_init__(self) -> None:
        """Enforce that exactly one of value and error is set.

        Raises:
            ValueError: If both or neither are given
        """
        if (self.value is None) == (self.error is None):
            msg = "LookupResult requires exactly one of value or error"
            raise ValueError(msg)

    @classmethod
    def ok(cls, value: str) -> LookupResult:
        """Successful result holding value."""
        return cls(value=value)

    @classmethod
    def failure(cls, error: RegistryError) -> LookupResult:
        """Failed result carrying error."""
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        """True if the lookup produced a value."""
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        """Failure kind, or None on success."""
        return None if self.error is None else self.error.kind

    def unwrap(self) -> str:
        """Return the value, or raise the carried error.

        Raises:
            RegistryError: The subclass describing the failure
        """
        if self.error is not None:
            raise self.error
        # __post_init__ guarantees value is set when error is None
        return self.value  # type: ignore[return-value]

    def value_or(self, default: str) -> str:
        """Return the value, or default when the lookup failed."""
        return default if self.value is None else self.value
