"""Registry exception hierarchy with structured diagnostics.

Four failure kinds, one exception class each. Every class also derives from
the closest builtin (ValueError or LookupError) so generic handlers keep
working, and carries an ErrorKind tag for callers that dispatch on kind.

Python 3.13+. Zero external dependencies.
"""

from typing import ClassVar

from i18nregistry.enums import ErrorKind

from .codes import Diagnostic

__all__ = [
    "BundleNotFoundError",
    "FormatError",
    "InvalidArgumentError",
    "KeyNotFoundError",
    "RegistryError",
]


class RegistryError(Exception):
    """Base exception for all registry errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
        kind: Taxonomy tag of the failure (class-level)
    """

    kind: ClassVar[ErrorKind]

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize RegistryError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class InvalidArgumentError(RegistryError, ValueError):
    """A required argument was None, empty, or of the wrong type.

    Contract violation by the caller; never retried.
    """

    kind = ErrorKind.INVALID_ARGUMENT


class BundleNotFoundError(RegistryError, LookupError):
    """Bundle is not registered, or could not be loaded by add_bundle().

    Attributes:
        bundle_name: The bundle that was requested
    """

    kind = ErrorKind.BUNDLE_NOT_FOUND

    def __init__(self, message: str | Diagnostic, *, bundle_name: str | None = None) -> None:
        """Initialize BundleNotFoundError.

        Args:
            message: Error message string OR Diagnostic object
            bundle_name: The bundle that was requested
        """
        super().__init__(message)
        self.bundle_name = bundle_name


class KeyNotFoundError(RegistryError, LookupError):
    """Key absent from the consulted bundle(s).

    Attributes:
        key: The lookup key
        bundle_name: Bundle consulted, or None after a full scan
    """

    kind = ErrorKind.KEY_NOT_FOUND

    def __init__(
        self,
        message: str | Diagnostic,
        *,
        key: str,
        bundle_name: str | None = None,
    ) -> None:
        """Initialize KeyNotFoundError.

        Args:
            message: Error message string OR Diagnostic object
            key: The lookup key
            bundle_name: Bundle consulted, or None after a full scan
        """
        super().__init__(message)
        self.key = key
        self.bundle_name = bundle_name


class FormatError(RegistryError, ValueError):
    """Template and positional values are incompatible.

    Raised for arity mismatch (missing argument), type mismatch, unknown
    conversions, and illegal flag combinations. Never raised for lookup
    failures, which keep their own types.

    Attributes:
        template: The template that failed to format
    """

    kind = ErrorKind.FORMAT_ERROR

    def __init__(self, message: str | Diagnostic, *, template: str = "") -> None:
        """Initialize FormatError.

        Args:
            message: Error message string OR Diagnostic object
            template: The template that failed to format
        """
        super().__init__(message)
        self.template = template
