"""Diagnostic codes and data structures.

Defines error codes and the structured diagnostic attached to registry errors.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

from i18nregistry.enums import ErrorKind

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Registry errors (arguments, bundle and key lookups)
        2000-2999: Formatting errors (positional template substitution)
        3000-3999: Loading errors (text set loaders and .properties parsing)
    """

    # Registry errors (1000-1999)
    INVALID_ARGUMENT = 1001
    BUNDLE_NOT_REGISTERED = 1002
    KEY_NOT_IN_BUNDLE = 1003
    KEY_NOT_IN_ANY_BUNDLE = 1004
    INVALID_LOCALE = 1005

    # Formatting errors (2000-2999)
    FORMAT_MISSING_ARGUMENT = 2001
    FORMAT_CONVERSION_MISMATCH = 2002
    FORMAT_UNKNOWN_CONVERSION = 2003
    FORMAT_FLAGS_MISMATCH = 2004

    # Loading errors (3000-3999)
    BUNDLE_LOAD_FAILED = 3001
    BUNDLE_SOURCE_TOO_LARGE = 3002
    BUNDLE_ENTRY_INVALID = 3003

    @property
    def kind(self) -> ErrorKind:
        """Error taxonomy tag this code belongs to."""
        match self.value // 1000:
            case 2:
                return ErrorKind.FORMAT_ERROR
            case 3:
                return ErrorKind.BUNDLE_NOT_FOUND
        match self:
            case DiagnosticCode.BUNDLE_NOT_REGISTERED:
                return ErrorKind.BUNDLE_NOT_FOUND
            case DiagnosticCode.KEY_NOT_IN_BUNDLE | DiagnosticCode.KEY_NOT_IN_ANY_BUNDLE:
                return ErrorKind.KEY_NOT_FOUND
            case _:
                return ErrorKind.INVALID_ARGUMENT


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Inspired by Rust compiler diagnostics. Carries the context of a failed
    registry operation so callers and log aggregators get more than a bare
    string.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        hint: Suggestion for fixing the error
        bundle_name: Bundle involved in the failure (if any)
        key: Lookup key involved in the failure (if any)
        namespace: Loader namespace involved in the failure (if any)
        locale: Locale involved in the failure (if any)
        template: Template text being formatted (format errors)
        argument_index: 1-based positional argument index (format errors)
        expected_type: Expected value type (format errors)
        received_type: Actual value type received (format errors)
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    hint: str | None = None
    bundle_name: str | None = None
    key: str | None = None
    namespace: str | None = None
    locale: str | None = None
    template: str | None = None
    argument_index: int | None = None
    expected_type: str | None = None
    received_type: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like Rust compiler.

        Example output:
            error[KEY_NOT_IN_BUNDLE]: Key 'greeting' not found in bundle 'Messages'
              = bundle: Messages
              = key: greeting
              = help: Check that the key is defined in the bundle's source

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
