"""Diagnostic system for registry errors.

Provides structured error diagnostics with codes, context fields, and hints.
Inspired by Rust compiler diagnostics and Elm error messages.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode
from .errors import (
    BundleNotFoundError,
    FormatError,
    InvalidArgumentError,
    KeyNotFoundError,
    RegistryError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate

__all__ = [
    "BundleNotFoundError",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "ErrorTemplate",
    "FormatError",
    "InvalidArgumentError",
    "KeyNotFoundError",
    "OutputFormat",
    "RegistryError",
]
