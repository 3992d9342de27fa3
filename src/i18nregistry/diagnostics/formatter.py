"""Diagnostic formatting service.

Centralizes diagnostic output formatting with configurable options.
Python 3.13+. Zero external dependencies.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from .codes import Diagnostic

__all__ = [
    "DiagnosticFormatter",
    "OutputFormat",
]


class OutputFormat(StrEnum):
    """Output format options for diagnostic formatting."""

    RUST = "rust"  # Rust compiler-style output (default)
    SIMPLE = "simple"  # Single-line format
    JSON = "json"  # JSON format for tooling integration


@dataclass(frozen=True, slots=True)
class DiagnosticFormatter:
    """Diagnostic formatting service.

    Attributes:
        output_format: Output style (rust, simple, json)
        sanitize: Truncate content to prevent information leakage
        max_content_length: Maximum content length when sanitizing

    Example:
        >>> formatter = DiagnosticFormatter()
        >>> diagnostic = ErrorTemplate.bundle_not_registered("Messages")
        >>> print(formatter.format(diagnostic))
        error[BUNDLE_NOT_REGISTERED]: Bundle 'Messages' is not registered
          = bundle: Messages
          = help: Register the bundle with add_bundle() before using it

        >>> formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        >>> print(formatter.format(diagnostic))
        BUNDLE_NOT_REGISTERED: Bundle 'Messages' is not registered
    """

    output_format: OutputFormat = OutputFormat.RUST
    sanitize: bool = False
    max_content_length: int = 100

    def format(self, diagnostic: Diagnostic) -> str:
        """Format a single diagnostic.

        Args:
            diagnostic: Diagnostic to format

        Returns:
            Formatted diagnostic string
        """
        match self.output_format:
            case OutputFormat.RUST:
                return self._format_rust(diagnostic)
            case OutputFormat.SIMPLE:
                return self._format_simple(diagnostic)
            case OutputFormat.JSON:
                return self._format_json(diagnostic)

    def format_all(self, diagnostics: Iterable[Diagnostic]) -> str:
        """Format multiple diagnostics separated by blank lines."""
        return "\n\n".join(self.format(d) for d in diagnostics)

    def _format_rust(self, diagnostic: Diagnostic) -> str:
        severity = diagnostic.severity if diagnostic.severity == "warning" else "error"
        parts = [f"{severity}[{diagnostic.code.name}]: {self._maybe_sanitize(diagnostic.message)}"]

        if diagnostic.namespace is not None:
            parts.append(f"  = namespace: {diagnostic.namespace}")
        if diagnostic.bundle_name is not None:
            parts.append(f"  = bundle: {diagnostic.bundle_name}")
        if diagnostic.locale is not None:
            parts.append(f"  = locale: {diagnostic.locale}")
        if diagnostic.key is not None:
            parts.append(f"  = key: {diagnostic.key}")
        if diagnostic.template is not None:
            parts.append(f"  = template: {self._maybe_sanitize(repr(diagnostic.template))}")
        if diagnostic.argument_index is not None:
            parts.append(f"  = argument: {diagnostic.argument_index}")
        if diagnostic.expected_type:
            parts.append(f"  = expected: {diagnostic.expected_type}")
        if diagnostic.received_type:
            parts.append(f"  = received: {diagnostic.received_type}")
        if diagnostic.hint:
            parts.append(f"  = help: {self._maybe_sanitize(diagnostic.hint)}")

        return "\n".join(parts)

    def _format_simple(self, diagnostic: Diagnostic) -> str:
        message = self._maybe_sanitize(diagnostic.message)
        return f"{diagnostic.code.name}: {message}"

    def _format_json(self, diagnostic: Diagnostic) -> str:
        data: dict[str, str | int | None] = {
            "code": diagnostic.code.name,
            "code_value": diagnostic.code.value,
            "kind": str(diagnostic.code.kind),
            "message": self._maybe_sanitize(diagnostic.message),
            "severity": diagnostic.severity,
        }

        for field_name in (
            "namespace",
            "bundle_name",
            "locale",
            "key",
            "template",
            "argument_index",
            "expected_type",
            "received_type",
        ):
            value = getattr(diagnostic, field_name)
            if value is not None:
                data[field_name] = value

        if diagnostic.hint:
            data["hint"] = self._maybe_sanitize(diagnostic.hint)

        return json.dumps(data, ensure_ascii=False)

    def _maybe_sanitize(self, text: str) -> str:
        """Truncate text if sanitization is enabled."""
        if self.sanitize and len(text) > self.max_content_length:
            return text[: self.max_content_length] + "..."
        return text
