"""Core value types for positional formatting.

Defines the types shared by the registry and formatter implementations:
    - FormatValue: Union of all values accepted as positional arguments
    - Formatter: Protocol for template substitution back ends

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime, time
from decimal import Decimal
from typing import Protocol, TypeAlias

__all__ = [
    "FormatValue",
    "Formatter",
]

# Positional values accepted by get_formatted_string(). None is legal and
# renders as the "null" token.
FormatValue: TypeAlias = (
    str
    | int
    | float
    | bool
    | Decimal
    | datetime
    | date
    | time
    | None
)


class Formatter(Protocol):
    """Protocol for positional template substitution.

    Implementations must raise FormatError (never a bare TypeError or
    ValueError) when the template and values are incompatible, so the
    registry can keep format failures distinct from lookup failures.

    Example:
        >>> class BraceFormatter:
        ...     def format(self, template: str, values: Sequence[FormatValue], /) -> str:
        ...         try:
        ...             return template.format(*values)
        ...         except (IndexError, ValueError) as e:
        ...             raise FormatError(str(e), template=template) from e
    """

    def format(self, template: str, values: Sequence[FormatValue], /) -> str:
        """Substitute values into template.

        Args:
            template: Text resolved from a bundle
            values: Positional values in call order

        Returns:
            Substituted text

        Raises:
            FormatError: On arity or type mismatch
        """
        ...  # pragma: no cover  # Protocol stub - not executable
