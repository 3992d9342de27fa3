"""Runtime support for the bundle registry.

Provides the readers-writer lock guarding registry state and the positional
formatter used by get_formatted_string().

Python 3.13+.
"""

from .formatter import PositionalFormatter
from .rwlock import RWLock
from .value_types import FormatValue, Formatter

__all__ = [
    "FormatValue",
    "Formatter",
    "PositionalFormatter",
    "RWLock",
]
