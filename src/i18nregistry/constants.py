"""Shared constants for i18nregistry.

Centralizes the literals used by the registry, the loaders, and the
positional formatter so there is a single source of truth.

Constants are grouped by domain:
- Formatting: tokens substituted for absent values
- Locales: default formatting locale
- Loading: file naming and input size limits

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Formatting
    "NULL_TOKEN",
    "FALSE_TOKEN",
    "TRUE_TOKEN",
    # Locales
    "DEFAULT_LOCALE",
    # Loading
    "PROPERTIES_SUFFIX",
    "LOCALE_SEPARATOR",
    "MAX_PROPERTIES_SIZE",
]

# ============================================================================
# FORMATTING
# ============================================================================

# Literal written in place of a None positional value. Matches the token
# emitted by printf-style formatters on the JVM, which is what bundle
# authors writing "%s" templates expect to see.
NULL_TOKEN: str = "null"

FALSE_TOKEN: str = "false"
TRUE_TOKEN: str = "true"

# ============================================================================
# LOCALES
# ============================================================================

# Formatting locale used when a registry or formatter is created without one.
DEFAULT_LOCALE: str = "en_US"

# ============================================================================
# LOADING
# ============================================================================

PROPERTIES_SUFFIX: str = ".properties"

# Joins bundle name and locale in file names: Messages_en_US.properties
LOCALE_SEPARATOR: str = "_"

# Upper bound on a single .properties file (10 MB). Larger inputs are
# rejected before parsing.
MAX_PROPERTIES_SIZE: int = 10 * 1024 * 1024
