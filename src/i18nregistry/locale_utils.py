"""Locale utilities for BCP-47 to POSIX conversion.

Centralizes locale format normalization used by the registry, the loaders,
and the positional formatter. Bundle file names and Babel both use the POSIX
form (en_US), so every locale is normalized once at the API boundary.

Python 3.13+. External dependency: Babel (CLDR locale data).
"""

from __future__ import annotations

import functools
import os
from typing import TYPE_CHECKING

from i18nregistry.constants import DEFAULT_LOCALE

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "coerce_locale",
    "get_babel_locale",
    "get_system_locale",
    "normalize_locale",
    "validate_locale_code",
]


def normalize_locale(locale_code: str) -> str:
    """Convert BCP-47 locale code to POSIX format.

    BCP-47 uses hyphens (en-US), while Babel/POSIX uses underscores (en_US).

    Args:
        locale_code: BCP-47 locale code (e.g., "en-US", "pt-BR")

    Returns:
        POSIX-formatted locale code (e.g., "en_US", "pt_BR")

    Example:
        >>> normalize_locale("en-US")
        'en_US'
        >>> normalize_locale("en")  # Already normalized
        'en'
    """
    return locale_code.replace("-", "_")


def validate_locale_code(locale_code: str) -> None:
    """Validate locale code format.

    Checks that the code is non-empty, has no surrounding whitespace, and
    contains only alphanumeric characters with optional underscore or hyphen
    separators. Does not consult CLDR: a well-formed but unknown locale is
    accepted, because loaders decide which locales exist.

    Args:
        locale_code: Locale code to validate

    Raises:
        ValueError: If locale code is empty or has invalid format
    """
    if not locale_code:
        msg = "Locale code cannot be empty"
        raise ValueError(msg)

    if locale_code.strip() != locale_code:
        msg = f"Locale code contains leading/trailing whitespace: {locale_code!r}"
        raise ValueError(msg)

    if not locale_code.replace("_", "").replace("-", "").isalnum():
        msg = f"Invalid locale code format: '{locale_code}'"
        raise ValueError(msg)


def coerce_locale(locale: str | Locale | None) -> str | None:
    """Turn a caller-supplied locale into its canonical POSIX string.

    Args:
        locale: Locale code, Babel Locale, or None for "no locale"

    Returns:
        Normalized locale code, or None when locale is None

    Raises:
        ValueError: If a string locale is malformed
        TypeError: If locale is neither str, Locale nor None
    """
    if locale is None:
        return None

    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale  # noqa: PLC0415

    if isinstance(locale, Locale):
        return str(locale)
    if not isinstance(locale, str):
        msg = f"Locale must be str, babel.Locale or None, got {type(locale).__name__}"
        raise TypeError(msg)

    validate_locale_code(locale)
    return normalize_locale(locale)


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: str) -> Locale:
    """Get a Babel Locale object with caching.

    Thread-safe via lru_cache internal locking.

    Args:
        locale_code: Locale code (BCP-47 or POSIX format accepted)

    Returns:
        Babel Locale object

    Raises:
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid

    Example:
        >>> locale = get_babel_locale("en-US")
        >>> locale.territory
        'US'
    """
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(normalize_locale(locale_code))


def _strip_posix_suffixes(value: str) -> str:
    """Drop the .encoding and @modifier parts of a POSIX locale name."""
    return normalize_locale(value.split("@")[0].split(".")[0])

def get_system_locale(*, raise_on_failure: bool = False) -> str:
    """Detect system locale from OS and environment variables.

    Detection order:
    1. Python locale.getlocale() (OS-level locale)
    2. LC_ALL environment variable (overrides all)
    3. LC_MESSAGES environment variable (for message catalogs)
    4. LANG environment variable (default locale)

    Filters out "C" and "POSIX" pseudo-locales and strips encoding and
    modifier suffixes (de_DE.UTF-8@euro -> de_DE).

    Args:
        raise_on_failure: If True, raise RuntimeError when locale cannot be
            determined. If False (default), return DEFAULT_LOCALE.

    Returns:
        Detected locale code in POSIX format.

    Raises:
        RuntimeError: If raise_on_failure is True and locale cannot be determined.

    Example:
        >>> import os
        >>> os.environ['LANG'] = 'de_DE.UTF-8'
        >>> get_system_locale()
        'de_DE'
    """
    import locale as locale_module  # noqa: PLC0415

    try:
        system_locale, _ = locale_module.getlocale()
        if system_locale and system_locale not in ("C", "POSIX"):
            return _strip_posix_suffixes(system_locale)
    except (ValueError, AttributeError):
        pass

    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(var)
        if value and value not in ("C", "POSIX"):
            return _strip_posix_suffixes(value)

    if raise_on_failure:
        msg = (
            "Could not determine system locale. "
            "Set LC_ALL, LC_MESSAGES, or LANG environment variable."
        )
        raise RuntimeError(msg)

    return DEFAULT_LOCALE
