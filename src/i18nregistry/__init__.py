"""i18nregistry - Thread-safe registry of localized message bundles.

Loads named, locale-scoped key -> text mappings (bundles) and resolves keys
either from one named bundle or by scanning every registered bundle in
alphabetical name order. Resolved text can be formatted with printf-style
positional arguments (%s, %d, %1$s, %tY, ...) using CLDR locale data.

Public API:
    BundleRegistry - Registry with add/remove/list and lookup operations
    get_shared_registry - Lazily created process-wide registry
    LookupResult - Value-or-error result of lookup()/lookup_formatted()
    TextSet - Immutable key -> text mapping of one bundle
    MappingTextSetLoader - In-memory loader
    PathTextSetLoader - .properties files under a root directory
    PackageTextSetLoader - .properties files shipped inside a package
    PositionalFormatter - printf-style positional formatter
    FormatValue - Type alias for values accepted by formatting
    ErrorKind - Failure kind tags

Exceptions:
    RegistryError - Base exception class
    InvalidArgumentError - Missing or malformed argument
    BundleNotFoundError - Bundle not registered or not loadable
    KeyNotFoundError - Key absent from the consulted bundle(s)
    FormatError - Template and values incompatible

Submodules:
    i18nregistry.localization - Registry, loaders and .properties parser
    i18nregistry.runtime - Positional formatter and RWLock
    i18nregistry.diagnostics - Error types and structured diagnostics
    i18nregistry.locale_utils - Locale normalization helpers
"""

from .diagnostics import (
    BundleNotFoundError,
    FormatError,
    InvalidArgumentError,
    KeyNotFoundError,
    RegistryError,
)
from .enums import ErrorKind
from .localization import (
    BundleRegistry,
    LookupResult,
    MappingTextSetLoader,
    PackageTextSetLoader,
    PathTextSetLoader,
    TextSet,
    TextSetLoader,
    get_shared_registry,
)
from .runtime import FormatValue, Formatter, PositionalFormatter

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("i18nregistry")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "BundleNotFoundError",
    "BundleRegistry",
    "ErrorKind",
    "FormatError",
    "FormatValue",
    "Formatter",
    "InvalidArgumentError",
    "KeyNotFoundError",
    "LookupResult",
    "MappingTextSetLoader",
    "PackageTextSetLoader",
    "PathTextSetLoader",
    "PositionalFormatter",
    "RegistryError",
    "TextSet",
    "TextSetLoader",
    "__version__",
    "get_shared_registry",
]
