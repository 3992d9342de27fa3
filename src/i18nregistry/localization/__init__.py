"""Bundle registry package.

Provides the registry stack: type aliases, the .properties reader, text set
loading infrastructure, the result type, and the registry itself.

Submodules:
    types      - PEP 695 type aliases (BundleName, MessageKey, LocaleCode, Namespace)
    properties - Java-style .properties parser
    loading    - TextSet, TextSetLoader protocol, MappingTextSetLoader,
                 PathTextSetLoader, PackageTextSetLoader
    result     - LookupResult (value-or-error lookup outcome)
    registry   - BundleRegistry and the shared process-wide instance

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability

from i18nregistry.localization.loading import (
    MappingTextSetLoader,
    PackageTextSetLoader,
    PathTextSetLoader,
    TextSet,
    TextSetLoader,
    bundle_filename,
)
from i18nregistry.localization.properties import decode_properties, parse_properties
from i18nregistry.localization.registry import BundleRegistry, get_shared_registry
from i18nregistry.localization.result import LookupResult
from i18nregistry.localization.types import BundleName, LocaleCode, MessageKey, Namespace

__all__ = [
    # Registry
    "BundleRegistry",
    "get_shared_registry",
    "LookupResult",
    # Loader protocol and implementations
    "TextSetLoader",
    "MappingTextSetLoader",
    "PathTextSetLoader",
    "PackageTextSetLoader",
    "TextSet",
    "bundle_filename",
    # .properties format
    "parse_properties",
    "decode_properties",
    # Type aliases for user code type annotations
    "BundleName",
    "LocaleCode",
    "MessageKey",
    "Namespace",
]
