"""Thread-safe registry of named text sets with alphabetical key resolution.

BundleRegistry owns a mapping from bundle name to an immutable TextSet. Keys
are resolved either from one named bundle, or by scanning every registered
bundle in ascending lexicographic name order and returning the first match.

Key architectural decisions:
- Protocol-based TextSetLoader and Formatter (dependency inversion)
- Copy-on-register: a load produces a complete TextSet before it becomes
  visible, so readers never observe a partially loaded bundle
- RWLock: lookups run concurrently, registration and removal are exclusive
- Loader I/O and formatting run outside the lock

Resolution order:
    Bundle names are sorted at query time. With "a_bundle" and "z_bundle"
    both defining a key, get_string() returns the value from "a_bundle"
    whatever the registration order. The order is part of the contract.

Failure reporting:
    Errors surface as RegistryError subclasses (InvalidArgumentError,
    BundleNotFoundError, KeyNotFoundError, FormatError). lookup() and
    lookup_formatted() return the same errors inside a LookupResult instead.

Python 3.13+. External dependency: Babel (via PositionalFormatter).
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from i18nregistry.constants import DEFAULT_LOCALE
from i18nregistry.diagnostics import (
    BundleNotFoundError,
    ErrorTemplate,
    FormatError,
    InvalidArgumentError,
    KeyNotFoundError,
    RegistryError,
)
from i18nregistry.locale_utils import coerce_locale
from i18nregistry.localization.loading import (
    PackageTextSetLoader,
    TextSet,
    describe_source,
)
from i18nregistry.localization.result import LookupResult
from i18nregistry.runtime.formatter import PositionalFormatter
from i18nregistry.runtime.rwlock import RWLock

if TYPE_CHECKING:
    from collections.abc import Sequence

    from babel import Locale

    from i18nregistry.localization.loading import TextSetLoader
    from i18nregistry.localization.types import BundleName, LocaleCode, MessageKey, Namespace
    from i18nregistry.runtime.value_types import FormatValue, Formatter

__all__ = ["BundleRegistry", "get_shared_registry"]

logger = logging.getLogger(__name__)


def _require_str(name: str, value: object) -> str:
    """Return value if it is a str, else raise InvalidArgumentError."""
    if not isinstance(value, str):
        raise InvalidArgumentError(ErrorTemplate.invalid_argument(name, value))
    return value


class BundleRegistry:
    """Registry of named text sets with single-bundle and scanning lookups.

    Thread-safe. Resolution calls are readers on an internal RWLock; add,
    remove and clear are writers.

    Example:
        >>> loader = MappingTextSetLoader()
        >>> loader.register("app", "Messages", "en_US", {"greeting": "Hello %s!!!"})
        >>> registry = BundleRegistry(loader)
        >>> registry.add_bundle("app", "Messages", "en_US")
        TextSet(name='Messages', locale='en_US', entries=1)
        >>> registry.get_formatted_string("greeting", "World")
        'Hello World!!!'

    Attributes:
        loader: Loader consulted by add_bundle()
        formatter: Formatter used by the get_formatted_string* family
    """

    __slots__ = ("_formatter", "_loader", "_lock", "_text_sets")

    def __init__(
        self,
        loader: TextSetLoader,
        *,
        formatter: Formatter | None = None,
        format_locale: str | Locale | None = None,
    ) -> None:
        """Initialize an empty registry.

        Args:
            loader: Source of bundle entries for add_bundle()
            formatter: Custom Formatter; defaults to a PositionalFormatter
            format_locale: Locale for the default PositionalFormatter
                (number symbols, month and day names). Defaults to en_US.

        Raises:
            InvalidArgumentError: If loader is None, both formatter and
                format_locale are given, or format_locale is invalid
        """
        if loader is None:
            raise InvalidArgumentError(ErrorTemplate.invalid_argument("loader", loader))

        if formatter is not None and format_locale is not None:
            msg = "Pass either formatter or format_locale, not both"
            raise InvalidArgumentError(msg)

        if formatter is None:
            try:
                formatter = PositionalFormatter(
                    DEFAULT_LOCALE if format_locale is None else format_locale
                )
            except (TypeError, ValueError) as e:
                raise InvalidArgumentError(
                    ErrorTemplate.invalid_locale(str(format_locale), str(e))
                ) from e

        self._loader = loader
        self._formatter: Formatter = formatter
        self._text_sets: dict[BundleName, TextSet] = {}
        self._lock = RWLock()

    @property
    def loader(self) -> TextSetLoader:
        """Loader consulted by add_bundle()."""
        return self._loader

    @property
    def formatter(self) -> Formatter:
        """Formatter used by the get_formatted_string* family."""
        return self._formatter

    def __repr__(self) -> str:
        """Return string representation for debugging.

        Example:
            >>> repr(BundleRegistry(MappingTextSetLoader()))
            'BundleRegistry(bundles=[])'
        """
        return f"BundleRegistry(bundles={self.list_bundle_names()!r})"

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._text_sets)

    def __contains__(self, bundle_name: object) -> bool:
        if not isinstance(bundle_name, str):
            return False
        with self._lock.read():
            return bundle_name in self._text_sets

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_bundle(
        self,
        namespace: Namespace,
        bundle_name: BundleName,
        locale: LocaleCode | Locale | None = None,
    ) -> TextSet:
        """Load a bundle and register it under bundle_name.

        The loader runs without holding the registry lock. Only a complete
        TextSet is published, replacing any previous bundle of the same name
        (last write wins). On failure the registry is left unchanged.

        Args:
            namespace: Loader-specific location (directory, package, ...)
            bundle_name: Name to register under; also the bundle base name
            locale: Locale code ("en-US" or "en_US"), babel.Locale, or None
                for the base bundle

        Returns:
            The registered TextSet

        Raises:
            InvalidArgumentError: If namespace is None, bundle_name is empty
                or not a str, or locale is malformed. The namespace is opaque
                to the registry; its type is checked by the loader.
            BundleNotFoundError: If the loader cannot produce the bundle
                (the loader's exception is chained as __cause__)
        """
        if namespace is None:
            raise InvalidArgumentError(ErrorTemplate.invalid_argument("namespace", namespace))
        bundle_name = _require_str("bundle_name", bundle_name)
        if not bundle_name.strip():
            raise InvalidArgumentError(ErrorTemplate.invalid_argument("bundle_name", bundle_name))

        try:
            locale_code = coerce_locale(locale)
        except TypeError as e:
            raise InvalidArgumentError(ErrorTemplate.invalid_argument("locale", locale)) from e
        except ValueError as e:
            raise InvalidArgumentError(ErrorTemplate.invalid_locale(str(locale), str(e))) from e

        source = f"namespace {namespace!r}"
        try:
            source = describe_source(self._loader, namespace, bundle_name, locale_code)
            entries = self._loader.load(namespace, bundle_name, locale_code)
            text_set = TextSet(bundle_name, locale_code, entries, source)
        except (ImportError, LookupError, OSError, TypeError, ValueError) as e:
            logger.warning("Failed to load bundle '%s' from %s: %s", bundle_name, source, e)
            raise BundleNotFoundError(
                ErrorTemplate.bundle_load_failed(namespace, bundle_name, locale_code, e),
                bundle_name=bundle_name,
            ) from e

        with self._lock.write():
            previous = self._text_sets.get(bundle_name)
            self._text_sets[bundle_name] = text_set

        if previous is None:
            logger.info(
                "Added bundle '%s' (namespace=%s, locale=%s): %d keys",
                bundle_name,
                namespace,
                locale_code,
                len(text_set),
            )
        else:
            logger.info(
                "Replaced bundle '%s' (locale %s -> %s): %d keys",
                bundle_name,
                previous.locale,
                locale_code,
                len(text_set),
            )
        return text_set

    def remove_bundle(self, bundle_name: BundleName) -> None:
        """Unregister a bundle.

        Args:
            bundle_name: Name the bundle was registered under

        Raises:
            BundleNotFoundError: If no such bundle is registered, including
                None or blank names
        """
        removed: TextSet | None = None
        if isinstance(bundle_name, str) and bundle_name.strip():
            with self._lock.write():
                removed = self._text_sets.pop(bundle_name, None)

        if removed is None:
            raise BundleNotFoundError(
                ErrorTemplate.bundle_not_registered(bundle_name), bundle_name=bundle_name
            )
        logger.debug("Removed bundle '%s'", bundle_name)

    def clear(self) -> int:
        """Unregister every bundle.

        Returns:
            Number of bundles removed
        """
        with self._lock.write():
            count = len(self._text_sets)
            self._text_sets.clear()
        logger.debug("Cleared %d bundle(s)", count)
        return count

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def list_bundle_names(self) -> list[BundleName]:
        """Return registered bundle names in resolution (ascending) order.

        The list is a copy; mutating it does not affect the registry.
        """
        with self._lock.read():
            return sorted(self._text_sets)

    def has_bundle(self, bundle_name: BundleName) -> bool:
        """Check if a bundle is registered under bundle_name."""
        return bundle_name in self

    def get_text_set(self, bundle_name: BundleName) -> TextSet:
        """Return the registered TextSet for bundle_name.

        Raises:
            InvalidArgumentError: If bundle_name is not a str
            BundleNotFoundError: If no such bundle is registered
        """
        bundle_name = _require_str("bundle_name", bundle_name)
        with self._lock.read():
            text_set = self._text_sets.get(bundle_name)
        if text_set is None:
            raise BundleNotFoundError(
                ErrorTemplate.bundle_not_registered(bundle_name), bundle_name=bundle_name
            )
        return text_set

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def get_string(self, key: MessageKey) -> str:
        """Resolve key by scanning all bundles in ascending name order.

        The scan holds one read lock throughout, so it sees the registry
        either entirely before or entirely after any concurrent mutation.

        Args:
            key: Lookup key

        Returns:
            Value from the alphabetically first bundle holding key (may be "")

        Raises:
            InvalidArgumentError: If key is not a str
            KeyNotFoundError: If no bundle holds key, including when no
                bundle is registered
        """
        key = _require_str("key", key)

        with self._lock.read():
            bundle_count = len(self._text_sets)
            for name in sorted(self._text_sets):
                value = self._text_sets[name].get(key)
                if value is not None:
                    return value
                logger.debug("Bundle '%s' does not contain key '%s'", name, key)

        raise KeyNotFoundError(ErrorTemplate.key_not_in_any_bundle(key, bundle_count), key=key)

    def get_string_from_bundle(self, key: MessageKey, bundle_name: BundleName) -> str:
        """Resolve key from one named bundle.

        Args:
            key: Lookup key
            bundle_name: Registered bundle to consult

        Returns:
            The bundle's value for key (may be "")

        Raises:
            InvalidArgumentError: If key or bundle_name is not a str
            BundleNotFoundError: If bundle_name is not registered
            KeyNotFoundError: If the bundle does not hold key
        """
        key = _require_str("key", key)
        text_set = self.get_text_set(bundle_name)

        value = text_set.get(key)
        if value is None:
            raise KeyNotFoundError(
                ErrorTemplate.key_not_in_bundle(key, text_set.name),
                key=key,
                bundle_name=text_set.name,
            )
        return value

    def get_formatted_string(self, key: MessageKey, *values: FormatValue) -> str:
        """Resolve key by scanning, then substitute positional values.

        None values render as "null".

        Raises:
            InvalidArgumentError: If key is not a str
            KeyNotFoundError: If no bundle holds key
            FormatError: If the template and values are incompatible
        """
        return self._format(key, self.get_string(key), values)

    def get_formatted_string_from_bundle(
        self, key: MessageKey, bundle_name: BundleName, *values: FormatValue
    ) -> str:
        """Resolve key from one named bundle, then substitute positional values.

        Raises:
            InvalidArgumentError: If key or bundle_name is not a str
            BundleNotFoundError: If bundle_name is not registered
            KeyNotFoundError: If the bundle does not hold key
            FormatError: If the template and values are incompatible
        """
        return self._format(key, self.get_string_from_bundle(key, bundle_name), values)

    def _format(self, key: MessageKey, template: str, values: Sequence[FormatValue]) -> str:
        logger.debug("Formatting '%s' with %d value(s)", key, len(values))
        try:
            return self._formatter.format(template, values)
        except FormatError:
            raise
        except (IndexError, KeyError, TypeError, ValueError) as e:
            # Custom formatters that leak builtin errors
            raise FormatError(str(e), template=template) from e

    # ------------------------------------------------------------------
    # Result-returning API
    # ------------------------------------------------------------------

    def lookup(self, key: MessageKey, bundle_name: BundleName | None = None) -> LookupResult:
        """Resolve key without raising registry errors.

        Args:
            key: Lookup key
            bundle_name: Bundle to consult, or None to scan all bundles

        Returns:
            LookupResult holding the value or the RegistryError
        """
        try:
            if bundle_name is None:
                value = self.get_string(key)
            else:
                value = self.get_string_from_bundle(key, bundle_name)
        except RegistryError as e:
            return LookupResult.failure(e)
        return LookupResult.ok(value)

    def lookup_formatted(
        self,
        key: MessageKey,
        *values: FormatValue,
        bundle_name: BundleName | None = None,
    ) -> LookupResult:
        """Resolve and format key without raising registry errors.

        Args:
            key: Lookup key
            *values: Positional values for the template
            bundle_name: Bundle to consult, or None to scan all bundles

        Returns:
            LookupResult holding the formatted text or the RegistryError
        """
        resolved = self.lookup(key, bundle_name)
        if resolved.error is not None:
            return resolved
        try:
            return LookupResult.ok(self._format(key, resolved.unwrap(), values))
        except FormatError as e:
            return LookupResult.failure(e)


_shared_registry: BundleRegistry | None = None
_shared_registry_lock = threading.Lock()


def get_shared_registry() -> BundleRegistry:
    """Return the process-wide registry, creating it on first use.

    The shared registry loads bundles from package resources through a
    PackageTextSetLoader and formats with the default locale. Applications
    needing other loaders, or tests needing isolation, should construct
    their own BundleRegistry.

    Example:
        >>> registry = get_shared_registry()
        >>> text_set = registry.add_bundle("myapp.i18n", "Messages", "en_US")
        >>> get_shared_registry() is registry
        True
    """
    global _shared_registry  # noqa: PLW0603

    registry = _shared_registry
    if registry is not None:
        return registry

    with _shared_registry_lock:
        if _shared_registry is None:
            _shared_registry = BundleRegistry(PackageTextSetLoader())
            logger.debug("Created shared bundle registry")
        return _shared_registry
