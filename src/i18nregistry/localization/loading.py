"""Bundle loading infrastructure for BundleRegistry.

Provides the immutable TextSet produced by a successful load, the protocol
that loaders implement, and three concrete loaders.

Components:
    TextSet - Immutable key -> text mapping of one registered bundle
    TextSetLoader - Protocol for loading bundle entries (structural typing)
    MappingTextSetLoader - In-memory loader, mainly for tests and embedding
    PathTextSetLoader - .properties files under a root directory, with
        path-traversal prevention
    PackageTextSetLoader - .properties files shipped inside a Python package

File layout shared by the .properties loaders:

    <namespace>/<bundle_name>_<locale>.properties   (locale given)
    <namespace>/<bundle_name>.properties            (locale is None)

There is no fallback from a locale-specific file to the base file.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import importlib.resources
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Protocol

from i18nregistry.constants import LOCALE_SEPARATOR, MAX_PROPERTIES_SIZE, PROPERTIES_SUFFIX
from i18nregistry.diagnostics import ErrorTemplate
from i18nregistry.localization.properties import decode_properties
from i18nregistry.localization.types import BundleName, LocaleCode, MessageKey, Namespace

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Loaded data
    "TextSet",
    # Protocol
    "TextSetLoader",
    # Concrete loaders
    "MappingTextSetLoader",
    "PathTextSetLoader",
    "PackageTextSetLoader",
    # Helpers
    "bundle_filename",
    "describe_source",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, eq=False)
class TextSet:
    """Immutable key -> text mapping of one bundle.

    Built once from a loader result and never mutated; re-registering a
    bundle replaces the whole TextSet. Compares by identity.

    Attributes:
        name: Bundle name the set is registered under
        locale: Normalized locale code, or None for a base bundle
        entries: Read-only view of key -> text
        source: Human-readable origin (file path, package resource), if known

    Example:
        >>> ts = TextSet("Messages", "en_US", {"greeting": "Hello %s!!!"})
        >>> ts.get("greeting")
        'Hello %s!!!'
        >>> "missing" in ts
        False
    """

    name: BundleName
    locale: LocaleCode | None
    entries: Mapping[MessageKey, str]
    source: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        """Copy entries into a read-only mapping after validating them.

        Raises:
            TypeError: If entries is not a mapping, or any key or value is
                not a str
        """
        if not isinstance(self.entries, Mapping):
            msg = (
                f"Bundle '{self.name}' loader must return a mapping, "
                f"got {type(self.entries).__name__}"
            )
            raise TypeError(msg)
        snapshot: dict[MessageKey, str] = {}
        for key, value in self.entries.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise TypeError(ErrorTemplate.entry_invalid(self.name, key, value).message)
            snapshot[key] = value
        object.__setattr__(self, "entries", MappingProxyType(snapshot))

    def get(self, key: MessageKey) -> str | None:
        """Return the text for key, or None if the set does not hold it."""
        return self.entries.get(key)

    def keys(self) -> list[MessageKey]:
        """Return the keys in load order."""
        return list(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[MessageKey]:
        return iter(self.entries)

    def __repr__(self) -> str:
        return f"TextSet(name={self.name!r}, locale={self.locale!r}, entries={len(self.entries)})"


class TextSetLoader(Protocol):
    """Protocol for loading the entries of one bundle.

    Implementations must provide a load() method returning the key -> text
    mapping of a bundle, or raising when the bundle cannot be produced.
    The registry turns every such failure into BundleNotFoundError.

    The optional describe_source() method provides a human-readable origin
    for logs and TextSet.source. Loaders without it are described by the
    generic "{namespace}/{bundle}[_{locale}]" string.

    Example:
        >>> class DictLoader:
        ...     def load(self, namespace, bundle_name, locale):
        ...         return {"greeting": "Hello"}
        >>> registry = BundleRegistry(DictLoader())
        >>> registry.add_bundle("app", "Messages", "en_US")
    """

    def load(
        self,
        namespace: Namespace,
        bundle_name: BundleName,
        locale: LocaleCode | None,
    ) -> Mapping[MessageKey, str]:
        """Load bundle entries.

        Args:
            namespace: Loader-specific location (directory, package, ...)
            bundle_name: Bundle base name
            locale: Normalized POSIX locale code, or None for the base bundle

        Returns:
            Mapping of key -> text

        Raises:
            FileNotFoundError: If the bundle does not exist
            LookupError: If the namespace or bundle is unknown to the loader
            OSError: If the source cannot be read
            ValueError: If the source is malformed or unsafe
        """
        ...


def bundle_filename(bundle_name: BundleName, locale: LocaleCode | None) -> str:
    """Return the .properties file name for a bundle.

    Example:
        >>> bundle_filename("Messages", "en_US")
        'Messages_en_US.properties'
        >>> bundle_filename("Messages", None)
        'Messages.properties'
    """
    if locale is None:
        return f"{bundle_name}{PROPERTIES_SUFFIX}"
    return f"{bundle_name}{LOCALE_SEPARATOR}{locale}{PROPERTIES_SUFFIX}"


def describe_source(
    loader: object,
    namespace: Namespace,
    bundle_name: BundleName,
    locale: LocaleCode | None,
) -> str:
    """Describe where loader would read a bundle from, for logs and diagnostics."""
    describe = getattr(loader, "describe_source", None)
    if callable(describe):
        return str(describe(namespace, bundle_name, locale))
    suffix = "" if locale is None else f"{LOCALE_SEPARATOR}{locale}"
    return f"{namespace}/{bundle_name}{suffix}"


def _validate_bundle_name(bundle_name: BundleName) -> None:
    """Reject bundle names that would leave the namespace directory.

    Raises:
        ValueError: If bundle_name contains separators, traversal sequences
            or surrounding whitespace
    """
    if bundle_name.strip() != bundle_name:
        msg = f"Bundle name contains leading/trailing whitespace: {bundle_name!r}"
        raise ValueError(msg)
    if ".." in bundle_name:
        msg = f"Path traversal sequences not allowed in bundle name: '{bundle_name}'"
        raise ValueError(msg)
    if "/" in bundle_name or "\\" in bundle_name:
        msg = f"Path separators not allowed in bundle name: '{bundle_name}'"
        raise ValueError(msg)


class MappingTextSetLoader:
    """In-memory loader keyed by (namespace, bundle_name, locale).

    Populate it before handing it to a registry; register() is not
    synchronized with concurrent load() calls.

    Example:
        >>> loader = MappingTextSetLoader()
        >>> loader.register("app", "Messages", "en_US", {"greeting": "Hello"})
        >>> loader.load("app", "Messages", "en_US")
        {'greeting': 'Hello'}
    """

    __slots__ = ("_sources",)

    def __init__(
        self,
        sources: Mapping[
            tuple[Namespace, BundleName, LocaleCode | None], Mapping[MessageKey, str]
        ]
        | None = None,
    ) -> None:
        self._sources: dict[
            tuple[Namespace, BundleName, LocaleCode | None], dict[MessageKey, str]
        ] = {}
        if sources:
            for (namespace, bundle_name, locale), entries in sources.items():
                self.register(namespace, bundle_name, locale, entries)

    def register(
        self,
        namespace: Namespace,
        bundle_name: BundleName,
        locale: LocaleCode | None,
        entries: Mapping[MessageKey, str],
    ) -> None:
        """Make entries loadable under (namespace, bundle_name, locale).

        The locale is stored in POSIX form, so "en-US" and "en_US" address
        the same bundle.
        """
        key = (namespace, bundle_name, None if locale is None else locale.replace("-", "_"))
        self._sources[key] = dict(entries)

    def load(
        self,
        namespace: Namespace,
        bundle_name: BundleName,
        locale: LocaleCode | None,
    ) -> Mapping[MessageKey, str]:
        """Return a copy of the registered entries.

        Raises:
            LookupError: If nothing was registered for the triple
        """
        entries = self._sources.get((namespace, bundle_name, locale))
        if entries is None:
            where = describe_source(None, namespace, bundle_name, locale)
            msg = f"No entries registered for {where}"
            raise LookupError(msg)
        return dict(entries)

    def __len__(self) -> int:
        return len(self._sources)


@dataclass(frozen=True, slots=True)
class PathTextSetLoader:
    """File system loader for .properties bundles.

    The namespace selects a directory below root_dir. Dotted namespaces map
    to nested directories ("org.example.i18n" -> "org/example/i18n"), like
    resource names on a class path; a namespace that already contains "/"
    is taken as a relative path. The empty namespace means root_dir itself.

    Uses Python 3.13 frozen dataclass with slots for low memory overhead.

    Security:
        Namespaces that are absolute or contain ".." are rejected.
        Bundle names containing path separators or ".." are rejected.
        Every resolved path is checked against the fixed root directory.

    Example:
        >>> loader = PathTextSetLoader("resources")
        >>> loader.load("org.example", "Messages", "en_US")
        # Loads from: resources/org/example/Messages_en_US.properties

    Attributes:
        root_dir: Directory all bundle files must live under
    """

    root_dir: str | Path
    _resolved_root: Path = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Cache the resolved root directory."""
        object.__setattr__(self, "_resolved_root", Path(self.root_dir).resolve())

    @staticmethod
    def _validate_namespace(namespace: Namespace) -> None:
        """Validate namespace for path traversal attacks.

        Raises:
            ValueError: If namespace contains unsafe path components
        """
        if ".." in namespace:
            msg = f"Path traversal sequences not allowed in namespace: '{namespace}'"
            raise ValueError(msg)
        if Path(namespace).is_absolute() or namespace.startswith(("/", "\\")):
            msg = f"Absolute paths not allowed in namespace: '{namespace}'"
            raise ValueError(msg)
        if "\\" in namespace:
            msg = f"Backslashes not allowed in namespace: '{namespace}'"
            raise ValueError(msg)

    @staticmethod
    def _is_safe_path(base_dir: Path, full_path: Path) -> bool:
        """Check if full_path resolves to a location inside base_dir."""
        try:
            full_path.resolve().relative_to(base_dir.resolve())
        except ValueError:
            return False
        return True

    @staticmethod
    def _namespace_parts(namespace: Namespace) -> list[str]:
        if not isinstance(namespace, str):
            msg = f"Namespace must be a str path, got {type(namespace).__name__}"
            raise TypeError(msg)
        separator = "/" if "/" in namespace else "."
        return [part for part in namespace.split(separator) if part]

    def bundle_path(
        self,
        namespace: Namespace,
        bundle_name: BundleName,
        locale: LocaleCode | None,
    ) -> Path:
        """Resolve the file a bundle is read from.

        Raises:
            ValueError: If namespace or bundle_name is unsafe
        """
        self._validate_namespace(namespace)
        _validate_bundle_name(bundle_name)

        full_path = self._resolved_root.joinpath(
            *self._namespace_parts(namespace), bundle_filename(bundle_name, locale)
        ).resolve()

        if not self._is_safe_path(self._resolved_root, full_path):
            msg = (
                f"Path traversal detected: resolved path escapes root directory. "
                f"namespace='{namespace}', bundle_name='{bundle_name}'"
            )
            raise ValueError(msg)
        return full_path

    def describe_source(
        self,
        namespace: Namespace,
        bundle_name: BundleName,
        locale: LocaleCode | None,
    ) -> str:
        """Return the file path as a string for diagnostics."""
        parts = [str(self.root_dir), *self._namespace_parts(namespace)]
        return "/".join([*parts, bundle_filename(bundle_name, locale)])

    def load(
        self,
        namespace: Namespace,
        bundle_name: BundleName,
        locale: LocaleCode | None,
    ) -> Mapping[MessageKey, str]:
        """Read and parse a .properties bundle from disk.

        Raises:
            ValueError: If a path component is unsafe, the file is too large
                or malformed
            FileNotFoundError: If the file does not exist
            OSError: If the file cannot be read
        """
        path = self.bundle_path(namespace, bundle_name, locale)
        logger.debug("Reading bundle file %s", path)

        size = path.stat().st_size
        if size > MAX_PROPERTIES_SIZE:
            diagnostic = ErrorTemplate.source_too_large(str(path), size, MAX_PROPERTIES_SIZE)
            raise ValueError(diagnostic.message)

        return decode_properties(path.read_bytes(), source_path=str(path))


@dataclass(frozen=True, slots=True)
class PackageTextSetLoader:
    """Loader for .properties bundles shipped as package data.

    The namespace is an importable package name; bundle files are read from
    that package (optionally from resource_dir inside it) through
    importlib.resources, so zipped and installed distributions work too.

    Example:
        >>> loader = PackageTextSetLoader()
        >>> loader.load("myapp.i18n", "Messages", "de_DE")
        # Reads myapp/i18n/Messages_de_DE.properties from the installed package

    Attributes:
        resource_dir: Optional sub-directory inside each namespace package
    """

    resource_dir: str = ""

    def __post_init__(self) -> None:
        """Validate resource_dir.

        Raises:
            ValueError: If resource_dir is absolute or contains ".."
        """
        if ".." in self.resource_dir or self.resource_dir.startswith(("/", "\\")):
            msg = (
                "resource_dir must be a relative path inside the package, "
                f"got: '{self.resource_dir}'"
            )
            raise ValueError(msg)

    def describe_source(
        self,
        namespace: Namespace,
        bundle_name: BundleName,
        locale: LocaleCode | None,
    ) -> str:
        """Return "package:relative/path" for diagnostics."""
        relative = bundle_filename(bundle_name, locale)
        if self.resource_dir:
            relative = f"{self.resource_dir.strip('/')}/{relative}"
        return f"{namespace}:{relative}"

    def load(
        self,
        namespace: Namespace,
        bundle_name: BundleName,
        locale: LocaleCode | None,
    ) -> Mapping[MessageKey, str]:
        """Read and parse a .properties bundle from package resources.

        Raises:
            FileNotFoundError: If the package or the bundle file does not exist
            ValueError: If bundle_name is unsafe or the file is malformed
            OSError: If the resource cannot be read
        """
        _validate_bundle_name(bundle_name)
        source = self.describe_source(namespace, bundle_name, locale)

        try:
            package_root = importlib.resources.files(namespace)
        except (ModuleNotFoundError, TypeError, ValueError) as exc:
            msg = f"Package not importable for bundle {source}: {exc}"
            raise FileNotFoundError(msg) from exc

        resource = package_root
        for part in self.resource_dir.split("/"):
            if part:
                resource = resource.joinpath(part)
        resource = resource.joinpath(bundle_filename(bundle_name, locale))

        if not resource.is_file():
            msg = f"Bundle resource not found: {source}"
            raise FileNotFoundError(msg)

        logger.debug("Reading bundle resource %s", source)

        return decode_properties(resource.read_bytes(), source_path=source)
