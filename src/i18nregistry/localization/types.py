"""Type aliases for the localization domain.

Provides semantic type aliases used throughout the localization package
and by user code when annotating registry call sites.

Python 3.13+. Zero external dependencies.
"""

from typing import TypeAlias

__all__ = [
    "BundleName",
    "LocaleCode",
    "MessageKey",
    "Namespace",
]

BundleName: TypeAlias = str
"""Registry key of a bundle (e.g., 'Messages', 'Errors')."""

MessageKey: TypeAlias = str
"""Key of one text entry in a bundle (e.g., 'com.sample.message')."""

LocaleCode: TypeAlias = str
"""POSIX locale code (e.g., 'en', 'en_US', 'zh_Hans_CN')."""

Namespace: TypeAlias = str
"""Loader-specific location of bundle sources (directory or package name)."""
