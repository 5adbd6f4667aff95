"""Exceptions raised by Gestalt.

Every error derives from :class:`GestaltError` and additionally from the
builtin exception a Python caller would expect at that seam, so plain
``except KeyError`` / ``getattr(node, name, default)`` keep working.
"""

from typing import Any, Optional


class GestaltError(Exception):
    """Base class for all Gestalt errors."""


class KeyNotFoundError(GestaltError, KeyError, AttributeError):
    """A key is not present in a configuration store.

    Attributes:
        key: The key that was looked up.
        path: Breadcrumb of the store the lookup was made on.
    """

    def __init__(self, message: str, key: Any = None, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.key = key
        self.path = path

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.message


class MethodNotFoundError(GestaltError, AttributeError):
    """A dispatched call matches neither a key nor a mapping operation."""

    def __init__(self, name: str, path: Optional[str] = None):
        message = f"Undefined method '{name}' for store at {path}"
        super().__init__(message)
        self.message = message
        self.name = name
        self.path = path

    def __str__(self) -> str:
        return self.message


class UnsupportedExtensionError(GestaltError, ValueError):
    """No file handler accepts the extension of a configuration file."""

    def __init__(self, extension: str, path: Optional[str] = None):
        super().__init__(f"Extension '{extension}' is not supported")
        self.extension = extension
        self.path = path


class RootKeyNotFoundError(GestaltError, LookupError):
    """A configuration file has no top-level entry for the requested key."""

    def __init__(self, key: Any, path: str):
        super().__init__(f"Key '{key}' not found at root of {path}")
        self.key = key
        self.path = path


# Older name, kept for callers loading by environment
UndefinedEnvironmentError = RootKeyNotFoundError
