"""Gestalt - directory-based JSON/YAML configuration with attribute access."""

from .errors import (
    GestaltError,
    KeyNotFoundError,
    MethodNotFoundError,
    RootKeyNotFoundError,
    UndefinedEnvironmentError,
    UnsupportedExtensionError,
)
from .handlers import FileHandler, JsonHandler, YamlHandler
from .loader import ConfigLoader, read_config
from .mixin import Gestalt
from .settings import DEFAULT_CONFIG_PATH, GestaltSettings, resolve_environment
from .store import Store

__version__ = "0.1.0"

__all__ = [
    "ConfigLoader",
    "DEFAULT_CONFIG_PATH",
    "FileHandler",
    "Gestalt",
    "GestaltError",
    "GestaltSettings",
    "JsonHandler",
    "KeyNotFoundError",
    "MethodNotFoundError",
    "RootKeyNotFoundError",
    "Store",
    "UndefinedEnvironmentError",
    "UnsupportedExtensionError",
    "YamlHandler",
    "read_config",
    "resolve_environment",
]
