"""File handlers: one parser per configuration format.

A handler claims files by extension and turns a file into a raw document
(a mapping, any other JSON/YAML value, or None for an empty file). Parser
errors are not caught here.
"""

import json
import os
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional, Sequence

import yaml

from .errors import UnsupportedExtensionError


class FileHandler(ABC):
    """Parses configuration files with one of ``extensions``."""

    extensions: tuple[str, ...] = ()

    def match(self, path: str) -> bool:
        return os.path.splitext(path)[1] in self.extensions

    @abstractmethod
    def load(self, path: str) -> Any:
        """Parse the file at ``path``."""


class JsonHandler(FileHandler):
    extensions = (".json",)

    def load(self, path: str) -> Any:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
        if not text.strip():
            return None
        return json.loads(text)


class YamlHandler(FileHandler):
    extensions = (".yml", ".yaml")

    def load(self, path: str) -> Any:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)


def default_handlers() -> list[FileHandler]:
    return [JsonHandler(), YamlHandler()]


def handler_for(path: str, handlers: Optional[Iterable[FileHandler]] = None) -> FileHandler:
    """Return the first handler that accepts ``path``.

    Raises:
        UnsupportedExtensionError: If no handler matches.
    """
    for handler in handlers if handlers is not None else default_handlers():
        if handler.match(path):
            return handler
    raise UnsupportedExtensionError(os.path.splitext(path)[1], path)


def supported_extensions(handlers: Sequence[FileHandler]) -> list[str]:
    return [ext for handler in handlers for ext in handler.extensions]
