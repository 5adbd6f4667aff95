"""Multi-file configuration loader.

Scans a directory of JSON/YAML files and builds one :class:`Store` keyed by
file name (without extension). An optional root key narrows every file to
one of its top-level branches, typically an environment name:

    # config/database.yml
    test:
      host: localhost
    production:
      host: db.internal

    loader = ConfigLoader(GestaltSettings(config_path="config"))
    config = loader.load("test")
    config.database.host   # "localhost"
"""

import glob
import logging
import os
from collections.abc import Mapping
from typing import Any, Callable, Optional, Sequence

from .errors import RootKeyNotFoundError, UnsupportedExtensionError
from .handlers import FileHandler, default_handlers, handler_for, supported_extensions
from .settings import DEFAULT_CONFIG_PATH, GestaltSettings
from .store import Store

logger = logging.getLogger(__name__)


def strip_trailing_separators(path: str) -> str:
    return path.rstrip("/" + os.sep)


def destination_key(path: str) -> str:
    """Key a file is stored under: its base name without extension."""
    return os.path.splitext(os.path.basename(path))[0]


def select_root(document: Any, key: Any, path: str) -> Any:
    """Return the ``key`` branch of a parsed document.

    Raises:
        RootKeyNotFoundError: If the document is empty, not a mapping, or
            has no such top-level key.
    """
    string_key = str(key)
    if isinstance(document, Mapping) and string_key in document:
        return document[string_key]
    raise RootKeyNotFoundError(string_key, path)


class ConfigLoader:
    """Builds an aggregate Store from a configuration directory.

    Args:
        settings: Where to look and which files to skip. Defaults to
            ``GestaltSettings()``.
        handlers: Parsers tried in order for each file. Defaults to JSON
            then YAML.
    """

    def __init__(
        self,
        settings: Optional[GestaltSettings] = None,
        handlers: Optional[Sequence[FileHandler]] = None,
    ):
        self.settings = settings or GestaltSettings()
        self.handlers = list(handlers) if handlers is not None else default_handlers()

    def config_files(self) -> list[str]:
        """List the regular files directly under the configured path."""
        base = strip_trailing_separators(os.path.expanduser(self.settings.config_path))
        return sorted(p for p in glob.glob(f"{base}/*") if os.path.isfile(p))

    def parse_file(self, path: str) -> Any:
        """Parse one file with the handler matching its extension.

        Raises:
            UnsupportedExtensionError: If no handler matches.
        """
        return handler_for(path, self.handlers).load(path)

    def load(self, key: Any = None, callback: Optional[Callable[[], Any]] = None) -> Any:
        """Load every configuration file into one Store.

        Args:
            key: Root key to extract from each file. None keeps the whole
                document.
            callback: Called without arguments once loading has finished;
                its result is returned instead of the Store.

        Raises:
            UnsupportedExtensionError: An unknown extension while
                ``ignore_unsupported_extensions`` is off.
            RootKeyNotFoundError: A file has no ``key`` at its root.
        """
        configuration = Store()
        loaded = 0

        for path in self.config_files():
            if self.settings.is_ignored(path):
                logger.debug(f"Ignoring configuration file {path}")
                continue

            try:
                content = self.parse_file(path)
            except UnsupportedExtensionError as e:
                if not self.settings.ignore_unsupported_extensions:
                    raise
                logger.debug(f"Skipping {path}: {e}")
                continue

            if key is not None:
                content = select_root(content, key, path)
            configuration[destination_key(path)] = content
            loaded += 1

        logger.info(
            f"Loaded {loaded} configuration file(s) from {self.settings.config_path}"
            + (f" (root key: {key})" if key is not None else "")
        )

        if callback is not None:
            return callback()
        return configuration


def read_config(
    filename: str,
    env: Any,
    config_dir: str = DEFAULT_CONFIG_PATH,
    handlers: Optional[Sequence[FileHandler]] = None,
) -> Any:
    """Read the ``env`` branch of a single configuration file.

    Looks for ``{config_dir}/{filename}`` with each supported extension in
    handler order and reads the first one that exists.

    Raises:
        FileNotFoundError: If no such file exists.
        RootKeyNotFoundError: If the file has no ``env`` branch.
    """
    handlers = list(handlers) if handlers is not None else default_handlers()
    base = os.path.join(os.path.expanduser(config_dir), filename)

    for extension in supported_extensions(handlers):
        path = base + extension
        if os.path.isfile(path):
            content = select_root(handler_for(path, handlers).load(path), env, path)
            if isinstance(content, Mapping):
                return Store(content, filename)
            return content

    raise FileNotFoundError(
        f"No configuration file for '{filename}' in {config_dir} "
        f"(tried {', '.join(supported_extensions(handlers))})"
    )
