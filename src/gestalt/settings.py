"""Loader settings and environment resolution."""

import os
import re
from dataclasses import dataclass
from typing import Optional, Union

DEFAULT_CONFIG_PATH = "./config"
DEFAULT_IGNORED_FILES_PATTERN = r"\.sample\."
DEFAULT_ENVIRONMENT = "development"
ENV_PREFIX = "GESTALT"


@dataclass
class GestaltSettings:
    """Settings for one configuration loader.

    Attributes:
        config_path: Directory (or glob directory pattern) holding the
            configuration files
        ignored_files_pattern: Regex searched in every file path; matching
            files are never parsed (sample/template files)
        ignore_unsupported_extensions: Skip files no handler understands
            instead of raising UnsupportedExtensionError
    """
    config_path: str = DEFAULT_CONFIG_PATH
    ignored_files_pattern: Union[str, re.Pattern[str]] = DEFAULT_IGNORED_FILES_PATTERN
    ignore_unsupported_extensions: bool = True

    @property
    def ignored_files_regex(self) -> re.Pattern[str]:
        return re.compile(self.ignored_files_pattern)

    def is_ignored(self, path: str) -> bool:
        return self.ignored_files_regex.search(path) is not None

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX) -> "GestaltSettings":
        """Load settings from environment variables.

        Environment variables:
            {prefix}_CONFIG_PATH: Configuration directory
            {prefix}_IGNORED_FILES_PATTERN: Regex of files to skip
            {prefix}_IGNORE_UNSUPPORTED_EXTENSIONS: true|false
        """
        def get(key: str, default: Optional[str] = None) -> Optional[str]:
            return os.environ.get(f"{prefix}_{key}", default)

        def get_bool(key: str, default: bool) -> bool:
            val = get(key)
            if val is None:
                return default
            return val.lower() in ("true", "1", "yes")

        return cls(
            config_path=get("CONFIG_PATH", DEFAULT_CONFIG_PATH),
            ignored_files_pattern=get("IGNORED_FILES_PATTERN", DEFAULT_IGNORED_FILES_PATTERN),
            ignore_unsupported_extensions=get_bool("IGNORE_UNSUPPORTED_EXTENSIONS", True),
        )


def resolve_environment(env: Optional[str] = None, prefix: str = ENV_PREFIX) -> str:
    """Pick the environment to load.

    An explicit ``env`` wins, then ``{prefix}_ENV``, then "development".
    """
    if env:
        return str(env)
    return os.environ.get(f"{prefix}_ENV") or DEFAULT_ENVIRONMENT
