"""Pytest fixtures for Gestalt tests."""

import json
from pathlib import Path
from textwrap import dedent

import pytest


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """An empty configuration directory."""
    path = tmp_path / "config"
    path.mkdir()
    return path


@pytest.fixture
def write_config(config_dir: Path):
    """Write a file into the configuration directory.

    Dicts are serialized as JSON; strings are written as-is (dedented).
    """
    def _write(name: str, content) -> Path:
        path = config_dir / name
        if isinstance(content, str):
            path.write_text(dedent(content))
        else:
            path.write_text(json.dumps(content))
        return path

    return _write


@pytest.fixture
def env_config_dir(write_config, config_dir: Path) -> Path:
    """A configuration directory with per-environment sections."""
    write_config("database.json", {
        "test": {"host": "localhost", "pool": {"size": 1}},
        "production": {"host": "db.internal", "pool": {"size": 20}},
    })
    write_config("cache.yml", """
        test:
          ttl: 5
        production:
          ttl: 300
    """)
    return config_dir
