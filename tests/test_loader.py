"""Tests for the multi-file configuration loader."""

import json

import pytest
import yaml

from gestalt import (
    ConfigLoader,
    GestaltSettings,
    JsonHandler,
    RootKeyNotFoundError,
    Store,
    UnsupportedExtensionError,
    YamlHandler,
    read_config,
)
from gestalt.loader import destination_key, strip_trailing_separators


def make_loader(config_dir, **kwargs) -> ConfigLoader:
    return ConfigLoader(GestaltSettings(config_path=str(config_dir), **kwargs))


class TestHelpers:
    """Tests for path helpers."""

    @pytest.mark.parametrize("path,expected", [
        ("config", "config"),
        ("config/", "config"),
        ("path/to/config//", "path/to/config"),
    ])
    def test_strip_trailing_separators(self, path, expected):
        assert strip_trailing_separators(path) == expected

    @pytest.mark.parametrize("path,expected", [
        ("config/database.yml", "database"),
        ("config/app.settings.json", "app.settings"),
        ("/abs/path/cache.yaml", "cache"),
    ])
    def test_destination_key(self, path, expected):
        assert destination_key(path) == expected


class TestHandlers:
    """Tests for the per-format parsers."""

    def test_json_match(self):
        assert JsonHandler().match("a/b.json")
        assert not JsonHandler().match("a/b.yml")

    def test_yaml_match(self):
        assert YamlHandler().match("a/b.yml")
        assert YamlHandler().match("a/b.yaml")
        assert not YamlHandler().match("a/b.YAML")

    def test_empty_json_is_none(self, write_config):
        path = write_config("empty.json", "")
        assert JsonHandler().load(str(path)) is None

    def test_empty_yaml_is_none(self, write_config):
        path = write_config("empty.yml", "")
        assert YamlHandler().load(str(path)) is None


class TestLoad:
    """Tests for ConfigLoader.load."""

    def test_no_root_key_keys_by_file_name(self, write_config, config_dir):
        """Each file becomes one top-level key."""
        write_config("a.json", {"x": 1})
        write_config("b.yaml", "y: 2\n")

        config = make_loader(config_dir).load()

        assert isinstance(config, Store)
        assert sorted(config) == ["a", "b"]
        assert config.a.x == 1
        assert config.b.y == 2

    def test_root_key_selects_branch(self, env_config_dir):
        config = make_loader(env_config_dir).load("test")

        assert config.database.host == "localhost"
        assert config.database.pool.size == 1
        assert config.cache.ttl == 5

    def test_root_key_is_stringified(self, write_config, config_dir):
        write_config("ports.yml", "'1': first\n")
        assert make_loader(config_dir).load(1).ports == "first"

    def test_missing_root_key(self, write_config, config_dir):
        """A file without the root key fails the whole load."""
        path = write_config("test.json", {"production": {}})

        with pytest.raises(RootKeyNotFoundError) as exc_info:
            make_loader(config_dir).load("test")

        assert exc_info.value.key == "test"
        assert exc_info.value.path == str(path)
        assert str(exc_info.value) == f"Key 'test' not found at root of {path}"

    def test_root_key_on_empty_file(self, write_config, config_dir):
        write_config("empty.yml", "")
        with pytest.raises(RootKeyNotFoundError):
            make_loader(config_dir).load("test")

    def test_root_key_on_list_document(self, write_config, config_dir):
        write_config("list.json", ["test"])
        with pytest.raises(RootKeyNotFoundError):
            make_loader(config_dir).load("test")

    def test_non_mapping_documents_without_root_key(self, write_config, config_dir):
        """Lists, scalars and empty files are stored unchanged."""
        write_config("hosts.json", ["a", "b"])
        write_config("empty.yml", "")
        write_config("name.yml", "just a string\n")

        config = make_loader(config_dir).load()

        assert config.hosts == ["a", "b"]
        assert config.empty is None
        assert config.name == "just a string"

    def test_trailing_slash_in_config_path(self, write_config, config_dir):
        write_config("a.json", {"x": 1})
        config = ConfigLoader(GestaltSettings(config_path=f"{config_dir}//")).load()
        assert config.a.x == 1

    def test_empty_directory(self, config_dir):
        assert len(make_loader(config_dir).load()) == 0

    def test_missing_directory(self, tmp_path):
        assert len(make_loader(tmp_path / "nowhere").load()) == 0

    def test_subdirectories_are_not_loaded(self, write_config, config_dir):
        write_config("a.json", {"x": 1})
        (config_dir / "nested.json").mkdir()
        (config_dir / "other").mkdir()

        config = make_loader(config_dir, ignore_unsupported_extensions=False).load()

        assert list(config) == ["a"]

    def test_callback_result_is_returned(self, write_config, config_dir):
        write_config("a.json", {"x": 1})
        calls = []

        result = make_loader(config_dir).load(callback=lambda: calls.append(1) or "done")

        assert result == "done"
        assert calls == [1]

    def test_callback_not_called_on_failure(self, write_config, config_dir):
        write_config("a.json", {"production": {}})
        calls = []

        with pytest.raises(RootKeyNotFoundError):
            make_loader(config_dir).load("test", callback=lambda: calls.append(1))

        assert calls == []

    def test_nested_writes_are_shared(self, write_config, config_dir):
        write_config("db.json", {"pool": {"size": 1}})
        config = make_loader(config_dir).load()

        config.db.pool.size = 5

        assert config.db.pool.size == 5
        assert config["db"]["pool"]["size"] == 5

    def test_missing_key_breadcrumb(self, write_config, config_dir):
        write_config("db.json", {"pool": {}})
        config = make_loader(config_dir).load()
        with pytest.raises(KeyError, match='Key "size" is not present at "root" -> "db" -> "pool"'):
            config.db.pool.size


class TestUnsupportedExtensions:
    """Tests for files no handler accepts."""

    def test_ignored_by_default(self, write_config, config_dir):
        write_config("notes.txt", "hello")
        write_config("a.json", {"x": 1})

        config = make_loader(config_dir).load()

        assert list(config) == ["a"]

    def test_raises_when_not_ignored(self, write_config, config_dir):
        path = write_config("notes.txt", "hello")

        with pytest.raises(UnsupportedExtensionError) as exc_info:
            make_loader(config_dir, ignore_unsupported_extensions=False).load()

        assert exc_info.value.extension == ".txt"
        assert exc_info.value.path == str(path)
        assert str(exc_info.value) == "Extension '.txt' is not supported"

    def test_raises_with_root_key_too(self, write_config, config_dir):
        write_config("notes.txt", "hello")
        with pytest.raises(UnsupportedExtensionError):
            make_loader(config_dir, ignore_unsupported_extensions=False).load("test")

    def test_extension_match_is_case_sensitive(self, write_config, config_dir):
        write_config("a.JSON", {"x": 1})
        with pytest.raises(UnsupportedExtensionError, match=r"\.JSON"):
            make_loader(config_dir, ignore_unsupported_extensions=False).load()


class TestIgnoredFiles:
    """Tests for the ignored-files pattern."""

    @pytest.mark.parametrize("ignore_unsupported", [True, False])
    def test_sample_files_are_never_parsed(self, write_config, config_dir, ignore_unsupported):
        """Sample files are skipped even when they would fail to parse."""
        write_config("database.sample.json", "{not json")
        write_config("notes.sample.txt", "x")
        write_config("a.json", {"x": 1})

        config = make_loader(config_dir, ignore_unsupported_extensions=ignore_unsupported).load()

        assert list(config) == ["a"]

    def test_custom_pattern(self, write_config, config_dir):
        write_config("a.json", {"x": 1})
        write_config("b.json", {"x": 2})

        config = make_loader(config_dir, ignored_files_pattern=r"/b\.json$").load()

        assert list(config) == ["a"]


class TestParseErrors:
    """Parser errors propagate unchanged."""

    def test_invalid_json(self, write_config, config_dir):
        write_config("broken.json", "{not json")
        with pytest.raises(json.JSONDecodeError):
            make_loader(config_dir).load()

    def test_invalid_yaml(self, write_config, config_dir):
        write_config("broken.yml", "key: [unclosed\n")
        with pytest.raises(yaml.YAMLError):
            make_loader(config_dir).load()


class TestReadConfig:
    """Tests for single-file reads."""

    def test_reads_env_branch(self, env_config_dir):
        database = read_config("database", "production", config_dir=str(env_config_dir))
        assert isinstance(database, Store)
        assert database.host == "db.internal"
        assert database.describe_path() == '"database"'

    def test_reads_yaml(self, env_config_dir):
        assert read_config("cache", "test", config_dir=str(env_config_dir)).ttl == 5

    def test_scalar_branch(self, write_config, config_dir):
        write_config("flags.json", {"test": True})
        assert read_config("flags", "test", config_dir=str(config_dir)) is True

    def test_missing_file(self, config_dir):
        with pytest.raises(FileNotFoundError, match="nothing"):
            read_config("nothing", "test", config_dir=str(config_dir))

    def test_missing_env(self, env_config_dir):
        with pytest.raises(RootKeyNotFoundError, match="staging"):
            read_config("database", "staging", config_dir=str(env_config_dir))
