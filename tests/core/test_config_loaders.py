"""Tests for config loading, saving, merging and directory resolution."""

from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from ops_toolkit.core.config import (
    CONFIG_DIR_ENV,
    DEFAULT_CONFIG_DIR,
    MAX_CONFIG_SIZE,
    get_default_config,
    load_yaml_file,
    merge_configs,
    resolve_config_dir,
    save_yaml_file,
)
from ops_toolkit.core.exceptions import ConfigLoadError, ConfigPersistError

# =============================================================================
# merge_configs
# =============================================================================


class TestMergeConfigs:
    """Tests for the one-level merge rule."""

    def test_keeps_every_default_top_level_key(self) -> None:
        """Merged result contains all top-level keys of defaults."""
        defaults = get_default_config()
        for loaded in ({}, {"monitor": 1}, {"extra": {"x": 1}}, {"ui": {"theme": "dark"}}):
            merged = merge_configs(defaults, loaded)
            assert set(defaults) <= set(merged)

    def test_loaded_wins_at_top_level(self) -> None:
        """Scalar and list values from loaded replace defaults."""
        merged = merge_configs({"a": 1, "b": [1, 2]}, {"a": 2, "b": [3]})
        assert merged == {"a": 2, "b": [3]}

    def test_one_level_merge_fills_gaps(self) -> None:
        """Nested sections get loaded keys plus missing default keys."""
        defaults = {"monitor": {"refreshInterval": 5000, "showProcesses": True}}
        merged = merge_configs(defaults, {"monitor": {"refreshInterval": 10}})
        assert merged == {"monitor": {"refreshInterval": 10, "showProcesses": True}}

    def test_not_recursive_beyond_one_level(self) -> None:
        """Depth-3 defaults are lost when the user overrides depth 2."""
        merged = merge_configs({"a": {"x": {"p": 1, "q": 2}}}, {"a": {"x": {"p": 9}}})
        assert merged["a"]["x"] == {"p": 9}

    def test_dict_replaced_by_scalar(self) -> None:
        """A non-dict loaded value replaces a default section entirely."""
        merged = merge_configs({"a": {"x": 1}}, {"a": "flat"})
        assert merged == {"a": "flat"}

    def test_list_never_merged_with_dict(self) -> None:
        """A list in loaded replaces a dict in defaults."""
        merged = merge_configs({"a": {"x": 1}}, {"a": [1]})
        assert merged == {"a": [1]}

    def test_unknown_keys_preserved(self) -> None:
        """User-introduced keys survive the merge."""
        merged = merge_configs({"a": {"x": 1}}, {"a": {"y": 2}, "custom": {"k": "v"}})
        assert merged == {"a": {"x": 1, "y": 2}, "custom": {"k": "v"}}

    def test_inputs_not_modified_or_shared(self) -> None:
        """Result shares no containers with its inputs."""
        defaults = {"a": {"x": 1}, "l": [1]}
        loaded = {"a": {"y": {"deep": 1}}, "l": [2]}
        merged = merge_configs(defaults, loaded)

        merged["a"]["x"] = 100
        merged["a"]["y"]["deep"] = 100
        merged["l"].append(3)

        assert defaults == {"a": {"x": 1}, "l": [1]}
        assert loaded == {"a": {"y": {"deep": 1}}, "l": [2]}


# =============================================================================
# load_yaml_file / save_yaml_file
# =============================================================================


class TestLoadYamlFile:
    """Tests for load_yaml_file."""

    def test_load_mapping(self, tmp_path: Path) -> None:
        """Valid YAML mapping is returned as dict."""
        path = tmp_path / "config.yaml"
        path.write_text("monitor:\n  refreshInterval: 10\n")
        assert load_yaml_file(path) == {"monitor": {"refreshInterval": 10}}

    def test_missing_file(self, tmp_path: Path) -> None:
        """Missing file raises ConfigLoadError."""
        with pytest.raises(ConfigLoadError, match="Config file not found"):
            load_yaml_file(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Broken YAML raises ConfigLoadError."""
        path = tmp_path / "config.yaml"
        path.write_text("invalid: yaml: [broken")
        with pytest.raises(ConfigLoadError, match="Invalid YAML"):
            load_yaml_file(path)

    def test_empty_file(self, tmp_path: Path) -> None:
        """Empty file raises ConfigLoadError."""
        path = tmp_path / "config.yaml"
        path.write_text("   \n")
        with pytest.raises(ConfigLoadError, match="empty"):
            load_yaml_file(path)

    def test_non_mapping(self, tmp_path: Path) -> None:
        """Top-level list raises ConfigLoadError."""
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigLoadError, match="must contain a YAML mapping"):
            load_yaml_file(path)

    def test_directory(self, tmp_path: Path) -> None:
        """Directory path raises ConfigLoadError."""
        with pytest.raises(ConfigLoadError):
            load_yaml_file(tmp_path)

    def test_too_large(self, tmp_path: Path) -> None:
        """Files above MAX_CONFIG_SIZE are rejected."""
        path = tmp_path / "config.yaml"
        path.write_text("a: " + "x" * (MAX_CONFIG_SIZE + 10))
        with pytest.raises(ConfigLoadError, match="is larger than 1,048,576 bytes"):
            load_yaml_file(path)


class TestSaveYamlFile:
    """Tests for save_yaml_file."""

    def test_round_trip_keeps_order(self, tmp_path: Path) -> None:
        """Saved file parses back to an equal tree with key order kept."""
        path = tmp_path / "sub" / "config.yaml"
        data = {"zeta": 1, "alpha": {"b": [1, 2], "a": None}, "flag": True}
        save_yaml_file(path, data)

        loaded = yaml.safe_load(path.read_text())
        assert loaded == data
        assert list(loaded) == ["zeta", "alpha", "flag"]

    def test_unrepresentable_value_leaves_file_intact(self, tmp_path: Path) -> None:
        """A value YAML cannot represent raises before the file is touched."""
        path = tmp_path / "config.yaml"
        path.write_text("a: 1\n")

        with pytest.raises(ConfigPersistError, match="Cannot serialize"):
            save_yaml_file(path, {"a": object()})

        assert path.read_text() == "a: 1\n"

    def test_write_error_wrapped(self, tmp_path: Path) -> None:
        """OSError from the write becomes ConfigPersistError."""
        path = tmp_path / "config.yaml"
        with (
            patch(
                "ops_toolkit.core.config.loaders.atomic_write",
                side_effect=PermissionError("read-only"),
            ),
            pytest.raises(ConfigPersistError, match="Failed to write configuration"),
        ):
            save_yaml_file(path, {"a": 1})


# =============================================================================
# resolve_config_dir
# =============================================================================


class TestResolveConfigDir:
    """Tests for resolve_config_dir."""

    def test_override_wins(self, tmp_path: Path) -> None:
        """Explicit override beats the environment variable."""
        assert resolve_config_dir(tmp_path / "explicit") == tmp_path / "explicit"

    def test_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Environment variable is used without an override."""
        monkeypatch.setenv(CONFIG_DIR_ENV, str(tmp_path / "from-env"))
        assert resolve_config_dir() == tmp_path / "from-env"

    def test_tilde_expanded(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """~ is expanded to the home directory."""
        monkeypatch.setenv(CONFIG_DIR_ENV, "~/custom-ops")
        assert resolve_config_dir() == Path.home() / "custom-ops"

    def test_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Falls back to ~/.ops-toolkit."""
        monkeypatch.delenv(CONFIG_DIR_ENV, raising=False)
        assert resolve_config_dir() == DEFAULT_CONFIG_DIR
        assert DEFAULT_CONFIG_DIR.name == ".ops-toolkit"


class TestDefaults:
    """Tests for the default configuration tree."""

    def test_default_values(self) -> None:
        """Defaults carry the shipped values."""
        defaults = get_default_config()
        assert list(defaults) == ["monitor", "logs", "deploy", "system", "ui"]
        assert defaults["monitor"] == {
            "refreshInterval": 5000,
            "showProcesses": True,
            "maxProcesses": 20,
        }
        assert defaults["logs"]["defaultPath"] == "/var/log"
        assert defaults["deploy"]["defaultEnv"] == "production"
        assert defaults["system"]["cacheTimeout"] == 30000
        assert defaults["ui"]["theme"] == "default"

    def test_returns_independent_copies(self) -> None:
        """Mutating one copy does not affect later calls."""
        first = get_default_config()
        first["monitor"]["refreshInterval"] = 1
        assert get_default_config()["monitor"]["refreshInterval"] == 5000
