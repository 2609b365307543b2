"""Pytest configuration and fixtures for ops-toolkit tests."""

from pathlib import Path

import pytest

from ops_toolkit.core.config import CONFIG_DIR_ENV, ConfigManager


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point OPS_TOOLKIT_CONFIG_DIR at a temp directory for every test.

    This ensures no test reads or writes the real ~/.ops-toolkit.
    """
    config_dir = tmp_path / "ops-toolkit-home"
    monkeypatch.setenv(CONFIG_DIR_ENV, str(config_dir))
    return config_dir


@pytest.fixture
def config_dir(isolated_config_dir: Path) -> Path:
    """Configuration directory used by the manager fixtures."""
    return isolated_config_dir


@pytest.fixture
def manager(config_dir: Path) -> ConfigManager:
    """Initialized ConfigManager with defaults and no validators."""
    mgr = ConfigManager(config_dir)
    mgr.initialize()
    return mgr
