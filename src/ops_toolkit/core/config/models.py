"""Pydantic configuration models and the default configuration tree.

Every section model allows extra fields so keys introduced by users (or by
newer tool versions) survive a load/save cycle untouched. Field names match
the keys persisted in config.yaml.
"""

import copy
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class MonitorConfig(BaseModel):
    """Monitoring dashboard configuration section.

    Attributes:
        refreshInterval: Refresh period in milliseconds.
        showProcesses: Whether the process table is shown.
        maxProcesses: Maximum number of processes listed.

    """

    model_config = ConfigDict(extra="allow")

    refreshInterval: int = Field(default=5000, ge=0, description="Refresh period in ms")
    showProcesses: bool = Field(default=True, description="Show the process table")
    maxProcesses: int = Field(default=20, ge=0, description="Maximum processes listed")


class LogsConfig(BaseModel):
    """Log viewer configuration section."""

    model_config = ConfigDict(extra="allow")

    defaultPath: str = Field(default="/var/log", description="Directory browsed by default")
    maxLines: int = Field(default=1000, ge=0, description="Lines shown per log file")
    follow: bool = Field(default=False, description="Follow log output by default")


class DeployConfig(BaseModel):
    """Deployment defaults section."""

    model_config = ConfigDict(extra="allow")

    defaultEnv: str = Field(default="production", description="Target environment")
    backupEnabled: bool = Field(default=True, description="Back up before deploying")
    confirmBeforeDeploy: bool = Field(default=True, description="Ask before deploying")


class SystemConfig(BaseModel):
    """System information section."""

    model_config = ConfigDict(extra="allow")

    showHiddenServices: bool = Field(default=False, description="List hidden services")
    cacheTimeout: int = Field(default=30000, ge=0, description="Info cache lifetime in ms")


class UIConfig(BaseModel):
    """Console UI preferences."""

    model_config = ConfigDict(extra="allow")

    theme: Literal["default", "dark", "light", "minimal"] = Field(
        default="default", description="Color theme"
    )
    animations: bool = Field(default=True, description="Enable spinners and animations")
    sound: bool = Field(default=False, description="Enable terminal bell")


class Config(BaseModel):
    """Root ops-toolkit configuration model.

    Typed view over the raw configuration tree. Unknown top-level keys are
    kept in ``model_extra``.

    Attributes:
        monitor: Monitoring settings.
        logs: Log viewer settings.
        deploy: Deployment defaults.
        system: System information settings.
        ui: Console UI preferences.

    """

    model_config = ConfigDict(extra="allow")

    monitor: MonitorConfig = Field(default_factory=MonitorConfig)
    logs: LogsConfig = Field(default_factory=LogsConfig)
    deploy: DeployConfig = Field(default_factory=DeployConfig)
    system: SystemConfig = Field(default_factory=SystemConfig)
    ui: UIConfig = Field(default_factory=UIConfig)


_DEFAULT_CONFIG: dict[str, Any] = Config().model_dump(mode="json")


def get_default_config() -> dict[str, Any]:
    """Get the default configuration tree.

    Returns:
        Fresh deep copy of the defaults; mutating it has no effect on later calls.

    """
    return copy.deepcopy(_DEFAULT_CONFIG)
