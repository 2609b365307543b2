"""Custom exception hierarchy for ops-toolkit.

All configuration failures raised by the ConfigManager derive from
ConfigError so the CLI boundary can report them with a single handler.
"""


class OpsToolkitError(Exception):
    """Base exception for all ops-toolkit errors."""

    pass


class ConfigError(OpsToolkitError):
    """Configuration loading, validation or persistence error."""

    pass


class ConfigUninitializedError(ConfigError):
    """Raised when the manager is used before initialize() succeeded."""

    pass


class ConfigLoadError(ConfigError):
    """Raised when the config directory or file cannot be read or parsed."""

    pass


class ConfigPersistError(ConfigError):
    """Raised when the config file cannot be written."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when one or more validators reject the configuration tree.

    Attributes:
        errors: Aggregated validator messages, each formatted as "[name] message".

    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        """Initialize with message and aggregated validator errors."""
        super().__init__(message)
        self.errors: list[str] = list(errors or [])
