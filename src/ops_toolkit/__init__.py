"""ops-toolkit: command-line operations tool with a persistent configuration store."""

__version__ = "1.2.0"
