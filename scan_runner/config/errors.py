"""Project-native typed exceptions for scan job configuration failures."""

from __future__ import annotations


class ConfigurationError(Exception):
    """Base exception for configuration failures raised before job submission.

    Attributes:
        config_key: Optional offending configuration key.
    """

    def __init__(self, message: str, config_key: str | None = None):
        super().__init__(message)
        self.config_key = config_key


class ConfigurationPairingError(ConfigurationError, ValueError):
    """Application configuration and its namespace root were not supplied together."""


class ConfigurationParseError(ConfigurationError, ValueError):
    """Configuration key or value does not resolve against the namespace root."""
