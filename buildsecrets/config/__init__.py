"""Configuration module."""

from buildsecrets.config.exceptions import (
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
)
from buildsecrets.config.loader import Config, ConfigLoader

__all__ = [
    "Config",
    "ConfigLoader",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
]
