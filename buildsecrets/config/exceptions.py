"""Errors raised while reading the provisioner config file."""

from pathlib import Path
from typing import Optional


class ConfigError(Exception):
    """Base exception for config errors."""

    pass


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is unnamed, missing or unreadable."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message)


class ConfigParseError(ConfigError):
    """Raised when the config file is neither JSON nor YAML."""

    def __init__(self, path: Path, source: Exception):
        self.path = Path(path)
        self.source = source
        super().__init__(f"invalid config in {self.path}: {source}")


class ConfigValidationError(ConfigError):
    """
    Raised when the decoded config has a missing or mistyped field.

    ``field`` is the documented (camelCase) key, or None when the document
    itself has the wrong shape.
    """

    def __init__(self, reason: str, field: Optional[str] = None):
        self.field = field
        self.reason = reason
        super().__init__(f"config field `{field}`: {reason}" if field else reason)
