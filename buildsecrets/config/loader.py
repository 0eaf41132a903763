"""Configuration loader - reads the provisioner config file."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from buildsecrets.config.exceptions import (
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
)
from buildsecrets.utils.logging import get_logger

logger = get_logger(__name__)

CONFIG_FILE_VAR = "CONFIG_FILE"

# Accepted spellings for each Config field
FIELD_ALIASES = {
    "derivation": ("derivation",),
    "secret_dir": ("secretDir", "secret_dir"),
    "backend_config": ("backendConfig", "backend_config"),
    "metrics_file": ("metricsFile", "metrics_file"),
}


@dataclass
class Config:
    """
    Process-wide provisioner configuration.

    Attributes:
        secret_dir: Root directory under which secret directories are created
        derivation: Derivation path being built (set from the hook arguments)
        backend_config: Backend name -> backend-specific config
        metrics_file: Optional Prometheus textfile to write on exit
    """

    secret_dir: Path
    derivation: str = ""
    backend_config: Optional[dict[str, Any]] = None
    metrics_file: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """
        Create from a decoded config document.

        Raises:
            ConfigValidationError: If "secretDir" is missing or a field has
                the wrong type
        """
        if not isinstance(data, dict):
            raise ConfigValidationError("config must be an object")

        values = {}
        for field_name, aliases in FIELD_ALIASES.items():
            for alias in aliases:
                if alias in data:
                    values[field_name] = data[alias]
                    break

        secret_dir = values.get("secret_dir")
        if secret_dir is None:
            raise ConfigValidationError("is required", field="secretDir")
        if not isinstance(secret_dir, str) or not secret_dir:
            raise ConfigValidationError("must be a non-empty path", field="secretDir")

        derivation = values.get("derivation", "")
        if not isinstance(derivation, str):
            raise ConfigValidationError("must be a string", field="derivation")

        backend_config = values.get("backend_config")
        if backend_config is not None and not isinstance(backend_config, dict):
            raise ConfigValidationError("must be an object", field="backendConfig")

        metrics_file = values.get("metrics_file")
        if metrics_file is not None:
            if not isinstance(metrics_file, str):
                raise ConfigValidationError("must be a string path", field="metricsFile")
            metrics_file = Path(metrics_file)

        return cls(
            secret_dir=Path(secret_dir),
            derivation=derivation,
            backend_config=backend_config,
            metrics_file=metrics_file,
        )


class ConfigLoader:
    """
    Loads the provisioner config from a JSON (or YAML) file.

    Usage:
        loader = ConfigLoader.from_env()
        config = loader.load()
    """

    def __init__(self, config_path: Path):
        self.config_path = Path(config_path)

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "ConfigLoader":
        """
        Build a loader for the file named by $CONFIG_FILE.

        Raises:
            ConfigNotFoundError: If CONFIG_FILE is not set
        """
        environ = os.environ if environ is None else environ
        config_path = environ.get(CONFIG_FILE_VAR)
        if not config_path:
            raise ConfigNotFoundError(
                f"cannot read {CONFIG_FILE_VAR} environment variable"
            )
        return cls(Path(config_path))

    def _load_document(self) -> dict:
        if not self.config_path.exists():
            raise ConfigNotFoundError(
                f"Config file not found: {self.config_path}", path=self.config_path
            )

        try:
            with open(self.config_path) as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigParseError(self.config_path, e) from e
        except OSError as e:
            raise ConfigNotFoundError(
                f"cannot open config file {self.config_path}: {e}",
                path=self.config_path,
            ) from e

    def load(self) -> Config:
        """
        Load and validate the config file.

        Returns:
            Parsed Config
        """
        logger.debug(f"reading config file at {self.config_path}")
        config = Config.from_dict(self._load_document())
        logger.debug(f"loaded config: {config}")
        return config
