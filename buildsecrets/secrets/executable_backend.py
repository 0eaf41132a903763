"""Executable secret backend."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from buildsecrets.secrets.base import SecretBackend, run_command
from buildsecrets.secrets.models import BackendKind, Secret, SecretContent
from buildsecrets.secrets.registry import register_backend


@dataclass(frozen=True)
class ExecutableBackendConfig:
    """Config for the executable backend: {"file": "/path/to/executable"}"""

    file: Path

    @classmethod
    def from_dict(cls, data: dict) -> "ExecutableBackendConfig":
        if not isinstance(data, dict):
            raise TypeError("executable config must be an object")
        if not isinstance(data.get("file"), str):
            raise TypeError("file must be a string path")
        return cls(file=Path(data["file"]))


@register_backend(BackendKind.EXECUTABLE, ExecutableBackendConfig)
class ExecutableSecretBackend(SecretBackend):
    """
    Runs an arbitrary executable that provisions the secret.

    The secret name is passed as the first argument (argv[1]) and the
    executable writes the full secret content to stdout.
    """

    def provision(self, secret: Secret) -> Optional[SecretContent]:
        args = [str(self.config.file), secret.name]
        return run_command(secret, args, backend=self.name)
