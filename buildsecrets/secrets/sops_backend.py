"""sops secret backend."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from buildsecrets.secrets.base import SecretBackend, run_command
from buildsecrets.secrets.models import BackendKind, Secret, SecretContent
from buildsecrets.secrets.registry import register_backend

SOPS_COMMAND = "sops"


@dataclass(frozen=True)
class SopsBackendConfig:
    """
    Config for the sops backend.

    Format:
        {
            "sops_file": "/etc/secrets/build.yaml",
            "environment": {"SOPS_AGE_KEY_FILE": "/etc/age/key.txt"}
        }
    """

    sops_file: Path
    environment: Optional[dict] = None

    @classmethod
    def from_dict(cls, data: dict) -> "SopsBackendConfig":
        if not isinstance(data, dict):
            raise TypeError("sops config must be an object")
        if not isinstance(data.get("sops_file"), str):
            raise TypeError("sops_file must be a string path")

        environment = data.get("environment")
        if environment is not None:
            if not isinstance(environment, dict) or not all(
                isinstance(k, str) and isinstance(v, str) for k, v in environment.items()
            ):
                raise TypeError("environment must map strings to strings")
            for key, value in environment.items():
                if not key or "=" in key or "\0" in key or "\0" in value:
                    raise ValueError(f"invalid environment variable {key!r}")

        return cls(sops_file=Path(data["sops_file"]), environment=environment)


@register_backend(BackendKind.SOPS, SopsBackendConfig)
class SopsSecretBackend(SecretBackend):
    """
    Asks sops (https://github.com/getsops/sops) to decrypt the secret.

    The secret name is used as the extraction key into the configured sops
    file. The child runs with an empty environment apart from the parent's
    PATH and the variables listed under "environment".
    """

    def build_env(self) -> dict:
        env = {}
        if "PATH" in os.environ:
            env["PATH"] = os.environ["PATH"]
        if self.config.environment:
            env.update(self.config.environment)
        return env

    def provision(self, secret: Secret) -> Optional[SecretContent]:
        args = [
            SOPS_COMMAND,
            "--extract",
            f'["{secret.name}"]',
            "-d",
            str(self.config.sops_file),
        ]
        return run_command(secret, args, env=self.build_env(), backend=self.name)
