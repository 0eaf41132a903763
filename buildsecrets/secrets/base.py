"""Abstract base class for secret backends."""

import subprocess
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from buildsecrets.monitoring import Metrics, track_time
from buildsecrets.secrets.models import Secret, SecretContent
from buildsecrets.utils.logging import get_logger

logger = get_logger(__name__)


class SecretBackend(ABC):
    """
    Abstract base class that all secret backends must implement.

    Subclasses declare the dataclass their configuration parses into
    (``config_cls``) and the name of their entry under "backend_config"
    (``name``). Both are filled in by the registry decorator.
    """

    name: str = ""
    config_cls: type = None

    def __init__(self, config):
        self.config = config

    @abstractmethod
    def provision(self, secret: Secret) -> Optional[SecretContent]:
        """
        Decrypt a secret.

        Args:
            secret: The secret to decrypt

        Returns:
            The decrypted content, or None if this backend couldn't
            produce it. Backend failures are never raised.
        """
        pass


def run_command(
    secret: Secret,
    args: Sequence[str],
    env: Optional[dict] = None,
    backend: str = "command",
) -> Optional[SecretContent]:
    """
    Run a decryption command and capture its stdout as the secret content.

    Args:
        secret: Secret being decrypted (for logging)
        args: argv of the child process
        env: Child environment, or None to inherit
        backend: Backend name used for logs and metrics

    Returns:
        stdout on a zero exit status, otherwise None
    """
    with track_time() as t:
        try:
            output = subprocess.run(args, capture_output=True, env=env)
        # ValueError: NUL in argv or a malformed environment name
        except (OSError, ValueError) as e:
            logger.debug(f"failed to instantiate executable: {e}")
            output = None

    if output is None:
        Metrics.backend_attempt(backend, success=False, latency=t["duration"])
        return None

    if output.returncode != 0:
        logger.debug(
            f"failed to decrypt secret with {backend} (exit status {output.returncode}):"
        )
        logger.debug(f"    stdout: {output.stdout.decode(errors='replace')}")
        logger.debug(f"    stderr: {output.stderr.decode(errors='replace')}")
        Metrics.backend_attempt(backend, success=False, latency=t["duration"])
        return None

    logger.debug(f"successfully decrypted secret {secret.name}")
    Metrics.backend_attempt(backend, success=True, latency=t["duration"])
    return SecretContent(output.stdout)
