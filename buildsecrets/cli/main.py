"""CLI entry point, run by the Nix daemon as its pre-build-hook."""

import os
import sys
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv

from buildsecrets import __version__
from buildsecrets.cli.reporting import export_mount_paths, report_error
from buildsecrets.config import Config, ConfigError, ConfigLoader
from buildsecrets.monitoring import Metrics, write_metrics
from buildsecrets.secrets import Provisioner, ProvisionError, SecretBackendError
from buildsecrets.store import StoreError
from buildsecrets.utils.logging import DEFAULT_LOG_FILE, get_logger, setup_logging

logger = get_logger(__name__)

ENV_FILE_VAR = "BUILDTIME_SECRETS_ENV_FILE"
DEFAULT_ENV_FILE = "/etc/buildtime-secrets/env"

HANDLED_ERRORS = (ConfigError, StoreError, SecretBackendError, ProvisionError)


def load_env_file() -> None:
    """Load hook settings from the env file without overriding the environment."""
    env_file = Path(os.environ.get(ENV_FILE_VAR, DEFAULT_ENV_FILE))
    if env_file.is_file():
        load_dotenv(env_file, override=False)


def run(config: Config) -> Optional[Path]:
    """
    Provision all secrets for ``config.derivation``.

    Returns:
        The derivation secret directory if any secrets were declared
    """
    provisioner = Provisioner(config)
    provisioned = provisioner.provision_all()

    if not provisioned:
        return None

    # All secrets were successful
    return provisioner.derivation_secret_directory()


@click.command()
@click.version_option(version=__version__, prog_name="buildtime-secrets")
@click.argument("derivation")
@click.argument("extra", nargs=-1)
def cli(derivation: str, extra: tuple):
    """Provision the secrets required by DERIVATION before it is built."""
    load_env_file()
    setup_logging(
        level=os.environ.get("LOG_LEVEL", "INFO"),
        log_file=os.environ.get("LOG_FILE", DEFAULT_LOG_FILE),
    )

    if len(extra) > 1:
        logger.warning(
            f"expected to receive 1 or 2 program arguments but got {1 + len(extra)}"
        )

    config = None
    try:
        config = ConfigLoader.from_env().load()
        config.derivation = derivation
        logger.debug(f"finished config: {config}")

        secret_dir = run(config)
    except HANDLED_ERRORS as e:
        Metrics.provision_failure(type(e).__name__)
        msg = f"buildtime-secrets: failed to provision secrets: {e}"
        logger.error(msg)

        # stderr ends up in the daemon's journal
        click.echo(msg, err=True)

        # Exit "successfully" so Nix prints our message as the faulty hook line
        report_error(sys.stdout, msg)
        return
    finally:
        if config is not None and config.metrics_file is not None:
            write_metrics(config.metrics_file)

    if secret_dir is not None:
        export_mount_paths(sys.stdout, secret_dir)


def main():
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
