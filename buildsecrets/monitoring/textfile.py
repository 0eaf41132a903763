"""Prometheus textfile export."""

from pathlib import Path

from prometheus_client import write_to_textfile

from buildsecrets.monitoring.definitions import REGISTRY
from buildsecrets.utils.logging import get_logger

logger = get_logger(__name__)


def write_metrics(path: Path) -> bool:
    """
    Write all provisioning metrics to a node_exporter textfile.

    Failures are logged, never raised, so metrics can't fail a build.

    Returns:
        True if the file was written
    """
    try:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        write_to_textfile(str(path), REGISTRY)
    except OSError as e:
        logger.warning(f"failed to write metrics to {path}: {e}")
        return False

    logger.debug(f"wrote metrics to {path}")
    return True
