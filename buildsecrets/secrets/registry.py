"""Backend registry with decorator pattern."""

from buildsecrets.secrets.exceptions import (
    NoBackendConfigError,
    NoConfigForBackendsError,
    SecretBackendError,
)
from buildsecrets.secrets.models import BackendKind
from buildsecrets.utils.logging import get_logger

logger = get_logger(__name__)

BACKENDS = {}

# Fallback order used when a secret's hint doesn't resolve it
BACKEND_KINDS = (BackendKind.SOPS, BackendKind.EXECUTABLE)


def register_backend(kind: BackendKind, config_cls: type):
    """
    Decorator to register a backend class.

    Usage:
        @register_backend(BackendKind.SOPS, SopsBackendConfig)
        class SopsSecretBackend(SecretBackend):
            ...
    """

    def decorator(cls):
        cls.name = kind.value
        cls.config_cls = config_cls
        BACKENDS[kind] = cls
        return cls

    return decorator


def get_backend(kind: BackendKind):
    """
    Get backend class by kind.

    Raises:
        SecretBackendError: If backend not registered
    """
    if kind not in BACKENDS:
        available = ", ".join(str(k) for k in BACKENDS) or "none"
        raise SecretBackendError(f"Unknown backend: '{kind}'. Available: {available}")
    return BACKENDS[kind]


def get_backend_config(config, backend_name: str, config_cls: type):
    """
    Parse out a specific backend's configuration from the global config.

    Args:
        config: Global Config
        backend_name: Key under "backend_config"
        config_cls: Dataclass with a ``from_dict`` constructor

    Returns:
        Parsed backend config

    Raises:
        NoConfigForBackendsError: If there is no "backend_config" at all
        NoBackendConfigError: If the entry is missing or doesn't parse
    """
    if config.backend_config is None:
        logger.debug('cant find "backend_config"')
        raise NoConfigForBackendsError()

    if backend_name not in config.backend_config:
        logger.debug(f'cant find "backend_config.{backend_name}"')
        raise NoBackendConfigError(backend_name)

    try:
        return config_cls.from_dict(config.backend_config[backend_name])
    except (TypeError, ValueError) as e:
        logger.debug(f"failed to parse {backend_name} config: {e}")
        raise NoBackendConfigError(backend_name) from e


def validate_config(kind: BackendKind, config) -> bool:
    """Check whether ``config`` holds a usable config for ``kind``."""
    logger.debug(f"validating config for {kind}")
    backend_cls = get_backend(kind)
    try:
        get_backend_config(config, backend_cls.name, backend_cls.config_cls)
    except SecretBackendError:
        return False
    return True


def create(kind: BackendKind, config):
    """
    Instantiate a backend of ``kind``.

    Callers should check ``validate_config`` first.

    Raises:
        SecretBackendError: If the kind is unknown or its config can't be parsed
    """
    logger.debug(f"creating backend {kind}")
    backend_cls = get_backend(kind)
    backend_config = get_backend_config(config, backend_cls.name, backend_cls.config_cls)
    return backend_cls(backend_config)
