"""Secrets provisioning module."""

# Public API
from buildsecrets.secrets.exceptions import (
    CreateSecretDirError,
    CreateSecretFileError,
    NoBackendConfigError,
    NoConfigForBackendsError,
    NoSuccessfulBackendsError,
    ProvisionError,
    SecretBackendError,
    SecretFileError,
    SecretParseError,
    WriteSecretError,
)
from buildsecrets.secrets.models import (
    BackendKind,
    ProvisionedSecret,
    Secret,
    SecretContent,
    parse_required_secrets,
)
from buildsecrets.secrets.provisioner import Provisioner
from buildsecrets.secrets.registry import BACKEND_KINDS, register_backend, get_backend

__all__ = [
    "Provisioner",
    "Secret",
    "SecretContent",
    "ProvisionedSecret",
    "BackendKind",
    "BACKEND_KINDS",
    "parse_required_secrets",
    "register_backend",
    "get_backend",
    "SecretBackendError",
    "NoConfigForBackendsError",
    "NoBackendConfigError",
    "ProvisionError",
    "SecretParseError",
    "NoSuccessfulBackendsError",
    "SecretFileError",
    "CreateSecretDirError",
    "CreateSecretFileError",
    "WriteSecretError",
]
