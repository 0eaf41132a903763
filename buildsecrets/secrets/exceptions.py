"""Custom exceptions for secret provisioning."""

from pathlib import Path


class SecretBackendError(Exception):
    """Raised when there's an issue with a secret backend itself."""

    pass


class NoConfigForBackendsError(SecretBackendError):
    """Raised when the global config has no "backend_config" section."""

    def __init__(self):
        super().__init__('no "backend_config" in config')


class NoBackendConfigError(SecretBackendError):
    """Raised when a backend's config entry is missing or malformed."""

    def __init__(self, backend: str):
        self.backend = backend
        super().__init__(f"no backend config for {backend}")


class ProvisionError(Exception):
    """Base exception for errors that abort a provisioning run."""

    pass


class SecretParseError(ProvisionError):
    """Raised when a secret declaration can't be parsed."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"failed to parse secret: {reason}")


class NoSuccessfulBackendsError(ProvisionError):
    """Raised when every applicable backend failed to decrypt a secret."""

    def __init__(self, secret):
        self.secret = secret
        super().__init__(f'no backends could decrypt the secret "{secret.name}"')


class SecretFileError(ProvisionError):
    """Base for filesystem failures while materializing a secret."""

    action = "access"

    def __init__(self, path: Path, source: OSError):
        self.path = Path(path)
        self.source = source
        super().__init__(f'can\'t {self.action} "{self.path}": {source}')


class CreateSecretDirError(SecretFileError):
    """Raised when the derivation secret directory can't be created."""

    action = "create derivation secret directory"


class CreateSecretFileError(SecretFileError):
    """Raised when a secret file can't be created."""

    action = "create secret file"


class WriteSecretError(SecretFileError):
    """Raised when writing secret content to its file fails."""

    action = "write secret file"
