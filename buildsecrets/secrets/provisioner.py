"""Provisioner - resolves a derivation's declared secrets into files."""

from pathlib import Path
from typing import Optional

# Import backends to trigger registration
from buildsecrets.secrets import executable_backend, sops_backend  # noqa: F401
from buildsecrets.monitoring import Metrics
from buildsecrets.secrets import registry
from buildsecrets.secrets.exceptions import (
    CreateSecretDirError,
    CreateSecretFileError,
    NoSuccessfulBackendsError,
    WriteSecretError,
)
from buildsecrets.secrets.models import (
    BackendKind,
    ProvisionedSecret,
    Secret,
    SecretContent,
    parse_required_secrets,
)
from buildsecrets.store import NixStore, Store
from buildsecrets.utils.decorators import log_time
from buildsecrets.utils.logging import get_logger

logger = get_logger(__name__)

REQUIRED_SECRETS_KEY = "requiredSecrets"
DERIVATION_SUFFIX = ".drv"


class Provisioner:
    """
    Provisions the secrets declared by one derivation.

    Each secret is tried against its hinted backend first, then every other
    backend in registry order. The first backend to succeed wins and its
    output is written to ``<secret_dir>/<derivation>/<secret name>``.

    Usage:
        provisioner = Provisioner(config)
        provisioned = provisioner.provision_all()
        if provisioned:
            print(provisioner.derivation_secret_directory())
    """

    def __init__(self, config, store: Optional[Store] = None):
        """
        Args:
            config: Global Config; ``config.derivation`` must be set
            store: Store used to validate and read the derivation

        Raises:
            StoreError: If the derivation path is not a valid store object
        """
        self.config = config
        self.store = store if store is not None else NixStore()
        self.derivation = self.store.parse_store_path(config.derivation)
        logger.debug(f"derivation name: {self.store.derivation_name(self.derivation)}")

    def derivation_secret_directory(self) -> Path:
        """Directory holding this derivation's secrets."""
        relative = self.store.store_relative_path(self.derivation)
        if relative.endswith(DERIVATION_SUFFIX):
            relative = relative[: -len(DERIVATION_SUFFIX)]
        return Path(self.config.secret_dir) / relative

    def try_provision(
        self, backend_kind: BackendKind, secret: Secret
    ) -> Optional[SecretContent]:
        """
        Attempt to decrypt a secret with one backend.

        Returns:
            Content, or None if the backend is unconfigured or failed
        """
        if not registry.validate_config(backend_kind, self.config):
            return None

        return registry.create(backend_kind, self.config).provision(secret)

    def provision(self, secret: Secret) -> ProvisionedSecret:
        """
        Provision a secret, enumerating backends until one succeeds.

        Raises:
            NoSuccessfulBackendsError: If no backend can decrypt the secret
            SecretFileError: If the content can't be written
        """
        logger.debug(f"provisioning secret: {secret}")

        hint = secret.backend_hint
        if hint is not None:
            logger.debug(f"found backend hint, trying backend {hint}")
            content = self.try_provision(hint, secret)
            if content is not None:
                return self.commit(secret, content)

        for backend_kind in registry.BACKEND_KINDS:
            if backend_kind == hint:
                continue

            content = self.try_provision(backend_kind, secret)
            if content is not None:
                return self.commit(secret, content)

        raise NoSuccessfulBackendsError(secret)

    def required_secrets(self) -> Optional[str]:
        """Raw "requiredSecrets" value from the derivation environment."""
        return self.store.derivation_env_val(self.derivation, REQUIRED_SECRETS_KEY)

    @log_time
    def provision_all(self) -> list[ProvisionedSecret]:
        """
        Provision every secret declared in "requiredSecrets".

        All declarations are parsed before anything is decrypted, so a
        malformed declaration leaves the filesystem untouched.

        Returns:
            Provisioned secrets in declaration order (empty if none declared)

        Raises:
            SecretParseError: If any declaration is malformed
            ProvisionError: On the first secret that can't be provisioned
        """
        required_secrets = self.required_secrets()

        if required_secrets is None:
            logger.debug(f'derivation has no "{REQUIRED_SECRETS_KEY}" field')
            return []

        logger.debug(f"{REQUIRED_SECRETS_KEY}: {required_secrets}")

        secrets = parse_required_secrets(required_secrets)
        return [self.provision(secret) for secret in secrets]

    def allocate_path(self, secret: Secret) -> Path:
        """
        Ensure the secret directory exists and return the secret's file path.

        Names are joined as-is. Parsed declarations are limited to a single
        path component, so only a hand-built Secret can point elsewhere.

        Raises:
            CreateSecretDirError: If the directory can't be created
        """
        secret_dir = self.derivation_secret_directory()

        if not secret_dir.exists():
            try:
                secret_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise CreateSecretDirError(secret_dir, e) from e

        return secret_dir / secret.name

    def commit(self, secret: Secret, content: SecretContent) -> ProvisionedSecret:
        """
        Write secret content to its file, replacing anything already there.

        Raises:
            CreateSecretFileError: If the file can't be opened for writing
            WriteSecretError: If writing the content fails
        """
        path = self.allocate_path(secret)

        try:
            f = open(path, "wb")
        except OSError as e:
            raise CreateSecretFileError(path, e) from e

        try:
            with f:
                f.write(content.data)
        except OSError as e:
            raise WriteSecretError(path, e) from e

        # TODO: verify content against secret.hash once the hash format is settled
        Metrics.secret_provisioned()
        logger.info(f"provisioned secret {secret.name} at {path}")
        return ProvisionedSecret(secret=secret, content=content, path=path)
