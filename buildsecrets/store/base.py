"""Abstract interface to the build store."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional

from buildsecrets.store.exceptions import EnvKeyDoesNotExistError


@dataclass(frozen=True)
class StorePath:
    """A store path that has been validated by a Store."""

    path: str

    def __str__(self) -> str:
        return self.path

    @property
    def name(self) -> str:
        return PurePosixPath(self.path).name


class Store(ABC):
    """
    Handle on a build store.

    Subclasses must implement:
        - version()
        - parse_store_path()
        - derivation_env()
        - derivation_name()
    """

    @abstractmethod
    def version(self) -> str:
        """Return the store's Nix version."""
        pass

    @abstractmethod
    def parse_store_path(self, path: str) -> StorePath:
        """
        Parse and validate a store path.

        Raises:
            StorePathError: If the path is not a valid store object
        """
        pass

    @abstractmethod
    def derivation_env(self, drv_path: StorePath) -> dict:
        """Return the full environment of a derivation."""
        pass

    @abstractmethod
    def derivation_name(self, drv_path: StorePath) -> str:
        """Return the name of a derivation."""
        pass

    def derivation_env_val(self, drv_path: StorePath, key: str) -> Optional[str]:
        """
        Fetch a value from the derivation environment.

        Returns:
            The value, or None if the key doesn't exist
        """
        try:
            return self.get_derivation_env_val(drv_path, key)
        except EnvKeyDoesNotExistError:
            return None

    def get_derivation_env_val(self, drv_path: StorePath, key: str) -> str:
        """
        Like derivation_env_val, but raise for a missing key.

        Raises:
            EnvKeyDoesNotExistError: If the key doesn't exist
        """
        env = self.derivation_env(drv_path)
        if key not in env:
            raise EnvKeyDoesNotExistError(
                f"derivation environment value for key '{key}' doesn't exist"
            )
        return env[key]

    def store_relative_path(self, store_path: StorePath) -> str:
        """Return the path of the object relative to the store directory."""
        return store_path.name
