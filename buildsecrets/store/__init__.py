"""Store module - derivation validation and environment lookup."""

from buildsecrets.store.base import Store, StorePath
from buildsecrets.store.exceptions import (
    EnvKeyDoesNotExistError,
    GenericStoreError,
    GetVersionError,
    StoreError,
    StorePathError,
)
from buildsecrets.store.nix import NixStore, init_store

__all__ = [
    "Store",
    "StorePath",
    "NixStore",
    "init_store",
    "StoreError",
    "GenericStoreError",
    "GetVersionError",
    "StorePathError",
    "EnvKeyDoesNotExistError",
]
