"""Exceptions raised while talking to the Nix store."""


class StoreError(Exception):
    """Base exception for store errors."""

    pass


class GenericStoreError(StoreError):
    """Store failure that doesn't fall into a more specific kind."""

    pass


class GetVersionError(StoreError):
    """Raised when the store can't report its Nix version."""

    def __init__(self, msg: str):
        super().__init__(f"failed to get nix version from store: {msg}")


class StorePathError(StoreError):
    """Raised when a path is not a valid store object."""

    def __init__(self, msg: str):
        super().__init__(f"store path not valid: {msg}")


class EnvKeyDoesNotExistError(StoreError):
    """Raised when a derivation environment has no value for a key."""

    def __init__(self, msg: str):
        super().__init__(f"while reading derivation: {msg}")
