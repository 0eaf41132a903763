"""Nix store access through the Nix command line tools."""

import json
import shutil
import subprocess
import threading
from typing import Optional

from buildsecrets.store.base import Store, StorePath
from buildsecrets.store.exceptions import (
    GenericStoreError,
    GetVersionError,
    StorePathError,
)
from buildsecrets.utils.logging import get_logger

logger = get_logger(__name__)

NIX_FEATURES = ["--extra-experimental-features", "nix-command"]

_init_lock = threading.Lock()
_tools: Optional[dict] = None


def init_store() -> dict:
    """
    Locate the Nix tools (idempotent, thread-safe).

    Returns:
        Mapping of tool name to absolute path

    Raises:
        GenericStoreError: If nix-store or nix can't be found on PATH
    """
    global _tools
    with _init_lock:
        if _tools is None:
            tools = {}
            for tool in ("nix-store", "nix"):
                found = shutil.which(tool)
                if found is None:
                    raise GenericStoreError(f"cannot find `{tool}` on PATH")
                tools[tool] = found
            _tools = tools
            logger.debug(f"initialized nix store tools: {_tools}")
        return _tools


def _strip_error_prefix(stderr: bytes) -> str:
    msg = stderr.decode(errors="replace").strip()
    if msg.startswith("error:"):
        msg = msg[len("error:"):].strip()
    return msg


class NixStore(Store):
    """
    Handle on the local Nix store.

    Usage:
        store = NixStore()
        drv = store.parse_store_path("/nix/store/...-hello-2.12.drv")
        store.derivation_env_val(drv, "requiredSecrets")
    """

    def __init__(self):
        self._tools = init_store()
        self._derivations: dict = {}

    def _run(self, args: list, error_cls: type = GenericStoreError) -> bytes:
        try:
            output = subprocess.run(args, capture_output=True)
        except OSError as e:
            raise GenericStoreError(f"failed to run {args[0]}: {e}") from e

        if output.returncode != 0:
            raise error_cls(_strip_error_prefix(output.stderr))
        return output.stdout

    def version(self) -> str:
        out = self._run([self._tools["nix-store"], "--version"], GetVersionError)
        version = out.decode(errors="replace").strip().split(" ")[-1]
        if not version:
            raise GetVersionError("store returned no nix version")
        return version

    def parse_store_path(self, path: str) -> StorePath:
        # Rejects paths outside the store, malformed hashes and invalid objects
        self._run(
            [self._tools["nix-store"], "--check-validity", str(path)], StorePathError
        )
        return StorePath(str(path))

    def _show_derivation(self, drv_path: StorePath) -> dict:
        if drv_path.path not in self._derivations:
            out = self._run(
                [self._tools["nix"], *NIX_FEATURES, "derivation", "show", drv_path.path]
            )
            try:
                shown = json.loads(out)
            except json.JSONDecodeError as e:
                raise GenericStoreError(f"invalid derivation JSON: {e}") from e

            # Newer Nix releases nest the derivations one level down
            if isinstance(shown.get("derivations"), dict):
                shown = shown["derivations"]
            if len(shown) != 1:
                raise GenericStoreError(f"expected one derivation, got {len(shown)}")

            self._derivations[drv_path.path] = next(iter(shown.values()))
        return self._derivations[drv_path.path]

    def derivation_env(self, drv_path: StorePath) -> dict:
        return self._show_derivation(drv_path).get("env", {})

    def derivation_name(self, drv_path: StorePath) -> str:
        return self._show_derivation(drv_path)["name"]
