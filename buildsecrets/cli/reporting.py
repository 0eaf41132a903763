"""Output written back to the Nix daemon over stdout."""

from pathlib import Path
from typing import TextIO

SANDBOX_MOUNTPOINT = "/secrets"

# Nix prints "error: unknown pre-build hook command '<line>'" for any line it
# doesn't understand. We erase everything after "error: " and print our own.
HOOK_ERROR_PREFIX = "unknown pre-build hook command '"
ANSI_RESET = "\x1b[0m"


def export_mount_paths(stream: TextIO, secret_dir: Path) -> None:
    """Ask Nix to bind-mount the secret directory at /secrets in the sandbox."""
    stream.write("extra-sandbox-paths\n")
    stream.write(f"{SANDBOX_MOUNTPOINT}={secret_dir}\n")
    stream.flush()


def report_error(stream: TextIO, msg: str) -> None:
    """Replace Nix's generic hook error on the user's terminal with ``msg``."""
    stream.write("\b" * len(HOOK_ERROR_PREFIX))
    stream.write(ANSI_RESET)
    stream.write(msg)
    stream.write("\n")
    stream.flush()
