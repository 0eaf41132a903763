"""Secret declarations and provisioning results."""

import json
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from pathlib import Path
from typing import Optional

from buildsecrets.secrets.exceptions import SecretParseError

_decoder = json.JSONDecoder()


class BackendKind(str, Enum):
    """Known backend kinds. The value is the wire name used in declarations."""

    SOPS = "sops"
    EXECUTABLE = "executable"

    def __str__(self) -> str:
        return self.value

    @property
    def rank(self) -> int:
        return list(BackendKind).index(self)


@total_ordering
@dataclass(frozen=True)
class Secret:
    """
    A secret declared by a derivation.

    Attributes:
        name: Secret name, also used as the file name in the secret directory
        hash: Declared content hash (advisory, not verified)
        backend_hint: Backend to try before the others
    """

    name: str
    hash: str
    backend_hint: Optional[BackendKind] = None

    def _sort_key(self) -> tuple:
        hint_rank = -1 if self.backend_hint is None else self.backend_hint.rank
        return (self.name, self.hash, hint_rank)

    def __lt__(self, other: "Secret") -> bool:
        if not isinstance(other, Secret):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def to_dict(self) -> dict:
        """Convert to the declaration wire format."""
        return {
            "name": self.name,
            "hash": self.hash,
            "backendHint": None if self.backend_hint is None else self.backend_hint.value,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_dict(cls, data: dict) -> "Secret":
        """
        Create from a decoded declaration.

        Unknown keys are ignored. "backendHint" may be missing or null.
        The name must be a single path component.

        Raises:
            SecretParseError: If required fields are missing or mistyped,
                or the name could escape the secret directory
        """
        if not isinstance(data, dict):
            raise SecretParseError(f"expected an object, got {type(data).__name__}")

        for field_name in ("name", "hash"):
            if field_name not in data:
                raise SecretParseError(f"missing field `{field_name}`")
            if not isinstance(data[field_name], str):
                raise SecretParseError(f"field `{field_name}` must be a string")

        # The name becomes a file inside the derivation secret directory
        name = data["name"]
        if name in ("", ".", "..") or "/" in name or "\0" in name:
            raise SecretParseError(f"invalid secret name {name!r}")

        hint = data.get("backendHint")
        if hint is not None:
            try:
                hint = BackendKind(hint)
            except ValueError:
                variants = ", ".join(f"`{kind.value}`" for kind in BackendKind)
                raise SecretParseError(
                    f"unknown variant `{hint}`, expected one of {variants}"
                )

        return cls(name=data["name"], hash=data["hash"], backend_hint=hint)

    @classmethod
    def from_json(cls, json_str: str) -> "Secret":
        """Create from a single serialized declaration."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise SecretParseError(str(e)) from e
        return cls.from_dict(data)


def parse_required_secrets(serialized: Optional[str]) -> list[Secret]:
    """
    Parse a whitespace-separated sequence of JSON secret declarations.

    Every declaration is parsed before any is returned, so a malformed
    declaration anywhere in the sequence fails the whole batch.

    Args:
        serialized: Value of the derivation's "requiredSecrets", or None

    Returns:
        Secrets in declaration order

    Raises:
        SecretParseError: On the first malformed declaration
    """
    if serialized is None:
        return []

    secrets = []
    pos = 0
    end = len(serialized)
    while True:
        while pos < end and serialized[pos].isspace():
            pos += 1
        if pos >= end:
            break

        try:
            data, pos = _decoder.raw_decode(serialized, pos)
        except json.JSONDecodeError as e:
            raise SecretParseError(str(e)) from e

        if pos < end and not serialized[pos].isspace():
            raise SecretParseError(
                f"expected whitespace between declarations at char {pos}"
            )

        secrets.append(Secret.from_dict(data))

    return secrets


@dataclass(frozen=True, repr=False)
class SecretContent:
    """Decrypted secret bytes. The repr never includes the plaintext."""

    data: bytes

    def __bytes__(self) -> bytes:
        return self.data

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"SecretContent(<{len(self.data)} bytes>)"


@dataclass(frozen=True)
class ProvisionedSecret:
    """A secret whose content has been written to its final path."""

    secret: Secret
    content: SecretContent
    path: Path
