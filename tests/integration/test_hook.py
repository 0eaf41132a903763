"""End-to-end runs of the hook as the Nix daemon would invoke it."""

import json
import os
import stat
import subprocess
import sys
from pathlib import Path


def run_hook(drv, tmp_path):
    env = {
        **os.environ,
        "CONFIG_FILE": str(tmp_path / "config.json"),
        "LOG_FILE": str(tmp_path / "hook.log"),
        "LOG_LEVEL": "DEBUG",
        "BUILDTIME_SECRETS_ENV_FILE": str(tmp_path / "missing.env"),
    }
    return subprocess.run(
        [sys.executable, "-m", "buildsecrets.cli.main", drv],
        capture_output=True,
        text=True,
        env=env,
    )


def write_executable(path: Path, body: str) -> Path:
    path.write_text(f"#!/bin/sh\n{body}\n")
    path.chmod(path.stat().st_mode | stat.S_IEXEC)
    return path


class TestHook:
    """Tests for the full hook process."""

    def test_provisions_and_exports(self, instantiate, tmp_path):
        # Arrange
        script = write_executable(tmp_path / "get-secret", "printf 's3cr3t'")
        (tmp_path / "config.json").write_text(
            json.dumps(
                {
                    "secretDir": str(tmp_path / "secrets"),
                    "backendConfig": {"executable": {"file": str(script)}},
                }
            )
        )
        drv = instantiate(
            {"requiredSecrets": '{"name":"db-pass","hash":"abc","backendHint":"executable"}'}
        )
        secret_dir = tmp_path / "secrets" / Path(drv).name[: -len(".drv")]

        # Act
        result = run_hook(drv, tmp_path)

        # Assert
        assert result.returncode == 0
        assert result.stdout == f"extra-sandbox-paths\n/secrets={secret_dir}\n"
        assert (secret_dir / "db-pass").read_bytes() == b"s3cr3t"

    def test_failure_reported(self, instantiate, tmp_path):
        (tmp_path / "config.json").write_text(
            json.dumps({"secretDir": str(tmp_path / "secrets")})
        )
        drv = instantiate({"requiredSecrets": '{"name":"db-pass","hash":"abc"}'})

        result = run_hook(drv, tmp_path)

        assert result.returncode == 0
        assert 'no backends could decrypt the secret "db-pass"' in result.stderr
        assert 'no backends could decrypt the secret "db-pass"' in result.stdout
