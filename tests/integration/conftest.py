"""Pytest configuration for integration tests."""

import shutil
import subprocess

import pytest


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires a Nix installation)",
    )


def pytest_collection_modifyitems(config, items):
    """Add integration marker to all tests in this directory."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


def nix_escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("${", "\\${")


@pytest.fixture
def instantiate():
    """Instantiate a throwaway derivation and return its .drv path."""
    if shutil.which("nix-instantiate") is None:
        pytest.skip("nix-instantiate not available")

    def _instantiate(env: dict) -> str:
        attrs = " ".join(f'{key} = "{nix_escape(value)}";' for key, value in env.items())
        expr = (
            'derivation { name = "buildtime-secrets-test"; '
            'system = builtins.currentSystem; builder = "/bin/sh"; '
            f"{attrs} }}"
        )
        output = subprocess.run(
            ["nix-instantiate", "--expr", expr],
            capture_output=True,
            text=True,
        )
        if output.returncode != 0:
            pytest.skip(f"cannot instantiate derivation: {output.stderr.strip()}")
        return output.stdout.strip().splitlines()[-1]

    return _instantiate
