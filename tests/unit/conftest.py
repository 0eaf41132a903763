"""Shared fixtures for unit tests."""

import logging
import stat

import pytest

from buildsecrets.config import Config
from buildsecrets.secrets import registry
from buildsecrets.secrets.base import SecretBackend
from buildsecrets.secrets.models import SecretContent
from buildsecrets.store import Store, StorePath, StorePathError

DRV_PATH = "/nix/store/2qwfcpv54pb5l7nbyzg16rbd0xxc253d-hello-2.12.drv"


class FakeStore(Store):
    """In-memory store holding derivation environments keyed by path."""

    def __init__(self, derivations=None):
        self.derivations = derivations or {}

    def version(self):
        return "2.18.1"

    def parse_store_path(self, path):
        if path not in self.derivations:
            raise StorePathError(f"path '{path}' is not valid")
        return StorePath(path)

    def derivation_env(self, drv_path):
        return self.derivations[drv_path.path]

    def derivation_name(self, drv_path):
        return drv_path.name.split("-", 1)[1][: -len(".drv")]


class FakeBackendConfig:
    """Accepts any object config entry."""

    def __init__(self, data):
        self.data = data

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise TypeError("fake config must be an object")
        return cls(data)


class FakeBackends:
    """Replaces registered backends with call-counting fakes."""

    def __init__(self, monkeypatch):
        self.monkeypatch = monkeypatch
        self.calls = []

    def install(self, kind, output):
        """
        Register a fake for ``kind``.

        ``output`` is the bytes to return, None for failure, or a callable
        taking the secret and returning either.
        """
        calls = self.calls

        class FakeBackend(SecretBackend):
            def provision(self, secret):
                calls.append((kind, secret.name))
                result = output(secret) if callable(output) else output
                return None if result is None else SecretContent(result)

        FakeBackend.name = kind.value
        FakeBackend.config_cls = FakeBackendConfig
        self.monkeypatch.setitem(registry.BACKENDS, kind, FakeBackend)
        return FakeBackend

    def kinds_called(self):
        return [kind for kind, _ in self.calls]


@pytest.fixture
def drv_path():
    return DRV_PATH


@pytest.fixture
def fake_backends(monkeypatch):
    return FakeBackends(monkeypatch)


@pytest.fixture
def make_store():
    def _make(required_secrets=None, drv_path=DRV_PATH):
        env = {"name": "hello-2.12"}
        if required_secrets is not None:
            env["requiredSecrets"] = required_secrets
        return FakeStore({drv_path: env})

    return _make


@pytest.fixture
def make_config(tmp_path):
    def _make(backend_config=None, drv_path=DRV_PATH):
        return Config(
            derivation=drv_path,
            secret_dir=tmp_path / "secrets",
            backend_config=backend_config,
        )

    return _make


@pytest.fixture
def make_script(tmp_path):
    """Write an executable /bin/sh script and return its path."""

    def _make(name, body):
        script = tmp_path / name
        script.write_text(f"#!/bin/sh\n{body}\n")
        script.chmod(script.stat().st_mode | stat.S_IEXEC)
        return script

    return _make


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo setup_logging() calls made by a test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers, root.level = handlers, level
