"""Tests for the backend registry."""

import pytest

from buildsecrets.secrets import registry
from buildsecrets.secrets.exceptions import (
    NoBackendConfigError,
    NoConfigForBackendsError,
    SecretBackendError,
)
from buildsecrets.secrets.executable_backend import (
    ExecutableBackendConfig,
    ExecutableSecretBackend,
)
from buildsecrets.secrets.models import BackendKind
from buildsecrets.secrets.sops_backend import SopsBackendConfig, SopsSecretBackend


class TestRegistration:
    """Tests for backend registration."""

    def test_backends_registered(self):
        """Both backends should be registered under their kinds."""
        assert registry.get_backend(BackendKind.SOPS) is SopsSecretBackend
        assert registry.get_backend(BackendKind.EXECUTABLE) is ExecutableSecretBackend

    def test_fallback_order(self):
        """sops is tried before executable."""
        assert registry.BACKEND_KINDS == (BackendKind.SOPS, BackendKind.EXECUTABLE)

    def test_unknown_backend_raises_error(self, monkeypatch):
        monkeypatch.delitem(registry.BACKENDS, BackendKind.SOPS)

        with pytest.raises(SecretBackendError) as exc_info:
            registry.get_backend(BackendKind.SOPS)

        assert "Unknown backend" in str(exc_info.value)

    def test_decorator_sets_name_and_config(self):
        assert SopsSecretBackend.name == "sops"
        assert SopsSecretBackend.config_cls is SopsBackendConfig
        assert ExecutableSecretBackend.name == "executable"


class TestGetBackendConfig:
    """Tests for extracting a backend's config."""

    def test_no_backend_config_section(self, make_config):
        with pytest.raises(NoConfigForBackendsError):
            registry.get_backend_config(
                make_config(None), "executable", ExecutableBackendConfig
            )

    def test_missing_entry(self, make_config):
        config = make_config({"sops": {"sops_file": "/s.yaml"}})

        with pytest.raises(NoBackendConfigError) as exc_info:
            registry.get_backend_config(config, "executable", ExecutableBackendConfig)

        assert exc_info.value.backend == "executable"

    def test_malformed_entry(self, make_config):
        config = make_config({"executable": {"path": "/bin/true"}})

        with pytest.raises(NoBackendConfigError):
            registry.get_backend_config(config, "executable", ExecutableBackendConfig)

    def test_parses_entry(self, make_config):
        config = make_config({"executable": {"file": "/bin/true"}})

        result = registry.get_backend_config(
            config, "executable", ExecutableBackendConfig
        )

        assert str(result.file) == "/bin/true"


class TestValidateAndCreate:
    """Tests for validate_config and create."""

    @pytest.mark.parametrize(
        "backend_config",
        [
            None,
            {},
            {"executable": None},
            {"executable": "not an object"},
            {"executable": {"file": 42}},
            {"sops": {"sops_file": "/s.yaml"}},
        ],
    )
    def test_executable_not_configured(self, make_config, backend_config):
        """Absence and parse failure both mean "not configured"."""
        config = make_config(backend_config)

        assert registry.validate_config(BackendKind.EXECUTABLE, config) is False

    def test_sops_environment_must_be_strings(self, make_config):
        config = make_config(
            {"sops": {"sops_file": "/s.yaml", "environment": {"A": 1}}}
        )

        assert registry.validate_config(BackendKind.SOPS, config) is False

    def test_sops_configured(self, make_config):
        config = make_config(
            {"sops": {"sops_file": "/s.yaml", "environment": {"A": "1"}}}
        )

        assert registry.validate_config(BackendKind.SOPS, config) is True

    def test_create_builds_instance_with_parsed_config(self, make_config):
        config = make_config({"sops": {"sops_file": "/s.yaml"}})

        backend = registry.create(BackendKind.SOPS, config)

        assert isinstance(backend, SopsSecretBackend)
        assert str(backend.config.sops_file) == "/s.yaml"
        assert backend.config.environment is None

    def test_create_without_config_raises(self, make_config):
        """create doesn't validate for the caller - it raises."""
        with pytest.raises(SecretBackendError):
            registry.create(BackendKind.EXECUTABLE, make_config(None))
