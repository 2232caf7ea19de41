"""Unit tests for configuration module."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from lambda_service.infrastructure.config import (
    Config,
    DatabaseConfig,
    ProcessorConfig,
    ServerConfig,
    StorageConfig,
    get_config,
)


@pytest.mark.unit
class TestConfig:
    """Tests for Config class."""

    def test_default_config(self) -> None:
        """Test default configuration values."""
        config = Config()

        assert config.database.backend == "memory"
        assert config.storage.backend == "memory"
        assert config.storage.allow_empty_objects is True
        assert config.processor.operation_field == "operation"
        assert config.server.port == 9000
        assert config.observability.log_format == "json"

    def test_custom_backends(self, temp_dir: Path) -> None:
        """Test selecting file backends."""
        config = Config(
            database=DatabaseConfig(backend="file", data_dir=temp_dir / "db"),
            storage=StorageConfig(backend="file", data_dir=temp_dir / "blobs"),
        )

        assert config.database.backend == "file"
        assert config.storage.data_dir == temp_dir / "blobs"

    def test_unknown_backend_rejected(self) -> None:
        """Only memory and file backends are accepted."""
        with pytest.raises(ValidationError):
            DatabaseConfig(backend="dynamodb")  # type: ignore[arg-type]

    def test_empty_operation_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ProcessorConfig(operation_field="")

    def test_invalid_port(self) -> None:
        with pytest.raises(ValidationError):
            ServerConfig(port=70000)

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Nested settings can be set through prefixed environment variables."""
        monkeypatch.setenv("LAMBDA_SERVICE_PROCESSOR__OPERATION_FIELD", "action")
        monkeypatch.setenv("LAMBDA_SERVICE_STORAGE__ALLOW_EMPTY_OBJECTS", "false")

        config = Config()

        assert config.processor.operation_field == "action"
        assert config.storage.allow_empty_objects is False


@pytest.mark.unit
class TestConfigSingleton:
    """Tests for get_config singleton."""

    def test_get_config_returns_same_instance(self) -> None:
        config1 = get_config()
        config2 = get_config()
        assert config1 is config2
