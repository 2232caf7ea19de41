"""Pytest configuration and fixtures for lambda_service tests."""

from __future__ import annotations

import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Generator

import pytest
from prometheus_client import CollectorRegistry

from lambda_service.adapters.inbound import lambda_handler
from lambda_service.adapters.outbound import InMemoryDatabase, InMemoryStorage
from lambda_service.application import RequestProcessor
from lambda_service.infrastructure.config import Config, get_config
from lambda_service.infrastructure.container import reset_container
from lambda_service.infrastructure.metrics import MetricsRegistry


FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def reset_globals() -> Generator[None, None, None]:
    """Reset process-wide state before and after each test."""
    reset_container()
    get_config.cache_clear()
    lambda_handler._handler = None
    yield
    reset_container()
    get_config.cache_clear()
    lambda_handler._handler = None


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """A clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def database() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def processor(
    database: InMemoryDatabase,
    storage: InMemoryStorage,
    metrics_registry: MetricsRegistry,
) -> RequestProcessor:
    """Processor over in-memory doubles and a private metrics registry."""
    return RequestProcessor(database, storage, metrics=metrics_registry)


@pytest.fixture
def file_config(temp_dir: Path) -> Config:
    """Configuration selecting the file backends under a temp dir."""
    return Config(
        database={"backend": "file", "data_dir": temp_dir / "db"},
        storage={"backend": "file", "data_dir": temp_dir / "storage"},
    )


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
