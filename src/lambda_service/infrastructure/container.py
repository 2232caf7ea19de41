"""Dependency injection container and composition root.

The container is the only place that knows which concrete adapters back
the ports. Everything else receives its collaborators through
constructors.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from lambda_service.application import RequestProcessor
from lambda_service.adapters.outbound import (
    FileDatabase,
    FileStorage,
    InMemoryDatabase,
    InMemoryStorage,
)
from lambda_service.domain.errors import ConfigurationError
from lambda_service.infrastructure.config import Config, get_config
from lambda_service.infrastructure.logging import get_logger
from lambda_service.infrastructure.metrics import MetricsRegistry, get_metrics
from lambda_service.ports.outbound import DatabasePort, StoragePort

T = TypeVar("T")


class Container:
    """
    Simple dependency injection container.

    Supports singleton and factory registrations with lazy initialization.
    """

    def __init__(self) -> None:
        self._factories: dict[type, Callable[[Container], Any]] = {}
        self._instances: dict[type, Any] = {}

    def register_singleton(self, interface: type[T], instance: T) -> None:
        """Register an already-built instance for an interface."""
        self._instances[interface] = instance

    def register_factory(
        self,
        interface: type[T],
        factory: Callable[[Container], T],
    ) -> None:
        """
        Register a factory for lazy instantiation.

        The factory runs at most once; its result is cached.

        Args:
            interface: The interface/type to register
            factory: Callable that takes the container and returns an instance
        """
        self._factories[interface] = factory
        self._instances.pop(interface, None)

    def resolve(self, interface: type[T]) -> T:
        """
        Resolve a dependency.

        Raises:
            KeyError: If no registration exists for the interface
        """
        if interface in self._instances:
            return self._instances[interface]

        if interface in self._factories:
            instance = self._factories[interface](self)
            self._instances[interface] = instance
            return instance

        raise KeyError(f"No registration found for {interface}")

    def has(self, interface: type) -> bool:
        """Check if an interface is registered."""
        return interface in self._factories or interface in self._instances

    def clear(self) -> None:
        """Clear all registrations and instances."""
        self._factories.clear()
        self._instances.clear()


def _build_database(container: Container) -> DatabasePort:
    settings = container.resolve(Config).database
    if settings.backend == "memory":
        return InMemoryDatabase(table_name=settings.table_name)
    if settings.backend == "file":
        return FileDatabase(settings.data_dir, table_name=settings.table_name)
    raise ConfigurationError(f"Unknown database backend: {settings.backend}")


def _build_storage(container: Container) -> StoragePort:
    settings = container.resolve(Config).storage
    if settings.backend == "memory":
        return InMemoryStorage(
            bucket_name=settings.bucket_name,
            allow_empty_objects=settings.allow_empty_objects,
        )
    if settings.backend == "file":
        return FileStorage(
            settings.data_dir,
            bucket_name=settings.bucket_name,
            allow_empty_objects=settings.allow_empty_objects,
        )
    raise ConfigurationError(f"Unknown storage backend: {settings.backend}")


def _build_processor(container: Container) -> RequestProcessor:
    config = container.resolve(Config)
    return RequestProcessor(
        database=container.resolve(DatabasePort),
        storage=container.resolve(StoragePort),
        operation_field=config.processor.operation_field,
        metrics=container.resolve(MetricsRegistry),
    )


def build_container(
    config: Config | None = None,
    metrics: MetricsRegistry | None = None,
) -> Container:
    """
    Wire the ports, the metrics registry and the processor.

    Args:
        config: Configuration (process-wide config if None)
        metrics: Metrics registry (process-wide registry if None)

    Returns:
        A container from which RequestProcessor can be resolved
    """
    config = config or get_config()
    container = Container()
    container.register_singleton(Config, config)
    container.register_singleton(MetricsRegistry, metrics or get_metrics())
    container.register_factory(DatabasePort, _build_database)
    container.register_factory(StoragePort, _build_storage)
    container.register_factory(RequestProcessor, _build_processor)

    get_logger(__name__).info(
        "lambda_service_container_initialized",
        database_backend=config.database.backend,
        storage_backend=config.storage.backend,
        operation_field=config.processor.operation_field,
    )
    return container


# Global container instance
_container: Container | None = None


def get_container() -> Container:
    """Get the process-wide container, building it on first use."""
    global _container
    if _container is None:
        _container = build_container()
    return _container


def reset_container() -> None:
    """Reset the global container (useful for testing)."""
    global _container
    if _container is not None:
        _container.clear()
    _container = None
