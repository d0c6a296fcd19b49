"""Service registry for dependency injection.

Services are registered by type and resolved in one of three lifetimes:

- **singleton**: the same instance for every lookup
- **factory**: a new instance for every lookup
- **scoped**: one instance per ``ServiceScope``, disposed when the scope closes
"""

from collections.abc import Callable
from functools import lru_cache
from typing import Any, TypeVar, cast

from loguru import logger

T = TypeVar("T")
ServiceFactory = Callable[[], T]
ServiceProvider = T | ServiceFactory[T]
ScopedFactory = Callable[["ServiceScope"], T]


class ServiceRegistry:
    """Registry for all shared services with support for singletons, factories and scoped services."""

    def __init__(self):
        """Initialize an empty service registry."""
        self._services: dict[str, ServiceProvider[Any]] = {}
        self._scoped: dict[str, ScopedFactory[Any]] = {}

    def register_singleton(self, service_type: type[T], instance: T) -> None:
        """Register a singleton instance by its type.

        Args:
            service_type: The type of the service to register
            instance: The singleton instance to register
        """
        self._scoped.pop(service_type.__name__, None)
        self._services[service_type.__name__] = instance

    def register_factory(self, service_type: type[T], factory: ServiceFactory[T]) -> None:
        """Register a factory function by its type.

        Args:
            service_type: The type of the service to register
            factory: The factory function that creates instances of the service
        """
        self._scoped.pop(service_type.__name__, None)
        self._services[service_type.__name__] = factory

    def register_scoped(self, service_type: type[T], factory: ScopedFactory[T]) -> None:
        """Register a scoped factory by its type.

        The factory receives the resolving scope, so it can pull other services
        from the same scope. It is called at most once per scope.

        Args:
            service_type: The type of the service to register
            factory: Callable taking a ``ServiceScope`` and returning an instance
        """
        self._services.pop(service_type.__name__, None)
        self._scoped[service_type.__name__] = factory

    def is_registered(self, service_type: type) -> bool:
        """Check whether a service type has any registration."""
        name = service_type.__name__
        return name in self._services or name in self._scoped

    def is_scoped(self, service_type: type) -> bool:
        """Check whether a service type is registered with a scoped lifetime."""
        return service_type.__name__ in self._scoped

    def get(self, service_type: type[T]) -> T:
        """Get a service instance by type.

        Args:
            service_type: The type of the service to retrieve

        Returns:
            An instance of the requested service

        Raises:
            KeyError: If the requested service is not registered, or is scoped
        """
        service_name = service_type.__name__

        if service_name in self._scoped:
            raise KeyError(f"Service {service_name} is scoped and must be resolved from a ServiceScope")

        if service_name not in self._services:
            raise KeyError(f"Service {service_name} not registered")

        provider = self._services[service_name]

        # If provider is a factory function, call it to get an instance
        if callable(provider) and not isinstance(provider, type):
            return provider()

        # Otherwise, it's already an instance
        return cast(T, provider)

    def create_scope(self) -> "ServiceScope":
        """Open a new resolution scope over this registry."""
        return ServiceScope(self)

    def _get_scoped_factory(self, service_type: type[T]) -> ScopedFactory[T] | None:
        return self._scoped.get(service_type.__name__)


class ServiceScope:
    """An isolated lifetime boundary for scoped services.

    Scoped instances are created on first lookup and shared by every later
    lookup within the same scope. Singletons and factories are delegated to
    the owning registry. Use as a context manager so scoped instances are
    closed when the scope ends.

    Example:
        ```python
        with registry.create_scope() as scope:
            handler = scope.try_get(BusDeletedEventHandler)
        ```
    """

    def __init__(self, registry: ServiceRegistry):
        self._registry = registry
        self._instances: dict[str, Any] = {}

    def get(self, service_type: type[T]) -> T:
        """Resolve a service within this scope.

        Raises:
            KeyError: If the requested service is not registered
        """
        factory = self._registry._get_scoped_factory(service_type)
        if factory is None:
            return self._registry.get(service_type)

        service_name = service_type.__name__
        if service_name not in self._instances:
            self._instances[service_name] = factory(self)
        return cast(T, self._instances[service_name])

    def try_get(self, service_type: type[T]) -> T | None:
        """Resolve a service within this scope, or return None if it is not registered."""
        if not self._registry.is_registered(service_type):
            return None
        return self.get(service_type)

    def close(self) -> None:
        """Close scoped instances in reverse creation order."""
        instances = list(self._instances.items())
        self._instances.clear()
        for name, instance in reversed(instances):
            close = getattr(instance, "close", None)
            if not callable(close):
                continue
            try:
                close()
            except Exception as e:  # noqa: BLE001
                logger.warning(f"Failed to close scoped service {name}: {e}")

    def __enter__(self) -> "ServiceScope":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


@lru_cache
def get_service_registry() -> ServiceRegistry:
    """Get the singleton service registry instance.

    Returns:
        The global service registry instance
    """
    return ServiceRegistry()
