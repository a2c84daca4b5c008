"""Dependency container holding the process-wide services built at startup."""
from __future__ import annotations

from typing import Any, Callable, Dict


class Container:
    """Name-keyed registry of instances and lazily built singletons.

    The species reference, resolver and API client are registered here once by
    ``app.startup.initialize`` and shared read-only afterwards.
    """

    def __init__(self):
        self._instances: Dict[str, Any] = {}
        self._factories: Dict[str, Callable[[], Any]] = {}

    def register(self, name: str, instance: Any) -> None:
        """Register a ready-made instance."""
        self._instances[name] = instance

    def register_factory(self, name: str, factory: Callable[[], Any]) -> None:
        """Register a factory; it runs on first ``get`` and its result is cached."""
        self._factories[name] = factory

    def get(self, name: str) -> Any:
        if name in self._instances:
            return self._instances[name]
        factory = self._factories.get(name)
        if factory is None:
            raise KeyError(f"Service '{name}' not found in container")
        instance = factory()
        self._instances[name] = instance
        return instance

    def has(self, name: str) -> bool:
        return name in self._instances or name in self._factories

    def clear(self) -> None:
        """Drop all registrations (used by tests)."""
        self._instances.clear()
        self._factories.clear()
