"""Executor registry.

The registry maps executor names to factories. Built-in executors are
registered on first use; third-party executors are discovered from the
``lsx.executors`` entry point group, where each entry point resolves to a
zero-argument callable (usually the executor class).
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from lsx.exceptions import ExecutorNotFoundError
from lsx.executor.interface import StorageExecutorFunctions

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "lsx.executors"

ExecutorFactory = Callable[[], StorageExecutorFunctions]


class ExecutorRegistry:
    """Registry of executor factories keyed by name."""

    def __init__(self, entry_point_group: str | None = ENTRY_POINT_GROUP) -> None:
        """Initialize the registry.

        Args:
            entry_point_group: Entry point group to discover executors from,
                or None to disable discovery.
        """
        self._factories: dict[str, ExecutorFactory] = {}
        self._entry_point_group = entry_point_group

    def register(self, name: str, factory: ExecutorFactory) -> bool:
        """Register an executor factory.

        Args:
            name: Executor name.
            factory: Zero-argument callable returning an executor.

        Returns:
            True if registered, False if the name was already taken.
        """
        if name in self._factories:
            logger.warning(
                "Executor '%s' already registered. Skipping duplicate.", name
            )
            return False
        self._factories[name] = factory
        logger.debug("Registered executor: %s", name)
        return True

    def unregister(self, name: str) -> bool:
        """Unregister an executor by name.

        Returns:
            True if the executor was unregistered, False if not found.
        """
        if name in self._factories:
            del self._factories[name]
            return True
        return False

    def get(self, name: str) -> ExecutorFactory | None:
        """Get an executor factory by name, or None if not registered."""
        return self._factories.get(name)

    def create(self, name: str) -> StorageExecutorFunctions:
        """Create a new executor instance.

        Args:
            name: Executor name.

        Returns:
            A new executor.

        Raises:
            ExecutorNotFoundError: If no executor is registered under name.
        """
        factory = self._factories.get(name)
        if factory is None:
            raise ExecutorNotFoundError(name)
        return factory()

    def names(self) -> list[str]:
        """Sorted names of all registered executors."""
        return sorted(self._factories)

    def discover(self) -> int:
        """Register executors advertised through entry points.

        Entry points that fail to load are logged and skipped.

        Returns:
            Number of executors registered.
        """
        if self._entry_point_group is None:
            return 0

        from importlib.metadata import entry_points

        count = 0
        for ep in entry_points(group=self._entry_point_group):
            try:
                factory = ep.load()
            except Exception as e:
                logger.warning("Failed to load executor entry point '%s': %s", ep.name, e)
                continue
            if self.register(ep.name, factory):
                count += 1
        return count


# Thread-safe module-level default registry (lazy-loaded)
_default_registry: ExecutorRegistry | None = None
_registry_lock = threading.Lock()


def get_registry() -> ExecutorRegistry:
    """Get the default registry with built-in and discovered executors."""
    global _default_registry

    if _default_registry is not None:
        return _default_registry

    with _registry_lock:
        if _default_registry is not None:
            return _default_registry

        from lsx.executors.vfs import VFSExecutor

        registry = ExecutorRegistry()
        registry.register(VFSExecutor.name, VFSExecutor)
        registry.discover()
        _default_registry = registry

    return _default_registry


def reset_registry() -> None:
    """Drop the default registry so the next call rebuilds it."""
    global _default_registry
    with _registry_lock:
        _default_registry = None
