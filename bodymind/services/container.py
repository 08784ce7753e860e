"""
Service Container - Dependency Injection Container

Wires the services around one snapshot store. Services are created lazily on
first access so callers only pay for what they use.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """
    Dependency injection container for the engine's services.

    The store is injected; services are lazy-loaded via properties and share it.
    """

    store: object  # InMemoryStore or any store with the same interface

    _weight_manager: Optional[object] = field(default=None, init=False, repr=False)
    _completion_service: Optional[object] = field(default=None, init=False, repr=False)
    _habit_stacks: Optional[object] = field(default=None, init=False, repr=False)

    @property
    def weight_manager(self):
        """Get WeightConfigManager instance (lazy-loaded)"""
        if self._weight_manager is None:
            from bodymind.scoring.weights import WeightConfigManager
            self._weight_manager = WeightConfigManager(self.store)
            logger.debug("WeightConfigManager instantiated")
        return self._weight_manager

    @property
    def completion_service(self):
        """Get CompletionService instance (lazy-loaded)"""
        if self._completion_service is None:
            from bodymind.services.completion_service import CompletionService
            self._completion_service = CompletionService(self.store, self.weight_manager)
            logger.debug("CompletionService instantiated")
        return self._completion_service

    @property
    def habit_stacks(self):
        """Get HabitStackManager instance (lazy-loaded)"""
        if self._habit_stacks is None:
            from bodymind.recommendations.habit_stacks import HabitStackManager
            self._habit_stacks = HabitStackManager(self.store)
            logger.debug("HabitStackManager instantiated")
        return self._habit_stacks

    @property
    def dispatcher(self):
        """Background recompute dispatcher owned by the completion service"""
        return self.completion_service.dispatcher


# Global container instance (initialized by the entry point)
_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """
    Get the global service container.

    Raises:
        RuntimeError: If container not initialized (call init_container first)
    """
    if _container is None:
        raise RuntimeError(
            "Service container not initialized. "
            "Call init_container() before using services."
        )
    return _container


def init_container(store: Optional[object] = None) -> ServiceContainer:
    """
    Initialize the global service container.

    Args:
        store: Snapshot store; a fresh InMemoryStore when omitted

    Returns:
        ServiceContainer: The initialized container
    """
    global _container

    if store is None:
        from bodymind.db.memory_store import InMemoryStore
        store = InMemoryStore()

    _container = ServiceContainer(store=store)
    logger.info("Service container initialized")
    return _container
