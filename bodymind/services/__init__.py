"""
Service Layer Package

Business logic on top of the snapshot store.

- CompletionService: completions, deletions, recompute, read projections
- TaskDispatcher / RecomputeTask: background score and streak recompute
- ServiceContainer: lazy wiring of the services around one store
"""

from bodymind.services.container import ServiceContainer, get_container, init_container
from bodymind.services.completion_service import CompletionService
from bodymind.services.tasks import RecomputeTask, TaskDispatcher

__all__ = [
    "ServiceContainer",
    "get_container",
    "init_container",
    "CompletionService",
    "RecomputeTask",
    "TaskDispatcher",
]
